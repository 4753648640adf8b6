"""Abstract base class for published-application catalog operations."""

from abc import ABC, abstractmethod

from pubsync.core.types import CatalogEntry, IconSource, TargetHost


class CatalogClient(ABC):
    """Abstract interface to the management system's published-application catalog.

    All implementations (real, fake and dry-run) must implement this interface.
    Lookups are scoped to a group: the same canonical name may exist in two
    groups, but never twice in one.
    """

    @abstractmethod
    def find(self, canonical_name: str, group: str) -> CatalogEntry | None:
        """Look up the entry published under `canonical_name` in `group`.

        Returns:
            The entry, or None if the group has no entry with that name
        """
        ...

    @abstractmethod
    def import_icon(self, host: TargetHost, icon: IconSource) -> str:
        """Register an icon read from a file on `host` and return its handle.

        Raises:
            IntegrationError: If the icon cannot be read or registered
        """
        ...

    @abstractmethod
    def create(self, entry: CatalogEntry) -> CatalogEntry:
        """Publish a new entry.

        Returns:
            The created entry with its catalog uid populated

        Raises:
            IntegrationError: If the catalog rejects the entry
        """
        ...

    @abstractmethod
    def delete(self, entry: CatalogEntry) -> None:
        """Remove a published entry.

        Raises:
            IntegrationError: If the catalog refuses the removal
        """
        ...

    @abstractmethod
    def list_group_members(self, group: str) -> list[TargetHost]:
        """List the hosts that belong to `group`, in catalog order.

        Raises:
            IntegrationError: If the group cannot be queried
        """
        ...
