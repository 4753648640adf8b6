"""No-op wrapper for catalog operations."""

from pubsync.core.types import CatalogEntry, IconSource, TargetHost
from pubsync.core.user_feedback import UserFeedback
from pubsync.integrations.catalog.abc import CatalogClient


def _key(canonical_name: str, group: str) -> tuple[str, str]:
    return (group.casefold(), canonical_name.casefold())


class DryRunCatalogClient(CatalogClient):
    """No-op wrapper for catalog operations.

    Read operations are delegated to the wrapped implementation.
    Write operations are reported through feedback and not executed, but are
    remembered so later reads in the same run see the planned catalog state.
    """

    def __init__(self, wrapped: CatalogClient, feedback: UserFeedback) -> None:
        """Initialize dry-run wrapper with a real implementation.

        Args:
            wrapped: The real catalog implementation to wrap
            feedback: Where the skipped writes are reported
        """
        self._wrapped = wrapped
        self._feedback = feedback
        self._planned: dict[tuple[str, str], CatalogEntry | None] = {}

    def find(self, canonical_name: str, group: str) -> CatalogEntry | None:
        """Return the planned entry if a skipped write touched it, else delegate."""
        key = _key(canonical_name, group)
        if key in self._planned:
            return self._planned[key]
        return self._wrapped.find(canonical_name, group)

    def import_icon(self, host: TargetHost, icon: IconSource) -> str:
        """Skip icon registration; the returned handle is never sent to the catalog."""
        self._feedback.info(f"[dry-run] Would import icon {icon.path},{icon.index} from {host.name}")
        return "dry-run"

    def create(self, entry: CatalogEntry) -> CatalogEntry:
        """No-op for publishing in dry-run mode."""
        self._feedback.info(f"[dry-run] Would publish '{entry.canonical_name}' to {entry.group}")
        self._planned[_key(entry.canonical_name, entry.group)] = entry
        return entry

    def delete(self, entry: CatalogEntry) -> None:
        """No-op for removal in dry-run mode."""
        self._feedback.info(f"[dry-run] Would remove '{entry.canonical_name}' from {entry.group}")
        self._planned[_key(entry.canonical_name, entry.group)] = None

    def list_group_members(self, group: str) -> list[TargetHost]:
        """Delegate read operation to wrapped implementation."""
        return self._wrapped.list_group_members(group)
