"""In-memory fake implementation of CatalogClient for testing."""

from pubsync.core.errors import IntegrationError
from pubsync.core.types import CatalogEntry, IconSource, TargetHost
from pubsync.integrations.catalog.abc import CatalogClient


class FakeCatalogClient(CatalogClient):
    """In-memory catalog keyed by (group, canonical name).

    All state is provided via constructor using keyword arguments.
    This class has NO public setup methods; created and deleted entries are
    captured during execution and exposed through read-only properties.
    """

    def __init__(
        self,
        *,
        entries: list[CatalogEntry] | None = None,
        group_members: dict[str, list[str]] | None = None,
        failing_creates: set[str] | None = None,
        failing_deletes: set[str] | None = None,
        failing_icons: set[str] | None = None,
        discovery_error: str | None = None,
    ) -> None:
        """Create FakeCatalogClient.

        Args:
            entries: Entries present before the test runs
            group_members: Mapping of group -> member host names
            failing_creates: Canonical names whose create() raises IntegrationError
            failing_deletes: Canonical names whose delete() raises IntegrationError
            failing_icons: Icon paths whose import_icon() raises IntegrationError
            discovery_error: If set, list_group_members() raises with this message
        """
        self._entries: dict[tuple[str, str], CatalogEntry] = {}
        for entry in entries or []:
            self._entries[(entry.group.casefold(), entry.canonical_name.casefold())] = entry
        self._group_members = group_members or {}
        self._failing_creates = failing_creates or set()
        self._failing_deletes = failing_deletes or set()
        self._failing_icons = failing_icons or set()
        self._discovery_error = discovery_error
        self._next_uid = 1
        self._find_calls: list[tuple[str, str]] = []
        self._created: list[CatalogEntry] = []
        self._deleted: list[CatalogEntry] = []
        self._imported_icons: list[tuple[str, IconSource]] = []

    def find(self, canonical_name: str, group: str) -> CatalogEntry | None:
        self._find_calls.append((canonical_name, group))
        return self._entries.get((group.casefold(), canonical_name.casefold()))

    def import_icon(self, host: TargetHost, icon: IconSource) -> str:
        if icon.path in self._failing_icons:
            raise IntegrationError(f"Cannot read icon {icon.path} on {host.name}")
        self._imported_icons.append((host.name, icon))
        return f"icon-{len(self._imported_icons)}"

    def create(self, entry: CatalogEntry) -> CatalogEntry:
        if entry.canonical_name in self._failing_creates:
            raise IntegrationError(f"Catalog rejected '{entry.canonical_name}'")
        key = (entry.group.casefold(), entry.canonical_name.casefold())
        if key in self._entries:
            raise IntegrationError(
                f"Application '{entry.canonical_name}' already exists in '{entry.group}'"
            )
        created = CatalogEntry(
            canonical_name=entry.canonical_name,
            command_line=entry.command_line,
            command_arguments=entry.command_arguments,
            group=entry.group,
            icon_handle=entry.icon_handle,
            working_directory=entry.working_directory,
            uid=str(self._next_uid),
        )
        self._next_uid += 1
        self._entries[key] = created
        self._created.append(created)
        return created

    def delete(self, entry: CatalogEntry) -> None:
        if entry.canonical_name in self._failing_deletes:
            raise IntegrationError(f"Catalog refused to remove '{entry.canonical_name}'")
        self._entries.pop((entry.group.casefold(), entry.canonical_name.casefold()), None)
        self._deleted.append(entry)

    def list_group_members(self, group: str) -> list[TargetHost]:
        if self._discovery_error is not None:
            raise IntegrationError(self._discovery_error)
        if group not in self._group_members:
            raise IntegrationError(f"Delivery group '{group}' not found")
        return [TargetHost(name=name) for name in self._group_members[group]]

    @property
    def entries(self) -> list[CatalogEntry]:
        """Current catalog contents. For test assertions only."""
        return list(self._entries.values())

    def names_in(self, group: str) -> list[str]:
        """Canonical names currently published in `group`."""
        return [e.canonical_name for e in self._entries.values() if e.group == group]

    @property
    def find_calls(self) -> list[tuple[str, str]]:
        """(canonical_name, group) for every find() call."""
        return self._find_calls.copy()

    @property
    def created(self) -> list[CatalogEntry]:
        """Entries created through create(), in call order."""
        return self._created.copy()

    @property
    def deleted(self) -> list[CatalogEntry]:
        """Entries removed through delete(), in call order."""
        return self._deleted.copy()

    @property
    def imported_icons(self) -> list[tuple[str, IconSource]]:
        """(host, icon) for every successful import_icon() call."""
        return self._imported_icons.copy()

    @property
    def mutation_count(self) -> int:
        return len(self._created) + len(self._deleted)
