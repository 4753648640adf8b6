"""In-memory fake implementation of ShortcutInspector for testing."""

from pubsync.core.errors import ShortcutNotFoundError
from pubsync.core.types import AppShortcutInfo, IconSource, TargetHost
from pubsync.integrations.shortcuts.abc import ShortcutInspector


class FakeShortcutInspector(ShortcutInspector):
    """In-memory fake implementation for testing.

    All state is provided via constructor using keyword arguments.
    This class has NO public setup methods.
    """

    def __init__(
        self,
        *,
        shortcuts: dict[str, AppShortcutInfo] | None = None,
        synthesize_missing: bool = True,
    ) -> None:
        """Create FakeShortcutInspector.

        Args:
            shortcuts: Mapping of "host/app" or "app" -> shortcut info;
                host-specific keys win
            synthesize_missing: If True, unknown apps resolve to a shortcut named
                after the app; if False, they raise ShortcutNotFoundError
        """
        self._shortcuts = shortcuts or {}
        self._synthesize_missing = synthesize_missing
        self._resolve_calls: list[tuple[str, str]] = []

    def resolve(self, host: TargetHost, app_name: str) -> AppShortcutInfo:
        self._resolve_calls.append((host.name, app_name))
        info = self._shortcuts.get(f"{host.name}/{app_name}")
        if info is None:
            info = self._shortcuts.get(app_name)
        if info is not None:
            return info
        if not self._synthesize_missing:
            raise ShortcutNotFoundError(host.name, app_name)
        target = f"C:\\Program Files\\Apps\\{app_name}.exe"
        return AppShortcutInfo(
            name=app_name,
            target_path=target,
            arguments="",
            icon_source=IconSource(path=target, index=0),
        )

    @property
    def resolve_calls(self) -> list[tuple[str, str]]:
        """(host, app_name) for every resolve() call. For test assertions only."""
        return self._resolve_calls.copy()
