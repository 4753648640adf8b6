"""Abstract interface for reading application shortcut metadata."""

from abc import ABC, abstractmethod

from pubsync.core.types import AppShortcutInfo, TargetHost


class ShortcutInspector(ABC):
    """Reads the launch metadata of the shortcut an install created on a host."""

    @abstractmethod
    def resolve(self, host: TargetHost, app_name: str) -> AppShortcutInfo:
        """Resolve an installed application's shortcut.

        Args:
            host: Host the application was installed on
            app_name: Application name as reported by the package client

        Returns:
            AppShortcutInfo describing how to launch the application

        Raises:
            ShortcutNotFoundError: If no shortcut exists for the application
            IntegrationError: If the metadata cannot be read
        """
        ...
