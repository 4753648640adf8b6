"""Abstract interface for file and process operations on a target host."""

from abc import ABC, abstractmethod

from pubsync.core.types import TargetHost


class HostOps(ABC):
    """Operations the Bootstrapper needs on the machine it provisions."""

    @abstractmethod
    def path_exists(self, host: TargetHost, path: str) -> bool:
        """Check whether a file exists on the host."""
        ...

    @abstractmethod
    def temp_path(self, host: TargetHost, file_name: str) -> str:
        """Return a fresh path in the host's temporary directory."""
        ...

    @abstractmethod
    def download(self, host: TargetHost, url: str, destination: str) -> int:
        """Download `url` to `destination` on the host.

        Returns:
            Size of the downloaded file in bytes

        Raises:
            IntegrationError: If the transfer fails
        """
        ...

    @abstractmethod
    def run_installer(
        self, host: TargetHost, path: str, arguments: list[str], *, timeout: float | None
    ) -> int:
        """Run an installer on the host and wait for it to exit.

        Returns:
            The installer's exit code
        """
        ...

    @abstractmethod
    def remove_file(self, host: TargetHost, path: str) -> None:
        """Delete a file; a missing file is not an error."""
        ...
