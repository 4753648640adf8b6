"""In-memory fake implementation of HostOps for testing."""

from pubsync.core.errors import IntegrationError
from pubsync.core.types import TargetHost
from pubsync.integrations.host.abc import HostOps


class FakeHostOps(HostOps):
    """In-memory fake simulating per-host files, downloads and installers.

    All state is provided via constructor using keyword arguments.
    This class has NO public setup methods.

    A successful installer run (exit code 0) creates `installed_path` on the
    host, unless it is None.
    """

    def __init__(
        self,
        *,
        files: dict[str, set[str]] | None = None,
        files_everywhere: list[str] | None = None,
        download_size: int = 1024,
        download_error: str | None = None,
        installer_exit_code: int = 0,
        installed_path: str | None = None,
        remove_error: str | None = None,
        broken_hosts: set[str] | None = None,
    ) -> None:
        """Create FakeHostOps.

        Args:
            files: Mapping of host name -> paths that exist on it
            files_everywhere: Paths that exist on every host and are never removed
            download_size: Size reported by download()
            download_error: If set, download() raises IntegrationError with it
            installer_exit_code: Exit code returned by run_installer()
            installed_path: Path created on the host by a successful install
            broken_hosts: Hosts on which every operation raises IntegrationError
            remove_error: If set, remove_file() raises IntegrationError with it
        """
        self._files = {host: set(paths) for host, paths in (files or {}).items()}
        self._files_everywhere = set(files_everywhere or [])
        self._download_size = download_size
        self._download_error = download_error
        self._installer_exit_code = installer_exit_code
        self._installed_path = installed_path
        self._broken_hosts = broken_hosts or set()
        self._remove_error = remove_error
        self._temp_counter = 0
        self._path_checks: list[tuple[str, str]] = []
        self._downloads: list[tuple[str, str, str]] = []
        self._installer_runs: list[tuple[str, str, list[str], float | None]] = []
        self._removed: list[tuple[str, str]] = []

    def _check_reachable(self, host: TargetHost) -> None:
        if host.name in self._broken_hosts:
            raise IntegrationError(f"Could not reach {host.name}")

    def path_exists(self, host: TargetHost, path: str) -> bool:
        self._check_reachable(host)
        self._path_checks.append((host.name, path))
        return path in self._files_everywhere or path in self._files.get(host.name, set())

    def temp_path(self, host: TargetHost, file_name: str) -> str:
        self._check_reachable(host)
        self._temp_counter += 1
        return f"C:\\Temp\\{self._temp_counter}-{file_name}"

    def download(self, host: TargetHost, url: str, destination: str) -> int:
        self._check_reachable(host)
        self._downloads.append((host.name, url, destination))
        if self._download_error is not None:
            raise IntegrationError(self._download_error)
        self._files.setdefault(host.name, set()).add(destination)
        return self._download_size

    def run_installer(
        self, host: TargetHost, path: str, arguments: list[str], *, timeout: float | None
    ) -> int:
        self._check_reachable(host)
        self._installer_runs.append((host.name, path, list(arguments), timeout))
        if self._installer_exit_code == 0 and self._installed_path is not None:
            self._files.setdefault(host.name, set()).add(self._installed_path)
        return self._installer_exit_code

    def remove_file(self, host: TargetHost, path: str) -> None:
        self._check_reachable(host)
        self._removed.append((host.name, path))
        if self._remove_error is not None:
            raise IntegrationError(self._remove_error)
        self._files.get(host.name, set()).discard(path)

    def files_on(self, host: str) -> set[str]:
        """Paths currently present on `host`. For test assertions only."""
        return set(self._files.get(host, set()))

    @property
    def path_checks(self) -> list[tuple[str, str]]:
        return self._path_checks.copy()

    @property
    def downloads(self) -> list[tuple[str, str, str]]:
        """(host, url, destination) for every download() call."""
        return self._downloads.copy()

    @property
    def installer_runs(self) -> list[tuple[str, str, list[str], float | None]]:
        """(host, path, arguments, timeout) for every run_installer() call."""
        return self._installer_runs.copy()

    @property
    def removed(self) -> list[tuple[str, str]]:
        """(host, path) for every remove_file() call."""
        return self._removed.copy()
