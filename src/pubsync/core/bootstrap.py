"""Ensure the package client runtime is installed on a host."""

import logging

from pubsync.core.errors import DownloadFailedError, InstallFailedError, IntegrationError
from pubsync.core.types import RuntimeHandle, TargetHost
from pubsync.integrations.host.abc import HostOps

logger = logging.getLogger(__name__)

INSTALLER_FILE_NAME = "pubsync-client-installer.exe"


class Bootstrapper:
    """Locates the package client on a host, installing it when absent.

    Install paths are probed in order and the first existing one wins. When
    none exists the installer is downloaded to a temporary path on the host,
    run non-interactively, and removed again whatever the outcome.
    """

    def __init__(
        self,
        host_ops: HostOps,
        *,
        install_paths: list[str],
        installer_url: str,
        installer_arguments: list[str],
        install_timeout: float | None,
    ) -> None:
        self._host_ops = host_ops
        self._install_paths = install_paths
        self._installer_url = installer_url
        self._installer_arguments = installer_arguments
        self._install_timeout = install_timeout

    def locate(self, host: TargetHost) -> str | None:
        """Return the first configured install path present on the host."""
        for path in self._install_paths:
            if self._host_ops.path_exists(host, path):
                return path
        return None

    def ensure_runtime(self, host: TargetHost) -> RuntimeHandle:
        """Return a handle to the package client, installing it first if needed.

        Raises:
            DownloadFailedError: If the installer cannot be fetched or is empty
            InstallFailedError: If the installer fails or the client is still missing
        """
        executable = self.locate(host)
        if executable is not None:
            logger.debug("Package client already present on %s at %s", host.name, executable)
            return RuntimeHandle(host=host, executable=executable)

        if not self._installer_url:
            raise DownloadFailedError("<unset>", "installer_url is not configured")

        installer = self._host_ops.temp_path(host, INSTALLER_FILE_NAME)
        try:
            self._download(host, installer)
            self._install(host, installer)
        finally:
            self._remove_installer(host, installer)

        executable = self.locate(host)
        if executable is None:
            raise InstallFailedError(
                host.name, "installer exited cleanly but the client was not found afterwards"
            )
        logger.debug("Installed package client on %s at %s", host.name, executable)
        return RuntimeHandle(host=host, executable=executable)

    def _download(self, host: TargetHost, destination: str) -> None:
        logger.debug("Downloading %s to %s on %s", self._installer_url, destination, host.name)
        try:
            size = self._host_ops.download(host, self._installer_url, destination)
        except IntegrationError as e:
            raise DownloadFailedError(self._installer_url, str(e)) from e
        if size <= 0:
            raise DownloadFailedError(self._installer_url, "downloaded file is empty")

    def _remove_installer(self, host: TargetHost, installer: str) -> None:
        # Cleanup errors must not mask the download or install outcome
        try:
            self._host_ops.remove_file(host, installer)
        except IntegrationError as e:
            logger.warning("Could not remove installer %s on %s: %s", installer, host.name, e)

    def _install(self, host: TargetHost, installer: str) -> None:
        try:
            exit_code = self._host_ops.run_installer(
                host, installer, self._installer_arguments, timeout=self._install_timeout
            )
        except IntegrationError as e:
            raise InstallFailedError(host.name, str(e)) from e
        if exit_code != 0:
            raise InstallFailedError(host.name, f"installer exited with code {exit_code}")
