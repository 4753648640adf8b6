"""Executor that runs PowerShell on a remote host over OpenSSH."""

import subprocess

from pubsync.core.errors import IntegrationError
from pubsync.core.types import TargetHost
from pubsync.integrations.executor.abc import CommandResult, RemoteExecutor
from pubsync.integrations.executor.commands import powershell_argv


class SshExecutor(RemoteExecutor):
    """Production implementation using the ssh client in batch mode.

    The remote command line is `powershell.exe ... -EncodedCommand <base64>`,
    which survives both cmd.exe and PowerShell as the remote default shell.
    Authentication is whatever the ssh client is configured for (keys or
    agent); password prompts are disabled.
    """

    def __init__(
        self,
        *,
        user: str | None,
        port: int,
        connect_timeout: int,
        powershell_exe: str,
    ) -> None:
        self._user = user
        self._port = port
        self._connect_timeout = connect_timeout
        self._powershell_exe = powershell_exe

    def cmd_base(self) -> list[str]:
        return [
            "ssh",
            "-p",
            str(self._port),
            "-o",
            "BatchMode=yes",
            "-o",
            "StrictHostKeyChecking=accept-new",
            "-o",
            f"ConnectTimeout={self._connect_timeout}",
        ]

    def destination(self, host: TargetHost) -> str:
        if self._user:
            return f"{self._user}@{host.name}"
        return host.name

    def run(self, host: TargetHost, script: str, *, timeout: float | None) -> CommandResult:
        remote_cmd = " ".join(powershell_argv(self._powershell_exe, script))
        cmd = self.cmd_base() + [self.destination(host), remote_cmd]
        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=timeout,
            )
        except FileNotFoundError as e:
            raise IntegrationError("ssh client not found on PATH") from e
        except subprocess.TimeoutExpired as e:
            raise IntegrationError(
                f"Remote call to {host.name} timed out after {timeout} seconds"
            ) from e

        # ssh reserves 255 for its own connection failures
        if completed.returncode == 255:
            raise IntegrationError(
                f"Could not reach {host.name} over ssh: {(completed.stderr or '').strip()}"
            )
        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
