"""Executor that runs PowerShell on the current machine."""

import subprocess

from pubsync.core.errors import IntegrationError
from pubsync.core.types import TargetHost
from pubsync.integrations.executor.abc import CommandResult, RemoteExecutor
from pubsync.integrations.executor.commands import powershell_argv


class LocalExecutor(RemoteExecutor):
    """Production implementation spawning powershell.exe locally."""

    def __init__(self, powershell_exe: str) -> None:
        self._powershell_exe = powershell_exe

    def run(self, host: TargetHost, script: str, *, timeout: float | None) -> CommandResult:
        cmd = powershell_argv(self._powershell_exe, script)
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
            raise IntegrationError(f"PowerShell not found: {self._powershell_exe}") from e
        except subprocess.TimeoutExpired as e:
            raise IntegrationError(
                f"PowerShell call on {host.name} timed out after {timeout} seconds"
            ) from e
        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
