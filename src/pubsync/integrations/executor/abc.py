"""Abstract interface for running PowerShell on a target host."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from pubsync.core.types import TargetHost


@dataclass(frozen=True)
class CommandResult:
    """Captured result of one script execution."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class RemoteExecutor(ABC):
    """Runs a PowerShell script on a named host and returns its output.

    Implementations never raise for a non-zero exit code; callers decide what
    a failure means (see `pubsync.integrations.executor.commands.run_checked`).
    Transport failures (binary missing, timeout) raise IntegrationError.
    """

    @abstractmethod
    def run(self, host: TargetHost, script: str, *, timeout: float | None) -> CommandResult:
        """Execute `script` on `host`.

        Args:
            host: Host to execute on
            script: PowerShell script text
            timeout: Seconds before the call is abandoned, or None to wait forever

        Returns:
            CommandResult with exit code and decoded output
        """
        ...
