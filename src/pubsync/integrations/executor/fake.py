"""Fake RemoteExecutor for testing script-driven integrations."""

from pubsync.core.types import TargetHost
from pubsync.integrations.executor.abc import CommandResult, RemoteExecutor


class FakeExecutor(RemoteExecutor):
    """In-memory fake returning pre-configured results in call order.

    This class has NO public setup methods. All state is provided via
    constructor or captured during execution.

    Examples:
        >>> executor = FakeExecutor(results=[CommandResult(0, '{"Uid": 7}', "")])
        >>> executor.run(TargetHost("ddc01"), "Get-BrokerApplication", timeout=30).stdout
        '{"Uid": 7}'
    """

    def __init__(
        self,
        *,
        results: list[CommandResult] | None = None,
        default: CommandResult | None = None,
    ) -> None:
        """Create FakeExecutor.

        Args:
            results: Results returned by successive run() calls
            default: Result returned once `results` is exhausted
                (defaults to exit code 0 with empty output)
        """
        self._results = list(results or [])
        self._default = default or CommandResult(returncode=0, stdout="", stderr="")
        self._calls: list[tuple[TargetHost, str, float | None]] = []

    def run(self, host: TargetHost, script: str, *, timeout: float | None) -> CommandResult:
        self._calls.append((host, script, timeout))
        if self._results:
            return self._results.pop(0)
        return self._default

    @property
    def calls(self) -> list[tuple[TargetHost, str, float | None]]:
        """Get the list of run() calls as (host, script, timeout) tuples.

        This property is for test assertions only.
        """
        return self._calls.copy()

    @property
    def scripts(self) -> list[str]:
        """Scripts passed to run(), in call order."""
        return [script for _, script, _ in self._calls]
