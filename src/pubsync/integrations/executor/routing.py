"""Executor that dispatches to a local or remote executor per host."""

from pubsync.core.types import TargetHost
from pubsync.integrations.executor.abc import CommandResult, RemoteExecutor


class RoutingExecutor(RemoteExecutor):
    """Runs local hosts in-process and every other host through `remote`."""

    def __init__(self, *, local: RemoteExecutor, remote: RemoteExecutor) -> None:
        self._local = local
        self._remote = remote

    def run(self, host: TargetHost, script: str, *, timeout: float | None) -> CommandResult:
        if host.is_local:
            return self._local.run(host, script, timeout=timeout)
        return self._remote.run(host, script, timeout=timeout)
