"""Shared plumbing for catalog clients driven by Citrix PowerShell snap-ins."""

from typing import Any

from pubsync.core.types import TargetHost
from pubsync.integrations.executor.abc import RemoteExecutor
from pubsync.integrations.executor.commands import as_list, parse_json_output, run_checked


class ScriptedCatalogBase:
    """Runs snap-in scripts on the catalog's management host.

    Subclasses supply SNAPINS; every script is prefixed with the snap-in
    loads and `$ErrorActionPreference = 'Stop'` so cmdlet errors surface as
    a non-zero exit code.
    """

    SNAPINS: tuple[str, ...] = ()

    def __init__(
        self, executor: RemoteExecutor, *, management_host: TargetHost, timeout: float | None
    ) -> None:
        self._executor = executor
        self._management_host = management_host
        self._timeout = timeout

    @property
    def management_host(self) -> TargetHost:
        return self._management_host

    def _preamble(self) -> str:
        lines = [f"Add-PSSnapin {snapin} -ErrorAction SilentlyContinue" for snapin in self.SNAPINS]
        lines.append("$ErrorActionPreference = 'Stop'")
        return "\n".join(lines) + "\n"

    def _run_json(self, body: str, operation_context: str) -> Any:
        result = run_checked(
            self._executor,
            self._management_host,
            self._preamble() + body,
            operation_context,
            timeout=self._timeout,
        )
        return parse_json_output(result.stdout, operation_context)

    def _run_list(self, body: str, operation_context: str) -> list[Any]:
        return as_list(self._run_json(body, operation_context))
