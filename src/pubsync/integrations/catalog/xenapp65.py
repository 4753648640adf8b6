"""Catalog client for Citrix XenApp 6.5 (XenApp Commands SDK).

XenApp 6.5 has no delivery groups; the group is a worker group, and
applications are published to it by name (BrowserName is the entry id).
"""

from pubsync.core.errors import IntegrationError
from pubsync.core.types import CatalogEntry, IconSource, TargetHost
from pubsync.integrations.catalog.abc import CatalogClient
from pubsync.integrations.catalog.scripted import ScriptedCatalogBase
from pubsync.integrations.executor.abc import RemoteExecutor
from pubsync.integrations.executor.commands import ps_array, ps_quote


def unc_path(host: TargetHost, path: str) -> str:
    """Translate a local path on `host` into an administrative-share UNC path.

    `C:\\Apps\\tool.exe` on `app01` becomes `\\\\app01\\C$\\Apps\\tool.exe`.
    Local hosts and paths that are already UNC are returned unchanged.
    """
    if host.is_local or path.startswith("\\\\"):
        return path
    drive, sep, rest = path.partition(":")
    if not sep or len(drive) != 1:
        return path
    return f"\\\\{host.name}\\{drive.upper()}$" + rest


class XenApp65CatalogClient(ScriptedCatalogBase, CatalogClient):
    """Production implementation using the Citrix.XenApp.Commands snap-in."""

    SNAPINS = ("Citrix.XenApp.Commands", "Citrix.Common.Commands")

    def __init__(
        self,
        executor: RemoteExecutor,
        *,
        management_host: TargetHost,
        timeout: float | None,
        accounts: list[str],
    ) -> None:
        super().__init__(executor, management_host=management_host, timeout=timeout)
        self._accounts = accounts

    def find(self, canonical_name: str, group: str) -> CatalogEntry | None:
        body = f"""
$app = Get-XAApplication -WorkerGroupName {ps_quote(group)} -ErrorAction SilentlyContinue |
    Where-Object {{ $_.BrowserName -eq {ps_quote(canonical_name)} }} |
    Select-Object -First 1
if ($null -ne $app) {{
    [pscustomobject]@{{
        BrowserName = $app.BrowserName
        CommandLineExecutable = $app.CommandLineExecutable
        WorkingDirectory = $app.WorkingDirectory
    }} | ConvertTo-Json -Compress
}}
"""
        data = self._run_json(body, f"look up application '{canonical_name}'")
        if not isinstance(data, dict):
            return None
        browser_name = str(data.get("BrowserName") or canonical_name)
        return CatalogEntry(
            canonical_name=browser_name,
            command_line=str(data.get("CommandLineExecutable") or ""),
            command_arguments="",
            group=group,
            working_directory=str(data.get("WorkingDirectory") or ""),
            uid=browser_name,
        )

    def import_icon(self, host: TargetHost, icon: IconSource) -> str:
        path = unc_path(host, icon.path)
        body = f"""
$icon = Get-CtxIcon -FileName {ps_quote(path)} -Index {int(icon.index)}
[pscustomobject]@{{ EncodedIconData = $icon.EncodedIconData }} | ConvertTo-Json -Compress
"""
        operation = f"read icon {icon.path},{icon.index} from {host.name}"
        data = self._run_json(body, operation)
        if not isinstance(data, dict) or not data.get("EncodedIconData"):
            raise IntegrationError(f"No icon data returned by '{operation}'")
        return str(data["EncodedIconData"])

    def create(self, entry: CatalogEntry) -> CatalogEntry:
        command_line = f'"{entry.command_line}"'
        if entry.command_arguments:
            command_line += f" {entry.command_arguments}"
        params = [
            f"-BrowserName {ps_quote(entry.canonical_name)}",
            f"-DisplayName {ps_quote(entry.canonical_name)}",
            "-ApplicationType ServerInstalled",
            f"-CommandLineExecutable {ps_quote(command_line)}",
            f"-WorkerGroupNames {ps_quote(entry.group)}",
        ]
        if self._accounts:
            params.append(f"-Accounts {ps_array(self._accounts)}")
        if entry.working_directory:
            params.append(f"-WorkingDirectory {ps_quote(entry.working_directory)}")
        if entry.icon_handle is not None:
            params.append(f"-EncodedIconData {ps_quote(entry.icon_handle)}")
        body = f"""
$app = New-XAApplication {' '.join(params)}
[pscustomobject]@{{ BrowserName = $app.BrowserName }} | ConvertTo-Json -Compress
"""
        operation = f"publish application '{entry.canonical_name}'"
        data = self._run_json(body, operation)
        if not isinstance(data, dict) or not data.get("BrowserName"):
            raise IntegrationError(f"No BrowserName returned by '{operation}'")
        return CatalogEntry(
            canonical_name=entry.canonical_name,
            command_line=command_line,
            command_arguments="",
            group=entry.group,
            icon_handle=entry.icon_handle,
            working_directory=entry.working_directory,
            uid=str(data["BrowserName"]),
        )

    def delete(self, entry: CatalogEntry) -> None:
        browser_name = entry.uid or entry.canonical_name
        body = f"Remove-XAApplication -BrowserName {ps_quote(browser_name)}\n"
        self._run_json(body, f"remove application '{entry.canonical_name}'")

    def list_group_members(self, group: str) -> list[TargetHost]:
        body = f"""
$group = Get-XAWorkerGroup -WorkerGroupName {ps_quote(group)}
ConvertTo-Json -InputObject @($group.ServerNames) -Compress
"""
        names = self._run_list(body, f"list servers of worker group '{group}'")
        return [TargetHost(name=str(name)) for name in names if name]
