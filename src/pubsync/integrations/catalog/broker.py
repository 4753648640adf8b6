"""Catalog client for Citrix Virtual Apps 7.x (Broker SDK)."""

from pubsync.core.errors import IntegrationError
from pubsync.core.types import CatalogEntry, IconSource, TargetHost
from pubsync.integrations.catalog.abc import CatalogClient
from pubsync.integrations.catalog.scripted import ScriptedCatalogBase
from pubsync.integrations.executor.commands import ps_quote


def _uid_from(data: object, operation_context: str) -> str:
    if not isinstance(data, dict) or data.get("Uid") is None:
        raise IntegrationError(f"No Uid returned by '{operation_context}'")
    return str(data["Uid"])


class BrokerCatalogClient(ScriptedCatalogBase, CatalogClient):
    """Production implementation using the Citrix.Broker.Admin.V2 snap-in.

    Applications are published into delivery groups. Icons are read by the
    broker straight from the host the application was installed on.
    """

    SNAPINS = ("Citrix.Broker.Admin.V2",)

    def find(self, canonical_name: str, group: str) -> CatalogEntry | None:
        body = f"""
$group = Get-BrokerDesktopGroup -Name {ps_quote(group)}
$app = Get-BrokerApplication -Name {ps_quote(canonical_name)} -ErrorAction SilentlyContinue |
    Where-Object {{ $_.AssociatedDesktopGroupUids -contains $group.Uid }} |
    Select-Object -First 1
if ($null -ne $app) {{
    [pscustomobject]@{{
        Uid = $app.Uid
        Name = $app.Name
        CommandLineExecutable = $app.CommandLineExecutable
        CommandLineArguments = $app.CommandLineArguments
        WorkingDirectory = $app.WorkingDirectory
        IconUid = $app.IconUid
    }} | ConvertTo-Json -Compress
}}
"""
        data = self._run_json(body, f"look up application '{canonical_name}'")
        if not isinstance(data, dict):
            return None
        icon_uid = data.get("IconUid")
        return CatalogEntry(
            canonical_name=str(data.get("Name") or canonical_name),
            command_line=str(data.get("CommandLineExecutable") or ""),
            command_arguments=str(data.get("CommandLineArguments") or ""),
            group=group,
            icon_handle=str(icon_uid) if icon_uid is not None else None,
            working_directory=str(data.get("WorkingDirectory") or ""),
            uid=str(data["Uid"]) if data.get("Uid") is not None else None,
        )

    def import_icon(self, host: TargetHost, icon: IconSource) -> str:
        server = "" if host.is_local else f" -ServerName {ps_quote(host.name)}"
        body = f"""
$icon = Get-BrokerIcon{server} -FileName {ps_quote(icon.path)} -Index {int(icon.index)}
$registered = New-BrokerIcon -EncodedIconData $icon.EncodedIconData
[pscustomobject]@{{ Uid = $registered.Uid }} | ConvertTo-Json -Compress
"""
        operation = f"import icon {icon.path},{icon.index} from {host.name}"
        return _uid_from(self._run_json(body, operation), operation)

    def create(self, entry: CatalogEntry) -> CatalogEntry:
        params = [
            "-ApplicationType HostedOnDesktop",
            f"-Name {ps_quote(entry.canonical_name)}",
            f"-CommandLineExecutable {ps_quote(entry.command_line)}",
            "-DesktopGroup $group",
        ]
        if entry.command_arguments:
            params.append(f"-CommandLineArguments {ps_quote(entry.command_arguments)}")
        if entry.working_directory:
            params.append(f"-WorkingDirectory {ps_quote(entry.working_directory)}")
        if entry.icon_handle is not None:
            params.append(f"-IconUid {int(entry.icon_handle)}")
        body = f"""
$group = Get-BrokerDesktopGroup -Name {ps_quote(entry.group)}
$app = New-BrokerApplication {' '.join(params)}
[pscustomobject]@{{ Uid = $app.Uid }} | ConvertTo-Json -Compress
"""
        operation = f"publish application '{entry.canonical_name}'"
        uid = _uid_from(self._run_json(body, operation), operation)
        return CatalogEntry(
            canonical_name=entry.canonical_name,
            command_line=entry.command_line,
            command_arguments=entry.command_arguments,
            group=entry.group,
            icon_handle=entry.icon_handle,
            working_directory=entry.working_directory,
            uid=uid,
        )

    def delete(self, entry: CatalogEntry) -> None:
        if entry.uid is not None:
            body = f"Get-BrokerApplication -Uid {int(entry.uid)} | Remove-BrokerApplication\n"
        else:
            body = f"Remove-BrokerApplication -Name {ps_quote(entry.canonical_name)}\n"
        self._run_json(body, f"remove application '{entry.canonical_name}'")

    def list_group_members(self, group: str) -> list[TargetHost]:
        body = f"""
$machines = @(Get-BrokerMachine -DesktopGroupName {ps_quote(group)} | ForEach-Object {{
    if ($_.DNSName) {{ $_.DNSName }} else {{ $_.MachineName.Split('\\')[-1] }}
}})
ConvertTo-Json -InputObject $machines -Compress
"""
        names = self._run_list(body, f"list machines of delivery group '{group}'")
        return [TargetHost(name=str(name)) for name in names if name]
