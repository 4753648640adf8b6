"""Shortcut inspector reading all-users .lnk files through WScript.Shell."""

from pubsync.core.errors import IntegrationError, ShortcutNotFoundError
from pubsync.core.types import AppShortcutInfo, IconSource, TargetHost
from pubsync.integrations.executor.abc import RemoteExecutor
from pubsync.integrations.executor.commands import check_result, parse_json_output, ps_quote
from pubsync.integrations.shortcuts.abc import ShortcutInspector

# Exit code the script uses to signal "no shortcut", distinct from PowerShell errors.
_NOT_FOUND_EXIT_CODE = 3

_RESOLVE_TEMPLATE = """
$name = {name}
$roots = @(
    (Join-Path $env:ProgramData 'Microsoft\\Windows\\Start Menu\\Programs'),
    (Join-Path $env:PUBLIC 'Desktop')
)
$links = Get-ChildItem -Path $roots -Filter '*.lnk' -Recurse -ErrorAction SilentlyContinue
$link = $links | Where-Object {{ $_.BaseName -eq $name }} | Select-Object -First 1
if ($null -eq $link) {{
    $pattern = '*' + [WildcardPattern]::Escape($name) + '*'
    $link = $links | Where-Object {{ $_.BaseName -like $pattern }} | Select-Object -First 1
}}
if ($null -eq $link) {{ exit {not_found} }}
$shell = New-Object -ComObject WScript.Shell
$lnk = $shell.CreateShortcut($link.FullName)
[pscustomobject]@{{
    Name = $link.BaseName
    TargetPath = [Environment]::ExpandEnvironmentVariables($lnk.TargetPath)
    Arguments = $lnk.Arguments
    IconLocation = [Environment]::ExpandEnvironmentVariables($lnk.IconLocation)
    WorkingDirectory = [Environment]::ExpandEnvironmentVariables($lnk.WorkingDirectory)
}} | ConvertTo-Json -Compress
"""


def parse_icon_location(icon_location: str, target_path: str) -> IconSource:
    """Split a shortcut IconLocation ("path,index") into an IconSource.

    An empty icon path falls back to the target executable's first icon.
    """
    path, sep, index_text = icon_location.rpartition(",")
    if not sep:
        path, index_text = icon_location, "0"
    path = path.strip()
    if not path:
        return IconSource(path=target_path, index=0)
    try:
        index = int(index_text.strip())
    except ValueError:
        index = 0
    return IconSource(path=path, index=index)


class RealShortcutInspector(ShortcutInspector):
    """Production implementation searching the all-users Start Menu and Desktop.

    An exact base-name match wins over a substring match.
    """

    def __init__(self, executor: RemoteExecutor, *, timeout: float | None) -> None:
        self._executor = executor
        self._timeout = timeout

    def resolve(self, host: TargetHost, app_name: str) -> AppShortcutInfo:
        script = _RESOLVE_TEMPLATE.format(name=ps_quote(app_name), not_found=_NOT_FOUND_EXIT_CODE)
        result = self._executor.run(host, script, timeout=self._timeout)
        if result.returncode == _NOT_FOUND_EXIT_CODE:
            raise ShortcutNotFoundError(host.name, app_name)
        operation = f"read shortcut for '{app_name}'"
        check_result(result, host, operation)

        data = parse_json_output(result.stdout, operation)
        if not isinstance(data, dict):
            raise IntegrationError(f"Unexpected shortcut metadata for '{app_name}' on {host.name}")

        target_path = str(data.get("TargetPath") or "")
        return AppShortcutInfo(
            name=str(data.get("Name") or app_name),
            target_path=target_path,
            arguments=str(data.get("Arguments") or ""),
            icon_source=parse_icon_location(str(data.get("IconLocation") or ""), target_path),
            working_directory=str(data.get("WorkingDirectory") or ""),
        )
