"""Production HostOps implemented as PowerShell run through the executor."""

from pubsync.core.errors import IntegrationError
from pubsync.core.types import TargetHost
from pubsync.integrations.executor.abc import RemoteExecutor
from pubsync.integrations.executor.commands import ps_array, ps_quote, run_checked
from pubsync.integrations.host.abc import HostOps


def _last_line(stdout: str) -> str:
    lines = [line.strip() for line in stdout.splitlines() if line.strip()]
    return lines[-1] if lines else ""


class RealHostOps(HostOps):
    """Runs every operation on the target host itself, so downloads land there."""

    def __init__(self, executor: RemoteExecutor, *, timeout: float | None) -> None:
        self._executor = executor
        self._timeout = timeout

    def path_exists(self, host: TargetHost, path: str) -> bool:
        script = f"Test-Path -LiteralPath {ps_quote(path)} -PathType Leaf\n"
        result = run_checked(
            self._executor, host, script, f"check for {path}", timeout=self._timeout
        )
        return _last_line(result.stdout).lower() == "true"

    def temp_path(self, host: TargetHost, file_name: str) -> str:
        script = (
            "$name = [guid]::NewGuid().ToString('N') + '-' + "
            f"{ps_quote(file_name)}\n"
            "Join-Path ([System.IO.Path]::GetTempPath()) $name\n"
        )
        result = run_checked(
            self._executor, host, script, "allocate a temporary path", timeout=self._timeout
        )
        path = _last_line(result.stdout)
        if not path:
            raise IntegrationError(f"No temporary path returned by {host.name}")
        return path

    def download(self, host: TargetHost, url: str, destination: str) -> int:
        script = (
            "$ProgressPreference = 'SilentlyContinue'\n"
            "[Net.ServicePointManager]::SecurityProtocol = "
            "[Net.ServicePointManager]::SecurityProtocol -bor [Net.SecurityProtocolType]::Tls12\n"
            f"Invoke-WebRequest -UseBasicParsing -Uri {ps_quote(url)} "
            f"-OutFile {ps_quote(destination)} -ErrorAction Stop\n"
            f"(Get-Item -LiteralPath {ps_quote(destination)}).Length\n"
        )
        result = run_checked(
            self._executor, host, script, f"download {url}", timeout=self._timeout
        )
        size_text = _last_line(result.stdout)
        try:
            return int(size_text)
        except ValueError:
            raise IntegrationError(
                f"Unexpected download size '{size_text}' reported by {host.name}"
            ) from None

    def run_installer(
        self, host: TargetHost, path: str, arguments: list[str], *, timeout: float | None
    ) -> int:
        argument_list = f" -ArgumentList {ps_array(arguments)}" if arguments else ""
        script = (
            f"$process = Start-Process -FilePath {ps_quote(path)}{argument_list} "
            "-Wait -PassThru -WindowStyle Hidden\n"
            "$process.ExitCode\n"
        )
        result = run_checked(self._executor, host, script, f"run installer {path}", timeout=timeout)
        code_text = _last_line(result.stdout)
        try:
            return int(code_text)
        except ValueError:
            raise IntegrationError(
                f"Unexpected installer exit code '{code_text}' reported by {host.name}"
            ) from None

    def remove_file(self, host: TargetHost, path: str) -> None:
        script = f"Remove-Item -LiteralPath {ps_quote(path)} -Force -ErrorAction SilentlyContinue\n"
        run_checked(self._executor, host, script, f"remove {path}", timeout=self._timeout)
