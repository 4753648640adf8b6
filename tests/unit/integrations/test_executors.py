"""Tests for PowerShell executors and script helpers."""

import base64
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from pubsync.core.errors import IntegrationError
from pubsync.core.types import TargetHost
from pubsync.integrations.executor.abc import CommandResult
from pubsync.integrations.executor.commands import (
    UTF8_PREAMBLE,
    as_list,
    check_result,
    encode_command,
    parse_json_output,
    powershell_argv,
    ps_array,
    ps_quote,
)
from pubsync.integrations.executor.fake import FakeExecutor
from pubsync.integrations.executor.local import LocalExecutor
from pubsync.integrations.executor.routing import RoutingExecutor
from pubsync.integrations.executor.ssh import SshExecutor


def _decode(encoded: str) -> str:
    return base64.b64decode(encoded).decode("utf-16-le")


def test_ps_quote_doubles_single_quotes() -> None:
    assert ps_quote("O'Brien") == "'O''Brien'"
    assert ps_array(["a", "b'c"]) == "@('a', 'b''c')"


def test_powershell_argv_encodes_script_with_utf8_preamble() -> None:
    argv = powershell_argv("pwsh.exe", "Get-Date")

    assert argv[:6] == [
        "pwsh.exe",
        "-NonInteractive",
        "-NoProfile",
        "-ExecutionPolicy",
        "Bypass",
        "-EncodedCommand",
    ]
    assert _decode(argv[6]) == UTF8_PREAMBLE + "Get-Date"
    assert _decode(encode_command("é")) == "é"


def test_check_result_enriches_error() -> None:
    result = CommandResult(returncode=5, stdout="partial\n", stderr="denied\n")

    with pytest.raises(IntegrationError) as exc_info:
        check_result(result, TargetHost("app01"), "read config")

    message = str(exc_info.value)
    assert message.startswith("Failed to read config on app01")
    assert "Exit code: 5" in message
    assert "stdout: partial" in message
    assert "stderr: denied" in message


def test_parse_json_output() -> None:
    assert parse_json_output("  \n", "noop") is None
    assert parse_json_output('{"a": 1}', "noop") == {"a": 1}
    with pytest.raises(IntegrationError, match="Could not parse output of 'noop'"):
        parse_json_output("{broken", "noop")


def test_as_list() -> None:
    assert as_list(None) == []
    assert as_list("x") == ["x"]
    assert as_list(["x", "y"]) == ["x", "y"]


def test_local_executor_runs_powershell() -> None:
    completed = MagicMock(returncode=0, stdout="hello\n", stderr="")
    with patch("subprocess.run", return_value=completed) as mock_run:
        result = LocalExecutor("powershell.exe").run(
            TargetHost.local(), "Write-Output hello", timeout=10.0
        )

    assert result == CommandResult(returncode=0, stdout="hello\n", stderr="")
    args, kwargs = mock_run.call_args
    assert args[0][0] == "powershell.exe"
    assert kwargs["timeout"] == 10.0
    assert kwargs["check"] is False


def test_local_executor_missing_binary_raises() -> None:
    with patch("subprocess.run", side_effect=FileNotFoundError()):
        with pytest.raises(IntegrationError, match="PowerShell not found"):
            LocalExecutor("pwsh-missing").run(TargetHost.local(), "x", timeout=None)


def test_local_executor_timeout_raises() -> None:
    with patch("subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="pwsh", timeout=1)):
        with pytest.raises(IntegrationError, match="timed out"):
            LocalExecutor("powershell.exe").run(TargetHost.local(), "x", timeout=1)


def _ssh() -> SshExecutor:
    return SshExecutor(user="admin", port=2222, connect_timeout=15, powershell_exe="powershell.exe")


def test_ssh_executor_builds_batch_mode_command() -> None:
    completed = MagicMock(returncode=0, stdout="ok", stderr="")
    with patch("subprocess.run", return_value=completed) as mock_run:
        result = _ssh().run(TargetHost("app01"), "Get-Date", timeout=30.0)

    assert result.ok
    cmd = mock_run.call_args[0][0]
    assert cmd[:3] == ["ssh", "-p", "2222"]
    assert "BatchMode=yes" in cmd
    assert "ConnectTimeout=15" in cmd
    assert cmd[-2] == "admin@app01"
    assert cmd[-1].startswith("powershell.exe -NonInteractive")


def test_ssh_connection_failure_raises() -> None:
    completed = MagicMock(returncode=255, stdout="", stderr="Connection refused\n")
    with patch("subprocess.run", return_value=completed):
        with pytest.raises(IntegrationError, match="Could not reach app01 over ssh"):
            _ssh().run(TargetHost("app01"), "Get-Date", timeout=None)


def test_ssh_destination_without_user() -> None:
    executor = SshExecutor(user=None, port=22, connect_timeout=5, powershell_exe="pwsh")

    assert executor.destination(TargetHost("app01")) == "app01"


def test_routing_executor_dispatches_by_host() -> None:
    local = FakeExecutor()
    remote = FakeExecutor()
    router = RoutingExecutor(local=local, remote=remote)

    router.run(TargetHost("localhost"), "a", timeout=None)
    router.run(TargetHost("."), "b", timeout=None)
    router.run(TargetHost("app01"), "c", timeout=None)

    assert local.scripts == ["a", "b"]
    assert remote.scripts == ["c"]
