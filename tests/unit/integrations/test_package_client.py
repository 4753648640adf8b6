"""Tests for package client output parsing and command construction."""

import json

import pytest

from pubsync.core.errors import IntegrationError
from pubsync.core.types import EventKind, RuntimeHandle, TargetHost
from pubsync.integrations.executor.abc import CommandResult
from pubsync.integrations.executor.fake import FakeExecutor
from pubsync.integrations.package_client.parsing import (
    parse_client_result,
    parse_current_user,
    parse_subscription_output,
)
from pubsync.integrations.package_client.real import RealPackageClient

RUNTIME = RuntimeHandle(host=TargetHost("app01"), executable="C:\\Turbo\\turbo.exe")


def _doc(exit_code: int = 0, events: list[dict] | None = None, error: str | None = None) -> str:
    data: dict = {"result": {"exitCode": exit_code, "events": events or []}}
    if error is not None:
        data["error"] = {"message": error}
    return json.dumps(data)


def test_parse_subscription_events_in_order() -> None:
    stdout = _doc(
        events=[
            {"event": "install", "name": "Word"},
            {"event": "uninstall", "name": "Old Tool"},
            {"event": "error", "name": "Visio", "message": "checksum mismatch"},
            {"event": "progress", "name": "ignored"},
        ]
    )

    result = parse_subscription_output(0, stdout, "")

    assert result.success
    assert [(e.name, e.kind) for e in result.events] == [
        ("Word", EventKind.INSTALL),
        ("Old Tool", EventKind.UNINSTALL),
        ("Visio", EventKind.ERROR),
    ]
    assert result.errors == ["checksum mismatch"]


def test_nonzero_result_exit_code_is_failure() -> None:
    result = parse_subscription_output(0, _doc(exit_code=2, error="subscription not found"), "")

    assert not result.success
    assert result.errors == ["subscription not found"]


def test_nonzero_process_exit_without_json_is_failure_with_stderr() -> None:
    result = parse_subscription_output(1, "", "network unreachable\n")

    assert not result.success
    assert result.errors == ["network unreachable"]


def test_unparseable_output_on_success_raises() -> None:
    with pytest.raises(IntegrationError, match="unparseable"):
        parse_subscription_output(0, "Subscribed!", "")


def test_parse_client_result() -> None:
    assert parse_client_result(0, _doc(), "").success
    failed = parse_client_result(1, _doc(exit_code=1, error="invalid password"), "")
    assert not failed.success
    assert failed.message == "invalid password"
    assert parse_client_result(0, "", "").success


def test_parse_current_user() -> None:
    assert parse_current_user(json.dumps({"result": {"user": {"login": "svc"}}})) == "svc"
    assert parse_current_user(json.dumps({"result": {"user": None}})) is None
    assert parse_current_user("not json") is None


def test_subscribe_invokes_client_for_all_users() -> None:
    executor = FakeExecutor(
        results=[CommandResult(0, _doc(events=[{"event": "install", "name": "Word"}]), "")]
    )
    client = RealPackageClient(executor, timeout=60.0)

    result = client.subscribe(RUNTIME, "office", all_users=True)

    assert result.installed == ["Word"]
    [(host, script, timeout)] = executor.calls
    assert host.name == "app01"
    assert timeout == 60.0
    assert (
        "& 'C:\\Turbo\\turbo.exe' 'subscribe' 'office' '--all-users' '--format=json'" in script
    )
    assert "exit $LASTEXITCODE" in script


def test_login_quotes_secret() -> None:
    executor = FakeExecutor(results=[CommandResult(0, _doc(), "")])
    client = RealPackageClient(executor, timeout=None)

    assert client.login(RUNTIME, "alice", "it's", all_users=True).success
    assert "'login' 'alice' 'it''s' '--all-users'" in executor.scripts[0]


def test_current_user_is_none_when_config_fails() -> None:
    executor = FakeExecutor(results=[CommandResult(1, "", "boom")])

    assert RealPackageClient(executor, timeout=None).current_user(RUNTIME) is None


def test_cache_warm_uses_subscription_cache_command() -> None:
    executor = FakeExecutor(results=[CommandResult(0, _doc(), "")])

    RealPackageClient(executor, timeout=None).cache_warm(RUNTIME, "office")

    assert "'subscription' 'office' '--cache'" in executor.scripts[0]
