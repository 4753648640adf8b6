"""Tests for the subscribe, unsubscribe and hosts commands."""

import json

from click.testing import CliRunner

from pubsync.cli.cli import cli
from pubsync.core.config import PubsyncConfig
from pubsync.core.context import PubsyncContext
from pubsync.core.types import (
    CatalogEntry,
    EventKind,
    SubscriptionEvent,
    SubscriptionResult,
)
from pubsync.integrations.catalog.fake import FakeCatalogClient
from pubsync.integrations.package_client.fake import FakePackageClient


def _installs(*names: str) -> SubscriptionResult:
    return SubscriptionResult(
        success=True, events=[SubscriptionEvent(name=n, kind=EventKind.INSTALL) for n in names]
    )


def _client() -> FakePackageClient:
    return FakePackageClient(
        valid_api_keys={"k": "svc"},
        subscribe_results={"office": _installs("Word")},
    )


def test_subscribe_single_host_renders_table() -> None:
    catalog = FakeCatalogClient()
    test_ctx = PubsyncContext.for_test(package_client=_client(), catalog=catalog)
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["subscribe", "office", "--host", "app01", "-g", "Apps", "--api-key", "k"],
        obj=test_ctx,
    )

    assert result.exit_code == 0, result.output
    assert "app01" in result.output
    assert "Word" in result.output
    assert catalog.names_in("Apps") == ["Word"]


def test_subscribe_uses_default_delivery_group_from_config() -> None:
    catalog = FakeCatalogClient()
    config = PubsyncConfig(default_delivery_group="Apps")
    test_ctx = PubsyncContext.for_test(package_client=_client(), catalog=catalog, config=config)

    result = CliRunner().invoke(cli, ["subscribe", "office", "--api-key", "k"], obj=test_ctx)

    assert result.exit_code == 0, result.output
    assert catalog.names_in("Apps") == ["Word"]


def test_subscribe_without_delivery_group_fails() -> None:
    test_ctx = PubsyncContext.for_test(package_client=_client())

    result = CliRunner().invoke(cli, ["subscribe", "office", "--api-key", "k"], obj=test_ctx)

    assert result.exit_code == 1
    assert "No delivery group given" in result.output


def test_host_and_all_group_hosts_are_exclusive() -> None:
    test_ctx = PubsyncContext.for_test(package_client=_client())

    result = CliRunner().invoke(
        cli,
        ["subscribe", "office", "-g", "Apps", "--host", "app01", "--all-group-hosts"],
        obj=test_ctx,
    )

    assert result.exit_code == 1
    assert "mutually exclusive" in result.output


def test_api_key_cannot_combine_with_user() -> None:
    test_ctx = PubsyncContext.for_test(package_client=_client())

    result = CliRunner().invoke(
        cli,
        ["subscribe", "office", "-g", "Apps", "--api-key", "k", "--user", "alice"],
        obj=test_ctx,
    )

    assert result.exit_code == 1
    assert "--api-key cannot be combined" in result.output


def test_subscribe_json_reports_each_host() -> None:
    catalog = FakeCatalogClient(group_members={"Apps": ["app01", "app02"]})
    test_ctx = PubsyncContext.for_test(package_client=_client(), catalog=catalog)

    result = CliRunner().invoke(
        cli,
        ["subscribe", "office", "-g", "Apps", "--all-group-hosts", "--api-key", "k", "--json"],
        obj=test_ctx,
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["success"] is True
    assert data["mode"] == "subscribe"
    assert [h["host"] for h in data["hosts"]] == ["app01", "app02"]
    assert data["hosts"][0]["result"]["published"] == ["Word"]
    assert data["hosts"][1]["result"]["already_published"] == ["Word"]


def test_failed_host_exits_nonzero() -> None:
    client = FakePackageClient(
        valid_api_keys={"k": "svc"},
        subscribe_results={"office": SubscriptionResult(success=False, events=[])},
    )
    test_ctx = PubsyncContext.for_test(package_client=client)

    result = CliRunner().invoke(
        cli,
        ["subscribe", "office", "-g", "Apps", "--host", "app01", "--api-key", "k", "--json"],
        obj=test_ctx,
    )

    assert result.exit_code == 1
    data = json.loads(result.stdout)
    assert data["success"] is False
    assert data["hosts"][0]["stage"] == "subscribe"
    assert "no error details reported" in data["hosts"][0]["error"]


def test_json_mode_never_prompts() -> None:
    client = FakePackageClient(subscribe_results={"office": _installs("Word")})
    test_ctx = PubsyncContext.for_test(package_client=client)

    result = CliRunner().invoke(
        cli, ["subscribe", "office", "-g", "Apps", "--host", "app01", "--json"], obj=test_ctx
    )

    assert result.exit_code == 1
    data = json.loads(result.stdout)
    assert data["hosts"][0]["stage"] == "authenticate"


def test_subscribe_with_cache_requests_cache_warm() -> None:
    client = _client()
    test_ctx = PubsyncContext.for_test(package_client=client)

    result = CliRunner().invoke(
        cli,
        ["subscribe", "office", "-g", "Apps", "--host", "app01", "--api-key", "k", "--cache"],
        obj=test_ctx,
    )

    assert result.exit_code == 0, result.output
    assert client.cache_warm_calls == [("app01", "office")]


def test_unsubscribe_removes_entries() -> None:
    client = FakePackageClient(
        valid_api_keys={"k": "svc"},
        unsubscribe_results={
            "office": SubscriptionResult(
                success=True, events=[SubscriptionEvent(name="Word", kind=EventKind.UNINSTALL)]
            )
        },
    )
    catalog = FakeCatalogClient(
        entries=[
            CatalogEntry(
                canonical_name="Word",
                command_line="C:\\Office\\winword.exe",
                command_arguments="",
                group="Apps",
                uid="1",
            )
        ]
    )
    test_ctx = PubsyncContext.for_test(package_client=client, catalog=catalog)

    result = CliRunner().invoke(
        cli,
        ["unsubscribe", "office", "-g", "Apps", "--host", "app01", "--api-key", "k"],
        obj=test_ctx,
    )

    assert result.exit_code == 0, result.output
    assert catalog.names_in("Apps") == []
    assert client.unsubscribe_calls == [("app01", "office", True)]


def test_dry_run_leaves_catalog_untouched() -> None:
    catalog = FakeCatalogClient()
    test_ctx = PubsyncContext.for_test(package_client=_client(), catalog=catalog)

    result = CliRunner().invoke(
        cli,
        ["subscribe", "office", "-g", "Apps", "--host", "app01", "--api-key", "k", "--dry-run"],
        obj=test_ctx,
    )

    assert result.exit_code == 0, result.output
    assert catalog.mutation_count == 0


def test_hosts_lists_group_members() -> None:
    catalog = FakeCatalogClient(group_members={"Apps": ["app01", "app02"]})
    test_ctx = PubsyncContext.for_test(catalog=catalog)

    result = CliRunner().invoke(cli, ["hosts", "Apps"], obj=test_ctx)

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == ["app01", "app02"]


def test_hosts_unknown_group_fails_with_json_error() -> None:
    test_ctx = PubsyncContext.for_test(catalog=FakeCatalogClient())

    result = CliRunner().invoke(cli, ["hosts", "Nope", "--json"], obj=test_ctx)

    assert result.exit_code == 1
    data = json.loads(result.stdout)
    assert data["error_type"] == "GroupDiscoveryFailedError"
    assert "Nope" in data["error"]


def test_usage_error_is_reported_as_json() -> None:
    test_ctx = PubsyncContext.for_test(package_client=_client())

    result = CliRunner().invoke(cli, ["subscribe", "office", "--json"], obj=test_ctx)

    assert result.exit_code == 1
    data = json.loads(result.stdout)
    assert data["error_type"] == "UsageError"
    assert "No delivery group given" in data["error"]
