"""Tests for reconcile() across hosts."""

from dataclasses import replace

from pubsync.core.config import PubsyncConfig
from pubsync.core.context import PubsyncContext
from pubsync.core.engine import reconcile
from pubsync.core.types import (
    Credentials,
    EventKind,
    RequestSpec,
    Stage,
    SubscriptionEvent,
    SubscriptionMode,
    SubscriptionResult,
    TargetHost,
)
from pubsync.core.user_feedback import FakeFeedback
from pubsync.integrations.catalog.fake import FakeCatalogClient
from pubsync.integrations.host.fake import FakeHostOps
from pubsync.integrations.package_client.fake import FakePackageClient
from pubsync.integrations.prompt.fake import FakeCredentialPrompt

CLIENT = PubsyncConfig().client_install_paths[0]


def _installs(*names: str) -> SubscriptionResult:
    return SubscriptionResult(
        success=True, events=[SubscriptionEvent(name=n, kind=EventKind.INSTALL) for n in names]
    )


def _group_request(**kwargs: object) -> RequestSpec:
    base = RequestSpec(
        subscription="office",
        mode=SubscriptionMode.SUBSCRIBE,
        delivery_group="Apps",
        discover_hosts=True,
        api_key="k",
    )
    return replace(base, **kwargs)


def _client() -> FakePackageClient:
    return FakePackageClient(
        valid_api_keys={"k": "svc"},
        subscribe_results={"office": _installs("Word", "Excel")},
    )


def test_single_host_run_publishes() -> None:
    catalog = FakeCatalogClient()
    ctx = PubsyncContext.for_test(package_client=_client(), catalog=catalog)
    request = RequestSpec(
        subscription="office",
        mode=SubscriptionMode.SUBSCRIBE,
        delivery_group="Apps",
        host=TargetHost("app01"),
        api_key="k",
    )

    outcome = reconcile(ctx, request)

    assert outcome.success
    [host] = outcome.hosts
    assert host.host.name == "app01"
    assert host.stage == Stage.COMPLETE
    assert sorted(catalog.names_in("Apps")) == ["Excel", "Word"]


def test_no_host_means_local_machine() -> None:
    client = _client()
    ctx = PubsyncContext.for_test(package_client=client)
    request = _group_request(discover_hosts=False)

    outcome = reconcile(ctx, request)

    assert [h.host.name for h in outcome.hosts] == ["localhost"]
    assert client.subscribe_calls == [("localhost", "office", True)]


def test_application_on_several_hosts_is_published_once() -> None:
    catalog = FakeCatalogClient(group_members={"Apps": ["app01", "app02", "app03"]})
    ctx = PubsyncContext.for_test(package_client=_client(), catalog=catalog)

    outcome = reconcile(ctx, _group_request())

    assert outcome.success
    assert [h.host.name for h in outcome.hosts] == ["app01", "app02", "app03"]
    assert outcome.hosts[0].result.published == ["Word", "Excel"]
    assert outcome.hosts[1].result.already_published == ["Word", "Excel"]
    assert outcome.hosts[2].result.already_published == ["Word", "Excel"]
    assert len(catalog.created) == 2


def test_bootstrap_failure_on_one_host_does_not_stop_others() -> None:
    catalog = FakeCatalogClient(group_members={"Apps": ["app01", "app02", "app03"]})
    config = replace(PubsyncConfig(), installer_url="https://example.com/setup.exe")
    host_ops = FakeHostOps(
        files={"app01": {CLIENT}, "app03": {CLIENT}},
        installer_exit_code=1,
    )
    ctx = PubsyncContext.for_test(
        package_client=_client(), catalog=catalog, host_ops=host_ops, config=config
    )

    outcome = reconcile(ctx, _group_request())

    assert not outcome.success
    stages = [(h.host.name, h.stage) for h in outcome.hosts]
    assert stages == [
        ("app01", Stage.COMPLETE),
        ("app02", Stage.BOOTSTRAP),
        ("app03", Stage.COMPLETE),
    ]
    assert "exited with code 1" in outcome.hosts[1].error
    assert outcome.hosts[0].success
    assert outcome.hosts[2].success


def test_stop_on_host_failure_ends_the_run() -> None:
    catalog = FakeCatalogClient(group_members={"Apps": ["app01", "app02"]})
    client = FakePackageClient(
        valid_api_keys={"k": "svc"},
        subscribe_results={
            "app01/office": SubscriptionResult(success=False, events=[]),
            "office": _installs("Word"),
        },
    )
    config = replace(PubsyncConfig(), stop_on_host_failure=True)
    ctx = PubsyncContext.for_test(package_client=client, catalog=catalog, config=config)

    outcome = reconcile(ctx, _group_request())

    assert not outcome.success
    assert [(h.host.name, h.stage) for h in outcome.hosts] == [("app01", Stage.SUBSCRIBE)]
    assert client.subscribe_calls == [("app01", "office", True)]


def test_discovery_failure_is_reported_in_outcome() -> None:
    catalog = FakeCatalogClient(discovery_error="broker unreachable")
    feedback = FakeFeedback()
    ctx = PubsyncContext.for_test(catalog=catalog, feedback=feedback)

    outcome = reconcile(ctx, _group_request())

    assert not outcome.success
    assert outcome.hosts == []
    assert "broker unreachable" in outcome.discovery_error
    assert feedback.of_level("error")


def test_empty_group_is_a_discovery_failure() -> None:
    catalog = FakeCatalogClient(group_members={"Apps": []})
    ctx = PubsyncContext.for_test(catalog=catalog)

    outcome = reconcile(ctx, _group_request())

    assert not outcome.success
    assert "no member hosts" in outcome.discovery_error


def test_cancelled_login_fails_only_that_host() -> None:
    catalog = FakeCatalogClient(group_members={"Apps": ["app01", "app02"]})
    client = FakePackageClient(
        current_users={"app02": "alice"},
        subscribe_results={"office": _installs("Word")},
    )
    ctx = PubsyncContext.for_test(
        package_client=client, catalog=catalog, prompt=FakeCredentialPrompt()
    )

    outcome = reconcile(ctx, _group_request(api_key=None))

    assert [(h.host.name, h.stage) for h in outcome.hosts] == [
        ("app01", Stage.AUTHENTICATE),
        ("app02", Stage.COMPLETE),
    ]
    assert "cancelled" in outcome.hosts[0].error


def test_prompted_credentials_are_reused_on_later_hosts() -> None:
    catalog = FakeCatalogClient(group_members={"Apps": ["app01", "app02"]})
    client = FakePackageClient(
        valid_credentials={"alice": "pw"},
        subscribe_results={"office": _installs("Word")},
    )
    prompt = FakeCredentialPrompt(answers=[Credentials("alice", "pw")])
    ctx = PubsyncContext.for_test(package_client=client, catalog=catalog, prompt=prompt)

    outcome = reconcile(ctx, _group_request(api_key=None))

    assert outcome.success
    assert prompt.asked == [None]
    assert client.login_calls == [("app01", "alice", "pw"), ("app02", "alice", "pw")]


def test_publish_failure_marks_host_unsuccessful() -> None:
    catalog = FakeCatalogClient(failing_creates={"Excel"})
    ctx = PubsyncContext.for_test(package_client=_client(), catalog=catalog)

    outcome = reconcile(ctx, _group_request(discover_hosts=False, host=TargetHost("app01")))

    assert not outcome.success
    [host] = outcome.hosts
    assert host.stage == Stage.PUBLISH
    assert host.error is None
    assert host.result.failed_names == ["Excel"]


def test_dry_run_makes_no_catalog_mutations() -> None:
    catalog = FakeCatalogClient(group_members={"Apps": ["app01", "app02"]})
    feedback = FakeFeedback()
    ctx = PubsyncContext.for_test(
        package_client=_client(), catalog=catalog, feedback=feedback, dry_run=True
    )

    outcome = reconcile(ctx, _group_request())

    assert outcome.success
    assert catalog.mutation_count == 0
    assert catalog.imported_icons == []
    assert any("[dry-run] Would publish 'Word'" in m for m in feedback.of_level("info"))


def test_dry_run_publishes_each_app_once_per_group() -> None:
    catalog = FakeCatalogClient(group_members={"Apps": ["app01", "app02"]})
    ctx = PubsyncContext.for_test(package_client=_client(), catalog=catalog, dry_run=True)

    outcome = reconcile(ctx, _group_request())

    assert outcome.success
    first, second = outcome.hosts
    assert sorted(first.result.published) == ["Excel", "Word"]
    assert second.result.published == []
    assert sorted(second.result.already_published) == ["Excel", "Word"]
    assert catalog.mutation_count == 0


def test_rejected_password_is_not_sent_to_later_hosts() -> None:
    client = FakePackageClient(
        valid_credentials={"alice": "right"},
        subscribe_results={"office": _installs("Word")},
    )
    catalog = FakeCatalogClient(group_members={"Apps": ["app01", "app02"]})
    ctx = PubsyncContext.for_test(package_client=client, catalog=catalog)

    outcome = reconcile(
        ctx, _group_request(api_key=None, identity="alice", secret="wrong")
    )

    assert not outcome.success
    assert [h.stage for h in outcome.hosts] == [Stage.AUTHENTICATE, Stage.AUTHENTICATE]
    assert client.login_calls == [("app01", "alice", "wrong")]
