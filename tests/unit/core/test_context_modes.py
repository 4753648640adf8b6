"""Tests for PubsyncContext mode adjustments."""

from pubsync.core.config import PubsyncConfig
from pubsync.core.context import PubsyncContext, build_catalog
from pubsync.core.user_feedback import SuppressedFeedback
from pubsync.integrations.catalog.broker import BrokerCatalogClient
from pubsync.integrations.catalog.dry_run import DryRunCatalogClient
from pubsync.integrations.catalog.xenapp65 import XenApp65CatalogClient
from pubsync.integrations.executor.fake import FakeExecutor
from pubsync.integrations.prompt.real import NonInteractivePrompt


def test_json_mode_suppresses_feedback_and_prompting() -> None:
    ctx = PubsyncContext.for_test().with_modes(dry_run=False, json_mode=True)

    assert isinstance(ctx.feedback, SuppressedFeedback)
    assert isinstance(ctx.prompt, NonInteractivePrompt)
    assert not ctx.dry_run


def test_dry_run_wraps_catalog_once() -> None:
    ctx = PubsyncContext.for_test().with_modes(dry_run=True, json_mode=False)
    again = ctx.with_modes(dry_run=True, json_mode=False)

    assert ctx.dry_run
    assert isinstance(ctx.catalog, DryRunCatalogClient)
    assert again.catalog is ctx.catalog


def test_catalog_follows_citrix_version() -> None:
    executor = FakeExecutor()

    assert isinstance(build_catalog(executor, PubsyncConfig()), BrokerCatalogClient)
    assert isinstance(
        build_catalog(executor, PubsyncConfig(citrix_version="6.5")), XenApp65CatalogClient
    )
