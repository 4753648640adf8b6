"""Converge a group's published-application catalog with a subscription."""

import logging

from pubsync.core.errors import IntegrationError, SubscriptionFailedError
from pubsync.core.locks import ScopeLocks
from pubsync.core.naming import canonical_name
from pubsync.core.types import (
    CatalogEntry,
    PublishFailure,
    ReconcileResult,
    RuntimeHandle,
    SubscriptionMode,
    SubscriptionResult,
)
from pubsync.core.user_feedback import UserFeedback
from pubsync.integrations.catalog.abc import CatalogClient
from pubsync.integrations.package_client.abc import PackageClient
from pubsync.integrations.shortcuts.abc import ShortcutInspector

logger = logging.getLogger(__name__)


class SubscriptionReconciler:
    """Applies a subscription on one host and mirrors its events into the catalog.

    Installed applications are published to the group unless an entry with
    the same canonical name is already there; removed applications are
    unpublished when present. The lookup-then-create step runs under the
    group's lock so hosts sharing a group never publish the same name twice.
    """

    def __init__(
        self,
        package_client: PackageClient,
        shortcuts: ShortcutInspector,
        catalog: CatalogClient,
        locks: ScopeLocks,
        feedback: UserFeedback,
    ) -> None:
        self._package_client = package_client
        self._shortcuts = shortcuts
        self._catalog = catalog
        self._locks = locks
        self._feedback = feedback

    def apply(
        self,
        runtime: RuntimeHandle,
        subscription: str,
        mode: SubscriptionMode,
        *,
        group: str,
        cache_locally: bool = False,
    ) -> ReconcileResult:
        """Run the subscription change on the host and reconcile `group`.

        Raises:
            SubscriptionFailedError: If the client reports a failed status;
                no catalog operation is made in that case
        """
        outcome = self._run_subscription(runtime, subscription, mode)
        if not outcome.success:
            raise SubscriptionFailedError(subscription, outcome.errors)

        for message in outcome.errors:
            self._feedback.warning(f"{runtime.host.name}: {message}")

        cache_warm_error = None
        if cache_locally and mode == SubscriptionMode.SUBSCRIBE:
            cache_warm_error = self._cache_warm(runtime, subscription)

        result = ReconcileResult(
            host=runtime.host,
            subscription=subscription,
            mode=mode,
            installed=outcome.installed,
            uninstalled=outcome.removed,
            cache_warm_error=cache_warm_error,
        )
        for name in outcome.installed:
            self._publish(runtime, name, group, result)
        for name in outcome.removed:
            self._unpublish(name, group, result)
        return result

    def _run_subscription(
        self, runtime: RuntimeHandle, subscription: str, mode: SubscriptionMode
    ) -> SubscriptionResult:
        if mode == SubscriptionMode.SUBSCRIBE:
            return self._package_client.subscribe(runtime, subscription, all_users=True)
        return self._package_client.unsubscribe(runtime, subscription, all_users=True)

    def _cache_warm(self, runtime: RuntimeHandle, subscription: str) -> str | None:
        try:
            warmed = self._package_client.cache_warm(runtime, subscription)
        except IntegrationError as e:
            reason = str(e)
        else:
            if warmed.success:
                return None
            reason = warmed.message or "cache request failed"
        self._feedback.warning(f"Could not cache {subscription} on {runtime.host.name}: {reason}")
        return reason

    def _publish(
        self, runtime: RuntimeHandle, app_name: str, group: str, result: ReconcileResult
    ) -> None:
        try:
            shortcut = self._shortcuts.resolve(runtime.host, app_name)
        except IntegrationError as e:
            self._record_failure(result.publish_failures, app_name, str(e))
            return

        name = canonical_name(shortcut.name)
        if not name:
            self._record_failure(
                result.publish_failures,
                app_name,
                f"shortcut name '{shortcut.name}' has no publishable characters",
            )
            return

        with self._locks.hold(group):
            try:
                if self._catalog.find(name, group) is not None:
                    logger.debug("'%s' already published in %s", name, group)
                    result.already_published.append(name)
                    return
                icon_handle = self._catalog.import_icon(runtime.host, shortcut.icon_source)
                self._catalog.create(
                    CatalogEntry(
                        canonical_name=name,
                        command_line=shortcut.target_path,
                        command_arguments=shortcut.arguments,
                        group=group,
                        icon_handle=icon_handle,
                        working_directory=shortcut.working_directory,
                    )
                )
            except IntegrationError as e:
                self._record_failure(
                    result.publish_failures, app_name, f"catalog entry '{name}': {e}"
                )
                return

        result.published.append(name)
        self._feedback.success(f"Published {name} to {group}")

    def _unpublish(self, app_name: str, group: str, result: ReconcileResult) -> None:
        name = canonical_name(app_name)
        with self._locks.hold(group):
            try:
                entry = self._catalog.find(name, group)
                if entry is None:
                    result.already_absent.append(name)
                    return
                self._catalog.delete(entry)
            except IntegrationError as e:
                self._record_failure(
                    result.unpublish_failures, app_name, f"catalog entry '{name}': {e}"
                )
                return

        result.unpublished.append(name)
        self._feedback.success(f"Unpublished {name} from {group}")

    def _record_failure(self, failures: list[PublishFailure], name: str, reason: str) -> None:
        logger.debug("Catalog operation for '%s' failed: %s", name, reason)
        failures.append(PublishFailure(name=name, reason=reason))
        self._feedback.error(f"{name}: {reason}")
