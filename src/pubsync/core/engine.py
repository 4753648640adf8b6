"""Run a reconciliation request across its target hosts."""

import logging

from pubsync.core.bootstrap import Bootstrapper
from pubsync.core.context import PubsyncContext
from pubsync.core.errors import (
    AuthenticationError,
    GroupDiscoveryFailedError,
    IntegrationError,
    PubsyncError,
)
from pubsync.core.reconciler import SubscriptionReconciler
from pubsync.core.session import SessionAuthenticator
from pubsync.core.types import (
    Credentials,
    DeploymentOutcome,
    HostOutcome,
    RequestSpec,
    RuntimeHandle,
    Stage,
    TargetHost,
)

logger = logging.getLogger(__name__)


def list_hosts(ctx: PubsyncContext, group: str) -> list[TargetHost]:
    """Return the members of a delivery group in catalog order.

    Raises:
        GroupDiscoveryFailedError: If the group cannot be queried or is empty
    """
    try:
        hosts = ctx.catalog.list_group_members(group)
    except IntegrationError as e:
        raise GroupDiscoveryFailedError(group, str(e)) from e
    if not hosts:
        raise GroupDiscoveryFailedError(group, "group has no member hosts")
    return hosts


def resolve_targets(ctx: PubsyncContext, request: RequestSpec) -> list[TargetHost]:
    """Hosts a request addresses: the explicit host, or the discovered group members."""
    if request.discover_hosts:
        return list_hosts(ctx, request.delivery_group)
    if request.host is not None:
        return [request.host]
    return [TargetHost.local()]


class _HostPipeline:
    """Bootstrap, authenticate and apply for one host at a time.

    Credentials a password login succeeded with are carried to the next host,
    so a multi-host run prompts at most once per distinct failure.
    """

    def __init__(self, ctx: PubsyncContext, request: RequestSpec) -> None:
        config = ctx.config
        self._request = request
        self._bootstrapper = Bootstrapper(
            ctx.host_ops,
            install_paths=config.client_install_paths,
            installer_url=config.installer_url,
            installer_arguments=config.installer_arguments,
            install_timeout=config.install_timeout_seconds,
        )
        self._authenticator = SessionAuthenticator(
            ctx.package_client,
            ctx.prompt,
            ctx.feedback,
            max_attempts=config.max_login_attempts,
        )
        self._reconciler = SubscriptionReconciler(
            ctx.package_client, ctx.shortcuts, ctx.catalog, ctx.locks, ctx.feedback
        )
        self._credentials: Credentials | None = None
        if request.identity is not None and request.secret is not None:
            self._credentials = Credentials(identity=request.identity, secret=request.secret)

    def run(self, host: TargetHost) -> HostOutcome:
        stage = Stage.BOOTSTRAP
        try:
            runtime = self._bootstrapper.ensure_runtime(host)

            stage = Stage.AUTHENTICATE
            try:
                used = self._authenticate(runtime)
            except AuthenticationError:
                # The carried secret may be the one that was rejected
                self._credentials = None
                raise
            if used is not None:
                self._credentials = used

            stage = Stage.SUBSCRIBE
            result = self._reconciler.apply(
                runtime,
                self._request.subscription,
                self._request.mode,
                group=self._request.delivery_group,
                cache_locally=self._request.cache_locally,
            )
        except (PubsyncError, IntegrationError) as e:
            logger.debug("Pipeline for %s stopped at %s: %s", host.name, stage.value, e)
            return HostOutcome(host=host, stage=stage, error=str(e))

        if not result.success:
            return HostOutcome(host=host, stage=Stage.PUBLISH, result=result)
        return HostOutcome(host=host, stage=Stage.COMPLETE, result=result)

    def _authenticate(self, runtime: RuntimeHandle) -> Credentials | None:
        if self._request.api_key is not None:
            return self._authenticator.ensure_session(runtime, api_key=self._request.api_key)
        if self._credentials is not None:
            return self._authenticator.ensure_session(
                runtime,
                identity=self._credentials.identity,
                secret=self._credentials.secret,
            )
        return self._authenticator.ensure_session(runtime, identity=self._request.identity)


def reconcile(ctx: PubsyncContext, request: RequestSpec) -> DeploymentOutcome:
    """Run the full pipeline for every target host of `request`.

    Host failures are recorded in the outcome rather than raised. With
    `stop_on_host_failure` configured, the first failed host ends the run.
    """
    try:
        hosts = resolve_targets(ctx, request)
    except PubsyncError as e:
        ctx.feedback.error(str(e))
        return DeploymentOutcome(
            subscription=request.subscription,
            mode=request.mode,
            hosts=[],
            discovery_error=str(e),
        )

    pipeline = _HostPipeline(ctx, request)
    outcomes: list[HostOutcome] = []
    for host in hosts:
        ctx.feedback.info(f"{request.mode.value.capitalize()} {request.subscription} on {host.name}")
        outcome = pipeline.run(host)
        outcomes.append(outcome)
        if outcome.error is not None:
            ctx.feedback.error(f"{host.name}: {outcome.error}")
        if not outcome.success and ctx.config.stop_on_host_failure:
            logger.debug("Stopping after failure on %s", host.name)
            break

    return DeploymentOutcome(
        subscription=request.subscription,
        mode=request.mode,
        hosts=outcomes,
    )
