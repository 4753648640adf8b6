"""subscribe and unsubscribe commands."""

from collections.abc import Callable
from typing import Any

import click

from pubsync.cli.ensure import Ensure
from pubsync.cli.json_output import deployment_model, emit_json, emit_json_error
from pubsync.cli.rendering import render_outcome
from pubsync.core.context import PubsyncContext
from pubsync.core.engine import reconcile
from pubsync.core.types import RequestSpec, SubscriptionMode, TargetHost


def _target_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by subscribe and unsubscribe."""
    options = [
        click.option("--host", help="Run against one host (default: this machine)."),
        click.option(
            "--all-group-hosts",
            is_flag=True,
            help="Run against every member host of the delivery group.",
        ),
        click.option(
            "--delivery-group",
            "-g",
            help="Delivery group to publish into (default: config default_delivery_group).",
        ),
        click.option("--user", "identity", help="Identity to log the package client in as."),
        click.option("--password", "secret", help="Password for --user."),
        click.option("--api-key", help="Log in with an API key instead of a password."),
        click.option(
            "--dry-run",
            is_flag=True,
            help="Show catalog changes without making them.",
        ),
        click.option("--json", "json_mode", is_flag=True, help="Emit the outcome as JSON."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


NO_DELIVERY_GROUP = (
    "No delivery group given. Pass --delivery-group or run "
    "'pubsync config set default_delivery_group NAME'"
)


def _usage_check(condition: bool, message: str, json_mode: bool) -> None:
    if json_mode and not condition:
        emit_json_error(message, "UsageError")
    Ensure.invariant(condition, message)


def _run(
    ctx: PubsyncContext,
    mode: SubscriptionMode,
    subscription: str,
    *,
    host: str | None,
    all_group_hosts: bool,
    delivery_group: str | None,
    identity: str | None,
    secret: str | None,
    api_key: str | None,
    cache_locally: bool,
    dry_run: bool,
    json_mode: bool,
) -> None:
    _usage_check(
        host is None or not all_group_hosts,
        "--host and --all-group-hosts are mutually exclusive",
        json_mode,
    )
    _usage_check(
        api_key is None or (identity is None and secret is None),
        "--api-key cannot be combined with --user or --password",
        json_mode,
    )

    group = delivery_group or ctx.config.default_delivery_group or None
    if json_mode and group is None:
        emit_json_error(NO_DELIVERY_GROUP, "UsageError")
    group = Ensure.not_none(group, NO_DELIVERY_GROUP)

    ctx = ctx.with_modes(dry_run=dry_run, json_mode=json_mode)
    request = RequestSpec(
        subscription=subscription,
        mode=mode,
        delivery_group=group,
        host=TargetHost(name=host) if host is not None else None,
        discover_hosts=all_group_hosts,
        identity=identity,
        secret=secret,
        api_key=api_key,
        cache_locally=cache_locally,
    )
    outcome = reconcile(ctx, request)

    if json_mode:
        emit_json(deployment_model(outcome).model_dump(mode="json"))
    else:
        render_outcome(outcome)

    if not outcome.success:
        raise SystemExit(1)


@click.command("subscribe")
@click.argument("subscription")
@_target_options
@click.option(
    "--cache/--no-cache",
    "cache_locally",
    default=False,
    help="Pre-download the subscription's applications to each host.",
)
@click.pass_obj
def subscribe_cmd(
    ctx: PubsyncContext,
    subscription: str,
    host: str | None,
    all_group_hosts: bool,
    delivery_group: str | None,
    identity: str | None,
    secret: str | None,
    api_key: str | None,
    dry_run: bool,
    json_mode: bool,
    cache_locally: bool,
) -> None:
    """Subscribe hosts to SUBSCRIPTION and publish its applications."""
    _run(
        ctx,
        SubscriptionMode.SUBSCRIBE,
        subscription,
        host=host,
        all_group_hosts=all_group_hosts,
        delivery_group=delivery_group,
        identity=identity,
        secret=secret,
        api_key=api_key,
        cache_locally=cache_locally,
        dry_run=dry_run,
        json_mode=json_mode,
    )


@click.command("unsubscribe")
@click.argument("subscription")
@_target_options
@click.pass_obj
def unsubscribe_cmd(
    ctx: PubsyncContext,
    subscription: str,
    host: str | None,
    all_group_hosts: bool,
    delivery_group: str | None,
    identity: str | None,
    secret: str | None,
    api_key: str | None,
    dry_run: bool,
    json_mode: bool,
) -> None:
    """Unsubscribe hosts from SUBSCRIPTION and unpublish its applications."""
    _run(
        ctx,
        SubscriptionMode.UNSUBSCRIBE,
        subscription,
        host=host,
        all_group_hosts=all_group_hosts,
        delivery_group=delivery_group,
        identity=identity,
        secret=secret,
        api_key=api_key,
        cache_locally=False,
        dry_run=dry_run,
        json_mode=json_mode,
    )
