import logging

import click

from pubsync.cli.commands.config import config_group
from pubsync.cli.commands.hosts import hosts_cmd
from pubsync.cli.commands.subscribe import subscribe_cmd, unsubscribe_cmd
from pubsync.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="pubsync")
@click.option("--debug", is_flag=True, help="Log diagnostic detail to stderr.")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Reconcile package-client subscriptions into the Citrix application catalog."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(dry_run=False)


cli.add_command(config_group)
cli.add_command(hosts_cmd)
cli.add_command(subscribe_cmd)
cli.add_command(unsubscribe_cmd)


def main() -> None:
    """CLI entry point used by the `pubsync` console script."""
    cli()
