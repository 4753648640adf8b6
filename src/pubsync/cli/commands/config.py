import click

from pubsync.cli.ensure import Ensure
from pubsync.cli.output import machine_output, user_output
from pubsync.core.config import CONFIG_KEYS, format_config_value, with_value
from pubsync.core.context import PubsyncContext


@click.group("config")
def config_group() -> None:
    """Manage pubsync configuration."""


@config_group.command("list")
@click.pass_obj
def config_list(ctx: PubsyncContext) -> None:
    """Print a list of configuration keys and values."""
    user_output(click.style(f"Configuration ({ctx.config_store.path()}):", bold=True))
    if not ctx.config_store.exists():
        user_output("  (no config file - showing defaults)")
    for key in CONFIG_KEYS:
        machine_output(f"{key}={format_config_value(getattr(ctx.config, key))}")


@config_group.command("get")
@click.argument("key", metavar="KEY")
@click.pass_obj
def config_get(ctx: PubsyncContext, key: str) -> None:
    """Print the value of a given configuration key."""
    Ensure.invariant(key in CONFIG_KEYS, f"Unknown config key: {key}")
    machine_output(format_config_value(getattr(ctx.config, key)))


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@click.pass_obj
def config_set(ctx: PubsyncContext, key: str, value: str) -> None:
    """Update a configuration key.

    List keys take comma-separated values; "none" clears optional keys.
    """
    try:
        updated = with_value(ctx.config_store.load(), key, value)
    except ValueError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e
    ctx.config_store.save(updated)
    user_output(f"Set {key}={format_config_value(getattr(updated, key))}")
