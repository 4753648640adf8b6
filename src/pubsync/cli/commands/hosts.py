import click

from pubsync.cli.json_output import emit_json, emit_json_error
from pubsync.cli.output import machine_output, user_output
from pubsync.core.context import PubsyncContext
from pubsync.core.engine import list_hosts
from pubsync.core.errors import GroupDiscoveryFailedError


@click.command("hosts")
@click.argument("group")
@click.option("--json", "json_mode", is_flag=True, help="Emit the host list as JSON.")
@click.pass_obj
def hosts_cmd(ctx: PubsyncContext, group: str, json_mode: bool) -> None:
    """List the member hosts of a delivery group."""
    try:
        hosts = list_hosts(ctx, group)
    except GroupDiscoveryFailedError as e:
        if json_mode:
            emit_json_error(str(e), type(e).__name__)
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e

    if json_mode:
        emit_json({"group": group, "hosts": [h.name for h in hosts]})
        return
    for host in hosts:
        machine_output(host.name)
