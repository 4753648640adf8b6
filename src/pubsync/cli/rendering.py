"""Human-readable rendering of deployment outcomes."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pubsync.core.types import DeploymentOutcome, HostOutcome


def _joined(names: list[str]) -> str:
    if not names:
        return "[dim]-[/dim]"
    return escape(", ".join(names))


def _status_cell(outcome: HostOutcome) -> str:
    if outcome.success:
        return "[green]ok[/green]"
    return f"[red]failed ({outcome.stage.value})[/red]"


def _problems_cell(outcome: HostOutcome) -> str:
    problems: list[str] = []
    if outcome.error is not None:
        problems.append(outcome.error)
    if outcome.result is not None:
        problems.extend(f"{f.name}: {f.reason}" for f in outcome.result.publish_failures)
        problems.extend(
            f"remove {f.name}: {f.reason}" for f in outcome.result.unpublish_failures
        )
        if outcome.result.cache_warm_error is not None:
            problems.append(f"cache: {outcome.result.cache_warm_error}")
    if not problems:
        return "[dim]-[/dim]"
    return escape("\n".join(problems))


def build_outcome_table(outcome: DeploymentOutcome) -> Table:
    """One row per host with its stage, catalog changes and problems."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("host", style="cyan", no_wrap=True)
    table.add_column("status", no_wrap=True)
    table.add_column("published")
    table.add_column("skipped")
    table.add_column("unpublished")
    table.add_column("problems")

    for host in outcome.hosts:
        result = host.result
        if result is None:
            published = skipped = unpublished = "[dim]-[/dim]"
        else:
            published = _joined(result.published)
            skipped = _joined(result.already_published + result.already_absent)
            unpublished = _joined(result.unpublished)
        table.add_row(
            escape(host.host.name),
            _status_cell(host),
            published,
            skipped,
            unpublished,
            _problems_cell(host),
        )
    return table


def render_outcome(outcome: DeploymentOutcome, console: Console | None = None) -> None:
    """Print the outcome table and a one-line status to stderr."""
    if console is None:
        console = Console(stderr=True, width=200)

    if outcome.discovery_error is not None:
        console.print(f"[red]Host discovery failed:[/red] {escape(outcome.discovery_error)}")
    if outcome.hosts:
        console.print(build_outcome_table(outcome))

    verb = outcome.mode.value
    failed = [h for h in outcome.hosts if not h.success]
    if outcome.success:
        console.print(
            f"[green]{verb} {escape(outcome.subscription)}: {len(outcome.hosts)} host(s) ok[/green]"
        )
    else:
        console.print(
            f"[red]{verb} {escape(outcome.subscription)}: "
            f"{len(failed)} of {len(outcome.hosts)} host(s) failed[/red]"
        )
