"""Ticket Board CLI - support-desk workload dashboard for the terminal."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from .. import __version__
from ..models.view import AgeView

VIEW_CHOICES = [v.value for v in AgeView] + ["departments"]


def _split(values: tuple[str, ...]) -> list[str] | None:
    """Accept repeated options and comma-separated values alike."""
    items = [item.strip() for value in values for item in value.split(",") if item.strip()]
    return items or None


@click.group()
@click.version_option(version=__version__, prog_name="ticketboard")
def ticketboard_cli() -> None:
    """Ticket Board - live ticket counts per agent and department."""


@ticketboard_cli.command()
@click.option("--workspace", "-w", type=click.Path(exists=True, file_okay=False), required=True)
def init(workspace: str) -> None:
    """Create .ticketboard/ with a starter config."""
    from ..core.runner import initialize

    initialize(Path(workspace))


@ticketboard_cli.command()
@click.option("--workspace", "-w", type=click.Path(file_okay=False), default=".", show_default=True)
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Also write JSON to this file")
@click.option("--department", "-d", multiple=True, help="Department id or name (repeatable)")
@click.option("--agent", "-a", multiple=True, help="Agent name or search term (repeatable)")
@click.option("--status", "-s", multiple=True, help="open, hold, inProgress, escalated, total")
@click.option("--sort", "sort_order", type=click.Choice(["asc", "desc"]), default="asc")
@click.option("--page", type=int, default=1)
@click.option("--view", "views", multiple=True, type=click.Choice(VIEW_CHOICES))
@click.option("--dry-run", is_flag=True, help="Use the bundled sample data (no network)")
@click.option("--fixture", type=click.Path(exists=True, dir_okay=False), help="Serve data from a JSON fixture")
@click.option("--backend-url", type=str, help="Backend base URL override")
def snapshot(
    workspace: str,
    output_format: str,
    output: str | None,
    department: tuple[str, ...],
    agent: tuple[str, ...],
    status: tuple[str, ...],
    sort_order: str,
    page: int,
    views: tuple[str, ...],
    dry_run: bool,
    fixture: str | None,
    backend_url: str | None,
) -> None:
    """Fetch once and print the dashboard."""
    from ..core.runner import run_snapshot
    from ..formatters.console import render_view
    from ..formatters.json_export import export_view_json

    view = asyncio.run(
        run_snapshot(
            workspace_path=Path(workspace),
            dry_run=dry_run,
            backend_url=backend_url,
            fixture_path=fixture,
            quiet=output_format == "json",
            departments=_split(department),
            agents=_split(agent),
            statuses=_split(status),
            sort_order=sort_order,
            page=page,
            views=list(views) or None,
        )
    )

    if output_format == "json" or output:
        content = export_view_json(view, Path(output) if output else None)
        if output_format == "json":
            click.echo(content)
    if output_format == "table":
        from ..core.runner import console

        console.print(render_view(view))


@ticketboard_cli.command()
@click.option("--workspace", "-w", type=click.Path(file_okay=False), default=".", show_default=True)
@click.option("--department", "-d", multiple=True, help="Department id or name (repeatable)")
@click.option("--agent", "-a", multiple=True, help="Agent name or search term (repeatable)")
@click.option("--status", "-s", multiple=True, help="open, hold, inProgress, escalated, total")
@click.option("--sort", "sort_order", type=click.Choice(["asc", "desc"]), default="asc")
@click.option("--view", "views", multiple=True, type=click.Choice(VIEW_CHOICES))
@click.option("--dry-run", is_flag=True, help="Use the bundled sample data (no network)")
@click.option("--fixture", type=click.Path(exists=True, dir_okay=False), help="Serve data from a JSON fixture")
@click.option("--backend-url", type=str, help="Backend base URL override")
def watch(
    workspace: str,
    department: tuple[str, ...],
    agent: tuple[str, ...],
    status: tuple[str, ...],
    sort_order: str,
    views: tuple[str, ...],
    dry_run: bool,
    fixture: str | None,
    backend_url: str | None,
) -> None:
    """Run the live dashboard until Ctrl+C."""
    from ..core.runner import run_watch

    try:
        exit_code = asyncio.run(
            run_watch(
                workspace_path=Path(workspace),
                dry_run=dry_run,
                backend_url=backend_url,
                fixture_path=fixture,
                departments=_split(department),
                agents=_split(agent),
                statuses=_split(status),
                sort_order=sort_order,
                views=list(views) or None,
            )
        )
    except KeyboardInterrupt:
        exit_code = 0
    sys.exit(exit_code)


@ticketboard_cli.group()
def cache() -> None:
    """Inspect or clear the last-known-good cache."""


@cache.command("show")
@click.option("--workspace", "-w", type=click.Path(file_okay=False), default=".", show_default=True)
def cache_show(workspace: str) -> None:
    """List cached datasets."""
    from ..core.runner import show_cache

    show_cache(Path(workspace))


@cache.command("clear")
@click.option("--workspace", "-w", type=click.Path(file_okay=False), default=".", show_default=True)
@click.confirmation_option(prompt="Remove every cached dataset?")
def cache_clear(workspace: str) -> None:
    """Remove every cached dataset."""
    from ..core.runner import clear_cache

    clear_cache(Path(workspace))


def main() -> None:
    ticketboard_cli()


if __name__ == "__main__":
    main()
