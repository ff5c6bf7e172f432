"""Entry-point flows behind the CLI: one-shot snapshot and live watch."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.live import Live

from .adapter import DataSourceAdapter
from .cache import CacheStore
from .config import WORKSPACE_DIR, get_effective_config, initialize_workspace
from .dashboard import Dashboard
from .filters import candidate_options, department_options, filter_candidate_option, normalize_name, status_options
from ..formatters.console import render_view
from ..models.agent import AgentRow, Department
from ..models.view import AgeView, DashboardView, Option, SortOrder
from ..sources.base import get_data_source

console = Console()

DEPARTMENT_VIEW = "departments"


def initialize(workspace_path: Path) -> None:
    config_path = initialize_workspace(workspace_path)
    console.print(f"  [green]Initialized[/green] {WORKSPACE_DIR}/ in {workspace_path.name} ({config_path.name})")


def build_dashboard(
    workspace_path: Path,
    dry_run: bool = False,
    backend_url: Optional[str] = None,
    fixture_path: Optional[str] = None,
    quiet: bool = False,
    on_change=None,
) -> Dashboard:
    cli_overrides: dict = {}
    if fixture_path:
        cli_overrides.setdefault("source", {})["fixture_path"] = fixture_path

    config = get_effective_config(workspace_path, cli_overrides=cli_overrides or None)
    cache = CacheStore(Path(config["_cache_dir"]))
    source = get_data_source(
        config,
        source_override="fixture" if dry_run or fixture_path else None,
        url_override=backend_url,
    )
    adapter = DataSourceAdapter(source, cache, quiet=quiet)
    return Dashboard(adapter, cache, config, on_change=on_change, quiet=quiet)


def resolve_departments(requested: list[str], departments: list[Department]) -> list[Option]:
    """Match requested departments by id or (case-insensitive) name."""
    options = department_options(departments)
    resolved: list[Option] = []
    for wanted in requested:
        match = next(
            (o for o in options if o.value == wanted or o.label.lower() == wanted.lower()),
            None,
        )
        if match is None:
            console.print(f"  [yellow]WARN[/yellow] Unknown department: {wanted}")
            continue
        resolved.append(match)
    return resolved


def resolve_agents(requested: list[str], rows: list[AgentRow]) -> list[Option]:
    """Match requested agents against the dropdown options.

    An exact (case-insensitive) name wins; otherwise a search term that
    narrows the options to a single agent is accepted.
    """
    options = candidate_options(rows)
    resolved: list[Option] = []
    for wanted in requested:
        match = next((o for o in options if normalize_name(o.label) == normalize_name(wanted)), None)
        if match is None:
            hits = [o for o in options if filter_candidate_option(o, wanted.strip(), [])]
            if len(hits) == 1:
                match = hits[0]
            elif hits:
                names = ", ".join(o.label for o in hits)
                console.print(f"  [yellow]WARN[/yellow] Ambiguous agent: {wanted} ({names})")
                continue
        if match is None:
            console.print(f"  [yellow]WARN[/yellow] Unknown agent: {wanted}")
            continue
        resolved.append(match)
    return resolved


def resolve_statuses(requested: list[str]) -> list[Option]:
    by_value = {o.value.lower(): o for o in status_options()}
    resolved: list[Option] = []
    for wanted in requested:
        option = by_value.get(wanted.lower())
        if option is None:
            console.print(f"  [yellow]WARN[/yellow] Unknown status: {wanted}")
            continue
        resolved.append(option)
    return resolved


async def apply_selection(
    dashboard: Dashboard,
    departments: Optional[list[str]] = None,
    agents: Optional[list[str]] = None,
    statuses: Optional[list[str]] = None,
    sort_order: str = "asc",
    page: int = 1,
    views: Optional[list[str]] = None,
) -> None:
    """Replace the whole selection with the command-line one.

    Omitted flags clear their selection, so a choice saved by an earlier
    run never carries over into this one.
    """
    state = dashboard.state
    dashboard.select_departments(resolve_departments(departments or [], state.departments))
    dashboard.select_candidates(resolve_agents(agents or [], state.rows))
    dashboard.select_statuses(resolve_statuses(statuses or []))
    dashboard.set_sort_order(SortOrder(sort_order))

    for view in views or []:
        if view == DEPARTMENT_VIEW:
            dashboard.set_department_view(True)
        else:
            dashboard.set_age_view(AgeView(view), True)

    if page > 1:
        dashboard.go_to_page(page)

    if views and AgeView.ARCHIVED.value in views:
        await dashboard.load_archived()


async def run_snapshot(
    workspace_path: Path,
    dry_run: bool = False,
    backend_url: Optional[str] = None,
    fixture_path: Optional[str] = None,
    quiet: bool = False,
    departments: Optional[list[str]] = None,
    agents: Optional[list[str]] = None,
    statuses: Optional[list[str]] = None,
    sort_order: str = "asc",
    page: int = 1,
    views: Optional[list[str]] = None,
) -> DashboardView:
    """Fetch everything once and return the resulting view."""
    dashboard = build_dashboard(workspace_path, dry_run, backend_url, fixture_path, quiet=quiet)
    await dashboard.refresh_departments()
    await dashboard.refresh()
    await apply_selection(dashboard, departments, agents, statuses, sort_order, page, views)
    return dashboard.view()


async def run_watch(
    workspace_path: Path,
    dry_run: bool = False,
    backend_url: Optional[str] = None,
    fixture_path: Optional[str] = None,
    departments: Optional[list[str]] = None,
    agents: Optional[list[str]] = None,
    statuses: Optional[list[str]] = None,
    sort_order: str = "asc",
    views: Optional[list[str]] = None,
) -> int:
    """Run the live dashboard until interrupted. Returns exit code."""
    dashboard = build_dashboard(workspace_path, dry_run, backend_url, fixture_path)
    legend_width = dashboard.config.get("display", {}).get("legend_width", 3)

    with Live(render_view(dashboard.view(), legend_width), console=console, refresh_per_second=4) as live:
        dashboard.on_change = lambda view: live.update(render_view(view, legend_width))
        # Agent names resolve against fetched rows, so load before selecting
        await dashboard.refresh_departments()
        await dashboard.refresh()
        await apply_selection(dashboard, departments, agents, statuses, sort_order, 1, views)
        await dashboard.start(fetch_now=False)
        try:
            while True:
                await asyncio.sleep(3600)
        except asyncio.CancelledError:
            pass
        finally:
            await dashboard.stop()
    return 0


def open_cache(workspace_path: Path) -> CacheStore:
    config = get_effective_config(workspace_path)
    return CacheStore(Path(config["_cache_dir"]))


def show_cache(workspace_path: Path) -> list[str]:
    cache = open_cache(workspace_path)
    keys = cache.keys()
    if not keys:
        console.print(f"  [dim]INFO[/dim] Cache is empty ({cache.directory})")
        return keys
    console.print(f"  Cache: {cache.directory}")
    for key in keys:
        value = cache.get(key)
        size = len(value) if isinstance(value, (list, dict)) else 1
        console.print(f"    {key:<34} {size} entries")
    return keys


def clear_cache(workspace_path: Path) -> int:
    removed = open_cache(workspace_path).clear()
    console.print(f"  [green]OK[/green] Removed {removed} cached datasets")
    return removed
