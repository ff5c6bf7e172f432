"""Dashboard controller.

Owns the current-state slot, applies fetch results and selection changes,
recomputes the view synchronously after every mutation, persists what
changed and keeps the timer lines in step with the data shape.
"""

from __future__ import annotations

from typing import Callable, Optional

from rich.console import Console

from .adapter import DataSourceAdapter
from .aggregation import department_age_summary
from .cache import CacheStore
from .config import DEFAULT_CONFIG
from .filters import toggle_department_agent
from .pagination import next_department, next_page, previous_department
from .projector import build_view
from .scheduler import Scheduler
from .state import DashboardState
from ..models.source import FetchOrigin, FetchResult
from ..models.view import AGENT_AGE_VIEWS, AgeView, DashboardView, FilterSelection, Option, SortOrder

console = Console()

BULK_REFRESH = "bulk-refresh"
UNASSIGNED_CAROUSEL = "unassigned-carousel"
PAGE_ROTATION = "page-rotation"
ARCHIVED_LOAD = "archived-load"


class Dashboard:
    def __init__(
        self,
        adapter: DataSourceAdapter,
        cache: CacheStore,
        config: Optional[dict] = None,
        scheduler: Optional[Scheduler] = None,
        on_change: Optional[Callable[[DashboardView], None]] = None,
        state: Optional[DashboardState] = None,
        quiet: bool = False,
    ):
        self.adapter = adapter
        self.cache = cache
        self.config = config or DEFAULT_CONFIG
        self.scheduler = scheduler or Scheduler()
        self.on_change = on_change
        self.state = state if state is not None else DashboardState.from_cache(cache)
        self.quiet = quiet
        self.running = False
        self._generation = 0
        self._applied_generation = 0
        self._view: Optional[DashboardView] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def refresh_config(self) -> dict:
        return {**DEFAULT_CONFIG["refresh"], **(self.config.get("refresh") or {})}

    async def start(self, fetch_now: bool = True) -> None:
        """Fetch departments once, then arm the bulk refresh (fires immediately).

        With `fetch_now=False` the caller has already loaded both, and the
        first refresh waits one full interval.
        """
        self.running = True
        if fetch_now:
            await self.refresh_departments()
        self.scheduler.arm(
            BULK_REFRESH,
            self.refresh_config["interval_ms"],
            self.refresh,
            immediate=fetch_now,
        )
        self._changed()

    async def stop(self) -> None:
        self.running = False
        await self.scheduler.shutdown()

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _record(self, dataset: str, result: FetchResult) -> None:
        if result.success:
            self.state.errors.pop(dataset, None)
        else:
            self.state.errors[dataset] = result.error or "unavailable"

    async def refresh_departments(self) -> None:
        result = await self.adapter.fetch_departments()
        self.state.departments = list(result.data or [])
        self._record("departments", result)
        self._changed()

    async def refresh(self) -> None:
        """One bulk refresh tick: agent snapshot, then metrics."""
        self._generation += 1
        generation = self._generation

        snapshot_result = await self.adapter.fetch_agent_snapshot()
        metrics_result = await self.adapter.fetch_metrics()

        if self.refresh_config.get("discard_stale_responses") and generation < self._applied_generation:
            if not self.quiet:
                console.print(f"  [dim]INFO[/dim] Dropped refresh #{generation}, newer data already applied")
            return
        self._applied_generation = max(self._applied_generation, generation)

        snapshot = snapshot_result.data
        if snapshot is not None:
            self.state.replace_agents(snapshot.agents, snapshot.unassigned_ticket_numbers)
        self._record("agents", snapshot_result)

        self.state.metrics_rows = list(metrics_result.data or [])
        self._record("metrics", metrics_result)

        if not self.quiet:
            origin = "live" if snapshot_result.origin == FetchOrigin.NETWORK else "cached"
            console.print(
                f"  [green]OK[/green] Refresh #{generation}: {len(self.state.agents)} agents ({origin}), "
                f"{len(self.state.unassigned_ticket_numbers)} unassigned"
            )
        self._changed()

    async def load_archived(self) -> None:
        """Archived tickets for the visible department."""
        view = self.view()
        department_id = view.department.department_id if view.department else None
        result = await self.adapter.fetch_archived(department_id, self.state.departments)
        self.state.archived_rows = list(result.data or [])
        self._record("archived", result)
        self._changed()

    def _schedule_archived(self) -> None:
        if self.running and AgeView.ARCHIVED in self.state.selection.age_views:
            self.scheduler.spawn(ARCHIVED_LOAD, self.load_archived())

    # ------------------------------------------------------------------
    # Selection changes
    # ------------------------------------------------------------------

    def _update_selection(self, **changes) -> None:
        self.state.selection = FilterSelection.model_validate({**self.state.selection.model_dump(), **changes})
        self._changed(persist_selection=True)

    def select_departments(self, departments: list[Option]) -> None:
        self._update_selection(departments=departments)
        self._schedule_archived()

    def select_candidates(self, candidates: list[Option]) -> None:
        self._update_selection(candidates=candidates)

    def select_statuses(self, statuses: list[Option]) -> None:
        self._update_selection(statuses=statuses)

    def toggle_department_agent(self, department_id: str, agent_name: str) -> None:
        picks = toggle_department_agent(self.state.selection.department_agents, str(department_id), agent_name)
        self._update_selection(department_agents=picks)

    def set_sort_order(self, order: SortOrder) -> None:
        self._update_selection(sort_order=SortOrder(order))

    def set_age_view(self, age_view: AgeView, enabled: bool) -> None:
        views = [v for v in self.state.selection.age_views if v != age_view]
        if enabled:
            views.append(AgeView(age_view))
        self._update_selection(age_views=views)
        if age_view == AgeView.ARCHIVED and enabled:
            self._schedule_archived()

    def set_agent_age_views(self, enabled: bool) -> None:
        """Group toggle for the three agent age-bucket views."""
        views = [v for v in self.state.selection.age_views if v not in AGENT_AGE_VIEWS]
        if enabled:
            views.extend(AGENT_AGE_VIEWS)
        self._update_selection(age_views=views)

    def set_department_view(self, enabled: bool) -> None:
        self._update_selection(department_view=enabled)

    def clear_tables(self) -> None:
        self._update_selection(age_views=[])

    def next_department(self) -> None:
        count = len(self.state.selection.departments)
        self.state.department_index = next_department(self.state.department_index, count)
        self._changed()
        self._schedule_archived()

    def previous_department(self) -> None:
        count = len(self.state.selection.departments)
        self.state.department_index = previous_department(self.state.department_index, count)
        self._changed()
        self._schedule_archived()

    # ------------------------------------------------------------------
    # Carousels
    # ------------------------------------------------------------------

    def rotate_carousel(self) -> None:
        numbers = self.state.unassigned_ticket_numbers
        if not numbers:
            return
        self.state.unassigned_index = (self.state.unassigned_index + 1) % len(numbers)
        self._changed()

    def go_to_page(self, page: int) -> None:
        self.state.current_page = page
        self._changed()

    def rotate_page(self) -> None:
        pages = self.view().total_pages
        self.state.current_page = next_page(self.state.current_page, pages)
        self._changed()

    # ------------------------------------------------------------------
    # Recompute
    # ------------------------------------------------------------------

    def view(self) -> DashboardView:
        if self._view is None:
            self._view = build_view(self.state, self.config)
        return self._view

    def _changed(self, persist_selection: bool = False) -> DashboardView:
        view = build_view(self.state, self.config)
        self.state.current_page = view.current_page
        self.state.department_index = view.department_index
        self._view = view

        self.state.department_rows = (
            [a.model_dump(by_alias=True) for a in view.department.agents] if view.department else []
        )
        self.state.department_summary_rows = [
            row.model_dump() for row in department_age_summary(self.state.agents, self.state.departments)
        ]
        self.state.persist_derived(self.cache)
        self.state.persist_ticket_number(self.cache)
        if persist_selection:
            self.state.persist_selection(self.cache)

        self._sync_timers(view)
        if self.on_change is not None:
            self.on_change(view)
        return view

    def _sync_timers(self, view: DashboardView) -> None:
        if not self.running:
            return
        refresh = self.refresh_config
        numbers = self.state.unassigned_ticket_numbers
        self.scheduler.ensure(
            UNASSIGNED_CAROUSEL,
            bool(numbers),
            refresh["carousel_ms"],
            self.rotate_carousel,
            key=tuple(numbers),
        )
        self.scheduler.ensure(
            PAGE_ROTATION,
            view.total_pages > 1,
            refresh["page_rotation_ms"],
            self.rotate_page,
            key=view.candidate_count,
        )
