"""View projector: pure function from dashboard state to the display model.

filters -> aggregation -> pagination -> projection. Nothing here touches the
cache, the network or the clock.
"""

from __future__ import annotations

from typing import Optional

from ..models.agent import AGE_BUCKETS, STATUSES, AgentRow
from ..models.view import (
    AgeView,
    DashboardView,
    DepartmentAgentRow,
    DepartmentPanel,
    DisplayCell,
    LegendSums,
    SortOrder,
    ViewMode,
)
from .aggregation import (
    agent_age_table,
    agent_rows,
    agent_total,
    department_age_summary,
    department_agents_to_show,
    department_roster,
    departments_with_ticket_roster,
    legend_sums,
)
from .filters import (
    apply_filters,
    candidate_options,
    department_options,
    filter_by_departments,
    legend_total_requested,
    projected_statuses,
)
from .pagination import (
    PAGE_SIZE,
    current_department,
    page_bounds,
    reset_department_index,
    reset_page,
    total_pages,
)
from .state import DashboardState

AGE_VIEW_BUCKETS = {
    AgeView.FIFTEEN_DAYS: "1-15",
    AgeView.SIXTEEN_TO_THIRTY: "16-30",
    AgeView.MONTH: ">30",
}


def pad_ticket_number(number: object, width: int = 5) -> str:
    return str(number).rjust(width, "0")


def carousel_ticket_number(
    numbers: list[str],
    index: int,
    latest: Optional[str] = None,
    width: int = 5,
) -> str:
    """Ticket number under the carousel cursor, else the last one shown, else zeros."""
    if numbers:
        number = numbers[index] if 0 <= index < len(numbers) else numbers[0]
        return pad_ticket_number(number, width)
    if latest:
        return pad_ticket_number(latest, width)
    return "0" * width


def build_legend(rows: list[AgentRow], statuses: list) -> LegendSums:
    sums = legend_sums(rows)
    total: Optional[int] = None
    if legend_total_requested(statuses):
        counted = projected_statuses(statuses) or list(STATUSES)
        total = sum(sums.get(status, 0) for status in counted)
    return LegendSums(
        open=sums["open"],
        hold=sums["hold"],
        in_progress=sums["inProgress"],
        escalated=sums["escalated"],
        unassigned=sums["unassigned"],
        total=total,
    )


def sort_rows(rows: list[AgentRow], order: SortOrder) -> list[AgentRow]:
    return sorted(rows, key=lambda row: row.name, reverse=order == SortOrder.DESC)


def non_zero_rows(rows: list[AgentRow]) -> list[AgentRow]:
    return [row for row in rows if agent_total(row.counts) > 0]


def candidate_rows(state: DashboardState) -> list[AgentRow]:
    """Filtered, sorted agents holding at least one ticket."""
    selection = state.selection
    filtered = apply_filters(state.agents, selection.departments, selection.candidates)
    rows = agent_rows(filtered)
    return non_zero_rows(sort_rows(rows, selection.sort_order))


def project_cell(
    name: str,
    counts: dict[str, int],
    total: int,
    projected: list[str],
    index: int,
    stagger_index: int,
    stagger_ms: int,
) -> DisplayCell:
    return DisplayCell(
        candidate_name=name,
        status_counts={key: counts.get(key, 0) for key in projected},
        total_count=total,
        index=index,
        stagger_index=stagger_index,
        delay_ms=stagger_index * stagger_ms,
    )


def _department_cells(
    agents: list[DepartmentAgentRow],
    projected: list[str],
    stagger_ms: int,
) -> list[DisplayCell]:
    cells = []
    for i, agent in enumerate(agents):
        counts = {status: agent.count(status) for status in STATUSES}
        cells.append(project_cell(agent.name, counts, agent.total_tickets, projected, i, i, stagger_ms))
    return cells


def build_department_panel(
    state: DashboardState,
    department_index: int,
    projected: list[str],
    stagger_ms: int = 65,
    rosters: Optional[dict[str, list[str]]] = None,
) -> Optional[DepartmentPanel]:
    selected = state.selection.departments
    visible = current_department(selected, department_index)
    if not visible:
        return None
    option = visible[0]
    department_id = str(option.value)

    if rosters is None:
        rosters = departments_with_ticket_roster(state.departments, state.agents)
    roster_names = rosters.get(department_id, [])
    roster = department_roster(state.agents, department_id, roster_names)
    shown = department_agents_to_show(roster, state.selection.department_agents.get(department_id))

    return DepartmentPanel(
        department_id=department_id,
        department_name=option.label,
        index=department_index,
        total=len(selected),
        agents=shown,
        cells=_department_cells(shown, projected, stagger_ms),
    )


def build_view(state: DashboardState, config: Optional[dict] = None) -> DashboardView:
    """Assemble the display model for the current state and selection."""
    display = (config or {}).get("display", {})
    page_size = display.get("page_size", PAGE_SIZE)
    width = display.get("ticket_number_width", 5)
    stagger_ms = display.get("stagger_ms", 65)

    selection = state.selection
    projected = projected_statuses(selection.statuses)

    # Agents grid
    rows = candidate_rows(state)
    pages = total_pages(len(rows), page_size)
    page = reset_page(state.current_page, pages)
    start, end = page_bounds(len(rows), page, page_size)
    cells = [
        project_cell(row.name, row.counts.as_dict(), agent_total(row.counts), projected, i, i - start, stagger_ms)
        for i, row in enumerate(rows[start:end], start=start)
    ]

    # Department carousel
    rosters = departments_with_ticket_roster(state.departments, state.agents)
    department_index = reset_department_index(state.department_index, len(selection.departments))
    panel = build_department_panel(state, department_index, projected, stagger_ms, rosters)

    view = DashboardView(
        mode=ViewMode.AGENTS,
        cells=cells,
        projected_statuses=projected,
        legend=build_legend(state.rows, selection.statuses),
        ticket_number=carousel_ticket_number(
            state.unassigned_ticket_numbers,
            state.unassigned_index,
            state.latest_ticket_number,
            width,
        ),
        candidate_count=len(rows),
        current_page=page,
        total_pages=pages,
        department_index=department_index,
        department_total=len(selection.departments),
        department=panel,
        candidate_options=candidate_options(state.rows),
        department_options=department_options(state.departments),
        department_rosters=rosters,
        stale=state.stale,
        errors=dict(state.errors),
    )

    if panel is not None:
        view.mode = ViewMode.DEPARTMENT

    if selection.tables_enabled:
        view.mode = ViewMode.TABLES
        _fill_tables(view, state, panel)

    return view


def _fill_tables(view: DashboardView, state: DashboardState, panel: Optional[DepartmentPanel]) -> None:
    selection = state.selection
    department_id = panel.department_id if panel else None
    picked = selection.department_agents.get(department_id, []) if department_id else []

    view.age_buckets = [
        AGE_VIEW_BUCKETS[v] for v in selection.age_views if v in AGE_VIEW_BUCKETS
    ]
    view.age_buckets.sort(key=AGE_BUCKETS.index)

    if view.age_buckets or AgeView.PENDING in selection.age_views:
        members = filter_by_departments(state.agents, selection.departments)
        view.age_table = agent_age_table(members, department_id, picked)
    if selection.department_view:
        view.department_summary = department_age_summary(state.agents, state.departments)
    if AgeView.METRICS in selection.age_views:
        view.metrics_rows = list(state.metrics_rows)
    if AgeView.ARCHIVED in selection.age_views:
        view.archived_rows = list(state.archived_rows)
