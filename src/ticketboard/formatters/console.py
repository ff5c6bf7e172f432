"""Terminal renderer for the dashboard view-model (rich)."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text

from ..models.view import AgeTableRow, DashboardView, DisplayCell, LegendSums, ViewMode

STATUS_LABELS = {
    "open": "OPEN",
    "hold": "HOLD",
    "inProgress": "IN PROGRESS",
    "escalated": "ESCALATED",
    "unassigned": "UNASSIGNED",
}

STATUS_COLORS = {
    "open": "red",
    "hold": "yellow",
    "inProgress": "green",
    "escalated": "dark_orange",
    "unassigned": "magenta",
}


def _pad(value: int, width: int = 3) -> str:
    return str(value).rjust(width, "0")


def render_legend(legend: LegendSums, ticket_number: str, width: int = 3) -> Text:
    text = Text()
    values = {
        "open": legend.open,
        "hold": legend.hold,
        "inProgress": legend.in_progress,
        "escalated": legend.escalated,
        "unassigned": legend.unassigned,
    }
    for status, value in values.items():
        text.append(f"{STATUS_LABELS[status]} ", style=f"bold {STATUS_COLORS[status]}")
        text.append(_pad(value, width), style="bold")
        if status == "unassigned":
            text.append(f" #{ticket_number}", style="bold magenta blink")
        text.append("   ")
    if legend.total is not None:
        text.append("TOTAL ", style="bold cyan")
        text.append(_pad(legend.total, width), style="bold")
    return text


def _cells_table(title: str, cells: list[DisplayCell], statuses: list[str]) -> Table:
    table = Table(title=title, expand=False)
    table.add_column("Agent", style="white")
    if statuses:
        for status in statuses:
            table.add_column(STATUS_LABELS.get(status, status.upper()), justify="right", style=STATUS_COLORS.get(status, ""))
    else:
        table.add_column("Total", justify="right", style="bold")
    for cell in cells:
        if statuses:
            table.add_row(cell.candidate_name, *(str(cell.status_counts.get(s, 0)) for s in statuses))
        else:
            table.add_row(cell.candidate_name, str(cell.total_count))
    return table


def _age_table(title: str, rows: list[AgeTableRow], buckets: list[str]) -> Table:
    table = Table(title=title, expand=False)
    table.add_column("Name")
    statuses = list(rows[0].buckets) if rows else []
    for status in statuses:
        label = STATUS_LABELS.get(status, status)
        if buckets:
            for bucket in buckets:
                table.add_column(f"{label} {bucket}d", justify="right")
        else:
            table.add_column(label, justify="right")
    for row in rows:
        values: list[str] = []
        for status in statuses:
            if buckets:
                values.extend(str(row.buckets[status].get(b, 0)) for b in buckets)
            else:
                values.append(str(row.totals.get(status, 0)))
        table.add_row(row.name, *values)
    return table


def _dict_table(title: str, rows: list[dict]) -> Table:
    table = Table(title=title, expand=False)
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    for column in columns:
        table.add_column(str(column))
    for row in rows:
        table.add_row(*(str(row.get(c, "")) for c in columns))
    return table


def render_view(view: DashboardView, legend_width: int = 3) -> RenderableType:
    parts: list[RenderableType] = [render_legend(view.legend, view.ticket_number, legend_width)]

    if view.mode == ViewMode.TABLES:
        if view.age_table:
            parts.append(_age_table("Agent ticket age", view.age_table, view.age_buckets))
        if view.department_summary:
            parts.append(_age_table("Departments", view.department_summary, view.age_buckets))
        if view.metrics_rows:
            parts.append(_dict_table("Metrics", view.metrics_rows))
        if view.archived_rows:
            parts.append(_dict_table("Archived tickets", view.archived_rows))
    elif view.mode == ViewMode.DEPARTMENT and view.department is not None:
        panel = view.department
        title = f"{panel.department_name.upper()}  ({panel.index}/{panel.total})"
        parts.append(_cells_table(title, panel.cells, view.projected_statuses))
    else:
        title = f"Agents  (page {view.current_page}/{max(view.total_pages, 1)})"
        parts.append(_cells_table(title, view.cells, view.projected_statuses))

    if view.stale:
        parts.append(Text(f"Stale: {', '.join(view.stale)}", style="dim yellow"))
    return Group(*parts)
