"""Filter pipeline: department and agent row filters, status projection.

Row filters run in a fixed order (departments, then agent names). An empty
selection is the identity transform. Status selection never removes rows; it
only decides which count columns get projected.
"""

from __future__ import annotations

from typing import Optional

from ..models.agent import STATUSES, Agent, AgentRow, Department
from ..models.view import Option

TOTAL = "total"

STATUS_OPTIONS: tuple[tuple[str, str], ...] = (
    ("open", "Open"),
    ("hold", "Hold"),
    ("inProgress", "In Progress"),
    ("escalated", "Escalated"),
    (TOTAL, "Total"),
)


def status_options() -> list[Option]:
    return [Option(value=value, label=label) for value, label in STATUS_OPTIONS]


def normalize_name(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def filter_by_departments(agents: list[Agent], departments: list[Option]) -> list[Agent]:
    if not departments:
        return list(agents)
    allowed = {str(d.value) for d in departments}
    return [a for a in agents if any(dept in allowed for dept in a.department_ids)]


def filter_by_candidates(agents: list[Agent], candidates: list[Option]) -> list[Agent]:
    if not candidates:
        return list(agents)
    allowed = {normalize_name(c.value) for c in candidates}
    return [a for a in agents if normalize_name(a.name) in allowed]


def apply_filters(
    agents: list[Agent],
    departments: list[Option],
    candidates: list[Option],
) -> list[Agent]:
    """Department filter, then candidate filter."""
    return filter_by_candidates(filter_by_departments(agents, departments), candidates)


def projected_statuses(statuses: list[Option]) -> list[str]:
    """Status columns to render per row. Empty means "total only".

    No selection, or only "total", renders the summed total. Any other
    selection renders one box per selected status, "total" excluded.
    """
    keys = [s.value for s in statuses]
    if not keys or keys == [TOTAL]:
        return []
    return [k for k in keys if k != TOTAL]


def legend_total_requested(statuses: list[Option]) -> bool:
    return any(s.value == TOTAL for s in statuses)


def candidate_options(rows: list[AgentRow]) -> list[Option]:
    """Distinct, sorted agent names with at least one non-zero count."""
    names: set[str] = set()
    for row in rows:
        name = row.name.strip()
        if not name:
            continue
        if any(row.counts.get(status) > 0 for status in STATUSES):
            names.add(name)
    return [Option(value=name, label=name) for name in sorted(names)]


def filter_candidate_option(option: Option, search: str, selected: list[Option]) -> bool:
    """Search-box matcher for the agent dropdown; selected options always match."""
    if not search:
        return True
    if any(sel.value == option.value for sel in selected):
        return True
    return search.lower() in option.label.lower()


def department_options(departments: list[Department]) -> list[Option]:
    """Department dropdown entries sorted by name."""
    ordered = sorted(departments, key=lambda d: d.name)
    return [Option(value=d.id, label=d.name) for d in ordered]


def toggle_department_agent(
    picks: dict[str, list[str]],
    department_id: str,
    agent_name: str,
) -> dict[str, list[str]]:
    """Return a copy of the per-department agent picks with one name toggled."""
    current = list(picks.get(department_id, []))
    if agent_name in current:
        current = [n for n in current if n != agent_name]
    else:
        current.append(agent_name)
    updated = {k: list(v) for k, v in picks.items()}
    updated[department_id] = current
    return updated
