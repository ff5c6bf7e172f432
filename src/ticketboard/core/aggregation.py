"""Aggregation engine: legend sums, department rosters and age-bucket sums.

All counts are non-negative ints. Legend sums are taken over the full agent
row set so that the header always reflects backend totals, whatever the
department, agent or status selection.
"""

from __future__ import annotations

from typing import Optional

from ..models.agent import AGE_BUCKETS, AGED_STATUSES, STATUSES, Agent, AgentRow, Department, TicketCounts
from ..models.view import AgeTableRow, DepartmentAgentRow
from .filters import normalize_name


def agent_rows(agents: list[Agent]) -> list[AgentRow]:
    return [AgentRow.from_agent(a) for a in agents]


def agent_total(counts: TicketCounts) -> int:
    """All five statuses summed; the figure shown when no status is selected."""
    return sum(counts.get(status) for status in STATUSES)


def legend_sums(rows: list[AgentRow]) -> dict[str, int]:
    """Per-status sums over every row."""
    sums = {status: 0 for status in STATUSES}
    for row in rows:
        for status in STATUSES:
            sums[status] += row.counts.get(status)
    return sums


def department_status_counts(agent: Agent, department_id: str) -> dict[str, int]:
    """Per-status counts for one department, from the age-bucket ticket ids.

    Unassigned is not aged, so it comes from the agent's global count.
    """
    aging = agent.aging(department_id)
    counts = {status: aging.bucket_sum(status) for status in AGED_STATUSES}
    counts["unassigned"] = agent.tickets.unassigned
    return counts


def departments_with_ticket_roster(
    departments: list[Department],
    agents: list[Agent],
) -> dict[str, list[str]]:
    """Department id -> names of its agents holding tickets there, sorted."""
    roster: dict[str, list[str]] = {}
    for dept in departments:
        names = [
            a.roster_name
            for a in agents
            if a.in_department(dept.id) and a.department_total(dept.id) > 0
        ]
        roster[dept.id] = sorted(names, key=str.casefold)
    return roster


def department_roster(
    agents: list[Agent],
    department_id: str,
    roster_names: Optional[list[str]] = None,
) -> list[DepartmentAgentRow]:
    """One row per agent of the department, plus zero rows for roster gaps.

    Names listed in ``roster_names`` that have no matching agent record are
    synthesized with all-zero counts so the roster never loses a member.
    """
    department_id = str(department_id)
    unique: dict[str, DepartmentAgentRow] = {}

    for agent in agents:
        if not agent.in_department(department_id):
            continue
        counts = department_status_counts(agent, department_id)
        unique[normalize_name(agent.name)] = DepartmentAgentRow(
            id=agent.id,
            name=agent.name.strip(),
            open=counts["open"],
            hold=counts["hold"],
            in_progress=counts["inProgress"],
            escalated=counts["escalated"],
            unassigned=counts["unassigned"],
            total_tickets=agent.department_total(department_id),
        )

    for name in roster_names or []:
        key = normalize_name(name)
        if key and key not in unique:
            unique[key] = DepartmentAgentRow(id=None, name=name.strip())

    return list(unique.values())


def department_agents_to_show(
    roster: list[DepartmentAgentRow],
    picked: Optional[list[str]] = None,
) -> list[DepartmentAgentRow]:
    """Picked agents if any were picked, otherwise agents holding tickets."""
    if picked:
        shown = [row for row in roster if row.name in picked]
    else:
        shown = [row for row in roster if row.total_tickets > 0]
    return sorted(shown, key=lambda row: row.name.casefold())


def age_bucket_sums(agent: Agent, department_id: Optional[str] = None) -> dict[str, dict[str, int]]:
    """Status -> bucket -> ticket count, for one department or all of them."""
    department_ids = [str(department_id)] if department_id else list(agent.department_aging_counts)
    sums = {status: {bucket: 0 for bucket in AGE_BUCKETS} for status in AGED_STATUSES}
    for dept in department_ids:
        aging = agent.aging(dept)
        for status in AGED_STATUSES:
            for bucket, count in aging.bucket_counts(status).items():
                sums[status][bucket] += count
    return sums


def _bucket_totals(buckets: dict[str, dict[str, int]]) -> dict[str, int]:
    return {status: sum(by_age.values()) for status, by_age in buckets.items()}


def agent_age_table(
    agents: list[Agent],
    department_id: Optional[str] = None,
    agent_names: Optional[list[str]] = None,
) -> list[AgeTableRow]:
    """Per-agent age-bucket rows, skipping agents with nothing aged."""
    wanted = {normalize_name(n) for n in agent_names or []}
    rows: list[AgeTableRow] = []
    for agent in agents:
        if department_id and not agent.in_department(department_id):
            continue
        if wanted and normalize_name(agent.name) not in wanted:
            continue
        buckets = age_bucket_sums(agent, department_id)
        totals = _bucket_totals(buckets)
        if not any(totals.values()):
            continue
        rows.append(
            AgeTableRow(
                name=agent.name.strip(),
                department_id=str(department_id) if department_id else None,
                buckets=buckets,
                totals=totals,
            )
        )
    return sorted(rows, key=lambda row: row.name.casefold())


def department_age_summary(agents: list[Agent], departments: list[Department]) -> list[AgeTableRow]:
    """Age-bucket sums per department across all of its agents."""
    summary: list[AgeTableRow] = []
    for dept in departments:
        buckets = {status: {bucket: 0 for bucket in AGE_BUCKETS} for status in AGED_STATUSES}
        for agent in agents:
            if not agent.in_department(dept.id):
                continue
            for status, by_age in age_bucket_sums(agent, dept.id).items():
                for bucket, count in by_age.items():
                    buckets[status][bucket] += count
        summary.append(
            AgeTableRow(
                name=dept.name,
                department_id=dept.id,
                buckets=buckets,
                totals=_bucket_totals(buckets),
            )
        )
    return summary
