"""In-memory dashboard state and its cache persistence."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError

from . import cache as keys
from .adapter import load_cached_departments, load_cached_rows, load_cached_snapshot
from .aggregation import agent_rows
from .cache import CacheStore
from ..models.agent import Agent, AgentRow, Department
from ..models.view import FilterSelection, Option


def _options(raw: Any) -> list[Option]:
    if not isinstance(raw, list):
        return []
    options: list[Option] = []
    for item in raw:
        try:
            options.append(Option.model_validate(item))
        except ValidationError:
            continue
    return options


def _agent_rows(raw: Any, agents: list[Agent]) -> list[AgentRow]:
    if isinstance(raw, list) and raw:
        try:
            return [AgentRow.model_validate(r) for r in raw]
        except ValidationError:
            pass
    return agent_rows(agents)


@dataclass
class DashboardState:
    agents: list[Agent] = field(default_factory=list)
    rows: list[AgentRow] = field(default_factory=list)
    departments: list[Department] = field(default_factory=list)
    metrics_rows: list[dict] = field(default_factory=list)
    archived_rows: list[dict] = field(default_factory=list)
    unassigned_ticket_numbers: list[str] = field(default_factory=list)
    unassigned_index: int = 0
    latest_ticket_number: Optional[str] = None
    selection: FilterSelection = field(default_factory=FilterSelection)
    current_page: int = 1
    department_index: int = 1
    department_rows: list[dict] = field(default_factory=list)
    department_summary_rows: list[dict] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_cache(cls, cache: CacheStore) -> "DashboardState":
        """Initial state from every cache key; unreadable keys become empty."""
        snapshot = load_cached_snapshot(cache)
        latest = cache.get(keys.LATEST_UNASSIGNED_TICKET_NUMBER)
        selection = FilterSelection(
            departments=_options(cache.get(keys.SELECTED_DEPARTMENTS, [])),
            candidates=_options(cache.get(keys.SELECTED_CANDIDATES, [])),
            statuses=_options(cache.get(keys.SELECTED_STATUSES, [])),
        )
        return cls(
            agents=snapshot.agents,
            rows=_agent_rows(cache.get(keys.AGENT_ROWS, []), snapshot.agents),
            departments=load_cached_departments(cache),
            metrics_rows=load_cached_rows(cache, keys.METRICS_ROWS),
            unassigned_ticket_numbers=snapshot.unassigned_ticket_numbers,
            latest_ticket_number=str(latest) if latest not in (None, "") else None,
            selection=selection,
            department_rows=load_cached_rows(cache, keys.DEPARTMENT_ROWS),
            department_summary_rows=load_cached_rows(cache, keys.DEPARTMENT_SUMMARY_ROWS),
        )

    def replace_agents(self, agents: list[Agent], unassigned_ticket_numbers: list[str]) -> None:
        """Swap in a new snapshot wholesale."""
        self.agents = list(agents)
        self.rows = agent_rows(agents)
        if unassigned_ticket_numbers != self.unassigned_ticket_numbers:
            self.unassigned_index = 0
        self.unassigned_ticket_numbers = list(unassigned_ticket_numbers)

    def current_ticket_number(self) -> Optional[str]:
        numbers = self.unassigned_ticket_numbers
        if not numbers:
            return None
        if self.unassigned_index >= len(numbers):
            return numbers[0]
        return numbers[self.unassigned_index]

    @property
    def stale(self) -> list[str]:
        return sorted(self.errors)

    def persist_selection(self, cache: CacheStore) -> None:
        cache.set(keys.SELECTED_DEPARTMENTS, [o.model_dump() for o in self.selection.departments])
        cache.set(keys.SELECTED_CANDIDATES, [o.model_dump() for o in self.selection.candidates])
        cache.set(keys.SELECTED_STATUSES, [o.model_dump() for o in self.selection.statuses])

    def persist_derived(self, cache: CacheStore) -> None:
        cache.set(keys.DEPARTMENT_ROWS, self.department_rows)
        cache.set(keys.DEPARTMENT_SUMMARY_ROWS, self.department_summary_rows)

    def persist_ticket_number(self, cache: CacheStore) -> None:
        number = self.current_ticket_number()
        if number is not None:
            self.latest_ticket_number = number
            cache.set(keys.LATEST_UNASSIGNED_TICKET_NUMBER, number)
