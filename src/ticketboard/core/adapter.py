"""Data source adapter: network first, then cache, then an empty default.

Every successful fetch overwrites that dataset's cache entry (no merge).
The department list is purged from the cache *before* it is fetched, so a
failed fetch leaves it empty; every other dataset keeps its stale cache entry
when the backend is unreachable.
"""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError
from rich.console import Console

from . import cache as keys
from .cache import CacheStore
from ..models.agent import AgentRow, Department
from ..models.source import AgentSnapshot, FetchOrigin, FetchResult
from ..sources.base import DataSource

console = Console()


def load_cached_snapshot(cache: CacheStore) -> AgentSnapshot:
    try:
        return AgentSnapshot(
            agents=cache.get(keys.MEMBERS, []) or [],
            unassigned_ticket_numbers=cache.get(keys.UNASSIGNED_TICKET_NUMBERS, []) or [],
        )
    except ValidationError:
        return AgentSnapshot()


def load_cached_departments(cache: CacheStore) -> list[Department]:
    try:
        return [Department.model_validate(d) for d in cache.get(keys.DEPARTMENTS, []) or []]
    except (ValidationError, TypeError):
        return []


def load_cached_rows(cache: CacheStore, key: str) -> list[dict]:
    rows = cache.get(key, [])
    if not isinstance(rows, list):
        return []
    return [row for row in rows if isinstance(row, dict)]


class DataSourceAdapter:
    """Wraps a raw data source with write-through caching and fallback."""

    def __init__(self, source: DataSource, cache: CacheStore, quiet: bool = False):
        self.source = source
        self.cache = cache
        self.quiet = quiet

    def _warn(self, dataset: str, result: FetchResult, fallback: str) -> None:
        if not self.quiet:
            console.print(f"  [yellow]WARN[/yellow] {dataset} fetch failed ({result.error}); {fallback}")

    async def fetch_agent_snapshot(self) -> FetchResult:
        result = await self.source.fetch_agent_snapshot()
        if result.success:
            snapshot: AgentSnapshot = result.data
            self.cache.set(keys.MEMBERS, [a.model_dump(by_alias=True) for a in snapshot.agents])
            self.cache.set(
                keys.AGENT_ROWS,
                [AgentRow.from_agent(a).model_dump(by_alias=True) for a in snapshot.agents],
            )
            self.cache.set(keys.UNASSIGNED_TICKET_NUMBERS, snapshot.unassigned_ticket_numbers)
            return result

        self._warn("Agent snapshot", result, "using cached snapshot")
        return FetchResult(
            success=False,
            origin=FetchOrigin.CACHE,
            data=load_cached_snapshot(self.cache),
            error=result.error,
        )

    async def fetch_departments(self) -> FetchResult:
        self.cache.remove(keys.DEPARTMENTS)
        result = await self.source.fetch_departments()
        if result.success:
            departments: list[Department] = result.data
            self.cache.set(keys.DEPARTMENTS, [d.model_dump() for d in departments])
            return result

        self._warn("Department list", result, "department list left empty")
        return FetchResult(success=False, origin=FetchOrigin.EMPTY, data=[], error=result.error)

    async def fetch_metrics(self) -> FetchResult:
        result = await self.source.fetch_metrics()
        if result.success:
            self.cache.set(keys.METRICS_ROWS, result.data)
            return result

        self._warn("Metrics", result, "using cached metrics")
        return FetchResult(
            success=False,
            origin=FetchOrigin.CACHE,
            data=load_cached_rows(self.cache, keys.METRICS_ROWS),
            error=result.error,
        )

    async def fetch_archived(
        self,
        department_id: Optional[str],
        departments: Optional[list[Department]] = None,
    ) -> FetchResult:
        """Archived tickets for a department, defaulting to the first known one."""
        if not department_id:
            if not departments:
                return FetchResult(success=True, origin=FetchOrigin.EMPTY, data=[])
            department_id = departments[0].id

        result = await self.source.fetch_archived(str(department_id))
        if result.success:
            return result

        self._warn("Archived tickets", result, "showing no archived rows")
        return FetchResult(success=False, origin=FetchOrigin.EMPTY, data=[], error=result.error)
