"""Backend data source abstraction.

A data source issues exactly one request per call, never retries and never
raises: every failure comes back as an unsuccessful FetchResult so that the
adapter can fall back to the cache.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from pydantic import ValidationError

from ..models.agent import Department
from ..models.source import AgentSnapshot, FetchOrigin, FetchResult
from ..utils.sanitize import sanitize_error

DEPARTMENTS_PATH = "/api/zoho-departments"
SNAPSHOT_PATH = "/api/zoho-assignees-with-ticket-counts"
METRICS_PATH = "/api/ticket-metrics-simple"
ARCHIVED_PATH = "/api/archived-tickets"


@runtime_checkable
class DataSource(Protocol):
    """Protocol that all data sources must implement."""

    name: str

    async def fetch_agent_snapshot(self) -> FetchResult: ...

    async def fetch_departments(self) -> FetchResult: ...

    async def fetch_metrics(self) -> FetchResult: ...

    async def fetch_archived(self, department_id: str) -> FetchResult: ...


def failure(error: str) -> FetchResult:
    return FetchResult(success=False, origin=FetchOrigin.EMPTY, error=sanitize_error(error))


class BaseSource:
    """Shared payload parsing. Subclasses provide ``get_json``."""

    name: str = "base"

    def __init__(self, source_config: dict, backend_config: dict):
        self.config = source_config
        self.backend = backend_config

    async def get_json(self, path: str, params: Optional[dict] = None) -> FetchResult:
        raise NotImplementedError

    async def fetch_agent_snapshot(self) -> FetchResult:
        result = await self.get_json(SNAPSHOT_PATH)
        if not result.success:
            return result
        payload = result.data if isinstance(result.data, dict) else {}
        try:
            snapshot = AgentSnapshot(
                agents=payload.get("members") or [],
                unassigned_ticket_numbers=payload.get("unassignedTicketNumbers") or [],
            )
        except ValidationError as e:
            return failure(f"Malformed agent snapshot: {e.error_count()} invalid fields")
        return FetchResult(success=True, data=snapshot)

    async def fetch_departments(self) -> FetchResult:
        result = await self.get_json(DEPARTMENTS_PATH)
        if not result.success:
            return result
        payload = result.data if isinstance(result.data, dict) else {}
        try:
            departments = [Department.model_validate(d) for d in payload.get("departments") or []]
        except ValidationError as e:
            return failure(f"Malformed department list: {e.error_count()} invalid fields")
        return FetchResult(success=True, data=departments)

    async def fetch_metrics(self) -> FetchResult:
        result = await self.get_json(METRICS_PATH)
        if not result.success:
            return result
        return FetchResult(success=True, data=_rows(result.data))

    async def fetch_archived(self, department_id: str) -> FetchResult:
        result = await self.get_json(ARCHIVED_PATH, params={"departmentId": department_id})
        if not result.success:
            return result
        return FetchResult(success=True, data=_rows(result.data))


def _rows(payload: Any) -> list[dict]:
    if not isinstance(payload, dict):
        return []
    return [row for row in payload.get("rows") or [] if isinstance(row, dict)]


def get_data_source(
    config: dict,
    source_override: Optional[str] = None,
    url_override: Optional[str] = None,
    transport: Any = None,
) -> BaseSource:
    """Factory function to create the configured data source."""
    source_config = dict(config.get("source", {}))
    backend_config = dict(config.get("backend", {}))
    kind = source_override or source_config.get("kind", "http")

    if url_override:
        backend_config["url"] = url_override

    if kind == "http":
        from .http import HttpDataSource
        return HttpDataSource(source_config, backend_config, transport=transport)
    elif kind == "fixture":
        from .fixture import FixtureDataSource
        return FixtureDataSource(source_config, backend_config)
    else:
        raise ValueError(f"Unknown data source: {kind}")
