"""Selection state and view-model data models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class AgeView(str, Enum):
    FIFTEEN_DAYS = "fifteenDays"
    SIXTEEN_TO_THIRTY = "sixteenToThirty"
    MONTH = "month"
    PENDING = "pending"
    METRICS = "metrics"
    ARCHIVED = "archived"


AGENT_AGE_VIEWS: tuple[AgeView, ...] = (
    AgeView.FIFTEEN_DAYS,
    AgeView.SIXTEEN_TO_THIRTY,
    AgeView.MONTH,
)


class ViewMode(str, Enum):
    AGENTS = "agents"
    DEPARTMENT = "department"
    TABLES = "tables"


class Option(BaseModel):
    value: str
    label: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def _value(cls, v: Any) -> str:
        return str(v)

    @field_validator("label", mode="before")
    @classmethod
    def _label(cls, v: Any) -> str:
        return "" if v is None else str(v)


def distinct_options(options: list[Option]) -> list[Option]:
    """Drop repeated values, keeping first occurrence order."""
    seen: set[str] = set()
    result: list[Option] = []
    for option in options:
        if option.value not in seen:
            seen.add(option.value)
            result.append(option)
    return result


class FilterSelection(BaseModel):
    departments: list[Option] = []
    candidates: list[Option] = []
    statuses: list[Option] = []
    department_agents: dict[str, list[str]] = {}
    sort_order: SortOrder = SortOrder.ASC
    age_views: list[AgeView] = []
    department_view: bool = False

    @field_validator("departments", "candidates", "statuses")
    @classmethod
    def _distinct(cls, v: list[Option]) -> list[Option]:
        return distinct_options(v)

    @field_validator("age_views")
    @classmethod
    def _distinct_views(cls, v: list[AgeView]) -> list[AgeView]:
        return list(dict.fromkeys(v))

    @property
    def tables_enabled(self) -> bool:
        return bool(self.age_views) or self.department_view


class DisplayCell(BaseModel):
    candidate_name: str
    status_counts: dict[str, int] = {}
    total_count: int = 0
    index: int = 0
    stagger_index: int = 0
    delay_ms: int = 0


class LegendSums(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    open: int = 0
    hold: int = 0
    in_progress: int = Field(0, alias="inProgress")
    escalated: int = 0
    unassigned: int = 0
    total: Optional[int] = None


class DepartmentAgentRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: str
    open: int = 0
    hold: int = 0
    in_progress: int = Field(0, alias="inProgress")
    escalated: int = 0
    unassigned: int = 0
    total_tickets: int = 0

    def count(self, status: str) -> int:
        if status == "inProgress":
            return self.in_progress
        return int(getattr(self, status, 0) or 0)


class DepartmentPanel(BaseModel):
    department_id: str
    department_name: str = ""
    index: int = 1
    total: int = 0
    agents: list[DepartmentAgentRow] = []
    cells: list[DisplayCell] = []


class AgeTableRow(BaseModel):
    name: str
    department_id: Optional[str] = None
    buckets: dict[str, dict[str, int]] = {}
    totals: dict[str, int] = {}


class DashboardView(BaseModel):
    mode: ViewMode = ViewMode.AGENTS
    cells: list[DisplayCell] = []
    projected_statuses: list[str] = []
    legend: LegendSums = Field(default_factory=LegendSums)
    ticket_number: str = "00000"
    candidate_count: int = 0
    current_page: int = 1
    total_pages: int = 0
    department_index: int = 1
    department_total: int = 0
    department: Optional[DepartmentPanel] = None
    candidate_options: list[Option] = []
    department_options: list[Option] = []
    department_rosters: dict[str, list[str]] = {}
    age_table: list[AgeTableRow] = []
    age_buckets: list[str] = []
    department_summary: list[AgeTableRow] = []
    metrics_rows: list[dict] = []
    archived_rows: list[dict] = []
    stale: list[str] = []
    errors: dict[str, str] = {}
