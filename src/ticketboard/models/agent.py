"""Agent, department and ticket-count data models.

Field aliases follow the backend's camelCase wire format so that cached
snapshots round-trip verbatim.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Wire keys, in the order the backend reports them
STATUSES: tuple[str, ...] = ("open", "hold", "escalated", "unassigned", "inProgress")

# Statuses that carry age buckets (unassigned tickets are not aged)
AGED_STATUSES: tuple[str, ...] = ("open", "hold", "inProgress", "escalated")

AGE_BUCKETS: tuple[str, ...] = ("1-15", "16-30", ">30")

_STATUS_ATTR = {
    "open": "open",
    "hold": "hold",
    "escalated": "escalated",
    "unassigned": "unassigned",
    "inProgress": "in_progress",
}

_BUCKET_ATTR = {
    "1-15": "one_to_fifteen",
    "16-30": "sixteen_to_thirty",
    ">30": "older_than_thirty",
}


def coerce_count(value: Any) -> int:
    """Coerce a wire count to a non-negative int. Garbage becomes 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


def _to_str_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, (str, int)):
        value = [value]
    return [str(v) for v in value if v is not None and str(v) != ""]


class TicketCounts(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    open: int = 0
    hold: int = 0
    escalated: int = 0
    unassigned: int = 0
    in_progress: int = Field(0, alias="inProgress")

    @field_validator("open", "hold", "escalated", "unassigned", "in_progress", mode="before")
    @classmethod
    def _coerce(cls, v: Any) -> int:
        return coerce_count(v)

    def get(self, status: str) -> int:
        attr = _STATUS_ATTR.get(status)
        return getattr(self, attr) if attr else 0

    def as_dict(self) -> dict[str, int]:
        return {status: self.get(status) for status in STATUSES}

    @property
    def total(self) -> int:
        return sum(self.get(status) for status in STATUSES)


class AgingBuckets(BaseModel):
    """Ticket ids per status, split by age: 1-15 days, 16-30 days, >30 days."""

    model_config = ConfigDict(populate_by_name=True)

    open_one_to_fifteen: list[str] = Field(default_factory=list, alias="openBetweenOneAndFifteenDaysTickets")
    open_sixteen_to_thirty: list[str] = Field(default_factory=list, alias="openBetweenSixteenAndThirtyDaysTickets")
    open_older_than_thirty: list[str] = Field(default_factory=list, alias="openOlderThanThirtyDaysTickets")
    hold_one_to_fifteen: list[str] = Field(default_factory=list, alias="holdBetweenOneAndFifteenDaysTickets")
    hold_sixteen_to_thirty: list[str] = Field(default_factory=list, alias="holdBetweenSixteenAndThirtyDaysTickets")
    hold_older_than_thirty: list[str] = Field(default_factory=list, alias="holdOlderThanThirtyDaysTickets")
    in_progress_one_to_fifteen: list[str] = Field(default_factory=list, alias="inProgressBetweenOneAndFifteenDaysTickets")
    in_progress_sixteen_to_thirty: list[str] = Field(default_factory=list, alias="inProgressBetweenSixteenAndThirtyDaysTickets")
    in_progress_older_than_thirty: list[str] = Field(default_factory=list, alias="inProgressOlderThanThirtyDaysTickets")
    escalated_one_to_fifteen: list[str] = Field(default_factory=list, alias="escalatedBetweenOneAndFifteenDaysTickets")
    escalated_sixteen_to_thirty: list[str] = Field(default_factory=list, alias="escalatedBetweenSixteenAndThirtyDaysTickets")
    escalated_older_than_thirty: list[str] = Field(default_factory=list, alias="escalatedOlderThanThirtyDaysTickets")

    @field_validator("*", mode="before")
    @classmethod
    def _ids(cls, v: Any) -> list[str]:
        return _to_str_list(v)

    @model_validator(mode="after")
    def _drop_double_counted(self) -> "AgingBuckets":
        # A ticket keeps only its youngest bucket within a status
        for status in AGED_STATUSES:
            seen: set[str] = set()
            for bucket in AGE_BUCKETS:
                attr = self._attr(status, bucket)
                kept = []
                for ticket_id in getattr(self, attr):
                    if ticket_id not in seen:
                        seen.add(ticket_id)
                        kept.append(ticket_id)
                setattr(self, attr, kept)
        return self

    @staticmethod
    def _attr(status: str, bucket: str) -> str:
        return f"{_STATUS_ATTR[status]}_{_BUCKET_ATTR[bucket]}"

    def tickets(self, status: str, bucket: str) -> list[str]:
        if status not in AGED_STATUSES or bucket not in AGE_BUCKETS:
            return []
        return getattr(self, self._attr(status, bucket))

    def bucket_counts(self, status: str) -> dict[str, int]:
        return {bucket: len(self.tickets(status, bucket)) for bucket in AGE_BUCKETS}

    def bucket_sum(self, status: str) -> int:
        return sum(self.bucket_counts(status).values())


class Agent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: str = ""
    display_name: Optional[str] = Field(None, alias="displayName")
    full_name: Optional[str] = Field(None, alias="fullName")
    email: Optional[str] = None
    department_ids: list[str] = Field(default_factory=list, alias="departmentIds")
    tickets: TicketCounts = Field(default_factory=TicketCounts)
    department_ticket_counts: dict[str, int] = Field(default_factory=dict, alias="departmentTicketCounts")
    department_aging_counts: dict[str, AgingBuckets] = Field(default_factory=dict, alias="departmentAgingCounts")
    latest_unassigned_ticket_id: Optional[str] = Field(None, alias="latestUnassignedTicketId")

    @field_validator("id", "latest_unassigned_ticket_id", mode="before")
    @classmethod
    def _optional_str(cls, v: Any) -> Optional[str]:
        return None if v is None or v == "" else str(v)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("department_ids", mode="before")
    @classmethod
    def _department_ids(cls, v: Any) -> list[str]:
        return _to_str_list(v)

    @field_validator("tickets", mode="before")
    @classmethod
    def _tickets(cls, v: Any) -> Any:
        return v if v is not None else {}

    @field_validator("department_ticket_counts", mode="before")
    @classmethod
    def _department_counts(cls, v: Any) -> dict[str, int]:
        if not isinstance(v, dict):
            return {}
        return {str(k): coerce_count(count) for k, count in v.items()}

    @field_validator("department_aging_counts", mode="before")
    @classmethod
    def _department_aging(cls, v: Any) -> dict[str, Any]:
        if not isinstance(v, dict):
            return {}
        return {str(k): (aging or {}) for k, aging in v.items()}

    @property
    def roster_name(self) -> str:
        """Name used in department rosters and dropdowns."""
        return self.display_name or self.full_name or self.name or self.email or "Unknown"

    def in_department(self, department_id: str) -> bool:
        return str(department_id) in self.department_ids

    def department_total(self, department_id: str) -> int:
        return self.department_ticket_counts.get(str(department_id), 0)

    def aging(self, department_id: str) -> AgingBuckets:
        return self.department_aging_counts.get(str(department_id)) or AgingBuckets()


class Department(BaseModel):
    id: str
    name: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v: Any) -> str:
        return str(v)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return "" if v is None else str(v)


class AgentRow(BaseModel):
    """Flattened per-agent counts, as shown in the agents grid."""

    name: str
    counts: TicketCounts = Field(default_factory=TicketCounts)
    department_ids: list[str] = []
    latest_unassigned_ticket_id: Optional[str] = None
    key: str = ""

    @classmethod
    def from_agent(cls, agent: Agent) -> "AgentRow":
        departments = ",".join(agent.department_ids) if agent.department_ids else "no_department"
        return cls(
            name=agent.name,
            counts=agent.tickets,
            department_ids=list(agent.department_ids),
            latest_unassigned_ticket_id=agent.latest_unassigned_ticket_id,
            key=f"{departments}_{agent.id}",
        )
