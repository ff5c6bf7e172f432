"""Data source result models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from .agent import Agent


class FetchOrigin(str, Enum):
    NETWORK = "network"
    CACHE = "cache"
    EMPTY = "empty"


class FetchResult(BaseModel):
    success: bool
    origin: FetchOrigin = FetchOrigin.NETWORK
    data: Any = None
    error: Optional[str] = None


class AgentSnapshot(BaseModel):
    agents: list[Agent] = []
    unassigned_ticket_numbers: list[str] = []

    @field_validator("unassigned_ticket_numbers", mode="before")
    @classmethod
    def _numbers(cls, v: Any) -> list[str]:
        if not v:
            return []
        return [str(n) for n in v if n is not None and str(n) != ""]
