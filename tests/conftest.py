"""Shared fixtures for Ticket Board tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from ticketboard.core.cache import CacheStore
from ticketboard.models.agent import Agent, Department


@pytest.fixture
def tmp_workspace(tmp_path: Path) -> Path:
    """Create an empty workspace directory."""
    workspace = tmp_path / "desk"
    workspace.mkdir()
    return workspace


@pytest.fixture
def initialized_workspace(tmp_workspace: Path) -> Path:
    """Create a workspace with .ticketboard initialized."""
    tb_dir = tmp_workspace / ".ticketboard"
    (tb_dir / "cache").mkdir(parents=True)
    (tb_dir / "config.yaml").write_text(
        'backend:\n  url: "http://desk.internal:8080"\n\nrefresh:\n  interval_ms: 60000\n',
        encoding="utf-8",
    )
    return tmp_workspace


@pytest.fixture
def cache(tmp_path: Path) -> CacheStore:
    return CacheStore(tmp_path / "cache")


@pytest.fixture
def make_agent():
    """Build an Agent from terse keyword arguments."""

    def _make(
        name: str,
        agent_id: str | None = None,
        departments: list[str] | None = None,
        department_counts: dict[str, int] | None = None,
        aging: dict[str, dict] | None = None,
        **tickets: int,
    ) -> Agent:
        counts = {"open": 0, "hold": 0, "escalated": 0, "unassigned": 0, "inProgress": 0}
        for status, value in tickets.items():
            counts["inProgress" if status == "in_progress" else status] = value
        return Agent.model_validate(
            {
                "id": agent_id or name.lower().replace(" ", "-"),
                "name": name,
                "departmentIds": departments or [],
                "tickets": counts,
                "departmentTicketCounts": department_counts or {},
                "departmentAgingCounts": aging or {},
            }
        )

    return _make


@pytest.fixture
def sample_departments() -> list[Department]:
    return [
        Department(id="10", name="Service Desk"),
        Department(id="20", name="Network"),
    ]


@pytest.fixture
def sample_agents(make_agent) -> list[Agent]:
    """Alice and Bob share department 10; Bob also works department 20."""
    return [
        make_agent(
            "Alice",
            agent_id="a1",
            departments=["10"],
            department_counts={"10": 3},
            aging={"10": {"openBetweenOneAndFifteenDaysTickets": ["501", "502"], "holdOlderThanThirtyDaysTickets": ["480"]}},
            open=2,
            hold=1,
        ),
        make_agent(
            "Bob",
            agent_id="b2",
            departments=["10", "20"],
            department_counts={"10": 1, "20": 3},
            aging={
                "10": {"inProgressBetweenSixteenAndThirtyDaysTickets": ["611"]},
                "20": {"openBetweenOneAndFifteenDaysTickets": ["700"], "escalatedOlderThanThirtyDaysTickets": ["650", "651"]},
            },
            open=1,
            in_progress=1,
            escalated=2,
        ),
        make_agent("Idle Ivy", agent_id="i3", departments=["20"]),
    ]


@pytest.fixture
def snapshot_payload() -> dict:
    """Backend-shaped agent snapshot payload."""
    return {
        "members": [
            {
                "id": 7,
                "name": "Dana",
                "departmentIds": [10],
                "tickets": {"open": "4", "hold": None, "escalated": 1, "unassigned": 0, "inProgress": 2},
                "departmentTicketCounts": {"10": 7},
            },
        ],
        "unassignedTicketNumbers": [812, "813"],
    }
