"""Fixture data source for dry runs and demos.

Serves backend-shaped payloads from a JSON file (or the built-in sample)
without any network access.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from ..models.source import FetchResult
from .base import ARCHIVED_PATH, DEPARTMENTS_PATH, METRICS_PATH, SNAPSHOT_PATH, BaseSource, failure

SAMPLE_FIXTURE: dict = {
    "departments": [
        {"id": "101", "name": "Service Desk"},
        {"id": "102", "name": "Network"},
        {"id": "103", "name": "ERP"},
    ],
    "members": [
        {
            "id": "1",
            "name": "Asha Rao",
            "departmentIds": ["101", "103"],
            "tickets": {"open": 3, "hold": 1, "escalated": 0, "unassigned": 0, "inProgress": 2},
            "departmentTicketCounts": {"101": 4, "103": 2},
            "departmentAgingCounts": {
                "101": {
                    "openBetweenOneAndFifteenDaysTickets": ["4101", "4102"],
                    "holdOlderThanThirtyDaysTickets": ["3990"],
                    "inProgressBetweenSixteenAndThirtyDaysTickets": ["4050"],
                },
                "103": {
                    "openOlderThanThirtyDaysTickets": ["3801"],
                    "inProgressBetweenOneAndFifteenDaysTickets": ["4120"],
                },
            },
        },
        {
            "id": "2",
            "name": "Bilal Khan",
            "departmentIds": ["102"],
            "tickets": {"open": 1, "hold": 0, "escalated": 1, "unassigned": 0, "inProgress": 0},
            "departmentTicketCounts": {"102": 2},
            "departmentAgingCounts": {
                "102": {
                    "openBetweenSixteenAndThirtyDaysTickets": ["4011"],
                    "escalatedOlderThanThirtyDaysTickets": ["3702"],
                },
            },
        },
        {
            "id": "3",
            "name": "Chen Wei",
            "departmentIds": ["101", "102"],
            "tickets": {"open": 0, "hold": 0, "escalated": 0, "unassigned": 0, "inProgress": 0},
            "departmentTicketCounts": {},
        },
    ],
    "unassignedTicketNumbers": ["4133", "4135", "4140"],
    "metrics": [
        {"ticketNumber": "4101", "agent": "Asha Rao", "department": "Service Desk", "ageDays": 3},
        {"ticketNumber": "3702", "agent": "Bilal Khan", "department": "Network", "ageDays": 41},
    ],
    "archived": {
        "101": [{"ticketNumber": "3001", "subject": "Printer offline", "closedBy": "Asha Rao"}],
    },
}


class FixtureDataSource(BaseSource):
    name = "fixture"

    def _load(self) -> dict:
        fixture_path = self.config.get("fixture_path") or ""
        if not fixture_path:
            return SAMPLE_FIXTURE
        content = Path(fixture_path).expanduser().read_text(encoding="utf-8-sig")
        return json.loads(content)

    async def get_json(self, path: str, params: Optional[dict] = None) -> FetchResult:
        try:
            fixture = self._load()
        except Exception as e:
            return failure(f"Cannot read fixture: {e}")

        if path == DEPARTMENTS_PATH:
            data: dict = {"departments": fixture.get("departments", [])}
        elif path == SNAPSHOT_PATH:
            data = {
                "members": fixture.get("members", []),
                "unassignedTicketNumbers": fixture.get("unassignedTicketNumbers", []),
            }
        elif path == METRICS_PATH:
            data = {"rows": fixture.get("metrics", [])}
        elif path == ARCHIVED_PATH:
            department_id = str((params or {}).get("departmentId", ""))
            data = {"rows": (fixture.get("archived") or {}).get(department_id, [])}
        else:
            return failure(f"404 Not Found: {path}")

        return FetchResult(success=True, data=data)
