"""Tests for models/."""

from __future__ import annotations

from ticketboard.models.agent import Agent, AgentRow, AgingBuckets, TicketCounts, coerce_count
from ticketboard.models.source import AgentSnapshot
from ticketboard.models.view import AgeView, FilterSelection, LegendSums, Option


class TestCoerceCount:
    def test_numbers(self):
        assert coerce_count(3) == 3
        assert coerce_count(2.9) == 2

    def test_numeric_strings(self):
        assert coerce_count("12") == 12
        assert coerce_count(" 4 ") == 4

    def test_garbage_becomes_zero(self):
        assert coerce_count(None) == 0
        assert coerce_count("") == 0
        assert coerce_count("n/a") == 0
        assert coerce_count(True) == 0
        assert coerce_count([1]) == 0

    def test_non_finite_becomes_zero(self):
        assert coerce_count("inf") == 0
        assert coerce_count("Infinity") == 0
        assert coerce_count("-inf") == 0
        assert coerce_count(float("inf")) == 0
        assert coerce_count(1e400) == 0
        assert coerce_count("nan") == 0

    def test_never_negative(self):
        assert coerce_count(-5) == 0


class TestTicketCounts:
    def test_wire_alias(self):
        counts = TicketCounts.model_validate({"open": 1, "inProgress": "3"})
        assert counts.in_progress == 3
        assert counts.get("inProgress") == 3

    def test_total_sums_every_status(self):
        counts = TicketCounts(open=1, hold=2, escalated=3, unassigned=4, in_progress=5)
        assert counts.total == 15

    def test_unknown_status_is_zero(self):
        assert TicketCounts(open=2).get("closed") == 0

    def test_dump_uses_wire_names(self):
        dumped = TicketCounts(in_progress=2).model_dump(by_alias=True)
        assert dumped["inProgress"] == 2


class TestAgingBuckets:
    def test_ids_are_strings(self):
        aging = AgingBuckets.model_validate({"openBetweenOneAndFifteenDaysTickets": [101, "102"]})
        assert aging.tickets("open", "1-15") == ["101", "102"]

    def test_bucket_counts(self):
        aging = AgingBuckets.model_validate(
            {
                "holdBetweenOneAndFifteenDaysTickets": ["1"],
                "holdOlderThanThirtyDaysTickets": ["2", "3"],
            }
        )
        assert aging.bucket_counts("hold") == {"1-15": 1, "16-30": 0, ">30": 2}
        assert aging.bucket_sum("hold") == 3

    def test_ticket_listed_twice_keeps_youngest_bucket(self):
        aging = AgingBuckets.model_validate(
            {
                "openBetweenOneAndFifteenDaysTickets": ["9"],
                "openOlderThanThirtyDaysTickets": ["9", "10"],
            }
        )
        assert aging.tickets("open", "1-15") == ["9"]
        assert aging.tickets("open", ">30") == ["10"]
        assert aging.bucket_sum("open") == 2

    def test_same_id_in_different_statuses_is_kept(self):
        aging = AgingBuckets.model_validate(
            {
                "openBetweenOneAndFifteenDaysTickets": ["9"],
                "holdBetweenOneAndFifteenDaysTickets": ["9"],
            }
        )
        assert aging.bucket_sum("open") == 1
        assert aging.bucket_sum("hold") == 1

    def test_unassigned_is_not_aged(self):
        assert AgingBuckets().tickets("unassigned", "1-15") == []

    def test_null_lists(self):
        aging = AgingBuckets.model_validate({"openOlderThanThirtyDaysTickets": None})
        assert aging.tickets("open", ">30") == []


class TestAgent:
    def test_coerces_wire_payload(self, snapshot_payload):
        agent = Agent.model_validate(snapshot_payload["members"][0])
        assert agent.id == "7"
        assert agent.department_ids == ["10"]
        assert agent.tickets.open == 4
        assert agent.tickets.hold == 0

    def test_missing_tickets(self):
        agent = Agent.model_validate({"name": "Eve", "tickets": None})
        assert agent.tickets.total == 0

    def test_roster_name_fallbacks(self):
        assert Agent(name="x", display_name="Display").roster_name == "Display"
        assert Agent(name="", full_name="Full Name").roster_name == "Full Name"
        assert Agent(name="", email="e@example.com").roster_name == "e@example.com"
        assert Agent(name="").roster_name == "Unknown"

    def test_department_helpers(self, make_agent):
        agent = make_agent("Alice", departments=["10"], department_counts={"10": "3"})
        assert agent.in_department("10")
        assert agent.in_department(10)
        assert not agent.in_department("20")
        assert agent.department_total("10") == 3
        assert agent.department_total("20") == 0
        assert agent.aging("20").bucket_sum("open") == 0


class TestAgentRow:
    def test_key_joins_departments(self, make_agent):
        row = AgentRow.from_agent(make_agent("Bob", agent_id="b2", departments=["10", "20"], open=1))
        assert row.key == "10,20_b2"
        assert row.counts.open == 1

    def test_key_without_department(self, make_agent):
        row = AgentRow.from_agent(make_agent("Solo", agent_id="s1"))
        assert row.key == "no_department_s1"


class TestAgentSnapshot:
    def test_ticket_numbers_are_strings(self, snapshot_payload):
        snapshot = AgentSnapshot(
            agents=snapshot_payload["members"],
            unassigned_ticket_numbers=snapshot_payload["unassignedTicketNumbers"],
        )
        assert snapshot.unassigned_ticket_numbers == ["812", "813"]
        assert snapshot.agents[0].name == "Dana"

    def test_drops_empty_numbers(self):
        snapshot = AgentSnapshot(unassigned_ticket_numbers=[None, "", "5"])
        assert snapshot.unassigned_ticket_numbers == ["5"]


class TestFilterSelection:
    def test_duplicate_options_removed(self):
        selection = FilterSelection(
            departments=[Option(value="10", label="A"), Option(value=10, label="A again")],
        )
        assert [o.label for o in selection.departments] == ["A"]

    def test_tables_enabled(self):
        assert not FilterSelection().tables_enabled
        assert FilterSelection(age_views=[AgeView.METRICS]).tables_enabled
        assert FilterSelection(department_view=True).tables_enabled

    def test_age_views_distinct(self):
        selection = FilterSelection(age_views=["month", "month", "pending"])
        assert selection.age_views == [AgeView.MONTH, AgeView.PENDING]


class TestLegendSums:
    def test_total_absent_by_default(self):
        assert LegendSums().total is None

    def test_alias_in_dump(self):
        assert LegendSums(in_progress=4).model_dump(by_alias=True)["inProgress"] == 4
