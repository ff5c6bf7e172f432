"""Tests for core/projector.py."""

from __future__ import annotations

from ticketboard.core.aggregation import agent_rows
from ticketboard.core.projector import (
    build_legend,
    build_view,
    carousel_ticket_number,
    pad_ticket_number,
    sort_rows,
)
from ticketboard.core.state import DashboardState
from ticketboard.models.view import AgeView, FilterSelection, Option, SortOrder, ViewMode


def _opts(*values: str) -> list[Option]:
    return [Option(value=v, label=v) for v in values]


def _state(agents, departments=None, /, **selection) -> DashboardState:
    state = DashboardState(departments=list(departments or []), selection=FilterSelection(**selection))
    state.replace_agents(agents, [])
    return state


class TestTicketNumber:
    def test_pads_to_width(self):
        assert pad_ticket_number("42") == "00042"
        assert pad_ticket_number(123456) == "123456"

    def test_no_numbers_and_no_history(self):
        assert carousel_ticket_number([], 0) == "00000"

    def test_falls_back_to_last_shown(self):
        assert carousel_ticket_number([], 0, latest="812") == "00812"

    def test_empty_sequence_keeps_cached_number(self, make_agent):
        state = _state([make_agent("Alice", open=1)])
        state.latest_ticket_number = "4140"
        view = build_view(state)
        assert view.legend.unassigned == 0
        assert view.ticket_number == "04140"

    def test_carousel_position(self):
        numbers = ["1", "2", "3"]
        for k in range(7):
            assert carousel_ticket_number(numbers, k % len(numbers)) == pad_ticket_number(numbers[k % 3])

    def test_out_of_range_index_shows_first(self):
        assert carousel_ticket_number(["7", "8"], 5) == "00007"


class TestLegend:
    def test_total_hidden_unless_selected(self, make_agent):
        rows = agent_rows([make_agent("Alice", open=2, hold=1)])
        assert build_legend(rows, _opts("open")).total is None

    def test_total_of_selected_statuses(self, make_agent):
        rows = agent_rows([make_agent("Alice", open=2, hold=1, escalated=5)])
        legend = build_legend(rows, _opts("open", "hold", "total"))
        assert legend.total == 3
        assert legend.escalated == 5

    def test_only_total_sums_every_status(self, make_agent):
        rows = agent_rows([make_agent("Alice", open=2, hold=1, unassigned=4)])
        assert build_legend(rows, _opts("total")).total == 7


class TestSorting:
    def test_ascending_and_descending(self, make_agent):
        rows = agent_rows([make_agent("Bob", open=1), make_agent("Alice", open=1)])
        assert [r.name for r in sort_rows(rows, SortOrder.ASC)] == ["Alice", "Bob"]
        assert [r.name for r in sort_rows(rows, SortOrder.DESC)] == ["Bob", "Alice"]


class TestBuildView:
    def test_agents_mode_hides_idle_agents(self, sample_agents):
        view = build_view(_state(sample_agents))
        assert view.mode == ViewMode.AGENTS
        assert [c.candidate_name for c in view.cells] == ["Alice", "Bob"]
        assert view.projected_statuses == []
        assert view.cells[1].total_count == 4

    def test_projected_status_boxes(self, sample_agents):
        view = build_view(_state(sample_agents, statuses=_opts("open", "escalated")))
        assert view.cells[1].status_counts == {"open": 1, "escalated": 2}

    def test_legend_ignores_filters(self, sample_agents):
        view = build_view(_state(sample_agents, candidates=_opts("Alice")))
        assert [c.candidate_name for c in view.cells] == ["Alice"]
        assert view.legend.open == 3
        assert view.legend.escalated == 2

    def test_pagination_and_stagger(self, make_agent):
        agents = [make_agent(f"Agent {i:02d}", open=1) for i in range(32)]
        state = _state(agents)
        state.current_page = 3
        view = build_view(state, {"display": {"stagger_ms": 10}})
        assert view.total_pages == 3
        assert view.current_page == 3
        assert [c.index for c in view.cells] == [30, 31]
        assert [c.stagger_index for c in view.cells] == [0, 1]
        assert view.cells[1].delay_ms == 10

    def test_page_resets_when_rows_shrink(self, make_agent):
        state = _state([make_agent("Solo", open=1)])
        state.current_page = 2
        assert build_view(state).current_page == 1

    def test_department_mode(self, sample_agents, sample_departments):
        state = _state(sample_agents, sample_departments, departments=[Option(value="20", label="Network")])
        view = build_view(state)
        assert view.mode == ViewMode.DEPARTMENT
        assert view.department.department_name == "Network"
        assert [a.name for a in view.department.agents] == ["Bob"]
        assert view.department.cells[0].total_count == 3

    def test_department_picks(self, sample_agents, sample_departments):
        state = _state(
            sample_agents,
            sample_departments,
            departments=[Option(value="20", label="Network")],
            department_agents={"20": ["Idle Ivy"]},
        )
        view = build_view(state)
        assert [a.name for a in view.department.agents] == ["Idle Ivy"]

    def test_department_index_resets(self, sample_agents, sample_departments):
        state = _state(sample_agents, sample_departments, departments=[Option(value="10", label="Service Desk")])
        state.department_index = 4
        view = build_view(state)
        assert view.department_index == 1
        assert view.department.department_id == "10"

    def test_tables_mode_age_buckets(self, sample_agents, sample_departments):
        state = _state(sample_agents, sample_departments, age_views=[AgeView.MONTH, AgeView.FIFTEEN_DAYS])
        view = build_view(state)
        assert view.mode == ViewMode.TABLES
        assert view.age_buckets == ["1-15", ">30"]
        assert [r.name for r in view.age_table] == ["Alice", "Bob"]
        assert view.department_summary == []

    def test_tables_mode_department_summary_and_metrics(self, sample_agents, sample_departments):
        state = _state(sample_agents, sample_departments, age_views=[AgeView.METRICS], department_view=True)
        state.metrics_rows = [{"ticketNumber": "1"}]
        view = build_view(state)
        assert len(view.department_summary) == 2
        assert view.metrics_rows == [{"ticketNumber": "1"}]
        assert view.age_table == []

    def test_stale_datasets_reported(self, sample_agents):
        state = _state(sample_agents)
        state.errors = {"metrics": "timeout", "agents": "refused"}
        assert build_view(state).stale == ["agents", "metrics"]

    def test_dropdown_options_ignore_selection(self, sample_agents, sample_departments):
        state = _state(sample_agents, sample_departments, candidates=_opts("Bob"))
        view = build_view(state)
        assert [c.candidate_name for c in view.cells] == ["Bob"]
        assert [o.value for o in view.candidate_options] == ["Alice", "Bob"]
        assert [(o.value, o.label) for o in view.department_options] == [("20", "Network"), ("10", "Service Desk")]
        assert view.department_rosters == {"10": ["Alice", "Bob"], "20": ["Bob"]}
