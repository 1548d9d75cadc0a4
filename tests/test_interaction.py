"""Tests for cell click navigation."""

from __future__ import annotations

from datetime import date

from calendar_heatmap import grid, interaction
from calendar_heatmap.domain import Domain
from calendar_heatmap.grid import GridCell


def _cell(day: int, month: int, year: int, count: int, *, valid: bool = True) -> GridCell:
    return GridCell(
        day=day,
        month=month,
        year=year,
        count=count,
        amount=float(count) * 10,
        is_valid_day=valid,
        is_today=False,
    )


def test_click_builds_three_day_window() -> None:
    request = interaction.map_cell_click(_cell(5, 2, 2024, 3), Domain.EXPENSE)

    assert request is not None
    assert request.domain is Domain.EXPENSE
    assert request.start_date == "2024-03-04"
    assert request.end_date == "2024-03-06"
    assert request.url == "/expenses?startDate=2024-03-04&endDate=2024-03-06"


def test_click_window_crosses_year_boundary() -> None:
    request = interaction.map_cell_click(_cell(1, 0, 2024, 1), Domain.INCOME)

    assert request is not None
    assert (request.start_date, request.end_date) == ("2023-12-31", "2024-01-02")
    assert request.url.startswith("/incomes?")


def test_click_on_invalid_day_is_ignored() -> None:
    calendar_grid = grid.build_grid({}, [], reference_year=2024, today=date(2024, 1, 1))
    invalid = calendar_grid.cell(30, 1)

    assert interaction.map_cell_click(invalid, Domain.EXPENSE) is None
    assert interaction.map_cell_click(_cell(30, 1, 2024, 5, valid=False), Domain.EXPENSE) is None


def test_click_on_empty_day_is_ignored() -> None:
    assert interaction.map_cell_click(_cell(5, 2, 2024, 0), Domain.EXPENSE) is None


def test_dispatch_click_calls_sink_only_for_requests() -> None:
    calls: list[tuple[Domain, str, str]] = []

    def sink(domain: Domain, start_date: str, end_date: str) -> None:
        calls.append((domain, start_date, end_date))

    interaction.dispatch_click(_cell(5, 2, 2024, 0), Domain.EXPENSE, sink)
    request = interaction.dispatch_click(_cell(10, 6, 2024, 2), Domain.INCOME, sink)

    assert request is not None
    assert calls == [(Domain.INCOME, "2024-07-09", "2024-07-11")]
