"""Tests for the 31 x 12 reference-year grid."""

from __future__ import annotations

from datetime import date

import numpy as np
import pandas as pd
from calendar_heatmap import aggregate, currency, grid, utils
from calendar_heatmap.aggregate import DateBucket


def test_grid_shape_and_invalid_days_for_non_leap_reference() -> None:
    calendar_grid = grid.build_grid({}, [], reference_year=2023, today=date(2023, 6, 1))

    assert len(calendar_grid.rows) == 31
    assert all(len(row) == 12 for row in calendar_grid.rows)

    invalid = [(cell.day, cell.month) for cell in calendar_grid.cells() if not cell.is_valid_day]
    assert sorted(invalid) == [(29, 1), (30, 1), (31, 1), (31, 3), (31, 5), (31, 8), (31, 10)]


def test_feb_29_follows_reference_year_only() -> None:
    buckets = {(2024, 1, 29): DateBucket(count=4, amount=80.0)}

    leap = grid.build_grid(buckets, [2024], reference_year=2024, today=date(2000, 1, 1))
    non_leap = grid.build_grid(buckets, [2024], reference_year=2023, today=date(2000, 1, 1))

    assert leap.cell(29, 1).is_valid_day
    assert leap.cell(29, 1).count == 4
    assert not non_leap.cell(29, 1).is_valid_day
    assert non_leap.cell(29, 1).count == 0
    assert non_leap.cell(29, 1).amount == 0.0


def test_cells_sum_across_years() -> None:
    buckets = {
        (2023, 2, 5): DateBucket(count=1, amount=100.0),
        (2024, 2, 5): DateBucket(count=1, amount=50.0),
    }
    calendar_grid = grid.build_grid(buckets, [2024, 2023], reference_year=2024, today=date(2000, 1, 1))
    cell = calendar_grid.cell(5, 2)

    assert (cell.count, cell.amount) == (2, 150.0)
    assert cell.month_label == "Mar"
    assert cell.label == "Mar 5"
    assert cell.date == date(2024, 3, 5)
    assert calendar_grid.years == (2023, 2024)


def test_invalid_cells_have_no_date() -> None:
    calendar_grid = grid.build_grid({}, [], reference_year=2024, today=date(2024, 1, 1))
    cell = calendar_grid.cell(30, 1)
    assert not cell.is_valid_day
    assert cell.date is None


def test_is_today_matches_any_year_in_set() -> None:
    buckets = {(2023, 2, 5): DateBucket(count=1, amount=1.0)}
    today = date(2023, 3, 5)

    calendar_grid = grid.build_grid(buckets, [2023, 2024], reference_year=2024, today=today)
    assert calendar_grid.cell(5, 2).is_today
    assert sum(cell.is_today for cell in calendar_grid.cells()) == 1

    outside = grid.build_grid(buckets, [2024], reference_year=2024, today=today)
    assert not any(cell.is_today for cell in outside.cells())


def test_total_count_matches_input_for_random_transactions() -> None:
    rng = np.random.default_rng(11)
    days = pd.date_range("2020-01-01", "2024-12-31", freq="D")
    picks = rng.integers(0, len(days), size=600)
    transactions = pd.DataFrame(
        {
            "id": range(len(picks)),
            "date": days[picks],
            "amount": rng.uniform(1, 500, size=len(picks)).round(2),
            "currency": rng.choice(["USD", "EUR", "GBP"], size=len(picks)),
        }
    )
    result = aggregate.aggregate(transactions, "USD", currency.RateTableConverter())
    calendar_grid = grid.build_grid(result.buckets, result.years, reference_year=2024)

    assert calendar_grid.total_count == len(transactions)
    for cell in calendar_grid.cells():
        if cell.day > utils.last_day_of_month(2024, cell.month):
            assert not cell.is_valid_day
            assert cell.count == 0 and cell.amount == 0.0


def test_traversal_is_day_major() -> None:
    calendar_grid = grid.build_grid({}, [], reference_year=2024, today=date(2024, 1, 1))
    cells = list(calendar_grid.cells())
    assert len(cells) == 372
    assert [(c.day, c.month) for c in cells[:13]] == [(1, m) for m in range(12)] + [(2, 0)]


def test_to_frame_has_one_row_per_cell() -> None:
    calendar_grid = grid.build_grid({}, [], reference_year=2024, today=date(2024, 1, 1))
    frame = calendar_grid.to_frame()
    assert len(frame) == 372
    assert {"day", "month", "month_label", "count", "amount", "is_valid_day", "is_today"} == set(frame.columns)
