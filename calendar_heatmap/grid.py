"""Roll per-day buckets onto a single 31 x 12 reference-year calendar."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator, Mapping

import pandas as pd

from . import utils
from .aggregate import BucketKey, DateBucket

DAYS = 31
MONTHS = 12


@dataclass(frozen=True)
class GridCell:
    """One (day of month, month) position.

    ``year`` is the reference year: the cell date is a display anchor, not the
    origin of the data summed into it.
    """

    day: int
    month: int
    year: int
    count: int
    amount: float
    is_valid_day: bool
    is_today: bool

    @property
    def date(self) -> date | None:
        if not self.is_valid_day:
            return None
        return date(self.year, self.month + 1, self.day)

    @property
    def month_label(self) -> str:
        return utils.month_label(self.month)

    @property
    def label(self) -> str:
        return f"{self.month_label} {self.day}"


@dataclass(frozen=True)
class CalendarGrid:
    rows: tuple[tuple[GridCell, ...], ...]
    years: tuple[int, ...]
    reference_year: int

    def cells(self) -> Iterator[GridCell]:
        """Yield cells day-major, then month."""

        for row in self.rows:
            yield from row

    def cell(self, day: int, month: int) -> GridCell:
        return self.rows[day - 1][month]

    @property
    def total_count(self) -> int:
        return sum(cell.count for cell in self.cells())

    @property
    def total_amount(self) -> float:
        return sum(cell.amount for cell in self.cells())

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "day": cell.day,
                    "month": cell.month,
                    "month_label": cell.month_label,
                    "count": cell.count,
                    "amount": cell.amount,
                    "is_valid_day": cell.is_valid_day,
                    "is_today": cell.is_today,
                }
                for cell in self.cells()
            ]
        )


def build_grid(
    buckets: Mapping[BucketKey, DateBucket],
    years: Iterable[int],
    reference_year: int | None = None,
    today: date | None = None,
) -> CalendarGrid:
    """Sum each (month, day) across ``years`` into a reference-year grid.

    Month lengths, including whether Feb 29 exists, come from ``reference_year``
    alone. Days past the end of a month are invalid and stay empty.
    """

    today = today or date.today()
    reference_year = reference_year if reference_year is not None else today.year
    year_set = tuple(sorted(set(int(year) for year in years)))

    rows: list[tuple[GridCell, ...]] = []
    for day in range(1, DAYS + 1):
        row: list[GridCell] = []
        for month in range(MONTHS):
            count = 0
            amount = 0.0
            is_today = False
            is_valid = day <= utils.last_day_of_month(reference_year, month)
            if is_valid:
                for year in year_set:
                    bucket = buckets.get((year, month, day))
                    if bucket is not None:
                        count += bucket.count
                        amount += bucket.amount
                    if (year, month + 1, day) == (today.year, today.month, today.day):
                        is_today = True
            row.append(
                GridCell(
                    day=day,
                    month=month,
                    year=reference_year,
                    count=count,
                    amount=amount,
                    is_valid_day=is_valid,
                    is_today=is_today,
                )
            )
        rows.append(tuple(row))

    return CalendarGrid(rows=tuple(rows), years=year_set, reference_year=reference_year)
