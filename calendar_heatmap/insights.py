"""Cell details and calendar-level highlights for tooltips and summaries."""

from __future__ import annotations

from typing import TypedDict

from .export import activity_level, average_amount
from .grid import GridCell
from .pipeline import CalendarView

ACTIVITY_LEVELS = ("None", "Single", "Low", "Moderate", "High")


class CellDetails(TypedDict):
    label: str
    count: int
    amount: float
    average: float
    activity_level: str
    avg_per_year: float | None
    hint: str
    clickable: bool


class CellHighlight(TypedDict):
    label: str
    count: int
    amount: float


class CalendarHighlights(TypedDict):
    total_count: int
    total_amount: float
    active_days: int
    years: list[int]
    busiest_day: CellHighlight | None
    largest_day: CellHighlight | None
    activity_distribution: dict[str, int]


def cell_details(cell: GridCell, years: tuple[int, ...] | list[int]) -> CellDetails:
    if not cell.is_valid_day:
        hint = "does not exist"
    elif cell.count == 0:
        hint = "No transactions"
    else:
        hint = "Click to view details"

    return {
        "label": cell.label,
        "count": cell.count,
        "amount": float(cell.amount),
        "average": float(average_amount(cell)),
        "activity_level": activity_level(cell.count) if cell.is_valid_day else "N/A",
        "avg_per_year": round(cell.count / len(years), 1) if len(years) > 1 else None,
        "hint": hint,
        "clickable": cell.is_valid_day and cell.count > 0,
    }


def _highlight(cell: GridCell) -> CellHighlight:
    return {"label": cell.label, "count": cell.count, "amount": float(cell.amount)}


def calendar_highlights(view: CalendarView) -> CalendarHighlights:
    """Summarise the grid; ties resolve to the earliest cell in day-major order."""

    active = [cell for cell in view.grid.cells() if cell.is_valid_day and cell.count > 0]
    distribution = {level: 0 for level in ACTIVITY_LEVELS}
    for cell in view.grid.cells():
        if cell.is_valid_day:
            distribution[activity_level(cell.count)] += 1

    busiest = max(active, key=lambda cell: cell.count, default=None)
    largest = max(active, key=lambda cell: cell.amount, default=None)

    return {
        "total_count": view.total_count,
        "total_amount": round(float(view.grid.total_amount), 2),
        "active_days": len(active),
        "years": list(view.grid.years),
        "busiest_day": _highlight(busiest) if busiest else None,
        "largest_day": _highlight(largest) if largest else None,
        "activity_distribution": distribution,
    }
