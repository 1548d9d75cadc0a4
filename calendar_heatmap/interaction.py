"""Turn calendar cell clicks into list-view navigation requests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable
from urllib.parse import urlencode

from . import utils
from .domain import Domain
from .grid import GridCell


@dataclass(frozen=True)
class NavigationRequest:
    domain: Domain
    start: date
    end: date

    @property
    def start_date(self) -> str:
        return utils.format_iso_date(self.start)

    @property
    def end_date(self) -> str:
        return utils.format_iso_date(self.end)

    @property
    def query(self) -> dict[str, str]:
        return {"startDate": self.start_date, "endDate": self.end_date}

    @property
    def url(self) -> str:
        return f"{self.domain.list_path}?{urlencode(self.query)}"


def map_cell_click(cell: GridCell, domain: Domain) -> NavigationRequest | None:
    """Return the +/-1 day window around ``cell``, or ``None`` for invalid or empty cells."""

    clicked = cell.date
    if clicked is None or cell.count == 0:
        return None
    return NavigationRequest(
        domain=domain,
        start=clicked - timedelta(days=1),
        end=clicked + timedelta(days=1),
    )


def dispatch_click(
    cell: GridCell,
    domain: Domain,
    navigate: Callable[[Domain, str, str], object],
) -> NavigationRequest | None:
    request = map_cell_click(cell, domain)
    if request is not None:
        navigate(request.domain, request.start_date, request.end_date)
    return request
