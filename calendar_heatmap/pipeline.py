"""End-to-end calendar pipeline: aggregate, build the grid, compute the scale."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Hashable

from . import config, utils
from .aggregate import TransactionInput, aggregate
from .currency import Converter, RateTableConverter
from .domain import Domain
from .grid import CalendarGrid, build_grid
from .scale import ScaleContext, compute_scale


@dataclass(frozen=True)
class CalendarView:
    """Snapshot of everything rendered or exported for one calendar."""

    domain: Domain
    currency: str
    grid: CalendarGrid
    scale: ScaleContext
    period_label: str
    transaction_count: int = 0
    failed_ids: tuple[Hashable, ...] = ()

    @property
    def total_count(self) -> int:
        return self.transaction_count

    @property
    def title(self) -> str:
        return chart_title(self.domain, self.period_label, self.total_count)

    @property
    def description(self) -> str:
        return chart_description(self.domain)

    @property
    def file_stem(self) -> str:
        return f"{self.domain.key}-transaction-frequency"


def chart_title(domain: Domain, period_label: str, total: int) -> str:
    base = f"{domain.label} Transaction Frequency - {period_label}"
    if total > 0:
        return f"{base} • {utils.pluralise(total, 'transaction')}"
    return base


def chart_description(domain: Domain) -> str:
    return (
        f"Calendar heatmap showing daily {domain.key} transaction frequency and amounts "
        "with detailed statistics. Hover over dates for comprehensive insights including "
        "transaction counts, totals, averages, and activity levels."
    )


def build_calendar(
    transactions: TransactionInput,
    domain: Domain | str,
    currency: str = config.DEFAULT_CURRENCY,
    convert: Converter | None = None,
    *,
    reference_year: int | None = None,
    today: date | None = None,
    period_label: str = config.DEFAULT_PERIOD_LABEL,
) -> CalendarView:
    """Run the full pipeline from scratch; nothing is cached between calls."""

    domain = Domain.parse(domain)
    currency = currency.upper()
    result = aggregate(transactions, currency, convert or RateTableConverter())
    grid = build_grid(result.buckets, result.years, reference_year=reference_year, today=today)
    return CalendarView(
        domain=domain,
        currency=currency,
        grid=grid,
        scale=compute_scale(grid),
        period_label=period_label,
        transaction_count=result.transaction_count,
        failed_ids=result.failed_ids,
    )
