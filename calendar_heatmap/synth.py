"""Synthetic multi-year transaction generation for demos and tests.

The generator produces deterministic income or expense ledgers spanning several
years and currencies, with recurring payments, daily noise and occasional large
outliers so the percentile colour scale has something to clip.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Any
from uuid import UUID

import numpy as np
import pandas as pd

from . import utils
from .domain import Domain

DEFAULT_SEED = 7
DEFAULT_START = date(2023, 1, 1)
DEFAULT_MONTHS = 24


@dataclass(frozen=True)
class SourceProfile:
    """Static metadata for a payer or merchant."""

    name: str
    amount_range: tuple[float, float]
    currency_options: tuple[str, ...] = ("USD",)
    day_of_month: int | None = None  # recurring when set
    daily_rate: float = 0.0  # Poisson rate per weekday for non-recurring sources


CATALOGUES: dict[Domain, tuple[SourceProfile, ...]] = {
    Domain.INCOME: (
        SourceProfile("Acme Payroll", (3900.0, 4100.0), day_of_month=25),
        SourceProfile("Harbour Street Flat", (950.0, 950.0), ("GBP",), day_of_month=1),
        SourceProfile("Index Fund Dividend", (40.0, 160.0), ("USD", "EUR"), day_of_month=15),
        SourceProfile("Freelance Client", (150.0, 900.0), ("USD", "EUR", "GBP"), daily_rate=0.12),
        SourceProfile("Marketplace Sales", (8.0, 60.0), daily_rate=0.25),
    ),
    Domain.EXPENSE: (
        SourceProfile("Crown Estates Lettings", (1450.0, 1650.0), day_of_month=1),
        SourceProfile("City Power & Light", (90.0, 145.0), day_of_month=7),
        SourceProfile("Streaming Bundle", (9.99, 15.99), ("USD", "EUR"), day_of_month=18),
        SourceProfile("Corner Grocer", (12.0, 95.0), daily_rate=0.9),
        SourceProfile("Bean There Coffee", (3.5, 7.5), daily_rate=1.2),
        SourceProfile("Metro Transit", (2.75, 2.75), daily_rate=0.8),
        SourceProfile("Online Bookshop", (8.0, 45.0), ("USD", "GBP"), daily_rate=0.15),
    ),
}

# Rare large one-offs, per domain.
OUTLIERS: dict[Domain, SourceProfile] = {
    Domain.INCOME: SourceProfile("Annual Bonus", (6000.0, 12000.0)),
    Domain.EXPENSE: SourceProfile("Travel Booking", (900.0, 3200.0), ("USD", "EUR", "JPY")),
}

# Approximate units per USD, used only to keep foreign amounts realistic.
_SCALE_TO_CURRENCY = {"USD": 1.0, "EUR": 0.92, "GBP": 0.79, "JPY": 151.0}


def _uuid4_from_rng(rng: np.random.Generator) -> str:
    raw = bytearray(rng.bytes(16))
    raw[6] = (raw[6] & 0x0F) | 0x40  # version 4
    raw[8] = (raw[8] & 0x3F) | 0x80  # variant 10
    return str(UUID(bytes=bytes(raw)))


def _business_day(candidate: date) -> date:
    """Roll weekend dates back to the preceding Friday, staying inside the month.

    When the preceding Friday falls in the previous month the date rolls
    forward to Monday instead.
    """

    adjusted = candidate
    while adjusted.weekday() >= 5:
        adjusted -= timedelta(days=1)
    if adjusted.month == candidate.month:
        return adjusted
    adjusted = candidate
    while adjusted.weekday() >= 5:
        adjusted += timedelta(days=1)
    return adjusted


def _build_transaction(
    source: SourceProfile,
    *,
    posted: date,
    rng: np.random.Generator,
) -> dict[str, Any]:
    low, high = source.amount_range
    currency = str(rng.choice(source.currency_options))
    magnitude = rng.uniform(low, high) * _SCALE_TO_CURRENCY.get(currency, 1.0)
    return {
        "id": _uuid4_from_rng(rng),
        "date": pd.Timestamp(posted),
        "amount": round(float(magnitude), 2),
        "currency": currency,
        "source": source.name,
    }


def _generate_month(domain: Domain, year: int, month: int, rng: np.random.Generator) -> list[dict[str, Any]]:
    transactions: list[dict[str, Any]] = []
    days = utils.last_day_of_month(year, month - 1)

    for source in CATALOGUES[domain]:
        if source.day_of_month is not None:
            posted = _business_day(date(year, month, min(source.day_of_month, days)))
            transactions.append(_build_transaction(source, posted=posted, rng=rng))
            continue
        for offset in range(days):
            current = date(year, month, 1) + timedelta(days=offset)
            lam = source.daily_rate * (1.4 if current.weekday() >= 5 else 1.0)
            for _ in range(int(rng.poisson(lam))):
                transactions.append(_build_transaction(source, posted=current, rng=rng))

    if rng.random() < 0.2:
        day = int(rng.integers(1, days + 1))
        transactions.append(_build_transaction(OUTLIERS[domain], posted=date(year, month, day), rng=rng))

    return transactions


def generate_transactions(
    domain: Domain | str = Domain.EXPENSE,
    *,
    start: date = DEFAULT_START,
    months: int = DEFAULT_MONTHS,
    rows: int | None = None,
    seed: int | None = DEFAULT_SEED,
) -> pd.DataFrame:
    """Generate a deterministic ledger of ``months`` months starting at ``start``.

    When ``rows`` is given, the earliest ``rows`` transactions are kept.
    """

    if months <= 0:
        raise ValueError("months must be positive")
    if rows is not None and rows < 0:
        raise ValueError("rows must be non-negative")

    domain = Domain.parse(domain)
    rng = np.random.default_rng(seed)

    transactions: list[dict[str, Any]] = []
    year, month = start.year, start.month
    for _ in range(months):
        transactions.extend(_generate_month(domain, year, month, rng))
        month += 1
        if month > 12:
            month = 1
            year += 1

    df = pd.DataFrame(transactions, columns=["id", "date", "amount", "currency", "source"])
    df.sort_values(["date", "id"], inplace=True)
    df.reset_index(drop=True, inplace=True)

    if rows is not None:
        df = df.iloc[:rows].copy()
    return df


def write_synthetic_csv(
    domain: Domain | str = Domain.EXPENSE,
    *,
    output_dir: str | Path = Path("data"),
    months: int = DEFAULT_MONTHS,
    seed: int | None = DEFAULT_SEED,
) -> Path:
    """Persist a synthetic ledger as ``<domain>_transactions.csv``."""

    domain = Domain.parse(domain)
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    dataset = generate_transactions(domain, months=months, seed=seed)
    dataset_path = output_path / f"{domain.key}_transactions.csv"
    dataset.to_csv(dataset_path, index=False)
    return dataset_path


def main() -> None:  # pragma: no cover - convenience CLI
    for domain in Domain:
        print(f"Wrote {write_synthetic_csv(domain)}")


if __name__ == "__main__":  # pragma: no cover - module CLI
    main()
