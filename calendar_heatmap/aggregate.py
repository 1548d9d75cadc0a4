"""Per-day aggregation of transactions into currency-normalised buckets."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Hashable, Iterable, Mapping

import pandas as pd

from . import utils
from .currency import Converter

_logger = logging.getLogger(__name__)

# (year, month index 0-11, day of month)
BucketKey = tuple[int, int, int]


@dataclass(frozen=True)
class Transaction:
    """A single dated amount supplied by the caller."""

    id: Hashable
    date: date
    amount: float
    currency: str = "USD"


@dataclass(frozen=True)
class DateBucket:
    count: int
    amount: float


@dataclass(frozen=True)
class AggregationResult:
    buckets: dict[BucketKey, DateBucket]
    years: tuple[int, ...]
    transaction_count: int
    failed_ids: tuple[Hashable, ...]


TransactionInput = Iterable[Transaction | Mapping] | pd.DataFrame


def _convert_amount(
    txn_id: Hashable,
    amount: float,
    currency: str,
    target_currency: str,
    convert: Converter,
) -> float | None:
    if currency == target_currency:
        return amount
    try:
        value = convert(amount, currency, target_currency)
        value = float(value)
    except Exception as exc:
        _logger.warning(
            "Currency conversion failed for transaction %s (%s -> %s): %s",
            txn_id,
            currency,
            target_currency,
            exc,
        )
        return None
    if not math.isfinite(value):
        _logger.warning(
            "Currency conversion returned %s for transaction %s (%s -> %s)",
            value,
            txn_id,
            currency,
            target_currency,
        )
        return None
    return value


def aggregate(
    transactions: TransactionInput,
    target_currency: str,
    convert: Converter,
) -> AggregationResult:
    """Bucket transactions by calendar day, converting amounts to ``target_currency``.

    Every transaction counts once towards its day. A transaction whose conversion
    fails still counts but contributes no amount, and its id is reported in
    ``failed_ids``. Transactions are never deduplicated by id.
    """

    target_currency = target_currency.upper()
    df = utils.normalise_transactions(transactions, default_currency=target_currency)
    if df.empty:
        return AggregationResult(buckets={}, years=(), transaction_count=0, failed_ids=())

    converted: list[float] = []
    failed: list[Hashable] = []
    for row in df.itertuples(index=False):
        value = _convert_amount(row.id, row.amount, row.currency, target_currency, convert)
        if value is None:
            failed.append(row.id)
            value = 0.0
        converted.append(value)

    df["converted"] = converted
    df["year"] = df["date"].dt.year
    df["month"] = df["date"].dt.month - 1
    df["day"] = df["date"].dt.day

    grouped = df.groupby(["year", "month", "day"]).agg(
        count=("id", "size"),
        amount=("converted", "sum"),
    )
    buckets = {
        (int(year), int(month), int(day)): DateBucket(count=int(row["count"]), amount=float(row["amount"]))
        for (year, month, day), row in grouped.iterrows()
    }
    years = tuple(sorted(int(year) for year in df["year"].unique()))

    return AggregationResult(
        buckets=buckets,
        years=years,
        transaction_count=len(df),
        failed_ids=tuple(failed),
    )


def aggregate_transactions(
    transactions: TransactionInput,
    target_currency: str,
    convert: Converter,
) -> dict[BucketKey, DateBucket]:
    """Return only the bucket mapping of :func:`aggregate`."""

    return aggregate(transactions, target_currency, convert).buckets


def distinct_years(transactions: TransactionInput) -> tuple[int, ...]:
    df = utils.normalise_transactions(transactions, default_currency="USD")
    if df.empty:
        return ()
    return tuple(sorted(int(year) for year in df["date"].dt.year.unique()))
