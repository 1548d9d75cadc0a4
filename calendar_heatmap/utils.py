"""Shared utilities for the calendar heatmap project."""

from __future__ import annotations

import calendar
from datetime import date
from typing import Iterable, Mapping

import pandas as pd

MONTH_LABELS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

TRANSACTION_COLUMNS = ("id", "date", "amount", "currency")


def ensure_dataframe(transactions: Iterable[Mapping] | pd.DataFrame) -> pd.DataFrame:
    """Ensure the input payload is normalised to a :class:`pandas.DataFrame`."""

    if isinstance(transactions, pd.DataFrame):
        return transactions.copy()

    records = []
    for item in transactions:
        if isinstance(item, Mapping):
            records.append(dict(item))
        else:
            records.append({column: getattr(item, column) for column in TRANSACTION_COLUMNS})
    return pd.DataFrame(records, columns=list(TRANSACTION_COLUMNS) if not records else None)


def normalise_transactions(
    transactions: Iterable[Mapping] | pd.DataFrame,
    *,
    default_currency: str,
) -> pd.DataFrame:
    """Return a copy with parsed dates, float amounts and upper-case currency codes.

    Rows keep their input order. Missing ``id`` or ``currency`` columns are filled
    in; an unparseable date or amount raises :class:`ValueError`.
    """

    df = ensure_dataframe(transactions)
    if df.empty:
        return pd.DataFrame(columns=list(TRANSACTION_COLUMNS))

    if "date" not in df or "amount" not in df:
        raise ValueError("transactions need at least 'date' and 'amount' fields")

    if "id" not in df:
        df["id"] = range(len(df))
    if "currency" not in df:
        df["currency"] = default_currency

    try:
        df["date"] = pd.to_datetime(df["date"], format="mixed")
    except (TypeError, ValueError) as exc:
        raise ValueError(f"unparseable transaction date: {exc}") from exc
    if df["date"].isna().any():
        raise ValueError("transactions contain missing dates")

    try:
        df["amount"] = pd.to_numeric(df["amount"]).astype(float)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"non-numeric transaction amount: {exc}") from exc
    if df["amount"].isna().any():
        raise ValueError("transactions contain missing amounts")
    df["currency"] = df["currency"].fillna(default_currency).astype(str).str.upper()
    return df[list(TRANSACTION_COLUMNS)].reset_index(drop=True)


def last_day_of_month(year: int, month: int) -> int:
    """Return the number of days in ``month`` (0-based, January is 0) of ``year``."""

    return calendar.monthrange(year, month + 1)[1]


def month_label(month: int) -> str:
    return MONTH_LABELS[month]


def format_iso_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def format_amount(value: float) -> str:
    """Fixed two-decimal rendering used by every export."""

    return f"{value:.2f}"


def format_currency(value: float, currency: str = "USD") -> str:
    """Return a human-readable amount prefixed with the currency code."""

    return f"{currency} {value:,.2f}"


def pluralise(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"
