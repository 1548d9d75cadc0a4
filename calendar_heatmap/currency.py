"""Currency conversion hooks used by the aggregator."""

from __future__ import annotations

from typing import Mapping, Protocol


class CurrencyConversionError(ValueError):
    """Raised when an amount cannot be converted between two currencies."""


class Converter(Protocol):
    def __call__(self, amount: float, from_currency: str, to_currency: str) -> float:
        ...


# Units of each currency per 1 USD. Static demo rates, not market data.
DEFAULT_RATES: dict[str, float] = {
    "USD": 1.0,
    "GBP": 0.79,
    "EUR": 0.92,
    "INR": 83.2,
    "JPY": 151.0,
    "CAD": 1.36,
    "AUD": 1.52,
}


class RateTableConverter:
    """Convert through a base currency using a static units-per-base table."""

    def __init__(self, rates: Mapping[str, float] | None = None, base: str = "USD") -> None:
        table = {code.upper(): float(rate) for code, rate in (rates or DEFAULT_RATES).items()}
        base = base.upper()
        if table.get(base) != 1.0:
            raise ValueError(f"rate table must quote {base} at 1.0")
        if any(rate <= 0 for rate in table.values()):
            raise ValueError("rates must be positive")
        self.rates = table
        self.base = base

    def _rate(self, code: str) -> float:
        try:
            return self.rates[code.upper()]
        except KeyError:
            raise CurrencyConversionError(f"no rate for currency {code!r}") from None

    def __call__(self, amount: float, from_currency: str, to_currency: str) -> float:
        if from_currency.upper() == to_currency.upper():
            return float(amount)
        in_base = float(amount) / self._rate(from_currency)
        return in_base * self._rate(to_currency)


def identity_converter(amount: float, from_currency: str, to_currency: str) -> float:
    """Converter that only accepts same-currency amounts."""

    if from_currency.upper() != to_currency.upper():
        raise CurrencyConversionError(
            f"cannot convert {from_currency} to {to_currency} without a rate table"
        )
    return float(amount)
