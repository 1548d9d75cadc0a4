"""Income and expense variants of the calendar."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class DomainProfile:
    """Static presentation and routing metadata for a domain."""

    key: str
    label: str
    base_rgb: tuple[int, int, int]
    list_path: str
    amount_color: str


class Domain(Enum):
    INCOME = DomainProfile(
        key="income",
        label="Income",
        base_rgb=(34, 197, 94),
        list_path="/incomes",
        amount_color="#16a34a",
    )
    EXPENSE = DomainProfile(
        key="expense",
        label="Expense",
        base_rgb=(239, 68, 68),
        list_path="/expenses",
        amount_color="#dc2626",
    )

    @classmethod
    def parse(cls, value: "Domain | str") -> "Domain":
        if isinstance(value, Domain):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if member.value.key == key:
                return member
        raise ValueError(f"unknown domain {value!r}; expected 'income' or 'expense'")

    @property
    def key(self) -> str:
        return self.value.key

    @property
    def label(self) -> str:
        return self.value.label

    @property
    def base_rgb(self) -> tuple[int, int, int]:
        return self.value.base_rgb

    @property
    def list_path(self) -> str:
        return self.value.list_path

    @property
    def amount_color(self) -> str:
        return self.value.amount_color
