"""Integer money amounts in minor units, and their MT940 text form."""

from __future__ import annotations

from dataclasses import dataclass


class CurrencyMismatchError(ValueError):
    """Raised when two amounts in different currencies are combined."""


@dataclass(frozen=True)
class Money:
    """An amount in the smallest unit of its currency, e.g. cents."""

    amount: int
    currency: str

    def _check_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                f"currencies don't match: {self.currency!r} and {other.currency!r}"
            )

    def add(self, other: Money) -> Money:
        """Return the sum of both amounts."""
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: Money) -> Money:
        """Return this amount minus the other."""
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def absolute(self) -> Money:
        """Return the amount without its sign."""
        return Money(abs(self.amount), self.currency)

    def is_negative(self) -> bool:
        """Return True if the amount is below zero."""
        return self.amount < 0


def format_money(money: Money) -> str:
    """Format an amount as MT940 expects: two decimals, a comma, no grouping."""
    digits = str(abs(money.amount)).rjust(3, "0")
    text = f"{digits[:-2]},{digits[-2:]}"
    return f"-{text}" if money.amount < 0 else text