"""Writing of complete MT940 statements."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Protocol, TextIO

from .converter import credit_or_debit
from .money import CurrencyMismatchError, Money, format_money


class MT940Error(Exception):
    """Raised when a statement cannot be written."""


class Transaction(Protocol):
    """A single booking that can write its own :61: and :86: lines.

    saldo, amount and date are used for the start and end saldo lines.
    """

    saldo: Money
    amount: Money
    date: datetime.date

    def convert_to_mt940(self, writer: TextIO) -> None:
        """Write the :61: and :86: lines of this transaction."""


def _saldo_line(tag: str, date: datetime.date, saldo: Money) -> str:
    return (
        f":{tag}:{credit_or_debit(saldo)}{date:%y%m%d}"
        f"{saldo.currency}{format_money(saldo.absolute())}"
    )


@dataclass
class BankData:
    """Account data and transactions of one statement, newest first."""

    account_number: str = ""
    bank_number: str = ""
    transactions: list[Transaction] = field(default_factory=list)

    def write_header_line(self, writer: TextIO) -> None:
        """Write the fixed :20: line."""
        writer.write(":20:CSVTOMT940\r\n")

    def write_account_line(self, writer: TextIO) -> None:
        """Write the :25: line with bank and account number."""
        if not self.bank_number:
            raise MT940Error("could not create account line with empty bankNumber")
        if not self.account_number:
            raise MT940Error("could not create account line with empty accountNumber")
        writer.write(f":25:{self.bank_number}/{self.account_number}\r\n")

    def write_statement_line(self, writer: TextIO) -> None:
        """Write the fixed :28C: line."""
        writer.write(":28C:0\r\n")

    def write_start_saldo_line(self, writer: TextIO) -> None:
        """Write the :60F: line, derived from the first transaction."""
        if not self.transactions:
            raise MT940Error(
                "no transactions found, could not create start saldo line"
            )
        first = self.transactions[0]
        try:
            start_saldo = first.saldo.subtract(first.amount)
        except CurrencyMismatchError as err:
            raise MT940Error(f"could not calculate beginsaldo: {err}") from err
        writer.write(_saldo_line("60F", first.date, start_saldo) + "\r\n")

    def write_end_saldo_line(self, writer: TextIO) -> None:
        """Write the :62F: line from the last transaction, without line end."""
        if not self.transactions:
            raise MT940Error("no transactions found, could not create end saldo line")
        last = self.transactions[-1]
        writer.write(_saldo_line("62F", last.date, last.saldo))

    def convert_to_mt940(self, writer: TextIO) -> None:
        """Write the whole statement to the writer."""
        self.write_header_line(writer)
        self.write_account_line(writer)
        self.write_statement_line(writer)
        self.write_start_saldo_line(writer)
        for index, transaction in enumerate(self.transactions):
            try:
                transaction.convert_to_mt940(writer)
            except (MT940Error, ValueError) as err:
                raise MT940Error(
                    f"could not convert transaction in line {index}: {err}"
                ) from err
        self.write_end_saldo_line(writer)
        writer.write("\r\n")