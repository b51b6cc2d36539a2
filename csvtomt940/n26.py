"""Reading of N26 CSV exports and their MT940 transaction lines."""

from __future__ import annotations

import csv
import datetime
import io
import re
from dataclasses import dataclass
from typing import BinaryIO, TextIO

from .converter import (
    UsageTooLongError,
    convert_umlauts,
    convert_usage_to_fields,
    credit_or_debit,
    is_debit,
    join_fields_with_control,
    money_string_to_int,
    split_string_in_parts,
)
from .money import CurrencyMismatchError, Money, format_money
from .mt940 import BankData, MT940Error

# Column positions in the N26 CSV file: booking date, value date, partner
# name, partner account, type, reference, category, amount, foreign amount,
# foreign currency, exchange rate.
_DATE = 0
_PAYEE = 2
_TRANSACTION_TYPE = 4
_REFERENCE = 5
_CATEGORY = 6
_AMOUNT = 7

_CURRENCY = "EUR"
_MAX_PAYEE_LENGTH = 54
_MAX_MULTIPURPOSE_LENGTH = 390
_MULTIPURPOSE_LINE_LENGTH = 65

_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

_MASTERCARD_PAYMENTS = frozenset({"MasterCard Payment", "MasterCard Zahlung"})

GVC_CODES = {
    "Income": "051",
    "Gutschrift": "051",
    "Credit Transfer": "051",
    "Outgoing Transfer": "020",
    "Überweisung": "020",
    "Debit Transfer": "020",
    "Presentment": "020",
    "Lastschrift": "005",
    "Direct Debit": "005",
    "MasterCard Payment Credit": "051",  # incoming payments to the card
    "MasterCard Zahlung Credit": "051",
    "MasterCard Payment Debit": "004",  # outgoing payments from the card
    "MasterCard Zahlung Debit": "004",
    "N26 Empfehlung": "051",  # cashback
    "Reward": "051",
    "N26 Referral": "051",
    "Fee": "808",
    "Presentment Refund": "059",
}


def _parse_date(text: str) -> datetime.date:
    if not _DATE_PATTERN.fullmatch(text):
        raise ValueError(f'parsing time "{text}" as "YYYY-MM-DD"')
    return datetime.datetime.strptime(text, "%Y-%m-%d").date()


def is_mastercard_payment(transaction_type: str) -> bool:
    """Return True for card payments, whose GVC code depends on the sign."""
    return transaction_type in _MASTERCARD_PAYMENTS


def get_amount(entry_amount: str) -> str:
    """Pad an amount with a single decimal place to two decimal places."""
    decimal_position = entry_amount.find(".")
    if len(entry_amount) - decimal_position <= 2:
        return entry_amount + "0"
    return entry_amount


def extract_account_and_bank_number(iban: str) -> tuple[str, str]:
    """Return bank number and account number from a German IBAN."""
    iban = iban.replace(" ", "")
    if len(iban) < 12:
        raise ValueError(f"iban {iban!r} is too short")
    return iban[4:12], iban[12:].strip()


@dataclass
class N26Transaction:
    """One booking of an N26 CSV export."""

    date: datetime.date
    saldo: Money
    amount: Money
    payee: str = ""
    transaction_type: str = ""
    transaction_type_lookup: str = ""
    category: str = ""
    reference: str = ""

    @classmethod
    def from_csv(
        cls, entry: list[str], start_saldo: Money, has_category: bool
    ) -> N26Transaction:
        """Build a transaction from one CSV row.

        The saldo of the result is start_saldo plus the row's amount.
        """
        offset = 0 if has_category else -1
        try:
            date = _parse_date(entry[_DATE])
        except ValueError as err:
            raise ValueError(
                f"could not parse date from {entry[_DATE]}: {err}"
            ) from err
        try:
            cents = money_string_to_int(get_amount(entry[_AMOUNT + offset]))
        except ValueError as err:
            raise ValueError(f"could not parse amount to int: {err}") from err
        amount = Money(cents, _CURRENCY)

        transaction_type = entry[_TRANSACTION_TYPE]
        lookup = transaction_type
        if is_mastercard_payment(transaction_type):
            direction = "Debit" if is_debit(amount) else "Credit"
            lookup = f"{transaction_type} {direction}"

        try:
            saldo = amount.add(start_saldo)
        except CurrencyMismatchError as err:
            raise ValueError(f"could not add startsaldo to amount: {err}") from err

        return cls(
            date=date,
            saldo=saldo,
            amount=amount,
            payee=entry[_PAYEE][:_MAX_PAYEE_LENGTH],
            transaction_type=transaction_type,
            transaction_type_lookup=lookup,
            category=entry[_CATEGORY],
            reference=entry[_REFERENCE],
        )

    def write_sales_line(self, writer: TextIO) -> None:
        """Write the :61: line; N26 has no value date, so the date is used twice."""
        writer.write(
            f":61:{self.date:%y%m%d}{self.date:%m%d}"
            f"{credit_or_debit(self.amount)}"
            f"{format_money(self.amount.absolute())}NTRFNONREF\r\n"
        )

    def write_multipurpose_line(self, writer: TextIO) -> None:
        """Write the :86: line, wrapped every 65 characters."""
        gvc_code = GVC_CODES.get(self.transaction_type_lookup)
        if gvc_code is None:
            raise MT940Error(
                f"could not find gvc code for text: {self.transaction_type_lookup}"
            )
        payee_fields = ""
        if self.payee:
            payee_fields, _ = join_fields_with_control(
                split_string_in_parts(self.payee, 27, True), 32
            )
        try:
            usage_fields = convert_usage_to_fields(self.reference)
        except UsageTooLongError as err:
            raise MT940Error(f"could not convert reference line: {err}") from err

        line = (
            f"{gvc_code}?00{convert_umlauts(self.transaction_type)}"
            f"{usage_fields}{payee_fields}"
        )
        if len(line.encode("utf-8")) > _MAX_MULTIPURPOSE_LENGTH:
            raise MT940Error("mulitpurpose line is too long")
        parts = split_string_in_parts(line, _MULTIPURPOSE_LINE_LENGTH, False)
        writer.write(":86:" + "\r\n".join(parts) + "\r\n")

    def convert_to_mt940(self, writer: TextIO) -> None:
        """Write the :61: and :86: lines of this transaction."""
        self.write_sales_line(writer)
        self.write_multipurpose_line(writer)


@dataclass
class N26:
    """Parser for N26 CSV exports.

    The export holds neither IBAN nor saldo, so both are given here.
    """

    iban: str
    start_saldo: int = 0
    has_category: bool = True

    def parse_csv(self, csv_file: BinaryIO | TextIO) -> BankData:
        """Read an N26 export and return its account data and transactions."""
        bank_number, account_number = extract_account_and_bank_number(self.iban)

        data = csv_file.read()
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        rows = [
            row
            for row in csv.reader(io.StringIO(text, newline=""), delimiter=",")
            if row
        ]
        if not rows:
            raise ValueError("could not read data from csv: file is empty")
        header, *entries = rows
        if any(len(row) != len(header) for row in entries):
            raise ValueError("could not read data from csv: wrong number of fields")

        saldo = Money(self.start_saldo, _CURRENCY)
        transactions = []
        for index, row in enumerate(entries):
            try:
                transaction = N26Transaction.from_csv(row, saldo, self.has_category)
            except (ValueError, IndexError) as err:
                raise ValueError(
                    f"could not convert entry to struct in line {index}: {err}"
                ) from err
            saldo = transaction.saldo
            transactions.append(transaction)

        return BankData(
            account_number=account_number,
            bank_number=bank_number,
            transactions=transactions,
        )