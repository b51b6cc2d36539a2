"""Reading of ING CSV exports and their MT940 transaction lines."""

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
    join_fields_with_control,
    money_string_to_int,
    split_string_in_parts,
)
from .money import Money, format_money
from .mt940 import BankData, MT940Error

# column positions in the ING CSV file (with a category column)
_DATE = 0
_VALUE_DATE = 1
_PAYEE = 2
_TRANSACTION_TYPE = 3
_CATEGORY = 4
_REFERENCE = 5
_SALDO = 6
_SALDO_CURRENCY = 7
_AMOUNT = 8
_AMOUNT_CURRENCY = 9

_META_BLOCK_SIZE = 13
_MAX_PAYEE_LENGTH = 54
_MAX_MULTIPURPOSE_LENGTH = 390
_MULTIPURPOSE_LINE_LENGTH = 65

_DATE_PATTERN = re.compile(r"\d{2}\.\d{2}\.\d{4}")

# Not complete: ING may use other booking texts as well.
GVC_CODES = {
    "Abschluss": "805",
    "Gutschrift aus Dauerauftrag": "052",
    "Abbuchung": "004",
    "Lastschrift": "005",
    "Gutschrift": "051",
    "Gehalt/Rente": "053",
    "Überweisung": "020",
    "Entgelt": "808",
    "Retouren": "059",
    "Dauerauftrag / Terminueberweisung": "008",
}


def _parse_date(text: str) -> datetime.date:
    if not _DATE_PATTERN.fullmatch(text):
        raise ValueError(f'parsing time "{text}" as "DD.MM.YYYY"')
    return datetime.datetime.strptime(text, "%d.%m.%Y").date()


@dataclass
class IngTransaction:
    """One booking of an ING CSV export."""

    date: datetime.date
    value_date: datetime.date
    saldo: Money
    amount: Money
    payee: str = ""
    transaction_type: str = ""
    category: str = ""
    reference: str = ""

    @classmethod
    def from_csv(cls, entry: list[str], has_category: bool) -> IngTransaction:
        """Build a transaction from one CSV row."""
        offset = 0 if has_category else -1
        try:
            date = _parse_date(entry[_DATE])
        except ValueError as err:
            raise ValueError(f"could not parse date: {err}") from err
        try:
            value_date = _parse_date(entry[_VALUE_DATE])
        except ValueError as err:
            raise ValueError(f"could not parse valueDate: {err}") from err
        try:
            saldo_cents = money_string_to_int(entry[_SALDO + offset])
        except ValueError as err:
            raise ValueError(f"could not parse saldo to int: {err}") from err
        try:
            amount_cents = money_string_to_int(entry[_AMOUNT + offset])
        except ValueError as err:
            raise ValueError(f"could not parse amount to int: {err}") from err

        return cls(
            date=date,
            value_date=value_date,
            saldo=Money(saldo_cents, entry[_SALDO_CURRENCY + offset]),
            amount=Money(amount_cents, entry[_AMOUNT_CURRENCY + offset]),
            payee=entry[_PAYEE][:_MAX_PAYEE_LENGTH],
            transaction_type=entry[_TRANSACTION_TYPE],
            category=entry[_CATEGORY] if has_category else "",
            reference=entry[_REFERENCE + offset],
        )

    def write_sales_line(self, writer: TextIO) -> None:
        """Write the :61: line."""
        writer.write(
            f":61:{self.value_date:%y%m%d}{self.date:%m%d}"
            f"{credit_or_debit(self.amount)}"
            f"{format_money(self.amount.absolute())}NTRFNONREF\r\n"
        )

    def write_multipurpose_line(self, writer: TextIO) -> None:
        """Write the :86: line, wrapped every 65 characters."""
        gvc_code = GVC_CODES.get(self.transaction_type)
        if gvc_code is None:
            raise MT940Error(
                f"could not find gvc code for text: {self.transaction_type}"
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
        try:
            self.write_sales_line(writer)
            self.write_multipurpose_line(writer)
        except MT940Error as err:
            raise MT940Error(
                f"could not convert ingTransaction to mt940: {err}"
            ) from err


def extract_meta_fields(reader: TextIO) -> list[str]:
    """Read the 13 meta lines at the top of an ING export.

    Empty lines count towards the block but are left out of the result.
    """
    meta: list[str] = []
    for index in range(_META_BLOCK_SIZE):
        line = reader.readline()
        if not line.endswith("\n"):
            raise ValueError(
                f"file format incorrect, file has only {index} lines, "
                f"meta block is {_META_BLOCK_SIZE} lines long"
            )
        if line != "\n":
            meta.append(line)
    return meta


def get_account_number(meta: list[str]) -> tuple[str, str]:
    """Return bank number and account number from the IBAN meta line."""
    fields = meta[1].split(";")
    if len(fields) < 2:
        raise ValueError(f"could not split meta field {fields[0]}")
    iban = fields[1].replace(" ", "")
    if len(iban) < 12:
        raise ValueError(f"iban {iban!r} is too short")
    return iban[4:12], iban[12:].strip()


def clean_up_transactions(rows: list[list[str]]) -> list[list[str]]:
    """Drop the header row and put the rest in reverse order."""
    return list(reversed(rows[1:]))


@dataclass
class Ing:
    """Parser for ING CSV exports."""

    has_category: bool = True

    def parse_csv(self, csv_file: BinaryIO | TextIO) -> BankData:
        """Read an ING export and return its account data and transactions."""
        data = csv_file.read()
        text = data.decode("latin-1") if isinstance(data, bytes) else data
        reader = io.StringIO(text, newline="")

        try:
            meta = extract_meta_fields(reader)
        except ValueError as err:
            raise ValueError(f"could not read meta fields: {err}") from err
        try:
            bank_number, account_number = get_account_number(meta)
        except (ValueError, IndexError) as err:
            raise ValueError(f"could not get account number: {err}") from err

        rows = [row for row in csv.reader(reader, delimiter=";") if row]
        if rows and any(len(row) != len(rows[0]) for row in rows):
            raise ValueError(
                "could not read data from csv: wrong number of fields"
            )

        transactions = []
        for index, row in enumerate(clean_up_transactions(rows)):
            try:
                transactions.append(IngTransaction.from_csv(row, self.has_category))
            except (ValueError, IndexError) as err:
                raise ValueError(
                    f"could not convert entry to struct in line {index}: {err}"
                ) from err

        return BankData(
            account_number=account_number,
            bank_number=bank_number,
            transactions=transactions,
        )