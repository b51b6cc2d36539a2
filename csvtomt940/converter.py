"""Conversions from CSV values to MT940 field content."""

from __future__ import annotations

import re

from .money import Money

_UMLAUTS = str.maketrans(
    {
        "Ä": "AE",
        "Ö": "OE",
        "Ü": "UE",
        "ß": "ss",
        "ä": "ae",
        "ö": "oe",
        "ü": "ue",
    }
)

_INTEGER = re.compile(r"[+-]?[0-9]+")

_USAGE_PART_LENGTH = 27
_MAX_USAGE_PARTS = 8

_CREDIT_MARK = "C"
_DEBIT_MARK = "D"


class UsageTooLongError(ValueError):
    """Raised when a usage text does not fit into the fields ?20 to ?27."""


def convert_umlauts(s: str) -> str:
    """Replace German umlauts and sharp s with their two-letter forms."""
    return s.translate(_UMLAUTS)


def _parse_int(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f'parsing "{text}": invalid syntax')
    return int(text)


def money_string_to_int(m: str) -> int:
    """Turn a formatted amount into minor units.

    Every comma and dot is dropped; a value without any of them is taken
    to be in whole currency units.
    """
    if m == "":
        return 0
    if "," not in m and "." not in m:
        return _parse_int(m) * 100
    return _parse_int(m.replace(",", "").replace(".", ""))


def convert_usage_to_fields(usage: str) -> str:
    """Split a usage text into the fields ?20 onwards, closed by KREF+NONREF."""
    parts = (
        split_string_in_parts(f"SVWZ+{usage}", _USAGE_PART_LENGTH, True)
        if usage
        else []
    )
    if len(parts) > _MAX_USAGE_PARTS:
        raise UsageTooLongError("usage line is too long")
    fields, next_control = join_fields_with_control(parts, 20)
    return f"{fields}?{next_control}KREF+NONREF"


def join_fields_with_control(parts: list[str], start_control: int) -> tuple[str, int]:
    """Prefix each part with ?<number>, counting up from start_control.

    Returns the joined text and the next unused control number.
    """
    fields = "".join(
        f"?{control}{part.strip()}"
        for control, part in enumerate(parts, start_control)
    )
    return fields, start_control + len(parts)


def split_string_in_parts(s: str, length: int, trim_whitespace: bool) -> list[str]:
    """Cut a string into pieces of the given number of characters.

    With trim_whitespace a space that would end a piece is dropped and the
    piece is filled from the following characters instead.
    """
    parts: list[str] = []
    part: list[str] = []
    position = 0
    for char in s:
        part.append(char)
        if (position + 1) % length == 0:
            if char == " " and trim_whitespace:
                part.pop()
                continue
            parts.append("".join(part))
            part = []
        position += 1
    if part:
        parts.append("".join(part))
    return parts


def is_debit(amount: Money) -> bool:
    """Return True for a negative amount."""
    return amount.is_negative()


def credit_or_debit(amount: Money) -> str:
    """Return the MT940 mark for an amount: "D" if negative, "C" otherwise."""
    mark = _CREDIT_MARK
    if is_debit(amount):
        mark = _DEBIT_MARK
    return mark