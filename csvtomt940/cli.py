"""Command line entry point: convert a bank's CSV export into an MT940 file."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable, Iterator
from typing import BinaryIO, Protocol, TextIO

from .ing import Ing
from .mt940 import BankData, MT940Error
from .n26 import N26

log = logging.getLogger("csvtomt940")

_BOOL_FLAGS = frozenset({"has-category", "ing-has-category"})
_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class Bank(Protocol):
    """A parser that turns a bank's CSV export into statement data."""

    def parse_csv(self, csv_file: BinaryIO | TextIO) -> BankData: ...


def usage(program_name: str) -> str:
    """Return the usage message."""
    return f"USAGE:\n\t {program_name} <transactions.csv>"


def get_bank(bank_type: str, has_category: bool, iban: str, saldo: int) -> Bank:
    """Return the parser for the given bank type."""
    if bank_type == "ing":
        return Ing(has_category=has_category)
    if bank_type == "n26":
        if not iban:
            raise ValueError("parser for N26 needs iban provided")
        if saldo == 0:
            log.warning(
                "WARNING: N26 has no Saldo in its transaction statements, "
                "do you mean to start with saldo = 0?"
            )
        return N26(iban=iban, start_saldo=saldo, has_category=has_category)
    raise ValueError(f'bank "{bank_type}" not supported')


def _parse_bool(text: str) -> bool:
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {text!r}")


def _expand_bool_flags(args: Iterable[str]) -> Iterator[str]:
    """Give bare boolean flags an explicit value, so they never eat the next word."""
    for arg in args:
        name = arg.lstrip("-")
        dashes = len(arg) - len(name)
        if 1 <= dashes <= 2 and name in _BOOL_FLAGS:
            yield f"{arg}=true"
        else:
            yield arg


def _build_parser(prog: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Convert a bank's CSV export into an MT940 (.sta) file.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-ing-has-category",
        "--ing-has-category",
        dest="ing_has_category",
        type=_parse_bool,
        default=None,
        metavar="BOOL",
        help="[DEPRECATED - use has-category instead] Set to false when ing "
        "csv has no category column",
    )
    parser.add_argument(
        "-has-category",
        "--has-category",
        dest="has_category",
        type=_parse_bool,
        default=True,
        metavar="BOOL",
        help="Set to false when csv has no category column",
    )
    parser.add_argument(
        "-bank-type",
        "--bank-type",
        dest="bank_type",
        default="ing",
        help="Which converter should be used (available options: ing, n26)",
    )
    parser.add_argument(
        "-n26-iban",
        "--n26-iban",
        dest="n26_iban",
        default="",
        help="N26 does not save iban in csv export, you have to provide it yourself",
    )
    parser.add_argument(
        "-n26-start-saldo",
        "--n26-start-saldo",
        dest="n26_start_saldo",
        type=int,
        default=0,
        help="N26 does not save saldo infos in csv export, you have to provide "
        "the startsaldo yourself, in cents e.g. 10,45€ = 1045",
    )
    parser.add_argument("files", nargs="*", help="the CSV export to convert")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Convert the CSV file named on the command line; return the exit status."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args_list = sys.argv[1:] if argv is None else list(argv)
    parser = _build_parser(sys.argv[0] if sys.argv and sys.argv[0] else "csvtomt940")
    args = parser.parse_args(list(_expand_bool_flags(args_list)))

    has_category = args.has_category
    if args.ing_has_category is not None:
        log.warning(
            '[DEPRECATED] flag "ing-has-category" is deprecated, '
            'use "has-category" instead'
        )
        has_category = args.ing_has_category

    if not args.files:
        log.error(usage(parser.prog))
        return 1
    csv_name = args.files[0]

    try:
        csv_file = open(csv_name, "rb")
    except OSError as err:
        log.error("Could not open file %s: %s", csv_name, err)
        return 1
    with csv_file:
        try:
            bank = get_bank(
                args.bank_type, has_category, args.n26_iban, args.n26_start_saldo
            )
            bank_data = bank.parse_csv(csv_file)
        except (ValueError, IndexError) as err:
            log.error("%s", err)
            return 1

    sta_name = csv_name.replace(".csv", ".sta")
    try:
        sta_file = open(sta_name, "w", encoding="utf-8", newline="")
    except OSError as err:
        log.error("could not create file: %s: %s", sta_name, err)
        return 1
    try:
        with sta_file:
            bank_data.convert_to_mt940(sta_file)
    except (MT940Error, ValueError, OSError) as err:
        log.error("could not convert to MT940: %s", err)
        return 1

    log.info("done")
    return 0


if __name__ == "__main__":
    sys.exit(main())