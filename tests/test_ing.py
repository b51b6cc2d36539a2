import datetime
import io

import pytest

from csvtomt940.ing import (
    Ing,
    IngTransaction,
    clean_up_transactions,
    extract_meta_fields,
    get_account_number,
)
from csvtomt940.money import Money
from csvtomt940.mt940 import MT940Error

D = datetime.date(2000, 1, 2)


def _transaction(**kwargs):
    values = dict(
        date=D,
        value_date=D,
        saldo=None,
        amount=None,
        payee="",
        transaction_type="",
        reference="",
    )
    values.update(kwargs)
    return IngTransaction(**values)


@pytest.mark.parametrize(
    "meta",
    [
        ["", "IBAN;DE00111111110000000000"],
        ["", "IBAN;DE22 1111 1111 0000 0000 00"],
    ],
)
def test_get_account_number(meta):
    assert get_account_number(meta) == ("11111111", "0000000000")


def test_get_account_number_unsplittable():
    with pytest.raises(ValueError, match="could not split meta field"):
        get_account_number(["", "no separator"])


def test_extract_meta_fields_with_line_breaks():
    reader = io.StringIO("1\n" * 15)
    assert extract_meta_fields(reader) == ["1\n"] * 13
    assert reader.readline() == "1\n"


def test_extract_meta_fields_without_line_breaks():
    with pytest.raises(ValueError, match="file has only 0 lines"):
        extract_meta_fields(io.StringIO("1" * 15))


def test_extract_meta_fields_skips_empty_lines():
    assert extract_meta_fields(io.StringIO("a\n\nb\n" + "\n" * 10 + "c\n")) == [
        "a\n",
        "b\n",
    ]


@pytest.mark.parametrize(
    "rows, expected",
    [
        ([["1", "2"], ["3", "4"], ["5", "6"]], [["5", "6"], ["3", "4"]]),
        (
            [["1", "2"], ["3", "4"], ["5", "6"], ["7", "8"]],
            [["7", "8"], ["5", "6"], ["3", "4"]],
        ),
    ],
)
def test_clean_up_transactions(rows, expected):
    assert clean_up_transactions(rows) == expected


def test_from_csv_both_times_valid():
    got = IngTransaction.from_csv(
        ["02.01.2000", "03.02.2001", "", "", "", "", "", "", ""], False
    )
    assert got == IngTransaction(
        date=datetime.date(2000, 1, 2),
        value_date=datetime.date(2001, 2, 3),
        saldo=Money(0, ""),
        amount=Money(0, ""),
    )


@pytest.mark.parametrize(
    "entry, message",
    [
        (["0201.2000", "03.02.2001", "", "", "", "", "", "", ""], "could not parse date"),
        (
            ["02.01.2000", "0302.2001", "", "", "", "", "", "", ""],
            "could not parse valueDate",
        ),
        (
            ["02.01.2000", "02.01.2000", "", "", "", "12-00", "EUR", "5,00", "EUR"],
            "could not parse saldo to int",
        ),
        (
            ["02.01.2000", "02.01.2000", "", "", "", "12,00", "EUR", "5-00", "EUR"],
            "could not parse amount to int",
        ),
    ],
)
def test_from_csv_errors(entry, message):
    with pytest.raises(ValueError, match=message):
        IngTransaction.from_csv(entry, False)


def test_from_csv_money_values():
    got = IngTransaction.from_csv(
        ["02.01.2000", "02.01.2000", "", "", "", "12,00", "EUR", "5,00", "EUR"], False
    )
    assert got.saldo == Money(1200, "EUR")
    assert got.amount == Money(500, "EUR")
    assert got.date == datetime.date(2000, 1, 2)


def test_from_csv_string_fields_without_category():
    got = IngTransaction.from_csv(
        ["02.01.2000", "02.01.2000", "test", "test2", "test3", "12,00", "EUR", "5,00", "EUR"],
        False,
    )
    assert (got.payee, got.transaction_type, got.reference, got.category) == (
        "test",
        "test2",
        "test3",
        "",
    )
    assert got.saldo == Money(1200, "EUR")
    assert got.amount == Money(500, "EUR")


def test_from_csv_string_fields_with_category():
    got = IngTransaction.from_csv(
        [
            "02.01.2000", "02.01.2000", "payee", "transactionType", "category",
            "reference", "12,00", "EUR", "5,00", "EUR",
        ],
        True,
    )
    assert got == IngTransaction(
        date=D,
        value_date=D,
        payee="payee",
        transaction_type="transactionType",
        category="category",
        reference="reference",
        saldo=Money(1200, "EUR"),
        amount=Money(500, "EUR"),
    )


def test_from_csv_truncates_long_payee():
    got = IngTransaction.from_csv(
        ["02.01.2000", "02.01.2000", "x" * 60, "", "", "", "EUR", "", "EUR"], False
    )
    assert got.payee == "x" * 54


@pytest.mark.parametrize(
    "transaction, expected",
    [
        (_transaction(amount=Money(1050, "EUR")), ":61:0001020102C10,50NTRFNONREF\r\n"),
        (_transaction(amount=Money(-1050, "EUR")), ":61:0001020102D10,50NTRFNONREF\r\n"),
        (
            _transaction(
                value_date=datetime.date(2000, 1, 1), amount=Money(-1050, "EUR")
            ),
            ":61:0001010102D10,50NTRFNONREF\r\n",
        ),
    ],
)
def test_write_sales_line(transaction, expected):
    writer = io.StringIO()
    transaction.write_sales_line(writer)
    assert writer.getvalue() == expected


@pytest.mark.parametrize(
    "payee, transaction_type, reference, expected",
    [
        ("", "Lastschrift", "", ":86:005?00Lastschrift?20KREF+NONREF\r\n"),
        ("", "Lastschrift", "test", ":86:005?00Lastschrift?20SVWZ+test?21KREF+NONREF\r\n"),
        (
            "testname",
            "Lastschrift",
            "test",
            ":86:005?00Lastschrift?20SVWZ+test?21KREF+NONREF?32testname\r\n",
        ),
        (
            "testname",
            "Überweisung",
            "test",
            ":86:020?00UEberweisung?20SVWZ+test?21KREF+NONREF?32testname\r\n",
        ),
        (
            "testname",
            "Lastschrift",
            "a" * (7 * 27),
            ":86:"
            + "\r\n".join(
                [
                    "005?00Lastschrift?20SVWZ+aaaaaaaaaaaaaaaaaaaaaa?21aaaaaaaaaaaaaaa",
                    "aaaaaaaaaaaa?22aaaaaaaaaaaaaaaaaaaaaaaaaaa?23aaaaaaaaaaaaaaaaaaaa",
                    "aaaaaaa?24aaaaaaaaaaaaaaaaaaaaaaaaaaa?25aaaaaaaaaaaaaaaaaaaaaaaaa",
                    "aa?26aaaaaaaaaaaaaaaaaaaaaaaaaaa?27aaaaa?28KREF+NONREF?32testname",
                ]
            )
            + "\r\n",
        ),
        (
            "b" * 53,
            "Lastschrift",
            "a" * 27,
            ":86:"
            + "\r\n".join(
                [
                    "005?00Lastschrift?20SVWZ+aaaaaaaaaaaaaaaaaaaaaa?21aaaaa?22KREF+NO",
                    "NREF?32bbbbbbbbbbbbbbbbbbbbbbbbbbb?33bbbbbbbbbbbbbbbbbbbbbbbbbb",
                ]
            )
            + "\r\n",
        ),
    ],
)
def test_write_multipurpose_line(payee, transaction_type, reference, expected):
    writer = io.StringIO()
    _transaction(
        payee=payee, transaction_type=transaction_type, reference=reference
    ).write_multipurpose_line(writer)
    assert writer.getvalue() == expected


@pytest.mark.parametrize(
    "payee, transaction_type, reference, message",
    [
        ("testname", "Abschuss", "test", "could not find gvc code"),
        ("testname", "Lastschrift", "a" * (8 * 27), "could not convert reference line"),
        ("testname" * 20, "Lastschrift", "a" * (7 * 27), "too long"),
    ],
)
def test_write_multipurpose_line_errors(payee, transaction_type, reference, message):
    writer = io.StringIO()
    with pytest.raises(MT940Error, match=message):
        _transaction(
            payee=payee, transaction_type=transaction_type, reference=reference
        ).write_multipurpose_line(writer)
    assert writer.getvalue() == ""


def test_convert_to_mt940():
    writer = io.StringIO()
    _transaction(
        payee="testname",
        transaction_type="Abschluss",
        reference="test",
        saldo=Money(5000, "EUR"),
        amount=Money(-1050, "EUR"),
    ).convert_to_mt940(writer)
    assert writer.getvalue() == (
        ":61:0001020102D10,50NTRFNONREF\r\n"
        ":86:805?00Abschluss?20SVWZ+test?21KREF+NONREF?32testname\r\n"
    )


def test_convert_to_mt940_wraps_errors():
    with pytest.raises(MT940Error, match="could not convert ingTransaction to mt940"):
        _transaction(
            transaction_type="Unbekannt", amount=Money(1, "EUR")
        ).convert_to_mt940(io.StringIO())


def _export(rows):
    meta = [
        "Umsatzanzeige;Datei erstellt am: 05.01.2000 12:00\n",
        "IBAN;DE00 1111 1111 0000 0000 00\n",
        "Kontoname;Girokonto\n",
    ] + ["\n"] * 10
    header = (
        "Buchung;Valuta;Auftraggeber/Empfänger;Buchungstext;Kategorie;"
        "Verwendungszweck;Saldo;Währung;Betrag;Währung\n"
    )
    return io.BytesIO("".join(meta + [header] + rows).encode("latin-1"))


def test_parse_csv_reads_and_reverses():
    data = Ing(has_category=True).parse_csv(
        _export(
            [
                "02.01.2000;02.01.2000;Bäcker;Gutschrift;Sonstiges;Miete;1.100,00;EUR;100,00;EUR\n",
                "03.01.2000;03.01.2000;Laden;Lastschrift;Einkauf;Einkauf;1.050,00;EUR;-50,00;EUR\n",
            ]
        )
    )
    assert data.bank_number == "11111111"
    assert data.account_number == "0000000000"
    assert [t.date for t in data.transactions] == [
        datetime.date(2000, 1, 3),
        datetime.date(2000, 1, 2),
    ]
    assert data.transactions[0].amount == Money(-5000, "EUR")
    assert data.transactions[1].saldo == Money(110000, "EUR")
    assert data.transactions[1].payee == "Bäcker"
    assert data.transactions[1].category == "Sonstiges"

    writer = io.StringIO()
    data.convert_to_mt940(writer)
    text = writer.getvalue()
    assert text.startswith(
        ":20:CSVTOMT940\r\n:25:11111111/0000000000\r\n:28C:0\r\n:60F:C000103EUR1100,00\r\n"
    )
    assert text.endswith(":62F:C000102EUR1100,00\r\n")


def test_parse_csv_short_file():
    with pytest.raises(ValueError, match="could not read meta fields"):
        Ing().parse_csv(io.BytesIO(b"only\none\n"))


def test_parse_csv_bad_row():
    with pytest.raises(ValueError, match="could not convert entry to struct in line 0"):
        Ing().parse_csv(
            _export(["2.1.2000;02.01.2000;x;Gutschrift;y;z;1,00;EUR;1,00;EUR\n"])
        )


def test_parse_csv_inconsistent_field_count():
    with pytest.raises(ValueError, match="could not read data from csv"):
        Ing().parse_csv(_export(["02.01.2000;02.01.2000;x\n"]))