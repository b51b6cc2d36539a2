# csvtomt940

Turn the CSV transaction exports of your bank into an MT940 statement
(`.sta` file) that accounting and banking software can import.

Supported exports:

- **ING** (`ing`, the default): the CSV from online banking, ISO-8859-1
  encoded and separated by semicolons, with a block of 13 meta lines at
  the top. Bank code and account number come from the IBAN in that meta
  block. The bookings are written newest first, in reverse of the file's
  order.
- **N26** (`n26`): the comma-separated CSV export, read as UTF-8. It holds
  neither the IBAN nor the balance, so you give both on the command line;
  the balance after each booking is worked out from the opening balance.
  All amounts are taken as EUR.

## Installation

```
pip install .
```

## Usage

```
csvtomt940 [options] <transactions.csv>
```

The statement is written with `.csv` replaced by `.sta` in the file name
(`Umsatzanzeige.csv` becomes `Umsatzanzeige.sta`). The command exits with
status 0 on success and 1 on any error, which it logs.

Options may be written with one dash or two:

| Option | Default | Meaning |
| --- | --- | --- |
| `-bank-type` | `ing` | Which converter to use: `ing` or `n26` |
| `-has-category` | `true` | Set to `false` when the CSV has no category column |
| `-ing-has-category` | unset | Deprecated; use `-has-category`. When given, it overrides `-has-category` and a warning is logged |
| `-n26-iban` | empty | IBAN of the N26 account (required for `n26`) |
| `-n26-start-saldo` | `0` | Opening balance of the N26 account, in cents (10,45 € = `1045`) |

The boolean options take `true`/`false` (also `1`/`0`, `t`/`f`); given
bare, they mean `true`.

Examples:

```
csvtomt940 Umsatzanzeige.csv
csvtomt940 -has-category=false Umsatzanzeige.csv
csvtomt940 -bank-type n26 -n26-iban "DE00 0000 0000 0000 0000 00" -n26-start-saldo 1045 n26-export.csv
```

For N26 a warning is logged when the opening balance is left at 0, since
the export does not carry it.

## What gets written

Each statement has a header (`:20:CSVTOMT940`), the account line
(`:25:<bank code>/<account number>`), a statement number (`:28C:0`), the
opening balance (`:60F:`), one `:61:`/`:86:` pair for each booking, and the
closing balance (`:62F:`). Lines end in CRLF. The `:86:` line carries the
GVC code, the booking text with umlauts spelled out (`Ü` becomes `UE`), the
reference in fields `?20` onwards and the payee in fields `?32` onwards,
wrapped every 65 characters.

Errors stop the conversion: a booking type with no known GVC code, a
reference longer than eight 27-character fields, or a `:86:` line longer
than 390 characters.

## Use from Python

```python
from csvtomt940.ing import Ing

with open("Umsatzanzeige.csv", "rb") as src, \
        open("Umsatzanzeige.sta", "w", encoding="utf-8", newline="") as dst:
    Ing(has_category=True).parse_csv(src).convert_to_mt940(dst)
```

- `csvtomt940.ing.Ing` and `csvtomt940.n26.N26(iban, start_saldo, has_category)`
  read an export (bytes or text) with `parse_csv` and return a
  `csvtomt940.mt940.BankData`.
- `BankData.convert_to_mt940(writer)` writes the statement to a text stream;
  it raises `MT940Error` when the statement cannot be written.
- `csvtomt940.money.Money` holds amounts in cents; `format_money` gives the
  MT940 form (`Money(1050, "EUR")` → `10,50`).
- `csvtomt940.converter` has the field helpers, such as
  `money_string_to_int`, `split_string_in_parts` and
  `convert_usage_to_fields`.

## Limits

- Only ING and N26 exports are read; there is no converter for other banks.
- The GVC code tables cover common booking types only. A booking type that
  is not listed cannot be converted.
- Bank code and account number are cut from the IBAN by position, as for
  German IBANs.

## Running the tests

```
pip install .[test]
pytest
```