import pytest

from csvtomt940.money import CurrencyMismatchError, Money, format_money


@pytest.mark.parametrize(
    ("cents", "expected"),
    [
        (1050, "10,50"),
        (9900, "99,00"),
        (11050, "110,50"),
        (10000, "100,00"),
    ],
)
def test_format_money_pinned_values(cents, expected):
    assert format_money(Money(cents, "EUR")) == expected


def test_format_money_pads_small_amounts():
    assert format_money(Money(5, "EUR")) == "0,05"


def test_format_money_negative_has_leading_minus():
    positive = format_money(Money(1050, "EUR"))
    assert format_money(Money(-1050, "EUR")) == "-" + positive


@pytest.mark.parametrize("cents", [0, 1, 99, 100, 123456, 7])
def test_format_money_always_has_two_decimals(cents):
    text = format_money(Money(cents, "EUR"))
    whole, fraction = text.split(",")
    assert len(fraction) == 2
    assert int(whole + fraction) == cents


def test_add_and_subtract_round_trip():
    start = Money(10000, "EUR")
    delta = Money(-250, "EUR")
    assert start.add(delta).subtract(delta) == start


def test_subtract_keeps_currency():
    result = Money(10000, "EUR").subtract(Money(100, "EUR"))
    assert result == Money(9900, "EUR")


def test_add_rejects_other_currency():
    with pytest.raises(CurrencyMismatchError):
        Money(100, "EUR").add(Money(100, "USD"))


def test_subtract_rejects_other_currency():
    with pytest.raises(CurrencyMismatchError):
        Money(-10000, "EUR").subtract(Money(-100, "USD"))


@pytest.mark.parametrize("cents", [-1050, 0, 1050])
def test_absolute_is_never_negative(cents):
    result = Money(cents, "EUR").absolute()
    assert not result.is_negative()
    assert result.amount == abs(cents)
    assert result.currency == "EUR"


def test_is_negative():
    assert Money(-1, "EUR").is_negative()
    assert not Money(0, "EUR").is_negative()
    assert not Money(1, "EUR").is_negative()