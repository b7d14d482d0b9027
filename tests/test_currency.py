from decimal import Decimal

import pytest

from quickbill_pos.core.currency import CURRENCIES, INR, display, format_money, get_currency
from quickbill_pos.errors import ValidationError


def test_display_converts_and_rounds_to_two_places():
    usd = get_currency("USD")
    assert display(Decimal("306.8"), usd) == "3.68"


def test_display_in_base_currency_keeps_amount():
    assert display(Decimal("306.8")) == "306.80"
    assert display(46.8, INR) == "46.80"


def test_display_rounds_half_up():
    assert display(Decimal("0.005")) == "0.01"


def test_display_accepts_strings_from_json():
    assert display("260.0000", get_currency("EUR")) == "2.86"


def test_format_money_prefixes_symbol():
    assert format_money(Decimal("100"), get_currency("GBP")) == "£0.95"


def test_currency_lookup_is_case_insensitive():
    assert get_currency("usd") is CURRENCIES["USD"]


def test_unknown_currency_is_a_validation_error():
    with pytest.raises(ValidationError):
        get_currency("JPY")


def test_base_currency_rate_is_one():
    assert CURRENCIES["INR"].rate == Decimal("1")
