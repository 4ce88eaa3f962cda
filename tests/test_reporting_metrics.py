import pytest

from search_insights.application.reporting.metrics import (
    PLACEHOLDER,
    currency_code,
    format_currency,
    format_number,
    format_percent,
    format_roas,
)


def test_currency_code_lookup():
    assert currency_code("£") == "GBP"
    assert currency_code("₹") == "INR"
    assert currency_code("?") == "USD"


@pytest.mark.parametrize(
    "value, symbol, expected",
    [
        (1234.5, "$", "$1,234.50"),
        (0, "€", "€0.00"),
        (-12.5, "£", "-£12.50"),
        (99, "XYZ", "$99.00"),
    ],
)
def test_format_currency(value, symbol, expected):
    assert format_currency(value, symbol) == expected


def test_format_number():
    assert format_number(1234) == "1,234"
    assert format_number(1234.5) == "1,234.5"
    assert format_number(2.346) == "2.35"
    assert format_number(0) == "0"


def test_format_percent():
    assert format_percent(0.05) == "5.00%"
    assert format_percent(0) == "0.00%"


def test_non_finite_values_render_placeholder():
    assert format_roas(float("inf")) == PLACEHOLDER
    assert format_roas(float("nan")) == PLACEHOLDER
    assert format_currency(float("nan")) == PLACEHOLDER
    assert format_number(None) == PLACEHOLDER
    assert format_percent(float("-inf")) == PLACEHOLDER
    assert format_roas(2.5) == "2.50"
