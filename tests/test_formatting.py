"""Tests for amount formatting helpers."""

import pytest

from placebi.utils import format_currency, format_percent


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0 XOF"),
        (950, "950 XOF"),
        (1500, "1 500 XOF"),
        (1_234_567.4, "1 234 567 XOF"),
        (-2500, "-2 500 XOF"),
        (-0.4, "0 XOF"),
    ],
)
def test_format_currency(value, expected):
    assert format_currency(value, "XOF") == expected


def test_format_currency_other_code():
    assert format_currency(10.6, "EUR") == "11 EUR"


def test_format_percent():
    assert format_percent(23.456) == "23.5%"
    assert format_percent(-5, decimals=0) == "-5%"
