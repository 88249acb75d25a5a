from decimal import Decimal

import pytest

from servicequote.core.numbers import MAX_INPUT, clamp_quantity, format_money, q2, to_decimal


@pytest.mark.parametrize(
    "raw, expected",
    [
        (3, Decimal("3")),
        (2.5, Decimal("2.5")),
        ("1,250.00", Decimal("1250.00")),
        ("$475", Decimal("475")),
        (Decimal("0.6"), Decimal("0.6")),
    ],
)
def test_to_decimal_parses(raw, expected):
    assert to_decimal(raw) == expected


@pytest.mark.parametrize("raw", [None, True, "", "abc", float("nan"), float("inf"), "NaN"])
def test_to_decimal_junk_returns_default(raw):
    assert to_decimal(raw, default=None) is None


@pytest.mark.parametrize("raw", [-1, "-3", float("nan"), "junk", None])
def test_clamp_quantity_clamps_to_zero(raw):
    assert clamp_quantity(raw) == Decimal("0")


def test_clamp_quantity_keeps_positive():
    assert clamp_quantity("12.5") == Decimal("12.5")


def test_clamp_quantity_caps_huge_values():
    assert clamp_quantity("1e27") == MAX_INPUT
    assert clamp_quantity(MAX_INPUT + 1) == MAX_INPUT


def test_q2_rounds_half_up():
    assert q2(Decimal("0.125")) == Decimal("0.13")
    assert q2(Decimal("99.9")) == Decimal("99.90")


def test_format_money():
    assert format_money(Decimal("5196")) == "$5,196.00"
