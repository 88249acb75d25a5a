from decimal import Decimal

import pytest

from servicequote.engine.billing import (
    annual_multiplier,
    contract_total,
    monthly_multiplier,
    normalize_frequency,
    visits_in_contract,
)

D = Decimal


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Weekly", "weekly"),
        ("Bi-Weekly", "biweekly"),
        ("bi weekly", "biweekly"),
        ("every other week", "biweekly"),
        ("2× / month", "twicePerMonth"),
        ("every 2 months", "bimonthly"),
        ("Semi-Annual", "biannual"),
        ("yearly", "annual"),
        ("One-Time", "oneTime"),
        ("fortnightly", None),
        ("", None),
    ],
)
def test_normalize_frequency(label, expected):
    assert normalize_frequency(label) == expected


def test_static_multipliers():
    assert monthly_multiplier("weekly") == D("4.33")
    assert monthly_multiplier("one-time") == D("0")
    assert monthly_multiplier("quarterly") == D("0.333")


def test_frequency_monotonicity():
    weekly = monthly_multiplier("weekly")
    biweekly = monthly_multiplier("biweekly")
    monthly = monthly_multiplier("monthly")
    quarterly = monthly_multiplier("quarterly")

    assert weekly > biweekly > monthly > quarterly


def test_explicit_config_multiplier_wins(refresh_schema, remote_config):
    config = remote_config(
        refresh_schema,
        {
            "billingConversions": {"weekly": {"monthlyMultiplier": 4.5}},
            "frequencyMetadata": {"weekly": {"cycleMonths": 0.25}},
        },
    )

    assert monthly_multiplier("weekly", config) == D("4.5")


def test_cycle_months_derives_multiplier(refresh_schema, remote_config):
    config = remote_config(refresh_schema, {"frequencyMetadata": {"quarterly": {"cycleMonths": 3}}})

    assert monthly_multiplier("quarterly", config) == D(1) / D(3)
    assert annual_multiplier("quarterly", config) == D("4")


def test_unknown_label_bills_monthly():
    assert monthly_multiplier("whenever") == D("1")


def test_annual_multiplier_from_static_table():
    assert annual_multiplier("biannual") == D("2")
    assert annual_multiplier("weekly") == D("51.96")


def test_visits_in_contract():
    assert visits_in_contract("quarterly", 12) == D("4")
    assert visits_in_contract("biannual", 12) == D("2")
    assert visits_in_contract("annual", 24) == D("2")
    assert visits_in_contract("weekly", 12) == D("51.96")


def test_contract_total_visit_based_vs_recurring():
    # quarterly: per visit x visits
    assert contract_total(D("300"), "quarterly", 12) == D("1200")
    # weekly: monthly recurring x months
    assert contract_total(D("100"), "weekly", 12) == D("5196")
    assert contract_total(D("100"), "one-time", 12) == D("0")
