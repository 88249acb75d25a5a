from decimal import Decimal

import pytest

from servicequote.engine.effective_config import ConfigTier, EffectiveConfig

D = Decimal


def test_static_config_resolves_every_rate(refresh_config):
    assert refresh_config.tier is ConfigTier.STATIC
    assert refresh_config.rate("worker_rate") == D("200")
    assert refresh_config.rate("hourly_rate") == D("400")
    assert refresh_config.rate("minimum_visit") == D("475")
    assert refresh_config.rate("inside_rate") == D("0.6")


def test_remote_leaf_wins_and_missing_leaves_fall_back(refresh_schema, remote_config):
    config = remote_config(refresh_schema, {"coreRates": {"perWorkerRate": 250}})

    assert config.tier is ConfigTier.REMOTE
    assert config.rate("worker_rate") == D("250")
    assert config.rate("hourly_rate") == D("400")


def test_alternate_path_in_same_tier_beats_static(refresh_schema, remote_config):
    config = remote_config(refresh_schema, {"coreRates": {"defaultHourlyRate": 180}})

    assert config.rate("worker_rate") == D("180")


@pytest.mark.parametrize("bad", [-5, float("nan"), "abc", None, {"nested": 1}, "1e27"])
def test_unusable_leaves_count_as_missing(refresh_schema, remote_config, bad):
    config = remote_config(refresh_schema, {"coreRates": {"perWorkerRate": bad}})

    assert config.rate("worker_rate") == D("200")


def test_numeric_strings_are_accepted(refresh_schema, remote_config):
    config = remote_config(refresh_schema, {"coreRates": {"perWorkerRate": "300"}})

    assert config.rate("worker_rate") == D("300")


def test_remote_tree_is_copied(refresh_schema):
    tree = {"coreRates": {"perWorkerRate": 250}}
    config = EffectiveConfig.build(refresh_schema, ConfigTier.REMOTE, tree)

    tree["coreRates"]["perWorkerRate"] = 999

    assert config.rate("worker_rate") == D("250")


def test_undeclared_rate_raises(refresh_config):
    with pytest.raises(KeyError):
        refresh_config.rate("trip_charge")


def test_missing_leaf_raises_for_number(refresh_config):
    assert refresh_config.leaf("does.not.exist") is None
    with pytest.raises(KeyError):
        refresh_config.number("does.not.exist")


@pytest.mark.parametrize(
    "months, expected",
    [(None, 12), (0, 12), (1, 2), (6, 6), (100, 36), ("24", 24)],
)
def test_clamp_months(refresh_config, months, expected):
    assert refresh_config.clamp_months(months) == expected


def test_section_returns_mapping(refresh_config):
    categories = refresh_config.section("rateCategories")

    assert set(categories) == {"redRate", "greenRate"}
