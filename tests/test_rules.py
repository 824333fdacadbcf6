import json
from decimal import Decimal

import pytest

from rules import Rules, load_rules


def test_defaults():
    rules = Rules()
    assert rules.amount_tolerance == Decimal("0.01")
    assert rules.day_tolerance == 3
    assert rules.top_k_suggestions == 3


def test_load_rules_missing_file_gives_defaults(tmp_path):
    assert load_rules(str(tmp_path / "nope.json")) == Rules()


def test_load_rules_partial_file_falls_back(tmp_path):
    path = tmp_path / "recon_config.json"
    path.write_text(json.dumps({"day_tolerance": 5}))
    rules = load_rules(str(path))
    assert rules.day_tolerance == 5
    assert rules.amount_tolerance == Decimal("0.01")
    assert rules.top_k_suggestions == 3


def test_load_rules_string_values(tmp_path):
    path = tmp_path / "recon_config.json"
    path.write_text(json.dumps({"amount_tolerance": "0.05", "day_tolerance": "3",
                                "top_k_suggestions": "2"}))
    rules = load_rules(str(path))
    assert rules.amount_tolerance == Decimal("0.05")
    assert rules.day_tolerance == 3
    assert rules.top_k_suggestions == 2


def test_float_tolerance_is_exact_decimal():
    rules = Rules(amount_tolerance=0.02, day_tolerance=2.5)
    assert rules.amount_tolerance == Decimal("0.02")
    assert rules.day_tolerance == 2.5


@pytest.mark.parametrize("kwargs", [
    {"amount_tolerance": "-0.01"},
    {"amount_tolerance": "NaN"},
    {"amount_tolerance": "abc"},
    {"day_tolerance": -1},
    {"day_tolerance": "soon"},
    {"day_tolerance": float("nan")},
    {"top_k_suggestions": -1},
])
def test_invalid_rules_rejected(kwargs):
    with pytest.raises(ValueError):
        Rules(**kwargs)
