import pytest

from health_report.services.risk import (
    extract_ascvd_risk,
    normalize_risk_fraction,
    resolve_ascvd_risk,
    risk_level_to_fraction,
)


@pytest.mark.parametrize(
    "raw, expected",
    [(9, 0.09), (0.09, 0.09), ("12.5", 0.125), (1, 1.0), (0, 0.0), (100, 1.0)],
)
def test_percentages_are_coerced_to_fractions(raw, expected):
    assert normalize_risk_fraction(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [150, -0.1, "unknown", None, True])
def test_out_of_range_or_invalid_risk_is_absent(raw):
    assert normalize_risk_fraction(raw) is None


@pytest.mark.parametrize("key", ["ascvd", "ascvd_risk", "ASCVD", "ascvdRisk", "cardiovascularRisk"])
def test_direct_keys(key):
    assert extract_ascvd_risk({key: 9}) == pytest.approx(0.09)


@pytest.mark.parametrize("level, expected", [("low", 0.05), ("Moderate", 0.10), ("very-high", 0.25), ("Very High", 0.25)])
def test_categorical_levels(level, expected):
    assert risk_level_to_fraction(level) == expected
    assert extract_ascvd_risk({"risk_level": level}) == expected


def test_unknown_level_is_absent():
    assert extract_ascvd_risk({"risk_level": "extreme"}) is None


def test_direct_key_wins_over_level():
    assert extract_ascvd_risk({"ascvd": 0.2, "risk_level": "low"}) == 0.2


def test_results_list_uses_cardiovascular_entry():
    risk = {
        "results": [
            {"category": "diabetes", "risk_score": 40},
            {"category": "Cardiovascular", "risk_score": 12},
        ]
    }
    assert extract_ascvd_risk(risk) == pytest.approx(0.12)


def test_results_entry_falls_back_to_its_level():
    assert extract_ascvd_risk({"results": [{"category": "cvd", "risk_level": "high"}]}) == 0.15


def test_non_mapping_risk_is_absent():
    assert extract_ascvd_risk(None) is None
    assert extract_ascvd_risk([0.2]) is None


def test_resolve_prefers_separate_risk_record():
    record = {"risk": {"ascvd": 0.05}}
    assert resolve_ascvd_risk(record, {"ascvd": 0.2}) == 0.2
    assert resolve_ascvd_risk(record) == 0.05
    assert resolve_ascvd_risk(record, {"other": 1}) == 0.05
    assert resolve_ascvd_risk({}) is None


def test_integer_too_large_for_float_is_absent():
    assert normalize_risk_fraction(10**400) is None
    assert extract_ascvd_risk({"ascvd": 10**400, "risk_level": "low"}) == 0.05
