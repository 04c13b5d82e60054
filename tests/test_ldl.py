import pytest

from health_report.pipelines.ldl import (
    LDLTier,
    build_ldl_card_result,
    classify_ldl,
    compute_ldl_target,
    ldl_card_from_values,
)
from health_report.services.rendering import render_text


def test_elevated_ldl_low_risk_is_shown_with_target_130():
    result = build_ldl_card_result({"biomarkers": {"ldl": 150}}, {"ascvd": 0.05})
    assert result.shown is True
    assert result.tier is LDLTier.LOW_RISK
    assert result.ldl_target == 130
    assert result.priority == "MEDIUM PRIORITY"
    assert "&lt;130 mg/dL" in result.content


def test_ldl_below_gate_and_low_risk_is_hidden():
    result = build_ldl_card_result({"biomarkers": {"ldl": 90}}, {"ascvd": 0.05})
    assert result.shown is False
    assert result.tier is LDLTier.BELOW_THRESHOLD
    assert result.ldl_target is None
    assert result.content == ""


def test_ldl_exactly_100_is_not_elevated():
    assert classify_ldl(100, None) is LDLTier.BELOW_THRESHOLD
    assert classify_ldl(100.5, None) is LDLTier.LOW_RISK


def test_risk_alone_opens_the_gate():
    result = ldl_card_from_values(90, 0.10)
    assert result.shown is True
    assert result.tier is LDLTier.HIGH_RISK
    assert result.ldl_target == 100


@pytest.mark.parametrize(
    "ascvd, target",
    [(None, 130), (0.05, 130), (0.075, 100), (0.19, 100), (0.20, 70), (0.35, 70)],
)
def test_target_follows_ascvd(ascvd, target):
    assert compute_ldl_target(ascvd) == target


def test_percentage_risk_is_coerced():
    result = build_ldl_card_result({"ldl": 120}, {"ascvd": 25})
    assert result.ascvd_risk == 0.25
    assert result.tier is LDLTier.VERY_HIGH_RISK
    assert result.ldl_target == 70
    assert result.priority == "HIGH PRIORITY"


def test_risk_falls_back_to_record_section():
    result = build_ldl_card_result({"ldl_c": 130, "risk": {"risk_level": "high"}})
    assert result.ascvd_risk == 0.15
    assert result.tier is LDLTier.HIGH_RISK


def test_missing_ldl_means_no_card_even_at_high_risk():
    result = build_ldl_card_result({"clinical": {}}, {"ascvd": 0.3})
    assert result.tier is None
    assert result.shown is False
    assert result.ldl_target is None


def test_text_rendering():
    result = ldl_card_from_values(150, 0.05, renderer=render_text)
    assert result.content.splitlines()[0] == "[MEDIUM PRIORITY] LDL Cholesterol Optimization"
    assert "Current LDL: 150 mg/dL" in result.content
