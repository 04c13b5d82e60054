import pytest

from health_report.pipelines.glycemic import (
    GlycemicTier,
    build_glycemic_card_result,
    classify_glycemic_status,
    should_show_glycemic_card,
)
from health_report.services.rendering import render_text

TIER_ORDER = [
    GlycemicTier.NORMAL,
    GlycemicTier.ELEVATED_NORMAL,
    GlycemicTier.PREDIABETES,
    GlycemicTier.DIABETES,
    GlycemicTier.HIGH_RISK_DIABETES,
]


@pytest.mark.parametrize(
    "hba1c, tier",
    [
        (5.6, GlycemicTier.NORMAL),
        (5.7, GlycemicTier.ELEVATED_NORMAL),
        (5.9, GlycemicTier.ELEVATED_NORMAL),
        (6.0, GlycemicTier.PREDIABETES),
        (6.4, GlycemicTier.PREDIABETES),
        (6.5, GlycemicTier.DIABETES),
        (7.9, GlycemicTier.DIABETES),
        (8.0, GlycemicTier.HIGH_RISK_DIABETES),
    ],
)
def test_hba1c_boundaries_are_inclusive_on_higher_tier(hba1c, tier):
    assert classify_glycemic_status(hba1c, None) is tier


@pytest.mark.parametrize(
    "glucose, tier",
    [
        (99, GlycemicTier.NORMAL),
        (100, GlycemicTier.ELEVATED_NORMAL),
        (110, GlycemicTier.PREDIABETES),
        (126, GlycemicTier.DIABETES),
        (200, GlycemicTier.HIGH_RISK_DIABETES),
    ],
)
def test_glucose_fallback(glucose, tier):
    assert classify_glycemic_status(None, glucose) is tier


def test_hba1c_wins_over_glucose():
    assert classify_glycemic_status(5.2, 250) is GlycemicTier.NORMAL


def test_severity_is_monotonic_in_hba1c():
    values = [round(4.0 + step * 0.1, 1) for step in range(60)]
    ranks = [TIER_ORDER.index(classify_glycemic_status(v, None)) for v in values]
    assert ranks == sorted(ranks)


def test_no_inputs_means_no_tier_and_no_card():
    result = build_glycemic_card_result({"biomarkers": {"ldl": 120}})
    assert result.tier is None
    assert result.shown is False
    assert result.content == ""
    assert result.priority is None


def test_normal_is_silent():
    assert should_show_glycemic_card(GlycemicTier.NORMAL) is False
    assert should_show_glycemic_card(None) is False
    assert should_show_glycemic_card(GlycemicTier.ELEVATED_NORMAL) is True


def test_prediabetes_card_from_record():
    result = build_glycemic_card_result({"clinical": {"HbA1c": "6.2", "fastingGlucose": 112}})
    assert result.tier is GlycemicTier.PREDIABETES
    assert result.shown is True
    assert result.priority == "HIGH PRIORITY"
    assert result.hba1c_value == 6.2
    assert result.glucose_value == 112
    assert 'data-test="hba1c-card"' in result.content
    assert "6.2%" in result.content


def test_glucose_only_card_marks_hba1c_not_measured():
    result = build_glycemic_card_result({"glucose": 210}, renderer=render_text)
    assert result.tier is GlycemicTier.HIGH_RISK_DIABETES
    assert result.content.startswith("[CRITICAL]")
    assert "HbA1c: Not measured" in result.content
    assert "Fasting Glucose: 210 mg/dL" in result.content


def test_serializes_with_camel_case_keys():
    data = build_glycemic_card_result({"hba1c": 6.7}).model_dump(by_alias=True)
    assert data["hba1cValue"] == 6.7
    assert data["glucoseValue"] is None
    assert data["priority"] == "URGENT"
