"""LDL cholesterol card with an ASCVD-dependent target."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from health_report.pipelines.base import CardResult, passes_gate, render_if_shown
from health_report.schemas.card import CardContent, GuidanceSection, Measurement, VisualPriority
from health_report.services.extraction import FieldSpec, extract_value
from health_report.services.rendering import Renderer, render_html
from health_report.services.risk import resolve_ascvd_risk

CARD_ID = "ldl-card"


class LDLTier(str, Enum):
    VERY_HIGH_RISK = "very_high_risk"
    HIGH_RISK = "high_risk"
    LOW_RISK = "low_risk"
    BELOW_THRESHOLD = "below_threshold"


class LDLThresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    ldl_gate: float = 100
    ascvd_gate: float = 0.075
    ascvd_very_high: float = 0.20
    ascvd_high: float = 0.075
    target_very_high_risk: int = 70
    target_high_risk: int = 100
    target_low_risk: int = 130


LDL_THRESHOLDS = LDLThresholds()

LDL_FIELD = FieldSpec(
    name="ldl",
    keys=("ldl", "ldl_c", "ldlCholesterol", "ldl_cholesterol", "LDL"),
    minimum=10,
    maximum=500,
)

SILENT_TIERS = {LDLTier.BELOW_THRESHOLD}

_PRIORITY_BY_TIER = {
    LDLTier.VERY_HIGH_RISK: ("HIGH PRIORITY", VisualPriority.RED),
    LDLTier.HIGH_RISK: ("HIGH PRIORITY", VisualPriority.RED),
    LDLTier.LOW_RISK: ("MEDIUM PRIORITY", VisualPriority.ORANGE),
}


class LDLCardResult(CardResult):
    ldl_value: float | None = Field(default=None, alias="ldlValue")
    ascvd_risk: float | None = Field(default=None, alias="ascvdRisk")
    ldl_target: int | None = Field(default=None, alias="ldlTarget")
    tier: LDLTier | None = None


def extract_ldl(record: Any) -> float | None:
    return extract_value(record, LDL_FIELD)


def compute_ldl_target(ascvd_risk: float | None, thresholds: LDLThresholds = LDL_THRESHOLDS) -> int:
    if ascvd_risk is not None:
        if ascvd_risk >= thresholds.ascvd_very_high:
            return thresholds.target_very_high_risk
        if ascvd_risk >= thresholds.ascvd_high:
            return thresholds.target_high_risk
    return thresholds.target_low_risk


def classify_ldl(
    ldl: float | None, ascvd_risk: float | None, thresholds: LDLThresholds = LDL_THRESHOLDS
) -> LDLTier | None:
    if ldl is None:
        return None
    elevated = ldl > thresholds.ldl_gate
    at_risk = ascvd_risk is not None and ascvd_risk >= thresholds.ascvd_gate
    if not (elevated or at_risk):
        return LDLTier.BELOW_THRESHOLD
    if ascvd_risk is not None and ascvd_risk >= thresholds.ascvd_very_high:
        return LDLTier.VERY_HIGH_RISK
    if ascvd_risk is not None and ascvd_risk >= thresholds.ascvd_high:
        return LDLTier.HIGH_RISK
    return LDLTier.LOW_RISK


def should_show_ldl_card(tier: LDLTier | None) -> bool:
    return passes_gate(tier, SILENT_TIERS)


def build_ldl_content(ldl: float | None, ascvd_risk: float | None, tier: LDLTier | None) -> CardContent | None:
    if ldl is None or tier not in _PRIORITY_BY_TIER:
        return None
    target = compute_ldl_target(ascvd_risk)
    priority_label, visual_priority = _PRIORITY_BY_TIER[tier]
    return CardContent(
        card_id=CARD_ID,
        title="LDL Cholesterol Optimization",
        priority_label=priority_label,
        visual_priority=visual_priority,
        measurements=(
            Measurement(label="Current LDL", display=f"{round(ldl)} mg/dL"),
            Measurement(
                label="Target LDL",
                display=f"<{target} mg/dL",
                reference="target depends on overall ASCVD risk",
            ),
        ),
        sections=(
            GuidanceSection(
                heading="Nutritional Interventions:",
                items=(
                    "Increase soluble fiber intake (oats, beans, apples)",
                    "Add plant sterols/stanols",
                    "Replace saturated fats with monounsaturated fats",
                    "Include fatty fish 2-3 times per week",
                ),
            ),
            GuidanceSection(
                heading="Options to Discuss with Your Clinician:",
                items=(
                    "Bergamot extract",
                    "Psyllium husk fiber",
                    "Omega-3 fatty acids (EPA/DHA)",
                    "Lifestyle optimization strategies",
                ),
            ),
        ),
        notes=("Dosing and suitability vary by individual health status.",),
    )


def render_ldl_card(
    ldl: float | None, ascvd_risk: float | None, tier: LDLTier | None, renderer: Renderer = render_html
) -> str:
    return renderer(build_ldl_content(ldl, ascvd_risk, tier))


def ldl_card_from_values(
    ldl: float | None, ascvd_risk: float | None, renderer: Renderer = render_html
) -> LDLCardResult:
    tier = classify_ldl(ldl, ascvd_risk)
    shown = should_show_ldl_card(tier)
    card = build_ldl_content(ldl, ascvd_risk, tier) if shown else None
    priority, content = render_if_shown(shown, card, renderer)
    return LDLCardResult(
        shown=shown,
        ldl_value=ldl,
        ascvd_risk=ascvd_risk,
        ldl_target=compute_ldl_target(ascvd_risk) if shown else None,
        tier=tier,
        priority=priority,
        content=content,
    )


def build_ldl_card_result(record: Any, risk: Any = None, renderer: Renderer = render_html) -> LDLCardResult:
    return ldl_card_from_values(extract_ldl(record), resolve_ascvd_risk(record, risk), renderer)
