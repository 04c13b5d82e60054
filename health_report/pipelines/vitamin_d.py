"""Vitamin D (25-OH) card.

Deficient and low-normal levels get a repletion or maintenance plan, a level
above the optimal band gets a caution card, and an optimal level is silent.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from health_report.pipelines.base import CardResult, passes_gate, render_if_shown
from health_report.schemas.card import Alert, CardContent, GuidanceSection, Measurement, VisualPriority
from health_report.services.extraction import FieldSpec, extract_value
from health_report.services.rendering import Renderer, render_html

CARD_ID = "vitamin-d-card"
CARD_TITLE = "Vitamin D Optimization"


class VitaminDTier(str, Enum):
    SEVERE_DEFICIENCY = "severe_deficiency"
    INSUFFICIENCY = "insufficiency"
    LOW_NORMAL = "low_normal"
    OPTIMAL = "optimal"
    HIGH = "high"


class VitaminDThresholds(BaseModel):
    """Upper bounds in ng/mL; all exclusive except ``optimal_high``."""
    model_config = ConfigDict(frozen=True)

    severe_deficiency: float = 20
    insufficiency: float = 30
    low_normal: float = 50
    optimal_high: float = 80


VITAMIN_D_THRESHOLDS = VitaminDThresholds()

VITAMIN_D_FIELD = FieldSpec(
    name="vitamin_d",
    keys=("vitaminD", "vitamin_d", "vitamin_D", "VitaminD", "VITAMIN_D", "25OHD", "25_oh_d"),
    minimum=1,
    maximum=250,
)

SILENT_TIERS = {VitaminDTier.OPTIMAL}


class VitaminDCardResult(CardResult):
    vitamin_d_value: float | None = Field(default=None, alias="vitaminDValue")
    tier: VitaminDTier | None = None


def extract_vitamin_d(record: Any) -> float | None:
    return extract_value(record, VITAMIN_D_FIELD)


def classify_vitamin_d_status(
    value: float | None, thresholds: VitaminDThresholds = VITAMIN_D_THRESHOLDS
) -> VitaminDTier | None:
    if value is None:
        return None
    if value < thresholds.severe_deficiency:
        return VitaminDTier.SEVERE_DEFICIENCY
    if value < thresholds.insufficiency:
        return VitaminDTier.INSUFFICIENCY
    if value < thresholds.low_normal:
        return VitaminDTier.LOW_NORMAL
    if value <= thresholds.optimal_high:
        return VitaminDTier.OPTIMAL
    return VitaminDTier.HIGH


def should_show_vitamin_d_card(tier: VitaminDTier | None) -> bool:
    return passes_gate(tier, SILENT_TIERS)


def build_vitamin_d_content(value: float | None, tier: VitaminDTier | None) -> CardContent | None:
    if value is None or tier is None or tier in SILENT_TIERS:
        return None
    level = f"{round(value)} ng/mL"

    if tier is VitaminDTier.SEVERE_DEFICIENCY:
        return CardContent(
            card_id=CARD_ID,
            title=CARD_TITLE,
            priority_label="HIGH PRIORITY",
            visual_priority=VisualPriority.RED,
            measurements=(Measurement(label="Current level", display=level, reference="Severe Deficiency - Normal: 30-100 ng/mL"),),
            alert=Alert(
                heading="Immediate Action Required",
                message="Severe deficiency requires aggressive repletion and close monitoring.",
            ),
            sections=(
                GuidanceSection(
                    heading="Recommended Actions:",
                    items=(
                        "High-dose D3 supplementation (5,000-10,000 IU daily)",
                        "Consider loading dose if clinically appropriate",
                        "Take with fat-containing meal for absorption",
                        "Retest in 6-8 weeks to monitor response",
                        "Assess for malabsorption issues",
                    ),
                ),
                GuidanceSection(
                    heading="Clinical Considerations:",
                    items=(
                        "Add Vitamin K2 co-supplementation (45-180 mcg)",
                        "Increase dietary sources (fatty fish, fortified foods)",
                        "Safe sun exposure when possible (10-30 min)",
                        "Discuss with healthcare provider for personalized plan",
                    ),
                ),
            ),
        )

    if tier is VitaminDTier.INSUFFICIENCY:
        return CardContent(
            card_id=CARD_ID,
            title=CARD_TITLE,
            priority_label="MEDIUM PRIORITY",
            visual_priority=VisualPriority.ORANGE,
            measurements=(Measurement(label="Current level", display=level, reference="Insufficient - Normal: 30-100 ng/mL"),),
            sections=(
                GuidanceSection(
                    heading="Recommended Actions:",
                    items=(
                        "Moderate-dose D3 supplementation (4,000-5,000 IU daily)",
                        "Take with fat-containing meal",
                        "Retest in 8-12 weeks",
                        "Monitor for improvement to optimal range (50-80 ng/mL)",
                    ),
                ),
                GuidanceSection(
                    heading="Lifestyle Optimization:",
                    items=(
                        "Consider Vitamin K2 co-supplementation",
                        "Increase dietary sources (salmon, mackerel, sardines)",
                        "Safe sun exposure (10-20 min, 2-3x per week)",
                        "Address any absorption issues with provider",
                    ),
                ),
            ),
        )

    if tier is VitaminDTier.LOW_NORMAL:
        return CardContent(
            card_id=CARD_ID,
            title=CARD_TITLE,
            priority_label="MAINTENANCE",
            visual_priority=VisualPriority.YELLOW,
            measurements=(Measurement(label="Current level", display=level, reference="Acceptable - Optimal: 50-80 ng/mL"),),
            sections=(
                GuidanceSection(
                    heading="Maintenance Recommendations:",
                    items=(
                        "Maintenance D3 supplementation (2,000-3,000 IU daily)",
                        "Continue taking with fat-containing meal",
                        "Retest in 3-6 months",
                        "Consider optimizing to 50-80 ng/mL range",
                    ),
                ),
                GuidanceSection(
                    heading="Lifestyle Support:",
                    items=(
                        "Regular sun exposure (15-20 min, 3-4x per week)",
                        "Include vitamin D-rich foods in diet",
                        "Consider seasonal adjustments (higher dose in winter)",
                        "Monitor if levels trend downward",
                    ),
                ),
            ),
        )

    return CardContent(
        card_id=CARD_ID,
        title=CARD_TITLE,
        priority_label="CAUTION",
        visual_priority=VisualPriority.RED,
        measurements=(Measurement(label="Current level", display=level, reference="Above Optimal - Risk of Toxicity"),),
        alert=Alert(
            heading="Caution: High Level",
            message="Elevated vitamin D can lead to hypercalcemia and other complications.",
        ),
        sections=(
            GuidanceSection(
                heading="Immediate Actions:",
                items=(
                    "HOLD all vitamin D supplementation",
                    "Reduce fortified food intake",
                    "Retest in 3 months to monitor decline",
                    "Check serum calcium levels",
                ),
            ),
            GuidanceSection(
                heading="Clinical Follow-up:",
                items=(
                    "Consult healthcare provider promptly",
                    "Assess for symptoms of hypervitaminosis D",
                    "Monitor kidney function if appropriate",
                    "Re-evaluate supplementation regimen",
                ),
            ),
        ),
        notes=("Do NOT continue routine high-dose supplementation.",),
    )


def render_vitamin_d_card(value: float | None, tier: VitaminDTier | None, renderer: Renderer = render_html) -> str:
    return renderer(build_vitamin_d_content(value, tier))


def vitamin_d_card_from_values(value: float | None, renderer: Renderer = render_html) -> VitaminDCardResult:
    tier = classify_vitamin_d_status(value)
    shown = should_show_vitamin_d_card(tier)
    card = build_vitamin_d_content(value, tier) if shown else None
    priority, content = render_if_shown(shown, card, renderer)
    return VitaminDCardResult(
        shown=shown,
        vitamin_d_value=value,
        tier=tier,
        priority=priority,
        content=content,
    )


def build_vitamin_d_card_result(record: Any, renderer: Renderer = render_html) -> VitaminDCardResult:
    return vitamin_d_card_from_values(extract_vitamin_d(record), renderer)
