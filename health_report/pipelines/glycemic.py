"""HbA1c / fasting glucose recommendation card.

HbA1c is preferred when present; fasting glucose is the fallback. Thresholds
follow the ADA 2024 standards of care and are inclusive on the higher tier.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from health_report.pipelines.base import CardResult, passes_gate, render_if_shown
from health_report.schemas.card import Alert, CardContent, GuidanceSection, Measurement, VisualPriority
from health_report.services.extraction import FieldSpec, extract_value
from health_report.services.rendering import Renderer, render_html

CARD_ID = "hba1c-card"


class GlycemicTier(str, Enum):
    NORMAL = "normal"
    ELEVATED_NORMAL = "elevated_normal"
    PREDIABETES = "prediabetes"
    DIABETES = "diabetes"
    HIGH_RISK_DIABETES = "high_risk_diabetes"


class GlycemicThresholds(BaseModel):
    """Lower bound of each tier above normal."""
    model_config = ConfigDict(frozen=True)

    elevated_normal: float
    prediabetes: float
    diabetes: float
    high_risk_diabetes: float

    def ladder(self) -> tuple[tuple[float, GlycemicTier], ...]:
        return (
            (self.high_risk_diabetes, GlycemicTier.HIGH_RISK_DIABETES),
            (self.diabetes, GlycemicTier.DIABETES),
            (self.prediabetes, GlycemicTier.PREDIABETES),
            (self.elevated_normal, GlycemicTier.ELEVATED_NORMAL),
        )


HBA1C_THRESHOLDS = GlycemicThresholds(elevated_normal=5.7, prediabetes=6.0, diabetes=6.5, high_risk_diabetes=8.0)
GLUCOSE_THRESHOLDS = GlycemicThresholds(elevated_normal=100, prediabetes=110, diabetes=126, high_risk_diabetes=200)

HBA1C_FIELD = FieldSpec(
    name="hba1c",
    keys=("hba1c", "HbA1c", "HBA1C", "a1c", "A1C", "hemoglobinA1c", "glycated_hemoglobin"),
    minimum=3,
    maximum=15,
)
GLUCOSE_FIELD = FieldSpec(
    name="fasting_glucose",
    keys=("glucose", "fastingGlucose", "fasting_glucose", "bloodGlucose", "blood_glucose", "fpg", "FPG"),
    minimum=40,
    maximum=400,
)

SILENT_TIERS = {GlycemicTier.NORMAL}


class GlycemicCardResult(CardResult):
    hba1c_value: float | None = Field(default=None, alias="hba1cValue")
    glucose_value: float | None = Field(default=None, alias="glucoseValue")
    tier: GlycemicTier | None = None


def extract_hba1c(record: Any) -> float | None:
    return extract_value(record, HBA1C_FIELD)


def extract_fasting_glucose(record: Any) -> float | None:
    return extract_value(record, GLUCOSE_FIELD)


def _climb(value: float, thresholds: GlycemicThresholds) -> GlycemicTier:
    for lower_bound, tier in thresholds.ladder():
        if value >= lower_bound:
            return tier
    return GlycemicTier.NORMAL


def classify_glycemic_status(
    hba1c: float | None,
    glucose: float | None,
    hba1c_thresholds: GlycemicThresholds = HBA1C_THRESHOLDS,
    glucose_thresholds: GlycemicThresholds = GLUCOSE_THRESHOLDS,
) -> GlycemicTier | None:
    if hba1c is not None:
        return _climb(hba1c, hba1c_thresholds)
    if glucose is not None:
        return _climb(glucose, glucose_thresholds)
    return None


def should_show_glycemic_card(tier: GlycemicTier | None) -> bool:
    return passes_gate(tier, SILENT_TIERS)


def _measurements(hba1c: float | None, glucose: float | None, hba1c_ref: str, glucose_ref: str):
    return (
        Measurement(
            label="HbA1c",
            display=f"{hba1c:.1f}%" if hba1c is not None else "Not measured",
            reference=hba1c_ref,
        ),
        Measurement(
            label="Fasting Glucose",
            display=f"{round(glucose)} mg/dL" if glucose is not None else "Not measured",
            reference=glucose_ref,
        ),
    )


def build_glycemic_content(
    hba1c: float | None, glucose: float | None, tier: GlycemicTier | None
) -> CardContent | None:
    if tier is None or tier in SILENT_TIERS:
        return None

    if tier is GlycemicTier.ELEVATED_NORMAL:
        return CardContent(
            card_id=CARD_ID,
            title="Glucose Elevated - Increased Diabetes Risk",
            priority_label="WATCH",
            visual_priority=VisualPriority.YELLOW,
            measurements=_measurements(hba1c, glucose, "Normal: < 5.7%", "Normal: < 100 mg/dL"),
            alert=Alert(
                heading="Increased Risk",
                message="You are at increased risk for developing type 2 diabetes.",
            ),
            sections=(
                GuidanceSection(
                    heading="Recommended Actions:",
                    items=(
                        "Weight management: 5-7% weight loss if BMI > 25",
                        "Physical activity: 150 minutes/week moderate exercise",
                        "Low glycemic index diet",
                        "Increase fiber intake (25-30g daily)",
                        "Reduce refined carbs and added sugars",
                    ),
                ),
                GuidanceSection(
                    heading="Monitoring:",
                    items=(
                        "Retest HbA1c in 6 months",
                        "Consider consultation with registered dietitian",
                        "Monitor weight and blood pressure",
                    ),
                ),
            ),
        )

    if tier is GlycemicTier.PREDIABETES:
        return CardContent(
            card_id=CARD_ID,
            title="Prediabetes - Urgent Lifestyle Intervention Needed",
            priority_label="HIGH PRIORITY",
            visual_priority=VisualPriority.ORANGE,
            measurements=_measurements(hba1c, glucose, "Prediabetes: 6.0-6.4%", "Prediabetes: 110-125 mg/dL"),
            alert=Alert(
                heading="High Risk of Progression",
                message="Aggressive intervention can reverse this condition and prevent diabetes.",
            ),
            sections=(
                GuidanceSection(
                    heading="Intensive Interventions:",
                    items=(
                        "Weight loss goal: 7-10% of body weight",
                        "Exercise: 300 min/week for best results",
                        "Low glycemic diet with calorie restriction",
                        "High fiber (30-35g daily)",
                        "Eliminate sugary beverages",
                        "Include resistance training 2-3x/week",
                    ),
                ),
                GuidanceSection(
                    heading="Medical Follow-Up:",
                    items=(
                        "Discuss metformin with physician (especially if BMI >= 35)",
                        "Retest HbA1c in 3 months",
                        "Screen for complications (eyes, kidneys)",
                        "Check lipid panel and blood pressure",
                        "Consider continuous glucose monitor (CGM)",
                    ),
                ),
            ),
        )

    if tier is GlycemicTier.DIABETES:
        return CardContent(
            card_id=CARD_ID,
            title="Diabetes Range - Immediate Physician Referral Required",
            priority_label="URGENT",
            visual_priority=VisualPriority.RED,
            measurements=_measurements(hba1c, glucose, "Diabetes: >= 6.5%", "Diabetes: >= 126 mg/dL"),
            alert=Alert(
                heading="URGENT: Immediate Physician Referral",
                message="Your labs indicate type 2 diabetes. Do NOT attempt self-management without physician guidance.",
            ),
            sections=(
                GuidanceSection(
                    heading="Immediate Next Steps:",
                    items=(
                        "Schedule physician appointment THIS WEEK",
                        "Confirm diagnosis with repeat HbA1c or fasting glucose",
                        "Discuss medication options (metformin, GLP-1 agonists, etc.)",
                        "Comprehensive diabetes education program",
                    ),
                ),
                GuidanceSection(
                    heading="Complication Screening:",
                    items=(
                        "Eye exam (retinopathy screening)",
                        "Kidney function tests (creatinine, urine albumin)",
                        "Foot examination (neuropathy check)",
                        "Lipid panel (cardiovascular risk)",
                        "Blood pressure monitoring",
                    ),
                ),
            ),
            notes=(
                "This report is NOT a diabetes diagnosis tool. Diabetes must be confirmed by a physician with repeat testing.",
            ),
        )

    return CardContent(
        card_id=CARD_ID,
        title="Severe Hyperglycemia - Urgent Medical Attention Required",
        priority_label="CRITICAL",
        visual_priority=VisualPriority.RED,
        measurements=_measurements(hba1c, glucose, "High-Risk: >= 8.0%", "High-Risk: >= 200 mg/dL"),
        alert=Alert(
            heading="CRITICAL: Severe Hyperglycemia",
            message="CALL YOUR DOCTOR TODAY OR GO TO URGENT CARE",
        ),
        sections=(
            GuidanceSection(
                heading="Immediate Action:",
                items=(
                    "Contact physician TODAY",
                    "Risk of diabetic ketoacidosis (DKA) or hyperosmolar state",
                    "May require immediate medication adjustment or hospitalization",
                    "DO NOT delay medical care",
                    "DO NOT attempt lifestyle changes alone",
                ),
            ),
            GuidanceSection(
                heading="Warning Symptoms (Seek Emergency Care):",
                items=(
                    "Excessive thirst or urination",
                    "Unexplained weight loss",
                    "Blurred vision",
                    "Confusion or difficulty concentrating",
                    "Fruity breath odor",
                    "Nausea or vomiting",
                ),
            ),
        ),
        notes=(
            "IMPORTANT: If you have symptoms of hyperglycemia (excessive thirst, frequent urination, "
            "blurred vision), seek emergency medical care immediately.",
        ),
    )


def render_glycemic_card(
    hba1c: float | None, glucose: float | None, tier: GlycemicTier | None, renderer: Renderer = render_html
) -> str:
    return renderer(build_glycemic_content(hba1c, glucose, tier))


def glycemic_card_from_values(
    hba1c: float | None, glucose: float | None, renderer: Renderer = render_html
) -> GlycemicCardResult:
    tier = classify_glycemic_status(hba1c, glucose)
    shown = should_show_glycemic_card(tier)
    card = build_glycemic_content(hba1c, glucose, tier) if shown else None
    priority, content = render_if_shown(shown, card, renderer)
    return GlycemicCardResult(
        shown=shown,
        hba1c_value=hba1c,
        glucose_value=glucose,
        tier=tier,
        priority=priority,
        content=content,
    )


def build_glycemic_card_result(record: Any, renderer: Renderer = render_html) -> GlycemicCardResult:
    return glycemic_card_from_values(extract_hba1c(record), extract_fasting_glucose(record), renderer)
