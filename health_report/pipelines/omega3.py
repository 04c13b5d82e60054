"""Omega-3 (EPA/DHA) card.

Unlike the single-value cards this one aggregates several independent signals
(triglycerides, ASCVD risk, Omega-3 Index, fish intake, current supplements,
bleeding contraindications and interacting medications) before classifying.
Safety tiers are evaluated first and are always surfaced, so a patient who
must not take omega-3 sees an explicit refusal rather than a silent report.
"""

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from health_report.pipelines.base import CardResult, passes_gate, render_if_shown
from health_report.schemas.card import Alert, CardContent, GuidanceSection, Measurement, VisualPriority
from health_report.services.extraction import FieldSpec, extract_value, get_list, get_section
from health_report.services.rendering import Renderer, render_html
from health_report.services.risk import resolve_ascvd_risk

CARD_ID = "omega3-card"


class Omega3Tier(str, Enum):
    CONTRAINDICATED = "contraindicated"
    HIGH_PRIORITY = "high_priority"
    MODERATE_PRIORITY = "moderate_priority"
    DIETARY_EMPHASIS = "dietary_emphasis"
    CAUTION = "caution"
    NO_RECOMMENDATION = "no_recommendation"


class HighPriorityTrigger(str, Enum):
    """Which condition put a patient in the high-priority tier."""

    VERY_HIGH_TRIGLYCERIDES = "very_high_triglycerides"
    HIGH_TRIGLYCERIDES = "high_triglycerides"
    BORDERLINE_TG_HIGH_ASCVD = "borderline_tg_high_ascvd"


class Omega3Thresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    tg_very_high: float = 500
    tg_high: float = 200
    tg_borderline_high: float = 150
    ascvd_high: float = 0.15
    ascvd_moderate: float = 0.075
    omega3_index_optimal: float = 8
    adequate_supplement_grams: float = 2
    adequate_fish_servings: float = 2


OMEGA3_THRESHOLDS = Omega3Thresholds()

TRIGLYCERIDES_FIELD = FieldSpec(
    name="triglycerides",
    keys=("triglycerides", "tg", "TG", "Triglycerides", "TRIGLYCERIDES", "trigs"),
    minimum=20,
    maximum=3000,
)
OMEGA3_INDEX_FIELD = FieldSpec(
    name="omega3_index",
    keys=("omega3Index", "omega_3_index", "o3Index", "Omega3Index", "OMEGA3_INDEX"),
    minimum=0,
    maximum=20,
)
FISH_INTAKE_FIELD = FieldSpec(
    name="fish_servings_per_week",
    keys=("fishServingsPerWeek", "fish_servings", "fishIntake", "fattyFishServings"),
    minimum=0,
    maximum=14,
    sections=("dietary",),
)
SUPPLEMENT_DOSE_FIELD = FieldSpec(
    name="epa_dha_grams",
    keys=("epaDha", "epa_dha", "dose", "amount"),
    minimum=0,
    maximum=10,
    sections=(None,),
)

OMEGA3_SUPPLEMENT_TERMS = ("fish oil", "omega", "epa", "dha", "krill", "algae oil")
CAUTION_CATEGORIES = ("anticoagulant", "antiplatelet")
ANTICOAGULANTS = (
    "warfarin", "coumadin",
    "apixaban", "eliquis",
    "rivaroxaban", "xarelto",
    "dabigatran", "pradaxa",
    "edoxaban", "savaysa",
)
ANTIPLATELETS = (
    "aspirin", "asa",
    "clopidogrel", "plavix",
    "ticagrelor", "brilinta",
    "prasugrel", "effient",
)

SILENT_TIERS = {Omega3Tier.NO_RECOMMENDATION}

PRIORITY_LABELS = {
    Omega3Tier.CONTRAINDICATED: "CONTRAINDICATION",
    Omega3Tier.HIGH_PRIORITY: "HIGH PRIORITY",
    Omega3Tier.MODERATE_PRIORITY: "MEDIUM PRIORITY",
    Omega3Tier.DIETARY_EMPHASIS: "MAINTENANCE",
    Omega3Tier.CAUTION: "CAUTION",
}


class Omega3Context(BaseModel):
    """Every input the Omega-3 classifier looks at, each independently optional."""
    model_config = ConfigDict(frozen=True)

    triglycerides: float | None = None
    ascvd_risk: float | None = None
    omega3_index: float | None = None
    fish_intake: float | None = None
    existing_omega3: float | None = None
    has_contraindication: bool = False
    requires_caution: bool = False


class Omega3CardResult(CardResult):
    triglycerides: float | None = None
    ascvd_risk: float | None = Field(default=None, alias="ascvdRisk")
    omega3_index: float | None = Field(default=None, alias="omega3Index")
    tier: Omega3Tier | None = None


def extract_triglycerides(record: Any) -> float | None:
    return extract_value(record, TRIGLYCERIDES_FIELD)


def extract_omega3_index(record: Any) -> float | None:
    return extract_value(record, OMEGA3_INDEX_FIELD)


def extract_fish_intake(record: Any) -> float | None:
    return extract_value(record, FISH_INTAKE_FIELD)


def _item_text(item: Any, key: str) -> str:
    if isinstance(item, str):
        return item.lower() if key == "name" else ""
    if isinstance(item, Mapping):
        return str(item.get(key) or "").lower()
    return ""


def extract_existing_omega3(supplements: Any) -> float | None:
    """Daily EPA/DHA grams from the first omega-3 supplement with a usable dose."""
    if not isinstance(supplements, (list, tuple)):
        return None
    for supplement in supplements:
        if not isinstance(supplement, Mapping):
            continue
        name = _item_text(supplement, "name")
        if not any(term in name for term in OMEGA3_SUPPLEMENT_TERMS):
            continue
        dose = extract_value(supplement, SUPPLEMENT_DOSE_FIELD)
        # zero is not a dose
        if dose is not None and dose > 0:
            return dose
    return None


def has_omega3_contraindication(medical_history: Any) -> bool:
    if not isinstance(medical_history, Mapping):
        return False
    return medical_history.get("bleedingDisorder") is True or medical_history.get("upcomingSurgery") is True


def requires_omega3_caution(medications: Any) -> bool:
    if not isinstance(medications, (list, tuple)):
        return False
    for medication in medications:
        category = _item_text(medication, "category")
        if any(term in category for term in CAUTION_CATEGORIES):
            return True
        # whole words only, so "asa" does not match inside "nasal"; digits split words
        words = set(re.findall(r"[a-z]+", _item_text(medication, "name")))
        if words.intersection(ANTICOAGULANTS + ANTIPLATELETS):
            return True
    return False


def gather_omega3_context(record: Any, risk: Any = None) -> Omega3Context:
    return Omega3Context(
        triglycerides=extract_triglycerides(record),
        ascvd_risk=resolve_ascvd_risk(record, risk),
        omega3_index=extract_omega3_index(record),
        fish_intake=extract_fish_intake(record),
        existing_omega3=extract_existing_omega3(get_list(record, "supplements")),
        has_contraindication=has_omega3_contraindication(get_section(record, "medicalHistory")),
        requires_caution=requires_omega3_caution(get_list(record, "medications")),
    )


def high_priority_trigger(
    context: Omega3Context, thresholds: Omega3Thresholds = OMEGA3_THRESHOLDS
) -> HighPriorityTrigger | None:
    tg = context.triglycerides
    if tg is None:
        return None
    if tg >= thresholds.tg_very_high:
        return HighPriorityTrigger.VERY_HIGH_TRIGLYCERIDES
    if tg >= thresholds.tg_high:
        return HighPriorityTrigger.HIGH_TRIGLYCERIDES
    if tg >= thresholds.tg_borderline_high and context.ascvd_risk is not None and context.ascvd_risk >= thresholds.ascvd_high:
        return HighPriorityTrigger.BORDERLINE_TG_HIGH_ASCVD
    return None


def is_omega3_adequate(context: Omega3Context, thresholds: Omega3Thresholds = OMEGA3_THRESHOLDS) -> bool:
    if context.omega3_index is not None and context.omega3_index >= thresholds.omega3_index_optimal:
        return True
    return context.existing_omega3 is not None and context.existing_omega3 >= thresholds.adequate_supplement_grams


def classify_omega3_tier(
    context: Omega3Context, thresholds: Omega3Thresholds = OMEGA3_THRESHOLDS
) -> Omega3Tier | None:
    """Resolve the tier with a fixed precedence.

    contraindication > caution > adequacy > high > moderate > dietary emphasis.
    Returns ``None`` when nothing actionable can be derived from the inputs.
    """
    if context.has_contraindication:
        return Omega3Tier.CONTRAINDICATED
    if context.requires_caution:
        return Omega3Tier.CAUTION
    if is_omega3_adequate(context, thresholds):
        return Omega3Tier.NO_RECOMMENDATION

    if high_priority_trigger(context, thresholds) is not None:
        return Omega3Tier.HIGH_PRIORITY

    tg = context.triglycerides
    ascvd = context.ascvd_risk
    if tg is not None and thresholds.tg_borderline_high <= tg < thresholds.tg_high:
        return Omega3Tier.MODERATE_PRIORITY
    if ascvd is not None and thresholds.ascvd_moderate <= ascvd < thresholds.ascvd_high:
        return Omega3Tier.MODERATE_PRIORITY

    if tg is not None and tg < thresholds.tg_borderline_high:
        low_risk = ascvd is None or ascvd < thresholds.ascvd_moderate
        eats_fish = context.fish_intake is not None and context.fish_intake >= thresholds.adequate_fish_servings
        if low_risk and eats_fish:
            return Omega3Tier.DIETARY_EMPHASIS

    return None


def should_show_omega3_card(tier: Omega3Tier | None) -> bool:
    return passes_gate(tier, SILENT_TIERS)


def _measurements(context: Omega3Context, tg_reference: str | None, with_index: bool = False):
    tg = context.triglycerides
    ascvd = context.ascvd_risk
    measurements = [
        Measurement(
            label="Triglycerides",
            display=f"{round(tg)} mg/dL" if tg is not None else "Not measured",
            reference=tg_reference,
        ),
        Measurement(label="ASCVD Risk", display=f"{ascvd * 100:.1f}%" if ascvd is not None else "Not assessed"),
    ]
    if with_index:
        index = context.omega3_index
        measurements.append(
            Measurement(label="Omega-3 Index", display=f"{index:.1f}%" if index is not None else "Not measured")
        )
    return tuple(measurements)


def _contraindicated_card() -> CardContent:
    return CardContent(
        card_id=CARD_ID,
        title="Omega-3 Supplementation Contraindicated",
        priority_label=PRIORITY_LABELS[Omega3Tier.CONTRAINDICATED],
        visual_priority=VisualPriority.RED,
        alert=Alert(
            heading="DO NOT RECOMMEND",
            message="Omega-3 supplementation is contraindicated due to bleeding risk.",
        ),
        sections=(
            GuidanceSection(
                heading="Why Contraindicated:",
                items=(
                    "Bleeding disorder present (e.g., hemophilia, von Willebrand disease)",
                    "Upcoming surgery within 2 weeks",
                    "High-dose omega-3 increases bleeding risk",
                ),
            ),
            GuidanceSection(
                heading="Alternative Recommendations:",
                items=(
                    "Consult your physician for personalized guidance",
                    "Dietary sources MAY be acceptable in moderation",
                    "For surgery: Discuss omega-3 timing with surgeon",
                ),
            ),
        ),
    )


def _prescription_card(context: Omega3Context) -> CardContent:
    return CardContent(
        card_id=CARD_ID,
        title="Very High Triglycerides - Prescription Omega-3 Required",
        priority_label="URGENT",
        visual_priority=VisualPriority.RED,
        measurements=_measurements(context, "Very High: >= 500 mg/dL"),
        alert=Alert(
            heading="URGENT: Physician Referral Required",
            message="Prescription omega-3 (Vascepa/Lovaza) needed for very high triglycerides",
        ),
        sections=(
            GuidanceSection(
                heading="Immediate Action:",
                items=(
                    "Schedule physician appointment THIS WEEK",
                    "Prescription omega-3 required: Vascepa (4g EPA) or Lovaza (4g EPA/DHA)",
                    "OTC supplements insufficient for TG >= 500 mg/dL",
                    "Retest lipid panel in 8-12 weeks after starting treatment",
                ),
            ),
            GuidanceSection(
                heading="Lifestyle Support:",
                items=(
                    "Reduce refined carbs and sugars (primary TG driver)",
                    "Limit alcohol intake (alcohol raises TG)",
                    "Increase fatty fish consumption (salmon, mackerel)",
                    "Regular exercise (150+ min/week)",
                ),
            ),
        ),
    )


def _high_dose_card(context: Omega3Context) -> CardContent:
    return CardContent(
        card_id=CARD_ID,
        title="High Cardiovascular Risk - High-Dose Omega-3 Recommended",
        priority_label=PRIORITY_LABELS[Omega3Tier.HIGH_PRIORITY],
        visual_priority=VisualPriority.RED,
        measurements=_measurements(context, "High: >= 200 mg/dL"),
        sections=(
            GuidanceSection(
                heading="Recommended Supplementation:",
                items=(
                    "High-dose EPA/DHA supplementation: 3-4g daily",
                    "Choose pharmaceutical-grade fish oil (purity & potency verified)",
                    "Take with meals for best absorption",
                    "Consider Omega-3 Index testing to monitor adequacy",
                ),
            ),
            GuidanceSection(
                heading="Dietary Optimization:",
                items=(
                    "Increase fatty fish intake (salmon, mackerel, sardines) 3-4x/week",
                    "Reduce refined carbs and sugars",
                    "Limit alcohol intake",
                    "Retest lipid panel in 8-12 weeks",
                ),
            ),
        ),
        notes=(
            "Consult your physician before starting omega-3, especially if taking blood thinners. "
            "Dosing varies based on individual health status.",
        ),
    )


def _moderate_card(context: Omega3Context) -> CardContent:
    return CardContent(
        card_id=CARD_ID,
        title="Moderate Cardiovascular Risk - Omega-3 Supplementation Beneficial",
        priority_label=PRIORITY_LABELS[Omega3Tier.MODERATE_PRIORITY],
        visual_priority=VisualPriority.ORANGE,
        measurements=_measurements(context, "Borderline High: 150-199 mg/dL"),
        sections=(
            GuidanceSection(
                heading="Recommended Supplementation:",
                items=(
                    "EPA/DHA supplementation: 2-3g daily",
                    "Choose high-quality fish oil (third-party tested)",
                    "Take with fat-containing meal for absorption",
                    "Retest lipid panel in 3-6 months",
                ),
            ),
            GuidanceSection(
                heading="Dietary Emphasis:",
                items=(
                    "Emphasize fatty fish consumption: salmon, mackerel, sardines (2-3 servings/week)",
                    "Include plant-based omega-3 sources (walnuts, flaxseed)",
                    "Reduce refined carbs to lower triglycerides",
                    "Moderate alcohol intake",
                ),
            ),
        ),
        notes=("Consult your physician before starting omega-3, especially if taking blood thinners.",),
    )


def _dietary_card(context: Omega3Context) -> CardContent:
    return CardContent(
        card_id=CARD_ID,
        title="Low Cardiovascular Risk - Dietary Omega-3 Adequate",
        priority_label=PRIORITY_LABELS[Omega3Tier.DIETARY_EMPHASIS],
        visual_priority=VisualPriority.GREEN,
        measurements=_measurements(context, "Normal: < 150 mg/dL", with_index=True),
        alert=Alert(
            heading="On Track",
            message="Your triglycerides are normal. Continue dietary omega-3 intake.",
        ),
        sections=(
            GuidanceSection(
                heading="Dietary Recommendations:",
                items=(
                    "Continue current dietary omega-3 intake (fatty fish 2-3x/week)",
                    "Salmon, mackerel, sardines, anchovies are excellent sources",
                    "Include plant-based sources (walnuts, flaxseed, chia seeds)",
                    "Annual lipid panel recheck recommended",
                ),
            ),
            GuidanceSection(
                heading="Optional Supplementation:",
                items=(
                    "Low-dose EPA/DHA supplementation (1g daily) for additional cardiovascular benefit (optional)",
                    "Consider testing Omega-3 Index to confirm adequacy (target >8%)",
                    "If Omega-3 Index < 8%, increase fish intake or add supplements",
                ),
            ),
        ),
    )


def _caution_card(context: Omega3Context) -> CardContent:
    return CardContent(
        card_id=CARD_ID,
        title="Omega-3 Supplementation - Physician Consultation Required",
        priority_label=PRIORITY_LABELS[Omega3Tier.CAUTION],
        visual_priority=VisualPriority.ORANGE,
        measurements=_measurements(context, None),
        alert=Alert(
            heading="CAUTION: Medication Interaction Risk",
            message="Omega-3 at high doses may increase bleeding risk with blood thinners.",
        ),
        sections=(
            GuidanceSection(
                heading="Before Starting Omega-3:",
                items=(
                    "Discuss with your physician BEFORE starting omega-3",
                    "Review current medications (anticoagulants, antiplatelet agents)",
                    "If approved by physician: Start with lower dose (1-2g daily)",
                    "Monitor for unusual bruising or bleeding",
                ),
            ),
            GuidanceSection(
                heading="Monitoring Requirements:",
                items=(
                    "INR monitoring if on warfarin (omega-3 may potentiate effect)",
                    "Report any unusual bleeding to physician immediately",
                    "Stop omega-3 1-2 weeks before any surgery (discuss with surgeon)",
                    "Dietary omega-3 from fish is generally safer than high-dose supplements",
                ),
            ),
        ),
        notes=("IMPORTANT: Do NOT start omega-3 supplementation without physician approval if taking blood thinners.",),
    )


def build_omega3_content(context: Omega3Context, tier: Omega3Tier | None) -> CardContent | None:
    if tier is None or tier in SILENT_TIERS:
        return None
    if tier is Omega3Tier.CONTRAINDICATED:
        return _contraindicated_card()
    if tier is Omega3Tier.CAUTION:
        return _caution_card(context)
    if tier is Omega3Tier.HIGH_PRIORITY:
        # Same tier, different narrative: only very high TG needs a prescription.
        if high_priority_trigger(context) is HighPriorityTrigger.VERY_HIGH_TRIGLYCERIDES:
            return _prescription_card(context)
        return _high_dose_card(context)
    if tier is Omega3Tier.MODERATE_PRIORITY:
        return _moderate_card(context)
    return _dietary_card(context)


def render_omega3_card(context: Omega3Context, tier: Omega3Tier | None, renderer: Renderer = render_html) -> str:
    return renderer(build_omega3_content(context, tier))


def omega3_card_from_context(context: Omega3Context, renderer: Renderer = render_html) -> Omega3CardResult:
    tier = classify_omega3_tier(context)
    shown = should_show_omega3_card(tier)
    card = build_omega3_content(context, tier) if shown else None
    # the prescription card is labelled URGENT but stays in the high-priority tier
    _, content = render_if_shown(shown, card, renderer)
    priority = PRIORITY_LABELS[tier] if shown else None
    return Omega3CardResult(
        shown=shown,
        triglycerides=context.triglycerides,
        ascvd_risk=context.ascvd_risk,
        omega3_index=context.omega3_index,
        tier=tier,
        priority=priority,
        content=content,
    )


def build_omega3_card_result(record: Any, risk: Any = None, renderer: Renderer = render_html) -> Omega3CardResult:
    return omega3_card_from_context(gather_omega3_context(record, risk), renderer)
