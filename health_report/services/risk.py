from collections.abc import Mapping
from typing import Any

from health_report.services.extraction import coerce_number, first_present, get_list, get_section

ASCVD_KEYS = ("ascvd", "ascvd_risk", "ASCVD", "ascvdRisk", "cardiovascularRisk")
CARDIOVASCULAR_CATEGORIES = {"cardiovascular", "ascvd", "cvd"}

# Numeric proxies for categorical risk levels.
RISK_LEVEL_MAP: dict[str, float] = {
    "low": 0.05,
    "moderate": 0.10,
    "high": 0.15,
    "very_high": 0.25,
}


def normalize_risk_fraction(value: Any) -> float | None:
    """Coerce an ASCVD estimate to a 0-1 fraction; values above 1 are percentages."""
    number = coerce_number(value)
    if number is None:
        return None
    if number > 1:
        number = number / 100
    if number < 0 or number > 1:
        return None
    return number


def risk_level_to_fraction(level: Any) -> float | None:
    if not isinstance(level, str):
        return None
    normalized = level.strip().lower().replace("-", "_").replace(" ", "_")
    return RISK_LEVEL_MAP.get(normalized)


def _from_results(results: list) -> float | None:
    for entry in results:
        if not isinstance(entry, Mapping):
            continue
        category = str(entry.get("category") or "").strip().lower()
        if category not in CARDIOVASCULAR_CATEGORIES:
            continue
        score = normalize_risk_fraction(entry.get("risk_score"))
        if score is not None:
            return score
        return risk_level_to_fraction(entry.get("risk_level"))
    return None


def extract_ascvd_risk(risk_record: Any) -> float | None:
    """Find the ASCVD risk in a risk record as a decimal fraction.

    Probes the direct ASCVD keys first, then a categorical ``risk_level``,
    then the cardiovascular entry of a ``results`` list.
    """
    if not isinstance(risk_record, Mapping):
        return None

    for key in ASCVD_KEYS:
        if key not in risk_record:
            continue
        fraction = normalize_risk_fraction(risk_record[key])
        if fraction is not None:
            return fraction

    level_fraction = risk_level_to_fraction(risk_record.get("risk_level"))
    if level_fraction is not None:
        return level_fraction

    return _from_results(get_list(risk_record, "results"))


def resolve_ascvd_risk(record: Any, risk: Any = None) -> float | None:
    """Prefer the separate risk record, then fall back to the record's ``risk`` section."""
    return first_present(extract_ascvd_risk(risk), extract_ascvd_risk(get_section(record, "risk")))
