import logging
from typing import Any

from health_report.pipelines import (
    build_glycemic_card_result,
    build_ldl_card_result,
    build_omega3_card_result,
    build_vitamin_d_card_result,
)
from health_report.pipelines.base import CardResult
from health_report.services.rendering import Renderer, render_html

logger = logging.getLogger(__name__)


def log_card_outcome(card_key: str, result: CardResult) -> None:
    # Values are patient data; only the decision is logged.
    tier = getattr(result, "tier", None)
    logger.info(
        "Card %s: tier=%s shown=%s",
        card_key,
        tier.value if tier is not None else None,
        result.shown,
    )


def generate_report_cards(
    patient: Any, risks: Any = None, renderer: Renderer = render_html
) -> dict[str, CardResult]:
    """Run every recommendation pipeline against one patient record.

    Each card goes through the same facade as the preview endpoints, so a card
    in the report is identical to its preview for the same data.
    """
    cards: dict[str, CardResult] = {
        "hba1c": build_glycemic_card_result(patient, renderer=renderer),
        "ldl": build_ldl_card_result(patient, risks, renderer=renderer),
        "vitaminD": build_vitamin_d_card_result(patient, renderer=renderer),
        "omega3": build_omega3_card_result(patient, risks, renderer=renderer),
    }
    for card_key, result in cards.items():
        log_card_outcome(card_key, result)
    logger.info("Generated report with %d of %d cards shown", sum(c.shown for c in cards.values()), len(cards))
    return cards
