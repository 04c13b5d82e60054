from collections.abc import Collection
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

from health_report.schemas.card import CardContent
from health_report.services.rendering import Renderer


class CardResult(BaseModel):
    """Outcome of one pipeline run, shared by the preview and report call sites."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    shown: bool
    priority: str | None = None
    content: str = ""

    @model_validator(mode="after")
    def _check_shown_content(self):
        if not self.shown and self.content:
            raise ValueError("hidden card must have empty content")
        if self.shown and (getattr(self, "tier", None) is None or not self.content):
            raise ValueError("shown card needs a tier and content")
        return self


def passes_gate(tier: Enum | None, silent_tiers: Collection[Enum]) -> bool:
    """A card surfaces unless there is no tier or the tier needs no intervention."""
    if tier is None:
        return False
    return tier not in silent_tiers


def render_if_shown(shown: bool, card: CardContent | None, renderer: Renderer) -> tuple[str | None, str]:
    if not shown or card is None:
        return None, ""
    return card.priority_label, renderer(card)
