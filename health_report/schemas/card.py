from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class VisualPriority(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"


class Measurement(BaseModel):
    """A value shown at the top of a card, e.g. ``HbA1c: 6.2%``."""
    model_config = ConfigDict(frozen=True)

    label: str
    display: str = Field(description="Formatted value, or a 'Not measured' placeholder")
    reference: str | None = Field(default=None, description="Reference range shown next to the value")


class Alert(BaseModel):
    """Highlighted callout inside a card."""
    model_config = ConfigDict(frozen=True)

    heading: str
    message: str


class GuidanceSection(BaseModel):
    """One column of guidance (clinical/monitoring or lifestyle/dietary)."""
    model_config = ConfigDict(frozen=True)

    heading: str
    items: tuple[str, ...]


class CardContent(BaseModel):
    """Structured recommendation card, independent of any output format."""
    model_config = ConfigDict(frozen=True)

    card_id: str
    title: str
    priority_label: str
    visual_priority: VisualPriority
    measurements: tuple[Measurement, ...] = ()
    alert: Alert | None = None
    sections: tuple[GuidanceSection, ...] = ()
    notes: tuple[str, ...] = ()
