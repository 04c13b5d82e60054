from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProbePayload(BaseModel):
    """Minimal record accepted by the preview endpoints.

    Sections are left untyped: a section of the wrong shape reads as absent,
    the same as in a full report. Keys beyond these are kept.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    biomarkers: Any = None
    clinical: Any = None
    risk: Any = None
    medical_history: Any = Field(default=None, alias="medicalHistory")
    medications: Any = None
    dietary: Any = None
    supplements: Any = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ReportRequest(BaseModel):
    patient: dict[str, Any] = Field(description="Full patient record")
    risks: dict[str, Any] | None = Field(default=None, description="Separately computed risk record")
