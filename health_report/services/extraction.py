import math
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict

# None stands for the top level of the record.
ROOT = None
DEFAULT_SECTIONS: tuple[str | None, ...] = ("biomarkers", "clinical", ROOT)


class FieldSpec(BaseModel):
    """Synonym keys and plausibility bounds for one clinical value."""

    model_config = ConfigDict(frozen=True)

    name: str
    keys: tuple[str, ...]
    minimum: float
    maximum: float
    sections: tuple[str | None, ...] = DEFAULT_SECTIONS

    def locations(self, sections: Sequence[str | None] | None = None) -> Iterator[tuple[str | None, str]]:
        for section in sections if sections is not None else self.sections:
            for key in self.keys:
                yield section, key

    def is_plausible(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


def coerce_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def get_section(record: Any, section: str | None) -> Mapping | None:
    if not isinstance(record, Mapping):
        return None
    if section is ROOT:
        return record
    nested = record.get(section)
    return nested if isinstance(nested, Mapping) else None


def get_list(record: Any, section: str) -> list:
    if not isinstance(record, Mapping):
        return []
    items = record.get(section)
    return list(items) if isinstance(items, (list, tuple)) else []


def extract_value(record: Any, spec: FieldSpec, sections: Sequence[str | None] | None = None) -> float | None:
    """Return the first plausible numeric value for ``spec`` found in ``record``.

    Locations are probed section by section, keys in order. A value that is
    missing, non-numeric or outside the plausibility interval is skipped, so
    malformed upstream data degrades to ``None`` instead of raising.
    """
    for section, key in spec.locations(sections):
        container = get_section(record, section)
        if container is None or key not in container:
            continue
        number = coerce_number(container[key])
        if number is not None and spec.is_plausible(number):
            return number
    return None


def first_present(*values: float | None) -> float | None:
    for value in values:
        if value is not None:
            return value
    return None
