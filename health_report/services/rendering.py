"""Presentation layer for recommendation cards.

Pipelines decide *what* a card says and return a ``CardContent`` record; the
functions here turn that record into markup or plain text. Any renderer maps
``None`` to an empty string, which is the only legal empty card.
"""

from collections.abc import Callable
from html import escape

from health_report.schemas.card import CardContent, VisualPriority

Renderer = Callable[[CardContent | None], str]

_COLOR_FAMILIES = {
    VisualPriority.GREEN: "green",
    VisualPriority.YELLOW: "yellow",
    VisualPriority.ORANGE: "orange",
    VisualPriority.RED: "red",
}


def _html_section(heading: str, items: tuple[str, ...]) -> str:
    rows = "".join(f"<li>{escape(item)}</li>" for item in items)
    return (
        "<div>"
        f'<p class="text-sm font-medium text-gray-700 mb-2">{escape(heading)}</p>'
        f'<ul class="text-xs text-gray-600 space-y-1">{rows}</ul>'
        "</div>"
    )


def render_html(content: CardContent | None) -> str:
    if content is None:
        return ""
    color = _COLOR_FAMILIES[content.visual_priority]
    parts = [
        f'<section data-test="{escape(content.card_id)}" '
        f'data-priority="{color}" class="bg-white rounded-lg p-4 border border-{color}-200">',
        '<div class="flex items-center justify-between mb-2">',
        f'<h3 class="text-base font-semibold text-gray-800">{escape(content.title)}</h3>',
        f'<span class="text-xs font-bold text-{color}-600 px-2 py-1 rounded">{escape(content.priority_label)}</span>',
        "</div>",
    ]
    if content.measurements:
        values = " | ".join(
            f"<strong>{escape(m.label)}:</strong> {escape(m.display)}"
            + (f" ({escape(m.reference)})" if m.reference else "")
            for m in content.measurements
        )
        parts.append(f'<p class="text-sm text-gray-600 mb-3">{values}</p>')
    if content.alert is not None:
        parts.append(
            f'<div class="bg-{color}-50 border border-{color}-200 rounded p-3 mb-3">'
            f'<p class="text-sm font-semibold text-{color}-800 mb-1">{escape(content.alert.heading)}</p>'
            f'<p class="text-xs text-{color}-700">{escape(content.alert.message)}</p>'
            "</div>"
        )
    if content.sections:
        columns = "".join(_html_section(s.heading, s.items) for s in content.sections)
        parts.append(f'<div class="grid md:grid-cols-2 gap-4">{columns}</div>')
    for note in content.notes:
        parts.append(
            '<div class="mt-3 p-2 bg-gray-50 border border-gray-200 rounded">'
            f'<p class="text-xs text-gray-600">{escape(note)}</p>'
            "</div>"
        )
    parts.append("</section>")
    return "".join(parts)


def render_text(content: CardContent | None) -> str:
    if content is None:
        return ""
    lines = [f"[{content.priority_label}] {content.title}"]
    for m in content.measurements:
        line = f"{m.label}: {m.display}"
        if m.reference:
            line += f" ({m.reference})"
        lines.append(line)
    if content.alert is not None:
        lines.append(f"! {content.alert.heading}: {content.alert.message}")
    for section in content.sections:
        lines.append("")
        lines.append(f"{section.heading}")
        lines.extend(f"- {item}" for item in section.items)
    if content.notes:
        lines.append("")
        lines.extend(f"Note: {note}" for note in content.notes)
    return "\n".join(lines)


RENDERERS: dict[str, Renderer] = {
    "html": render_html,
    "text": render_text,
}


def get_renderer(name: str) -> Renderer:
    try:
        return RENDERERS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown content format: {name}") from None
