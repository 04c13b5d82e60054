import pytest

from health_report.schemas.card import Alert, CardContent, GuidanceSection, Measurement, VisualPriority
from health_report.services.rendering import get_renderer, render_html, render_text


@pytest.fixture()
def content() -> CardContent:
    return CardContent(
        card_id="test-card",
        title="Omega <3> & friends",
        priority_label="WATCH",
        visual_priority=VisualPriority.YELLOW,
        measurements=(Measurement(label="Value", display="<5 units", reference="Normal: < 5"),),
        alert=Alert(heading="Heads up", message="Check again"),
        sections=(GuidanceSection(heading="Do:", items=("walk", "sleep")),),
        notes=("See a physician.",),
    )


def test_html_escapes_text(content):
    html = render_html(content)
    assert "Omega &lt;3&gt; &amp; friends" in html
    assert "&lt;5 units" in html
    assert "<3>" not in html


def test_html_carries_card_id_and_color(content):
    html = render_html(content)
    assert 'data-test="test-card"' in html
    assert 'data-priority="yellow"' in html
    assert "border-yellow-200" in html
    assert "<li>walk</li>" in html


def test_text_layout(content):
    lines = render_text(content).splitlines()
    assert lines[0] == "[WATCH] Omega <3> & friends"
    assert "Value: <5 units (Normal: < 5)" in lines
    assert "! Heads up: Check again" in lines
    assert "- sleep" in lines
    assert lines[-1] == "Note: See a physician."


def test_structured_form_is_plain_data(content):
    data = content.model_dump(mode="json")
    assert data["visual_priority"] == "yellow"
    assert data["sections"][0]["items"] == ["walk", "sleep"]


def test_nothing_renders_to_empty_string():
    assert render_html(None) == ""
    assert render_text(None) == ""


def test_renderer_registry():
    assert get_renderer("html") is render_html
    assert get_renderer("TEXT") is render_text
    with pytest.raises(ValueError, match="Unknown content format"):
        get_renderer("pdf")
