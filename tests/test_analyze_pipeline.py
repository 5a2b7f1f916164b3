"""
Tests for the analysis pipeline (Vision -> Layout -> ComponentMapping).
"""

import asyncio

import pytest

from fakes import FakeHTTPError, make_agents
from sketch2site.errors import InvalidCredentials
from sketch2site.models import AnalysisStatus, Bounds, ComponentType
from sketch2site.orchestration.service import SketchOrchestrator


VISION = {
    "layoutType": "single-column",
    "sections": [{"type": "hero", "position": "top", "description": "Big banner", "elements": ["title", "cta"]}],
    "colorIndications": "dark header",
}
LAYOUT = {"containerStructure": {"type": "flexbox", "columns": 1}}
MAPPING = {
    "components": [
        {
            "type": "button",
            "confidence": 0.9,
            "position": {"x": 10, "y": 20},
            "size": {"width": 80, "height": 30},
            "reasoning": "cta",
        }
    ]
}


def _analyze(agents, image="QUJD"):
    return asyncio.run(SketchOrchestrator(agents=agents).analyze_sketch(image))


def test_end_to_end_analysis():
    """All three phases succeed and are assembled into one analysis."""
    agents, llms = make_agents(vision=[VISION], layout=[LAYOUT], components=[MAPPING])

    result = _analyze(agents)

    assert result.status == AnalysisStatus.SUCCESS
    assert result.errors is None
    assert result.full_analysis.layout.type == "flexbox"
    assert result.full_analysis.layout.grid_columns == 1
    assert result.full_analysis.hierarchy == "Standard web layout"
    assert result.full_analysis.color_scheme == ["dark header"]

    suggestion = result.component_suggestions[0]
    assert suggestion.suggested_type == ComponentType.BUTTON
    assert suggestion.confidence == 0.9
    assert suggestion.bounds == Bounds(x=10, y=20, width=80, height=30)
    assert suggestion.reasoning == "cta"
    assert result.full_analysis.components == result.component_suggestions

    data = result.to_dict()
    assert data["visionAnalysis"] == VISION
    assert data["layoutAnalysis"] == LAYOUT
    assert data["status"] == "success"
    assert data["componentSuggestions"][0]["suggestedType"] == "button"
    assert [llm.call_count for llm in (llms["vision"], llms["layout"], llms["components"])] == [1, 1, 1]


def test_layout_failure_returns_partial():
    """Vision work is kept when the layout phase fails."""
    agents, llms = make_agents(vision=[VISION], layout=[FakeHTTPError(500, "upstream exploded")])

    result = _analyze(agents)
    data = result.to_dict()

    assert result.status == AnalysisStatus.PARTIAL
    assert data["visionAnalysis"] == VISION
    assert data["layoutAnalysis"] == {}
    assert data["componentSuggestions"] == []
    assert data["errors"] == ["LayoutAgent: upstream exploded"]
    assert result.full_analysis.hierarchy == "Analysis incomplete"
    assert result.full_analysis.layout.type == "single-column"
    assert llms["components"].call_count == 0


def test_vision_failure_raises():
    """Nothing to salvage: the vision error reaches the caller."""
    agents, llms = make_agents(vision=[FakeHTTPError(401, "Invalid API key")])

    with pytest.raises(InvalidCredentials, match="VisionAgent"):
        _analyze(agents)

    assert llms["layout"].call_count == 0


def test_mapping_failure_keeps_layout():
    """A mapping failure keeps both earlier results and the derived layout."""
    agents, _ = make_agents(vision=[VISION], layout=[LAYOUT], components=[FakeHTTPError(429, "Rate limit exceeded")])

    result = _analyze(agents)

    assert result.status == AnalysisStatus.PARTIAL
    assert result.layout_analysis.to_payload() == LAYOUT
    assert result.component_suggestions == []
    assert result.full_analysis.layout.type == "flexbox"
    assert result.errors == ["ComponentMappingAgent: Rate limit exceeded"]


def test_unparseable_mapping_is_reported():
    """A mapping reply without JSON is partial, not an empty success."""
    agents, _ = make_agents(vision=[VISION], layout=[LAYOUT], components=["Sorry, I cannot map these components."])

    result = _analyze(agents)

    assert result.status == AnalysisStatus.PARTIAL
    assert result.component_suggestions == []
    assert "extraction_fallback" in result.errors[0]


def test_mapping_with_raw_notes_is_success():
    """A mapping that carries its own raw field keeps its suggestions."""
    mapping = dict(MAPPING, raw="notes")
    agents, _ = make_agents(vision=[VISION], layout=[LAYOUT], components=[mapping])

    result = _analyze(agents)

    assert result.status == AnalysisStatus.SUCCESS
    assert result.errors is None
    assert [s.suggested_type for s in result.component_suggestions] == [ComponentType.BUTTON]


def test_zero_components_is_success():
    """A parseable mapping with no components is a legitimate success."""
    agents, _ = make_agents(vision=[VISION], layout=[LAYOUT], components=[{"components": [], "hierarchy": "empty page"}])

    result = _analyze(agents)

    assert result.status == AnalysisStatus.SUCCESS
    assert result.component_suggestions == []
    assert result.full_analysis.hierarchy == "empty page"


def test_unparseable_vision_continues_with_warning():
    """Vision prose is forwarded to the layout phase and reported as a warning."""
    agents, llms = make_agents(vision=["A header, a hero and a footer."], layout=[LAYOUT], components=[MAPPING])

    result = _analyze(agents)

    assert result.status == AnalysisStatus.SUCCESS
    assert len(result.warnings) == 1
    assert "VisionAgent" in result.warnings[0]
    assert "A header, a hero and a footer." in llms["layout"].prompt()
    assert result.to_dict()["visionAnalysis"] == {"raw": "A header, a hero and a footer."}


def test_missing_confidence_and_bounds_in_pipeline():
    """Defaults are applied to sparse mapping entries."""
    mapping = {"components": [{"type": "header"}, {"type": "footer", "confidence": 1.7}]}
    agents, _ = make_agents(vision=[VISION], layout=[{}], components=[mapping])

    result = _analyze(agents)

    first, second = result.component_suggestions
    assert first.confidence == 0.8
    assert first.bounds == Bounds(x=0, y=0, width=200, height=100)
    assert second.confidence == 1.0
    assert second.bounds == Bounds(x=0, y=100, width=200, height=100)
    assert result.full_analysis.layout.type == "single-column"


def test_data_url_input_is_accepted():
    """Canvas exports with a data URL prefix are sent as plain base64."""
    agents, llms = make_agents(vision=[VISION], layout=[LAYOUT], components=[MAPPING])

    _analyze(agents, image="data:image/png;base64,QUJD")

    image_part = llms["vision"].calls[0][1].content[1]
    assert image_part["image_url"]["url"] == "data:image/png;base64,QUJD"


def test_runs_are_independent():
    """Concurrent runs on separate orchestrators share no state."""
    agents_a, _ = make_agents(vision=[VISION], layout=[LAYOUT], components=[MAPPING])
    agents_b, _ = make_agents(vision=[VISION], layout=[FakeHTTPError(500, "down")])

    async def run_both():
        return await asyncio.gather(
            SketchOrchestrator(agents=agents_a).analyze_sketch("QUJD"),
            SketchOrchestrator(agents=agents_b).analyze_sketch("QUJD"),
        )

    first, second = asyncio.run(run_both())

    assert first.status == AnalysisStatus.SUCCESS
    assert second.status == AnalysisStatus.PARTIAL
    assert first.errors is None
