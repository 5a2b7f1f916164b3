"""
State management for the LangGraph pipelines.

AnalyzeState and GenerateState are TypedDicts updated incrementally by the
graph nodes. ``phase`` names the last state reached; ``errors`` accumulates
through a reducer so nodes only return the entries they add.
"""

import operator
from typing import Annotated, Any, Dict, List, Optional, TypedDict

from sketch2site.models import ComponentMapping, LayoutPlan, VisionReport


# Pipeline A phases
IDLE = "idle"
VISION_DONE = "vision_done"
LAYOUT_DONE = "layout_done"
COMPONENTS_DONE = "components_done"
PARTIAL = "partial"

# Pipeline B phases
HTML_DONE = "html_done"
CSS_DONE = "css_done"
JS_DONE = "js_done"
INCOMPLETE = "incomplete"


class AnalyzeState(TypedDict, total=False):
    """
    State for one analysis run (Vision -> Layout -> ComponentMapping).

    All fields are optional (total=False) so nodes can return partial updates.
    """

    # Input
    image_base64: str
    media_type: str

    # Phase outputs
    vision: Optional[VisionReport]
    layout: Optional[LayoutPlan]
    mapping: Optional[ComponentMapping]

    # Workflow control
    phase: str
    errors: Annotated[List[str], operator.add]
    warnings: Annotated[List[str], operator.add]


class GenerateState(TypedDict, total=False):
    """State for one generation run (HTML -> CSS -> JS)."""

    # Input
    components: List[Dict[str, Any]]
    layout_analysis: Optional[Dict[str, Any]]
    interactivity: List[str]

    # Phase outputs
    html: str
    css: str
    javascript: str

    # Workflow control
    phase: str
    errors: Annotated[List[str], operator.add]


def get_state_summary(state: Dict[str, Any]) -> str:
    """
    Get a human-readable summary of a pipeline state.

    Args:
        state: AnalyzeState or GenerateState

    Returns:
        Formatted string summary
    """
    summary = [f"Phase: {state.get('phase', IDLE)}"]
    for key in ("vision", "layout", "mapping"):
        if key in state:
            summary.append(f"{key}: {'present' if state.get(key) is not None else 'missing'}")
    for key in ("html", "css", "javascript"):
        if key in state:
            summary.append(f"{key}: {len(state.get(key) or '')} chars")
    if state.get("errors"):
        summary.append(f"Errors: {len(state['errors'])}")
    if state.get("warnings"):
        summary.append(f"Warnings: {len(state['warnings'])}")
    return "\n".join(summary)
