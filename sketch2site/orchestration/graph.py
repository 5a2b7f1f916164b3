"""
LangGraph construction for the analysis and generation pipelines.

Both graphs are linear chains. The vision node re-raises its failure since an
analysis without it has nothing to salvage. Every other node records the
error, marks the run partial/incomplete and routes straight to END.
"""

from typing import Any, Dict, List, Literal

from langgraph.graph import END, StateGraph

from sketch2site.errors import AgentError, ErrorKind
from sketch2site.models import INTERACTIVE_TYPES, coerce_component_type
from sketch2site.orchestration.agents import AgentSet
from sketch2site.orchestration.state import (
    COMPONENTS_DONE,
    CSS_DONE,
    HTML_DONE,
    INCOMPLETE,
    JS_DONE,
    LAYOUT_DONE,
    PARTIAL,
    VISION_DONE,
    AnalyzeState,
    GenerateState,
)
from sketch2site.utils.llm_logger import get_logger


ANALYZE_PIPELINE = "AnalyzePipeline"
GENERATE_PIPELINE = "GeneratePipeline"


def fallback_warning(agent: str) -> str:
    return f"{agent}: {ErrorKind.EXTRACTION_FALLBACK.value}: response contained no parseable JSON object"


def interactive_types(components: List[Dict[str, Any]]) -> List[str]:
    """
    Interactive component types present in ``components``, in first-seen order.

    Args:
        components: Accepted component records (dicts with a ``type`` key).

    Returns:
        Subset of button/form/navbar tags; empty when nothing needs scripting.
    """
    found = []
    for component in components:
        component_type = coerce_component_type(component.get("type") if isinstance(component, dict) else None)
        if component_type in INTERACTIVE_TYPES and component_type.value not in found:
            found.append(component_type.value)
    return found


def create_analyze_graph(agents: AgentSet):
    """
    Create and compile the analysis graph (Vision -> Layout -> ComponentMapping).

    Args:
        agents: Agents used by the nodes

    Returns:
        Compiled LangGraph application; drive it with ``ainvoke``
    """
    logger = get_logger()

    async def vision_node(state: AnalyzeState) -> Dict[str, Any]:
        logger.log_event(ANALYZE_PIPELINE, "Phase 1: vision analysis")
        try:
            vision = await agents.vision.analyze(state["image_base64"], state.get("media_type", "image/png"))
        except AgentError as e:
            logger.log_error(ANALYZE_PIPELINE, e)
            raise
        updates: Dict[str, Any] = {"vision": vision, "phase": VISION_DONE}
        if vision.extraction_failed:
            updates["warnings"] = [fallback_warning(agents.vision.name)]
        return updates

    async def layout_node(state: AnalyzeState) -> Dict[str, Any]:
        logger.log_event(ANALYZE_PIPELINE, "Phase 2: layout analysis")
        try:
            layout = await agents.layout.analyze(state["vision"])
        except AgentError as e:
            logger.log_error(ANALYZE_PIPELINE, e)
            return {"phase": PARTIAL, "errors": [str(e)]}
        updates: Dict[str, Any] = {"layout": layout, "phase": LAYOUT_DONE}
        if layout.extraction_failed:
            updates["warnings"] = [fallback_warning(agents.layout.name)]
        return updates

    async def components_node(state: AnalyzeState) -> Dict[str, Any]:
        logger.log_event(ANALYZE_PIPELINE, "Phase 3: component mapping")
        try:
            mapping = await agents.components.map_components(state["vision"], state["layout"])
        except AgentError as e:
            logger.log_error(ANALYZE_PIPELINE, e)
            return {"phase": PARTIAL, "errors": [str(e)]}
        # An unparseable mapping is not the same as "no components found"
        if mapping.extraction_failed:
            return {"mapping": mapping, "phase": PARTIAL, "errors": [fallback_warning(agents.components.name)]}
        return {"mapping": mapping, "phase": COMPONENTS_DONE}

    def route_after_layout(state: AnalyzeState) -> Literal["map_components", END]:
        return END if state.get("phase") == PARTIAL else "map_components"

    graph = StateGraph(AnalyzeState)

    graph.add_node("analyze_vision", vision_node)
    graph.add_node("analyze_layout", layout_node)
    graph.add_node("map_components", components_node)

    graph.set_entry_point("analyze_vision")
    graph.add_edge("analyze_vision", "analyze_layout")
    graph.add_conditional_edges(
        "analyze_layout",
        route_after_layout,
        {"map_components": "map_components", END: END},
    )
    graph.add_edge("map_components", END)

    return graph.compile()


def create_generate_graph(agents: AgentSet):
    """
    Create and compile the generation graph (HTML -> CSS -> JS).

    Args:
        agents: Agents used by the nodes

    Returns:
        Compiled LangGraph application; drive it with ``ainvoke``
    """
    logger = get_logger()

    async def html_node(state: GenerateState) -> Dict[str, Any]:
        logger.log_event(GENERATE_PIPELINE, f"Phase 1: HTML for {len(state['components'])} components")
        try:
            html = await agents.html.generate(state["components"], state.get("layout_analysis"))
        except AgentError as e:
            logger.log_error(GENERATE_PIPELINE, e)
            return {"phase": INCOMPLETE, "errors": [str(e)]}
        return {"html": html, "phase": HTML_DONE}

    async def css_node(state: GenerateState) -> Dict[str, Any]:
        logger.log_event(GENERATE_PIPELINE, "Phase 2: CSS")
        try:
            css = await agents.css.generate(state["components"], state["html"])
        except AgentError as e:
            logger.log_error(GENERATE_PIPELINE, e)
            return {"phase": INCOMPLETE, "errors": [str(e)]}
        return {"css": css, "phase": CSS_DONE}

    async def js_node(state: GenerateState) -> Dict[str, Any]:
        interactivity = interactive_types(state["components"])
        logger.log_event(GENERATE_PIPELINE, f"Phase 3: JavaScript (interactive: {interactivity or 'none'})")
        try:
            javascript = await agents.js.generate(state["components"], interactivity)
        except AgentError as e:
            logger.log_error(GENERATE_PIPELINE, e)
            return {"interactivity": interactivity, "phase": INCOMPLETE, "errors": [str(e)]}
        return {"interactivity": interactivity, "javascript": javascript, "phase": JS_DONE}

    def route_after_html(state: GenerateState) -> Literal["generate_css", END]:
        return END if state.get("phase") == INCOMPLETE else "generate_css"

    def route_after_css(state: GenerateState) -> Literal["generate_js", END]:
        return END if state.get("phase") == INCOMPLETE else "generate_js"

    graph = StateGraph(GenerateState)

    graph.add_node("generate_html", html_node)
    graph.add_node("generate_css", css_node)
    graph.add_node("generate_js", js_node)

    graph.set_entry_point("generate_html")
    graph.add_conditional_edges(
        "generate_html",
        route_after_html,
        {"generate_css": "generate_css", END: END},
    )
    graph.add_conditional_edges(
        "generate_css",
        route_after_css,
        {"generate_js": "generate_js", END: END},
    )
    graph.add_edge("generate_js", END)

    return graph.compile()
