"""
Orchestration service: the entry points callers use.

SketchOrchestrator is constructed explicitly with Settings (or pre-built
agents). Construction fails with ServiceUnavailable when a credential is
missing, so no pipeline is ever started against an unusable configuration.
Each call runs a fresh graph invocation; the service keeps no per-run state.
"""

from typing import Any, Dict, List, Optional, Union

from sketch2site.components import BaseComponent, coerce_component, component_to_dict
from sketch2site.config import Settings
from sketch2site.errors import ServiceUnavailable
from sketch2site.io.sketch_loader import SketchLoader
from sketch2site.models import (
    AnalysisResult,
    AnalysisStatus,
    CodeGenerationResult,
    ComponentType,
    LayoutPlan,
    SketchAnalysis,
    coerce_component_type,
)
from sketch2site.orchestration.agents import AgentSet
from sketch2site.orchestration.graph import create_analyze_graph, create_generate_graph
from sketch2site.orchestration.state import COMPONENTS_DONE, IDLE, JS_DONE, AnalyzeState, GenerateState
from sketch2site.utils.llm_logger import get_logger


SERVICE_NAME = "SketchOrchestrator"


def assemble_analysis(state: AnalyzeState) -> AnalysisResult:
    """
    Build the outbound analysis result from a finished analysis graph state.

    Args:
        state: Final AnalyzeState (vision phase always present)

    Returns:
        AnalysisResult with status success or partial
    """
    vision = state["vision"]
    layout = state.get("layout")
    mapping = state.get("mapping")
    warnings = list(state.get("warnings") or [])

    if state.get("phase") == COMPONENTS_DONE and layout is not None and mapping is not None:
        suggestions = mapping.to_suggestions()
        full_analysis = SketchAnalysis(
            layout=layout.to_layout_analysis(),
            components=suggestions,
            hierarchy=mapping.hierarchy_text,
            color_scheme=vision.color_scheme,
        )
        return AnalysisResult(
            vision_analysis=vision,
            layout_analysis=layout,
            component_suggestions=suggestions,
            full_analysis=full_analysis,
            status=AnalysisStatus.SUCCESS,
            warnings=warnings,
        )

    return AnalysisResult(
        vision_analysis=vision,
        layout_analysis=layout if layout is not None else LayoutPlan(),
        component_suggestions=[],
        full_analysis=SketchAnalysis.incomplete(layout.to_layout_analysis() if layout is not None else None),
        status=AnalysisStatus.PARTIAL,
        errors=list(state.get("errors") or []) or ["Analysis stopped before component mapping"],
        warnings=warnings,
    )


def _layout_payload(layout_analysis: Any) -> Optional[Dict[str, Any]]:
    if layout_analysis is None:
        return None
    if isinstance(layout_analysis, LayoutPlan):
        return layout_analysis.to_payload()
    if hasattr(layout_analysis, "to_dict"):
        return layout_analysis.to_dict()
    if isinstance(layout_analysis, dict):
        return layout_analysis
    return None


class SketchOrchestrator:
    """Runs Pipeline A (analyze) and Pipeline B (generate) on demand."""

    def __init__(self, settings: Optional[Settings] = None, agents: Optional[AgentSet] = None):
        """
        Initialize the orchestrator.

        Args:
            settings: Configuration; read from the environment when omitted
            agents: Pre-built agents (tests inject fakes here); built from settings otherwise

        Raises:
            ServiceUnavailable: If a required credential is missing
        """
        if agents is None:
            settings = settings or Settings.from_env()
            agents = AgentSet.from_settings(settings)
        self.settings = settings
        self.agents = agents
        self.logger = get_logger()
        self._analyze_app = create_analyze_graph(agents)
        self._generate_app = create_generate_graph(agents)

    async def analyze_sketch(self, image_base64: str, media_type: str = "image/png") -> AnalysisResult:
        """
        Analyze a sketch image.

        Args:
            image_base64: Base64 image, optionally as a ``data:`` URL
            media_type: MIME type used when building the data URL for the model

        Returns:
            AnalysisResult (status success or partial)

        Raises:
            AgentError: If the vision phase fails
        """
        self.logger.log_event(SERVICE_NAME, "Starting sketch analysis")
        initial: AnalyzeState = {
            "image_base64": SketchLoader.strip_data_url(image_base64),
            "media_type": media_type,
            "phase": IDLE,
            "errors": [],
            "warnings": [],
        }
        state = await self._analyze_app.ainvoke(initial)
        result = assemble_analysis(state)
        self.logger.log_event(
            SERVICE_NAME,
            f"Analysis {result.status.value}: {len(result.component_suggestions)} suggestions",
        )
        return result

    async def generate_code(
        self,
        components: List[Union[Dict[str, Any], BaseComponent]],
        layout_analysis: Any = None,
    ) -> CodeGenerationResult:
        """
        Generate HTML, CSS and JavaScript for accepted components.

        Args:
            components: Accepted component records or models, in page order
            layout_analysis: Layout result from the analysis, passed through unchanged

        Returns:
            CodeGenerationResult; ``complete`` is False if any phase failed

        Raises:
            ValueError: If no components are provided
        """
        if not components:
            raise ValueError("No components provided")
        records = [component_to_dict(coerce_component(component)) for component in components]
        self.logger.log_event(SERVICE_NAME, f"Starting code generation for {len(records)} components")
        initial: GenerateState = {
            "components": records,
            "layout_analysis": _layout_payload(layout_analysis),
            "phase": IDLE,
            "errors": [],
        }
        state = await self._generate_app.ainvoke(initial)

        if state.get("phase") == JS_DONE:
            return CodeGenerationResult(
                html=state.get("html", ""),
                css=state.get("css", ""),
                javascript=state.get("javascript", ""),
            )
        return CodeGenerationResult.incomplete(
            state.get("errors") or [],
            html=state.get("html", ""),
            css=state.get("css", ""),
            javascript=state.get("javascript", ""),
        )

    async def refine_component(
        self,
        analysis: Union[SketchAnalysis, Dict[str, Any]],
        component_type: Union[ComponentType, str],
    ) -> Dict[str, Any]:
        """
        Ask for detailed properties of one component type.

        Args:
            analysis: Full analysis (model or its dict form)
            component_type: Component tag to refine

        Returns:
            Structured refinement, or ``{"raw": text}`` when the response had no JSON
        """
        if self.agents.refinement is None:
            raise ServiceUnavailable("Component refinement is not configured")
        resolved = coerce_component_type(component_type)
        if resolved is None:
            raise ValueError(f"Unknown component type: {component_type}")
        payload = analysis.to_dict() if isinstance(analysis, SketchAnalysis) else dict(analysis)
        self.logger.log_event(SERVICE_NAME, f"Refining {resolved.value} component")
        return await self.agents.refinement.refine(payload, resolved)
