"""
LangGraph orchestration of the sketch analysis and code generation pipelines.

Pipeline A runs Vision -> Layout -> ComponentMapping and returns component
suggestions; Pipeline B runs HTML -> CSS -> JS over the accepted components.
"""

from sketch2site.orchestration.agents import AgentSet
from sketch2site.orchestration.extraction import ResponseExtractor
from sketch2site.orchestration.graph import (
    create_analyze_graph,
    create_generate_graph,
)
from sketch2site.orchestration.service import SketchOrchestrator
from sketch2site.orchestration.state import (
    AnalyzeState,
    GenerateState,
    get_state_summary,
)

__all__ = [
    "AgentSet",
    "ResponseExtractor",
    "create_analyze_graph",
    "create_generate_graph",
    "SketchOrchestrator",
    "AnalyzeState",
    "GenerateState",
    "get_state_summary",
]
