"""
Data models for the sketch analysis and code generation pipelines.

Phase payloads (VisionReport, LayoutPlan, ComponentMapping) are the typed
boundaries between agents. They accept whatever the model returned, keep
unknown keys, and fall back to explicit defaults instead of failing.
"""

import copy
import math
from enum import Enum
from typing import Annotated, Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel


PAYLOAD_VERSION = 1

DEFAULT_CONFIDENCE = 0.8
DEFAULT_HIERARCHY = "Standard web layout"
INCOMPLETE_HIERARCHY = "Analysis incomplete"
DEFAULT_REASONING = "Identified from sketch"
DEFAULT_COMPONENT_WIDTH = 200.0
DEFAULT_COMPONENT_HEIGHT = 100.0
SECTION_BOUNDS = (0.0, 0.0, 1200.0, 400.0)


class ComponentType(str, Enum):
    """Closed set of component tags the builder knows how to render."""
    HEADER = "header"
    HERO = "hero"
    TEXT = "text"
    BUTTON = "button"
    IMAGE = "image"
    CONTAINER = "container"
    NAVBAR = "navbar"
    FOOTER = "footer"
    FORM = "form"
    INPUT = "input"
    TEXTAREA = "textarea"
    GRID = "grid"
    CARD = "card"
    SECTION = "section"


INTERACTIVE_TYPES = frozenset({ComponentType.BUTTON, ComponentType.FORM, ComponentType.NAVBAR})

# Common model vocabulary that is not part of the closed set.
TYPE_SYNONYMS: Dict[str, ComponentType] = {
    "nav": ComponentType.NAVBAR,
    "navigation": ComponentType.NAVBAR,
    "menu": ComponentType.NAVBAR,
    "nav-bar": ComponentType.NAVBAR,
    "heading": ComponentType.HEADER,
    "title": ComponentType.HEADER,
    "paragraph": ComponentType.TEXT,
    "label": ComponentType.TEXT,
    "img": ComponentType.IMAGE,
    "picture": ComponentType.IMAGE,
    "photo": ComponentType.IMAGE,
    "link": ComponentType.BUTTON,
    "cta": ComponentType.BUTTON,
    "div": ComponentType.CONTAINER,
    "wrapper": ComponentType.CONTAINER,
    "banner": ComponentType.HERO,
    "jumbotron": ComponentType.HERO,
    "list": ComponentType.GRID,
    "gallery": ComponentType.GRID,
    "field": ComponentType.INPUT,
    "select": ComponentType.INPUT,
    "checkbox": ComponentType.INPUT,
}


def coerce_component_type(value: Any) -> Optional[ComponentType]:
    """
    Map a model-provided component tag onto the closed ComponentType set.

    Args:
        value: Tag from the model (any type).

    Returns:
        Matching ComponentType, or None when the tag cannot be mapped.
    """
    if isinstance(value, ComponentType):
        return value
    if not isinstance(value, str):
        return None
    tag = value.strip().lower()
    try:
        return ComponentType(tag)
    except ValueError:
        return TYPE_SYNONYMS.get(tag)


def clamp_confidence(value: Any) -> float:
    """Normalize a confidence value into [0, 1]; missing or garbage becomes the default."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_CONFIDENCE
    value = float(value)
    if math.isnan(value):
        return DEFAULT_CONFIDENCE
    return min(1.0, max(0.0, value))


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        return None
    return value


class CamelModel(BaseModel):
    """Outbound models serialize with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Bounds(CamelModel):
    """Axis-aligned rectangle in sketch coordinates."""
    x: float = 0.0
    y: float = 0.0
    width: float = DEFAULT_COMPONENT_WIDTH
    height: float = DEFAULT_COMPONENT_HEIGHT

    @classmethod
    def fallback(cls, index: int) -> "Bounds":
        """Deterministic placement for the index-th element lacking geometry."""
        return cls(x=0.0, y=index * 100.0, width=DEFAULT_COMPONENT_WIDTH, height=DEFAULT_COMPONENT_HEIGHT)

    @classmethod
    def from_entry(cls, entry: Dict[str, Any], index: int) -> "Bounds":
        """
        Resolve bounds for a component-mapping entry.

        Each coordinate is taken from ``bounds`` if present, else from
        ``position``/``size``; anything missing or non-numeric uses the
        fallback for this index. An explicit 0 is kept.
        """
        fallback = cls.fallback(index)
        bounds = entry.get("bounds") if isinstance(entry.get("bounds"), dict) else {}
        position = entry.get("position") if isinstance(entry.get("position"), dict) else {}
        size = entry.get("size") if isinstance(entry.get("size"), dict) else {}

        def pick(key: str, source: Dict[str, Any], default: float) -> float:
            value = _number(bounds.get(key))
            if value is None:
                value = _number(source.get(key))
            return default if value is None else value

        return cls(
            x=pick("x", position, fallback.x),
            y=pick("y", position, fallback.y),
            width=pick("width", size, fallback.width),
            height=pick("height", size, fallback.height),
        )


class LayoutType(str, Enum):
    """Layout kinds the vision prompt asks for. Layout plans may report others (e.g. flexbox)."""
    SINGLE_COLUMN = "single-column"
    TWO_COLUMN = "two-column"
    GRID = "grid"
    COMPLEX = "complex"


class Section(CamelModel):
    type: str
    bounds: Bounds
    description: str = ""


class LayoutAnalysis(CamelModel):
    """Layout summary shown to the user next to the suggestions."""
    type: str = LayoutType.SINGLE_COLUMN.value
    sections: List[Section] = Field(default_factory=list)
    grid_columns: Optional[int] = None

    @classmethod
    def default(cls) -> "LayoutAnalysis":
        return cls()


class ComponentSuggestion(CamelModel):
    """One detected sketch element and the component the pipeline proposes for it."""
    suggested_type: ComponentType
    confidence: float = Field(default=DEFAULT_CONFIDENCE, ge=0.0, le=1.0)
    bounds: Bounds = Field(default_factory=Bounds)
    properties: Dict[str, Any] = Field(default_factory=dict)
    reasoning: str = DEFAULT_REASONING
    alternatives: List[ComponentType] = Field(default_factory=list)
    original_type: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: Any, index: int) -> "ComponentSuggestion":
        """
        Build a suggestion from one raw component-mapping entry.

        Args:
            entry: Raw entry from the model (non-dicts are treated as empty).
            index: Ordinal position of the entry, used for fallback bounds.

        Returns:
            Normalized ComponentSuggestion.
        """
        if not isinstance(entry, dict):
            entry = {}

        raw_type = entry.get("type")
        suggested = coerce_component_type(raw_type)
        original_type = None
        if suggested is None:
            suggested = ComponentType.CONTAINER
            original_type = str(raw_type) if raw_type is not None else None
        elif isinstance(raw_type, str) and raw_type.strip().lower() != suggested.value:
            original_type = raw_type

        alternatives = []
        raw_alternatives = entry.get("alternatives")
        if isinstance(raw_alternatives, list):
            for alternative in raw_alternatives:
                coerced = coerce_component_type(alternative)
                if coerced is not None and coerced not in alternatives:
                    alternatives.append(coerced)

        properties = entry.get("properties")
        reasoning = entry.get("reasoning")
        return cls(
            suggested_type=suggested,
            confidence=clamp_confidence(entry.get("confidence")),
            bounds=Bounds.from_entry(entry, index),
            properties=dict(properties) if isinstance(properties, dict) else {},
            reasoning=reasoning if isinstance(reasoning, str) and reasoning else DEFAULT_REASONING,
            alternatives=alternatives,
            original_type=original_type,
        )


class SketchAnalysis(CamelModel):
    """Unified analysis produced once per Pipeline A run."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    layout: LayoutAnalysis = Field(default_factory=LayoutAnalysis.default)
    components: List[ComponentSuggestion] = Field(default_factory=list)
    hierarchy: str = DEFAULT_HIERARCHY
    color_scheme: Optional[List[str]] = None

    @classmethod
    def incomplete(cls, layout: Optional[LayoutAnalysis] = None) -> "SketchAnalysis":
        """Shape returned for every partial analysis."""
        return cls(layout=layout or LayoutAnalysis.default(), components=[], hierarchy=INCOMPLETE_HIERARCHY)


# --------------------------------------------------------------------------
# Phase payloads
# --------------------------------------------------------------------------

def _list_or_empty(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _int_or_none(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _raw_text(value: Any) -> Optional[str]:
    # An empty response is still a failed extraction
    if value is None or isinstance(value, str):
        return value
    return str(value)


LenientList = Annotated[List[Any], BeforeValidator(_list_or_empty)]
LenientInt = Annotated[Optional[int], BeforeValidator(_int_or_none)]
LenientStr = Annotated[Optional[str], BeforeValidator(_str_or_none)]
RawText = Annotated[Optional[str], BeforeValidator(_raw_text)]


class StagePayload(BaseModel):
    """
    Base for the structured output of one analysis phase.

    ``raw`` is set when the model response contained no parseable JSON
    object; the text is forwarded to the next phase as-is. The payload the
    model produced is kept verbatim so it can be handed back unchanged.
    """
    model_config = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)

    stage: ClassVar[str] = "stage"
    version: ClassVar[int] = PAYLOAD_VERSION

    raw: RawText = None

    _source: Dict[str, Any] = PrivateAttr(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "StagePayload":
        if not isinstance(payload, dict):
            return cls(raw=str(payload))
        instance = cls.model_validate(payload)
        instance._source = copy.deepcopy(payload)
        return instance

    @property
    def extraction_failed(self) -> bool:
        # Only the bare {"raw": ...} wrapper is a fallback; a parsed reply may carry its own "raw" field
        if self.raw is None:
            return False
        return self.model_fields_set == {"raw"} and not self.model_extra

    def to_payload(self) -> Dict[str, Any]:
        """The payload as the model produced it."""
        if self._source:
            return copy.deepcopy(self._source)
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    def for_prompt(self) -> Any:
        """Representation embedded into the next phase's prompt."""
        if self.extraction_failed:
            return {"raw": self.raw}
        return self.to_payload()


class VisionReport(StagePayload):
    """Output of the vision phase."""
    stage: ClassVar[str] = "vision"

    layout_type: LenientStr = None
    sections: LenientList = Field(default_factory=list)
    components: LenientList = Field(default_factory=list)
    text_content: LenientList = Field(default_factory=list)
    website_type: LenientStr = None
    color_indications: Optional[Any] = None

    @property
    def color_scheme(self) -> Optional[List[str]]:
        if not self.color_indications:
            return None
        if isinstance(self.color_indications, list):
            return [str(color) for color in self.color_indications]
        return [str(self.color_indications)]


def _dict_or_none(value: Any) -> Optional[Dict[str, Any]]:
    return value if isinstance(value, dict) else None


class ContainerStructure(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: LenientStr = None
    columns: LenientInt = None
    rows: LenientInt = None
    areas: LenientList = Field(default_factory=list)


class LayoutPlan(StagePayload):
    """Output of the layout phase."""
    stage: ClassVar[str] = "layout"

    layout_strategy: Optional[Any] = None
    container_structure: Annotated[Optional[ContainerStructure], BeforeValidator(_dict_or_none)] = None
    sections: LenientList = Field(default_factory=list)
    responsive_breakpoints: Optional[Any] = None
    recommendations: LenientList = Field(default_factory=list)

    def to_layout_analysis(self) -> LayoutAnalysis:
        """Derive the user-facing LayoutAnalysis (defaults to single-column)."""
        structure = self.container_structure
        sections = []
        for section in self.sections:
            if not isinstance(section, dict):
                continue
            name = section.get("name") or section.get("type") or "section"
            x, y, width, height = SECTION_BOUNDS
            sections.append(Section(
                type=str(name),
                bounds=Bounds(x=x, y=y, width=width, height=height),
                description=str(section.get("htmlTag") or name),
            ))
        return LayoutAnalysis(
            type=(structure.type if structure and structure.type else LayoutType.SINGLE_COLUMN.value),
            sections=sections,
            grid_columns=structure.columns if structure else None,
        )


class ComponentMapping(StagePayload):
    """Output of the component-mapping phase."""
    stage: ClassVar[str] = "components"

    components: LenientList = Field(default_factory=list)
    hierarchy: Optional[Any] = None
    interactions: LenientList = Field(default_factory=list)

    def to_suggestions(self) -> List[ComponentSuggestion]:
        return [ComponentSuggestion.from_entry(entry, index) for index, entry in enumerate(self.components)]

    @property
    def hierarchy_text(self) -> str:
        if isinstance(self.hierarchy, str) and self.hierarchy:
            return self.hierarchy
        return DEFAULT_HIERARCHY


# --------------------------------------------------------------------------
# Pipeline results
# --------------------------------------------------------------------------

class AnalysisStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"


class AnalysisResult(CamelModel):
    """Outbound result of Pipeline A, consumed by the review UI."""
    vision_analysis: VisionReport = Field(default_factory=VisionReport)
    layout_analysis: LayoutPlan = Field(default_factory=LayoutPlan)
    component_suggestions: List[ComponentSuggestion] = Field(default_factory=list)
    full_analysis: SketchAnalysis = Field(default_factory=SketchAnalysis.incomplete)
    status: AnalysisStatus = AnalysisStatus.SUCCESS
    errors: Optional[List[str]] = None
    warnings: List[str] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "visionAnalysis": self.vision_analysis.to_payload(),
            "layoutAnalysis": self.layout_analysis.to_payload(),
            "componentSuggestions": [suggestion.to_dict() for suggestion in self.component_suggestions],
            "fullAnalysis": self.full_analysis.to_dict(),
            "status": self.status.value,
        }
        if self.errors:
            data["errors"] = list(self.errors)
        if self.warnings:
            data["warnings"] = list(self.warnings)
        return data


JS_PLACEHOLDER = "// No JavaScript needed for this page\n"


class CodeGenerationResult(CamelModel):
    """
    Outbound result of Pipeline B.

    ``complete`` is False when a later phase failed; the strings produced by
    earlier phases are still returned but are not production-ready.
    """
    html: str = ""
    css: str = ""
    javascript: str = ""
    complete: bool = True
    errors: Optional[List[str]] = None

    @classmethod
    def incomplete(cls, errors: List[str], html: str = "", css: str = "", javascript: str = "") -> "CodeGenerationResult":
        return cls(html=html, css=css, javascript=javascript, complete=False, errors=list(errors))
