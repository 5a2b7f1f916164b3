"""
Website component variants and their construction from accepted suggestions.

Each ComponentType has one pydantic variant carrying the fields the code
generation prompts rely on. Building a component never fails: properties
that do not fit the variant are dropped and required fields fall back to
empty values.
"""

import uuid
from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from sketch2site.models import (
    ComponentSuggestion,
    ComponentType,
    SketchAnalysis,
    coerce_component_type,
)


TextVariant = Literal["h1", "h2", "h3", "h4", "h5", "h6", "p", "span"]
ButtonVariant = Literal["primary", "secondary", "outline", "link"]
ContainerVariant = Literal["full", "container", "narrow"]
InputType = Literal["text", "email", "password", "number", "tel"]


class _ComponentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Point(_ComponentModel):
    x: float = 0.0
    y: float = 0.0


class Size(_ComponentModel):
    width: float = 0.0
    height: float = 0.0


class NavLink(_ComponentModel):
    text: str = ""
    href: str = "#"


class FormField(_ComponentModel):
    type: Literal["input", "textarea", "select", "checkbox"] = "input"
    label: str = ""
    name: str = ""
    required: bool = False
    options: Optional[List[str]] = None


class BaseComponent(_ComponentModel):
    id: str = Field(default_factory=lambda: f"component-{uuid.uuid4().hex[:12]}")
    position: Optional[Point] = None
    size: Optional[Size] = None
    children: List[Dict[str, Any]] = Field(default_factory=list)
    styles: Dict[str, str] = Field(default_factory=dict)


class HeaderComponent(BaseComponent):
    type: Literal["header"] = "header"
    text: str = ""
    variant: TextVariant = "h1"


class HeroComponent(BaseComponent):
    type: Literal["hero"] = "hero"
    title: str = ""
    subtitle: Optional[str] = None
    button_text: Optional[str] = None
    button_link: Optional[str] = None
    background_image: Optional[str] = None


class TextComponent(BaseComponent):
    type: Literal["text"] = "text"
    content: str = ""
    variant: TextVariant = "p"


class ButtonComponent(BaseComponent):
    type: Literal["button"] = "button"
    text: str = ""
    variant: ButtonVariant = "primary"
    link: Optional[str] = None
    on_click: Optional[str] = None


class ImageComponent(BaseComponent):
    type: Literal["image"] = "image"
    src: str = ""
    alt: str = ""
    caption: Optional[str] = None


class ContainerComponent(BaseComponent):
    type: Literal["container"] = "container"
    variant: ContainerVariant = "container"
    layout: Optional[Literal["flex", "grid"]] = None


class NavbarComponent(BaseComponent):
    type: Literal["navbar"] = "navbar"
    logo: Optional[str] = None
    links: List[NavLink] = Field(default_factory=list)


class FooterComponent(BaseComponent):
    type: Literal["footer"] = "footer"
    content: str = ""
    links: Optional[List[NavLink]] = None


class FormComponent(BaseComponent):
    type: Literal["form"] = "form"
    fields: List[FormField] = Field(default_factory=list)
    submit_text: str = "Submit"
    action: Optional[str] = None


class InputComponent(BaseComponent):
    type: Literal["input"] = "input"
    label: str = ""
    placeholder: Optional[str] = None
    input_type: InputType = "text"
    required: Optional[bool] = None


class TextareaComponent(BaseComponent):
    type: Literal["textarea"] = "textarea"
    label: str = ""
    placeholder: Optional[str] = None
    rows: Optional[int] = None
    required: Optional[bool] = None


class GridComponent(BaseComponent):
    type: Literal["grid"] = "grid"
    columns: int = 3
    gap: Optional[str] = None


class CardComponent(BaseComponent):
    type: Literal["card"] = "card"
    title: Optional[str] = None
    content: str = ""
    image: Optional[str] = None
    link: Optional[str] = None


class SectionComponent(BaseComponent):
    type: Literal["section"] = "section"
    title: Optional[str] = None


WebsiteComponent = Annotated[
    Union[
        HeaderComponent,
        HeroComponent,
        TextComponent,
        ButtonComponent,
        ImageComponent,
        ContainerComponent,
        NavbarComponent,
        FooterComponent,
        FormComponent,
        InputComponent,
        TextareaComponent,
        GridComponent,
        CardComponent,
        SectionComponent,
    ],
    Field(discriminator="type"),
]

COMPONENT_CLASSES: Dict[ComponentType, type] = {
    ComponentType.HEADER: HeaderComponent,
    ComponentType.HERO: HeroComponent,
    ComponentType.TEXT: TextComponent,
    ComponentType.BUTTON: ButtonComponent,
    ComponentType.IMAGE: ImageComponent,
    ComponentType.CONTAINER: ContainerComponent,
    ComponentType.NAVBAR: NavbarComponent,
    ComponentType.FOOTER: FooterComponent,
    ComponentType.FORM: FormComponent,
    ComponentType.INPUT: InputComponent,
    ComponentType.TEXTAREA: TextareaComponent,
    ComponentType.GRID: GridComponent,
    ComponentType.CARD: CardComponent,
    ComponentType.SECTION: SectionComponent,
}


def _validate_leniently(component_class: type, data: Dict[str, Any]) -> BaseComponent:
    """Validate, dropping every top-level key that fails; defaults fill the gaps."""
    data = dict(data)
    for _ in range(len(data) + 1):
        try:
            return component_class.model_validate(data)
        except ValidationError as exc:
            bad_keys = set()
            for error in exc.errors():
                if not error.get("loc"):
                    continue
                key = error["loc"][0]
                bad_keys.add(key)
                for name, field in component_class.model_fields.items():
                    if key in (name, field.alias):
                        bad_keys.update({name, field.alias})
            bad_keys.discard("type")
            bad_keys.discard(None)
            if not bad_keys & set(data):
                break
            for key in bad_keys:
                data.pop(key, None)
    return component_class()


def build_component(suggestion: ComponentSuggestion, component_id: Optional[str] = None) -> BaseComponent:
    """
    Build the WebsiteComponent variant for an accepted suggestion.

    Args:
        suggestion: Suggestion the user accepted (possibly with edited properties).
        component_id: Optional id; a random one is generated otherwise.

    Returns:
        Variant instance matching ``suggestion.suggested_type``.
    """
    component_class = COMPONENT_CLASSES[suggestion.suggested_type]
    data: Dict[str, Any] = dict(suggestion.properties)
    data.pop("type", None)
    data["position"] = {"x": suggestion.bounds.x, "y": suggestion.bounds.y}
    data["size"] = {"width": suggestion.bounds.width, "height": suggestion.bounds.height}
    if component_id:
        data["id"] = component_id
    else:
        data.pop("id", None)
    return _validate_leniently(component_class, data)


def coerce_component(record: Any) -> BaseComponent:
    """
    Normalize a caller-supplied component record (dict or model).

    Unknown types become containers; invalid fields are dropped.
    """
    if isinstance(record, BaseComponent):
        return record
    if not isinstance(record, dict):
        record = {}
    component_type = coerce_component_type(record.get("type")) or ComponentType.CONTAINER
    data = {key: value for key, value in record.items() if key != "type"}
    return _validate_leniently(COMPONENT_CLASSES[component_type], data)


def component_type_of(component: BaseComponent) -> ComponentType:
    return ComponentType(component.type)


def accept_suggestions(
    analysis: SketchAnalysis,
    min_confidence: float = 0.0,
    skip: Iterable[int] = (),
) -> List[BaseComponent]:
    """
    Accept suggestions without interactive review.

    Args:
        analysis: Analysis whose suggestions should be turned into components.
        min_confidence: Suggestions below this confidence are rejected.
        skip: Indices of suggestions to reject explicitly.

    Returns:
        Ordered list of components, ids derived from suggestion order.
    """
    skipped = set(skip)
    components = []
    for index, suggestion in enumerate(analysis.components):
        if index in skipped or suggestion.confidence < min_confidence:
            continue
        components.append(build_component(suggestion, component_id=f"component-{index + 1}"))
    return components


def component_to_dict(component: BaseComponent) -> Dict[str, Any]:
    return component.model_dump(mode="json", by_alias=True, exclude_none=True)
