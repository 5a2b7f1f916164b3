"""
Agent wrappers for the analysis and generation pipelines.

Each agent issues exactly one chat-model call built from a fixed prompt
template, normalizes the response with ResponseExtractor and reports
failures through the error taxonomy in ``sketch2site.errors``. Agents keep
no state between calls.
"""

import json
from typing import Any, Dict, List, Optional, Sequence

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from sketch2site.config import Settings
from sketch2site.errors import classify_error
from sketch2site.models import (
    JS_PLACEHOLDER,
    ComponentMapping,
    ComponentType,
    LayoutPlan,
    VisionReport,
)
from sketch2site.orchestration.extraction import ResponseExtractor
from sketch2site.orchestration.prompts import (
    COMPONENT_PROMPT,
    COMPONENT_SYSTEM_PROMPT,
    CSS_PROMPT,
    CSS_SYSTEM_PROMPT,
    HTML_PROMPT,
    HTML_SYSTEM_PROMPT,
    JS_PROMPT,
    JS_SYSTEM_PROMPT,
    LAYOUT_PROMPT,
    LAYOUT_SYSTEM_PROMPT,
    REFINE_PROMPT,
    VISION_PROMPT,
    VISION_SYSTEM_PROMPT,
)
from sketch2site.utils.llm_logger import LoggedLLM


def create_chat_model(
    provider: str,
    model: str,
    temperature: float,
    api_key: str,
    component: str,
    base_url: Optional[str] = None,
    default_headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    max_retries: int = 2,
    run_id: Optional[str] = None,
) -> LoggedLLM:
    """
    Create a logged chat model for one agent.

    Args:
        provider: "openai", "anthropic" or "openrouter" (OpenAI-compatible routing).
        model: Model identifier.
        temperature: Sampling temperature.
        api_key: Credential for the provider.
        component: Agent name used in logs.
        base_url: Endpoint override (OpenRouter).
        default_headers: Extra HTTP headers (OpenRouter attribution).
        timeout: Per-request timeout in seconds.
        max_retries: Transport-level retries inside the SDK client.
        run_id: Optional id grouping log entries.

    Returns:
        LoggedLLM wrapper around ChatOpenAI or ChatAnthropic
    """
    if provider in ("openai", "openrouter"):
        llm_instance = ChatOpenAI(
            model=model,
            temperature=temperature,
            api_key=api_key,
            base_url=base_url,
            default_headers=default_headers,
            timeout=timeout,
            max_retries=max_retries,
        )
    elif provider == "anthropic":
        llm_instance = ChatAnthropic(
            model=model,
            temperature=temperature,
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
        )
    else:
        raise ValueError(f"Unsupported provider: {provider}")

    return LoggedLLM(
        llm_instance=llm_instance,
        component=component,
        provider=provider,
        model=model,
        run_id=run_id,
    )


def _to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def _response_text(content: Any) -> str:
    """Flatten message content (string or list of content blocks) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(str(block.get("text", "")))
        return "".join(parts)
    return "" if content is None else str(content)


class Agent:
    """One system prompt, one model, one call per invocation."""

    name = "Agent"
    system_prompt = ""

    def __init__(self, llm: Any):
        """
        Args:
            llm: Chat model exposing ``ainvoke(messages)`` (usually a LoggedLLM).
        """
        self.llm = llm

    async def _call(self, content: Any) -> str:
        messages = [
            SystemMessage(content=self.system_prompt),
            HumanMessage(content=content),
        ]
        try:
            response = await self.llm.ainvoke(messages)
        except Exception as exc:
            raise classify_error(exc, self.name) from exc
        return _response_text(getattr(response, "content", response))


class VisionAgent(Agent):
    """Describes the sketch image (phase 1 of analysis)."""

    name = "VisionAgent"
    system_prompt = VISION_SYSTEM_PROMPT

    async def analyze(self, image_base64: str, media_type: str = "image/png") -> VisionReport:
        content = [
            {"type": "text", "text": VISION_PROMPT},
            {"type": "image_url", "image_url": {"url": f"data:{media_type};base64,{image_base64}"}},
        ]
        text = await self._call(content)
        return VisionReport.from_payload(ResponseExtractor.extract_json(text))


class LayoutAgent(Agent):
    """Turns the vision report into a layout plan (phase 2 of analysis)."""

    name = "LayoutAgent"
    system_prompt = LAYOUT_SYSTEM_PROMPT

    async def analyze(self, vision: VisionReport) -> LayoutPlan:
        prompt = LAYOUT_PROMPT.format(vision_analysis=_to_json(vision.for_prompt()))
        text = await self._call(prompt)
        return LayoutPlan.from_payload(ResponseExtractor.extract_json(text))


class ComponentMappingAgent(Agent):
    """Maps sketch elements onto the component set (phase 3 of analysis)."""

    name = "ComponentMappingAgent"
    system_prompt = COMPONENT_SYSTEM_PROMPT.format(
        component_types=", ".join(component_type.value for component_type in ComponentType)
    )

    async def map_components(self, vision: VisionReport, layout: LayoutPlan) -> ComponentMapping:
        prompt = COMPONENT_PROMPT.format(
            vision_analysis=_to_json(vision.for_prompt()),
            layout_analysis=_to_json(layout.for_prompt()),
        )
        text = await self._call(prompt)
        return ComponentMapping.from_payload(ResponseExtractor.extract_json(text))


class ComponentRefinementAgent(Agent):
    """Proposes detailed properties for a single component type."""

    name = "ComponentRefinementAgent"
    system_prompt = VISION_SYSTEM_PROMPT

    async def refine(self, analysis: Dict[str, Any], component_type: ComponentType) -> Dict[str, Any]:
        prompt = REFINE_PROMPT.format(component_type=component_type.value, analysis=_to_json(analysis))
        text = await self._call(prompt)
        return ResponseExtractor.extract_json(text)


class HTMLAgent(Agent):
    """Generates semantic markup for the accepted components."""

    name = "HTMLAgent"
    system_prompt = HTML_SYSTEM_PROMPT

    async def generate(self, components: List[Dict[str, Any]], layout: Optional[Dict[str, Any]] = None) -> str:
        prompt = HTML_PROMPT.format(components=_to_json(components), layout=_to_json(layout or {}))
        text = await self._call(prompt)
        return ResponseExtractor.extract_code(text, "html")


class CSSAgent(Agent):
    """Generates styles informed by the markup they must style."""

    name = "CSSAgent"
    system_prompt = CSS_SYSTEM_PROMPT

    async def generate(self, components: List[Dict[str, Any]], html: str) -> str:
        prompt = CSS_PROMPT.format(components=_to_json(components), html=html)
        text = await self._call(prompt)
        return ResponseExtractor.extract_code(text, "css")


class JSAgent(Agent):
    """Generates interactivity; skips the call when nothing is interactive."""

    name = "JSAgent"
    system_prompt = JS_SYSTEM_PROMPT

    async def generate(self, components: List[Dict[str, Any]], interactivity: Sequence[str]) -> str:
        if not interactivity:
            return JS_PLACEHOLDER
        prompt = JS_PROMPT.format(components=_to_json(components), interactivity=_to_json(list(interactivity)))
        text = await self._call(prompt)
        return ResponseExtractor.extract_code(text, "javascript")


class AgentSet:
    """The agents one orchestrator uses, built once from Settings."""

    def __init__(
        self,
        vision: VisionAgent,
        layout: LayoutAgent,
        components: ComponentMappingAgent,
        html: HTMLAgent,
        css: CSSAgent,
        js: JSAgent,
        refinement: Optional[ComponentRefinementAgent] = None,
    ):
        self.vision = vision
        self.layout = layout
        self.components = components
        self.html = html
        self.css = css
        self.js = js
        self.refinement = refinement

    @classmethod
    def from_settings(cls, settings: Settings) -> "AgentSet":
        """
        Build every agent from configuration.

        Vision and refinement use the vision credential; the other phases go
        through the OpenAI-compatible routing endpoint.
        """
        settings.require_credentials()

        def vision_model(component: str) -> LoggedLLM:
            return create_chat_model(
                provider=settings.vision_provider,
                model=settings.phase_model("vision"),
                temperature=settings.analysis_temperature,
                api_key=settings.vision_api_key,
                component=component,
                timeout=settings.request_timeout,
                max_retries=settings.max_retries,
            )

        def routed_model(phase: str, component: str, temperature: float) -> LoggedLLM:
            return create_chat_model(
                provider="openrouter",
                model=settings.phase_model(phase),
                temperature=temperature,
                api_key=settings.openrouter_api_key,
                component=component,
                base_url=settings.openrouter_base_url,
                default_headers=settings.routing_headers,
                timeout=settings.request_timeout,
                max_retries=settings.max_retries,
            )

        return cls(
            vision=VisionAgent(vision_model(VisionAgent.name)),
            layout=LayoutAgent(routed_model("layout", LayoutAgent.name, settings.analysis_temperature)),
            components=ComponentMappingAgent(
                routed_model("components", ComponentMappingAgent.name, settings.analysis_temperature)
            ),
            html=HTMLAgent(routed_model("html", HTMLAgent.name, settings.codegen_temperature)),
            css=CSSAgent(routed_model("css", CSSAgent.name, settings.codegen_temperature)),
            js=JSAgent(routed_model("js", JSAgent.name, settings.codegen_temperature)),
            refinement=ComponentRefinementAgent(vision_model(ComponentRefinementAgent.name)),
        )
