"""
Runtime configuration for the orchestration service.

Values come from the environment (optionally a .env file). The orchestration
service receives a Settings instance explicitly and refuses to start when a
required credential is missing.
"""

import os
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from sketch2site.errors import ServiceUnavailable


# Free models are the default to keep development costs at zero.
AI_MODELS: Dict[str, str] = {
    "vision": "gpt-4o-mini",
    "layout": "google/gemini-flash-1.5",
    "components": "google/gemini-flash-1.5",
    "html": "google/gemini-flash-1.5",
    "css": "google/gemini-flash-1.5",
    "js": "google/gemini-flash-1.5",
}

# Paid models, only usable with routing credits.
PREMIUM_MODELS: Dict[str, str] = {
    "vision": "gpt-4o",
    "layout": "anthropic/claude-3.5-sonnet",
    "components": "anthropic/claude-3.5-sonnet",
    "html": "anthropic/claude-3.5-sonnet",
    "css": "anthropic/claude-3.5-sonnet",
    "js": "anthropic/claude-3.5-sonnet",
}

ANTHROPIC_VISION_MODEL = "claude-3-5-sonnet-20241022"

PHASES = ("vision", "layout", "components", "html", "css", "js")


class Settings(BaseModel):
    """Credentials, per-phase model ids and call parameters."""

    vision_provider: str = "openai"
    vision_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    app_url: str = "http://localhost:3000"
    app_title: str = "AI Website Builder"
    models: Dict[str, str] = Field(default_factory=lambda: dict(AI_MODELS))
    analysis_temperature: float = 0.7
    codegen_temperature: float = 0.3
    request_timeout: float = 120.0
    max_retries: int = 2

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            env_file: Optional path to a .env file (default: search upwards).

        Returns:
            Settings instance. Credentials may still be missing; call require_credentials().
        """
        load_dotenv(env_file)

        provider = os.getenv("VISION_PROVIDER", "openai").lower()
        if provider not in ("openai", "anthropic"):
            raise ValueError(f"Unsupported vision provider: {provider}")

        fallback_key = "ANTHROPIC_API_KEY" if provider == "anthropic" else "OPENAI_API_KEY"
        vision_api_key = os.getenv("VISION_API_KEY") or os.getenv(fallback_key)

        tier = os.getenv("MODEL_TIER", "free").lower()
        if tier == "premium":
            models = dict(PREMIUM_MODELS)
        elif tier == "free":
            models = dict(AI_MODELS)
        else:
            raise ValueError(f"Unknown model tier: {tier}")
        if provider == "anthropic":
            models["vision"] = ANTHROPIC_VISION_MODEL

        for phase in PHASES:
            override = os.getenv(f"{phase.upper()}_MODEL")
            if override:
                models[phase] = override

        return cls(
            vision_provider=provider,
            vision_api_key=vision_api_key,
            openrouter_api_key=os.getenv("OPENROUTER_API_KEY"),
            openrouter_base_url=os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1"),
            app_url=os.getenv("APP_URL", "http://localhost:3000"),
            app_title=os.getenv("APP_TITLE", "AI Website Builder"),
            models=models,
            analysis_temperature=float(os.getenv("ANALYSIS_TEMPERATURE", "0.7")),
            codegen_temperature=float(os.getenv("CODEGEN_TEMPERATURE", "0.3")),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "120")),
            max_retries=int(os.getenv("MAX_RETRIES", "2")),
        )

    def missing_credentials(self) -> List[str]:
        missing = []
        if not self.vision_api_key:
            missing.append("VISION_API_KEY")
        if not self.openrouter_api_key:
            missing.append("OPENROUTER_API_KEY")
        return missing

    def require_credentials(self) -> None:
        """Raise ServiceUnavailable if any credential is absent."""
        missing = self.missing_credentials()
        if missing:
            raise ServiceUnavailable(f"Missing required configuration: {', '.join(missing)}")

    def phase_model(self, phase: str) -> str:
        return self.models.get(phase) or AI_MODELS[phase]

    @property
    def routing_headers(self) -> Dict[str, str]:
        return {"HTTP-Referer": self.app_url, "X-Title": self.app_title}
