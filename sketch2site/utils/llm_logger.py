"""
LLM Debug Logger for tracking model calls and pipeline phases.

Supports configurable log levels (NONE, INFO, DEBUG, TRACE) and dual output:
- Console: Human-readable formatted output
- File: JSON Lines format for parsing and analysis
"""

import json
import os
import time
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv


class LogLevel(Enum):
    """Logging levels for LLM debug output."""

    NONE = 0
    INFO = 1
    DEBUG = 2
    TRACE = 3


class LLMLogger:
    """Centralized logger for LLM calls with configurable levels."""

    _instance: Optional["LLMLogger"] = None

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the logger with configuration from environment."""
        if self._initialized:
            return

        load_dotenv()

        level_str = os.getenv("LLM_DEBUG_LEVEL", "NONE").upper()
        try:
            self.level = LogLevel[level_str]
        except KeyError:
            self.level = LogLevel.NONE

        self.log_to_file = os.getenv("LLM_LOG_TO_FILE", "true").lower() == "true"
        self.log_dir = Path(os.getenv("LLM_LOG_DIR", "outputs"))

        self._initialized = True

    def should_log(self, min_level: LogLevel) -> bool:
        """Check if we should log at the given level."""
        return self.level.value >= min_level.value

    def _timestamp(self) -> str:
        return datetime.now().isoformat()

    @staticmethod
    def truncate(content: str, max_len: int = 200) -> str:
        """Truncate content for preview."""
        if len(content) <= max_len:
            return content
        return content[:max_len] + "... [truncated]"

    @staticmethod
    def summarize_image_url(url: str) -> str:
        """Replace a base64 data URL with a short description."""
        if "data:image/" in url and "base64," in url:
            header, data = url.split("base64,", 1)
            image_type = header.split("image/")[1].split(";")[0] or "unknown"
            return f"[IMAGE_DATA: {image_type}, base64 encoded, {len(data):,} bytes]"
        return f"[IMAGE_URL: {url[:100]}]"

    def _scrub_content(self, content: Any) -> Any:
        """Drop image payloads from message content, keeping text."""
        if isinstance(content, str):
            if "data:image/" in content and "base64," in content:
                return self.summarize_image_url(content)
            return content
        if isinstance(content, list):
            scrubbed = []
            for item in content:
                if isinstance(item, dict) and item.get("type") == "image_url":
                    url = item.get("image_url", {})
                    url = url.get("url", "") if isinstance(url, dict) else str(url)
                    scrubbed.append({"type": "text", "text": self.summarize_image_url(url)})
                else:
                    scrubbed.append(item)
            return scrubbed
        return content

    def serialize_message(self, message: Any) -> Dict[str, Any]:
        """Serialize a message object to a dict with images summarized."""
        content = getattr(message, "content", message)
        return {
            "type": type(message).__name__,
            "content": self._scrub_content(content),
        }

    def _content_text(self, content: Any) -> str:
        if isinstance(content, str):
            return content
        return json.dumps(content, ensure_ascii=False, default=str)

    def _write_to_file(self, run_id: Optional[str], log_entry: Dict[str, Any]):
        """Append a log entry to the JSON Lines file for this run."""
        if not self.log_to_file:
            return

        base = self.log_dir / run_id if run_id else self.log_dir
        log_file = base / "logs" / "llm_calls.jsonl"
        log_file.parent.mkdir(parents=True, exist_ok=True)

        with open(log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(log_entry, ensure_ascii=False, default=str) + "\n")

    def log_event(self, component: str, message: str, run_id: Optional[str] = None):
        """Log a pipeline progress event (INFO)."""
        if not self.should_log(LogLevel.INFO):
            return
        suffix = f" | run_id: {run_id}" if run_id else ""
        print(f"[{self._timestamp()}] [{component}] {message}{suffix}")

    def log_error(self, component: str, error: BaseException, run_id: Optional[str] = None):
        """Log a failed call or phase (INFO)."""
        if not self.should_log(LogLevel.INFO):
            return
        print(f"[{self._timestamp()}] ❌ [{component}] {type(error).__name__}: {error}")
        self._write_to_file(run_id, {
            "timestamp": self._timestamp(),
            "level": "ERROR",
            "component": component,
            "run_id": run_id,
            "error": {"type": type(error).__name__, "message": str(error)},
        })

    def log_invocation(self, component: str, provider: str, model: str, run_id: Optional[str] = None) -> str:
        """
        Log the start of an LLM invocation.

        Returns:
            Invocation ID (UUID string), or "" when logging is disabled
        """
        if not self.should_log(LogLevel.INFO):
            return ""

        invocation_id = str(uuid.uuid4())
        console_msg = f"[{self._timestamp()}] 🔵 LLM Call: [{component}] {provider}/{model}"
        if run_id:
            console_msg += f" | run_id: {run_id}"
        print(console_msg)
        return invocation_id

    def log_response(
        self,
        invocation_id: str,
        component: str,
        provider: str,
        model: str,
        request_messages: List[Any],
        response: Any,
        start_time: float,
        end_time: float,
        run_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Log an LLM response with timing, usage and (at TRACE) full content."""
        if not self.should_log(LogLevel.INFO):
            return

        latency_ms = (end_time - start_time) * 1000
        response_text = self._content_text(getattr(response, "content", response))

        usage = getattr(response, "usage_metadata", None) or {}
        token_usage = {
            "prompt_tokens": usage.get("input_tokens"),
            "completion_tokens": usage.get("output_tokens"),
            "total_tokens": usage.get("total_tokens"),
        } if usage else None

        parts = [f"[{component}]", f"{provider}/{model}", f"{latency_ms:.1f}ms"]
        if token_usage and token_usage["total_tokens"] is not None:
            parts.append(f"{token_usage['total_tokens']} tokens")
        print(f"[{self._timestamp()}] ✅ LLM Response: " + " | ".join(parts))

        if self.should_log(LogLevel.DEBUG):
            print(f"  Messages: {len(request_messages)}")
            for i, message in enumerate(request_messages[:3]):
                preview = self._content_text(self.serialize_message(message)["content"])
                print(f"    {i + 1}. [{type(message).__name__}] {self.truncate(preview, 150)}")
            print(f"  Response: {self.truncate(response_text, 200)}")

        trace = self.level == LogLevel.TRACE
        log_entry = {
            "timestamp": self._timestamp(),
            "level": self.level.name,
            "component": component,
            "invocation_id": invocation_id,
            "provider": provider,
            "model": model,
            "run_id": run_id,
            "request": {
                "messages": [self.serialize_message(m) for m in request_messages] if trace else [],
                "message_count": len(request_messages),
            },
            "response": {
                "content": response_text if trace else None,
                "content_preview": (
                    self.truncate(response_text, 200)
                    if self.should_log(LogLevel.DEBUG)
                    else None
                ),
                "content_length": len(response_text),
            },
            "timing": {
                "latency_ms": latency_ms,
                "start_time": datetime.fromtimestamp(start_time).isoformat(),
                "end_time": datetime.fromtimestamp(end_time).isoformat(),
            },
            "usage": token_usage,
            "metadata": metadata or {},
        }
        self._write_to_file(run_id, log_entry)


def get_logger() -> LLMLogger:
    """Get the singleton logger instance."""
    return LLMLogger()


class LoggedLLM:
    """
    Wrapper around LangChain chat models to add debug logging.

    Intercepts invoke()/ainvoke() calls and logs requests, responses,
    timing, and metadata. Exceptions are logged and re-raised unchanged.
    """

    def __init__(
        self,
        llm_instance: Any,
        component: str,
        provider: str,
        model: str,
        run_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize LoggedLLM wrapper.

        Args:
            llm_instance: The actual chat model (ChatOpenAI or ChatAnthropic)
            component: Component name (e.g., "VisionAgent", "HTMLAgent")
            provider: Provider name ("openai", "anthropic" or "openrouter")
            model: Model name
            run_id: Optional id grouping calls of one pipeline run
            metadata: Optional additional metadata to include in logs
        """
        self.llm = llm_instance
        self.component = component
        self.provider = provider
        self.model = model
        self.run_id = run_id
        self.metadata = metadata or {}
        self.logger = get_logger()

    def __getattr__(self, name: str):
        """Delegate all other attributes to wrapped LLM instance."""
        return getattr(self.llm, name)

    def _log_failure(self, error: Exception):
        self.logger.log_error(self.component, error, self.run_id)

    def _log_success(self, invocation_id, messages, response, start_time):
        self.logger.log_response(
            invocation_id=invocation_id,
            component=self.component,
            provider=self.provider,
            model=self.model,
            request_messages=messages,
            response=response,
            start_time=start_time,
            end_time=time.time(),
            run_id=self.run_id,
            metadata=self.metadata,
        )

    def invoke(self, messages: List[Any], **kwargs) -> Any:
        """Invoke the model synchronously with logging."""
        invocation_id = self.logger.log_invocation(self.component, self.provider, self.model, self.run_id)
        if not invocation_id:
            return self.llm.invoke(messages, **kwargs)

        start_time = time.time()
        try:
            response = self.llm.invoke(messages, **kwargs)
        except Exception as e:
            self._log_failure(e)
            raise
        self._log_success(invocation_id, messages, response, start_time)
        return response

    async def ainvoke(self, messages: List[Any], **kwargs) -> Any:
        """Invoke the model asynchronously with logging."""
        invocation_id = self.logger.log_invocation(self.component, self.provider, self.model, self.run_id)
        if not invocation_id:
            return await self.llm.ainvoke(messages, **kwargs)

        start_time = time.time()
        try:
            response = await self.llm.ainvoke(messages, **kwargs)
        except Exception as e:
            self._log_failure(e)
            raise
        self._log_success(invocation_id, messages, response, start_time)
        return response
