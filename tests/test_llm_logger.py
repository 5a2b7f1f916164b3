"""
Tests for the LLM call logger.
"""

import asyncio
import json

import pytest
from langchain_core.messages import HumanMessage

from fakes import ScriptedLLM
from sketch2site.utils.llm_logger import LLMLogger, LoggedLLM, LogLevel, get_logger


@pytest.fixture
def logger(monkeypatch, tmp_path):
    """Singleton logger switched to TRACE, writing under tmp_path."""
    instance = get_logger()
    monkeypatch.setattr(instance, "level", LogLevel.TRACE)
    monkeypatch.setattr(instance, "log_to_file", True)
    monkeypatch.setattr(instance, "log_dir", tmp_path)
    return instance


def test_singleton():
    assert get_logger() is LLMLogger()


def test_summarize_image_url():
    summary = LLMLogger.summarize_image_url("data:image/png;base64," + "A" * 1200)

    assert summary == "[IMAGE_DATA: png, base64 encoded, 1,200 bytes]"


def test_truncate():
    assert LLMLogger.truncate("short") == "short"
    assert LLMLogger.truncate("x" * 300, 10) == "x" * 10 + "... [truncated]"


def test_logged_llm_writes_scrubbed_entry(logger, tmp_path, capsys):
    """Responses are logged with images summarized, never written in full."""
    wrapped = LoggedLLM(ScriptedLLM('{"ok": true}'), "VisionAgent", "openai", "gpt-4o-mini", run_id="run-1")
    message = HumanMessage(content=[
        {"type": "text", "text": "Analyze"},
        {"type": "image_url", "image_url": {"url": "data:image/png;base64,QUJDREVG"}},
    ])

    response = asyncio.run(wrapped.ainvoke([message]))

    assert response.content == '{"ok": true}'
    log_file = tmp_path / "run-1" / "logs" / "llm_calls.jsonl"
    entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[0])
    assert entry["component"] == "VisionAgent"
    assert entry["response"]["content"] == '{"ok": true}'
    assert "QUJDREVG" not in log_file.read_text(encoding="utf-8")
    assert "LLM Call: [VisionAgent] openai/gpt-4o-mini" in capsys.readouterr().out


def test_logged_llm_reraises(logger, tmp_path):
    """Failures are logged and re-raised unchanged."""
    error = RuntimeError("boom")
    wrapped = LoggedLLM(ScriptedLLM(error), "CSSAgent", "openrouter", "google/gemini-flash-1.5")

    with pytest.raises(RuntimeError) as excinfo:
        asyncio.run(wrapped.ainvoke([HumanMessage(content="hi")]))

    assert excinfo.value is error
    entry = json.loads((tmp_path / "logs" / "llm_calls.jsonl").read_text(encoding="utf-8"))
    assert entry["level"] == "ERROR"
    assert entry["error"]["message"] == "boom"


def test_logging_disabled(monkeypatch, tmp_path):
    """At NONE nothing is printed or written."""
    instance = get_logger()
    monkeypatch.setattr(instance, "level", LogLevel.NONE)
    monkeypatch.setattr(instance, "log_dir", tmp_path)
    wrapped = LoggedLLM(ScriptedLLM("hi"), "HTMLAgent", "openrouter", "m")

    asyncio.run(wrapped.ainvoke([HumanMessage(content="x")]))

    assert list(tmp_path.iterdir()) == []
