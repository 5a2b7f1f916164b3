"""
Tests for error classification.
"""

import httpx
import openai
import pytest

from fakes import FakeHTTPError
from sketch2site.errors import (
    AgentError,
    AgentFailure,
    BadRequest,
    ErrorKind,
    InsufficientCredits,
    InvalidCredentials,
    RateLimited,
    Timeout,
    classify_error,
)


@pytest.mark.parametrize("status, message, expected", [
    (401, "Invalid API key", InvalidCredentials),
    (403, "Forbidden", InvalidCredentials),
    (402, "Payment required", InsufficientCredits),
    (429, "Rate limit exceeded, slow down", RateLimited),
    (429, "You exceeded your current quota", InsufficientCredits),
    (429, "Insufficient credits", InsufficientCredits),
    (400, "Invalid model id", BadRequest),
    (422, "Unprocessable", BadRequest),
    (408, "Request timeout", Timeout),
    (504, "Gateway timeout", Timeout),
    (500, "Internal error", AgentFailure),
    (503, "Overloaded", AgentFailure),
])
def test_classify_by_status(status, message, expected):
    """HTTP status codes map onto the taxonomy."""
    error = classify_error(FakeHTTPError(status, message), "LayoutAgent")

    assert type(error) is expected
    assert error.agent == "LayoutAgent"
    assert error.status_code == status
    assert error.message == message


def test_retryable_kinds():
    """Only rate limits and timeouts are retryable."""
    assert classify_error(FakeHTTPError(429, "slow down"), "a").retryable
    assert classify_error(TimeoutError(), "a").retryable
    assert not classify_error(FakeHTTPError(401), "a").retryable
    assert not classify_error(FakeHTTPError(500), "a").retryable


def test_builtin_timeout():
    """Builtin timeouts are Timeout errors."""
    error = classify_error(TimeoutError(), "VisionAgent")

    assert isinstance(error, Timeout)
    assert error.kind == ErrorKind.TIMEOUT


def test_generic_exception_keeps_agent_and_message():
    """Unclassified failures carry the upstream message and agent name."""
    error = classify_error(ValueError("connection reset"), "HTMLAgent")

    assert isinstance(error, AgentFailure)
    assert str(error) == "HTMLAgent: connection reset"


def test_upstream_message_from_body():
    """The structured error body message is preferred."""
    exc = FakeHTTPError(400, "Error code: 400", body={"error": {"message": "model not found"}})

    error = classify_error(exc, "CSSAgent")

    assert isinstance(error, BadRequest)
    assert error.message == "model not found"


def test_openai_authentication_error():
    """SDK authentication errors are InvalidCredentials."""
    request = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")
    response = httpx.Response(401, request=request)
    exc = openai.AuthenticationError("Incorrect API key provided", response=response, body=None)

    error = classify_error(exc, "VisionAgent")

    assert isinstance(error, InvalidCredentials)
    assert error.status_code == 401


def test_classified_errors_pass_through():
    """Already classified errors are returned unchanged."""
    original = RateLimited("JSAgent", "slow down", 429)

    assert classify_error(original, "Other") is original
    assert isinstance(original, AgentError)
