"""
Error taxonomy for agent calls.

Every agent maps transport failures onto one of these classes so callers can
render actionable messages ("add credits", "try again shortly") without
inspecting vendor SDK exceptions.
"""

import asyncio
from enum import Enum
from typing import Optional

import anthropic
import httpx
import openai


class ErrorKind(str, Enum):
    """Failure classification for a single agent call."""
    INVALID_CREDENTIALS = "invalid_credentials"
    RATE_LIMITED = "rate_limited"
    INSUFFICIENT_CREDITS = "insufficient_credits"
    BAD_REQUEST = "bad_request"
    TIMEOUT = "timeout"
    AGENT_FAILURE = "agent_failure"
    EXTRACTION_FALLBACK = "extraction_fallback"  # reported, never raised


class ServiceUnavailable(Exception):
    """Required configuration (credentials) is missing."""


class AgentError(Exception):
    """Base class for classified agent failures."""

    kind: ErrorKind = ErrorKind.AGENT_FAILURE
    retryable: bool = False

    def __init__(self, agent: str, message: str, status_code: Optional[int] = None):
        self.agent = agent
        self.message = message
        self.status_code = status_code
        super().__init__(f"{agent}: {message}")


class InvalidCredentials(AgentError):
    kind = ErrorKind.INVALID_CREDENTIALS


class RateLimited(AgentError):
    kind = ErrorKind.RATE_LIMITED
    retryable = True


class InsufficientCredits(AgentError):
    kind = ErrorKind.INSUFFICIENT_CREDITS


class BadRequest(AgentError):
    kind = ErrorKind.BAD_REQUEST


class Timeout(AgentError):
    kind = ErrorKind.TIMEOUT
    retryable = True


class AgentFailure(AgentError):
    kind = ErrorKind.AGENT_FAILURE


_TIMEOUT_EXCEPTIONS = (
    openai.APITimeoutError,
    anthropic.APITimeoutError,
    httpx.TimeoutException,
    asyncio.TimeoutError,
    TimeoutError,
)

_AUTH_EXCEPTIONS = (
    openai.AuthenticationError,
    anthropic.AuthenticationError,
)

_QUOTA_MARKERS = ("quota", "credit", "billing", "insufficient")


def _upstream_message(exc: BaseException) -> str:
    """Best-effort human readable message from an SDK exception."""
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    message = getattr(exc, "message", None)
    if message:
        return str(message)
    return str(exc) or type(exc).__name__


def classify_error(exc: BaseException, agent: str) -> AgentError:
    """
    Map a transport or model exception to the agent error taxonomy.

    Args:
        exc: Exception raised while calling the model.
        agent: Name of the agent that issued the call.

    Returns:
        Classified AgentError (never raises).
    """
    if isinstance(exc, AgentError):
        return exc

    status = getattr(exc, "status_code", None)
    if not isinstance(status, int):
        status = None
    message = _upstream_message(exc)

    if isinstance(exc, _TIMEOUT_EXCEPTIONS) or status in (408, 504):
        return Timeout(agent, message or "Request timed out", status)
    if isinstance(exc, _AUTH_EXCEPTIONS) or status in (401, 403):
        return InvalidCredentials(agent, message, status)
    if status == 402:
        return InsufficientCredits(agent, message, status)
    if status == 429:
        if any(marker in message.lower() for marker in _QUOTA_MARKERS):
            return InsufficientCredits(agent, message, status)
        return RateLimited(agent, message, status)
    if status in (400, 422):
        return BadRequest(agent, message, status)
    return AgentFailure(agent, message, status)
