"""
Response extraction for LLM output.

Models wrap the JSON we ask for in prose and markdown fences, and code
responses in fences. Extraction never raises: a response without a usable
object becomes ``{"raw": text}`` and the orchestrator decides what to do.
"""

import json
import re
from typing import Any, Dict, Optional, Tuple


FALLBACK_KEY = "raw"

_FENCE_PATTERN = re.compile(r"```[ \t]*([\w+-]*)[^\n]*\n(.*?)```", re.DOTALL)


def _balanced_span(text: str, start: int) -> Optional[Tuple[int, int]]:
    """
    Find the end of the object opening at ``text[start] == "{"``.

    Tracks nesting depth and skips braces inside JSON string literals.
    Returns (start, end) with ``end`` exclusive, or None if never closed.
    """
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return start, index + 1
    return None


class ResponseExtractor:
    """Parses raw model text into structured payloads or code."""

    @staticmethod
    def extract_json(response_text: Any) -> Dict[str, Any]:
        """
        Extract the first balanced JSON object from a model response.

        Scanning starts at each ``{`` in turn; the first span that closes at
        depth zero and parses as a JSON object wins. Sibling objects after it
        are ignored.

        Args:
            response_text: Raw model response.

        Returns:
            The parsed object, or ``{"raw": response_text}`` when none parses.
        """
        if not isinstance(response_text, str):
            response_text = "" if response_text is None else str(response_text)

        position = response_text.find("{")
        while position != -1:
            span = _balanced_span(response_text, position)
            if span is None:
                # A stray brace in prose never closes; try the next one
                position = response_text.find("{", position + 1)
                continue
            try:
                payload = json.loads(response_text[span[0]:span[1]])
            except ValueError:
                payload = None
            if isinstance(payload, dict):
                return payload
            position = response_text.find("{", position + 1)

        return {FALLBACK_KEY: response_text}

    @staticmethod
    def is_fallback(payload: Dict[str, Any]) -> bool:
        """True when ``payload`` is the wrapper produced for unparseable text."""
        return set(payload) == {FALLBACK_KEY} and isinstance(payload.get(FALLBACK_KEY), str)

    @staticmethod
    def extract_code(response_text: Any, language: Optional[str] = None) -> str:
        """
        Extract code from a model response.

        Args:
            response_text: Raw model response.
            language: Preferred fence language (html, css, javascript).

        Returns:
            Contents of the matching fenced block, the first fenced block, or
            the whole response stripped when no fences are present.
        """
        if not isinstance(response_text, str):
            response_text = "" if response_text is None else str(response_text)

        blocks = _FENCE_PATTERN.findall(response_text)
        if not blocks:
            return response_text.strip()

        if language:
            aliases = {language.lower()}
            if language.lower() in ("javascript", "js"):
                aliases.update({"javascript", "js"})
            for fence_language, body in blocks:
                if fence_language.lower() in aliases:
                    return body.strip()
        return blocks[0][1].strip()
