"""
Tests for response extraction.
"""

import json

import pytest

from sketch2site.orchestration.extraction import ResponseExtractor


def test_extract_json_from_prose():
    """Object wrapped in prose and a markdown fence is returned unchanged."""
    payload = {"layoutType": "single-column", "sections": [{"type": "hero"}]}
    text = f"Sure! Here is the analysis:\n```json\n{json.dumps(payload, indent=2)}\n```\nLet me know."

    assert ResponseExtractor.extract_json(text) == payload


def test_extract_json_round_trip():
    """Re-extracting the serialized result yields the same object."""
    payload = {"a": 1, "nested": {"list": [1, 2, {"b": None}]}, "text": "x"}

    first = ResponseExtractor.extract_json(f"prefix {json.dumps(payload)} suffix")
    second = ResponseExtractor.extract_json(json.dumps(first))

    assert first == payload
    assert second == payload


def test_extract_json_stops_at_first_balanced_object():
    """Sibling objects after the first one are ignored."""
    text = 'first {"a": 1} then {"b": 2}'

    assert ResponseExtractor.extract_json(text) == {"a": 1}


def test_extract_json_ignores_braces_in_strings():
    """Braces inside string literals do not affect nesting."""
    text = 'result: {"css": "a { color: red; }", "note": "}{", "escaped": "quote \\" }"}'

    assert ResponseExtractor.extract_json(text) == {
        "css": "a { color: red; }",
        "note": "}{",
        "escaped": 'quote " }',
    }


def test_extract_json_skips_unparseable_span():
    """A balanced but invalid span is skipped in favour of a later object."""
    text = '{not json} but {"ok": true}'

    assert ResponseExtractor.extract_json(text) == {"ok": True}


def test_extract_json_skips_unclosed_brace_in_prose():
    """An unclosed brace before the object does not hide it."""
    text = 'Use the { key for objects. Result: {"a": 1}'

    assert ResponseExtractor.extract_json(text) == {"a": 1}

@pytest.mark.parametrize("text", ["", "plain prose without braces", '{"a": 1', "}{", "{{{", "[1, 2, 3]"])
def test_extract_json_never_throws(text):
    """Inputs without a usable object produce the fallback wrapper."""
    payload = ResponseExtractor.extract_json(text)

    assert payload == {"raw": text}
    assert ResponseExtractor.is_fallback(payload)


def test_extract_json_non_string_input():
    """None is treated as empty text."""
    assert ResponseExtractor.extract_json(None) == {"raw": ""}


def test_is_fallback_rejects_real_payloads():
    """Objects with other keys are not fallbacks."""
    assert not ResponseExtractor.is_fallback({"raw": "x", "layoutType": "grid"})
    assert not ResponseExtractor.is_fallback({"components": []})


def test_extract_code_strips_fence():
    """Fenced code is unwrapped."""
    text = "Here is the markup:\n```html\n<header>Hi</header>\n```\n"

    assert ResponseExtractor.extract_code(text, "html") == "<header>Hi</header>"


def test_extract_code_prefers_matching_language():
    """The block whose language matches is chosen; js and javascript are aliases."""
    text = "```css\nbody { margin: 0; }\n```\n\n```js\nconsole.log('hi');\n```"

    assert ResponseExtractor.extract_code(text, "javascript") == "console.log('hi');"
    assert ResponseExtractor.extract_code(text, "css") == "body { margin: 0; }"


def test_extract_code_falls_back_to_first_block():
    """Without a matching language the first block is used."""
    text = "```\n<main></main>\n```"

    assert ResponseExtractor.extract_code(text, "html") == "<main></main>"


def test_extract_code_without_fences():
    """Unfenced responses are returned stripped."""
    assert ResponseExtractor.extract_code("  <p>Hello</p>\n\n") == "<p>Hello</p>"
