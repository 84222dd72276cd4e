"""Utility to pull a JSON object out of an LLM response."""

from __future__ import annotations

import json


def parse_json_object(text: str) -> dict:
    """Parse a JSON object from LLM output, handling ```json blocks.

    Tries in order:
    1. Direct json.loads on the full text
    2. Strip fenced code block markers and parse
    3. First '{' to last '}' (object embedded in prose)

    Truncated output is not repaired. Raises ValueError when no JSON
    object can be recovered, or when the payload is not an object.
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected text, got {type(text).__name__}")
    text = text.strip()

    candidates = [text]
    stripped = _strip_code_fences(text)
    if stripped != text:
        candidates.append(stripped)
    embedded = _between_braces(stripped)
    if embedded is not None:
        candidates.append(embedded)

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def _strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers from text."""
    lines = text.split("\n")

    # Drop prose before an opening fence (```json, ```, etc.)
    for i, line in enumerate(lines):
        if line.strip().startswith("```"):
            lines = lines[i + 1 :]
            break
    else:
        return text

    for i, line in enumerate(lines):
        if line.strip().startswith("```"):
            lines = lines[:i]
            break

    return "\n".join(lines).strip()


def _between_braces(text: str) -> str | None:
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start : end + 1]
    return None
