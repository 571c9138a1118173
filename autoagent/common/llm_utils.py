"""Shared utilities for parsing LLM responses."""

from __future__ import annotations

import json
from typing import Optional


def parse_llm_json(raw: str) -> Optional[dict]:
    """Parse a JSON object from an LLM response, handling code fences and preamble text.

    Tries in order:
    1. Strip markdown code fences, then json.loads
    2. Extract substring between first '{' and last '}', then json.loads

    Returns None when no JSON object can be recovered. A payload that parses
    to something other than an object (list, string, number) is also None.
    """
    if not raw:
        return None

    text = raw.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        lines = [l for l in lines if not l.strip().startswith("```")]
        text = "\n".join(lines)

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        start = text.find("{")
        end = text.rfind("}") + 1
        if start < 0 or end <= start:
            return None
        try:
            data = json.loads(text[start:end])
        except json.JSONDecodeError:
            return None

    if not isinstance(data, dict):
        return None
    return data
