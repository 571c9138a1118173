"""
LLM-based Content Analyzer

Asks the LLM for keywords, themes, entities and a short summary of a block
of text. The response must be a JSON object; anything else is reported as a
failure so the caller can fall back to local extraction.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..common.llm_client import LLMClient
from ..common.llm_utils import parse_llm_json

logger = logging.getLogger("autoagent.indexer.extractor")


ANALYSIS_PROMPT = """You analyze text so it can be indexed for later retrieval.

Respond with a valid JSON object and nothing else, with these keys:
- "keywords": up to 10 important keywords from the text
- "themes": up to 10 overarching themes or topics
- "entities": up to 10 named entities (people, places, organizations, products)
- "summary": a short summary of the text (1-2 sentences)

Rules:
- Every list contains plain strings
- Use an empty list when nothing fits
- Do not wrap the JSON in any explanation"""


class AnalysisError(ValueError):
    """The analysis response could not be turned into keywords."""


@dataclass
class ContentAnalysis:
    """Structured result of an analysis call"""
    keywords: List[str] = field(default_factory=list)
    themes: List[str] = field(default_factory=list)
    entities: List[str] = field(default_factory=list)
    summary: str = ""

    @property
    def combined_keywords(self) -> List[str]:
        """keywords + themes + entities, in that order, duplicates kept"""
        return self.keywords + self.themes + self.entities


class ContentAnalyzer:
    """Runs the analysis prompt through an LLMClient."""

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        max_tokens: int = 512,
        temperature: float = 0.3,
        timeout: float = 30.0,
    ):
        self._llm = llm_client
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._timeout = timeout

    @property
    def is_available(self) -> bool:
        """Check if LLM client is ready"""
        return self._llm is not None and self._llm.is_available

    def analyze(self, content: str) -> ContentAnalysis:
        """
        Analyze ``content``.

        Raises:
            RuntimeError: no LLM client is available
            AnalysisError: the response was not a usable JSON object
            Exception: whatever the provider SDK raises (network, timeout)
        """
        if not self.is_available:
            raise RuntimeError("LLM client is not available")

        raw = self._llm.generate(
            f"Text to analyze:\n{content}",
            system=ANALYSIS_PROMPT,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            timeout=self._timeout,
        )
        return parse_analysis(raw)


def _string_list(data: dict, key: str) -> List[str]:
    value = data.get(key, [])
    if value is None:
        return []
    if not isinstance(value, list):
        raise AnalysisError(f'"{key}" is not a list')
    return [str(v) for v in value if v is not None and str(v).strip()]


def parse_analysis(raw: str) -> ContentAnalysis:
    """Parse an analysis response into ContentAnalysis."""
    data = parse_llm_json(raw)
    if data is None:
        raise AnalysisError("No JSON object in analysis response")

    analysis = ContentAnalysis(
        keywords=_string_list(data, "keywords"),
        themes=_string_list(data, "themes"),
        entities=_string_list(data, "entities"),
        summary=str(data.get("summary") or "").strip(),
    )
    if not analysis.combined_keywords:
        raise AnalysisError("Analysis response contains no keywords")
    return analysis
