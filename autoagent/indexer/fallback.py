"""
Local keyword extractor used when LLM analysis is unavailable or unusable.

Frequency heuristic: lowercase, strip punctuation, keep tokens longer than
three characters, rank by count. Equal counts keep first-seen order
(Counter.most_common preserves insertion order among ties).
"""

import re
from collections import Counter
from typing import List

MIN_TOKEN_LENGTH = 4
MAX_KEYWORDS = 10

# Anything that is not a letter, digit or whitespace (underscore included)
_NON_ALNUM_RE = re.compile(r"[^\w\s]|_")


def extract_keywords_locally(content: str, max_keywords: int = MAX_KEYWORDS) -> List[str]:
    normalized = _NON_ALNUM_RE.sub("", content.lower())
    tokens = [t for t in normalized.split() if len(t) >= MIN_TOKEN_LENGTH]
    return [word for word, _ in Counter(tokens).most_common(max_keywords)]
