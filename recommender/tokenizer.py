from __future__ import annotations

import re
from typing import List, Optional

SEPARATOR_RE = re.compile(r"[^a-z0-9]+")

STOPWORDS = frozenset(
    {
        "the", "and", "a", "an", "of", "in", "on", "to", "for", "with", "is",
        "are", "by", "from", "that", "this", "it", "as", "be", "was", "which",
    }
)


def tokenize(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [t for t in SEPARATOR_RE.split(text.lower()) if t]


def tokenize_filtered(text: Optional[str]) -> List[str]:
    return [t for t in tokenize(text) if t not in STOPWORDS]
