"""Keyword synonym dictionary and token normalization"""

import re
from typing import Dict, List


# Canonical keyword -> variants users type in chat
KEYWORD_SYNONYMS: Dict[str, List[str]] = {
    "average": ["avg", "mean", "averages", "averaging", "averaged"],
    "sum": ["total", "sums", "summing", "summed", "add up"],
    "max": ["maximum", "highest", "largest", "biggest"],
    "min": ["minimum", "lowest", "smallest"],
    "count": ["counts", "counting"],
    "chart": ["charts", "charting", "graph", "graphs", "plot", "plots", "plotting",
              "visualize", "visualise", "visualization", "visualisation"],
    "formula": ["formulas", "formulae", "equation", "equations"],
    "calculate": ["calculates", "calculating", "calculation", "compute"],
    "search": ["searches", "searching", "lookup", "look up", "find online"],
    "extract": ["extracts", "extracting", "extraction"],
    "compare": ["comparison", "comparisons", "comparing", "versus", "vs"],
    "trend": ["trends", "trending", "over time"],
    "distribution": ["distributions", "breakdown", "share"],
}

_TOKEN_PATTERN = re.compile(r"[a-z0-9]+")

_VARIANTS: Dict[str, str] = {
    variant: canonical
    for canonical, variants in KEYWORD_SYNONYMS.items()
    for variant in variants
}


def tokenize(text: str) -> List[str]:
    """
    Lower-case word tokens of text

    Args:
        text: Free text

    Returns:
        Alphanumeric tokens in order
    """
    if not text:
        return []
    return _TOKEN_PATTERN.findall(str(text).lower())


def normalize_token(token: str) -> str:
    """
    Map a single token to its canonical keyword:
    1. Lowercase
    2. Synonym lookup
    3. Plural "s" stripped when the singular is a known keyword

    Args:
        token: Raw token

    Returns:
        Canonical keyword or the lower-cased token
    """
    word = token.lower().strip()
    if word in KEYWORD_SYNONYMS:
        return word
    if word in _VARIANTS:
        return _VARIANTS[word]
    if word.endswith("s") and word[:-1] in KEYWORD_SYNONYMS:
        return word[:-1]
    return word


def normalize_text(text: str) -> List[str]:
    """
    Canonical token view of text; multi-word variants ("add up",
    "find online") collapse to their keyword first.

    Args:
        text: Free text

    Returns:
        Normalized tokens
    """
    lowered = " ".join(tokenize(text))
    for variant, canonical in _VARIANTS.items():
        if " " in variant:
            lowered = re.sub(rf"\b{re.escape(variant)}\b", canonical, lowered)
    return [normalize_token(token) for token in lowered.split()]


def normalize_phrase(phrase: str) -> str:
    """Phrase in the same canonical form normalize_text produces"""
    return " ".join(normalize_text(phrase))
