"""Fuzzy matching utilities"""

from typing import List, Optional

from rapidfuzz import fuzz, process

from config import settings
from .synonyms import tokenize


def fuzzy_match_string(
    text: str,
    candidates: List[str],
    threshold: Optional[int] = None
) -> Optional[str]:
    """
    Fuzzy match a string against a list of candidates

    Args:
        text: Text to match
        candidates: List of candidate strings
        threshold: Match threshold (0-100), defaults to config

    Returns:
        Best match if above threshold, None otherwise
    """
    if not text or not candidates:
        return None

    threshold = threshold or settings.FUZZY_MATCH_THRESHOLD
    result = process.extractOne(text, candidates, scorer=fuzz.ratio)

    if result and result[1] >= threshold:
        return result[0]

    return None


def match_header(
    query_tokens: List[str],
    headers: List[str],
    threshold: Optional[int] = None
) -> Optional[str]:
    """
    Find the header a query mentions

    A header whose full name appears in the query wins, then a header
    sharing a word with the query, then the best fuzzy match of a query token.

    Args:
        query_tokens: Lower-cased query tokens
        headers: Column headers
        threshold: Match threshold (0-100), defaults to config

    Returns:
        Matching header or None
    """
    query = " " + " ".join(query_tokens) + " "
    for header in headers:
        name = " ".join(tokenize(header))
        if name and f" {name} " in query:
            return header

    words = set(query_tokens)
    for header in headers:
        if any(len(word) >= 3 and word in words for word in tokenize(header)):
            return header

    lowered = {" ".join(tokenize(header)): header for header in headers if tokenize(header)}
    for token in query_tokens:
        if len(token) < 3:
            continue
        match = fuzzy_match_string(token, list(lowered), threshold)
        if match is not None:
            return lowered[match]

    return None
