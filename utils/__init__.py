"""Utility modules"""

from .encoding import detect_encoding
from .fuzzy import fuzzy_match_string, match_header
from .synonyms import KEYWORD_SYNONYMS, normalize_phrase, normalize_text, tokenize

__all__ = [
    "detect_encoding",
    "fuzzy_match_string",
    "match_header",
    "KEYWORD_SYNONYMS",
    "normalize_phrase",
    "normalize_text",
    "tokenize",
]
