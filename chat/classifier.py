"""Rule-based intent classification for chat messages"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from core.enums import Intent
from core.models import IntentMatch
from utils.synonyms import normalize_phrase, normalize_text

logger = logging.getLogger(__name__)

Predicate = Callable[[list[str]], Optional[str]]

CHART_PHRASES = ("chart", "graph", "plot", "visualize", "visualization")
CALCULATION_PHRASES = ("sum", "average", "mean", "max", "min", "count")
FORMULA_PHRASES = ("formula", "equation", "calculate")
WEB_RESEARCH_PHRASES = ("search", "find online", "web research", "lookup")
DOCUMENT_EXTRACTION_PHRASES = ("extract", "pdf", "image", "ocr", "scan")


def phrase_predicate(phrases: Iterable[str]) -> Predicate:
    """Predicate matching any phrase against the normalized token view.

    Phrases are normalized the same way as the text, so "graphs",
    "plotting" and "visualise" all hit a "chart" rule.
    """
    normalized = []
    for phrase in phrases:
        canonical = normalize_phrase(phrase)
        if canonical and canonical not in normalized:
            normalized.append(canonical)

    def predicate(tokens: list[str]) -> Optional[str]:
        joined = " " + " ".join(tokens) + " "
        for phrase in normalized:
            if f" {phrase} " in joined:
                return phrase
        return None

    return predicate


@dataclass(frozen=True)
class IntentRule:
    predicate: Predicate
    intent: Intent


def default_rules() -> list[IntentRule]:
    """Rules in precedence order; narrower intents after broader keyword sets."""
    return [
        IntentRule(phrase_predicate(CHART_PHRASES), Intent.CHART),
        IntentRule(phrase_predicate(CALCULATION_PHRASES), Intent.CALCULATION),
        IntentRule(phrase_predicate(FORMULA_PHRASES), Intent.FORMULA),
        IntentRule(phrase_predicate(WEB_RESEARCH_PHRASES), Intent.WEB_RESEARCH),
        IntentRule(phrase_predicate(DOCUMENT_EXTRACTION_PHRASES), Intent.DOCUMENT_EXTRACTION),
    ]


class IntentClassifier:
    """First matching rule wins; anything unmatched is GENERAL"""

    def __init__(self, rules: Optional[list[IntentRule]] = None):
        self.rules = rules if rules is not None else default_rules()

    def classify(self, text: str) -> IntentMatch:
        tokens = normalize_text(text)
        for rule in self.rules:
            phrase = rule.predicate(tokens)
            if phrase is not None:
                logger.debug("Classified %r as %s via %r", text, rule.intent.value, phrase)
                return IntentMatch(intent=rule.intent, phrase=phrase)
        return IntentMatch(intent=Intent.GENERAL)
