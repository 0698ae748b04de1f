"""Chat layer: intent classification and orchestration"""

from .classifier import IntentClassifier, IntentRule, default_rules, phrase_predicate
from .orchestrator import ChatOrchestrator, split_range_prefix

__all__ = [
    "IntentClassifier",
    "IntentRule",
    "default_rules",
    "phrase_predicate",
    "ChatOrchestrator",
    "split_range_prefix",
]
