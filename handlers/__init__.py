"""Intent handlers"""

from typing import Dict, Optional

from core.enums import Intent
from core.interfaces import CompletionService, QueryHandler

from .base import BaseHandler, ComingSoonHandler
from .calculation import CalculationHandler
from .chart import ChartHandler
from .formula import FormulaHandler
from .general import GeneralHandler
from .research import DocumentExtractionHandler, WebResearchHandler


def default_handlers(completion: Optional[CompletionService] = None) -> Dict[Intent, QueryHandler]:
    """One handler per intent"""
    handlers = [
        ChartHandler(),
        CalculationHandler(),
        FormulaHandler(),
        WebResearchHandler(),
        DocumentExtractionHandler(),
        GeneralHandler(completion),
    ]
    return {handler.intent: handler for handler in handlers}


__all__ = [
    "BaseHandler",
    "ComingSoonHandler",
    "CalculationHandler",
    "ChartHandler",
    "FormulaHandler",
    "GeneralHandler",
    "WebResearchHandler",
    "DocumentExtractionHandler",
    "default_handlers",
]
