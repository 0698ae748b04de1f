"""Web research and document extraction (not backed yet)"""

from core.enums import Intent

from .base import ComingSoonHandler


class WebResearchHandler(ComingSoonHandler):
    feature = "Web research"
    _intent = Intent.WEB_RESEARCH


class DocumentExtractionHandler(ComingSoonHandler):
    feature = "Document extraction"
    _intent = Intent.DOCUMENT_EXTRACTION
