"""
Stage 1: Site Handler

ЦКП: Цена из разметки конкретного сайта (Amazon, eBay, ...).

Input: узел DOM + hostname страницы
Output: не более одного кандидата, уверенность >= 0.95
"""

from typing import List

from ...domain.interfaces import IExtractionStage
from ...domain.models import ExtractionCandidate, ScanContext
from ...site_handlers.registry import SiteHandlerRegistry


class SiteHandlerStage(IExtractionStage):
    """Проход 1: обработчики сайтов."""

    name = "site_handler"

    def __init__(self, handlers: SiteHandlerRegistry):
        self.handlers = handlers

    def is_applicable(self, context: ScanContext) -> bool:
        return context.node is not None and bool(context.hostname)

    def run(self, context: ScanContext) -> List[ExtractionCandidate]:
        candidate = self.handlers.extract(context.hostname, context.node)
        return [candidate] if candidate is not None else []
