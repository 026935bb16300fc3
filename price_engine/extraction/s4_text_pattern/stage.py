"""
Stage 4: Text Pattern

ЦКП: Цена в тексте узла или во входной строке.

Уверенность зависит от категории паттерна:
standard 0.9, country_prefixed 0.85, spaced 0.8, symbol_between 0.75.
Совпадения внутри "under $20" и "$10 - $20" оставлены проходу 5.
"""

from typing import List

from ...domain.interfaces import IExtractionStage
from ...domain.models import ExtractionCandidate, ExtractionStrategy, ScanContext
from ...patterns.text_matcher import CONTEXT_CATEGORIES, DIRECT_CATEGORIES, PriceTextMatcher


class TextPatternStage(IExtractionStage):
    """Проход 4: паттерны по тексту."""

    name = "text_pattern"
    uses_prefilter = True

    def __init__(self, matcher: PriceTextMatcher):
        self.matcher = matcher

    def is_applicable(self, context: ScanContext) -> bool:
        return bool(context.text)

    def run(self, context: ScanContext) -> List[ExtractionCandidate]:
        matches = self.matcher.find(
            context.text, DIRECT_CATEGORIES, settings=context.settings, deferred=CONTEXT_CATEGORIES
        )
        return [
            m.to_candidate(ExtractionStrategy.PATTERN, m.pattern.base_confidence, context.node)
            for m in matches
        ]
