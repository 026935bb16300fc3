"""
Stage 5: Contextual

ЦКП: Цена в контексте ("under $20", "starting at $5") и диапазоны ("$10 - $20").

Диапазон даёт нижнюю границу, верхняя сохраняется в metadata.
Слова минимальной цены ("from", "starting at") повышают уверенность.
"""

from typing import List

from ...config.settings import CONTEXTUAL_MINIMUM_BONUS, MINIMUM_PRICE_KEYWORDS
from ...domain.interfaces import IExtractionStage
from ...domain.models import ExtractionCandidate, ExtractionStrategy, ScanContext
from ...patterns.text_matcher import CONTEXT_CATEGORIES, PriceMatch, PriceTextMatcher

# Контекстная цена не должна конкурировать с прямыми совпадениями
MAX_CONTEXTUAL_CONFIDENCE = 0.8


def contextual_confidence(match: PriceMatch) -> float:
    """Уверенность контекстного совпадения: бонус за слова минимальной цены, не выше 0.8."""
    confidence = match.pattern.base_confidence
    if match.metadata.get("keyword") in MINIMUM_PRICE_KEYWORDS:
        confidence += CONTEXTUAL_MINIMUM_BONUS
    return round(min(confidence, MAX_CONTEXTUAL_CONFIDENCE), 2)


class ContextualStage(IExtractionStage):
    """Проход 5: контекст и диапазоны."""

    name = "contextual"
    uses_prefilter = True

    def __init__(self, matcher: PriceTextMatcher):
        self.matcher = matcher

    def is_applicable(self, context: ScanContext) -> bool:
        return bool(context.text)

    def run(self, context: ScanContext) -> List[ExtractionCandidate]:
        matches = self.matcher.find(context.text, CONTEXT_CATEGORIES, settings=context.settings)
        return [
            m.to_candidate(ExtractionStrategy.CONTEXTUAL, contextual_confidence(m), context.node)
            for m in matches
        ]
