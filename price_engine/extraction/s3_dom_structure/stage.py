"""
Stage 3: DOM Structure

ЦКП: Цена, разбитая по дочерним элементам.

Input: узел DOM
Output: кандидаты с уверенностью 0.85

"449" "€" "00"   -> "449€00"    (symbol_between)
"US$" "34.56"    -> "US$34.56"  (country_prefixed)
"""

from typing import List

from ...config.settings import DOM_STRUCTURE_CONFIDENCE
from ...dom.structure_analyzer import DomStructureAnalyzer, TextSource
from ...domain.interfaces import IExtractionStage
from ...domain.models import ExtractionCandidate, ExtractionStrategy, ScanContext
from ...patterns.text_matcher import CONTEXT_CATEGORIES, DIRECT_CATEGORIES, PriceTextMatcher

ASSEMBLED_SOURCES = (TextSource.ASSEMBLED, TextSource.ASSEMBLED_SPACED)


class DomStructureStage(IExtractionStage):
    """Проход 3: склеенный текст дочерних элементов."""

    name = "dom_structure"
    uses_prefilter = True

    def __init__(
        self,
        analyzer: DomStructureAnalyzer,
        matcher: PriceTextMatcher,
        confidence: float = DOM_STRUCTURE_CONFIDENCE,
    ):
        self.analyzer = analyzer
        self.matcher = matcher
        self.confidence = confidence

    def is_applicable(self, context: ScanContext) -> bool:
        return context.node is not None

    def run(self, context: ScanContext) -> List[ExtractionCandidate]:
        candidates = []
        for item in self.analyzer.candidate_texts(context.node):
            if item.source not in ASSEMBLED_SOURCES:
                continue
            matches = self.matcher.find(
                item.text, DIRECT_CATEGORIES, settings=context.settings, deferred=CONTEXT_CATEGORIES
            )
            for match in matches:
                candidate = match.to_candidate(ExtractionStrategy.DOM_STRUCTURE, self.confidence, context.node)
                candidate.metadata["assembly"] = item.source.value
                candidates.append(candidate)
        return candidates
