"""
Stage 2: Attribute Extraction

ЦКП: Цена из атрибутов узла (aria-label, data-price, itemprop="price").

Input: узел DOM
Output: кандидаты с уверенностью 0.9 (цена в контексте 0.6-0.8)

Алгоритм:
1. Человекочитаемые значения ("$8.48") ищутся общими паттернами
2. Цена в контексте ("From $8.48") получает уверенность прохода 5
3. Машинные значения ("8.48") принимаются только с известной валютой
   (data-currency, itemprop="priceCurrency")
"""

import re
from typing import List, Optional

from loguru import logger

from ...config.settings import ATTRIBUTE_CONFIDENCE
from ...dom.structure_analyzer import CandidateText, DomStructureAnalyzer, TextSource
from ...domain.interfaces import IExtractionStage
from ...domain.models import ExtractionCandidate, ExtractionStrategy, ScanContext
from ...patterns.text_matcher import CONTEXT_CATEGORIES, DIRECT_CATEGORIES, PriceTextMatcher
from ..s5_contextual.stage import contextual_confidence

_MACHINE_PRICE = re.compile(r"^(?P<integer>\d+)(?:\.(?P<fraction>\d{1,2}))?$")


class AttributeStage(IExtractionStage):
    """Проход 2: атрибуты."""

    name = "attribute"

    def __init__(
        self,
        analyzer: DomStructureAnalyzer,
        matcher: PriceTextMatcher,
        confidence: float = ATTRIBUTE_CONFIDENCE,
    ):
        self.analyzer = analyzer
        self.matcher = matcher
        self.confidence = confidence

    def is_applicable(self, context: ScanContext) -> bool:
        return context.node is not None

    def run(self, context: ScanContext) -> List[ExtractionCandidate]:
        candidates = []
        for item in self.analyzer.candidate_texts(context.node):
            if item.source != TextSource.ATTRIBUTE:
                continue

            if item.machine_format:
                candidate = self._machine_candidate(item, context)
                if candidate is not None:
                    candidates.append(candidate)
                continue

            matches = self.matcher.find(
                item.text, DIRECT_CATEGORIES, settings=context.settings, deferred=CONTEXT_CATEGORIES
            )
            for match in matches:
                candidate = match.to_candidate(ExtractionStrategy.ATTRIBUTE, self.confidence, context.node)
                candidate.metadata["attribute"] = item.attribute
                candidates.append(candidate)

            # "From $8.48" в aria-label: проход 5 атрибуты не читает
            for match in self.matcher.find(item.text, CONTEXT_CATEGORIES, settings=context.settings):
                candidate = match.to_candidate(
                    ExtractionStrategy.ATTRIBUTE, contextual_confidence(match), context.node
                )
                candidate.metadata["attribute"] = item.attribute
                candidates.append(candidate)
        return candidates

    def _machine_candidate(self, item: CandidateText, context: ScanContext) -> Optional[ExtractionCandidate]:
        if not item.currency_code:
            logger.debug(f"[Stage 2: Attribute] {item.attribute}='{item.text}' без валюты, пропуск")
            return None
        match = _MACHINE_PRICE.match(item.text)
        if match is None:
            logger.debug(f"[Stage 2: Attribute] {item.attribute}='{item.text}' не похоже на сумму")
            return None
        return ExtractionCandidate(
            raw_text=item.text,
            matched_pattern=None,
            currency_symbol="",
            currency_code=item.currency_code,
            integer_part=match.group("integer"),
            fraction_part=match.group("fraction") or "",
            strategy=ExtractionStrategy.ATTRIBUTE,
            confidence=self.confidence,
            source_ref=context.node,
            decimal="dot",
            metadata={"attribute": item.attribute},
        )
