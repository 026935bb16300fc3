"""
Доменные модели движка: паттерны, кандидаты, результат распознавания.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..contracts.detection_dto import NormalizedPrice


class PatternCategory(str, Enum):
    """Категория паттерна цены."""

    STANDARD = "standard"
    COUNTRY_PREFIXED = "country_prefixed"
    SYMBOL_BETWEEN = "symbol_between"
    SPACED = "spaced"
    RANGE = "range"
    CONTEXTUAL = "contextual"


class ExtractionStrategy(str, Enum):
    """Проход, которым получен кандидат."""

    SITE_HANDLER = "site_handler"
    ATTRIBUTE = "attribute"
    DOM_STRUCTURE = "dom_structure"
    PATTERN = "pattern"
    CONTEXTUAL = "contextual"


# Паттерн для категорий, которые формат не может выразить
NEVER_MATCHING = r"(?!)"


@dataclass(frozen=True)
class PricePattern:
    """Скомпилированный паттерн. Неизменяем, кешируется по (rule_id, category)."""

    category: PatternCategory
    compiled_matcher: re.Pattern
    base_confidence: float
    rule_id: str

    @property
    def never_matches(self) -> bool:
        return self.compiled_matcher.pattern == NEVER_MATCHING


@dataclass
class ExtractionCandidate:
    """
    Кандидат на цену, найденный одним из проходов.

    source_ref - ссылка на исходный узел DOM (bs4.Tag). Движок её
    только читает и не участвует в сравнении кандидатов.
    """

    raw_text: str
    matched_pattern: Optional[PricePattern]
    currency_symbol: str
    currency_code: str
    integer_part: str
    fraction_part: str
    strategy: ExtractionStrategy
    confidence: float
    source_ref: Any = field(default=None, compare=False, repr=False)
    thousands: Optional[str] = None
    decimal: Optional[str] = None
    pass_index: int = 0
    span: Optional[Tuple[int, int]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw_text": self.raw_text,
            "category": self.matched_pattern.category.value if self.matched_pattern else None,
            "currency_symbol": self.currency_symbol,
            "currency_code": self.currency_code,
            "integer_part": self.integer_part,
            "fraction_part": self.fraction_part,
            "strategy": self.strategy.value,
            "confidence": self.confidence,
            "pass_index": self.pass_index,
            "metadata": dict(self.metadata),
        }


@dataclass
class DetectionResult:
    """Результат распознавания: все кандидаты, выбранный и нормализованная цена."""

    candidates: List[ExtractionCandidate] = field(default_factory=list)
    chosen: Optional[ExtractionCandidate] = None
    normalized: Optional[NormalizedPrice] = None
    passes_run: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.chosen is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chosen": self.chosen.to_dict() if self.chosen else None,
            "normalized": self.normalized.model_dump() if self.normalized else None,
            "candidates": [c.to_dict() for c in self.candidates],
            "passes_run": list(self.passes_run),
        }


@dataclass(frozen=True)
class ScanUnit:
    """Единица сканирования: текст и/или узел DOM плюс hostname страницы."""

    node: Any = None
    text: Optional[str] = None
    hostname: Optional[str] = None


@dataclass(frozen=True)
class PassEvent:
    """Событие прохода для внешнего приёмника отладочных событий."""

    pass_name: str
    outcome: str
    reason: str = ""
    text: Optional[str] = None


@dataclass
class ScanContext:
    """Контекст одного вызова координатора, общий для всех проходов."""

    node: Any
    text: str
    hostname: Optional[str]
    settings: Any
