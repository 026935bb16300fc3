"""
Поиск цен в строке по паттернам нескольких правил и категорий.

Совпадения разных правил и категорий конкурируют за участки текста:
побеждает более длинное совпадение ("US$34.56" против "$34.56",
"449€00" против "449€"), при равной длине - категория, стоящая раньше.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from ..domain.models import ExtractionCandidate, ExtractionStrategy, PatternCategory, PricePattern
from ..formats.currency_format import CurrencyFormatRule

CATEGORY_ORDER = list(PatternCategory)

# Категории для прямого поиска (проходы 2-4)
DIRECT_CATEGORIES = (
    PatternCategory.STANDARD,
    PatternCategory.COUNTRY_PREFIXED,
    PatternCategory.SYMBOL_BETWEEN,
    PatternCategory.SPACED,
)
# Категории, чьи участки откладываются до прохода 5
CONTEXT_CATEGORIES = (PatternCategory.RANGE, PatternCategory.CONTEXTUAL)


def _group(match, name: str, prefix: str = "") -> Optional[str]:
    """Первое непустое значение группы *name среди веток с префиксом."""
    for key, value in match.groupdict().items():
        if value is not None and key.startswith(prefix) and key.endswith(name):
            return value
    return None


@dataclass
class PriceMatch:
    """Одно совпадение паттерна в тексте."""

    pattern: PricePattern
    rule: CurrencyFormatRule
    span: Tuple[int, int]
    raw_text: str
    currency_symbol: str
    currency_code: str
    integer_part: str
    fraction_part: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    rule_order: int = field(default=0, repr=False)

    @property
    def length(self) -> int:
        return self.span[1] - self.span[0]

    def overlaps(self, other_span: Tuple[int, int]) -> bool:
        return self.span[0] < other_span[1] and other_span[0] < self.span[1]

    def to_candidate(
        self, strategy: ExtractionStrategy, confidence: float, source_ref: Any = None
    ) -> ExtractionCandidate:
        return ExtractionCandidate(
            raw_text=self.raw_text,
            matched_pattern=self.pattern,
            currency_symbol=self.currency_symbol,
            currency_code=self.currency_code,
            integer_part=self.integer_part,
            fraction_part=self.fraction_part,
            strategy=strategy,
            confidence=confidence,
            source_ref=source_ref,
            thousands=self.rule.thousands,
            decimal=self.rule.decimal,
            span=self.span,
            metadata=dict(self.metadata),
        )


class PriceTextMatcher:
    """
    Применяет паттерны к строке.

    Пример:
        matcher = PriceTextMatcher(registry, compiler)
        matches = matcher.find("Now only $19.99", DIRECT_CATEGORIES)
    """

    def __init__(self, registry, compiler):
        self.registry = registry
        self.compiler = compiler

    def active_rules(self, text: str, settings=None) -> List[CurrencyFormatRule]:
        """
        Правила для текста: из настроек, найденное в тексте, по умолчанию.

        Порядок сохраняется, повторы убираются.
        """
        rules = []
        if settings is not None:
            rules.append(self.registry.format_for_settings(settings))
        detected = self.registry.detect_format_from_text(text)
        if detected is not None:
            rules.append(detected)
        rules.append(self.registry.default_format())

        unique = []
        seen = set()
        for rule in rules:
            if rule.id not in seen:
                seen.add(rule.id)
                unique.append(rule)
        return unique

    def find(
        self,
        text: str,
        categories: Iterable[PatternCategory],
        rules: Optional[Sequence[CurrencyFormatRule]] = None,
        settings=None,
        deferred: Iterable[PatternCategory] = (),
    ) -> List[PriceMatch]:
        """
        Все непересекающиеся совпадения в порядке появления в тексте.

        Args:
            text: Строка для поиска
            categories: Категории паттернов
            rules: Правила (по умолчанию active_rules(text, settings))
            settings: Пользовательские настройки
            deferred: Категории, чьи участки исключаются из результата
                      (цена внутри "under $20" достаётся проходу 5)
        """
        if not text:
            return []
        if rules is None:
            rules = self.active_rules(text, settings)

        matches = self._collect(text, categories, rules)
        deferred = list(deferred)
        if deferred and matches:
            blocked = [m.span for m in self._collect(text, deferred, rules)]
            if blocked:
                kept = [m for m in matches if not any(m.overlaps(span) for span in blocked)]
                if len(kept) != len(matches):
                    logger.debug(
                        f"[TextMatcher] Отложено совпадений в контекстных фразах: {len(matches) - len(kept)}"
                    )
                matches = kept

        return self._select(matches)

    def _collect(self, text, categories, rules) -> List[PriceMatch]:
        found = []
        for rule_index, rule in enumerate(rules):
            for category in categories:
                pattern = self.compiler.build_pattern(rule, category)
                if pattern.never_matches:
                    continue
                for m in pattern.compiled_matcher.finditer(text):
                    price_match = self._to_match(m, pattern, rule)
                    if price_match is not None:
                        price_match.rule_order = rule_index
                        found.append(price_match)
        return found

    @staticmethod
    def _select(matches: List[PriceMatch]) -> List[PriceMatch]:
        def rank(m: PriceMatch):
            return (-m.length, CATEGORY_ORDER.index(m.pattern.category), m.rule_order, m.span[0])

        selected: List[PriceMatch] = []
        for candidate in sorted(matches, key=rank):
            if not any(candidate.overlaps(kept.span) for kept in selected):
                selected.append(candidate)
        return sorted(selected, key=lambda m: m.span[0])

    @staticmethod
    def _to_match(m, pattern: PricePattern, rule: CurrencyFormatRule) -> Optional[PriceMatch]:
        category = pattern.category
        metadata: Dict[str, Any] = {}
        prefix = ""
        if category == PatternCategory.RANGE:
            prefix = "lo_"
            upper_integer = _group(m, "integer", "hi_")
            if upper_integer is not None:
                metadata["upper_integer"] = upper_integer
                metadata["upper_fraction"] = _group(m, "fraction", "hi_") or ""
        elif category == PatternCategory.CONTEXTUAL:
            prefix = "ctx_"
            metadata["keyword"] = " ".join(m.group("keyword").lower().split())

        integer = _group(m, "integer", prefix)
        if integer is None:
            return None
        symbol = _group(m, "symbol", prefix) or ""
        country = _group(m, "prefix", prefix)
        if country and symbol:
            symbol = country + symbol
        code = (_group(m, "code", prefix) or "").upper()
        if not code and rule.codes:
            code = rule.codes[0]

        return PriceMatch(
            pattern=pattern,
            rule=rule,
            span=m.span(),
            raw_text=m.group(0),
            currency_symbol=symbol,
            currency_code=code,
            integer_part=integer,
            fraction_part=_group(m, "fraction", prefix) or "",
            metadata=metadata,
        )

