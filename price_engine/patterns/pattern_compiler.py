"""
Компилятор паттернов цен.

Для пары (правило формата, категория) строит регулярное выражение:
- standard:         $12.99 | 12,99€ | USD 12.99 | 12.99 USD
- country_prefixed: US$34.56
- spaced:           $ 12.99 | 12,99 €
- symbol_between:   449€00 | 449€ 00
- range:            $10 - $20 (нижняя граница + верхняя в группах hi_)
- contextual:       under $20 | starting at $5

Каждая ветка альтернативы использует собственный префикс групп
(sb_, sa_, cb_, ...), значения достаёт PriceTextMatcher.
"""

import re
from typing import Callable, Dict, List, Optional

from loguru import logger

from ..config.settings import (
    CONTEXT_KEYWORDS,
    CONTEXTUAL_CONFIDENCE,
    COUNTRY_PREFIXED_CONFIDENCE,
    RANGE_CONFIDENCE,
    SPACED_CONFIDENCE,
    STANDARD_CONFIDENCE,
    SYMBOL_BETWEEN_CONFIDENCE,
    TIME_ANNOTATION_PATTERN,
)
from ..domain.models import NEVER_MATCHING, PatternCategory, PricePattern
from ..formats.currency_format import CurrencyFormatRule, bounded_token
from .delimiters import build_decimal_string, build_thousands_string

CATEGORY_CONFIDENCE: Dict[PatternCategory, float] = {
    PatternCategory.STANDARD: STANDARD_CONFIDENCE,
    PatternCategory.COUNTRY_PREFIXED: COUNTRY_PREFIXED_CONFIDENCE,
    PatternCategory.SPACED: SPACED_CONFIDENCE,
    PatternCategory.SYMBOL_BETWEEN: SYMBOL_BETWEEN_CONFIDENCE,
    PatternCategory.RANGE: RANGE_CONFIDENCE,
    PatternCategory.CONTEXTUAL: CONTEXTUAL_CONFIDENCE,
}

# Число не должно начинаться/заканчиваться посреди другого числа
_START = r"(?<![\d.,])"
_END = r"(?!\d|[.,]\d)"
_DASH = r"\s*[-–—]\s*"


def _alternation(tokens, bounded: bool = True) -> str:
    ordered = sorted(tokens, key=len, reverse=True)
    parts = [bounded_token(t) if bounded else re.escape(t) for t in ordered]
    return "(?:" + "|".join(parts) + ")"


def _keyword_alternation(keywords: List[str]) -> str:
    ordered = sorted(keywords, key=len, reverse=True)
    return "|".join(r"\s+".join(re.escape(word) for word in kw.split()) for kw in ordered)


class PatternCompiler:
    """
    Строит PricePattern для правил реестра.

    Результаты кешируются в PatternCache реестра по (rule.id, category);
    повторный вызов возвращает тот же объект.
    """

    def __init__(self, registry):
        self.registry = registry
        self._builders: Dict[PatternCategory, Callable[..., Optional[str]]] = {
            PatternCategory.STANDARD: self._standard,
            PatternCategory.COUNTRY_PREFIXED: self._country_prefixed,
            PatternCategory.SPACED: self._spaced,
            PatternCategory.SYMBOL_BETWEEN: self._symbol_between,
            PatternCategory.RANGE: self._range,
            PatternCategory.CONTEXTUAL: self._contextual,
        }

    def build_pattern(self, rule: CurrencyFormatRule, category) -> PricePattern:
        """
        Паттерн категории для правила.

        Raises:
            UnrecognizedDelimiterError: Неизвестный токен разделителя в правиле
        """
        category = PatternCategory(category)
        return self.registry.pattern_cache.get_or_build(
            (rule.id, category), lambda: self._compile(rule, category)
        )

    def build_reverse_pattern(self, rule: CurrencyFormatRule) -> PricePattern:
        """Стандартная цена, за которой уже стоит аннотация времени: "$20 (2h 30m)"."""

        def build() -> PricePattern:
            number = self._number_parts(rule)
            source = self._standard(rule, *number)
            source = f"(?:{source}){TIME_ANNOTATION_PATTERN}" if source else NEVER_MATCHING
            logger.debug(f"[PatternCompiler] Построен reverse-паттерн для {rule.id}")
            return PricePattern(PatternCategory.STANDARD, re.compile(source), STANDARD_CONFIDENCE, rule.id)

        return self.registry.pattern_cache.get_or_build((rule.id, "reverse"), build)

    def _compile(self, rule: CurrencyFormatRule, category: PatternCategory) -> PricePattern:
        thousands, decimal = self._number_parts(rule)
        source = self._builders[category](rule, thousands, decimal)
        if source is None:
            logger.debug(f"[PatternCompiler] {rule.id}/{category.value}: формат не выражает категорию")
            source = NEVER_MATCHING
        else:
            logger.debug(f"[PatternCompiler] Построен паттерн {rule.id}/{category.value}")
        return PricePattern(
            category=category,
            compiled_matcher=re.compile(source),
            base_confidence=CATEGORY_CONFIDENCE[category],
            rule_id=rule.id,
        )

    @staticmethod
    def _number_parts(rule: CurrencyFormatRule):
        return build_thousands_string(rule.thousands), build_decimal_string(rule.decimal)

    @staticmethod
    def _number(prefix: str, thousands: str, decimal: str) -> str:
        return (
            rf"(?P<{prefix}integer>\d+(?:{thousands}\d{{3}})*)"
            rf"(?:{decimal}(?P<{prefix}fraction>\d{{1,2}}))?"
        )

    def _standard(self, rule, thousands, decimal, prefix: str = "") -> Optional[str]:
        branches = {}
        if rule.symbols:
            symbols = _alternation(rule.symbols)
            branches["symbol_before"] = (
                rf"(?P<{prefix}sb_symbol>{symbols})" + self._number(f"{prefix}sb_", thousands, decimal) + _END
            )
            branches["symbol_after"] = (
                _START + self._number(f"{prefix}sa_", thousands, decimal) + rf"(?P<{prefix}sa_symbol>{symbols})"
            )
        if rule.codes:
            codes = _alternation(rule.codes)
            branches["code_before"] = (
                rf"(?P<{prefix}cb_code>{codes})\s?" + self._number(f"{prefix}cb_", thousands, decimal) + _END
            )
            branches["code_after"] = (
                _START + self._number(f"{prefix}ca_", thousands, decimal) + rf"\s?(?P<{prefix}ca_code>{codes})"
            )
        if not branches:
            return None

        if rule.symbol_position == "after":
            order = ["symbol_after", "code_after", "symbol_before", "code_before"]
        elif rule.symbol_position == "before":
            order = ["symbol_before", "code_before", "symbol_after", "code_after"]
        else:
            order = ["code_before", "code_after", "symbol_before", "symbol_after"]
        return "(?:" + "|".join(branches[name] for name in order if name in branches) + ")"

    def _country_prefixed(self, rule, thousands, decimal) -> Optional[str]:
        symbols = rule.prefixable_symbols
        if not symbols:
            return None
        return (
            r"(?<![A-Za-z])(?P<cp_prefix>[A-Z]{2})"
            rf"(?P<cp_symbol>{_alternation(symbols, bounded=False)})\s?"
            + self._number("cp_", thousands, decimal)
            + _END
        )

    def _spaced(self, rule, thousands, decimal) -> Optional[str]:
        branches = []
        if rule.symbols:
            symbols = _alternation(rule.symbols)
            branches.append(rf"(?P<ps_symbol>{symbols})\s+" + self._number("ps_", thousands, decimal) + _END)
            branches.append(_START + self._number("ns_", thousands, decimal) + rf"\s+(?P<ns_symbol>{symbols})")
        if rule.codes:
            codes = _alternation(rule.codes)
            branches.append(rf"(?P<pc_code>{codes})\s+" + self._number("pc_", thousands, decimal) + _END)
            branches.append(_START + self._number("nc_", thousands, decimal) + rf"\s+(?P<nc_code>{codes})")
        if not branches:
            return None
        return "(?:" + "|".join(branches) + ")"

    def _symbol_between(self, rule, thousands, decimal) -> Optional[str]:
        if not rule.symbols:
            return None
        return (
            _START
            + r"(?P<bt_integer>\d+)\s?"
            + rf"(?P<bt_symbol>{_alternation(rule.symbols)})\s?"
            + r"(?P<bt_fraction>\d{2})(?!\d)"
        )

    def _range(self, rule, thousands, decimal) -> Optional[str]:
        low = self._standard(rule, thousands, decimal, prefix="lo_")
        if low is None:
            return None
        high = self._standard(rule, thousands, decimal, prefix="hi_")
        bare_high = self._number("hi_n_", thousands, decimal) + _END
        return low + _DASH + f"(?:{high}|{bare_high})"

    def _contextual(self, rule, thousands, decimal) -> Optional[str]:
        standard = self._standard(rule, thousands, decimal, prefix="ctx_")
        if standard is None:
            return None
        keywords = _keyword_alternation(CONTEXT_KEYWORDS)
        return rf"(?<![A-Za-z])(?P<keyword>(?i:{keywords}))\s+" + standard
