"""
Реестр форматов валют.

Хранит правила в порядке регистрации, индексы символ -> правило и
код -> правило, а также кеш паттернов, построенных для этих правил.
Экземпляры независимы: два реестра не делят ни правила, ни кеш.
"""

import re
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from ..config.settings import DEFAULT_FORMAT_ID
from ..domain.exceptions import DuplicateSymbolError, FormatConfigurationError
from ..patterns.pattern_cache import PatternCache
from .currency_format import CurrencyFormatRule, bounded_token
from .format_loader import CurrencyFormatLoader

# US$, EU€: две заглавные буквы и зарегистрированный символ
_COUNTRY_PREFIX = re.compile(r"^([A-Z]{2})(.+)$")


class CurrencyFormatRegistry:
    """
    Реестр правил форматов.

    Пример:
        registry = CurrencyFormatRegistry.from_defaults()
        rule = registry.detect_format_from_text("Preis: 12,99 €")
        rule.id  # "EUR"
    """

    def __init__(self, default_format_id: str = DEFAULT_FORMAT_ID, cache: Optional[PatternCache] = None):
        self.default_format_id = default_format_id
        self.pattern_cache = cache if cache is not None else PatternCache()
        self._rules: Dict[str, CurrencyFormatRule] = {}
        self._by_symbol: Dict[str, CurrencyFormatRule] = {}
        self._by_code: Dict[str, CurrencyFormatRule] = {}
        self._symbol_scan: Optional[list] = None

    @classmethod
    def from_defaults(cls, path: Optional[Path] = None) -> "CurrencyFormatRegistry":
        """Реестр с форматами из YAML (по умолчанию currency_formats.yaml)."""
        rules, default_id = CurrencyFormatLoader(path).load()
        registry = cls(default_format_id=default_id)
        for rule in rules:
            registry.register_format(rule)
        logger.debug(f"[FormatRegistry] Зарегистрировано форматов: {len(registry)}")
        return registry

    def register_format(self, rule: CurrencyFormatRule) -> None:
        """
        Регистрирует правило.

        Проверка выполняется до изменения индексов: при конфликте реестр
        остаётся в прежнем состоянии.

        Raises:
            DuplicateSymbolError: Символ или код уже принадлежит другому правилу
            FormatConfigurationError: Другое правило с тем же id
        """
        existing = self._rules.get(rule.id)
        if existing is not None:
            if existing == rule:
                return
            raise FormatConfigurationError(
                f"Формат с id '{rule.id}' уже зарегистрирован с другими параметрами",
                component="CurrencyFormatRegistry",
            )

        taken = [(t, self._by_symbol[t]) for t in rule.symbols if t in self._by_symbol]
        taken += [(t, self._by_code[t]) for t in rule.codes if t in self._by_code]
        if taken:
            token, owner = taken[0]
            logger.warning(f"[FormatRegistry] '{token}' формата {rule.id} уже занят форматом {owner.id}")
            raise DuplicateSymbolError(token, owner.id, rule.id)

        self._rules[rule.id] = rule
        for symbol in rule.symbols:
            self._by_symbol[symbol] = rule
        for code in rule.codes:
            self._by_code[code] = rule
        self._symbol_scan = None
        logger.debug(f"[FormatRegistry] Зарегистрирован формат {rule.id}: {rule.symbols} {rule.codes}")

    def lookup_by_symbol(self, symbol: str) -> Optional[CurrencyFormatRule]:
        return self._by_symbol.get(symbol)

    def lookup_by_code(self, code: str) -> Optional[CurrencyFormatRule]:
        return self._by_code.get(code.upper()) if code else None

    def get(self, rule_id: str) -> Optional[CurrencyFormatRule]:
        return self._rules.get(rule_id)

    def default_format(self) -> CurrencyFormatRule:
        rule = self._rules.get(self.default_format_id)
        if rule is None:
            raise FormatConfigurationError(
                f"Формат по умолчанию '{self.default_format_id}' не зарегистрирован",
                component="CurrencyFormatRegistry",
            )
        return rule

    def detect_format_from_text(self, text: str) -> Optional[CurrencyFormatRule]:
        """
        Определяет формат по тексту.

        Сначала символы (самый длинный найденный символ, при равной длине -
        раньше зарегистрированный), затем коды как отдельные слова.
        None, если ничего не найдено: вызывающий берёт default_format().
        """
        if not text:
            return None

        for symbol, matcher in self._symbol_matchers():
            if matcher.search(text):
                logger.debug(f"[FormatRegistry] Формат определён по символу '{symbol}'")
                return self._by_symbol[symbol]

        for code, rule in self._by_code.items():
            if re.search(bounded_token(code), text):
                logger.debug(f"[FormatRegistry] Формат определён по коду '{code}'")
                return rule
        return None

    def resolve_currency_code(self, symbol: Optional[str], code: Optional[str]) -> Optional[str]:
        """
        ISO код по символу и/или коду. Символ имеет приоритет.

        Символ с префиксом страны (US$, EU€) разрешается через коды,
        начинающиеся с префикса.
        """
        if symbol:
            rule = self._by_symbol.get(symbol)
            if rule is not None:
                return rule.primary_code

            prefixed = _COUNTRY_PREFIX.match(symbol)
            if prefixed:
                prefix, base_symbol = prefixed.groups()
                if base_symbol in self._by_symbol:
                    matches = [r for c, r in self._by_code.items() if c.startswith(prefix)]
                    preferred = [r for r in matches if base_symbol in r.symbols]
                    if preferred or matches:
                        return (preferred or matches)[0].primary_code

        if code:
            rule = self.lookup_by_code(code)
            if rule is not None:
                return rule.primary_code
        return None

    def format_for_settings(self, settings) -> CurrencyFormatRule:
        """
        Правило для пользовательских настроек.

        Код и символ ищутся в реестре; незарегистрированная валюта получает
        отдельное незарегистрированное правило. Явные разделители из настроек
        переопределяют разделители правила.
        """
        rule = self.lookup_by_code(settings.currency_code) or self.lookup_by_symbol(settings.currency_symbol)
        if rule is None:
            code = (settings.currency_code or "").upper()
            codes = (code,) if re.fullmatch(r"[A-Z]{3}", code) else ()
            symbols = (settings.currency_symbol,) if settings.currency_symbol else ()
            base = self.default_format()
            rule = CurrencyFormatRule(
                id=f"custom:{settings.currency_symbol}:{code}",
                symbols=symbols,
                codes=codes,
                locale_id=base.locale_id,
                thousands=base.thousands,
                decimal=base.decimal,
            )
            logger.debug(f"[FormatRegistry] Валюта из настроек не зарегистрирована, правило {rule.id}")

        thousands = settings.thousands or rule.thousands
        decimal = settings.decimal or rule.decimal
        return rule.with_delimiters(thousands, decimal)

    def all_symbols(self) -> List[str]:
        return list(self._by_symbol)

    def all_codes(self) -> List[str]:
        return list(self._by_code)

    def rules(self) -> List[CurrencyFormatRule]:
        return list(self._rules.values())

    def _symbol_matchers(self) -> list:
        if self._symbol_scan is None:
            # sorted стабилен: при равной длине сохраняется порядок регистрации
            ordered = sorted(self._by_symbol, key=len, reverse=True)
            self._symbol_scan = [(s, re.compile(bounded_token(s))) for s in ordered]
        return self._symbol_scan

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: str) -> bool:
        return rule_id in self._rules
