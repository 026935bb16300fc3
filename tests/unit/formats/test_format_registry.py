"""
Unit-тесты для CurrencyFormatRegistry.

ЦКП: Регистрация без дубликатов, поиск по символу/коду, определение формата по тексту.
"""

import pytest

from price_engine.contracts.settings_dto import Settings
from price_engine.domain.exceptions import DuplicateSymbolError, FormatConfigurationError
from price_engine.formats.currency_format import CurrencyFormatRule
from price_engine.formats.format_registry import CurrencyFormatRegistry


@pytest.fixture
def registry():
    return CurrencyFormatRegistry.from_defaults()


def make_rule(rule_id: str, symbols=(), codes=(), **kwargs) -> CurrencyFormatRule:
    """Создаёт правило с минимальным набором полей."""
    return CurrencyFormatRule(id=rule_id, symbols=symbols, codes=codes, **kwargs)


class TestRegisterFormat:
    """Тесты регистрации правил."""

    def test_duplicate_symbol_keeps_first_registration(self):
        """Символ чужого правила: ошибка, реестр не меняется."""
        registry = CurrencyFormatRegistry()
        registry.register_format(make_rule("USD", ("$",), ("USD",)))

        with pytest.raises(DuplicateSymbolError) as exc_info:
            registry.register_format(make_rule("CAD", ("$",), ("CAD",)))

        assert exc_info.value.existing_id == "USD"
        assert exc_info.value.new_id == "CAD"
        assert registry.lookup_by_symbol("$").id == "USD"
        assert registry.lookup_by_code("CAD") is None
        assert "CAD" not in registry

    def test_duplicate_code_raises(self):
        registry = CurrencyFormatRegistry()
        registry.register_format(make_rule("SEK", ("kr",), ("SEK",)))

        with pytest.raises(DuplicateSymbolError):
            registry.register_format(make_rule("SEK2", (), ("SEK",)))

    def test_identical_rule_is_noop(self):
        registry = CurrencyFormatRegistry()
        rule = make_rule("USD", ("$",), ("USD",))
        registry.register_format(rule)
        registry.register_format(rule)

        assert len(registry) == 1

    def test_same_id_with_other_fields_raises(self):
        registry = CurrencyFormatRegistry()
        registry.register_format(make_rule("USD", ("$",), ("USD",)))

        with pytest.raises(FormatConfigurationError):
            registry.register_format(make_rule("USD", ("US$",), ()))

    def test_defaults_are_loaded_in_order(self, registry):
        ids = [rule.id for rule in registry.rules()]

        assert ids[:3] == ["USD", "EUR", "GBP"]
        assert {"JPY", "CNY", "KRW", "CHF", "SEK", "DKK", "NOK", "PLN", "CAD", "AUD", "RUB", "BRL"} <= set(ids)
        assert registry.default_format().id == "USD"

    def test_registries_have_own_pattern_cache(self):
        first = CurrencyFormatRegistry.from_defaults()
        second = CurrencyFormatRegistry.from_defaults()

        assert first.pattern_cache is not second.pattern_cache


class TestLookups:
    """Тесты поиска по символу и коду."""

    def test_lookup_by_symbol(self, registry):
        assert registry.lookup_by_symbol("€").id == "EUR"
        assert registry.lookup_by_symbol("円").id == "JPY"
        assert registry.lookup_by_symbol("¤") is None

    def test_lookup_by_code_is_case_insensitive(self, registry):
        assert registry.lookup_by_code("gbp").id == "GBP"
        assert registry.lookup_by_code("XXX") is None
        assert registry.lookup_by_code("") is None


class TestDetectFormatFromText:
    """Тесты определения формата по тексту."""

    def test_symbol(self, registry):
        assert registry.detect_format_from_text("Preis: 12,99 €").id == "EUR"

    def test_longest_symbol_wins(self, registry):
        """C$ длиннее $: канадский доллар."""
        assert registry.detect_format_from_text("C$12.50").id == "CAD"

    def test_code_when_no_symbol(self, registry):
        assert registry.detect_format_from_text("Total 12.50 GBP").id == "GBP"

    def test_symbol_has_precedence_over_code(self, registry):
        assert registry.detect_format_from_text("USD 12 or 11 €").id == "EUR"

    def test_letter_symbol_inside_word_is_ignored(self, registry):
        """'kr' внутри 'Ukraine' не является кроной."""
        assert registry.detect_format_from_text("Ukraine 12") is None

    def test_nothing_found(self, registry):
        assert registry.detect_format_from_text("no price here") is None
        assert registry.detect_format_from_text("") is None


class TestResolveCurrencyCode:
    """Тесты разрешения ISO кода."""

    def test_country_prefixed_symbols(self, registry):
        assert registry.resolve_currency_code("US$", None) == "USD"
        assert registry.resolve_currency_code("EU€", None) == "EUR"
        assert registry.resolve_currency_code("JP¥", None) == "JPY"

    def test_registered_prefixed_symbol_is_exact(self, registry):
        assert registry.resolve_currency_code("CA$", None) == "CAD"

    def test_symbol_has_precedence(self, registry):
        assert registry.resolve_currency_code("€", "USD") == "EUR"

    def test_code_fallback(self, registry):
        assert registry.resolve_currency_code("", "jpy") == "JPY"

    def test_unresolvable(self, registry):
        assert registry.resolve_currency_code("XX$", None) is None
        assert registry.resolve_currency_code("", "ZZZ") is None


class TestFormatForSettings:
    """Тесты правила для пользовательских настроек."""

    def test_default_settings(self, registry):
        assert registry.format_for_settings(Settings()).id == "USD"

    def test_delimiter_override_gets_derived_id(self, registry):
        rule = registry.format_for_settings(Settings(thousands="spacesAndDots", decimal="comma"))

        assert rule.id == "USD:spacesAndDots:comma"
        assert rule.symbols == ("$",)
        assert rule.decimal == "comma"

    def test_missing_delimiters_keep_rule_tokens(self, registry):
        settings = Settings(currency_symbol="€", currency_code="EUR", thousands=None, decimal=None)

        assert registry.format_for_settings(settings) == registry.lookup_by_code("EUR")

    def test_unregistered_currency(self, registry):
        rule = registry.format_for_settings(Settings(currency_symbol="฿", currency_code="THB"))

        assert rule.id == "custom:฿:THB"
        assert rule.codes == ("THB",)
        assert "custom:฿:THB" not in registry
