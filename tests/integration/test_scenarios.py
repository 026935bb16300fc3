"""
Интеграционные тесты: полный конвейер на типичной разметке магазинов.
"""

import pytest
from bs4 import BeautifulSoup

from price_engine import PriceEngine, Settings, extract_price
from price_engine.domain.models import ExtractionStrategy, PatternCategory


def make_node(html: str):
    return BeautifulSoup(html, "html.parser").find()


@pytest.fixture(scope="module")
def engine():
    return PriceEngine.create()


def amount(result):
    return result.normalized.amount_cents, result.normalized.currency_code


class TestScenarios:

    def test_country_prefixed_siblings(self, engine):
        result = engine.extract_price(make_node("<div><span>US$</span><span>34.56</span></div>"))

        assert amount(result) == (3456, "USD")
        assert result.chosen.strategy == ExtractionStrategy.DOM_STRUCTURE
        assert result.chosen.matched_pattern.category == PatternCategory.COUNTRY_PREFIXED

    def test_symbol_between_siblings(self, engine):
        result = engine.extract_price(make_node("<div><span>449</span><span>€</span><span>00</span></div>"))

        assert amount(result) == (44900, "EUR")
        assert result.chosen.matched_pattern.category == PatternCategory.SYMBOL_BETWEEN

    def test_aria_label_short_circuits(self, engine):
        result = engine.extract_price(make_node('<span aria-label="$8.48"> $8.48 </span>'))

        assert amount(result) == (848, "USD")
        assert result.chosen.confidence == 0.9
        assert result.passes_run == ["attribute"]

    def test_plain_text_with_commas(self, engine):
        result = engine.extract_price("$2,500,000", Settings(thousands="commas", decimal="dot"))

        assert amount(result) == (250000000, "USD")
        assert result.chosen.matched_pattern.category == PatternCategory.STANDARD

    def test_contextual_only(self, engine):
        result = engine.extract_price("Under $20")

        assert amount(result) == (2000, "USD")
        assert result.chosen.strategy == ExtractionStrategy.CONTEXTUAL
        assert result.chosen.confidence == 0.6

    def test_no_price(self, engine):
        result = engine.extract_price("word$")

        assert result.chosen is None
        assert result.normalized is None
        assert not result.found


class TestSettingsAndSites:

    def test_camel_case_settings(self, engine):
        settings = Settings(
            **{"currencySymbol": "€", "currencyCode": "EUR", "thousands": "spacesAndDots", "decimal": "comma"}
        )

        result = engine.extract_price("Preis: 1.234,56 €", settings)

        assert amount(result) == (123456, "EUR")

    def test_site_handler_for_hostname(self, engine):
        node = make_node('<div class="fpPrice">449€ 00</div>')

        result = engine.extract_price(node, hostname="www.cdiscount.com")

        assert amount(result) == (44900, "EUR")
        assert result.passes_run == ["site_handler"]
        assert result.chosen.strategy == ExtractionStrategy.SITE_HANDLER

    def test_machine_attribute_with_itemprop_currency(self, engine):
        node = make_node(
            '<div><meta itemprop="priceCurrency" content="GBP">'
            '<span itemprop="price" content="12.50">£12.50</span></div>'
        )

        result = engine.extract_price(node.find("span"))

        assert amount(result) == (1250, "GBP")
        assert result.chosen.strategy == ExtractionStrategy.ATTRIBUTE

    def test_module_level_function(self):
        assert amount(extract_price("Only $19.99 today")) == (1999, "USD")


class TestProperties:

    def test_idempotence(self, engine):
        node = make_node("<div><span>449</span><span>€</span><span>00</span></div>")

        assert engine.extract_price(node).to_dict() == engine.extract_price(node).to_dict()

    def test_maximum_confidence_is_chosen(self, engine):
        result = engine.extract_price("$ 15 or 20 USD")

        assert amount(result) == (2000, "USD")
        assert [c.confidence for c in result.candidates] == [0.9, 0.8]

    def test_range_keeps_lower_bound(self, engine):
        result = engine.extract_price("$10 - $20")

        assert amount(result) == (1000, "USD")
        assert result.chosen.metadata["upper_integer"] == "20"
        assert result.chosen.confidence == 0.65


class TestLongText:

    def test_truncated_number_is_not_guessed(self, engine):
        result = engine.extract_price(make_node("<div>" + "x" * 996 + "$12,345</div>"))

        assert result.chosen is None


class TestAttributePhrases:

    def test_contextual_phrase_in_attribute(self, engine):
        result = engine.extract_price(make_node('<span aria-label="From $8.48"></span>'))

        assert amount(result) == (848, "USD")
        assert result.chosen.strategy == ExtractionStrategy.ATTRIBUTE
        assert result.chosen.confidence == 0.7
        assert result.chosen.metadata["attribute"] == "aria-label"

    def test_range_in_attribute_keeps_lower_bound(self, engine):
        result = engine.extract_price(make_node('<span aria-label="$10 - $20"></span>'))

        assert amount(result) == (1000, "USD")
        assert result.chosen.metadata["upper_integer"] == "20"


class TestSettingsCurrency:

    def test_settings_currency_preferred_on_equal_confidence(self, engine):
        settings = Settings(currency_symbol="€", currency_code="EUR", thousands="spacesAndDots", decimal="comma")

        result = engine.extract_price("$12 or 10€", settings)

        assert amount(result) == (1000, "EUR")
        assert [c.raw_text for c in result.candidates] == ["10€", "$12"]
