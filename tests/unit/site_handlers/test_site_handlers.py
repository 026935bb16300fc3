"""
Unit-тесты для обработчиков сайтов и SiteHandlerRegistry.
"""

from unittest.mock import MagicMock

import pytest
from bs4 import BeautifulSoup

from price_engine.domain.exceptions import DuplicateSymbolError, SiteHandlerError, UnrecognizedDelimiterError
from price_engine.domain.models import ExtractionCandidate, ExtractionStrategy
from price_engine.formats.format_registry import CurrencyFormatRegistry
from price_engine.normalization.price_normalizer import PriceNormalizer
from price_engine.patterns.pattern_compiler import PatternCompiler
from price_engine.patterns.text_matcher import PriceTextMatcher
from price_engine.site_handlers.amazon import AmazonHandler
from price_engine.site_handlers.base import SiteHandler, normalize_hostname
from price_engine.site_handlers.cdiscount import CdiscountHandler
from price_engine.site_handlers.ebay import EbayHandler
from price_engine.site_handlers.gearbest import GearbestHandler
from price_engine.site_handlers.registry import SiteHandlerRegistry


def make_node(html: str):
    return BeautifulSoup(html, "html.parser").find()


@pytest.fixture
def matcher():
    registry = CurrencyFormatRegistry.from_defaults()
    return PriceTextMatcher(registry, PatternCompiler(registry))


@pytest.fixture
def normalize(matcher):
    normalizer = PriceNormalizer(matcher.registry)

    def _normalize(candidate):
        price = normalizer.normalize(candidate)
        return price.amount_cents, price.currency_code

    return _normalize


class FixedHandler(SiteHandler):
    """Обработчик с заранее заданным результатом."""

    domains = ("example.com",)

    def __init__(self, result=None, error=None):
        super().__init__(matcher=None)
        self.result = result
        self.error = error
        self.calls = 0

    def extract(self, node):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


def make_candidate(confidence: float = 0.5) -> ExtractionCandidate:
    return ExtractionCandidate(
        raw_text="$5",
        matched_pattern=None,
        currency_symbol="$",
        currency_code="USD",
        integer_part="5",
        fraction_part="",
        strategy=ExtractionStrategy.PATTERN,
        confidence=confidence,
    )


class TestHostnames:

    def test_normalize_hostname(self):
        assert normalize_hostname("WWW.Amazon.DE") == "amazon.de"
        assert normalize_hostname(None) == ""

    def test_domain_predicate(self, matcher):
        handler = AmazonHandler(matcher)

        assert handler.domain_predicate("amazon.com")
        assert handler.domain_predicate("smile.amazon.com")
        assert not handler.domain_predicate("notamazon.com")
        assert not handler.domain_predicate("amazon.com.example.org")


class TestSiteHandlerRegistry:

    def test_first_result_wins_and_confidence_is_raised(self):
        empty, found, unused = FixedHandler(), FixedHandler(make_candidate(0.5)), FixedHandler(make_candidate())
        registry = SiteHandlerRegistry()
        for handler in (empty, found, unused):
            registry.register(handler)

        candidate = registry.extract("www.example.com", make_node("<span>$5</span>"))

        assert candidate.confidence == 0.95
        assert candidate.strategy == ExtractionStrategy.SITE_HANDLER
        assert (empty.calls, found.calls, unused.calls) == (1, 1, 0)

    def test_handler_error_is_no_result(self):
        registry = SiteHandlerRegistry()
        registry.register(FixedHandler(error=SiteHandlerError("broken markup")))
        registry.register(FixedHandler(make_candidate(0.99)))

        assert registry.extract("example.com", make_node("<span/>")).confidence == 0.99

    @pytest.mark.parametrize(
        "error", [UnrecognizedDelimiterError("apostrophes", "thousands"), DuplicateSymbolError("$", "USD", "CAD")]
    )
    def test_configuration_error_propagates(self, error):
        registry = SiteHandlerRegistry()
        registry.register(FixedHandler(error=error))
        registry.register(FixedHandler(make_candidate(0.99)))

        with pytest.raises(type(error)):
            registry.extract("shop.example.com", make_node("<span/>"))

    def test_unknown_host(self):
        registry = SiteHandlerRegistry()
        handler = MagicMock()
        handler.domain_predicate.return_value = False
        registry.register(handler)

        assert registry.handlers_for("other.org") == []
        assert registry.extract("other.org", make_node("<span/>")) is None
        assert registry.handlers_for(None) == []


class TestAmazonHandler:

    def test_split_components(self, matcher, normalize):
        node = make_node(
            '<span class="a-price"><span class="a-price-symbol">$</span>'
            '<span class="a-price-whole">1,234<span class="a-price-decimal">.</span></span>'
            '<span class="a-price-fraction">56</span></span>'
        )

        candidate = AmazonHandler(matcher).extract(node)

        assert candidate.metadata["handler"] == "AmazonHandler"
        assert normalize(candidate) == (123456, "USD")

    def test_german_components(self, matcher, normalize):
        node = make_node(
            '<span class="a-price"><span class="a-price-whole">1.234,</span>'
            '<span class="a-price-fraction">56</span><span class="a-price-symbol">€</span></span>'
        )

        assert normalize(AmazonHandler(matcher).extract(node)) == (123456, "EUR")

    def test_offscreen_text(self, matcher, normalize):
        node = make_node('<span class="a-price"><span class="a-offscreen">€12,99</span></span>')

        assert normalize(AmazonHandler(matcher).extract(node)) == (1299, "EUR")

    def test_no_price_markup(self, matcher):
        assert AmazonHandler(matcher).extract(make_node("<div>Free shipping</div>")) is None


class TestEbayHandler:

    def test_price_class(self, matcher, normalize):
        node = make_node('<div class="x-price-primary"><span class="ux-textspans">US $34.56</span></div>')

        assert normalize(EbayHandler(matcher).extract(node)) == (3456, "USD")

    def test_machine_data_price(self, matcher, normalize):
        node = make_node('<div data-price="19.99" data-currency="GBP"></div>')

        assert normalize(EbayHandler(matcher).extract(node)) == (1999, "GBP")


class TestCdiscountHandler:

    def test_split_euro(self, matcher, normalize):
        assert normalize(CdiscountHandler(matcher).extract(make_node('<div class="fpPrice">449€ 00</div>'))) == (
            44900,
            "EUR",
        )

    def test_superscript_euro(self, matcher, normalize):
        node = make_node('<span class="price">449<sup>€00</sup></span>')

        assert normalize(CdiscountHandler(matcher).extract(node)) == (44900, "EUR")

    @pytest.mark.parametrize("text", ["1 449€00", "1.449€ 00", "1\u00a0449 € 00"])
    def test_grouped_thousands(self, matcher, normalize, text):
        node = make_node(f'<div class="fpPrice">{text}</div>')

        assert normalize(CdiscountHandler(matcher).extract(node)) == (144900, "EUR")


class TestGearbestHandler:

    def test_currency_and_value_spans(self, matcher, normalize):
        node = make_node('<div><span class="currency">US$</span><span class="value">12.99</span></div>')

        assert normalize(GearbestHandler(matcher).extract(node)) == (1299, "USD")

    def test_woocommerce_amount(self, matcher, normalize):
        node = make_node(
            '<span class="woocommerce-Price-amount amount"><bdi>'
            '<span class="woocommerce-Price-currencySymbol">$</span>7.50</bdi></span>'
        )

        assert normalize(GearbestHandler(matcher).extract(node)) == (750, "USD")
