"""
Unit-тесты для префильтра might_contain_price.
"""

import pytest

from price_engine.formats.format_registry import CurrencyFormatRegistry
from price_engine.patterns.prefilter import might_contain_price


@pytest.fixture
def registry():
    return CurrencyFormatRegistry.from_defaults()


@pytest.mark.parametrize("text", ["$5", "12,99", "1 234", "Total 5 GBP"])
def test_price_like_text(registry, text):
    assert might_contain_price(text, registry)


@pytest.mark.parametrize("text", ["", "word$", "Only 5 left", "no digits at all"])
def test_rejected_text(registry, text):
    assert not might_contain_price(text, registry)
