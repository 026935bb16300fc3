"""
Gearbest: валюта и сумма в соседних span.

<span class="currency">US$</span><span class="value">12.99</span>
<span class="woocommerce-Price-amount"><bdi><span>$</span>12.99</bdi></span>
"""

from typing import Optional

from bs4.element import Tag

from ..config.settings import SITE_HANDLER_MIN_CONFIDENCE
from ..domain.models import ExtractionCandidate
from .base import SiteHandler, collapse

CURRENCY_CLASSES = ["currency", "woocommerce-Price-currencySymbol"]
VALUE_CLASSES = ["value"]
WOOCOMMERCE_CLASSES = ["woocommerce-Price-amount"]


class GearbestHandler(SiteHandler):
    """Gearbest (.com, .ma)."""

    domains = ("gearbest.com", "gearbest.ma")

    def extract(self, node: Tag) -> Optional[ExtractionCandidate]:
        value_tag = self.find_first(node, VALUE_CLASSES)
        currency_tag = self.find_first(node, CURRENCY_CLASSES)
        if value_tag is not None and currency_tag is not None:
            text = collapse(currency_tag.get_text()) + collapse(value_tag.get_text())
            candidate = self.match_text(text, node, SITE_HANDLER_MIN_CONFIDENCE)
            if candidate is not None:
                return candidate

        amount = self.find_first(node, WOOCOMMERCE_CLASSES)
        if amount is None:
            return None
        bdi = amount.find("bdi") or amount
        return self.match_text(collapse(bdi.get_text()), node, SITE_HANDLER_MIN_CONFIDENCE)
