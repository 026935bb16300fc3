"""
Cdiscount: евро между целой и дробной частью.

<span class="price">449<sup>€00</sup></span>  ->  "449€00"
<p class="fpPrice">449€ 00</p>
<p class="fpPrice">1 449€00</p>  ->  1449.00
"""

import re
from typing import Optional

from bs4.element import Tag

from ..config.settings import SITE_HANDLER_MIN_CONFIDENCE
from ..domain.models import ExtractionCandidate, ExtractionStrategy
from .base import SiteHandler, collapse

PRICE_CLASSES = ["price", "fpPrice", "c-price"]

_SPLIT_EURO = re.compile(
    r"(?<![\d.,])(?P<integer>\d{1,3}(?:[\s.]\d{3})+|\d+)\s*€\s*(?P<fraction>\d{2})?(?!\d)"
)


class CdiscountHandler(SiteHandler):
    """Cdiscount (.com, .fr)."""

    domains = ("cdiscount.com", "cdiscount.fr")

    def extract(self, node: Tag) -> Optional[ExtractionCandidate]:
        target = self.find_first(node, PRICE_CLASSES)
        if target is None:
            return None

        text = collapse(target.get_text())
        match = _SPLIT_EURO.search(text)
        if match is None:
            return self.match_text(text, node, SITE_HANDLER_MIN_CONFIDENCE)

        rule = self.matcher.registry.lookup_by_symbol("€")
        return ExtractionCandidate(
            raw_text=match.group(0),
            matched_pattern=None,
            currency_symbol="€",
            currency_code=rule.primary_code if rule else "EUR",
            integer_part=match.group("integer"),
            fraction_part=match.group("fraction") or "",
            strategy=ExtractionStrategy.SITE_HANDLER,
            confidence=SITE_HANDLER_MIN_CONFIDENCE,
            source_ref=node,
            thousands="spacesAndDots",
            metadata={"handler": self.name},
        )
