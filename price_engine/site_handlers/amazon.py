"""
Amazon: цена разбита на символ, целую и дробную части.

<span class="a-price">
  <span class="a-offscreen">$1,234.56</span>
  <span class="a-price-symbol">$</span>
  <span class="a-price-whole">1,234<span class="a-price-decimal">.</span></span>
  <span class="a-price-fraction">56</span>
</span>
"""

import re
from typing import Optional

from bs4.element import Tag

from ..config.settings import SITE_HANDLER_MIN_CONFIDENCE
from ..domain.models import ExtractionCandidate, ExtractionStrategy
from .base import SiteHandler, collapse

OFFSCREEN_CLASSES = ["a-offscreen"]
SYMBOL_CLASSES = ["a-price-symbol", "sx-price-currency"]
WHOLE_CLASSES = ["a-price-whole", "sx-price-whole"]
FRACTION_CLASSES = ["a-price-fraction", "sx-price-fractional"]

_WHOLE = re.compile(r"^\d+(?:[.,\s]\d{3})*$")


class AmazonHandler(SiteHandler):
    """Amazon (.com, .co.uk, .de, .fr)."""

    domains = ("amazon.com", "amazon.co.uk", "amazon.de", "amazon.fr")

    def extract(self, node: Tag) -> Optional[ExtractionCandidate]:
        offscreen = self.find_first(node, OFFSCREEN_CLASSES)
        if offscreen is not None:
            candidate = self.match_text(collapse(offscreen.get_text()), node, SITE_HANDLER_MIN_CONFIDENCE)
            if candidate is not None:
                return candidate
        return self._from_components(node)

    def _from_components(self, node: Tag) -> Optional[ExtractionCandidate]:
        whole_tag = self.find_first(node, WHOLE_CLASSES)
        if whole_tag is None:
            return None

        # "1.234," на amazon.de: десятичный знак живёт внутри a-price-whole
        whole = collapse(whole_tag.get_text()).rstrip(".,").strip()
        if not _WHOLE.match(whole):
            return None

        symbol_tag = self.find_first(node, SYMBOL_CLASSES)
        fraction_tag = self.find_first(node, FRACTION_CLASSES)
        symbol = collapse(symbol_tag.get_text()) if symbol_tag is not None else ""
        fraction = re.sub(r"\D", "", fraction_tag.get_text()) if fraction_tag is not None else ""

        registry = self.matcher.registry
        rule = registry.lookup_by_symbol(symbol) or registry.default_format()
        return ExtractionCandidate(
            raw_text=f"{symbol}{whole}{'.' + fraction if fraction else ''}",
            matched_pattern=None,
            currency_symbol=symbol,
            currency_code=rule.primary_code,
            integer_part=whole,
            fraction_part=fraction[:2],
            strategy=ExtractionStrategy.SITE_HANDLER,
            confidence=SITE_HANDLER_MIN_CONFIDENCE,
            source_ref=node,
            thousands=rule.thousands,
            decimal=rule.decimal,
            metadata={"handler": self.name},
        )
