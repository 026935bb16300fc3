"""
eBay: цена в одном из классов карточки или в data-price.
"""

from typing import Optional

from bs4.element import Tag

from ..config.settings import SITE_HANDLER_MIN_CONFIDENCE
from ..domain.models import ExtractionCandidate
from .base import SiteHandler, collapse

PRICE_CLASSES = [
    "s-item__price",
    "x-price-primary",
    "x-bin-price",
    "x-buybox__price-element",
    "display-price",
    "ux-price-display",
]
CONTAINER_CLASSES = ["x-price", "x-buybox", "vim-timer", "vi-price"]
PRICE_ATTRIBUTES = ["data-price", "data-item-price"]


class EbayHandler(SiteHandler):
    """eBay (.com, .co.uk, .de, .fr)."""

    domains = ("ebay.com", "ebay.co.uk", "ebay.de", "ebay.fr")

    def extract(self, node: Tag) -> Optional[ExtractionCandidate]:
        candidate = self._from_attributes(node)
        if candidate is not None:
            return candidate

        target = self.find_first(node, PRICE_CLASSES) or self.find_first(node, CONTAINER_CLASSES)
        if target is None:
            return None
        # "US $34.56" разбит по ux-textspans: склеиваем через пробел
        return self.match_text(collapse(target.get_text(" ")), node, SITE_HANDLER_MIN_CONFIDENCE)

    def _from_attributes(self, node: Tag) -> Optional[ExtractionCandidate]:
        for attribute in PRICE_ATTRIBUTES:
            holder = node if node.has_attr(attribute) else node.find(attrs={attribute: True})
            if holder is None:
                continue
            value = collapse(holder.get(attribute))
            candidate = self.match_text(value, node, SITE_HANDLER_MIN_CONFIDENCE)
            if candidate is None:
                candidate = self.machine_candidate(
                    value, holder.get("data-currency"), node, SITE_HANDLER_MIN_CONFIDENCE
                )
            if candidate is not None:
                return candidate
        return None
