"""
Базовый обработчик сайта.

Обработчики нужны только для разметки, которую общие проходы не
разбирают. Корректность на обычной разметке от них не зависит.
"""

import re
from typing import Iterable, List, Optional, Sequence

from bs4.element import Tag

from ..domain.interfaces import ISiteHandler
from ..domain.models import ExtractionCandidate, ExtractionStrategy
from ..patterns.text_matcher import DIRECT_CATEGORIES

_MACHINE_PRICE = re.compile(r"^(?P<integer>\d+)(?:\.(?P<fraction>\d{1,2}))?$")


def normalize_hostname(hostname: Optional[str]) -> str:
    """WWW.Amazon.de -> amazon.de"""
    host = (hostname or "").strip().lower().rstrip(".")
    if host.startswith("www."):
        host = host[4:]
    return host


class SiteHandler(ISiteHandler):
    """
    Обработчик для списка доменов.

    Домен обслуживается при точном совпадении или как поддомен:
    "amazon.de" обслуживает "smile.amazon.de".
    """

    domains: Sequence[str] = ()

    def __init__(self, matcher):
        self.matcher = matcher

    @property
    def name(self) -> str:
        return type(self).__name__

    def domain_predicate(self, hostname: str) -> bool:
        host = normalize_hostname(hostname)
        return any(host == domain or host.endswith("." + domain) for domain in self.domains)

    def find_first(self, node: Tag, classes: Iterable[str]) -> Optional[Tag]:
        """Сам узел или первый потомок с одним из классов."""
        classes = list(classes)
        if self.has_class(node, classes):
            return node
        return node.find(lambda tag: self.has_class(tag, classes))

    @staticmethod
    def has_class(tag: Tag, classes: List[str]) -> bool:
        return isinstance(tag, Tag) and any(c in (tag.get("class") or []) for c in classes)

    def match_text(self, text: str, node: Tag, confidence: float) -> Optional[ExtractionCandidate]:
        """Первая цена в строке общими паттернами, оформленная как кандидат обработчика."""
        matches = self.matcher.find(text, DIRECT_CATEGORIES)
        if not matches:
            return None
        candidate = matches[0].to_candidate(ExtractionStrategy.SITE_HANDLER, confidence, source_ref=node)
        candidate.metadata["handler"] = self.name
        return candidate

    def machine_candidate(
        self, value: str, currency_code: Optional[str], node: Tag, confidence: float
    ) -> Optional[ExtractionCandidate]:
        """Кандидат из машинного значения "12.99" с известным кодом валюты."""
        match = _MACHINE_PRICE.match(value or "")
        if match is None or not currency_code:
            return None
        return ExtractionCandidate(
            raw_text=value,
            matched_pattern=None,
            currency_symbol="",
            currency_code=currency_code.upper(),
            integer_part=match.group("integer"),
            fraction_part=match.group("fraction") or "",
            strategy=ExtractionStrategy.SITE_HANDLER,
            confidence=confidence,
            source_ref=node,
            decimal="dot",
            metadata={"handler": self.name},
        )


def collapse(text: str) -> str:
    return " ".join((text or "").split())
