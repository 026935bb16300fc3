"""
DomStructureAnalyzer - чтение узла DOM (BeautifulSoup) в кандидатные строки.

Порядок: от дешёвого и специфичного к общему
1. Атрибуты: aria-label, data-price и похожие, itemprop="price"
2. Текст дочерних элементов, склеенный без пробелов ("449" "€" "00" -> "449€00"),
   затем через одиночный пробел ("US$" "34.56" -> "US$ 34.56")
3. Весь текст узла со схлопнутыми пробелами

Узел только читается. Глубина обхода, число фрагментов и длина
строк ограничены.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from bs4.element import NavigableString, PreformattedString, Tag
from loguru import logger

from ..config.settings import (
    MAX_ASSEMBLY_DEPTH,
    MAX_CANDIDATE_TEXTS,
    MAX_FRAGMENTS,
    MAX_TEXT_CONTENT_LENGTH,
    MAX_TEXT_LENGTH,
)
from .attributes import (
    CURRENCY_DATA_ATTRIBUTES,
    ITEMPROP_CURRENCY,
    ITEMPROP_PRICE,
    LABEL_ATTRIBUTES,
    PRICE_DATA_ATTRIBUTES,
    SKIPPED_TAGS,
)

# Машинное значение атрибута: "8.48", "1299", "12.5"
MACHINE_NUMBER = re.compile(r"^\d+(?:\.\d+)?$")


class TextSource(str, Enum):
    ATTRIBUTE = "attribute"
    ASSEMBLED = "assembled"
    ASSEMBLED_SPACED = "assembled_spaced"
    TEXT_CONTENT = "text_content"


@dataclass(frozen=True)
class CandidateText:
    """Кандидатная строка и её происхождение."""

    text: str
    source: TextSource
    attribute: Optional[str] = None
    currency_code: Optional[str] = None
    machine_format: bool = False


class DomStructureAnalyzer:
    """
    Строит упорядоченный список кандидатных строк для узла.

    Пример:
        soup = BeautifulSoup('<span><span>US$</span><span>34.56</span></span>', "html.parser")
        analyzer.candidate_texts(soup.span)
        # [CandidateText("US$34.56", ASSEMBLED), CandidateText("US$ 34.56", ASSEMBLED_SPACED)]
    """

    def __init__(
        self,
        max_candidates: int = MAX_CANDIDATE_TEXTS,
        max_depth: int = MAX_ASSEMBLY_DEPTH,
        max_fragments: int = MAX_FRAGMENTS,
        max_length: int = MAX_TEXT_LENGTH,
    ):
        self.max_candidates = max_candidates
        self.max_depth = max_depth
        self.max_fragments = max_fragments
        self.max_length = max_length

    def candidate_texts(self, node: Tag) -> List[CandidateText]:
        if not isinstance(node, Tag):
            return []

        texts = self.attribute_texts(node) + self.assembled_texts(node)
        content = self.text_content(node)
        if content:
            texts.append(CandidateText(content, TextSource.TEXT_CONTENT))

        unique: List[CandidateText] = []
        seen = set()
        for candidate in texts:
            key = (candidate.text, candidate.currency_code)
            if key in seen:
                continue
            seen.add(key)
            unique.append(candidate)
            if len(unique) >= self.max_candidates:
                break
        return unique

    def attribute_texts(self, node: Tag) -> List[CandidateText]:
        """Цена из атрибутов узла."""
        texts = []
        currency = None
        for attribute in LABEL_ATTRIBUTES + PRICE_DATA_ATTRIBUTES:
            value = self._attribute(node, attribute)
            if not value:
                continue
            machine = bool(MACHINE_NUMBER.match(value))
            if machine and currency is None:
                currency = self.currency_hint(node)
            texts.append(
                CandidateText(
                    value,
                    TextSource.ATTRIBUTE,
                    attribute=attribute,
                    currency_code=currency if machine else None,
                    machine_format=machine,
                )
            )

        if node.get("itemprop") == ITEMPROP_PRICE:
            value = self._attribute(node, "content")
            if value:
                machine = bool(MACHINE_NUMBER.match(value))
                texts.append(
                    CandidateText(
                        value,
                        TextSource.ATTRIBUTE,
                        attribute="itemprop",
                        currency_code=self.currency_hint(node) if machine else None,
                        machine_format=machine,
                    )
                )
        return texts

    def currency_hint(self, node: Tag) -> Optional[str]:
        """ISO код из data-currency или соседнего itemprop="priceCurrency"."""
        for attribute in CURRENCY_DATA_ATTRIBUTES:
            value = self._attribute(node, attribute)
            if value:
                return value.upper()

        scopes = [node] + ([node.parent] if isinstance(node.parent, Tag) else [])
        for scope in scopes:
            meta = scope.find(attrs={"itemprop": ITEMPROP_CURRENCY})
            if meta is not None:
                value = (meta.get("content") or meta.get_text()).strip()
                if value:
                    return value.upper()
        return None

    def assembled_texts(self, node: Tag) -> List[CandidateText]:
        """Склейка текстов дочерних элементов: без пробелов и через пробел."""
        fragments = self.fragments(node)
        if not fragments or len(fragments) < 2:
            return []

        texts = []
        for separator, source in (("", TextSource.ASSEMBLED), (" ", TextSource.ASSEMBLED_SPACED)):
            joined = separator.join(fragments)
            if len(joined) <= self.max_length:
                texts.append(CandidateText(joined, source))
        return texts

    def fragments(self, node: Tag) -> Optional[List[str]]:
        """
        Непустые текстовые фрагменты в порядке документа.

        None, если узел глубже max_depth или фрагментов больше max_fragments:
        такой узел - контейнер, а не разметка одной цены.
        """
        fragments: List[str] = []
        if not self._collect(node, 1, fragments):
            logger.debug(f"[DomStructure] Узел <{node.name}> превышает ограничения сборки")
            return None
        return fragments

    def _collect(self, node: Tag, depth: int, fragments: List[str]) -> bool:
        for child in node.children:
            if isinstance(child, PreformattedString):
                continue
            if isinstance(child, NavigableString):
                text = " ".join(child.split())
                if text:
                    fragments.append(text)
                    if len(fragments) > self.max_fragments:
                        return False
            elif isinstance(child, Tag):
                if child.name in SKIPPED_TAGS:
                    continue
                if depth >= self.max_depth:
                    return False
                if not self._collect(child, depth + 1, fragments):
                    return False
        return True

    def text_content(self, node: Tag) -> str:
        """
        Текст узла со схлопнутыми пробелами, обрезанный до лимита.

        Обрезка идёт по границе слова: недорезанное число ("$12," из
        "$12,345") отбрасывается целиком. Текст без пробелов длиннее
        лимита считается контейнером, возвращается "".
        """
        if not isinstance(node, Tag):
            return ""
        text = " ".join(node.get_text().split())
        if len(text) <= MAX_TEXT_CONTENT_LENGTH:
            return text
        if text[MAX_TEXT_CONTENT_LENGTH] == " ":
            return text[:MAX_TEXT_CONTENT_LENGTH]
        cut = text[:MAX_TEXT_CONTENT_LENGTH].rfind(" ")
        return text[:cut] if cut > 0 else ""

    @staticmethod
    def _attribute(node: Tag, name: str) -> str:
        value = node.get(name)
        if isinstance(value, list):
            value = " ".join(value)
        return (value or "").strip()
