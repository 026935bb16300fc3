"""
Unit-тесты для DomStructureAnalyzer.

ЦКП: Порядок кандидатных строк, сборка текста из дочерних элементов, ограничения обхода.
"""

import pytest
from bs4 import BeautifulSoup

from price_engine.dom.structure_analyzer import DomStructureAnalyzer, TextSource


def make_node(html: str):
    """Первый элемент фрагмента HTML."""
    return BeautifulSoup(html, "html.parser").find()


@pytest.fixture
def analyzer():
    return DomStructureAnalyzer()


class TestCandidateTexts:

    def test_split_country_prefix(self, analyzer):
        node = make_node('<span class="price"><span>US$</span><span>34.56</span></span>')

        texts = analyzer.candidate_texts(node)

        assert [t.text for t in texts] == ["US$34.56", "US$ 34.56"]
        assert [t.source for t in texts] == [TextSource.ASSEMBLED, TextSource.ASSEMBLED_SPACED]

    def test_attributes_come_first(self, analyzer):
        node = make_node('<span aria-label="$8.48" data-price="8.48" data-currency="usd"> $8.48 </span>')

        texts = analyzer.candidate_texts(node)

        assert len(texts) == 2
        assert (texts[0].text, texts[0].attribute) == ("$8.48", "aria-label")
        assert texts[0].machine_format is False
        assert (texts[1].text, texts[1].attribute, texts[1].currency_code) == ("8.48", "data-price", "USD")
        assert texts[1].machine_format is True

    def test_text_content_is_last_resort(self, analyzer):
        node = make_node("<p>  Price:\n   $5 </p>")

        texts = analyzer.candidate_texts(node)

        assert texts[-1].source == TextSource.TEXT_CONTENT
        assert texts[-1].text == "Price: $5"

    def test_itemprop_with_sibling_currency(self, analyzer):
        node = make_node(
            '<div><meta itemprop="priceCurrency" content="EUR">'
            '<span itemprop="price" content="12.50">12,50 €</span></div>'
        ).find("span")

        attributes = analyzer.attribute_texts(node)

        assert len(attributes) == 1
        assert attributes[0].attribute == "itemprop"
        assert attributes[0].currency_code == "EUR"

    def test_scripts_are_skipped(self, analyzer):
        node = make_node("<span><script>var x = 1;</script><span>449</span><span>€</span><span>00</span></span>")

        assert analyzer.candidate_texts(node)[0].text == "449€00"

    def test_candidate_count_is_bounded(self):
        node = make_node('<span aria-label="$1" data-price="$2" data-amount="$3"><b>4</b><b>$</b></span>')

        assert len(DomStructureAnalyzer(max_candidates=2).candidate_texts(node)) == 2

    def test_not_a_tag(self, analyzer):
        assert analyzer.candidate_texts("$5") == []

    def test_node_is_not_mutated(self, analyzer):
        node = make_node('<div aria-label="$3"><span>449</span><sup>€00</sup></div>')
        before = str(node)

        analyzer.candidate_texts(node)

        assert str(node) == before


class TestFragments:

    def test_depth_limit(self):
        node = make_node("<div><p><span><b>1</b></span></p></div>")

        assert DomStructureAnalyzer(max_depth=2).fragments(node) is None

    def test_fragment_limit(self):
        node = make_node("<div><i>1</i><i>2</i><i>3</i><i>4</i></div>")

        assert DomStructureAnalyzer(max_fragments=3).fragments(node) is None
        assert DomStructureAnalyzer(max_fragments=3).assembled_texts(node) == []

    def test_single_fragment_is_not_assembled(self, analyzer):
        assert analyzer.assembled_texts(make_node("<span>$5</span>")) == []


class TestTextContent:

    def test_short_text_is_kept(self, analyzer):
        assert analyzer.text_content(make_node("<p>  Price:\n $5 </p>")) == "Price: $5"

    def test_long_text_is_cut_on_word_boundary(self, analyzer):
        node = make_node("<div>" + "word " * 199 + "$12,345</div>")

        text = analyzer.text_content(node)

        assert len(text) <= 1000
        assert text.endswith("word")
        assert "$12" not in text

    def test_long_text_without_spaces_is_dropped(self, analyzer):
        node = make_node("<div>" + "x" * 996 + "$12,345</div>")

        assert analyzer.text_content(node) == ""
