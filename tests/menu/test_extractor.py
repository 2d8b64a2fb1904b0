"""Tests for XPath extraction over HTML documents."""

from __future__ import annotations

import pytest

from menubot.errors import FetchFailure, SelectorFailure
from menubot.menu.extractor import LxmlSelectorEngine, MenuExtractor
from tests.helpers import read_page


@pytest.fixture()
def extractor() -> MenuExtractor:
    return MenuExtractor(LxmlSelectorEngine())


def test_extract_trims_matches_in_document_order(extractor):
    document = extractor.parse(read_page("canteen.html"))

    assert extractor.extract(document, "//item") == ["Soup", "Salad"]


def test_extract_concatenates_descendant_text(extractor):
    document = extractor.parse(read_page("bistro.html"))

    assert extractor.extract(document, "//div[@id='mon']/p") == ["Goulash with dumplings"]
    assert extractor.extract(document, "//div[@id='tue']/p") == ["Fish and chips", "Veggie burger"]


def test_extract_supports_attribute_and_text_results(extractor):
    document = extractor.parse(
        b"<html><body><a href=' /today '>Today</a><span> Pho </span></body></html>"
    )

    assert extractor.extract(document, "//a/@href") == ["/today"]
    assert extractor.extract(document, "//span/text()") == ["Pho"]


def test_extract_without_matches_returns_empty_list(extractor):
    document = extractor.parse(read_page("canteen.html"))

    assert extractor.extract(document, "//table//td") == []


def test_extract_keeps_duplicate_lines(extractor):
    document = extractor.parse(b"<html><body><p>Soup</p><p>Soup</p></body></html>")

    assert extractor.extract(document, "//p") == ["Soup", "Soup"]


def test_invalid_selector_raises_selector_failure(extractor):
    document = extractor.parse(read_page("canteen.html"))

    with pytest.raises(SelectorFailure) as excinfo:
        extractor.extract(document, "//item[")
    assert excinfo.value.selector == "//item["


def test_scalar_expression_is_rejected(extractor):
    document = extractor.parse(read_page("canteen.html"))

    with pytest.raises(SelectorFailure):
        extractor.extract(document, "count(//item)")


def test_empty_selector_is_a_caller_error(extractor):
    document = extractor.parse(read_page("canteen.html"))

    with pytest.raises(ValueError):
        extractor.extract(document, "")


def test_empty_document_cannot_be_parsed(extractor):
    with pytest.raises(FetchFailure):
        extractor.parse(b"")


def test_extractor_delegates_to_custom_engine():
    class RecordingEngine:
        def __init__(self) -> None:
            self.queries: list[str] = []

        def parse(self, content: bytes) -> str:
            return content.decode()

        def query(self, document: str, expression: str) -> list[str]:
            self.queries.append(expression)
            return ["  first ", "second\n"]

    engine = RecordingEngine()
    extractor = MenuExtractor(engine)

    document = extractor.parse(b"raw")
    assert extractor.extract(document, "$.items") == ["first", "second"]
    assert engine.queries == ["$.items"]


def test_comment_matches_use_their_text(extractor):
    document = extractor.parse(b"<html><body><!-- Soup of the day --><p>Salad</p></body></html>")

    assert extractor.extract(document, "//comment()") == ["Soup of the day"]


def test_selector_with_nul_byte_raises_selector_failure(extractor):
    document = extractor.parse(read_page("canteen.html"))

    with pytest.raises(SelectorFailure):
        extractor.extract(document, "//item\x00")
