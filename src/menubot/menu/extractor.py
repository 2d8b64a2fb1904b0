"""Selector evaluation over parsed HTML documents."""

from __future__ import annotations

from typing import Any, Protocol

from lxml import etree, html

from menubot.errors import FetchFailure, SelectorFailure


class SelectorEngine(Protocol):
    """Parse markup and evaluate path selectors against it."""

    def parse(self, content: bytes) -> Any: ...

    def query(self, document: Any, expression: str) -> list[str]: ...


class LxmlSelectorEngine:
    """XPath 1.0 over ``lxml.html`` trees."""

    def parse(self, content: bytes) -> Any:
        try:
            return html.fromstring(content)
        except (etree.ParserError, ValueError) as exc:
            raise FetchFailure("<document>", f"unparseable HTML: {exc}") from exc

    def query(self, document: Any, expression: str) -> list[str]:
        try:
            compiled = etree.XPath(expression)
            result = compiled(document)
        except (etree.XPathError, ValueError) as exc:
            # lxml raises ValueError for expressions with NUL or control characters
            raise SelectorFailure(expression, str(exc)) from exc

        if not isinstance(result, list):
            raise SelectorFailure(expression, "expression does not select nodes")
        return [_node_text(node, expression) for node in result]


_TEXT_ONLY_NODES = (etree._Comment, etree._ProcessingInstruction, etree._Entity)


def _node_text(node: Any, expression: str) -> str:
    # attribute and text() results are already strings
    if isinstance(node, str):
        return str(node)
    if isinstance(node, _TEXT_ONLY_NODES):
        return node.text or ""
    if isinstance(node, etree._Element):
        return "".join(node.itertext())
    raise SelectorFailure(expression, f"unsupported result node {type(node).__name__}")


class MenuExtractor:
    """Turn selector matches into trimmed menu lines in document order."""

    def __init__(self, engine: SelectorEngine | None = None) -> None:
        self._engine = engine or LxmlSelectorEngine()

    def parse(self, content: bytes) -> Any:
        return self._engine.parse(content)

    def extract(self, document: Any, expression: str) -> list[str]:
        if not expression:
            raise ValueError("Empty selectors must be filtered out before extraction.")
        return [text.strip() for text in self._engine.query(document, expression)]


__all__ = ["LxmlSelectorEngine", "MenuExtractor", "SelectorEngine"]
