"""Classifies each DOM node of a note into the tagged shape the block assembler consumes.

Every node maps to exactly one `ParsedNode` variant, or to None when it carries nothing to render.
The set of variants is closed; consumers dispatch on it exhaustively with `isinstance()`.

BLOCK OR INLINE

- `<div>`, `<body>` and `<p>` are paragraphs and `<blockquote>` is a quote. These are _parent_
  blocks; they can own nested blocks, as can list items.
- Headings and `<pre>` are _leaf_ blocks holding only rich text. Notion has three heading levels
  so `<h3>` through `<h6>` all become `heading_3`.
- Anything not recognized is a transparent inline wrapper: its text is kept and the formatting it
  implies (bold for `<b>`, a link for `<a>`, ...) is applied to that text.
"""

from __future__ import annotations

import dataclasses
import re
from typing import NamedTuple, Optional, Union

from typing_extensions import TypeAlias

from notero.convert.dom import HtmlNode
from notero.convert.styles import get_annotations
from notero.convert.utils.constants import (
    CITATION_CLASS,
    DEFAULT_HIGHLIGHT_COLOR,
    HIGHLIGHT_CLASS,
    MATH_CLASS,
    PARENT_BLOCK_TYPES,
)
from notero.notion.types.rich_text import DEFAULT_COLOR, Annotations, TextLink

# ------------------------------------------------------------------------------------------------
# PARSED-NODE VARIANTS
# ------------------------------------------------------------------------------------------------


class ParsedBlock(NamedTuple):
    """An element that becomes a block of its own."""

    element: HtmlNode
    block_type: str
    annotations: Annotations
    color: str
    supports_children: bool


class ParsedList(NamedTuple):
    """An `<ol>` or `<ul>` element, the parent of list-item blocks."""

    element: HtmlNode


class ParsedRichText(NamedTuple):
    """An inline element; formatting and optional link apply to all text inside it."""

    element: HtmlNode
    annotations: Annotations
    link: Optional[TextLink] = None


class ParsedText(NamedTuple):
    content: str


class ParsedLineBreak(NamedTuple):
    pass


class ParsedDivider(NamedTuple):
    pass


class ParsedInlineMath(NamedTuple):
    element: HtmlNode
    expression: str


class ParsedMathBlock(NamedTuple):
    element: HtmlNode
    expression: str


ParsedNode: TypeAlias = Union[
    ParsedBlock,
    ParsedDivider,
    ParsedInlineMath,
    ParsedLineBreak,
    ParsedList,
    ParsedMathBlock,
    ParsedRichText,
    ParsedText,
]


# ------------------------------------------------------------------------------------------------
# CLASSIFIER
# ------------------------------------------------------------------------------------------------

MATH_EXPRESSION_RE = re.compile(r"^\${1,2}((?:.|\n)+?)\${1,2}$")
HTTP_URL_RE = re.compile(r"^https?://.+")

_HEADING_BLOCK_TYPES = {
    "h1": "heading_1",
    "h2": "heading_2",
    "h3": "heading_3",
    "h4": "heading_3",
    "h5": "heading_3",
    "h6": "heading_3",
}


def classify_node(node: HtmlNode) -> Optional[ParsedNode]:
    """The `ParsedNode` variant for `node`, None when it has no semantic content."""
    if node.is_text:
        content = node.text_content
        return ParsedText(content) if content.strip() else None

    # -- highlight color is resolved by the annotation extractor, not here --
    if node.has_class(HIGHLIGHT_CLASS):
        return ParsedRichText(node, Annotations(color=DEFAULT_HIGHLIGHT_COLOR))

    if node.has_class(CITATION_CLASS):
        return ParsedRichText(node, Annotations())

    tag_name = node.tag_name

    if tag_name == "a":
        return _parse_anchor(node)
    if tag_name in ("body", "div", "p"):
        return _parse_block(node, "paragraph")
    if tag_name == "blockquote":
        return _parse_block(node, "quote")
    if tag_name in _HEADING_BLOCK_TYPES:
        return _parse_block(node, _HEADING_BLOCK_TYPES[tag_name])
    if tag_name == "li":
        return _parse_list_item(node)
    if tag_name in ("ol", "ul"):
        return ParsedList(node)
    if tag_name == "pre":
        return _parse_pre(node)
    if tag_name == "span":
        return _parse_span(node)
    if tag_name == "br":
        return ParsedLineBreak()
    if tag_name == "hr":
        return ParsedDivider()

    return _parse_rich_text(node)


def math_expression(node: HtmlNode) -> Optional[str]:
    """LaTeX expression of a math-marked element like `<span class="math">$x^2$</span>`.

    None when the element is not marked as math, its text is not `$`- or `$$`-delimited, or the
    expression inside the delimiters is empty.
    """
    text = node.text_content
    if not text or not node.has_class(MATH_CLASS):
        return None
    match = MATH_EXPRESSION_RE.match(text)
    return (match.group(1) or None) if match else None


def _parse_anchor(node: HtmlNode) -> ParsedRichText:
    href = node.get_attribute("href") or ""
    link = TextLink(url=href) if HTTP_URL_RE.match(href) else None
    return _parse_rich_text(node)._replace(link=link)


def _parse_block(node: HtmlNode, block_type: str) -> ParsedBlock:
    annotations = get_annotations(node)
    return ParsedBlock(
        element=node,
        block_type=block_type,
        annotations=dataclasses.replace(annotations, color=DEFAULT_COLOR),
        color=annotations.color,
        supports_children=block_type in PARENT_BLOCK_TYPES,
    )


def _parse_list_item(node: HtmlNode) -> ParsedBlock:
    parent_tag_name = node.parent_tag_name
    if parent_tag_name == "ol":
        return _parse_block(node, "numbered_list_item")
    if parent_tag_name == "ul":
        return _parse_block(node, "bulleted_list_item")
    # -- an orphan list-item is malformed; it degrades to a paragraph --
    return _parse_block(node, "paragraph")


def _parse_pre(node: HtmlNode) -> Union[ParsedBlock, ParsedMathBlock]:
    if expression := math_expression(node):
        return ParsedMathBlock(node, expression)
    return _parse_block(node, "code")


def _parse_span(node: HtmlNode) -> Union[ParsedInlineMath, ParsedRichText]:
    if expression := math_expression(node):
        return ParsedInlineMath(node, expression)
    return _parse_rich_text(node)


def _parse_rich_text(node: HtmlNode) -> ParsedRichText:
    return ParsedRichText(node, get_annotations(node))

