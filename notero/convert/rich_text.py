"""Rich Text Builder: turns inline content into Notion rich-text runs.

Runs are produced in document order and adjacent runs are never merged here. Merging happens one
layer up, in the block assembler, across whole results, which keeps this builder free of side
effects and easy to compose.
"""

from __future__ import annotations

import re
from typing import List, NamedTuple, Optional, Sequence

from notero.convert.dom import HtmlNode
from notero.convert.parser import (
    ParsedBlock,
    ParsedInlineMath,
    ParsedLineBreak,
    ParsedList,
    ParsedMathBlock,
    ParsedNode,
    ParsedRichText,
    ParsedText,
    classify_node,
)
from notero.notion.limits import TEXT_CONTENT_CHARS
from notero.notion.types.rich_text import Annotations, RichText, TextLink

_WHITESPACE_RE = re.compile(r"\s+")


class RichTextOptions(NamedTuple):
    """Formatting inherited from the enclosing elements of the content being converted."""

    annotations: Annotations = Annotations()
    link: Optional[TextLink] = None
    preserve_whitespace: bool = False

    def inside(self, annotations: Annotations, link: Optional[TextLink] = None) -> RichTextOptions:
        """Options for the content of an element contributing `annotations` and maybe `link`."""
        return self._replace(
            annotations=self.annotations.merge(annotations), link=link or self.link
        )


def build_rich_text(text: str, options: RichTextOptions) -> List[RichText]:
    """Text runs carrying the inbound formatting of `options` for `text`.

    Whitespace runs collapse to a single space unless whitespace is preserved. Text longer than
    Notion allows in one run is split over consecutive runs with identical formatting.
    """
    content = text if options.preserve_whitespace else _WHITESPACE_RE.sub(" ", text)
    return [
        RichText.from_text(content[i : i + TEXT_CONTENT_CHARS], options.annotations, options.link)
        for i in range(0, len(content), TEXT_CONTENT_CHARS)
    ]


def convert_rich_text_child_nodes(node: HtmlNode, options: RichTextOptions) -> List[RichText]:
    """Rich text for all inline content below `node`, in document order."""
    rich_text: List[RichText] = []
    for child in node.child_nodes:
        parsed_node = classify_node(child)
        if parsed_node is None:
            continue
        rich_text.extend(convert_rich_text_node(parsed_node, options))
    return rich_text


def convert_rich_text_node(node: ParsedNode, options: RichTextOptions) -> List[RichText]:
    """Rich text for a single classified node."""
    if isinstance(node, ParsedText):
        return build_rich_text(node.content, options)

    if isinstance(node, ParsedLineBreak):
        return build_rich_text("\n", options._replace(preserve_whitespace=True))

    # -- equations carry no formatting of their own --
    if isinstance(node, (ParsedInlineMath, ParsedMathBlock)):
        return [RichText.from_equation(node.expression)]

    if isinstance(node, ParsedRichText):
        return convert_rich_text_child_nodes(
            node.element, options.inside(node.annotations, node.link)
        )

    if isinstance(node, ParsedBlock):
        return convert_rich_text_child_nodes(node.element, options.inside(node.annotations))

    if isinstance(node, ParsedList):
        return convert_rich_text_child_nodes(node.element, options)

    # -- a divider has no inline representation --
    return []


def trim_rich_text(rich_text: Sequence[RichText]) -> List[RichText]:
    """Remove leading and trailing whitespace from the visible text of one block.

    Only the start of the first run and the end of the last run are trimmed; interior runs are left
    as they are. A text run left empty by trimming is dropped. Equation runs are never altered.
    """
    if len(rich_text) == 0:
        return list(rich_text)

    if len(rich_text) == 1:
        return _trim_run(rich_text[0], str.strip)

    first = _trim_run(rich_text[0], str.lstrip)
    middle = list(rich_text[1:-1])
    last = _trim_run(rich_text[-1], str.rstrip)

    return first + middle + last


def _trim_run(run: RichText, trim) -> List[RichText]:
    if not run.is_text:
        return [run]
    content = trim(run.plain_text)
    return [run.with_content(content)] if content else []
