"""Block Assembler: builds Notion blocks from classified nodes.

Each child of a block is first converted into a `ContentResult`. A run of inline content becomes a
`RichTextResult`, a nested block a `BlockResult` and a list a `ListResult` whose items are spliced
into the stream of its parent. The parent then reduces those results into its own rich text and
children:

    <p>Some <b>bold</b> text<ul><li>item</li></ul>more text</p>

gives a paragraph "Some bold text" having a bulleted list item and a "more text" paragraph as
children. Inline content that arrives after the first child block can no longer join the text of
the parent and is wrapped into a paragraph of its own.
"""

from __future__ import annotations

from typing import Iterable, List, NamedTuple, Optional, Union

from typing_extensions import TypeAlias

from notero.convert.dom import HtmlNode
from notero.convert.parser import (
    ParsedBlock,
    ParsedDivider,
    ParsedList,
    ParsedMathBlock,
    ParsedNode,
    classify_node,
)
from notero.convert.rich_text import (
    RichTextOptions,
    convert_rich_text_child_nodes,
    convert_rich_text_node,
    trim_rich_text,
)
from notero.notion.interfaces import BlockBase
from notero.notion.types import blocks
from notero.notion.types.block import new_leaf_block, new_parent_block
from notero.notion.types.rich_text import RichText

# ------------------------------------------------------------------------------------------------
# CONTENT RESULTS
# ------------------------------------------------------------------------------------------------


class BlockResult(NamedTuple):
    block: BlockBase


class ListResult(NamedTuple):
    results: List[BlockResult]


class RichTextResult(NamedTuple):
    """A run of inline content not yet owned by any block."""

    rich_text: List[RichText]


ContentResult: TypeAlias = Union[BlockResult, ListResult, RichTextResult]


# ------------------------------------------------------------------------------------------------
# ASSEMBLY
# ------------------------------------------------------------------------------------------------


def convert_container(
    container: HtmlNode, options: RichTextOptions = RichTextOptions()
) -> List[BlockBase]:
    """Top-level blocks for the content of `container`."""
    return convert_top_level_nodes(container.child_nodes, options)


def convert_top_level_nodes(
    nodes: Iterable[HtmlNode], options: RichTextOptions = RichTextOptions()
) -> List[BlockBase]:
    """Blocks for a sequence of sibling nodes at the top level of a note.

    Inline content found between top-level blocks is trimmed and wrapped into a paragraph so the
    result only ever holds blocks.
    """
    top_level_blocks: List[BlockBase] = []
    for result in reduce_content_results(nodes, options):
        if isinstance(result, BlockResult):
            top_level_blocks.append(result.block)
            continue
        if rich_text := trim_rich_text(result.rich_text):
            top_level_blocks.append(blocks.Paragraph(rich_text=rich_text))
    return top_level_blocks


def convert_node(node: ParsedNode, options: RichTextOptions) -> ContentResult:
    """The content result for one classified node."""
    if isinstance(node, ParsedBlock):
        if node.supports_children:
            return convert_parent_element(node, options)
        return convert_block_element(node, options)

    if isinstance(node, ParsedList):
        return convert_list_element(node, options)

    if isinstance(node, ParsedMathBlock):
        return BlockResult(blocks.Equation(expression=node.expression))

    if isinstance(node, ParsedDivider):
        return BlockResult(blocks.Divider())

    return RichTextResult(convert_rich_text_node(node, options))


def convert_block_element(node: ParsedBlock, options: RichTextOptions) -> BlockResult:
    """Heading or code block holding the rich text of `node`.

    Code blocks keep their whitespace exactly, other leaf blocks are trimmed.
    """
    preserve_whitespace = node.block_type == "code"
    options = options.inside(node.annotations)._replace(preserve_whitespace=preserve_whitespace)

    rich_text = convert_rich_text_child_nodes(node.element, options)
    if not preserve_whitespace:
        rich_text = trim_rich_text(rich_text)

    return BlockResult(new_leaf_block(node.block_type, rich_text, node.color))


def convert_parent_element(node: ParsedBlock, options: RichTextOptions) -> BlockResult:
    """Paragraph, quote or list-item block for `node`, with nested blocks as children."""
    options = options.inside(node.annotations)

    rich_text: List[RichText] = []
    children: Optional[List[BlockBase]] = None

    for result in convert_child_nodes(node.element, options):
        if isinstance(result, RichTextResult):
            trimmed_rich_text = trim_rich_text(result.rich_text)
            if not trimmed_rich_text:
                continue
            if children is None:
                rich_text.extend(trimmed_rich_text)
                continue
            child_block: BlockBase = blocks.Paragraph(rich_text=trimmed_rich_text)
        else:
            child_block = result.block

        # -- `<li><p>text</p></li>` is a list-item with text, not one with a paragraph child --
        if children is None and not rich_text and is_promotable_paragraph(child_block):
            assert isinstance(child_block, blocks.Paragraph)
            rich_text = list(child_block.rich_text)
            children = list(child_block.children) or None
            continue

        children = (children or []) + [child_block]

    return BlockResult(new_parent_block(node.block_type, rich_text, children, node.color))


def convert_list_element(node: ParsedList, options: RichTextOptions) -> ListResult:
    """List-item blocks for the items of an `<ol>` or `<ul>`, in order.

    Element children of the list that are not list-items are dropped.
    """
    results: List[BlockResult] = []
    for element in node.element.element_children:
        parsed_child = classify_node(element)
        if (
            isinstance(parsed_child, ParsedBlock)
            and parsed_child.supports_children
            and parsed_child.block_type.endswith("list_item")
        ):
            results.append(convert_parent_element(parsed_child, options))
    return ListResult(results)


def convert_child_nodes(
    node: HtmlNode, options: RichTextOptions
) -> List[Union[BlockResult, RichTextResult]]:
    """Content results for the children of `node`."""
    return reduce_content_results(node.child_nodes, options)


def reduce_content_results(
    nodes: Iterable[HtmlNode], options: RichTextOptions
) -> List[Union[BlockResult, RichTextResult]]:
    """Content results for `nodes` with list-items spliced and adjacent rich text concatenated."""
    results: List[Union[BlockResult, RichTextResult]] = []

    for child in nodes:
        parsed_node = classify_node(child)
        if parsed_node is None:
            continue

        result = convert_node(parsed_node, options)

        if isinstance(result, BlockResult):
            results.append(result)
        elif isinstance(result, ListResult):
            results.extend(result.results)
        elif results and isinstance(prev_result := results[-1], RichTextResult):
            results[-1] = RichTextResult(prev_result.rich_text + result.rich_text)
        else:
            results.append(result)

    return results


def is_promotable_paragraph(block: BlockBase) -> bool:
    """True when `block` can be dissolved into an enclosing block that has no content yet.

    Only a plain paragraph qualifies. Its rich text and children become those of the parent.
    """
    return isinstance(block, blocks.Paragraph)
