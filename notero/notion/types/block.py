# https://developers.notion.com/reference/block
from __future__ import annotations

from typing import List, Optional, Union

from typing_extensions import TypeAlias

from notero.notion.interfaces import BlockBase
from notero.notion.types import blocks
from notero.notion.types.rich_text import DEFAULT_COLOR, RichText

ParentBlock: TypeAlias = Union[
    blocks.BulletedListItem, blocks.NumberedListItem, blocks.Paragraph, blocks.Quote
]
"""Blocks that can own nested block children produced from HTML structure."""

LeafBlock: TypeAlias = Union[blocks.Code, blocks.Heading]
"""Text blocks that only ever hold rich text."""

parent_block_type_mapping = {
    "bulleted_list_item": blocks.BulletedListItem,
    "numbered_list_item": blocks.NumberedListItem,
    "paragraph": blocks.Paragraph,
    "quote": blocks.Quote,
}

heading_levels = {"heading_1": 1, "heading_2": 2, "heading_3": 3}


def new_parent_block(
    block_type: str,
    rich_text: List[RichText],
    children: Optional[List[BlockBase]] = None,
    color: str = DEFAULT_COLOR,
) -> ParentBlock:
    """Construct the parent block of `block_type`, like "quote" or "numbered_list_item"."""
    BlockCls = parent_block_type_mapping[block_type]
    return BlockCls(rich_text=rich_text, children=children or [], color=color)


def new_leaf_block(
    block_type: str, rich_text: List[RichText], color: str = DEFAULT_COLOR
) -> LeafBlock:
    """Construct a heading or code block of `block_type`."""
    if block_type == "code":
        return blocks.Code(rich_text=rich_text)
    return blocks.Heading(level=heading_levels[block_type], rich_text=rich_text, color=color)
