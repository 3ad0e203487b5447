"""Entry points converting the HTML of a Zotero note to Notion blocks."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from notero.chunking.batch import partition_blocks
from notero.convert.annotation_notes import (
    ImageUploader,
    convert_annotation_nodes,
    empty_annotation_blocks,
)
from notero.convert.assembler import convert_container
from notero.convert.dom import find_container, parse_html
from notero.convert.options import ConversionOptions
from notero.errors import NoteConversionError
from notero.logger import logger
from notero.notion.interfaces import BlockBase
from notero.utils import asyncio_run


def convert_html_to_blocks(
    html: str,
    *,
    is_annotation: bool = False,
    group_by_color: Optional[bool] = None,
    image_uploader: Optional[ImageUploader] = None,
    callout_icon: Optional[str] = None,
) -> List[BlockBase]:
    """Notion blocks for the note `html`, in document order.

    Ordinary notes are converted without suspending. Annotation notes may hold images that need
    uploading; those are awaited on an event loop of their own.

    Raises `HtmlParseError` when `html` cannot be parsed.
    """
    options = ConversionOptions.new(
        is_annotation=is_annotation,
        group_by_color=group_by_color,
        image_uploader=image_uploader,
        callout_icon=callout_icon,
    )
    if not options.is_annotation:
        return _convert_note(html)
    return asyncio_run(_aconvert_note, html, options)


async def aconvert_html_to_blocks(
    html: str,
    *,
    is_annotation: bool = False,
    group_by_color: Optional[bool] = None,
    image_uploader: Optional[ImageUploader] = None,
    callout_icon: Optional[str] = None,
) -> List[BlockBase]:
    """Async form of `convert_html_to_blocks()`, for callers already running an event loop."""
    options = ConversionOptions.new(
        is_annotation=is_annotation,
        group_by_color=group_by_color,
        image_uploader=image_uploader,
        callout_icon=callout_icon,
    )
    if not options.is_annotation:
        return _convert_note(html)
    return await _aconvert_note(html, options)


def blocks_to_dicts(blocks: Sequence[BlockBase]) -> List[Dict[str, Any]]:
    """Notion API request payload of each block in `blocks`."""
    return [block.to_dict() for block in blocks]


def build_block_batches(
    html: str,
    *,
    note_title: str = "",
    is_annotation: bool = False,
    group_by_color: Optional[bool] = None,
    image_uploader: Optional[ImageUploader] = None,
    callout_icon: Optional[str] = None,
    batch_size: Optional[int] = None,
) -> List[List[Dict[str, Any]]]:
    """Block payloads for the note `html`, split into batches ready to append to a Notion page.

    The conversion arguments are those of `convert_html_to_blocks()`. `batch_size` defaults to
    `NOTION_BLOCK_BATCH_SIZE`.

    Raises `NoteConversionError`, chaining the original exception, when the note cannot be
    converted.
    """
    try:
        blocks = convert_html_to_blocks(
            html,
            is_annotation=is_annotation,
            group_by_color=group_by_color,
            image_uploader=image_uploader,
            callout_icon=callout_icon,
        )
    except Exception as e:
        raise NoteConversionError(note_title) from e

    return [blocks_to_dicts(batch) for batch in partition_blocks(blocks, batch_size)]


def _convert_note(html: str) -> List[BlockBase]:
    logger.debug("converting note HTML to blocks")
    container = find_container(parse_html(html))
    if container is None:
        return []

    blocks = convert_container(container)
    logger.debug(f"converted note to {len(blocks)} top-level blocks")
    return blocks


async def _aconvert_note(html: str, options: ConversionOptions) -> List[BlockBase]:
    logger.debug(
        f"converting annotation note HTML to blocks, group_by_color={options.group_by_color}"
    )
    container = find_container(parse_html(html))
    if container is None:
        return empty_annotation_blocks(options.callout_icon)

    blocks = await convert_annotation_nodes(container.child_nodes, options)
    logger.debug(f"converted annotation note to {len(blocks)} top-level blocks")
    return blocks
