"""Splits the blocks of a note into batches Notion accepts in a single append request.

Notion appends at most `BLOCK_ARRAY_ELEMENTS` blocks per request, so a note with more blocks than
that is written in several requests, one per batch, in order.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, TypeVar

from notero.config import env_config
from notero.logger import logger
from notero.notion.limits import BLOCK_ARRAY_ELEMENTS
from notero.utils import iter_slices

_T = TypeVar("_T")


def partition_blocks(blocks: Sequence[_T], max_elements: Optional[int] = None) -> List[List[_T]]:
    """Consecutive non-empty batches of `blocks`, each holding at most `max_elements` blocks.

    `max_elements` defaults to the `NOTION_BLOCK_BATCH_SIZE` environment setting and is capped at
    the Notion per-request limit. Every block lands in exactly one batch and order is preserved.
    No blocks means no batches.
    """
    if max_elements is None:
        max_elements = env_config.NOTION_BLOCK_BATCH_SIZE
    if max_elements < 1:
        raise ValueError(f"'max_elements' argument must be > 0, got {max_elements}")

    batch_size = min(max_elements, BLOCK_ARRAY_ELEMENTS)
    batches = [list(batch) for batch in iter_slices(blocks, batch_size)]
    logger.debug(f"partitioned {len(blocks)} blocks into {len(batches)} batches of <= {batch_size}")
    return batches
