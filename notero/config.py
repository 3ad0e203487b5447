"""
This module contains variables that can be tweaked by the system environment, like the default
batch size used when appending blocks or whether annotation notes are grouped by color. Constants
do NOT belong in this module. Constants are values that should not be altered without making a
code change (e.g. names of block types or the fixed color tables). Constants go into
`notero.convert.utils.constants`
"""

import os
from dataclasses import dataclass

from notero.notion.limits import BLOCK_ARRAY_ELEMENTS


@dataclass
class ENVConfig:
    """class for configuring environment parameters"""

    def _get_string(self, var: str, default_value: str = "") -> str:
        """attempt to get the value of var from the os environment; if not present return the
        default_value"""
        return os.environ.get(var, default_value)

    def _get_int(self, var: str, default_value: int) -> int:
        if value := self._get_string(var):
            return int(value)
        return default_value

    def _get_bool(self, var: str, default_value: bool) -> bool:
        if value := self._get_string(var):
            return value.lower() in ("true", "1", "t")
        return default_value

    @property
    def NOTION_BLOCK_BATCH_SIZE(self) -> int:
        """Number of blocks sent in one append request.

        Values above the Notion per-request limit are reduced to that limit.
        """
        batch_size = self._get_int("NOTION_BLOCK_BATCH_SIZE", BLOCK_ARRAY_ELEMENTS)
        return min(batch_size, BLOCK_ARRAY_ELEMENTS)

    @property
    def ANNOTATION_GROUP_BY_COLOR(self) -> bool:
        """Group annotation callouts under one heading per highlight color."""
        return self._get_bool("ANNOTATION_GROUP_BY_COLOR", False)

    @property
    def ANNOTATION_CALLOUT_ICON(self) -> str:
        """Emoji used as the icon of annotation callouts; empty string for no icon."""
        return self._get_string("ANNOTATION_CALLOUT_ICON", "💡")

    @property
    def IMAGE_UPLOAD_CONCURRENCY(self) -> int:
        """Maximum number of annotation images uploaded at the same time."""
        return self._get_int("IMAGE_UPLOAD_CONCURRENCY", 4)


env_config = ENVConfig()
