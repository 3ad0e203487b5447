# https://developers.notion.com/reference/block#image
from dataclasses import dataclass
from typing import Any, Dict

from notero.notion.interfaces import BlockBase


@dataclass
class Image(BlockBase):
    """An image hosted outside Notion, referenced by its external URL."""

    url: str

    @staticmethod
    def can_have_children() -> bool:
        return False

    @property
    def block_type(self) -> str:
        return "image"

    def get_content(self) -> Dict[str, Any]:
        return {"type": "external", "external": {"url": self.url}}
