# https://developers.notion.com/reference/block#divider
from dataclasses import dataclass
from typing import Any, Dict

from notero.notion.interfaces import BlockBase


@dataclass
class Divider(BlockBase):
    @staticmethod
    def can_have_children() -> bool:
        return False

    @property
    def block_type(self) -> str:
        return "divider"

    def get_content(self) -> Dict[str, Any]:
        return {}
