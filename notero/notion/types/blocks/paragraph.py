# https://developers.notion.com/reference/block#paragraph
from dataclasses import dataclass, field
from typing import Any, Dict, List

from notero.notion.interfaces import BlockBase
from notero.notion.types.blocks.common import rich_text_content
from notero.notion.types.rich_text import DEFAULT_COLOR, RichText


@dataclass
class Paragraph(BlockBase):
    rich_text: List[RichText] = field(default_factory=list)
    children: List[BlockBase] = field(default_factory=list)
    color: str = DEFAULT_COLOR

    @staticmethod
    def can_have_children() -> bool:
        return True

    @property
    def block_type(self) -> str:
        return "paragraph"

    def get_content(self) -> Dict[str, Any]:
        return rich_text_content(self.rich_text, self.children, self.color)
