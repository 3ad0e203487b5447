# https://developers.notion.com/reference/block#headings
from dataclasses import dataclass, field
from typing import Any, Dict, List

from notero.notion.interfaces import BlockBase
from notero.notion.types.blocks.common import rich_text_content
from notero.notion.types.rich_text import DEFAULT_COLOR, RichText


@dataclass
class Heading(BlockBase):
    """A `heading_1`, `heading_2` or `heading_3` block.

    Notion has no deeper heading levels. A heading accepts children once it is
    toggleable, so a heading given children is sent as a toggle heading.
    """

    level: int = 1
    rich_text: List[RichText] = field(default_factory=list)
    color: str = DEFAULT_COLOR
    is_toggleable: bool = False
    children: List[BlockBase] = field(default_factory=list)

    def __post_init__(self):
        if self.level not in (1, 2, 3):
            raise ValueError(f"heading level must be 1, 2 or 3, got {self.level}")

    @staticmethod
    def can_have_children() -> bool:
        return True

    @property
    def block_type(self) -> str:
        return f"heading_{self.level}"

    def get_content(self) -> Dict[str, Any]:
        content = rich_text_content(self.rich_text, self.children, self.color)
        if self.is_toggleable or self.children:
            content["is_toggleable"] = True
        return content
