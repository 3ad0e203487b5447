# https://developers.notion.com/reference/block#callout
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from notero.notion.interfaces import BlockBase, ToJSONMixin
from notero.notion.types.blocks.common import rich_text_content
from notero.notion.types.rich_text import DEFAULT_COLOR, RichText


@dataclass(frozen=True)
class EmojiIcon(ToJSONMixin):
    emoji: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "emoji", "emoji": self.emoji}


@dataclass
class Callout(BlockBase):
    rich_text: List[RichText] = field(default_factory=list)
    color: str = DEFAULT_COLOR
    icon: Optional[EmojiIcon] = None
    children: List[BlockBase] = field(default_factory=list)

    @staticmethod
    def can_have_children() -> bool:
        return True

    @property
    def block_type(self) -> str:
        return "callout"

    def get_content(self) -> Dict[str, Any]:
        content = rich_text_content(self.rich_text, self.children, self.color)
        if self.icon:
            content["icon"] = self.icon.to_dict()
        return content
