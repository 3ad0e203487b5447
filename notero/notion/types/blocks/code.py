# https://developers.notion.com/reference/block#code
from dataclasses import dataclass, field
from typing import Any, Dict, List

from notero.notion.interfaces import BlockBase
from notero.notion.types.rich_text import RichText


@dataclass
class Code(BlockBase):
    rich_text: List[RichText] = field(default_factory=list)
    language: str = "plain text"

    @staticmethod
    def can_have_children() -> bool:
        return False

    @property
    def block_type(self) -> str:
        return "code"

    def get_content(self) -> Dict[str, Any]:
        return {"rich_text": [rt.to_dict() for rt in self.rich_text], "language": self.language}
