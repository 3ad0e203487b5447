# https://developers.notion.com/reference/block#equation
from dataclasses import dataclass
from typing import Any, Dict

from notero.notion.interfaces import BlockBase


@dataclass
class Equation(BlockBase):
    expression: str

    @staticmethod
    def can_have_children() -> bool:
        return False

    @property
    def block_type(self) -> str:
        return "equation"

    def get_content(self) -> Dict[str, Any]:
        return {"expression": self.expression}
