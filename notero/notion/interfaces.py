from abc import ABC, abstractmethod
from typing import Any, Dict


class ToJSONMixin(ABC):
    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        pass


class BlockBase(ToJSONMixin):
    @staticmethod
    @abstractmethod
    def can_have_children() -> bool:
        pass

    @property
    @abstractmethod
    def block_type(self) -> str:
        pass

    @abstractmethod
    def get_content(self) -> Dict[str, Any]:
        pass

    def to_dict(self) -> Dict[str, Any]:
        return {"object": "block", "type": self.block_type, self.block_type: self.get_content()}
