# https://developers.notion.com/reference/rich-text
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional

from notero.notion.interfaces import ToJSONMixin

DEFAULT_COLOR = "default"


@dataclass(frozen=True)
class Annotations(ToJSONMixin):
    """Formatting of a rich-text run.

    Every flag toggles independently. `color` is a Notion color token like "red" or
    "yellow_background", never a raw CSS value.
    """

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = DEFAULT_COLOR

    @property
    def is_default(self) -> bool:
        return self == Annotations()

    def merge(self, other: Annotations) -> Annotations:
        """Annotations of `other` applied on top of these ones.

        Flags are unioned, a non-default color in `other` replaces this color. The operation is
        order-independent for flags so any number of contributing ancestors can be folded in.
        """
        return Annotations(
            bold=self.bold or other.bold,
            italic=self.italic or other.italic,
            strikethrough=self.strikethrough or other.strikethrough,
            underline=self.underline or other.underline,
            code=self.code or other.code,
            color=other.color if other.color != DEFAULT_COLOR else self.color,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            name: True
            for name in ("bold", "italic", "strikethrough", "underline", "code")
            if getattr(self, name)
        }
        if self.color != DEFAULT_COLOR:
            data["color"] = self.color
        return data


@dataclass(frozen=True)
class TextLink(ToJSONMixin):
    url: str

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url}


@dataclass(frozen=True)
class Text(ToJSONMixin):
    content: str
    link: Optional[TextLink] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"content": self.content}
        if self.link:
            data["link"] = self.link.to_dict()
        return data


@dataclass(frozen=True)
class Equation(ToJSONMixin):
    expression: str

    def to_dict(self) -> Dict[str, Any]:
        return {"expression": self.expression}


@dataclass(frozen=True)
class RichText(ToJSONMixin):
    """One run of inline content, either a text run or an inline equation."""

    type: str
    text: Optional[Text] = None
    equation: Optional[Equation] = None
    annotations: Annotations = dataclasses.field(default_factory=Annotations)

    @classmethod
    def from_text(
        cls,
        content: str,
        annotations: Optional[Annotations] = None,
        link: Optional[TextLink] = None,
    ) -> RichText:
        return cls(
            type="text",
            text=Text(content=content, link=link),
            annotations=annotations or Annotations(),
        )

    @classmethod
    def from_equation(cls, expression: str) -> RichText:
        return cls(type="equation", equation=Equation(expression=expression))

    @property
    def is_text(self) -> bool:
        return self.text is not None

    @property
    def plain_text(self) -> str:
        if self.text is not None:
            return self.text.content
        if self.equation is not None:
            return self.equation.expression
        return ""

    def with_content(self, content: str) -> RichText:
        """A copy of this text run having `content` in place of its current content."""
        if self.text is None:
            return self
        return dataclasses.replace(self, text=dataclasses.replace(self.text, content=content))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.text is not None:
            data["text"] = self.text.to_dict()
        elif self.equation is not None:
            data["equation"] = self.equation.to_dict()
        if not self.annotations.is_default:
            data["annotations"] = self.annotations.to_dict()
        return data
