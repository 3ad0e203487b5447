"""An in-memory document tree implementing `HtmlNode`, for tests that don't need `lxml`.

Build a tree with `h()`, giving children as nodes or plain strings:

    h("p", "Some ", h("b", "bold"), " text", class_="note")
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence, Union

from notero.convert.dom import HtmlNode, parse_inline_style


class FakeText:
    def __init__(self, content: str):
        self.content = content
        self.parent: Optional[FakeElement] = None

    @property
    def is_text(self) -> bool:
        return True

    @property
    def tag_name(self) -> str:
        return ""

    def has_class(self, class_name: str) -> bool:
        return False

    def get_attribute(self, name: str) -> Optional[str]:
        return None

    @property
    def inline_style(self) -> Mapping[str, str]:
        return {}

    @property
    def parent_tag_name(self) -> Optional[str]:
        return None

    @property
    def child_nodes(self) -> Sequence[HtmlNode]:
        return ()

    @property
    def element_children(self) -> Sequence[HtmlNode]:
        return ()

    @property
    def text_content(self) -> str:
        return self.content


class FakeElement:
    def __init__(self, tag_name: str, children: Sequence[Union[FakeElement, FakeText]], **attrs):
        self._tag_name = tag_name
        self._attrs = attrs
        self._children: List[Union[FakeElement, FakeText]] = list(children)
        self.parent: Optional[FakeElement] = None
        for child in self._children:
            child.parent = self

    @property
    def is_text(self) -> bool:
        return False

    @property
    def tag_name(self) -> str:
        return self._tag_name

    def has_class(self, class_name: str) -> bool:
        return class_name in self._attrs.get("class", "").split()

    def get_attribute(self, name: str) -> Optional[str]:
        return self._attrs.get(name)

    @property
    def inline_style(self) -> Mapping[str, str]:
        return parse_inline_style(self._attrs.get("style", ""))

    @property
    def parent_tag_name(self) -> Optional[str]:
        return self.parent.tag_name if self.parent is not None else None

    @property
    def child_nodes(self) -> Sequence[HtmlNode]:
        return self._children

    @property
    def element_children(self) -> Sequence[HtmlNode]:
        return [child for child in self._children if isinstance(child, FakeElement)]

    @property
    def text_content(self) -> str:
        return "".join(child.text_content for child in self._children)


def h(tag_name: str, *children: Union[FakeElement, FakeText, str], **attrs: str) -> FakeElement:
    """A fake element; `class_` sets the class attribute, other keywords set attributes as named."""
    if "class_" in attrs:
        attrs["class"] = attrs.pop("class_")
    return FakeElement(
        tag_name,
        [FakeText(child) if isinstance(child, str) else child for child in children],
        **attrs,
    )
