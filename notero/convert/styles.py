"""Derives rich-text formatting for an element from its tag name and inline style.

The result is deterministic and order-independent. Each source of formatting only ever turns a
flag on, so annotations contributed by several ancestors can be folded together in any order with
`Annotations.merge()`.
"""

from __future__ import annotations

import re
from typing import Mapping

from notero.convert.colors import background_color_token, foreground_color_token
from notero.convert.dom import HtmlNode
from notero.notion.types.rich_text import DEFAULT_COLOR, Annotations

BOLD_TAGS = frozenset({"b", "strong"})
ITALIC_TAGS = frozenset({"cite", "dfn", "em", "i", "var"})
CODE_TAGS = frozenset({"code", "kbd", "samp", "tt"})
STRIKETHROUGH_TAGS = frozenset({"del", "s", "strike"})
UNDERLINE_TAGS = frozenset({"ins", "u"})

_FONT_WEIGHT_RE = re.compile(r"^\d+$")


def get_annotations(node: HtmlNode) -> Annotations:
    """Formatting `node` applies to the text inside it."""
    tag_name = node.tag_name
    style = node.inline_style

    return Annotations(
        bold=tag_name in BOLD_TAGS or _is_bold_weight(style.get("font-weight", "")),
        italic=tag_name in ITALIC_TAGS or style.get("font-style", "") in ("italic", "oblique"),
        strikethrough=tag_name in STRIKETHROUGH_TAGS or "line-through" in _text_decoration(style),
        underline=tag_name in UNDERLINE_TAGS or "underline" in _text_decoration(style),
        code=tag_name in CODE_TAGS,
        color=_color(tag_name, style),
    )


def _color(tag_name: str, style: Mapping[str, str]) -> str:
    """Notion color token for the background or, lacking that, text color of an element.

    A background is what a reader notices first so it wins when an element has both.
    """
    background = style.get("background-color") or style.get("background")
    if background and (token := background_color_token(background)):
        return token
    if tag_name == "mark":
        return "yellow_background"
    if (color := style.get("color")) and (token := foreground_color_token(color)):
        return token
    return DEFAULT_COLOR


def _is_bold_weight(font_weight: str) -> bool:
    if font_weight in ("bold", "bolder"):
        return True
    return bool(_FONT_WEIGHT_RE.match(font_weight)) and int(font_weight) >= 600


def _text_decoration(style: Mapping[str, str]) -> str:
    return f"{style.get('text-decoration', '')} {style.get('text-decoration-line', '')}"
