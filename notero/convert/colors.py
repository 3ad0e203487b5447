"""Maps CSS color values found in notes to Notion color tokens.

Zotero paints annotations with a fixed palette of eight colors. Notes carry those colors as hex
(`#ffd400`, sometimes with an alpha channel like `#ffd40080`) or as `rgb(255, 212, 0)`. Notion
only accepts named color tokens, so every value is looked up in the palette and never passed
through raw.
"""

from __future__ import annotations

import re
from typing import Optional

# -- Zotero annotation palette, (red, green, blue) -> Notion color name --
ZOTERO_PALETTE: dict[tuple[int, int, int], str] = {
    (0xFF, 0xD4, 0x00): "yellow",
    (0xFF, 0x66, 0x66): "red",
    (0x5F, 0xB2, 0x36): "green",
    (0x2E, 0xA8, 0xE5): "blue",
    (0xA2, 0x8A, 0xE5): "purple",
    (0xE5, 0x6E, 0xEE): "pink",
    (0xF1, 0x98, 0x37): "orange",
    (0xAA, 0xAA, 0xAA): "gray",
}

# -- CSS keywords a note author might use for text or background color --
NAMED_COLORS: dict[str, str] = {
    "brown": "brown",
    "gray": "gray",
    "green": "green",
    "grey": "gray",
    "blue": "blue",
    "magenta": "pink",
    "orange": "orange",
    "pink": "pink",
    "purple": "purple",
    "red": "red",
    "yellow": "yellow",
}

SECTION_TITLES: dict[str, str] = {
    "yellow_background": "Key Ideas",
    "red_background": "Disagreements & Critiques",
    "green_background": "Supporting Evidence",
    "blue_background": "Definitions & Concepts",
    "purple_background": "Methods",
    "pink_background": "Questions",
    "orange_background": "Important Details",
    "gray_background": "Miscellaneous",
}
"""Heading text of the section collecting annotations of each highlight color."""

_HEX_RE = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6}|[0-9a-f]{8})$")
_RGB_RE = re.compile(r"^rgba?\((\d{1,3}),(\d{1,3}),(\d{1,3})(?:,[\d.]+%?)?\)$")


def parse_css_color(value: str) -> Optional[tuple[int, int, int]]:
    """(red, green, blue) of a hex or `rgb()`/`rgba()` CSS color value, None if not one of those.

    Matching ignores case and whitespace. Any alpha component is ignored.
    """
    normalized = "".join(value.split()).lower()

    if match := _HEX_RE.match(normalized):
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(d * 2 for d in digits)
        return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    if match := _RGB_RE.match(normalized):
        r, g, b = (int(c) for c in match.groups())
        if max(r, g, b) > 255:
            return None
        return (r, g, b)

    return None


def notion_color_name(value: str) -> Optional[str]:
    """Notion color name ("red", "blue", ...) for CSS color `value`, None when unrecognized."""
    normalized = value.strip().lower()
    if normalized in NAMED_COLORS:
        return NAMED_COLORS[normalized]
    rgb = parse_css_color(normalized)
    return ZOTERO_PALETTE.get(rgb) if rgb else None


def background_color_token(value: Optional[str], default: Optional[str] = None) -> Optional[str]:
    """Notion background token like "green_background" for CSS color `value`.

    Returns `default` when `value` is empty or not a known color.
    """
    name = notion_color_name(value) if value else None
    return f"{name}_background" if name else default


def foreground_color_token(value: Optional[str]) -> Optional[str]:
    """Notion text-color token like "red" for CSS color `value`, None when not a known color."""
    return notion_color_name(value) if value else None


def section_title(color: str) -> str:
    """Heading text for the section collecting annotations highlighted in `color`.

    Colors without an entry in the fixed table get a title derived from the token, for example
    "brown_background" becomes "Brown Highlights".
    """
    if color in SECTION_TITLES:
        return SECTION_TITLES[color]
    name = color[: -len("_background")] if color.endswith("_background") else color
    return f"{name.replace('_', ' ').title()} Highlights"
