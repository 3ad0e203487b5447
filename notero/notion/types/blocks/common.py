from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from notero.notion.interfaces import BlockBase
from notero.notion.types.rich_text import DEFAULT_COLOR, RichText


def rich_text_content(
    rich_text: Sequence[RichText],
    children: Optional[Sequence[BlockBase]] = None,
    color: str = DEFAULT_COLOR,
) -> Dict[str, Any]:
    """Payload shared by blocks whose content is a `rich_text` array.

    `children` and `color` are only included when they carry something.
    """
    content: Dict[str, Any] = {"rich_text": [rt.to_dict() for rt in rich_text]}
    if children:
        content["children"] = [child.to_dict() for child in children]
    if color and color != DEFAULT_COLOR:
        content["color"] = color
    return content
