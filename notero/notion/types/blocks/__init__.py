from .bulleted_list_item import BulletedListItem
from .callout import Callout, EmojiIcon
from .code import Code
from .divider import Divider
from .equation import Equation
from .heading import Heading
from .image import Image
from .numbered_list import NumberedListItem
from .paragraph import Paragraph
from .quote import Quote

__all__ = [
    "BulletedListItem",
    "Callout",
    "Code",
    "Divider",
    "EmojiIcon",
    "Equation",
    "Heading",
    "Image",
    "NumberedListItem",
    "Paragraph",
    "Quote",
]
