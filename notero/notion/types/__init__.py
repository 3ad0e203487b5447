from notero.notion.types.block import ParentBlock, new_leaf_block, new_parent_block
from notero.notion.types.rich_text import Annotations, RichText, TextLink

__all__ = [
    "Annotations",
    "ParentBlock",
    "RichText",
    "TextLink",
    "new_leaf_block",
    "new_parent_block",
]
