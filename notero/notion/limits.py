# https://developers.notion.com/reference/request-limits#limits-for-property-values

BLOCK_ARRAY_ELEMENTS: int = 100
"""Maximum number of block elements in one `children` array of an append request."""

TEXT_CONTENT_CHARS: int = 2000
"""Maximum length of `text.content` in a single rich-text object."""
