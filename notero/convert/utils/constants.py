from __future__ import annotations

PARENT_BLOCK_TYPES = frozenset(
    {"bulleted_list_item", "numbered_list_item", "paragraph", "quote"}
)
"""Block types that may own nested block children."""

HIGHLIGHT_CLASS = "highlight"
CITATION_CLASS = "citation"
MATH_CLASS = "math"

DEFAULT_HIGHLIGHT_COLOR = "yellow_background"
"""Background token used for a highlight whose color cannot be resolved."""

ANNOTATION_ERROR_COLOR = "red_background"
"""Background token of the callout substituted when an annotation image cannot be resolved."""

EMPTY_ANNOTATIONS_TEXT = "No annotations found"
"""Callout text of the placeholder produced for an annotation note without content."""

ANNOTATION_NOTE_MARKER = "Annotation"
"""Substring of a Zotero note title identifying an annotation note."""

OPENING_QUOTES = frozenset("\"'“‘„«")
CLOSING_QUOTES = frozenset("\"'”’“»")
"""Quotation marks Zotero may wrap around a highlighted passage."""
