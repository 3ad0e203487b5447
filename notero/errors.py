class NoteroError(Exception):
    """Base class for errors raised by note conversion."""


class HtmlParseError(NoteroError):
    """Error raised when note HTML cannot be parsed into a document tree."""

    def __init__(self, reason: str):
        self.reason = reason
        self.message = f"Unable to parse note HTML - {reason}"
        super().__init__(self.message)


class NoteConversionError(NoteroError):
    """Error raised when note content cannot be converted to Notion blocks.

    The underlying exception is chained as `__cause__`.
    """

    def __init__(self, note_title: str = ""):
        self.note_title = note_title
        self.message = (
            f"Failed to convert note content to Notion blocks - note={note_title!r}."
            if note_title
            else "Failed to convert note content to Notion blocks."
        )
        super().__init__(self.message)


class ImageUploadError(NoteroError):
    """Error raised by an image uploader when an annotation image cannot be published."""
