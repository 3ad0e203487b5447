"""Annotation Extractor: renders the paragraphs of a Zotero annotation note as callouts.

Zotero writes each annotation of a PDF as a paragraph of a fixed shape, for example:

    <p>
      <span class="highlight" data-annotation="%7B%22color%22%3A%22%23ffd400%22...%7D">
        "<span style="background-color: #ffd40080">Key idea</span>"
      </span>
      <span class="citation">(<span class="citation-item">Doe, 2020</span>)</span>
      interesting #theory #review
    </p>

An image annotation has an `<img data-attachment-key="..." data-annotation="...">` in place of the
highlight marker. The quoted text is the highlighted passage, the text after the citation is the
comment of the reader, and words marked with `#` are tags. Each such paragraph becomes a callout
holding the passage, a paragraph holding the comment and tags, and a divider. Other paragraphs are
converted the ordinary way.
"""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any, Coroutine, Dict, List, NamedTuple, Optional, Sequence
from urllib.parse import unquote

from typing_extensions import Protocol

from notero.convert.assembler import convert_top_level_nodes
from notero.convert.colors import background_color_token, section_title
from notero.convert.dom import HtmlNode, find_descendant, has_class, has_tag, text_after
from notero.convert.utils.constants import (
    ANNOTATION_ERROR_COLOR,
    ANNOTATION_NOTE_MARKER,
    CITATION_CLASS,
    CLOSING_QUOTES,
    DEFAULT_HIGHLIGHT_COLOR,
    EMPTY_ANNOTATIONS_TEXT,
    HIGHLIGHT_CLASS,
    OPENING_QUOTES,
)
from notero.errors import ImageUploadError
from notero.logger import logger, trace_logger
from notero.notion.interfaces import BlockBase
from notero.notion.types import blocks
from notero.notion.types.rich_text import Annotations, RichText

if TYPE_CHECKING:
    from notero.convert.options import ConversionOptions


class ImageAnnotationRef(NamedTuple):
    """Reference to the image of an image annotation, as found in the note.

    The image itself lives in the Zotero storage of the attachment. The reference is passed as-is
    to the `ImageUploader`, which knows how to locate and publish it.
    """

    key: str
    attachment_key: str
    color: Optional[str]
    raw: Dict[str, Any]

    @classmethod
    def from_element(cls, img: HtmlNode) -> ImageAnnotationRef:
        descriptor = _annotation_descriptor(img)
        attachment_uri = str(descriptor.get("attachmentURI", ""))
        color = descriptor.get("color")
        return cls(
            key=str(descriptor.get("annotationKey", "")),
            attachment_key=(
                img.get_attribute("data-attachment-key") or attachment_uri.rpartition("/")[2]
            ),
            color=color if isinstance(color, str) else None,
            raw=descriptor,
        )


class ImageUploader(Protocol):
    """Publishes the image of an image annotation and returns its external URL.

    Any exception raised is treated as an upload failure of that one image.
    """

    async def upload(self, ref: ImageAnnotationRef) -> str: ...


class AnnotationRecord(NamedTuple):
    """What one annotation paragraph says, before it is rendered as blocks."""

    highlighted_text: str
    comment: str
    tags: List[str]
    color: str
    image: Optional[ImageAnnotationRef] = None


def is_annotation_note(title: str) -> bool:
    """True when a note with `title` is a Zotero annotation note."""
    return ANNOTATION_NOTE_MARKER in title


def is_annotation_paragraph(node: HtmlNode) -> bool:
    """True when `node` is a `<p>` holding a highlight marker or an annotation image."""
    if node.tag_name != "p":
        return False
    return (
        find_descendant(node, has_class(HIGHLIGHT_CLASS)) is not None
        or find_descendant(node, has_tag("img")) is not None
    )


def extract_annotation(paragraph: HtmlNode) -> AnnotationRecord:
    """The annotation described by an annotation paragraph.

    When the paragraph holds an image, the image takes precedence over any highlight and the
    record carries an image reference.
    """
    img = find_descendant(paragraph, has_tag("img"))
    marker = find_descendant(paragraph, has_class(HIGHLIGHT_CLASS))

    remaining_text = text_after(paragraph, has_class(CITATION_CLASS))
    if remaining_text is None and img is not None:
        remaining_text = text_after(paragraph, has_tag("img"))
    if remaining_text is None and marker is not None:
        remaining_text = text_after(paragraph, has_class(HIGHLIGHT_CLASS))
    comment, tags = split_comment_and_tags(remaining_text or "")

    if img is not None:
        image = ImageAnnotationRef.from_element(img)
        return AnnotationRecord(
            highlighted_text="",
            comment=comment,
            tags=tags,
            color=background_color_token(image.color, DEFAULT_HIGHLIGHT_COLOR),
            image=image,
        )

    assert marker is not None
    return AnnotationRecord(
        highlighted_text=highlighted_passage(marker),
        comment=comment,
        tags=tags,
        color=highlight_color(marker),
    )


def highlighted_passage(marker: HtmlNode) -> str:
    """Text of the passage a highlight marker quotes.

    The passage is the text of the inner formatting span, or of the whole marker when it has no
    such span. Zotero wraps the passage in quotation marks, usually outside the inner span. A
    leading and trailing quotation mark are removed wherever they are, so the passage never loses
    a character of its own.
    """
    inner_span = find_descendant(marker, has_tag("span"))
    node = inner_span if inner_span is not None and inner_span.text_content.strip() else marker
    passage = node.text_content.strip()
    if len(passage) >= 2 and passage[0] in OPENING_QUOTES and passage[-1] in CLOSING_QUOTES:
        passage = passage[1:-1].strip()
    return passage


def highlight_color(marker: HtmlNode) -> str:
    """Background token for the color of a highlight marker.

    The inline background of the marker or its inner span is used when there is one, otherwise the
    color recorded in the annotation descriptor of the marker.
    """
    inner_span = find_descendant(marker, has_tag("span"))
    for node in (marker, inner_span):
        if node is None:
            continue
        style = node.inline_style
        background = style.get("background-color") or style.get("background")
        if token := background_color_token(background):
            return token

    color = _annotation_descriptor(marker).get("color")
    return background_color_token(
        color if isinstance(color, str) else None, DEFAULT_HIGHLIGHT_COLOR
    )


def split_comment_and_tags(text: str) -> tuple[str, List[str]]:
    """Comment and tags of the text following a citation, like "so true #theory #review"."""
    comment, *fragments = text.split("#")
    return comment.strip(), [tag for fragment in fragments if (tag := fragment.strip())]


# ------------------------------------------------------------------------------------------------
# BLOCKS
# ------------------------------------------------------------------------------------------------


def tag_rich_text(tags: Sequence[str]) -> List[RichText]:
    """Code-formatted "#tag" runs separated by single spaces."""
    rich_text: List[RichText] = []
    for tag in tags:
        if rich_text:
            rich_text.append(RichText.from_text(" "))
        rich_text.append(RichText.from_text(f"#{tag}", Annotations(code=True)))
    return rich_text


def highlight_blocks(
    record: AnnotationRecord, icon: Optional[blocks.EmojiIcon] = None
) -> List[BlockBase]:
    return [
        blocks.Callout(
            rich_text=[RichText.from_text(record.highlighted_text)],
            color=record.color,
            icon=icon,
        ),
        blocks.Paragraph(
            rich_text=[RichText.from_text(f"{record.comment}\n")] + tag_rich_text(record.tags)
        ),
        blocks.Divider(),
    ]


def image_blocks(
    record: AnnotationRecord, url: str, icon: Optional[blocks.EmojiIcon] = None
) -> List[BlockBase]:
    callout_text = [RichText.from_text(record.comment)] if record.comment else []
    image_annotation_blocks: List[BlockBase] = [
        blocks.Callout(
            rich_text=callout_text,
            color=record.color,
            icon=icon,
            children=[blocks.Image(url=url)],
        )
    ]
    if record.tags:
        image_annotation_blocks.append(blocks.Paragraph(rich_text=tag_rich_text(record.tags)))
    image_annotation_blocks.append(blocks.Divider())
    return image_annotation_blocks


def error_blocks(message: str, icon: Optional[blocks.EmojiIcon] = None) -> List[BlockBase]:
    """Stand-in for an annotation that could not be rendered, showing `message` to the reader."""
    return [
        blocks.Callout(
            rich_text=[RichText.from_text(message)], color=ANNOTATION_ERROR_COLOR, icon=icon
        ),
        blocks.Paragraph(),
        blocks.Divider(),
    ]


def empty_annotation_blocks(icon: Optional[blocks.EmojiIcon] = None) -> List[BlockBase]:
    """Placeholder for an annotation note without any content."""
    return [
        blocks.Callout(rich_text=[RichText.from_text(EMPTY_ANNOTATIONS_TEXT)], icon=icon),
        blocks.Paragraph(),
        blocks.Divider(),
    ]


async def resolve_image_blocks(
    record: AnnotationRecord,
    uploader: Optional[ImageUploader],
    semaphore: asyncio.Semaphore,
    icon: Optional[blocks.EmojiIcon] = None,
) -> List[BlockBase]:
    """Blocks for an image annotation, the error blocks when its image cannot be uploaded."""
    assert record.image is not None
    try:
        if uploader is None:
            raise ImageUploadError("no image uploader is configured")
        async with semaphore:
            url = await uploader.upload(record.image)
    except Exception as e:
        logger.warning(f"Failed to upload image of annotation {record.image.key!r}: {e}")
        return error_blocks(f"Failed to upload annotation image - {e}", icon)

    logger.debug(f"Uploaded image of annotation {record.image.key!r} to {url}")
    return image_blocks(record, url, icon)


# ------------------------------------------------------------------------------------------------
# NOTE CONVERSION
# ------------------------------------------------------------------------------------------------


async def convert_annotation_nodes(
    nodes: Sequence[HtmlNode], options: ConversionOptions
) -> List[BlockBase]:
    """Blocks for the top-level nodes of an annotation note, in document order.

    Images of distinct annotations are uploaded concurrently.
    """
    semaphore = asyncio.Semaphore(options.max_concurrent_uploads)
    icon = options.callout_icon

    parts: List[List[BlockBase]] = []
    uploads: Dict[int, Coroutine[Any, Any, List[BlockBase]]] = {}
    ordinary_nodes: List[HtmlNode] = []

    def flush_ordinary_nodes() -> None:
        if ordinary_nodes:
            parts.append(convert_top_level_nodes(ordinary_nodes))
            ordinary_nodes.clear()

    for node in nodes:
        if not is_annotation_paragraph(node):
            ordinary_nodes.append(node)
            continue

        flush_ordinary_nodes()
        record = extract_annotation(node)
        trace_logger.detail(f"annotation paragraph: {record}")  # type: ignore

        if record.image is None:
            parts.append(highlight_blocks(record, icon))
        else:
            uploads[len(parts)] = resolve_image_blocks(
                record, options.image_uploader, semaphore, icon
            )
            parts.append([])

    flush_ordinary_nodes()

    # -- results come back in the order the uploads were started, not completed --
    for index, image_annotation_blocks in zip(uploads, await asyncio.gather(*uploads.values())):
        parts[index] = image_annotation_blocks

    converted_blocks = [block for part in parts for block in part]
    return group_by_color(converted_blocks) if options.group_by_color else converted_blocks


def group_by_color(converted_blocks: Sequence[BlockBase]) -> List[BlockBase]:
    """Nest annotation blocks under one toggleable heading per callout color.

    An annotation is a callout and the blocks following it up to and including the next divider.
    Each section takes the place of the first annotation of its color and collects every later
    annotation of that color. Other blocks keep their own position at the top level.
    """
    grouped_blocks: List[BlockBase] = []
    sections: Dict[str, blocks.Heading] = {}
    current_section: Optional[blocks.Heading] = None

    for block in converted_blocks:
        if isinstance(block, blocks.Callout):
            current_section = sections.get(block.color)
            if current_section is None:
                current_section = sections[block.color] = blocks.Heading(
                    level=2,
                    rich_text=[RichText.from_text(section_title(block.color))],
                    is_toggleable=True,
                )
                grouped_blocks.append(current_section)

        if current_section is None:
            grouped_blocks.append(block)
            continue

        current_section.children.append(block)
        if isinstance(block, blocks.Divider):
            current_section = None

    return grouped_blocks


def _annotation_descriptor(node: HtmlNode) -> Dict[str, Any]:
    """The URL-encoded JSON `data-annotation` attribute of `node`, empty when absent or invalid."""
    value = node.get_attribute("data-annotation")
    if not value:
        return {}
    try:
        descriptor = json.loads(unquote(value))
    except ValueError:
        logger.debug(f"ignoring malformed data-annotation attribute: {value!r}")
        return {}
    return descriptor if isinstance(descriptor, dict) else {}
