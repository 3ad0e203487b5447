# pyright: reportPrivateUsage=false

"""Test suite for `notero.convert.annotation_notes` module."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import pytest

from notero.convert.annotation_notes import (
    AnnotationRecord,
    ImageAnnotationRef,
    convert_annotation_nodes,
    empty_annotation_blocks,
    extract_annotation,
    group_by_color,
    highlight_blocks,
    highlighted_passage,
    is_annotation_note,
    is_annotation_paragraph,
    split_comment_and_tags,
    tag_rich_text,
)
from notero.convert.dom import HtmlElement, find_container, parse_html
from notero.convert.options import ConversionOptions
from notero.errors import ImageUploadError
from notero.notion.interfaces import BlockBase
from notero.notion.types.blocks import Callout, Divider, EmojiIcon, Heading, Image, Paragraph
from notero.notion.types.rich_text import Annotations, RichText

CODE = Annotations(code=True)


def text(content: str, annotations: Annotations = Annotations()) -> RichText:
    return RichText.from_text(content, annotations)


# -- is_annotation_note() ------------------------


@pytest.mark.parametrize(
    ("title", "expected_value"),
    [
        ("Annotations (3/1/2024, 10:12:45 AM)", True),
        ("Extracted Annotations", True),
        ("Meeting notes", False),
        ("annotations", False),
        ("", False),
    ],
)
def test_is_annotation_note_recognizes_the_title_of_an_annotation_note(
    title: str, expected_value: bool
):
    assert is_annotation_note(title) is expected_value


# -- is_annotation_paragraph() -------------------


@pytest.mark.parametrize(
    ("html", "expected_value"),
    [
        ('<p><span class="highlight">"x"</span></p>', True),
        ('<p><img data-attachment-key="ABCD"></p>', True),
        ("<p>just text</p>", False),
        ('<div><span class="highlight">"x"</span></div>', False),
    ],
)
def test_is_annotation_paragraph_recognizes_a_highlight_or_image_paragraph(
    html: str, expected_value: bool
):
    container = find_container(parse_html(f"{html}<p>sibling</p>"))
    assert container is not None

    assert is_annotation_paragraph(container.element_children[0]) is expected_value


# -- split_comment_and_tags() --------------------


@pytest.mark.parametrize(
    ("remaining_text", "expected_value"),
    [
        (" interesting #theory #review\n", ("interesting", ["theory", "review"])),
        ("just a comment", ("just a comment", [])),
        ("#only #tags", ("", ["only", "tags"])),
        ("  ## a # ", ("", ["a"])),
        ("", ("", [])),
    ],
)
def test_split_comment_and_tags_separates_the_comment_from_its_tags(
    remaining_text: str, expected_value: tuple
):
    assert split_comment_and_tags(remaining_text) == expected_value


# -- extract_annotation() ------------------------


class Describe_extract_annotation:
    """Unit-test suite for `notero.convert.annotation_notes.extract_annotation()`."""

    def it_extracts_a_highlight_annotation(self):
        paragraph = _paragraph(_highlight_html())

        assert extract_annotation(paragraph) == AnnotationRecord(
            highlighted_text="Key idea",
            comment="interesting",
            tags=["theory", "review"],
            color="yellow_background",
            image=None,
        )

    @pytest.mark.parametrize(
        ("color", "expected_value"),
        [
            ("#5fb236", "green_background"),
            ("#FF6666", "red_background"),
            ("#e56eee80", "pink_background"),
            ("rgb(46, 168, 229)", "blue_background"),
            ("#123456", "yellow_background"),
        ],
    )
    def it_resolves_the_highlight_color_from_the_inline_style(
        self, color: str, expected_value: str
    ):
        paragraph = _paragraph(_highlight_html(color=color, descriptor_color=None))

        assert extract_annotation(paragraph).color == expected_value

    def and_from_the_annotation_descriptor_when_there_is_no_inline_style(self):
        paragraph = _paragraph(_highlight_html(color=None, descriptor_color="#a28ae5"))

        assert extract_annotation(paragraph).color == "purple_background"

    def it_uses_the_text_after_the_highlight_when_there_is_no_citation(self):
        paragraph = _paragraph('<p><span class="highlight">“Key idea”</span> note #tag</p>')

        record = extract_annotation(paragraph)

        assert record.highlighted_text == "Key idea"
        assert record.comment == "note"
        assert record.tags == ["tag"]
        assert record.color == "yellow_background"

    @pytest.mark.parametrize(
        ("marker_html", "expected_value"),
        [
            # -- quotes outside the inner span, the usual Zotero layout --
            ('"<span style="background-color: #ffd400">Key idea</span>"', "Key idea"),
            # -- quotes inside the inner span --
            ('<span style="background-color: #ffd400">“Key idea”</span>', "Key idea"),
            # -- no inner span --
            ("«Key idea»", "Key idea"),
            # -- no quotes, every character is part of the passage --
            ('<span style="background-color: #ffd400">Key idea.</span>', "Key idea."),
            ("x", "x"),
            ("'tis", "'tis"),
        ],
    )
    def it_takes_the_passage_from_the_inner_span_without_its_quotes(
        self, marker_html: str, expected_value: str
    ):
        marker = _element(f'<p><span class="highlight">{marker_html}</span></p>', "span")

        assert highlighted_passage(marker) == expected_value

    def it_extracts_an_image_annotation(self):
        paragraph = _paragraph(_image_html(key="IMG1", color="#2ea8e5", comment="figure #data"))

        record = extract_annotation(paragraph)

        assert record.image is not None
        assert record.image.key == "IMG1"
        assert record.comment == "figure"
        assert record.tags == ["data"]
        assert record.color == "blue_background"


class DescribeImageAnnotationRef:
    """Unit-test suite for `notero.convert.annotation_notes.ImageAnnotationRef`."""

    def it_reads_the_image_reference_from_an_img_element(self):
        img = _element(_image_html(key="IMG1", color="#ff6666"), "img")

        ref = ImageAnnotationRef.from_element(img)

        assert ref.key == "IMG1"
        assert ref.attachment_key == "ATT1"
        assert ref.color == "#ff6666"
        assert ref.raw["annotationKey"] == "IMG1"

    def and_it_takes_the_attachment_key_from_the_attachment_uri_when_needed(self):
        descriptor = _descriptor(
            annotationKey="K", attachmentURI="http://zotero.org/users/1/items/XYZ"
        )
        img = _element(f'<p><img data-annotation="{descriptor}"></p>', "img")

        assert ImageAnnotationRef.from_element(img).attachment_key == "XYZ"

    def but_it_tolerates_a_malformed_descriptor(self):
        img = _element(
            '<p><img data-attachment-key="ATT" data-annotation="%7Bnot-json"></p>', "img"
        )

        ref = ImageAnnotationRef.from_element(img)

        assert ref == ImageAnnotationRef(key="", attachment_key="ATT", color=None, raw={})


# -- BLOCKS --------------------------------------


def test_tag_rich_text_separates_code_formatted_tags_with_spaces():
    assert tag_rich_text(["theory", "review"]) == [
        text("#theory", CODE),
        text(" "),
        text("#review", CODE),
    ]
    assert tag_rich_text([]) == []


def test_highlight_blocks_are_a_callout_a_paragraph_and_a_divider():
    record = AnnotationRecord("Key idea", "interesting", ["theory", "review"], "yellow_background")

    blocks = highlight_blocks(record, EmojiIcon("💡"))

    assert blocks == [
        Callout(rich_text=[text("Key idea")], color="yellow_background", icon=EmojiIcon("💡")),
        Paragraph(
            rich_text=[
                text("interesting\n"),
                text("#theory", CODE),
                text(" "),
                text("#review", CODE),
            ]
        ),
        Divider(),
    ]


def test_empty_annotation_blocks_are_a_placeholder_callout_a_paragraph_and_a_divider():
    assert empty_annotation_blocks() == [
        Callout(rich_text=[text("No annotations found")]),
        Paragraph(),
        Divider(),
    ]


# -- convert_annotation_nodes() ------------------


class Describe_convert_annotation_nodes:
    """Unit-test suite for `notero.convert.annotation_notes.convert_annotation_nodes()`."""

    def it_renders_each_annotation_paragraph_and_converts_the_others(self):
        blocks = _convert(f"<h1>Annotations</h1>{_highlight_html()}<p>plain</p>")

        assert blocks == [
            Heading(level=1, rich_text=[text("Annotations")]),
            Callout(rich_text=[text("Key idea")], color="yellow_background"),
            Paragraph(
                rich_text=[
                    text("interesting\n"),
                    text("#theory", CODE),
                    text(" "),
                    text("#review", CODE),
                ]
            ),
            Divider(),
            Paragraph(rich_text=[text("plain")]),
        ]

    def it_embeds_an_uploaded_image_in_the_callout(self):
        uploader = FakeUploader()

        blocks = _convert(_image_html(key="IMG1", comment="figure #data"), uploader)

        assert blocks == [
            Callout(
                rich_text=[text("figure")],
                color="blue_background",
                children=[Image(url="https://img.example.com/IMG1.png")],
            ),
            Paragraph(rich_text=[text("#data", CODE)]),
            Divider(),
        ]
        assert uploader.uploaded == ["IMG1"]

    def and_it_omits_the_tag_paragraph_when_the_image_has_no_tags(self):
        blocks = _convert(_image_html(key="IMG1", comment="figure"), FakeUploader())

        assert [type(b) for b in blocks] == [Callout, Divider]

    def it_substitutes_error_blocks_when_an_image_upload_fails(
        self, caplog: pytest.LogCaptureFixture
    ):
        uploader = FakeUploader(fail_keys={"IMG1"})

        with caplog.at_level(logging.WARNING, logger="notero"):
            blocks = _convert(_image_html(key="IMG1") + _image_html(key="IMG2"), uploader)

        assert blocks[:3] == [
            Callout(
                rich_text=[text("Failed to upload annotation image - upload of IMG1 failed")],
                color="red_background",
            ),
            Paragraph(),
            Divider(),
        ]
        # -- the other annotations are not affected --
        assert isinstance(blocks[3], Callout)
        assert blocks[3].children == [Image(url="https://img.example.com/IMG2.png")]
        assert "Failed to upload image of annotation 'IMG1'" in caplog.text

    def and_when_there_is_no_uploader(self):
        blocks = _convert(_image_html(key="IMG1"), uploader=None)

        assert blocks == [
            Callout(
                rich_text=[
                    text("Failed to upload annotation image - no image uploader is configured")
                ],
                color="red_background",
            ),
            Paragraph(),
            Divider(),
        ]

    def it_keeps_document_order_whatever_order_uploads_complete_in(self):
        uploader = FakeUploader(delays={"IMG1": 0.05, "IMG2": 0.02, "IMG3": 0})
        html = "".join(_image_html(key=key) for key in ("IMG1", "IMG2", "IMG3"))

        blocks = _convert(html, uploader)

        assert uploader.completed == ["IMG3", "IMG2", "IMG1"]
        assert [b.children[0].url for b in blocks if isinstance(b, Callout)] == [
            "https://img.example.com/IMG1.png",
            "https://img.example.com/IMG2.png",
            "https://img.example.com/IMG3.png",
        ]

    def it_limits_the_number_of_concurrent_uploads(self):
        uploader = FakeUploader(delays={f"IMG{i}": 0.01 for i in range(5)})
        html = "".join(_image_html(key=f"IMG{i}") for i in range(5))

        _convert(html, uploader, max_concurrent_uploads=2)

        assert uploader.max_in_flight == 2

    def it_groups_the_annotations_by_color_when_asked(self):
        html = (
            "<p>intro</p>"
            + _highlight_html(passage="a", color="#ffd400")
            + _highlight_html(passage="b", color="#5fb236")
            + _highlight_html(passage="c", color="#ffd400")
        )

        blocks = _convert(html, group_by_color=True)

        assert blocks[0] == Paragraph(rich_text=[text("intro")])
        assert [b.rich_text[0].plain_text for b in blocks[1:]] == [
            "Key Ideas",
            "Supporting Evidence",
        ]

    def and_it_leaves_the_headings_of_the_reader_outside_the_color_sections(self):
        html = (
            "<h1>Annotations</h1>"
            + _highlight_html(passage="a", color="#ffd400")
            + "<h2>Chapter 2 notes</h2>"
            + _highlight_html(passage="b", color="#5fb236")
        )

        blocks = _convert(html, group_by_color=True)

        assert [b.rich_text[0].plain_text for b in blocks] == [
            "Annotations",
            "Key Ideas",
            "Chapter 2 notes",
            "Supporting Evidence",
        ]
        assert [type(b) for b in blocks[1].children] == [Callout, Paragraph, Divider]
        assert blocks[2].children == []
        assert [type(b) for b in blocks[3].children] == [Callout, Paragraph, Divider]


# -- group_by_color() ----------------------------


class Describe_group_by_color:
    """Unit-test suite for `notero.convert.annotation_notes.group_by_color()`."""

    def it_nests_annotations_under_a_heading_per_color_in_order_of_appearance(self):
        intro = Paragraph(rich_text=[text("intro")])
        yellow_1 = _triple("yellow_background")
        green = _triple("green_background")
        yellow_2 = _triple("yellow_background")

        blocks = group_by_color([intro, *yellow_1, *green, *yellow_2])

        assert blocks == [
            intro,
            Heading(
                level=2,
                rich_text=[text("Key Ideas")],
                is_toggleable=True,
                children=[*yellow_1, *yellow_2],
            ),
            Heading(
                level=2,
                rich_text=[text("Supporting Evidence")],
                is_toggleable=True,
                children=green,
            ),
        ]

    def and_it_titles_colors_without_a_fixed_title_generically(self):
        blocks = group_by_color(_triple("brown_background"))

        assert len(blocks) == 1
        assert isinstance(blocks[0], Heading)
        assert blocks[0].rich_text == [text("Brown Highlights")]
        assert blocks[0].to_dict()["heading_2"]["is_toggleable"] is True

    def it_keeps_blocks_between_annotations_in_place_at_the_top_level(self):
        yellow = _triple("yellow_background")
        chapter = Heading(level=2, rich_text=[text("Chapter 2")])
        green = _triple("green_background")
        outro = Paragraph(rich_text=[text("outro")])

        blocks = group_by_color([*yellow, chapter, *green, outro])

        assert [type(b) for b in blocks] == [Heading, Heading, Heading, Paragraph]
        assert blocks[0].children == yellow
        assert blocks[1] is chapter
        assert blocks[1].children == []
        assert blocks[2].children == green
        assert blocks[3] is outro

    def and_a_later_annotation_joins_the_section_of_its_color(self):
        yellow_1 = _triple("yellow_background")
        note = Paragraph(rich_text=[text("note")])
        yellow_2 = _triple("yellow_background")

        blocks = group_by_color([*yellow_1, note, *yellow_2])

        assert len(blocks) == 2
        assert blocks[0].children == [*yellow_1, *yellow_2]
        assert blocks[1] is note

    def it_leaves_a_note_without_annotations_unchanged(self):
        blocks: List[BlockBase] = [Paragraph(rich_text=[text("a")]), Divider()]

        assert group_by_color(blocks) == blocks


# -- module-level fixtures and helpers -----------------------------------------------------------


class FakeUploader:
    """Image uploader recording what it is asked to do."""

    def __init__(
        self, delays: Optional[Dict[str, float]] = None, fail_keys: Optional[set] = None
    ):
        self._delays = delays or {}
        self._fail_keys = fail_keys or set()
        self.uploaded: List[str] = []
        self.completed: List[str] = []
        self.max_in_flight = 0
        self._in_flight = 0

    async def upload(self, ref: ImageAnnotationRef) -> str:
        self.uploaded.append(ref.key)
        self._in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            await asyncio.sleep(self._delays.get(ref.key, 0))
            if ref.key in self._fail_keys:
                raise ImageUploadError(f"upload of {ref.key} failed")
            self.completed.append(ref.key)
            return f"https://img.example.com/{ref.key}.png"
        finally:
            self._in_flight -= 1


def _convert(
    html: str,
    uploader: Optional[FakeUploader] = None,
    group_by_color: bool = False,
    max_concurrent_uploads: int = 4,
) -> List[BlockBase]:
    container = find_container(parse_html(f'<div data-schema-version="9">{html}</div>'))
    assert container is not None
    options = ConversionOptions.new(
        is_annotation=True,
        group_by_color=group_by_color,
        image_uploader=uploader,
        callout_icon="",
        max_concurrent_uploads=max_concurrent_uploads,
    )
    return asyncio.run(convert_annotation_nodes(container.child_nodes, options))


def _descriptor(**fields: Any) -> str:
    return quote(json.dumps(fields))


def _element(html: str, tag_name: str) -> HtmlElement:
    element = parse_html(html).find(f".//{tag_name}")
    assert isinstance(element, HtmlElement)
    return element


def _highlight_html(
    passage: str = "Key idea",
    color: Optional[str] = "#ffd400",
    descriptor_color: Optional[str] = "#ffd400",
    comment: str = "interesting #theory #review",
) -> str:
    fields = {"annotationKey": "HL1"}
    if descriptor_color:
        fields["color"] = descriptor_color
    style = f' style="background-color: {color}"' if color else ""
    return (
        f'<p><span class="highlight" data-annotation="{_descriptor(**fields)}">'
        f'"<span{style}>{passage}</span>"</span> '
        f'<span class="citation">(<span class="citation-item">Doe, 2020, p. 3</span>)</span>'
        f" {comment}</p>"
    )


def _image_html(key: str, color: str = "#2ea8e5", comment: str = "") -> str:
    descriptor = _descriptor(
        annotationKey=key,
        attachmentURI="http://zotero.org/users/local/abc/items/ATT1",
        color=color,
        type="image",
    )
    return (
        f'<p><img data-attachment-key="ATT1" data-annotation="{descriptor}"><br>'
        f'<span class="citation">(<span class="citation-item">Doe, 2020</span>)</span>'
        f" {comment}</p>"
    )


def _paragraph(html: str) -> HtmlElement:
    return _element(html, "p")


def _triple(color: str) -> List[BlockBase]:
    return [Callout(rich_text=[text(color)], color=color), Paragraph(), Divider()]
