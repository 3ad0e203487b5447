# pyright: reportPrivateUsage=false

"""Provides the read-only document-tree view the converter works against.

The converter never touches `lxml` directly. It sees the note through the small `HtmlNode`
capability interface defined here: node kind, tag name, class membership, attribute lookup,
inline style, children and text content. This keeps the conversion logic independent of any
particular DOM implementation; tests can drive it with an in-memory fake tree.

The `lxml` implementation is a Custom Element Class (`HtmlElement`) registered as the default
element class of a dedicated `HTMLParser`, so every element of a parsed note already speaks the
interface. `lxml` has no text nodes. Text lives in the `.text` of an element and in the `.tail`
of each child, for example:

    <p>Text <b>bold child</b> tail of child</p>

`p.text` is "Text " and `b.tail` is " tail of child". `HtmlElement.child_nodes` re-interleaves
those strings as `HtmlText` nodes so child nodes come out in document order, the way a browser
DOM presents them.
"""

from __future__ import annotations

from typing import Callable, Iterator, Mapping, NamedTuple, Optional, Sequence, cast

from lxml import etree
from typing_extensions import Protocol

from notero.errors import HtmlParseError

# ------------------------------------------------------------------------------------------------
# CAPABILITY INTERFACE
# ------------------------------------------------------------------------------------------------


class HtmlNode(Protocol):
    """A borrowed, read-only view of one node in a parsed HTML document."""

    @property
    def is_text(self) -> bool: ...

    @property
    def tag_name(self) -> str:
        """Lower-case tag name, the empty string for a text node."""
        ...

    def has_class(self, class_name: str) -> bool: ...

    def get_attribute(self, name: str) -> Optional[str]: ...

    @property
    def inline_style(self) -> Mapping[str, str]:
        """CSS declarations of the `style` attribute, property names lower-cased."""
        ...

    @property
    def parent_tag_name(self) -> Optional[str]: ...

    @property
    def child_nodes(self) -> Sequence[HtmlNode]:
        """Text and element children, interleaved in document order."""
        ...

    @property
    def element_children(self) -> Sequence[HtmlNode]: ...

    @property
    def text_content(self) -> str: ...


def parse_inline_style(style: str) -> dict[str, str]:
    """Mapping of each declaration in a `style` attribute value like "color: red; x: y"."""
    declarations = (declaration.partition(":") for declaration in style.split(";"))
    return {
        name.strip().lower(): value.strip()
        for name, sep, value in declarations
        if sep and name.strip()
    }


# ------------------------------------------------------------------------------------------------
# LXML IMPLEMENTATION
# ------------------------------------------------------------------------------------------------


class HtmlText(NamedTuple):
    """A text node, synthesized from the `.text` or `.tail` of an `lxml` element."""

    content: str

    @property
    def is_text(self) -> bool:
        return True

    @property
    def tag_name(self) -> str:
        return ""

    def has_class(self, class_name: str) -> bool:
        return False

    def get_attribute(self, name: str) -> Optional[str]:
        return None

    @property
    def inline_style(self) -> Mapping[str, str]:
        return {}

    @property
    def parent_tag_name(self) -> Optional[str]:
        return None

    @property
    def child_nodes(self) -> Sequence[HtmlNode]:
        return ()

    @property
    def element_children(self) -> Sequence[HtmlNode]:
        return ()

    @property
    def text_content(self) -> str:
        return self.content


class HtmlElement(etree.ElementBase):
    """Custom element-class giving every parsed element the `HtmlNode` interface."""

    @property
    def is_text(self) -> bool:
        return False

    @property
    def tag_name(self) -> str:
        return self.tag.lower() if isinstance(self.tag, str) else ""

    def has_class(self, class_name: str) -> bool:
        return class_name in (self.get("class") or "").split()

    def get_attribute(self, name: str) -> Optional[str]:
        return self.get(name)

    @property
    def inline_style(self) -> Mapping[str, str]:
        return parse_inline_style(self.get("style") or "")

    @property
    def parent_tag_name(self) -> Optional[str]:
        parent = self.getparent()
        return parent.tag_name if isinstance(parent, HtmlElement) else None

    @property
    def child_nodes(self) -> Sequence[HtmlNode]:
        nodes: list[HtmlNode] = []
        if self.text:
            nodes.append(HtmlText(self.text))
        for child in self:
            # -- processing-instructions and the like are skipped but their tail is not --
            if isinstance(child, HtmlElement):
                nodes.append(child)
            if child.tail:
                nodes.append(HtmlText(child.tail))
        return nodes

    @property
    def element_children(self) -> Sequence[HtmlNode]:
        return [child for child in self if isinstance(child, HtmlElement)]

    @property
    def text_content(self) -> str:
        return "".join(self.itertext())


CONTENT_WITHOUT_TEXT_TAGS = frozenset({"hr", "img"})
"""Elements rendered as a block even though they hold no text."""

html_parser = etree.HTMLParser(remove_comments=True)
# -- every element, whatever its tag, is instantiated as an HtmlElement --
html_parser.set_element_class_lookup(etree.ElementDefaultClassLookup(element=HtmlElement))


def parse_html(html: str) -> Optional[HtmlElement]:
    """Root `<html>` element of the document parsed from `html`.

    Returns None when there is no document at all, like for whitespace or a lone comment. Raises
    `HtmlParseError` when `lxml` fails to parse the text.
    """
    if not html.strip():
        return None

    try:
        # NOTE - `lxml` will not parse a `str` that includes an XML encoding declaration. This is
        # not valid HTML but browsers accept it so we work around it by parsing UTF-8 bytes.
        try:
            root = etree.fromstring(html, html_parser)
        except ValueError:
            root = etree.fromstring(html.encode("utf-8"), html_parser)
    except etree.LxmlError as e:
        raise HtmlParseError(str(e)) from e

    if root is None:
        return None

    # -- content of these is never part of the rendered note --
    etree.strip_elements(
        root, ["link", "meta", "noscript", "script", "style", "title"], with_tail=False
    )

    return cast(HtmlElement, root)


def find_container(root: Optional[HtmlElement]) -> Optional[HtmlNode]:
    """The element whose children are the top-level content of the note.

    Starts at `<body>` and descends through wrapper `<div>` elements, like the
    `<div data-schema-version="9">` Zotero wraps every note in, that hold a single child element
    and no text of their own. Returns None when there is no document or nothing in it would be
    rendered, like a note holding only line breaks.
    """
    if root is None:
        return None

    body = root.find(".//body")
    container: HtmlNode = cast(HtmlElement, body) if body is not None else root

    while True:
        children = container.element_children
        if len(children) != 1 or children[0].tag_name != "div" or _has_own_text(container):
            break
        container = children[0]

    return container if _has_renderable_content(container) else None


def _has_own_text(node: HtmlNode) -> bool:
    return any(child.is_text and child.text_content.strip() for child in node.child_nodes)


def _has_renderable_content(node: HtmlNode) -> bool:
    if node.text_content.strip():
        return True
    return find_descendant(node, lambda d: d.tag_name in CONTENT_WITHOUT_TEXT_TAGS) is not None


# ------------------------------------------------------------------------------------------------
# TREE SEARCH
# ------------------------------------------------------------------------------------------------


def iter_descendants(node: HtmlNode) -> Iterator[HtmlNode]:
    """Generate each element below `node`, depth-first in document order."""
    for child in node.element_children:
        yield child
        yield from iter_descendants(child)


def find_descendant(
    node: HtmlNode, predicate: Callable[[HtmlNode], bool]
) -> Optional[HtmlNode]:
    """First element below `node` satisfying `predicate`, None when there is none."""
    return next((d for d in iter_descendants(node) if predicate(d)), None)


def has_class(class_name: str) -> Callable[[HtmlNode], bool]:
    return lambda node: node.has_class(class_name)


def has_tag(tag_name: str) -> Callable[[HtmlNode], bool]:
    return lambda node: node.tag_name == tag_name


def text_after(node: HtmlNode, predicate: Callable[[HtmlNode], bool]) -> Optional[str]:
    """Text that follows the first descendant matching `predicate`, up to the end of `node`.

    Returns None when no descendant matches. Text nested inside the matching element itself is not
    included.
    """
    texts: list[str] = []
    found = False

    def walk(n: HtmlNode) -> None:
        nonlocal found
        for child in n.child_nodes:
            if found:
                texts.append(child.text_content)
            elif child.is_text:
                continue
            elif predicate(child):
                found = True
            else:
                walk(child)

    walk(node)
    return "".join(texts) if found else None
