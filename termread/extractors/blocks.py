"""Document builder: recursive tag -> node transform over the content root.

Block-level elements map onto headings, paragraphs, lists, code blocks,
tables, forms and anchors.  Paragraph bodies go through the inline walker.
Containers that look like index pages are diverted to
:mod:`termread.extractors.article_list`, and tables to
:mod:`termread.extractors.tables`.
"""

from __future__ import annotations

import logging

from bs4 import Tag
from bs4.element import PageElement

from termread import latex
from termread.extractors.article_list import (
    ARTICLE_SEPARATOR,
    article_data_to_list_item,
    extract_article_entry,
    extract_article_list,
    extract_news_card,
    find_child_article,
    should_extract_as_article_list,
)
from termread.extractors.dom import (
    SKIPPED_TAGS,
    collapse_whitespace,
    deduped_text,
    element_children,
    find_child_img,
    get_attr,
    is_text,
    preformatted_text,
    text_content,
)
from termread.extractors.metadata import extract_filename, truncate_description
from termread.extractors.navigation import NAV_TAGS
from termread.extractors.tables import extract_table, extract_table_row
from termread.items import Node, NodeType, link_node, text_node
from termread.settings import DEFAULT_OPTIONS, ParseOptions

logger = logging.getLogger(__name__)

_HEADING_KINDS: dict[str, NodeType] = {
    "h1": NodeType.HEADING1,
    "h2": NodeType.HEADING2,
    "h3": NodeType.HEADING3,
    "h4": NodeType.HEADING3,
    "h5": NodeType.HEADING3,
    "h6": NodeType.HEADING3,
}

# Containers walked transparently
_PASSTHROUGH_TAGS: frozenset[str] = frozenset({
    "main", "section", "div", "span", "center", "nobr", "tbody",
    "b", "i", "u", "font",
})

# Descendants that make an <a> a "card" wrapping block content
_BLOCK_CONTENT_TAGS: frozenset[str] = frozenset({
    "h1", "h2", "h3", "h4", "h5", "h6", "p", "div", "section", "article",
})

_INLINE_KINDS: dict[str, NodeType] = {
    "strong": NodeType.STRONG,
    "b": NodeType.STRONG,
    "em": NodeType.EMPHASIS,
    "i": NodeType.EMPHASIS,
    "mark": NodeType.MARK,
    "ins": NodeType.MARK_INSERT,
}

_KEPT_INPUT_TYPES: tuple[str, ...] = ("text", "search", "submit")

# Builder recursion levels below the content root; deeper subtrees are
# flattened to their text
MAX_NESTING_DEPTH = 100

_BLOCK_CONTENT_MAX_DEPTH = 5
_BLOCK_LINK_MAX_DEPTH = 6
_BLOCK_LINK_MAX_METADATA = 3
_BLOCK_LINK_DESCRIPTION_LEN = 120


# ---------------------------------------------------------------------------
# Shared node constructors
# ---------------------------------------------------------------------------

def image_node(src: str, alt: str = "") -> Node:
    """Build ``Image(Link(src, "[Image: ...]"))``.

    The label falls back from *alt* to the file name of *src*, then to
    "image".
    """
    label = alt or extract_filename(src) or "image"
    return Node(type=NodeType.IMAGE, children=[link_node(src, f"[Image: {label}]")])


def contains_block_content(tag: Tag) -> bool:
    """True when *tag* wraps headings, paragraphs or block containers."""

    def _has_block(node: Tag, depth: int) -> bool:
        if depth > _BLOCK_CONTENT_MAX_DEPTH:
            return False
        for child in element_children(node):
            if child.name in _BLOCK_CONTENT_TAGS or _has_block(child, depth + 1):
                return True
        return False

    return _has_block(tag, 0)


def extract_heading_link(tag: Tag, heading: Node) -> None:
    """Attach the first link below *tag* to *heading* as an empty Link.

    When the heading has no id of its own, the link's ``id`` (or legacy
    ``name``) is used instead.
    """
    a = tag.find("a")
    if a is None:
        return
    if not heading.id:
        heading.id = get_attr(a, "id") or get_attr(a, "name")
    heading.append(Node(type=NodeType.LINK, href=get_attr(a, "href")))


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class DocumentBuilder:
    """Walk a content root and append the resulting nodes to a parent node.

    Args:
        options: Extraction options.  The builder never changes them, so one
                 instance can be reused across documents.
    """

    def __init__(self, options: ParseOptions = DEFAULT_OPTIONS) -> None:
        self.options = options

    def build(self, root: Tag) -> Node:
        """Return a fresh ``Document`` node holding the content of *root*."""
        content = Node(type=NodeType.DOCUMENT)
        self.extract_content(root, content)
        logger.debug("built %d top-level node(s) from <%s>", len(content.children), root.name)
        return content

    # ------------------------------------------------------------------
    # Block level
    # ------------------------------------------------------------------

    def extract_content(self, tag: Tag, parent: Node, depth: int = 0) -> None:
        """Append the block-level nodes for the children of *tag* to *parent*.

        *depth* counts builder levels below the content root.  Past
        :data:`MAX_NESTING_DEPTH` the whole of *tag* becomes one paragraph.
        """
        if depth > MAX_NESTING_DEPTH:
            logger.debug("nesting limit reached in <%s>, flattening", tag.name)
            text = text_content(tag, self.options)
            if text:
                parent.append(Node(type=NodeType.PARAGRAPH, children=[text_node(text)]))
            return

        if should_extract_as_article_list(tag, self.options):
            logger.debug("article list detected in <%s>", tag.name)
            extract_article_list(tag, parent, self.options)
            return

        for child in tag.children:
            if isinstance(child, Tag):
                self._extract_element(child, parent, depth)
            elif is_text(child):
                self._extract_loose_text(str(child), parent)

    def _extract_loose_text(self, raw: str, parent: Node) -> None:
        text = raw.strip()
        if len(text) <= 1:
            return
        if self.options.latex_enabled and latex.contains_latex(text):
            text = latex.process_text(text)
        parent.append(Node(type=NodeType.PARAGRAPH, children=[text_node(text)]))

    def _extract_element(self, el: Tag, parent: Node, depth: int) -> None:
        name = el.name
        opts = self.options

        if name in _HEADING_KINDS or name == "summary":
            kind = _HEADING_KINDS.get(name, NodeType.HEADING3)
            heading = Node(type=kind, text=deduped_text(el, opts), id=get_attr(el, "id"))
            if name != "summary":
                extract_heading_link(el, heading)
            parent.append(heading)
        elif name == "p":
            self._append_paragraph(el, parent, depth)
        elif name == "blockquote":
            quote = Node(type=NodeType.BLOCKQUOTE, id=get_attr(el, "id"))
            self.extract_content(el, quote, depth + 1)
            parent.append(quote)
        elif name in ("ul", "ol"):
            self._append_list(el, parent, depth)
        elif name == "pre":
            parent.append(
                Node(type=NodeType.CODE_BLOCK, text=preformatted_text(el), id=get_attr(el, "id")),
            )
        elif name == "details":
            self.extract_details(el, parent, depth)
        elif name in NAV_TAGS or name in SKIPPED_TAGS:
            # Chrome was already pulled into Document.navigation
            return
        elif name == "img":
            src = get_attr(el, "src")
            if src:
                para = Node(type=NodeType.PARAGRAPH, children=[image_node(src, get_attr(el, "alt"))])
                parent.append(para)
        elif name == "article":
            if parent.children:
                parent.append(Node(type=NodeType.PARAGRAPH, text=ARTICLE_SEPARATOR))
            self.extract_content(el, parent, depth + 1)
        elif name == "table":
            if opts.tables_enabled:
                extract_table(el, parent, opts)
            else:
                self.extract_content(el, parent, depth + 1)
        elif name in _PASSTHROUGH_TAGS:
            self._extract_container(el, parent, depth)
        elif name == "tr":
            extract_table_row(el, parent, opts)
        elif name in ("td", "th"):
            self.extract_content(el, parent, depth + 1)
        elif name == "a":
            self.extract_standalone_link(el, parent)
        elif name == "form":
            self.extract_form(el, parent, depth)
        elif name == "input":
            self.extract_input(el, parent)

    def _append_paragraph(self, el: Tag, parent: Node, depth: int) -> None:
        para = Node(type=NodeType.PARAGRAPH, id=get_attr(el, "id"))
        self.extract_inline(el, para, depth + 1)
        parent.append(para)

    def _append_list(self, el: Tag, parent: Node, depth: int) -> None:
        list_node = Node(type=NodeType.LIST, id=get_attr(el, "id"))
        self.extract_list(el, list_node, depth + 1)
        parent.append(list_node)

    def _extract_container(self, el: Tag, parent: Node, depth: int) -> None:
        if get_attr(el, "role") == "navigation":
            return
        element_id = get_attr(el, "id")
        if element_id:
            parent.append(Node(type=NodeType.ANCHOR, id=element_id))
        # extract_content runs the article-list check itself
        self.extract_content(el, parent, depth + 1)

    def extract_details(self, details: Tag, parent: Node, depth: int = 0) -> None:
        """Render a ``<details>`` disclosure widget fully expanded."""
        summary = details.find("summary", recursive=False)
        if summary is not None:
            heading = Node(
                type=NodeType.HEADING3,
                text=deduped_text(summary, self.options),
                id=get_attr(summary, "id"),
            )
            extract_heading_link(summary, heading)
            parent.append(heading)

        for child in element_children(details):
            if child.name == "summary":
                continue
            if child.name in ("ul", "ol"):
                self._append_list(child, parent, depth)
            elif child.name == "p":
                self._append_paragraph(child, parent, depth)
            else:
                self.extract_content(child, parent, depth + 1)

    def extract_standalone_link(self, a: Tag, parent: Node) -> None:
        anchor_id = get_attr(a, "id") or get_attr(a, "name")
        if anchor_id:
            parent.append(Node(type=NodeType.ANCHOR, id=anchor_id))

        href = get_attr(a, "href")
        if href and contains_block_content(a):
            self.extract_block_link(a, href, parent)
            return

        text = text_content(a, self.options)
        if not text:
            img = find_child_img(a)
            alt = get_attr(img, "alt") if img is not None else ""
            if alt:
                text = f"[{alt}]"
        text = text or href
        if text and href:
            parent.append(Node(type=NodeType.PARAGRAPH, children=[link_node(href, text)]))

    def extract_block_link(self, a: Tag, href: str, parent: Node) -> None:
        """Split a card-style ``<a>`` into title link, description and metadata.

        Only the title carries the href.  The first heading becomes the
        title; a paragraph over twenty characters becomes the description;
        short paragraphs, spans and ``<time>`` elements become metadata.
        """
        title = ""
        description = ""
        metadata: list[str] = []

        def _walk(node: Tag, depth: int) -> None:
            nonlocal title, description
            if depth > _BLOCK_LINK_MAX_DEPTH:
                return
            for child in element_children(node):
                name = child.name
                if name in _HEADING_KINDS:
                    if not title:
                        title = text_content(child, self.options)
                elif name == "p":
                    text = text_content(child, self.options)
                    if not description and len(text) > 20:
                        description = text
                    elif 0 < len(text) < 100:
                        metadata.append(text)
                elif name in ("span", "time"):
                    text = text_content(child, self.options)
                    if 0 < len(text) < 100:
                        metadata.append(text)
                elif name in ("img", "picture", "figure", "svg"):
                    continue
                else:
                    _walk(child, depth + 1)

        _walk(a, 0)

        if not title and description:
            title, description = description, ""

        if not title:
            text = text_content(a, self.options)
            if text:
                parent.append(Node(type=NodeType.PARAGRAPH, children=[link_node(href, text)]))
            return

        para = Node(type=NodeType.PARAGRAPH, children=[link_node(href, title)])
        if description:
            desc = truncate_description(description, _BLOCK_LINK_DESCRIPTION_LEN)
            para.append(text_node("\n" + desc))

        kept: list[str] = []
        for item in metadata:
            item = item.strip()
            if len(item) > 2 and item not in kept and item != title:
                kept.append(item)
        if kept:
            para.append(text_node("\n" + " · ".join(kept[:_BLOCK_LINK_MAX_METADATA])))
        parent.append(para)

    def extract_form(self, form: Tag, parent: Node, depth: int = 0) -> None:
        node = Node(
            type=NodeType.FORM,
            form_action=get_attr(form, "action"),
            form_method=get_attr(form, "method").upper() or "GET",
        )
        self.extract_content(form, node, depth + 1)
        parent.append(node)

    def extract_input(self, el: Tag, parent: Node) -> None:
        input_type = get_attr(el, "type") or "text"
        if input_type not in _KEPT_INPUT_TYPES:
            return
        parent.append(Node(
            type=NodeType.INPUT,
            input_name=get_attr(el, "name"),
            input_type=input_type,
            input_value=get_attr(el, "value"),
            text=get_attr(el, "placeholder") or get_attr(el, "title"),
        ))

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def extract_list(self, list_tag: Tag, list_node: Node, depth: int = 0) -> None:
        """Append one ListItem per ``<li>``.

        Items wrapping an ``<article>`` or matching the news-card pattern
        become structured entries; the rest are walked inline.
        """
        for li in element_children(list_tag):
            if li.name != "li":
                continue
            article = find_child_article(li)
            if article is not None:
                data = extract_article_entry(article, self.options)
                if data.title:
                    list_node.append(article_data_to_list_item(data))
                    continue

            data = extract_news_card(li, self.options)
            if data.title:
                list_node.append(article_data_to_list_item(data))
                continue

            item = Node(type=NodeType.LIST_ITEM)
            self.extract_inline(li, item, depth + 1)
            list_node.append(item)

    # ------------------------------------------------------------------
    # Inline level
    # ------------------------------------------------------------------

    def extract_inline(self, tag: Tag, parent: Node, depth: int = 0) -> None:
        """Append inline nodes for the children of *tag*; whitespace collapses.

        Past :data:`MAX_NESTING_DEPTH` the text of *tag* is appended as is.
        """
        if depth > MAX_NESTING_DEPTH:
            text = text_content(tag, self.options)
            if text:
                parent.append(text_node(text))
            return

        for child in tag.children:
            if is_text(child):
                self._inline_text(child, parent)
            elif isinstance(child, Tag):
                self._inline_element(child, parent, depth)

    def _inline_text(self, child: PageElement, parent: Node) -> None:
        text = collapse_whitespace(str(child))
        if not text:
            return
        if self.options.latex_enabled and latex.contains_latex(text):
            text = latex.process_text(text)
        parent.append(text_node(text))

    def _inline_element(self, el: Tag, parent: Node, depth: int) -> None:
        name = el.name
        if name == "a":
            link = Node(type=NodeType.LINK, href=get_attr(el, "href"))
            self.extract_inline(el, link, depth + 1)
            parent.append(link)
        elif name in _INLINE_KINDS:
            node = Node(type=_INLINE_KINDS[name])
            self.extract_inline(el, node, depth + 1)
            parent.append(node)
        elif name == "code":
            parent.append(Node(type=NodeType.CODE, text=text_content(el, self.options)))
        elif name == "img":
            src = get_attr(el, "src")
            if src:
                parent.append(image_node(src, get_attr(el, "alt")))
        elif name in SKIPPED_TAGS:
            return
        elif name == "math" and self.options.latex_enabled:
            text = text_content(el, self.options)
            if text:
                parent.append(text_node(text))
        elif name in ("ul", "ol"):
            list_node = Node(type=NodeType.LIST)
            self.extract_list(el, list_node, depth + 1)
            parent.append(list_node)
        else:
            self.extract_inline(el, parent, depth + 1)
