"""Table classification.

Order of checks:

1. ``role="navigation"`` tables are dropped.
2. Tables with ``tr.athing`` rows are forum/aggregator listings: each title
   row becomes a linked paragraph with an inline "(score, comments)" suffix.
3. Data tables (any ``<th>``, or at least two rows sharing the same cell
   count of two or more) keep their Table/TableRow/TableCell structure.
4. Everything else is a layout table and is flattened row by row.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterator

from bs4 import Tag

from termread.extractors.dom import element_children, get_attr, iter_elements, text_content
from termread.items import Node, NodeType, link_node, text_node
from termread.settings import DEFAULT_OPTIONS, ParseOptions

logger = logging.getLogger(__name__)

_SECTION_TAGS = ("thead", "tbody", "tfoot")
_CELL_TAGS = ("td", "th")


def is_navigation_table(table: Tag) -> bool:
    return get_attr(table, "role") == "navigation"


def _iter_rows(node: Tag) -> Iterator[Tag]:
    """Yield the rows of *node*, looking through thead/tbody/tfoot."""
    stack = list(reversed(list(element_children(node))))
    while stack:
        child = stack.pop()
        if child.name == "tr":
            yield child
        elif child.name in _SECTION_TAGS:
            stack.extend(reversed(list(element_children(child))))


def _cells(row: Tag) -> list[Tag]:
    return [c for c in element_children(row) if c.name in _CELL_TAGS]


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def is_forum_table(table: Tag) -> bool:
    """True if any row below *table* has a class containing "athing"."""
    return any("athing" in get_attr(tr, "class") for tr in table.find_all("tr"))


def is_data_table(table: Tag) -> bool:
    rows = list(_iter_rows(table))
    if any(cell.name == "th" for row in rows for cell in _cells(row)):
        return True
    if len(rows) < 2:
        return False
    cell_counts = Counter(len(_cells(row)) for row in rows)
    return any(count >= 2 and n_rows >= 2 for count, n_rows in cell_counts.items())


# ---------------------------------------------------------------------------
# Forum / aggregator tables
# ---------------------------------------------------------------------------

def _collect_forum_rows(node: Tag) -> list[Tag]:
    """Collect title, spacer and metadata rows, descending into nested tables."""
    rows: list[Tag] = []
    stack = list(reversed(list(element_children(node))))
    while stack:
        child = stack.pop()
        if child.name == "tr":
            klass = get_attr(child, "class")
            if "athing" in klass or "spacer" in klass:
                rows.append(child)
            elif rows and "athing" in get_attr(rows[-1], "class"):
                rows.append(child)
        elif child.name not in ("table", *_SECTION_TAGS, *_CELL_TAGS):
            continue
        stack.extend(reversed(list(element_children(child))))
    return rows


def _forum_title_line(row: Tag, options: ParseOptions) -> tuple[str, str]:
    """Return (title, href) of the first link directly inside ``.titleline``."""
    for span in row.find_all("span"):
        if "titleline" not in get_attr(span, "class"):
            continue
        for child in element_children(span):
            if child.name == "a":
                return text_content(child, options), get_attr(child, "href")
    return "", ""


def _forum_metadata(row: Tag, options: ParseOptions) -> str:
    score = ""
    comments = ""
    for tag in row.find_all(["span", "a"]):
        if tag.name == "span" and "score" in get_attr(tag, "class"):
            score = text_content(tag, options)
        elif tag.name == "a":
            text = text_content(tag, options)
            if "comment" in text or text == "discuss":
                comments = text
    return ", ".join(part for part in (score, comments) if part)


def extract_forum_table(table: Tag, parent: Node, options: ParseOptions) -> None:
    rows = _collect_forum_rows(table)

    i = 0
    while i < len(rows):
        klass = get_attr(rows[i], "class")
        if "spacer" in klass or "athing" not in klass:
            i += 1
            continue

        title, href = _forum_title_line(rows[i], options)
        meta = ""
        if title and i + 1 < len(rows):
            next_class = get_attr(rows[i + 1], "class")
            if "athing" not in next_class and "spacer" not in next_class:
                meta = _forum_metadata(rows[i + 1], options)
                i += 1
        i += 1
        if not title:
            continue

        para = Node(type=NodeType.PARAGRAPH, children=[link_node(href, title)])
        if meta:
            para.append(text_node(f" ({meta})"))
        parent.append(para)


# ---------------------------------------------------------------------------
# Data tables
# ---------------------------------------------------------------------------

def _links_in(node: Tag) -> list[Tag]:
    """Links below *node*, not descending into the links themselves."""
    return [tag for tag in iter_elements(node, prune=("a",)) if tag.name == "a"]


def build_table_cell(cell: Tag, options: ParseOptions = DEFAULT_OPTIONS) -> Node:
    """Build a cell: one Link when a single link covers half the text, else text."""
    node = Node(type=NodeType.TABLE_CELL, is_header=cell.name == "th")
    text = text_content(cell, options)

    links = _links_in(cell)
    if len(links) == 1:
        href = get_attr(links[0], "href")
        link_text = text_content(links[0], options) or href
        if link_text and href and (len(link_text) >= len(text) // 2 or not text):
            node.append(link_node(href, text or link_text))
            return node

    if text:
        node.append(text_node(text))
    return node


def build_data_table(table: Tag, parent: Node, options: ParseOptions) -> None:
    table_node = Node(type=NodeType.TABLE)
    for tr in _iter_rows(table):
        row = Node(
            type=NodeType.TABLE_ROW,
            children=[build_table_cell(cell, options) for cell in _cells(tr)],
        )
        if row.children:
            table_node.append(row)
    if table_node.children:
        parent.append(table_node)


# ---------------------------------------------------------------------------
# Layout tables
# ---------------------------------------------------------------------------

def _row_links(cell: Tag, options: ParseOptions) -> list[Node]:
    links: list[Node] = []
    for a in cell.find_all("a"):
        href = get_attr(a, "href")
        text = text_content(a, options) or href
        if href and text:
            links.append(link_node(href, text))
    return links


def extract_table_row(tr: Tag, parent: Node, options: ParseOptions = DEFAULT_OPTIONS) -> None:
    """Flatten one row into a paragraph of its links, else its cell texts."""
    parts: list[str] = []
    links: list[Node] = []
    for cell in _cells(tr):
        cell_text = text_content(cell, options)
        if cell_text:
            parts.append(cell_text)
        links.extend(_row_links(cell, options))

    para = Node(type=NodeType.PARAGRAPH)
    if links:
        for i, link in enumerate(links):
            if i:
                para.append(text_node(" "))
            para.append(link)
    elif parts:
        para.append(text_node(" · ".join(parts)))
    if para.children:
        parent.append(para)


def extract_table(table: Tag, parent: Node, options: ParseOptions = DEFAULT_OPTIONS) -> None:
    """Classify *table* and append its nodes to *parent*.

    Sections of a layout table (thead/tbody/tfoot) go through the same
    checks before their rows are flattened.
    """
    stack: list[Tag] = [table]
    while stack:
        current = stack.pop()
        if current.name == "tr":
            extract_table_row(current, parent, options)
            continue
        if is_navigation_table(current):
            logger.debug("table: skipping role=navigation")
            continue
        if is_forum_table(current):
            logger.debug("table: forum listing")
            extract_forum_table(current, parent, options)
            continue
        if is_data_table(current):
            logger.debug("table: data table")
            build_data_table(current, parent, options)
            continue

        logger.debug("table: layout <%s>, flattening rows", current.name)
        stack.extend(reversed([
            child for child in element_children(current)
            if child.name == "tr" or child.name in _SECTION_TAGS
        ]))
