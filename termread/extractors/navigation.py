"""Navigation extraction: page chrome pulled out into labelled link groups."""

from __future__ import annotations

import logging

from bs4 import Tag

from termread.extractors.dom import get_attr, iter_elements, text_content
from termread.items import Node, NodeType
from termread.settings import DEFAULT_OPTIONS, ParseOptions

logger = logging.getLogger(__name__)

# Chrome elements and the label used when they carry no aria-label
NAV_LABELS: dict[str, str] = {
    "nav": "Navigation",
    "header": "Header",
    "footer": "Footer",
    "aside": "Sidebar",
    "menu": "Menu",
}
NAV_TAGS: frozenset[str] = frozenset(NAV_LABELS)


def nav_label(tag: Tag) -> str:
    return get_attr(tag, "aria-label") or NAV_LABELS.get(tag.name, "Links")


def extract_nav_links(tag: Tag, options: ParseOptions = DEFAULT_OPTIONS) -> Node:
    """Collect every ``<a href>`` below *tag* into one ``NavSection`` node."""
    section = Node(type=NodeType.NAV_SECTION, text=nav_label(tag))
    for a in tag.find_all("a"):
        href = get_attr(a, "href")
        if not href:
            continue
        text = text_content(a, options) or href
        section.append(Node(type=NodeType.LINK, href=href, text=text))
    return section


def extract_navigation(root: Tag, options: ParseOptions = DEFAULT_OPTIONS) -> list[Node]:
    """Return one ``NavSection`` per chrome element below *root*.

    A matched element is extracted whole: the walk does not descend into it
    looking for further sections.  Sections without links are dropped.
    """
    sections: list[Node] = []
    for tag in iter_elements(root, prune=NAV_TAGS):
        if tag.name in NAV_TAGS:
            section = extract_nav_links(tag, options)
            if section.children:
                sections.append(section)
    logger.debug("extracted %d navigation section(s)", len(sections))
    return sections
