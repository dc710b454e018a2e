"""Article-list detection, story-card extraction and news-index normalization.

Index pages (news front pages, blog archives, section pages) are reduced to
one List of structured entries: linked title, source domain, description and
an "author · date" line.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from bs4 import Tag

from termread.extractors.dom import (
    element_children,
    find_first_link,
    get_attr,
    text_content,
)
from termread.extractors.metadata import (
    extract_domain,
    find_article_metadata,
    find_metadata_within,
    find_nearby_metadata,
    truncate_description,
)
from termread.items import HEADING_TYPES, Node, NodeType, link_node, text_node
from termread.settings import DEFAULT_OPTIONS, ParseOptions

logger = logging.getLogger(__name__)

# Minimum entries before a container is treated as an index
ARTICLE_LIST_MIN_ITEMS = 3

_AD_CLASS_MARKERS: tuple[str, ...] = ("sponsored", "ad-", "promo", "advertisement")

_STORY_COUNT_MAX_DEPTH = 5
_STORY_EXTRACT_MAX_DEPTH = 6
_NEWS_CARD_MAX_DEPTH = 5

# "1. Title", "12. Title": search-result numbering, not a headline
_NUMBERED_ITEM_RE = re.compile(r"\d+\. ")

# News-index consolidation thresholds
_NEWS_INDEX_MIN_LISTS = 3
_NEWS_INDEX_MIN_ANCHORS = 5
_NEWS_INDEX_MIN_PARAGRAPH_LEN = 20

ARTICLE_SEPARATOR = "───"


@dataclass
class ArticleData:
    """Fields extracted for one index entry."""

    title: str = ""
    title_href: str = ""
    description: str = ""
    author: str = ""
    date: str = ""
    source: str = ""  # domain of title_href


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def _has_ad_class(klass: str) -> bool:
    return any(marker in klass for marker in _AD_CLASS_MARKERS)


def is_ad_content(tag: Tag) -> bool:
    return _has_ad_class(get_attr(tag, "class").lower())


def is_inside_ad_content(tag: Tag) -> bool:
    return any(isinstance(p, Tag) and is_ad_content(p) for p in tag.parents)


def looks_like_numbered_item(text: str) -> bool:
    """True for "1. Title" style text; "2025 Budget Proposal" is not numbered."""
    return bool(_NUMBERED_ITEM_RE.match(text.strip()))


def _is_headline_link(href: str, text: str) -> bool:
    return (
        bool(href)
        and not href.startswith("#")
        and len(text) > 10
        and not looks_like_numbered_item(text)
    )


def _direct_articles(container: Tag) -> list[Tag]:
    return [
        c for c in element_children(container)
        if c.name == "article" and not _has_ad_class(get_attr(c, "class"))
    ]


def count_story_cards(container: Tag, options: ParseOptions = DEFAULT_OPTIONS) -> int:
    """Count h2/h3 elements holding a headline link, five levels deep."""
    count = 0

    def _walk(node: Tag, depth: int) -> None:
        nonlocal count
        if depth > _STORY_COUNT_MAX_DEPTH:
            return
        if node.name in ("h2", "h3"):
            link = find_first_link(node)
            if link is not None and _is_headline_link(
                get_attr(link, "href"), text_content(link, options),
            ):
                count += 1
        for child in element_children(node):
            _walk(child, depth + 1)

    _walk(container, 0)
    return count


def should_extract_as_article_list(
    container: Tag,
    options: ParseOptions = DEFAULT_OPTIONS,
) -> bool:
    """True when *container* holds three or more articles or story cards."""
    if len(_direct_articles(container)) >= ARTICLE_LIST_MIN_ITEMS:
        return True
    return count_story_cards(container, options) >= ARTICLE_LIST_MIN_ITEMS


# ---------------------------------------------------------------------------
# Entry extraction
# ---------------------------------------------------------------------------

def find_sibling_description(heading: Tag, options: ParseOptions = DEFAULT_OPTIONS) -> str:
    """Find a description following *heading*, or following its parent."""
    for sib in heading.find_next_siblings():
        text = text_content(sib, options) if sib.name in ("p", "div", "span") else ""
        if sib.name == "p" and len(text) > 30 and not text.startswith("By "):
            return truncate_description(text, 100)
        if (
            sib.name in ("div", "span")
            and 50 < len(text) < 300
            and not text.startswith("By ")
        ):
            return truncate_description(text, 100)
        if sib.name in ("h2", "h3", "h4"):
            break

    if heading.parent is not None:
        for sib in heading.parent.find_next_siblings():
            if sib.name == "p":
                text = text_content(sib, options)
                if len(text) > 30 and not text.startswith("By "):
                    return truncate_description(text, 100)
            if sib.name in ("h2", "h3"):
                break
    return ""


def find_article_title(article: Tag, options: ParseOptions = DEFAULT_OPTIONS) -> tuple[str, str]:
    """Return (title, href): first titled h1-h3, else first prominent link."""
    for heading in [article, *article.find_all(["h1", "h2", "h3"])]:
        if heading.name not in ("h1", "h2", "h3"):
            continue
        title = text_content(heading, options)
        if not title:
            continue
        link = find_first_link(heading)
        href = get_attr(link, "href") if link is not None else ""
        # <a href><h3>Title</h3></a>
        parent = heading.parent
        if not href and isinstance(parent, Tag) and parent.name == "a":
            href = get_attr(parent, "href")
        return title, href

    for a in [article, *article.find_all("a")]:
        if a.name != "a":
            continue
        text = text_content(a, options)
        href = get_attr(a, "href")
        if len(text) > 10 and href and not href.startswith("#"):
            return text, href
    return "", ""


def find_article_description(article: Tag, options: ParseOptions = DEFAULT_OPTIONS) -> str:
    for p in article.find_all("p"):
        text = text_content(p, options)
        if len(text) > 50 and not text.startswith(("By ", "by ")):
            return truncate_description(text, 100)
    return ""


def extract_article_entry(article: Tag, options: ParseOptions = DEFAULT_OPTIONS) -> ArticleData:
    title, href = find_article_title(article, options)
    author, date = find_article_metadata(article, options)
    return ArticleData(
        title=title,
        title_href=href,
        description=find_article_description(article, options),
        author=author,
        date=date,
        source=extract_domain(href) if href else "",
    )


def extract_news_card(li: Tag, options: ParseOptions = DEFAULT_OPTIONS) -> ArticleData:
    """Extract a prominent-link-plus-description card from a list item.

    Returns an empty :class:`ArticleData` (no title) when *li* has no link
    longer than twenty characters.
    """
    data = ArticleData()

    def _find_title(node: Tag, depth: int) -> bool:
        if depth > _NEWS_CARD_MAX_DEPTH:
            return False
        if node.name == "a":
            href = get_attr(node, "href")
            text = text_content(node, options)
            if len(text) > 20 and href and not href.startswith("#"):
                data.title = text
                data.title_href = href
                data.source = extract_domain(href)
                return True
        return any(_find_title(child, depth + 1) for child in element_children(node))

    if not _find_title(li, 0):
        return data

    def _find_description(node: Tag, depth: int) -> None:
        if depth > _NEWS_CARD_MAX_DEPTH or data.description:
            return
        if node.name == "p":
            text = text_content(node, options)
            if (
                len(text) > 30
                and not text.startswith("By ")
                and text not in data.title
                and data.title not in text
            ):
                data.description = truncate_description(text, 100)
                return
        for child in element_children(node):
            _find_description(child, depth + 1)

    _find_description(li, 0)
    data.author, data.date = find_metadata_within(li, options)
    return data


def find_child_article(li: Tag) -> Tag | None:
    """Return an <article> that is a child or grandchild of *li*."""
    for child in element_children(li):
        if child.name == "article":
            return child
        for grandchild in element_children(child):
            if grandchild.name == "article":
                return grandchild
    return None


def article_data_to_list_item(data: ArticleData) -> Node:
    item = Node(type=NodeType.LIST_ITEM)
    if data.title_href:
        item.append(link_node(data.title_href, data.title))
    else:
        item.append(Node(type=NodeType.STRONG, children=[text_node(data.title)]))

    if data.source:
        item.append(text_node(f" ({data.source})"))
    if data.description:
        item.append(text_node("\n  " + data.description))
    meta = [part for part in (data.author, data.date) if part]
    if meta:
        item.append(text_node("\n  " + " · ".join(meta)))
    return item


# ---------------------------------------------------------------------------
# List extraction
# ---------------------------------------------------------------------------

def extract_story_cards(
    container: Tag,
    list_node: Node,
    options: ParseOptions = DEFAULT_OPTIONS,
) -> None:
    """Append one entry per h2/h3 headline below *container*, skipping ads."""

    def _walk(node: Tag, depth: int) -> None:
        if depth > _STORY_EXTRACT_MAX_DEPTH or is_ad_content(node):
            return
        if node.name in ("h2", "h3"):
            if is_inside_ad_content(node):
                return
            link = find_first_link(node)
            if link is not None:
                href = get_attr(link, "href")
                text = text_content(link, options)
                if _is_headline_link(href, text):
                    author, date = find_nearby_metadata(node, options)
                    data = ArticleData(
                        title=text,
                        title_href=href,
                        source=extract_domain(href),
                        description=find_sibling_description(node, options),
                        author=author,
                        date=date,
                    )
                    list_node.append(article_data_to_list_item(data))
                    return
        for child in element_children(node):
            _walk(child, depth + 1)

    _walk(container, 0)


def extract_article_list(
    container: Tag,
    parent: Node,
    options: ParseOptions = DEFAULT_OPTIONS,
) -> None:
    """Append a List of index entries for *container* to *parent*.

    Story cards are tried first; direct <article> children are the fallback
    when fewer than three cards turn up.
    """
    list_node = Node(type=NodeType.LIST)
    extract_story_cards(container, list_node, options)
    method = "story cards"

    if len(list_node.children) < ARTICLE_LIST_MIN_ITEMS:
        method = "articles"
        list_node.children = []
        for article in _direct_articles(container):
            data = extract_article_entry(article, options)
            if data.title:
                list_node.append(article_data_to_list_item(data))

    logger.debug(
        "article list from %s: %d item(s) in <%s>",
        method, len(list_node.children), container.name,
    )
    if list_node.children:
        parent.append(list_node)


# ---------------------------------------------------------------------------
# News-index normalization (post-pass over the finished content tree)
# ---------------------------------------------------------------------------

def list_has_link_first_items(list_node: Node) -> bool:
    """True when at least half the items of *list_node* start with a Link."""
    if list_node.type != NodeType.LIST:
        return False
    link_first = sum(
        1 for item in list_node.children
        if item.type == NodeType.LIST_ITEM
        and item.children
        and item.children[0].type == NodeType.LINK
    )
    return link_first > 0 and link_first >= len(list_node.children) // 2


def looks_like_news_index(content: Node | None) -> bool:
    """Detect pages made of several link-first lists plus many anchors."""
    if content is None:
        return False
    lists = [c for c in content.children if c.type == NodeType.LIST]
    link_first_lists = sum(1 for lst in lists if list_has_link_first_items(lst))
    anchors = sum(1 for c in content.children if c.type == NodeType.ANCHOR)
    return (
        len(lists) >= _NEWS_INDEX_MIN_LISTS
        and link_first_lists >= _NEWS_INDEX_MIN_LISTS
        and anchors >= _NEWS_INDEX_MIN_ANCHORS
    )


def normalize_news_index(content: Node | None) -> None:
    """Merge all link-first lists into one list deduplicated by href.

    Headings are kept; paragraphs are kept when longer than twenty characters
    and not image captions (text starting with "[").  Everything else at the
    top level is dropped.
    """
    if content is None:
        return

    items: list[Node] = []
    seen: set[str] = set()
    for child in content.children:
        if child.type != NodeType.LIST or not list_has_link_first_items(child):
            continue
        for item in child.children:
            if item.type != NodeType.LIST_ITEM or not item.children:
                continue
            link = item.children[0]
            if link.type == NodeType.LINK and link.href and link.href not in seen:
                seen.add(link.href)
                items.append(item)

    kept: list[Node] = []
    for child in content.children:
        if child.type in HEADING_TYPES:
            kept.append(child)
        elif child.type == NodeType.PARAGRAPH:
            text = child.plain_text()
            if not text.strip().startswith("[") and len(text) > _NEWS_INDEX_MIN_PARAGRAPH_LEN:
                kept.append(child)

    if items:
        kept.append(Node(type=NodeType.LIST, children=items))
    logger.debug("news index normalized: %d unique item(s)", len(items))
    content.children = kept
