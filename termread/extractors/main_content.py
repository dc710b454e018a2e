"""Content root location with an ordered strategy cascade.

Tier 1: <main>              (content-indicator article, multi-article index,
                             content-indicator div, single article, main)
Tier 2: standalone <article>
Tier 3: role="main", then container ids "content", "main-content", "main"
Tier 4: content-richness scoring over <div>/<section> (score >= 3)
Tier 5: <body>

The first strategy that yields an element wins.  The locator never fails.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from bs4 import BeautifulSoup, Tag

from termread.extractors.dom import element_children, find_element, get_attr, iter_elements

logger = logging.getLogger(__name__)

# Class substrings that mark an element as holding the main content
CONTENT_INDICATOR_CLASSES: tuple[str, ...] = (
    "markdown-body",      # repository READMEs
    "entry-content",      # WordPress
    "post-content",
    "article-body",
    "article-content",
    "content-body",
    "RichTextStoryBody",
    "story-body",
    "article__body",      # BEM-style news sites
    "post__content",      # BEM-style blogs
)

# Container ids tried in order; headings sharing these ids never match
_CONTENT_IDS: tuple[str, ...] = ("content", "main-content", "main")
_CONTAINER_TAGS: frozenset[str] = frozenset({"div", "section", "article", "main", "aside"})

_RICHNESS_MAX_DEPTH = 10
_RICHNESS_MIN_SCORE = 3
_CHROME_TAGS: frozenset[str] = frozenset({"nav", "header", "footer", "aside"})

Strategy = Callable[[], Tag | None]


def _has_indicator_class(tag: Tag) -> bool:
    klass = get_attr(tag, "class")
    return any(indicator in klass for indicator in CONTENT_INDICATOR_CLASSES)


def _find_first(root: Tag, predicate: Callable[[Tag], bool]) -> Tag | None:
    """Depth-first, document-order search including *root* itself."""
    if predicate(root):
        return root
    for tag in iter_elements(root):
        if predicate(tag):
            return tag
    return None


def find_content_article(root: Tag) -> Tag | None:
    return _find_first(root, lambda t: t.name == "article" and _has_indicator_class(t))


def find_content_div(root: Tag) -> Tag | None:
    return _find_first(
        root, lambda t: t.name in ("div", "section") and _has_indicator_class(t),
    )


def count_articles(root: Tag) -> int:
    return int(root.name == "article") + len(root.find_all("article"))


def find_by_attribute(root: Tag, attr: str, value: str) -> Tag | None:
    return _find_first(root, lambda t: get_attr(t, attr) == value)


def find_content_container_by_id(root: Tag, element_id: str) -> Tag | None:
    """Find a container element (never a heading) whose id is *element_id*."""
    return _find_first(
        root, lambda t: t.name in _CONTAINER_TAGS and get_attr(t, "id") == element_id,
    )


def score_content_richness(tag: Tag) -> int:
    """Score how much *tag* looks like the main content.

    +2 per <p>, +3 per h1-h3, +5 per <article>, -5 per chrome element
    (nav/header/footer/aside) found within ten levels.
    """
    paragraphs = headings = articles = penalty = 0

    def _count(node: Tag, depth: int) -> None:
        nonlocal paragraphs, headings, articles, penalty
        if depth > _RICHNESS_MAX_DEPTH:
            return
        name = node.name
        if name == "p":
            paragraphs += 1
        elif name in ("h1", "h2", "h3"):
            headings += 1
        elif name == "article":
            articles += 1
        elif name in _CHROME_TAGS:
            penalty += 5
        for child in element_children(node):
            _count(child, depth + 1)

    _count(tag, 0)
    return paragraphs * 2 + headings * 3 + articles * 5 - penalty


def find_content_rich_div(root: Tag) -> Tag | None:
    """Return the highest-scoring <div>/<section>; ties keep the earliest."""
    best: Tag | None = None
    best_score = 0
    for tag in [root, *root.find_all(["div", "section"])]:
        if tag.name not in ("div", "section"):
            continue
        score = score_content_richness(tag)
        if score > best_score:
            best_score = score
            best = tag
    if best_score >= _RICHNESS_MIN_SCORE:
        return best
    return None


def _from_main(main: Tag) -> Tag:
    article = find_content_article(main)
    if article is not None:
        return article
    # Multi-story index: checked before the content-div lookup because
    # story-body divs can sit inside each article
    if count_articles(main) >= 2:
        return main
    content_div = find_content_div(main)
    if content_div is not None:
        return content_div
    article = find_element(main, "article")
    return article if article is not None else main


def first_success(*strategies: tuple[str, Strategy]) -> tuple[str, Tag] | None:
    for name, strategy in strategies:
        found = strategy()
        if found is not None:
            return name, found
    return None


def find_content_root(soup: BeautifulSoup, body: Tag) -> Tag:
    """Return the element most likely to hold the page's real content."""
    main = find_element(soup, "main")

    strategies: list[tuple[str, Strategy]] = [
        ("main", lambda: _from_main(main) if main is not None else None),
        ("article", lambda: find_element(soup, "article")),
        ("role=main", lambda: find_by_attribute(body, "role", "main")),
    ]
    for element_id in _CONTENT_IDS:
        strategies.append(
            (f"#{element_id}", lambda eid=element_id: find_content_container_by_id(body, eid)),
        )
    strategies.append(("content-rich", lambda: find_content_rich_div(body)))

    result = first_success(*strategies)
    if result is None:
        logger.debug("content root: falling back to <%s>", body.name)
        return body
    name, root = result
    logger.debug("content root via %s: <%s class=%r>", name, root.name, get_attr(root, "class"))
    return root
