"""Attribute and text helpers over the BeautifulSoup source tree.

Every extractor reads the parse tree through these helpers, so the rules for
what counts as text (comments never do; ``script``/``style`` contents never
do) and how whitespace collapses live in one place.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Iterator
from typing import Any

from bs4 import Tag
from bs4.element import NavigableString, PageElement, PreformattedString

from termread import latex
from termread.settings import DEFAULT_OPTIONS, ParseOptions

_WHITESPACE_RE = re.compile(r"\s+")

# Elements whose contents are never visible text
SKIPPED_TAGS: frozenset[str] = frozenset({"style", "script", "noscript", "template"})

HEADING_TAGS: frozenset[str] = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text)


def is_text(node: Any) -> bool:
    """True for visible character data (not comments, doctypes, CDATA)."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def get_attr(tag: Tag, key: str) -> str:
    """Return attribute *key* as a string ('' when absent).

    Multi-valued attributes (``class``, ``rel``) are joined with spaces.
    """
    val = tag.get(key)
    if val is None:
        return ""
    if isinstance(val, list):
        return " ".join(str(v) for v in val)
    return str(val)


def element_children(tag: Tag) -> Iterator[Tag]:
    for child in tag.children:
        if isinstance(child, Tag):
            yield child


def iter_elements(root: Tag, prune: Collection[str] = ()) -> Iterator[Tag]:
    """Yield the elements below *root* in document order.

    Elements named in *prune* are yielded but not entered.  The walk keeps
    its own stack, so arbitrarily deep markup is safe.
    """
    stack = list(reversed(list(element_children(root))))
    while stack:
        tag = stack.pop()
        yield tag
        if tag.name not in prune:
            stack.extend(reversed(list(element_children(tag))))


def find_element(node: PageElement, name: str) -> Tag | None:
    """Depth-first search for the first element named *name*, *node* included."""
    if not isinstance(node, Tag):
        return None
    if node.name == name:
        return node
    return node.find(name)


def find_first_link(node: PageElement) -> Tag | None:
    return find_element(node, "a")


def find_child_img(tag: Tag) -> Tag | None:
    """Find an ``<img>`` nested anywhere below *tag* (e.g. ``<a><span><img>``)."""
    return tag.find("img")


# ---------------------------------------------------------------------------
# Text flattening
# ---------------------------------------------------------------------------

def _mathml_latex(math: Tag) -> str:
    """Return the TeX source from a MathML ``<annotation>`` if one exists."""
    for annotation in math.find_all("annotation"):
        encoding = get_attr(annotation, "encoding")
        if "latex" in encoding or "tex" in encoding:
            for child in annotation.children:
                if is_text(child):
                    return str(child)
    return ""


def _flatten(node: PageElement, parts: list[str], options: ParseOptions) -> None:
    stack: list[PageElement] = [node]
    while stack:
        current = stack.pop()
        if is_text(current):
            parts.append(collapse_whitespace(str(current)))
            continue
        if not isinstance(current, Tag) or current.name in SKIPPED_TAGS:
            continue
        if options.latex_enabled and current.name == "math":
            source = _mathml_latex(current)
            if source:
                parts.append(latex.to_unicode(source))
                continue
        stack.extend(reversed(current.contents))


def text_content(node: PageElement, options: ParseOptions = DEFAULT_OPTIONS) -> str:
    """Flatten *node* to one line of text with whitespace collapsed."""
    parts: list[str] = []
    _flatten(node, parts, options)
    text = collapse_whitespace("".join(parts)).strip()
    if options.latex_enabled and latex.contains_latex(text):
        text = latex.process_text(text)
    return text


def deduped_text(tag: Tag, options: ParseOptions = DEFAULT_OPTIONS) -> str:
    """Flatten *tag* dropping immediately repeated child texts.

    Each direct child is flattened separately; markup such as
    ``<h1><div>News</div><div>News</div></h1>`` yields ``"News"``.
    """
    parts = [
        text for text in (text_content(child, options) for child in tag.children)
        if text
    ]
    if not parts:
        return text_content(tag, options)
    result = [p for i, p in enumerate(parts) if i == 0 or p != parts[i - 1]]
    return " ".join(result)


def preformatted_text(tag: Tag) -> str:
    """Return the raw text below *tag*, internal whitespace preserved."""
    return "".join(str(node) for node in tag.descendants if is_text(node)).strip()
