"""termread.query - single-document parse API.

Turns one HTML page into a :class:`~termread.items.Document` without any
network access.  Fetching, rendering and caching belong to the caller.

Basic usage::

    from termread.query import parse

    with open("page.html", "rb") as fh:
        doc = parse(fh, url="https://example.com/post")
    print(doc.title)
    for section in doc.navigation:
        print(section.text, len(section.children))
    print(doc.plain_text_for_translation())

Options are passed explicitly::

    from termread import ParseOptions, parse_string

    doc = parse_string(html, options=ParseOptions(latex_enabled=False))
"""

from __future__ import annotations

import logging
from typing import IO

from bs4 import BeautifulSoup, FeatureNotFound, ParserRejectedMarkup

from termread.extractors.article_list import looks_like_news_index, normalize_news_index
from termread.extractors.blocks import DocumentBuilder
from termread.extractors.dom import find_element
from termread.extractors.main_content import find_content_root
from termread.extractors.metadata import extract_language, extract_theme_color, extract_title
from termread.extractors.navigation import extract_navigation
from termread.items import Document
from termread.language import detect_language
from termread.settings import DEFAULT_OPTIONS, ParseOptions

logger = logging.getLogger(__name__)

Source = str | bytes | IO[str] | IO[bytes]


# ---------------------------------------------------------------------------
# Public exception
# ---------------------------------------------------------------------------

class ParseError(RuntimeError):
    """Raised when the input cannot be read or tokenized as HTML.

    Attributes:
        url -- the URL the caller associated with the input ('' if none)
    """

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


# ---------------------------------------------------------------------------
# Input handling
# ---------------------------------------------------------------------------

def _read_source(source: Source, url: str) -> str | bytes:
    if isinstance(source, (str, bytes)):
        return source
    read = getattr(source, "read", None)
    if read is None:
        raise ParseError(
            f"Unsupported input type {type(source).__name__!r}; "
            "expected str, bytes or a readable file object",
            url=url,
        )
    try:
        return read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseError(f"Could not read HTML input: {exc}", url=url) from exc


def _make_soup(markup: str | bytes, options: ParseOptions, url: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(markup, options.parser)
    except FeatureNotFound as exc:
        raise ParseError(
            f"HTML tree builder {options.parser!r} is not installed",
            url=url,
        ) from exc
    except ParserRejectedMarkup as exc:
        raise ParseError(f"Input could not be parsed as HTML: {exc}", url=url) from exc


# ---------------------------------------------------------------------------
# Main public API
# ---------------------------------------------------------------------------

def parse(
    source: Source,
    url: str = "",
    options: ParseOptions | None = None,
) -> Document:
    """Parse *source* into a :class:`~termread.items.Document`.

    Args:
        source:  HTML as ``str``, ``bytes`` (encoding sniffed from the
                 markup) or a readable file object returning either.
        url:     Page URL, stored on the document for the caller's use.
        options: Extraction options; :data:`~termread.settings.DEFAULT_OPTIONS`
                 when omitted.

    Returns:
        A new :class:`~termread.items.Document`.  Its ``content`` is always
        rooted at a ``document`` node, even for empty input.

    Raises:
        :class:`ParseError`: when the input cannot be read or tokenized.
    """
    opts = options if options is not None else DEFAULT_OPTIONS
    soup = _make_soup(_read_source(source, url), opts, url)

    doc = Document(
        url=url,
        lang=extract_language(soup),
        theme_color=extract_theme_color(soup),
        title=extract_title(soup),
    )

    body = find_element(soup, "body")
    if body is None:
        body = soup

    # Navigation is collected from the whole body, not just the content root
    doc.navigation = extract_navigation(body, opts)

    root = find_content_root(soup, body)
    doc.content = DocumentBuilder(opts).build(root)

    if looks_like_news_index(doc.content):
        logger.debug("news index detected for %s", url or "<input>")
        normalize_news_index(doc.content)

    if not doc.lang and opts.detect_language:
        doc.lang = detect_language(doc.content.plain_text()) or ""

    logger.debug(
        "parsed %s: title=%r, %d content node(s), %d nav section(s)",
        url or "<input>", doc.title, len(doc.content.children), len(doc.navigation),
    )
    return doc


def parse_string(
    html: str,
    url: str = "",
    options: ParseOptions | None = None,
) -> Document:
    """Convenience wrapper for :func:`parse` on an in-memory string."""
    if not isinstance(html, str):
        raise ParseError(f"Expected str, got {type(html).__name__!r}", url=url)
    return parse(html, url=url, options=options)
