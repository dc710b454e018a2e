"""Deterministic metadata helpers shared by the extractors.

Page-level: title, language, theme color.
Item-level: author/date lookup, domain and filename extraction, description
truncation and date formatting.
"""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, Tag
from bs4.element import PageElement

from termread.extractors.dom import (
    collapse_whitespace,
    element_children,
    find_element,
    get_attr,
    preformatted_text,
    text_content,
)
from termread.settings import DEFAULT_OPTIONS, ParseOptions

logger = logging.getLogger(__name__)

_MONTHS: tuple[str, ...] = (
    "", "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")

# Max length of a plausible author byline
_AUTHOR_MAX_LEN = 100


# ---------------------------------------------------------------------------
# String helpers
# ---------------------------------------------------------------------------

def truncate_description(text: str, max_len: int) -> str:
    """Cut *text* to *max_len* characters, backing up to a word boundary.

    The cut moves back to the last space only when that space lies past the
    midpoint, so very long words still get cut.
    """
    if len(text) <= max_len:
        return text
    truncated = text[:max_len]
    idx = truncated.rfind(" ")
    if idx > max_len // 2:
        truncated = truncated[:idx]
    return truncated + "..."


def format_date(datetime_str: str) -> str:
    """Format an ISO ``YYYY-MM-DD...`` string as ``"Mon D, YYYY"``.

    Only the first ten characters are looked at; anything that does not
    parse is returned unchanged.
    """
    if len(datetime_str) < 10:
        return datetime_str
    parts = datetime_str[:10].split("-")
    if len(parts) != 3:
        return datetime_str
    year, month_raw, day = parts
    m = _LEADING_INT_RE.match(month_raw)
    month = int(m.group(1)) if m else 0
    if not 1 <= month <= 12:
        return datetime_str
    return f"{_MONTHS[month]} {day.removeprefix('0')}, {year}"


def extract_domain(url: str) -> str:
    """Return the host of *url* without scheme, path or ``www.`` prefix."""
    idx = url.find("://")
    if idx != -1:
        url = url[idx + 3:]
    idx = url.find("/")
    if idx != -1:
        url = url[:idx]
    return url.removeprefix("www.")


def extract_filename(url: str) -> str:
    """Return the last path component of *url* with its extension stripped."""
    url = re.split(r"[?#]", url, maxsplit=1)[0]
    url = url.rsplit("/", 1)[-1]
    idx = url.rfind(".")
    if idx != -1:
        url = url[:idx]
    return url


def strip_by_prefix(text: str) -> str:
    return text.removeprefix("By ").removeprefix("by ")


# ---------------------------------------------------------------------------
# Page-level metadata
# ---------------------------------------------------------------------------

def extract_title(soup: BeautifulSoup) -> str:
    """Return the ``<title>`` text verbatim apart from collapsed whitespace."""
    title = find_element(soup, "title")
    if title is None:
        return ""
    return collapse_whitespace(preformatted_text(title)).strip()


def extract_language(soup: BeautifulSoup) -> str:
    """Return the primary subtag of ``<html lang>`` lower-cased ("en-US" -> "en")."""
    html = find_element(soup, "html")
    if html is None:
        return ""
    lang = get_attr(html, "lang")
    if not lang:
        return ""
    idx = lang.find("-")
    if idx > 0:
        lang = lang[:idx]
    return lang.lower()


# ---------------------------------------------------------------------------
# Author / date lookup
# ---------------------------------------------------------------------------

def _time_value(time_tag: Tag, options: ParseOptions) -> str:
    """Prefer the ``datetime`` attribute, fall back to the element text."""
    dt = get_attr(time_tag, "datetime")
    if dt:
        return format_date(dt)
    return text_content(time_tag, options)


def _byline(tag: Tag, options: ParseOptions) -> str:
    text = strip_by_prefix(text_content(tag, options))
    return text if len(text) < _AUTHOR_MAX_LEN else ""


def find_nearby_metadata(
    anchor: PageElement,
    options: ParseOptions = DEFAULT_OPTIONS,
) -> tuple[str, str]:
    """Look for (author, date) around *anchor*, i.e. inside its parent."""
    if anchor.parent is None:
        return "", ""
    return find_metadata_within(anchor.parent, options)


def find_metadata_within(
    search_area: Tag,
    options: ParseOptions = DEFAULT_OPTIONS,
) -> tuple[str, str]:
    """Return (author, date) from ``<time>`` and byline elements three levels deep."""
    author = ""
    date = ""

    def _walk(node: Tag, depth: int) -> None:
        nonlocal author, date
        if depth > 3:
            return
        if node.name == "time" and not date:
            date = _time_value(node, options)
        klass = get_attr(node, "class").lower()
        if ("author" in klass or "byline" in klass) and not author:
            author = _byline(node, options)
        for child in element_children(node):
            _walk(child, depth + 1)

    _walk(search_area, 0)
    return author, date


def find_article_metadata(
    article: Tag,
    options: ParseOptions = DEFAULT_OPTIONS,
) -> tuple[str, str]:
    """Return (author, date) from the first ``<time>`` and byline in *article*."""
    date = ""
    for time_tag in [article, *article.find_all("time")]:
        if time_tag.name == "time":
            date = _time_value(time_tag, options)
            if date:
                break

    author = ""
    for tag in [article, *article.find_all(True)]:
        klass = get_attr(tag, "class").lower()
        rel = get_attr(tag, "rel").lower()
        if "author" in klass or "byline" in klass or "author" in rel:
            author = _byline(tag, options)
            if author:
                break
    return author, date


# ---------------------------------------------------------------------------
# Theme color
# ---------------------------------------------------------------------------

_NAMED_COLORS: dict[str, str] = {
    "white": "#ffffff",
    "black": "#000000",
    "red": "#ff0000",
    "green": "#00ff00",
    "blue": "#0000ff",
    "yellow": "#ffff00",
    "orange": "#ffa500",
    "purple": "#800080",
    "gray": "#808080",
    "grey": "#808080",
    "silver": "#c0c0c0",
    "maroon": "#800000",
    "navy": "#000080",
    "teal": "#008080",
    "aqua": "#00ffff",
    "fuchsia": "#ff00ff",
    "lime": "#00ff00",
    "olive": "#808000",
}

_HEX_RE = re.compile(r"[0-9a-f]{6}")

# Mean channel bounds for a usable accent (excludes near-white/near-black)
_MIN_LUMINANCE = 15
_MAX_LUMINANCE = 240


def parse_hex_color(value: str) -> tuple[int, int, int] | None:
    """Parse ``#rrggbb`` or ``#rgb`` into an (r, g, b) tuple."""
    hex_str = value.lower().removeprefix("#")
    if len(hex_str) == 3:
        hex_str = "".join(ch * 2 for ch in hex_str)
    if not _HEX_RE.fullmatch(hex_str):
        return None
    return int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16)


def normalize_color(color: str) -> str:
    """Return *color* as lower-case ``#rrggbb`` or '' when unrecognised."""
    color = color.strip().lower()
    if color.startswith("#"):
        if len(color) == 4:
            return "#" + "".join(ch * 2 for ch in color[1:])
        if len(color) == 7:
            return color
        return ""
    return _NAMED_COLORS.get(color, "")


def is_usable_accent_color(hex_color: str) -> bool:
    rgb = parse_hex_color(hex_color) if hex_color else None
    if rgb is None:
        return False
    luminance = sum(rgb) // 3
    return _MIN_LUMINANCE <= luminance <= _MAX_LUMINANCE


def _first_usable(*candidates: str) -> str:
    for candidate in candidates:
        if not candidate:
            continue
        color = normalize_color(candidate)
        if is_usable_accent_color(color):
            return color
    return ""


def extract_theme_color(soup: BeautifulSoup) -> str:
    """Pick the site accent color.

    Priority: ``msapplication-TileColor`` meta, then ``bgcolor`` on
    ``<body>``/``<html>``, then ``theme-color`` meta.  Tile colors and legacy
    bgcolor values tend to be the real brand color, while theme-color is
    often plain white or black.
    """
    tile_color = ""
    theme_color = ""
    head = find_element(soup, "head")
    if head is not None:
        for meta in head.find_all("meta"):
            name = get_attr(meta, "name").lower()
            content = get_attr(meta, "content")
            if not content:
                continue
            if name == "theme-color" and not theme_color:
                theme_color = content
            elif name == "msapplication-tilecolor" and not tile_color:
                tile_color = content

    bg_color = ""
    for tag_name in ("body", "html"):
        tag = find_element(soup, tag_name)
        if tag is not None and not bg_color:
            bg_color = get_attr(tag, "bgcolor")

    color = _first_usable(tile_color, bg_color, theme_color)
    logger.debug(
        "theme color %r (tile=%r bgcolor=%r theme=%r)",
        color, tile_color, bg_color, theme_color,
    )
    return color


def _attr_value(s: str) -> str:
    """Read a quoted or unquoted attribute value from the start of *s*."""
    s = s.strip()
    if not s:
        return ""
    quote = s[0]
    if quote in "\"'":
        end = s.find(quote, 1)
        return s[1:end] if end != -1 else ""
    m = re.match(r"[^ \t\n\r>]*", s)
    return m.group(0) if m else s


def _meta_content(lower_html: str, html: str, meta_name: str) -> str:
    idx = lower_html.find(f'name="{meta_name}"')
    if idx == -1:
        idx = lower_html.find(f"name='{meta_name}'")
    if idx == -1:
        return ""
    # content= must sit within 100 chars of the name attribute
    snippet = lower_html[idx:idx + 100]
    content_idx = snippet.find("content=")
    if content_idx == -1:
        return ""
    return _attr_value(html[idx + content_idx + 8:idx + 100])


def extract_theme_color_from_html(html: str) -> str:
    """Theme color from raw HTML using string scanning only.

    Same priority as :func:`extract_theme_color`; meant for documents built by
    pipelines that never parse the page into a tree.
    """
    lower = html.lower()
    tile_color = _meta_content(lower, html, "msapplication-tilecolor")
    bg_color = ""
    idx = lower.find("bgcolor=")
    if idx != -1:
        bg_color = _attr_value(html[idx + 8:])
    theme_color = _meta_content(lower, html, "theme-color")
    return _first_usable(tile_color, bg_color, theme_color)
