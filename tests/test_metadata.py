"""Tests for termread.extractors.metadata - string helpers and theme color."""

from __future__ import annotations

import pytest

from termread.extractors.metadata import (
    extract_domain,
    extract_filename,
    extract_theme_color,
    extract_theme_color_from_html,
    extract_title,
    find_article_metadata,
    format_date,
    is_usable_accent_color,
    normalize_color,
    parse_hex_color,
    truncate_description,
)

# ---------------------------------------------------------------------------
# String helpers
# ---------------------------------------------------------------------------


class TestTruncate:
    def test_word_boundary(self):
        text = "This is a longer description that needs to be truncated at a word boundary"
        result = truncate_description(text, 50)
        assert result == "This is a longer description that needs to be..."
        assert result.endswith("...")

    def test_short_text_unchanged(self):
        assert truncate_description("short", 50) == "short"

    def test_exact_length_unchanged(self):
        assert truncate_description("x" * 10, 10) == "x" * 10

    def test_long_word_cut_hard(self):
        text = "a " + "b" * 60
        assert truncate_description(text, 20) == "a " + "b" * 18 + "..."


class TestFormatDate:
    @pytest.mark.parametrize(("raw", "expected"), [
        ("2024-01-05T10:00:00Z", "Jan 5, 2024"),
        ("2023-12-25", "Dec 25, 2023"),
        ("2021-07-10 08:00", "Jul 10, 2021"),
    ])
    def test_iso(self, raw, expected):
        assert format_date(raw) == expected

    @pytest.mark.parametrize("raw", ["yesterday", "2024/01/05 10:00", "2024-13-01", ""])
    def test_passthrough(self, raw):
        assert format_date(raw) == raw


class TestUrlHelpers:
    @pytest.mark.parametrize(("url", "expected"), [
        ("https://www.example.com/path?x=1", "example.com"),
        ("http://blog.example.org", "blog.example.org"),
        ("example.net/a/b", "example.net"),
    ])
    def test_extract_domain(self, url, expected):
        assert extract_domain(url) == expected

    def test_extract_filename(self):
        assert extract_filename("https://cdn.example.com/img/diagram.png?w=300") == "diagram"
        assert extract_filename("/photos/cat") == "cat"
        assert extract_filename("https://example.com/") == ""


class TestTitle:
    def test_dollar_signs_kept_verbatim(self, make_soup):
        soup = make_soup("<html><head><title>Deals:  $5 off,\n now $10_2 each</title></head></html>")
        assert extract_title(soup) == "Deals: $5 off, now $10_2 each"

    def test_missing_title(self, make_soup):
        assert extract_title(make_soup("<p>No head</p>")) == ""


class TestArticleMetadata:
    def test_first_non_empty_time(self, make_soup):
        soup = make_soup(
            '<article><time></time><time datetime="2022-03-04">March</time>'
            '<a rel="author" href="/u/dee">by Dee</a></article>',
        )
        assert find_article_metadata(soup.article) == ("Dee", "Mar 4, 2022")

    def test_overlong_byline_ignored(self, make_soup):
        soup = make_soup(f'<article><div class="byline">{"word " * 30}</div></article>')
        assert find_article_metadata(soup.article) == ("", "")


# ---------------------------------------------------------------------------
# Theme color
# ---------------------------------------------------------------------------


def _page(head="", body_attrs=""):
    return f"<html><head>{head}</head><body {body_attrs}><p>x</p></body></html>"


_TILE = '<meta name="msapplication-TileColor" content="{}">'
_THEME = '<meta name="theme-color" content="{}">'


class TestColorHelpers:
    def test_parse_hex(self):
        assert parse_hex_color("#abc") == (170, 187, 204)
        assert parse_hex_color("#FF0000") == (255, 0, 0)
        assert parse_hex_color("zzz") is None
        assert parse_hex_color("#12345") is None

    def test_normalize(self):
        assert normalize_color(" #ABC ") == "#aabbcc"
        assert normalize_color("Navy") == "#000080"
        assert normalize_color("rgb(1,2,3)") == ""
        assert normalize_color("#1234") == ""

    @pytest.mark.parametrize(("color", "usable"), [
        ("#ffffff", False),
        ("#000000", False),
        ("#808080", True),
        ("#2b5797", True),
        ("", False),
    ])
    def test_usable(self, color, usable):
        assert is_usable_accent_color(color) is usable


class TestThemeColorPriority:
    def test_tile_beats_theme(self, make_soup):
        soup = make_soup(_page(_TILE.format("#2b5797") + _THEME.format("#336699")))
        assert extract_theme_color(soup) == "#2b5797"

    def test_near_white_tile_skipped(self, make_soup):
        soup = make_soup(_page(_TILE.format("#fefefe") + _THEME.format("#336699")))
        assert extract_theme_color(soup) == "#336699"

    def test_bgcolor_before_theme(self, make_soup):
        soup = make_soup(_page(_TILE.format("#ffffff") + _THEME.format("#336699"), 'bgcolor="navy"'))
        assert extract_theme_color(soup) == "#000080"

    def test_black_and_white_rejected(self, make_soup):
        soup = make_soup(_page(_TILE.format("#fff") + _THEME.format("#000")))
        assert extract_theme_color(soup) == ""

    def test_no_candidates(self, make_soup):
        assert extract_theme_color(make_soup(_page())) == ""


class TestThemeColorFromHtml:
    def test_tile_beats_theme(self):
        html = _page(_TILE.format("#2B5797") + _THEME.format("#336699"))
        assert extract_theme_color_from_html(html) == "#2b5797"

    def test_single_quotes_and_bgcolor(self):
        html = _page("<meta name='theme-color' content='#336699'>", "bgcolor=#ff6600")
        assert extract_theme_color_from_html(html) == "#ff6600"

    def test_white_theme_rejected(self):
        assert extract_theme_color_from_html(_page(_THEME.format("#ffffff"))) == ""

    def test_same_as_tree_version(self, navigation_html, make_soup):
        assert extract_theme_color_from_html(navigation_html) == extract_theme_color(
            make_soup(navigation_html),
        )
