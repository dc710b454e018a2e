"""Tests for termread.query - the end-to-end parse pipeline."""

from __future__ import annotations

import io

import pytest

from termread.items import NodeType
from termread.query import ParseError, parse, parse_string
from termread.settings import ParseOptions


def _types(node):
    return [c.type for c in node.children]


def _first(node, node_type):
    return next(c for c in node.children if c.type == node_type)


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------

class TestParseContract:
    @pytest.mark.parametrize("html", [
        "",
        "<p>hi</p>",
        "<<<>>> not really html",
        "<html><body></body></html>",
    ])
    def test_content_is_always_document_rooted(self, html):
        doc = parse_string(html)
        assert doc.content.type == NodeType.DOCUMENT

    def test_deterministic(self, article_index_html):
        first = parse_string(article_index_html).model_dump()
        second = parse_string(article_index_html).model_dump()
        assert first == second

    def test_accepts_bytes(self):
        doc = parse(b"<html><body><p>Hello there</p></body></html>")
        assert doc.content.children[0].plain_text() == "Hello there"

    def test_accepts_text_file_object(self):
        doc = parse(io.StringIO("<body><p>From a stream</p></body>"))
        assert doc.content.plain_text() == "From a stream"

    def test_accepts_binary_file_object(self):
        doc = parse(io.BytesIO(b"<body><p>From bytes</p></body>"))
        assert doc.content.plain_text() == "From bytes"

    def test_url_is_stored(self):
        doc = parse_string("<p>x</p>", url="https://example.com/post")
        assert doc.url == "https://example.com/post"


class TestParseErrors:
    def test_unsupported_input_type(self):
        with pytest.raises(ParseError) as exc_info:
            parse(42, url="https://example.com")
        assert exc_info.value.url == "https://example.com"

    def test_read_failure(self):
        class Broken:
            def read(self):
                raise OSError("disk on fire")

        with pytest.raises(ParseError, match="disk on fire"):
            parse(Broken())

    def test_missing_tree_builder(self):
        options = ParseOptions(parser="no-such-tree-builder")
        with pytest.raises(ParseError, match="not installed"):
            parse_string("<p>x</p>", options=options)

    def test_parse_string_rejects_bytes(self):
        with pytest.raises(ParseError):
            parse_string(b"<p>x</p>")

    def test_is_runtime_error(self):
        assert issubclass(ParseError, RuntimeError)


# ---------------------------------------------------------------------------
# Page-level metadata
# ---------------------------------------------------------------------------

class TestPageMetadata:
    def test_title_whitespace_collapsed(self, navigation_html):
        assert parse_string(navigation_html).title == "Navigation Test Page"

    def test_title_not_latex_processed(self):
        doc = parse_string("<html><head><title>Deals: $5 off, now $10_2 each</title></head></html>")
        assert doc.title == "Deals: $5 off, now $10_2 each"

    def test_lang_primary_subtag(self, navigation_html):
        assert parse_string(navigation_html).lang == "en"

    def test_theme_color_tile_wins(self, navigation_html):
        assert parse_string(navigation_html).theme_color == "#2b5797"

    def test_near_white_bgcolor_rejected(self, forum_html):
        assert parse_string(forum_html).theme_color == ""

    def test_no_lang_without_detection(self):
        doc = parse_string("<html><body><p>Plain text</p></body></html>")
        assert doc.lang == ""

    def test_language_detection_fallback(self):
        html = (
            "<html><body><p>The quick brown fox jumps over the lazy dog while "
            "the children watch from the window of their house.</p></body></html>"
        )
        doc = parse_string(html, options=ParseOptions(detect_language=True))
        assert doc.lang == "en"

    def test_html_lang_beats_detection(self):
        html = (
            '<html lang="de"><body><p>The quick brown fox jumps over the lazy dog '
            "while the children watch from the window.</p></body></html>"
        )
        doc = parse_string(html, options=ParseOptions(detect_language=True))
        assert doc.lang == "de"


# ---------------------------------------------------------------------------
# Navigation separation
# ---------------------------------------------------------------------------

class TestNavigationSeparation:
    def test_three_sections(self, navigation_html):
        doc = parse_string(navigation_html)
        assert len(doc.navigation) == 3
        assert all(s.type == NodeType.NAV_SECTION for s in doc.navigation)
        assert [s.text for s in doc.navigation] == ["Header", "Main navigation", "Footer"]

    def test_labelled_section_links(self, navigation_html):
        doc = parse_string(navigation_html)
        main_nav = next(s for s in doc.navigation if s.text == "Main navigation")
        assert [link.href for link in main_nav.children] == ["/news", "/sports"]
        assert [link.text for link in main_nav.children] == ["News", "Sports"]

    def test_content_holds_only_article(self, navigation_html):
        doc = parse_string(navigation_html)
        assert _types(doc.content) == [NodeType.HEADING1, NodeType.PARAGRAPH]
        assert doc.content.children[0].text == "Article Title"
        assert "Home" not in doc.content.plain_text()

    def test_empty_sections_dropped(self):
        doc = parse_string("<body><nav><span>No links</span></nav><p>Body text</p></body>")
        assert doc.navigation == []

    def test_link_without_text_shows_href(self):
        doc = parse_string('<body><footer><a href="/rss"><img src="rss.png"></a></footer></body>')
        assert doc.navigation[0].children[0].text == "/rss"


# ---------------------------------------------------------------------------
# Full article page
# ---------------------------------------------------------------------------

class TestArticlePage:
    def test_navigation(self, article_html):
        doc = parse_string(article_html)
        assert [s.text for s in doc.navigation] == ["Navigation", "Footer"]

    def test_heading_ids_and_links(self, article_html):
        content = parse_string(article_html).content
        h1 = _first(content, NodeType.HEADING1)
        assert h1.id == "top"
        assert h1.children == []

        h2 = _first(content, NodeType.HEADING2)
        assert h2.text == "Background"
        assert h2.id == "background"
        assert len(h2.children) == 1
        assert h2.children[0].type == NodeType.LINK
        assert h2.children[0].href == "#background"
        assert h2.children[0].children == []

    def test_inline_formatting(self, article_html):
        content = parse_string(article_html).content
        para = content.children[1]
        assert para.type == NodeType.PARAGRAPH
        assert para.plain_text() == (
            "Readers want clean text, not chrome. See the docs and parse()."
        )
        kinds = _types(para)
        assert NodeType.STRONG in kinds
        assert NodeType.EMPHASIS in kinds
        assert NodeType.CODE in kinds
        link = _first(para, NodeType.LINK)
        assert link.href == "/docs"

    def test_latex_converted(self, article_html):
        content = parse_string(article_html).content
        text = content.plain_text()
        assert "E=mc²" in text
        assert "$" not in text

    def test_latex_disabled(self, article_html):
        doc = parse_string(article_html, options=ParseOptions(latex_enabled=False))
        assert "$E=mc^2$" in doc.content.plain_text()

    def test_blockquote_and_pre(self, article_html):
        content = parse_string(article_html).content
        quote = _first(content, NodeType.BLOCKQUOTE)
        assert quote.children[0].type == NodeType.PARAGRAPH
        assert quote.plain_text() == "Quoted wisdom."

        code = _first(content, NodeType.CODE_BLOCK)
        assert code.text == "def f():\n    return 1"

    def test_list(self, article_html):
        content = parse_string(article_html).content
        lst = _first(content, NodeType.LIST)
        assert lst.id == "points"
        assert [i.plain_text() for i in lst.children] == ["First point", "Second point"]
        assert all(i.type == NodeType.LIST_ITEM for i in lst.children)

    def test_image_uses_filename(self, article_html):
        content = parse_string(article_html).content
        para = next(
            c for c in content.children
            if c.children and c.children[0].type == NodeType.IMAGE
        )
        link = para.children[0].children[0]
        assert link.href == "https://cdn.example.com/img/diagram.png"
        assert link.plain_text() == "[Image: diagram]"

    def test_details_expanded(self, article_html):
        content = parse_string(article_html).content
        h3 = next(c for c in content.children if c.text == "More details")
        assert h3.type == NodeType.HEADING3
        idx = content.children.index(h3)
        assert content.children[idx + 1].plain_text() == "Hidden paragraph text."

    def test_block_link_card(self, article_html):
        content = parse_string(article_html).content
        card = next(
            c for c in content.children
            if c.children and c.children[0].href == "https://example.com/related"
        )
        assert [c.type for c in card.children] == [NodeType.LINK, NodeType.TEXT, NodeType.TEXT]
        assert card.children[0].plain_text() == "Related article title"
        assert card.children[1].text == "\nA description of the related article that is long."
        assert card.children[2].text == "\n5 min read · Jan 2"

    def test_form_and_inputs(self, article_html):
        content = parse_string(article_html).content
        form = _first(content, NodeType.FORM)
        assert form.form_action == "/search"
        assert form.form_method == "POST"
        inputs = [c for c in form.children if c.type == NodeType.INPUT]
        assert [(i.input_name, i.input_type) for i in inputs] == [("q", "search"), ("", "submit")]
        assert inputs[0].text == "Search..."
        assert inputs[1].input_value == "Go"

    def test_container_id_becomes_anchor(self, article_html):
        content = parse_string(article_html).content
        anchor = _first(content, NodeType.ANCHOR)
        assert anchor.id == "comments"
        idx = content.children.index(anchor)
        assert content.children[idx + 1].plain_text() == "Comment text here."

    def test_scripts_never_leak(self, article_html):
        doc = parse_string(article_html)
        text = doc.content.plain_text()
        assert "never shown" not in text
        assert "tracking" not in text

    def test_translation_text(self, article_html):
        text = parse_string(article_html).plain_text_for_translation()
        assert text.startswith("Understanding Heuristic Extraction\n\nReaders want")


# ---------------------------------------------------------------------------
# Index pages
# ---------------------------------------------------------------------------

class TestIndexPages:
    def test_article_index_becomes_single_list(self, article_index_html):
        content = parse_string(article_index_html).content
        assert _types(content) == [NodeType.LIST]
        assert len(content.children[0].children) == 3

    def test_forum_table(self, forum_html):
        content = parse_string(forum_html).content
        assert _types(content) == [NodeType.PARAGRAPH, NodeType.PARAGRAPH]
        first = content.children[0]
        assert first.children[0].href == "https://example.com/story"
        assert first.plain_text() == "Show HN: A tiny HTML reader (128 points, 42 comments)"
        assert content.children[1].plain_text() == "Second story (5 points, discuss)"

    def test_news_index_normalized(self, news_index_html):
        content = parse_string(news_index_html).content
        assert _types(content) == [NodeType.HEADING2, NodeType.PARAGRAPH, NodeType.LIST]
        merged = content.children[-1]
        assert [item.children[0].href for item in merged.children] == [
            "https://news.example.com/a",
            "https://news.example.com/b",
            "https://news.example.com/c",
            "https://news.example.com/d",
        ]


# ---------------------------------------------------------------------------
# Deeply nested markup
# ---------------------------------------------------------------------------

def _nested(tag, depth, inner):
    return f"<html><body>{f'<{tag}>' * depth}{inner}{f'</{tag}>' * depth}</body></html>"


class TestDeepNesting:
    def test_lxml_deep_divs(self):
        doc = parse_string(_nested("div", 2000, "deep text here"))
        assert doc.content.type == NodeType.DOCUMENT

    def test_deep_divs_keep_text(self):
        doc = parse_string(
            _nested("div", 2000, "deep text here"),
            options=ParseOptions(parser="html.parser"),
        )
        assert "deep text here" in doc.content.plain_text()

    def test_deep_blockquotes_keep_text(self):
        doc = parse_string(
            _nested("blockquote", 1000, "<p>quoted words</p>"),
            options=ParseOptions(parser="html.parser"),
        )
        assert "quoted words" in doc.content.plain_text()

    def test_deep_inline_spans(self):
        spans = "<span>" * 1500 + "inner words" + "</span>" * 1500
        doc = parse_string(
            f"<html><body><p>Lead {spans}</p></body></html>",
            options=ParseOptions(parser="html.parser"),
        )
        assert doc.content.plain_text() == "Lead inner words"

    def test_deep_navigation(self):
        inner = '<nav><a href="/home">Home</a></nav><p>Body text</p>'
        doc = parse_string(
            _nested("div", 2000, inner),
            options=ParseOptions(parser="html.parser"),
        )
        assert len(doc.navigation) == 1
        assert doc.navigation[0].children[0].href == "/home"
