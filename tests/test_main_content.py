"""Tests for termread.extractors.main_content - content root location."""

from __future__ import annotations

from termread.extractors.dom import find_element, get_attr
from termread.extractors.main_content import (
    find_content_rich_div,
    find_content_root,
    first_success,
    score_content_richness,
)


def _root(make_soup, html):
    soup = make_soup(html)
    body = find_element(soup, "body")
    return find_content_root(soup, body)


class TestMainTier:
    def test_indicator_article_inside_main(self, make_soup):
        root = _root(make_soup, """
            <main><div class="hero">Hero</div>
            <article class="markdown-body"><p>Readme</p></article></main>
        """)
        assert root.name == "article"
        assert "markdown-body" in get_attr(root, "class")

    def test_multiple_articles_return_main(self, make_soup):
        root = _root(make_soup, """
            <main>
              <article><div class="story-body"><p>One</p></div></article>
              <article><div class="story-body"><p>Two</p></div></article>
            </main>
        """)
        assert root.name == "main"

    def test_indicator_div_inside_main(self, make_soup):
        root = _root(make_soup, """
            <main><div class="sidebar">x</div><div class="entry-content"><p>Post</p></div></main>
        """)
        assert get_attr(root, "class") == "entry-content"

    def test_single_plain_article_inside_main(self, make_soup):
        root = _root(make_soup, "<main><h1>T</h1><article><p>Only</p></article></main>")
        assert root.name == "article"

    def test_bare_main(self, make_soup):
        root = _root(make_soup, "<main><p>Just main</p></main>")
        assert root.name == "main"


class TestLowerTiers:
    def test_standalone_article(self, make_soup):
        root = _root(make_soup, "<div><p>a</p><p>b</p></div><article><p>Story</p></article>")
        assert root.name == "article"

    def test_role_main(self, make_soup):
        root = _root(make_soup, '<div role="main"><p>Main body</p></div>')
        assert get_attr(root, "role") == "main"

    def test_container_id_ignores_headings(self, make_soup):
        root = _root(make_soup, """
            <h1 id="content">Heading sharing the id</h1>
            <section id="content"><p>Real content</p></section>
        """)
        assert root.name == "section"

    def test_id_order(self, make_soup):
        root = _root(make_soup, """
            <div id="main"><p>main</p></div>
            <div id="main-content"><p>main-content</p></div>
        """)
        assert get_attr(root, "id") == "main-content"

    def test_content_rich_div(self, make_soup):
        root = _root(make_soup, """
            <div class="promo"><p>one</p></div>
            <div class="story"><h2>Title</h2><p>a</p><p>b</p></div>
        """)
        assert get_attr(root, "class") == "story"

    def test_falls_back_to_body(self, make_soup):
        root = _root(make_soup, "<span>hello</span><div><p>short</p></div>")
        assert root.name == "body"


class TestRichnessScore:
    def test_score_counts(self, make_soup):
        soup = make_soup("<div><p>a</p><p>b</p><h2>t</h2><article></article></div>")
        assert score_content_richness(soup.div) == 2 + 2 + 3 + 5

    def test_chrome_penalty(self, make_soup):
        soup = make_soup("<div><p>a</p><p>b</p><h2>t</h2><nav></nav></div>")
        assert score_content_richness(soup.div) == 2

    def test_ties_keep_first(self, make_soup):
        soup = make_soup("""
            <div id="first"><p>a</p><p>b</p></div>
            <div id="second"><p>c</p><p>d</p></div>
        """)
        assert get_attr(find_content_rich_div(soup.body), "id") == "first"

    def test_below_threshold(self, make_soup):
        soup = make_soup("<div><p>only one</p></div>")
        assert find_content_rich_div(soup.body) is None


class TestFirstSuccess:
    def test_first_non_none_wins(self):
        calls = []

        def _none():
            calls.append("none")
            return None

        def _hit():
            calls.append("hit")
            return "x"

        def _never():
            calls.append("never")
            return "y"

        assert first_success(("a", _none), ("b", _hit), ("c", _never)) == ("b", "x")
        assert calls == ["none", "hit"]

    def test_all_fail(self):
        assert first_success(("a", lambda: None)) is None
