"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def article_html() -> str:
    return _read_fixture("article.html")


@pytest.fixture
def navigation_html() -> str:
    return _read_fixture("navigation.html")


@pytest.fixture
def article_index_html() -> str:
    return _read_fixture("article_index.html")


@pytest.fixture
def forum_html() -> str:
    return _read_fixture("forum.html")


@pytest.fixture
def news_index_html() -> str:
    return _read_fixture("news_index.html")


@pytest.fixture
def make_soup():
    """Return a factory parsing an HTML string with the default tree builder."""

    def _make(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "lxml")

    return _make
