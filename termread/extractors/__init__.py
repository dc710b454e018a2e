"""Extraction sub-package: deterministic, layout-agnostic content extraction."""

from .article_list import looks_like_news_index, normalize_news_index
from .blocks import DocumentBuilder
from .main_content import find_content_root
from .metadata import extract_theme_color, extract_theme_color_from_html
from .navigation import extract_navigation
from .tables import extract_table

__all__ = [
    "DocumentBuilder",
    "extract_navigation",
    "extract_table",
    "extract_theme_color",
    "extract_theme_color_from_html",
    "find_content_root",
    "looks_like_news_index",
    "normalize_news_index",
]
