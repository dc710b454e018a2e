"""termread - turn real-world HTML pages into clean reading trees.

Quick usage::

    from termread import parse_string

    doc = parse_string(html, url="https://example.com/post")
    print(doc.title, doc.lang, doc.theme_color)
    for section in doc.navigation:
        print(section.text, [link.href for link in section.children])
    print(doc.plain_text_for_translation())

Reusable configuration::

    from termread import DocumentParser, ParseOptions

    parser = DocumentParser(ParseOptions(latex_enabled=False))
    doc = parser.parse(open("page.html", "rb"))
"""

from termread.extractors.metadata import extract_theme_color_from_html
from termread.items import Document, Node, NodeType
from termread.parser import DocumentParser
from termread.profiles import load_profile
from termread.query import ParseError, parse, parse_string
from termread.settings import ParseOptions

__version__ = "0.1.0"
__all__ = [
    "Document",
    "DocumentParser",
    "Node",
    "NodeType",
    "ParseError",
    "ParseOptions",
    "extract_theme_color_from_html",
    "load_profile",
    "parse",
    "parse_string",
]
