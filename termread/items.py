"""Pydantic models for the extracted document tree.

A :class:`Document` holds the page-level metadata, the main ``content`` tree
(always rooted at a ``NodeType.DOCUMENT`` node) and the navigation sections
pulled out of the page chrome.  The same shape is produced by every
provenance (heuristic extraction, rule-based pipelines), so renderers never
need to know where a tree came from.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Node kinds
# ---------------------------------------------------------------------------

class NodeType(StrEnum):
    DOCUMENT = "document"
    HEADING1 = "heading1"
    HEADING2 = "heading2"
    HEADING3 = "heading3"
    PARAGRAPH = "paragraph"
    BLOCKQUOTE = "blockquote"
    LIST = "list"
    LIST_ITEM = "list_item"
    CODE = "code"
    CODE_BLOCK = "code_block"
    LINK = "link"
    IMAGE = "image"            # image link, styled distinctively by renderers
    TEXT = "text"
    STRONG = "strong"
    EMPHASIS = "emphasis"
    MARK = "mark"              # highlighted text
    MARK_INSERT = "mark_insert"
    FORM = "form"
    INPUT = "input"
    NAV_SECTION = "nav_section"
    TABLE = "table"            # data table
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    ANCHOR = "anchor"          # fragment target, ID only
    HR = "hr"


HEADING_TYPES: frozenset[NodeType] = frozenset(
    {NodeType.HEADING1, NodeType.HEADING2, NodeType.HEADING3},
)

# Node kinds separated by a blank line in the structured text projection
_BLOCK_TYPES: frozenset[NodeType] = frozenset(
    {
        NodeType.PARAGRAPH,
        NodeType.HEADING1,
        NodeType.HEADING2,
        NodeType.HEADING3,
        NodeType.BLOCKQUOTE,
        NodeType.LIST_ITEM,
        NodeType.CODE_BLOCK,
    },
)


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------

class Node(BaseModel):
    """One node of the content tree.

    Fields beyond ``type`` are variant-specific; unused ones keep their
    empty defaults.  ``children`` are owned by this node alone.
    """

    type: NodeType
    text: str = ""
    children: list[Node] = Field(default_factory=list)
    href: str = ""
    id: str = ""

    # Form fields
    form_action: str = ""
    form_method: str = ""
    input_name: str = ""
    input_type: str = ""
    input_value: str = ""

    # Table cells
    is_header: bool = False

    # Rendering hint prepended to every line (e.g. "│ " for threaded comments)
    prefix: str = ""

    def append(self, child: Node) -> Node:
        self.children.append(child)
        return child

    def plain_text(self) -> str:
        """Return the text of this node and all descendants, in order."""
        parts: list[str] = []
        self._collect_text(parts)
        return "".join(parts)

    def _collect_text(self, parts: list[str]) -> None:
        if self.text:
            parts.append(self.text)
        for child in self.children:
            child._collect_text(parts)

    def _collect_structured(self, parts: list[str]) -> None:
        if self.type in _BLOCK_TYPES and parts:
            parts.append("\n\n")
        if self.text:
            parts.append(self.text)
        for child in self.children:
            child._collect_structured(parts)


def text_node(text: str) -> Node:
    return Node(type=NodeType.TEXT, text=text)


def link_node(href: str, text: str) -> Node:
    """Build a ``Link`` whose display text is a single ``Text`` child."""
    return Node(type=NodeType.LINK, href=href, children=[text_node(text)])


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

class Document(BaseModel):
    """Result of one parse call."""

    title: str = ""
    url: str = ""
    lang: str = ""
    theme_color: str = ""
    content: Node = Field(default_factory=lambda: Node(type=NodeType.DOCUMENT))
    navigation: list[Node] = Field(default_factory=list)

    def plain_text_for_translation(self) -> str:
        """Return the content text with paragraph breaks preserved.

        Translation APIs work best with natural paragraph boundaries, so
        every block-level node starts after a blank line.
        """
        parts: list[str] = []
        self.content._collect_structured(parts)
        return "".join(parts).strip()
