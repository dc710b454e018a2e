"""Tests for termread.items - the Document/Node data model."""

from __future__ import annotations

import json

from termread.items import Document, Node, NodeType, link_node, text_node


class TestNodeType:
    def test_values_are_lowercase_names(self):
        assert NodeType.HEADING1 == "heading1"
        assert NodeType.LIST_ITEM.value == "list_item"
        assert NodeType("nav_section") is NodeType.NAV_SECTION

    def test_covers_every_kind(self):
        assert len(NodeType) == 25


class TestNode:
    def test_append_returns_child(self):
        parent = Node(type=NodeType.PARAGRAPH)
        child = parent.append(text_node("hi"))
        assert parent.children == [child]

    def test_children_not_shared_between_instances(self):
        a = Node(type=NodeType.LIST)
        b = Node(type=NodeType.LIST)
        a.append(Node(type=NodeType.LIST_ITEM))
        assert b.children == []

    def test_plain_text_concatenates_in_order(self):
        para = Node(
            type=NodeType.PARAGRAPH,
            children=[
                text_node("Hello "),
                Node(type=NodeType.STRONG, children=[text_node("world")]),
                text_node("!"),
            ],
        )
        assert para.plain_text() == "Hello world!"

    def test_link_node_shape(self):
        link = link_node("https://example.com", "Example")
        assert link.type == NodeType.LINK
        assert link.href == "https://example.com"
        assert [c.text for c in link.children] == ["Example"]


class TestDocument:
    def test_default_content_is_document_node(self):
        doc = Document()
        assert doc.content.type == NodeType.DOCUMENT
        assert doc.navigation == []

    def test_plain_text_for_translation_separates_blocks(self):
        doc = Document()
        doc.content.append(Node(type=NodeType.HEADING1, text="Title"))
        para = doc.content.append(Node(type=NodeType.PARAGRAPH))
        para.append(text_node("First "))
        para.append(Node(type=NodeType.STRONG, children=[text_node("bold")]))
        lst = doc.content.append(Node(type=NodeType.LIST))
        item = lst.append(Node(type=NodeType.LIST_ITEM))
        item.append(text_node("Item one"))

        assert doc.plain_text_for_translation() == "Title\n\nFirst bold\n\nItem one"

    def test_json_round_shape(self):
        doc = Document(title="T", url="https://example.com")
        data = json.loads(doc.model_dump_json())
        assert data["title"] == "T"
        assert data["content"]["type"] == "document"
