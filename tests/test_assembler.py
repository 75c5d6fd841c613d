"""
Tests for document and section assembly.
"""

import copy

import pytest

from node2doc.assembler import (
    DocumentStructureError,
    build_document,
    resolve_document_styles,
    resolve_page_size,
)
from node2doc.elements import Document, Footer, Header, Page, Text
from node2doc.nodes import Container

A4 = {"width": 11905, "height": 16837}


class TestDocumentRoot:

    def test_missing_root(self):
        with pytest.raises(DocumentStructureError, match="Document root is missing."):
            build_document(Container([Page()]))

    def test_missing_root_is_value_error(self):
        with pytest.raises(ValueError):
            build_document([])

    def test_accepts_container_list_and_node(self):
        document = Document(Page())
        assert build_document(Container([document])) == build_document(document)
        assert build_document([Text("x"), document]) == build_document(document)


class TestDocumentModel:

    def test_metadata(self):
        model = build_document(
            Document(Page(Text("Hi")), title="T", subject="S", keywords=["a", "b"], creator="me", description="D")
        )
        assert model["title"] == "T"
        assert model["subject"] == "S"
        assert model["keywords"] == "a, b"
        assert model["creator"] == "me"
        assert model["description"] == "D"
        assert model["styles"] is None
        assert len(model["sections"]) == 1

    def test_docx_options_pass_through(self):
        model = build_document(Document(Page(), docx={"last_modified_by": "robot"}))
        assert model["last_modified_by"] == "robot"

    def test_string_keywords_unchanged(self):
        assert build_document(Document(keywords="one, two"))["keywords"] == "one, two"

    def test_pages_become_sections_in_order(self):
        model = build_document(Document(Page(Text("one")), Text("ignored"), Page(Text("two"))))
        texts = [section["children"][0]["children"][0]["text"] for section in model["sections"]]
        assert texts == ["one", "two"]

    def test_deterministic_and_read_only(self, sample_tree):
        before = copy.deepcopy(sample_tree)
        assert build_document(sample_tree) == build_document(sample_tree)
        assert sample_tree == before


class TestHeadersAndFooters:

    def test_slots_and_title_page(self):
        section = build_document(
            Document(Page(Header(Text("first"), type="first"), Footer(Text("f")), Text("body")))
        )["sections"][0]
        assert set(section["headers"]) == {"first"}
        assert set(section["footers"]) == {"default"}
        assert section["properties"]["title_page"] is True
        assert len(section["children"]) == 1

    def test_explicit_title_page_kept(self):
        section = build_document(
            Document(Page(Header(type="first"), properties={"title_page": False}))
        )["sections"][0]
        assert section["properties"]["title_page"] is False

    def test_no_first_slot_no_title_page(self):
        section = build_document(Document(Page(Header(Text("h")))))["sections"][0]
        assert "title_page" not in section["properties"]

    def test_later_header_replaces_earlier(self):
        section = build_document(Document(Page(Header(Text("old")), Header(Text("new")))))["sections"][0]
        assert section["headers"]["default"]["children"][0]["children"][0]["text"] == "new"

    def test_even_slot_enables_even_and_odd(self):
        model = build_document(Document(Page(), Page(Footer(Text("e"), type="even"))))
        assert model["even_and_odd_header_and_footers"] is True
        assert all("has_even_header_footer" not in section for section in model["sections"])

    def test_even_and_odd_off_without_even_slot(self):
        model = build_document(Document(Page(Header(Text("h")))))
        assert "even_and_odd_header_and_footers" not in model

    def test_explicit_even_and_odd_wins(self):
        model = build_document(
            Document(Page(Footer(type="even")), docx={"even_and_odd_header_and_footers": False})
        )
        assert model["even_and_odd_header_and_footers"] is False


class TestPageProperties:

    def test_a4_by_default(self):
        section = build_document(Document(Page()))["sections"][0]
        assert section["properties"]["page"]["size"] == A4

    def test_explicit_size(self):
        size = resolve_page_size({"width": "8.5in", "height": "11in", "orientation": "landscape"})
        assert size == {"width": 12240, "height": 15840, "orientation": "landscape"}

    def test_unknown_preset(self):
        assert resolve_page_size("letter") is None
        assert resolve_page_size("a4") is None
        assert resolve_page_size({"width": "8.5in"}) is None

    def test_margins_from_padding(self):
        section = build_document(Document(Page(style={"padding": "1in", "padding_left": "0.5in"})))["sections"][0]
        assert section["properties"]["page"]["margin"] == {"top": 1440, "bottom": 1440, "left": 720, "right": 1440}

    def test_page_pass_through_merges(self):
        section = build_document(
            Document(
                Page(
                    style={"padding": "1in"},
                    properties={"page": {"margin": {"top": 0, "header": 500}, "size": {"code": 9}}},
                )
            )
        )["sections"][0]
        page = section["properties"]["page"]
        assert page["margin"] == {"top": 0, "bottom": 1440, "left": 1440, "right": 1440, "header": 500}
        assert page["size"] == {"code": 9}


class TestDocumentStyles:

    def test_font_and_language(self):
        model = build_document(Document(Page(), style={"font_family": "Arial"}, language="en-US"))
        assert model["styles"] == {"default": {"document": {"run": {"font": "Arial", "language": {"value": "en-US"}}}}}

    def test_user_styles_win(self):
        styles = resolve_document_styles(
            {"font_family": "Arial"},
            "en-US",
            {"default": {"document": {"run": {"font": "Times"}}}, "paragraph_styles": []},
        )
        assert styles["default"]["document"]["run"] == {"font": "Times", "language": {"value": "en-US"}}
        assert styles["paragraph_styles"] == []

    def test_nothing_to_synthesize(self):
        user = {"paragraph_styles": []}
        resolved = resolve_document_styles(None, None, user)
        assert resolved == user
        assert resolved is not user
        assert resolve_document_styles(None, None, None) is None


class TestModelOwnership:

    def test_user_styles_are_copied(self):
        user_styles = {"default": {"document": {"run": {"font": "Times"}}}}
        model = build_document(Document(Page(), style={"font_family": "Arial"}, styles=user_styles))
        model["styles"]["default"]["document"]["run"]["font"] = "Courier"
        assert user_styles["default"]["document"]["run"]["font"] == "Times"
