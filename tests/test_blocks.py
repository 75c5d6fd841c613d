"""
Tests for block composition.
"""

from node2doc.blocks import render_block_nodes
from node2doc.elements import Header, Image, Path, Table, TableCell, TableRow, Text, View
from node2doc.nodes import TextInstance


class TestRenderBlockNodes:

    def test_order_preserved(self):
        blocks = render_block_nodes([Text("1"), Image(src=b""), Table(), Text("2")])
        assert [block["type"] for block in blocks] == ["paragraph", "paragraph", "table", "paragraph"]

    def test_bare_text_instance(self):
        blocks = render_block_nodes([TextInstance("loose\ntext")], {"font_size": 10})
        assert blocks[0]["type"] == "paragraph"
        assert [run["type"] for run in blocks[0]["children"]] == ["text", "break", "text"]
        assert blocks[0]["children"][0]["size"] == 20

    def test_views_are_transparent(self):
        blocks = render_block_nodes(
            [
                View(
                    Text("a"),
                    View(Text("b", style={"color": "#000000"}), style={"font_size": 10}),
                    style={"font_weight": "bold"},
                )
            ]
        )
        assert len(blocks) == 2
        first, second = blocks[0]["children"][0], blocks[1]["children"][0]
        assert first["bold"] is True
        assert "size" not in first
        assert second["bold"] is True
        assert second["size"] == 20
        assert second["color"] == "000000"

    def test_table_does_not_inherit_view_style(self):
        blocks = render_block_nodes(
            [View(Table(TableRow(TableCell(Text("x")))), style={"font_weight": "bold"})]
        )
        run = blocks[0]["rows"][0]["cells"][0]["children"][0]["children"][0]
        assert run["bold"] is False

    def test_unsupported_nodes_skipped(self):
        assert render_block_nodes([Path(d="M0 0"), Header(Text("h"))]) == []

    def test_empty(self):
        assert render_block_nodes([]) == []
