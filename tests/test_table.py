"""
Tests for table, row and cell compilation.
"""

from node2doc.elements import Table, TableCell, TableRow, Text
from node2doc.table import create_table, create_table_cell, create_table_row, resolve_cell_margins


class TestCellMargins:

    def test_missing_sides_become_zero(self):
        assert resolve_cell_margins({"padding_left": "1pt"}) == {"top": 0, "bottom": 0, "left": 20, "right": 0}

    def test_no_padding(self):
        assert resolve_cell_margins(None) is None
        assert resolve_cell_margins({"color": "red"}) is None


class TestCell:

    def test_styled_cell(self):
        cell = create_table_cell(
            TableCell(
                "x",
                style={"background_color": "#EEEEEE", "padding": "5pt", "vertical_align": "center"},
                column_span=2,
            )
        )
        assert cell["shading"] == {"type": "clear", "color": "auto", "fill": "EEEEEE"}
        assert cell["margins"] == {"top": 100, "bottom": 100, "left": 100, "right": 100}
        assert cell["vertical_align"] == "center"
        assert cell["column_span"] == 2
        assert "row_span" not in cell
        assert cell["borders"]["top"] == {"color": "auto", "size": 0, "style": "none"}
        assert cell["children"][0]["children"][0]["text"] == "x"

    def test_plain_cell(self):
        cell = create_table_cell(TableCell(Text("y")))
        assert cell["vertical_align"] == "top"
        assert "borders" not in cell
        assert "shading" not in cell
        assert "margins" not in cell

    def test_cell_style_reaches_content(self):
        cell = create_table_cell(TableCell(Text("y"), style={"font_weight": "bold"}))
        assert cell["children"][0]["children"][0]["bold"] is True

    def test_width(self):
        assert create_table_cell(TableCell(width="1in"))["width"] == {"size": 1440, "type": "dxa"}
        explicit = {"size": 10, "type": "pct"}
        assert create_table_cell(TableCell(docx={"width": explicit}))["width"] == explicit

    def test_docx_options_win(self):
        cell = create_table_cell(
            TableCell(style={"vertical_align": "bottom"}, row_span=2, docx={"vertical_align": "center", "row_span": 3})
        )
        assert cell["vertical_align"] == "center"
        assert cell["row_span"] == 2


class TestRowsAndTables:

    def test_row_keeps_only_cells(self):
        row = create_table_row(TableRow(TableCell("a"), "stray", Text("also stray"), docx={"cant_split": True}))
        assert len(row["cells"]) == 1
        assert row["cant_split"] is True

    def test_table(self):
        table = create_table(
            Table(
                TableRow(TableCell("a"), TableCell("b")),
                Text("dropped"),
                style={"width": "50%", "text_align": "center"},
            )
        )
        assert table["type"] == "table"
        assert table["alignment"] == "center"
        assert table["width"] == {"size": 50, "type": "pct"}
        assert len(table["rows"]) == 1
        assert len(table["rows"][0]["cells"]) == 2

    def test_default_width(self):
        table = create_table(Table())
        assert table["width"] == {"size": 100, "type": "pct"}
        assert table["alignment"] == "left"
        assert table["rows"] == []

    def test_docx_options(self):
        table = create_table(
            Table(style={"width": "50%"}, docx={"width": {"size": 5000, "type": "dxa"}, "style": "Light Grid"})
        )
        assert table["width"] == {"size": 5000, "type": "dxa"}
        assert table["style"] == "Light Grid"

    def test_table_ignores_inherited_style(self):
        table = create_table(Table(TableRow(TableCell(Text("x")))))
        assert table["rows"][0]["cells"][0]["children"][0]["children"][0]["bold"] is False
