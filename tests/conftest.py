"""
Pytest configuration for node2doc
"""

import logging
import sys
import tempfile
from pathlib import Path

import pytest

from node2doc.elements import Document, Footer, Header, Page, Table, TableCell, TableRow, Text, View


@pytest.fixture(autouse=True)
def configure_logging():
    """Console-only logging for tests, warnings and above."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def sample_tree():
    """A small document exercising text, views, tables, headers and footers."""
    return Document(
        Page(
            Header(Text("Report header")),
            Footer(Text("Page footer")),
            Text("Quarterly report", style={"font_size": 18, "font_weight": "bold", "text_align": "center"}),
            View(
                Text("First line\nSecond line"),
                style={"color": "#333333"},
            ),
            Table(
                TableRow(TableCell("Name"), TableCell("Value")),
                TableRow(TableCell("Total"), TableCell("42")),
            ),
            style={"padding": "1in"},
        ),
        title="Report",
        creator="Finance",
        keywords=["report", "quarterly"],
    )
