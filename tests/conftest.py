"""Shared fixtures for the import pipeline tests."""

import pytest

from pdf_doc_import.layout.models import Margins, PageInfo, PositionedTextItem


def text_item(text: str, x: float, y: float, font_size: float = 12, **fields) -> PositionedTextItem:
    """Fragment with a width estimated from its length, like typical body text."""
    values = {
        "text": text,
        "x": x,
        "y": y,
        "width": len(text) * font_size * 0.6,
        "height": font_size,
        "font_name": "Arial",
        "font_size": font_size,
        "font_weight": "normal",
        "font_style": "normal",
    }
    values.update(fields)
    return PositionedTextItem(**values)


@pytest.fixture
def make_item():
    return text_item


@pytest.fixture
def letter_page_info() -> PageInfo:
    """US Letter page with one-inch margins."""
    return PageInfo(
        width=612,
        height=792,
        margins=Margins(top=72, right=72, bottom=72, left=72),
    )
