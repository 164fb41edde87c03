"""Data models for extracted, analyzed and assembled document content."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Alignment = Literal["left", "center", "right", "justify"]
ObjectPosition = Literal["inline", "block"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- Extraction contract ---


class TextColor(_Frozen):
    """RGB color, each channel 0-255."""

    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)


class PositionedTextItem(_Frozen):
    """A run of text at a top-left-origin position on a page."""

    text: str
    x: float
    y: float
    width: float
    height: float
    font_name: str
    font_size: float
    font_weight: Literal["normal", "bold"] | None = None
    font_style: Literal["normal", "italic"] | None = None
    color: TextColor | None = None


class RawImage(_Frozen):
    """An image placed on a page, payload carried as a data URL."""

    x: float
    y: float
    width: float
    height: float
    data_url: str
    mime_type: Literal["image/png", "image/jpeg"] = "image/png"


class ExtractedPage(_Frozen):
    page_number: int  # 1-based
    width: float
    height: float
    text_items: tuple[PositionedTextItem, ...] = ()
    images: tuple[RawImage, ...] = ()


class DocumentMetadata(_Frozen):
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    keywords: str | None = None
    creation_date: datetime | None = None
    modification_date: datetime | None = None


class ExtractedContent(_Frozen):
    """Everything the extraction stage hands to the analyzer."""

    page_count: int
    pages: tuple[ExtractedPage, ...]
    metadata: DocumentMetadata | None = None


# --- Analysis ---


class TextLine(_Frozen):
    """Fragments sharing a Y band, ordered left to right."""

    items: tuple[PositionedTextItem, ...]
    y: float
    min_x: float
    max_x: float
    height: float

    @classmethod
    def from_items(cls, items) -> "TextLine":
        ordered = tuple(sorted(items, key=lambda item: item.x))
        return cls(
            items=ordered,
            y=ordered[0].y,
            min_x=min(item.x for item in ordered),
            max_x=max(item.x + item.width for item in ordered),
            height=max(item.height for item in ordered),
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x


class CharacterFormatting(_Frozen):
    font_family: str
    font_size: int
    font_weight: Literal["normal", "bold"] = "normal"
    font_style: Literal["normal", "italic"] = "normal"
    color: str = "#000000"


DEFAULT_FORMATTING = CharacterFormatting(font_family="Arial", font_size=14)


class FormattingRun(_Frozen):
    """Formatting applied to text[start_index:end_index]."""

    start_index: int
    end_index: int
    formatting: CharacterFormatting


class Margins(_Frozen):
    top: float
    right: float
    bottom: float
    left: float


class PageInfo(_Frozen):
    width: float
    height: float
    margins: Margins

    @property
    def content_width(self) -> float:
        return self.width - self.margins.left - self.margins.right


class AnalyzedParagraph(_Frozen):
    text: str
    formatting_runs: tuple[FormattingRun, ...]
    alignment: Alignment
    page_number: int
    y: float
    ends_with_newline: bool = True


class AnalyzedTableCell(_Frozen):
    text: str
    formatting_runs: tuple[FormattingRun, ...] = ()


class AnalyzedTableRow(_Frozen):
    cells: tuple[AnalyzedTableCell, ...]


class AnalyzedTable(_Frozen):
    rows: tuple[AnalyzedTableRow, ...]
    column_widths: tuple[float, ...]
    page_number: int
    y: float
    confidence: float = Field(ge=0.0, le=1.0)


class AnalyzedImage(_Frozen):
    data_url: str
    width: float
    height: float
    page_number: int
    y: float
    position: ObjectPosition


class AnalyzedContent(_Frozen):
    paragraphs: tuple[AnalyzedParagraph, ...] = ()
    images: tuple[AnalyzedImage, ...] = ()
    tables: tuple[AnalyzedTable, ...] = ()
    page_info: PageInfo


# --- Assembled document ---


class ParagraphFormattingEntry(_Frozen):
    paragraph_start: int
    alignment: Alignment


class ObjectSize(_Frozen):
    width: float
    height: float


class ImageObjectData(_Frozen):
    src: str
    alt: str = "Imported image"


class TableCellData(_Frozen):
    row: int
    col: int
    content: "ContentStream"


class TableObjectData(_Frozen):
    rows: int
    columns: int
    column_widths: tuple[float, ...]
    cells: tuple[TableCellData, ...]


class EmbeddedObjectData(_Frozen):
    id: str
    object_type: Literal["image", "table"]
    text_index: int
    position: ObjectPosition
    size: ObjectSize
    data: ImageObjectData | TableObjectData


class EmbeddedObjectReference(_Frozen):
    text_index: int
    object: EmbeddedObjectData


class ContentStream(_Frozen):
    """Offset-addressed text buffer with its side tables."""

    text: str = ""
    formatting_runs: tuple[FormattingRun, ...] = ()
    paragraph_formatting: tuple[ParagraphFormattingEntry, ...] = ()
    embedded_objects: tuple[EmbeddedObjectReference, ...] = ()
    # Reserved by the host model, always empty on import
    substitution_fields: tuple[dict, ...] = ()
    repeating_sections: tuple[dict, ...] = ()
    hyperlinks: tuple[dict, ...] = ()


for _model in (TableCellData, TableObjectData, EmbeddedObjectData, EmbeddedObjectReference):
    _model.model_rebuild()


class DocumentSettings(_Frozen):
    page_size: Literal["A4", "Letter", "Legal", "A3"]
    page_orientation: Literal["portrait", "landscape"]
    margins: Margins
    units: Literal["mm"] = "mm"


class PageData(_Frozen):
    id: str


class DocumentData(_Frozen):
    version: str = "1.0"
    pages: tuple[PageData, ...]
    settings: DocumentSettings
    body_content: ContentStream
    header_content: ContentStream = ContentStream()
    footer_content: ContentStream = ContentStream()
