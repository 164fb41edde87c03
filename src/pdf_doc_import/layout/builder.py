"""Assembly of analyzed content into a single flowing content stream.

The assembler first turns the analyzed items into a list of stream tokens
(paragraphs, newlines, page breaks, embedded objects) and only then
materializes them into the text buffer with its side tables.
"""

import itertools
import math
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

from ..logger import logger
from .formatting import merge_formatting_runs
from .models import (
    DEFAULT_FORMATTING,
    AnalyzedContent,
    AnalyzedImage,
    AnalyzedParagraph,
    AnalyzedTable,
    CharacterFormatting,
    ContentStream,
    DocumentData,
    DocumentSettings,
    EmbeddedObjectData,
    EmbeddedObjectReference,
    FormattingRun,
    ImageObjectData,
    Margins,
    ObjectPosition,
    ObjectSize,
    PageData,
    PageInfo,
    ParagraphFormattingEntry,
    TableCellData,
    TableObjectData,
)

PAGE_BREAK_CHAR = "\x0c"
OBJECT_REPLACEMENT_CHAR = "\ufffc"

TABLE_ROW_HEIGHT = 30
PAGE_SIZE_TOLERANCE = 10
POINTS_TO_MM = 0.352778

# (name, width, height) in points; anything else is treated as A4
STANDARD_PAGE_SIZES = (
    ("Letter", 612, 792),
    ("Legal", 612, 1008),
    ("A3", 842, 1191),
)


class ObjectIdGenerator:
    """Sequential ``imported-<type>-<n>`` identifiers, one sequence per build."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def next_id(self, object_type: str) -> str:
        return f"imported-{object_type}-{next(self._counter)}"


# --- Stream tokens ---


class _Token(BaseModel):
    model_config = ConfigDict(frozen=True)


class ParagraphToken(_Token):
    paragraph: AnalyzedParagraph


class NewlineToken(_Token):
    pass


class PageBreakToken(_Token):
    pass


class ObjectToken(_Token):
    id: str
    object_type: Literal["image", "table"]
    position: ObjectPosition
    size: ObjectSize
    data: ImageObjectData | TableObjectData


StreamToken = Union[ParagraphToken, NewlineToken, PageBreakToken, ObjectToken]


def with_defaults(formatting: CharacterFormatting) -> CharacterFormatting:
    """Fill empty or zero formatting fields from the host defaults."""
    return formatting.model_copy(
        update={
            "font_family": formatting.font_family or DEFAULT_FORMATTING.font_family,
            "font_size": formatting.font_size or DEFAULT_FORMATTING.font_size,
            "color": formatting.color or DEFAULT_FORMATTING.color,
        }
    )


def _table_token(table: AnalyzedTable, object_id: str) -> ObjectToken:
    cells = tuple(
        TableCellData(
            row=row_index,
            col=col_index,
            content=ContentStream(
                text=cell.text,
                formatting_runs=tuple(
                    run.model_copy(update={"formatting": with_defaults(run.formatting)})
                    for run in cell.formatting_runs
                ),
            ),
        )
        for row_index, row in enumerate(table.rows)
        for col_index, cell in enumerate(row.cells)
    )
    return ObjectToken(
        id=object_id,
        object_type="table",
        position="block",
        size=ObjectSize(
            width=sum(table.column_widths),
            height=len(table.rows) * TABLE_ROW_HEIGHT,
        ),
        data=TableObjectData(
            rows=len(table.rows),
            columns=len(table.column_widths),
            column_widths=table.column_widths,
            cells=cells,
        ),
    )


def _image_token(image: AnalyzedImage, object_id: str) -> ObjectToken:
    return ObjectToken(
        id=object_id,
        object_type="image",
        position=image.position,
        size=ObjectSize(width=image.width, height=image.height),
        data=ImageObjectData(src=image.data_url),
    )


def tokenize(
    content: AnalyzedContent, page_count: int, ids: ObjectIdGenerator
) -> list[StreamToken]:
    """Order analyzed items by (page, y) and lay them out as stream tokens.

    Every page advanced emits a page break, including pages without content
    and trailing pages up to ``page_count``.
    """
    items: list[AnalyzedParagraph | AnalyzedImage | AnalyzedTable] = [
        *content.paragraphs,
        *content.images,
        *content.tables,
    ]
    items.sort(key=lambda item: (item.page_number, item.y))

    tokens: list[StreamToken] = []
    current_page = 1
    for item in items:
        while current_page < item.page_number:
            tokens.append(PageBreakToken())
            current_page += 1

        if isinstance(item, AnalyzedParagraph):
            tokens.append(ParagraphToken(paragraph=item))
            if item.ends_with_newline:
                tokens.append(NewlineToken())
        elif isinstance(item, AnalyzedImage):
            tokens.append(_image_token(item, ids.next_id("image")))
            if item.position == "block":
                tokens.append(NewlineToken())
        else:
            tokens.append(_table_token(item, ids.next_id("table")))
            tokens.append(NewlineToken())

    while current_page < page_count:
        tokens.append(PageBreakToken())
        current_page += 1

    return tokens


class _StreamWriter:
    """Text buffer whose formatting runs always cover it end to end."""

    def __init__(self):
        self.parts: list[str] = []
        self.length = 0
        self.runs: list[FormattingRun] = []

    @property
    def current_formatting(self) -> CharacterFormatting:
        return self.runs[-1].formatting if self.runs else DEFAULT_FORMATTING

    def write(self, text: str, formatting: CharacterFormatting | None = None) -> None:
        if not text:
            return
        formatting = formatting or self.current_formatting
        start = self.length
        self.parts.append(text)
        self.length += len(text)
        run = FormattingRun(start_index=start, end_index=self.length, formatting=formatting)
        if self.runs and self.runs[-1].formatting == formatting:
            self.runs[-1] = self.runs[-1].model_copy(update={"end_index": self.length})
        else:
            self.runs.append(run)

    def write_paragraph(self, paragraph: AnalyzedParagraph) -> None:
        text = paragraph.text
        cursor = 0
        for run in merge_formatting_runs(paragraph.formatting_runs):
            start = min(max(run.start_index, cursor), len(text))
            end = min(run.end_index, len(text))
            self.write(text[cursor:start])
            self.write(text[start:end], with_defaults(run.formatting))
            cursor = max(cursor, end)
        self.write(text[cursor:])


def materialize(tokens: list[StreamToken]) -> ContentStream:
    """Serialize stream tokens into text plus offset-indexed side tables."""
    writer = _StreamWriter()
    paragraph_formatting: list[ParagraphFormattingEntry] = []
    embedded_objects: list[EmbeddedObjectReference] = []

    for token in tokens:
        if isinstance(token, ParagraphToken):
            paragraph_formatting.append(
                ParagraphFormattingEntry(
                    paragraph_start=writer.length,
                    alignment=token.paragraph.alignment,
                )
            )
            writer.write_paragraph(token.paragraph)
        elif isinstance(token, NewlineToken):
            writer.write("\n")
        elif isinstance(token, PageBreakToken):
            writer.write(PAGE_BREAK_CHAR)
        else:
            text_index = writer.length
            embedded_objects.append(
                EmbeddedObjectReference(
                    text_index=text_index,
                    object=EmbeddedObjectData(
                        id=token.id,
                        object_type=token.object_type,
                        text_index=text_index,
                        position=token.position,
                        size=token.size,
                        data=token.data,
                    ),
                )
            )
            writer.write(OBJECT_REPLACEMENT_CHAR)

    return ContentStream(
        text="".join(writer.parts),
        formatting_runs=tuple(writer.runs),
        paragraph_formatting=tuple(paragraph_formatting),
        embedded_objects=tuple(embedded_objects),
    )


def create_settings(page_info: PageInfo) -> DocumentSettings:
    """Match the page against standard sizes and convert margins to mm."""
    page_size = "A4"
    for name, width, height in STANDARD_PAGE_SIZES:
        if (
            abs(page_info.width - width) < PAGE_SIZE_TOLERANCE
            and abs(page_info.height - height) < PAGE_SIZE_TOLERANCE
        ):
            page_size = name
            break

    def to_mm(points: float) -> int:
        return math.floor(points * POINTS_TO_MM + 0.5)

    margins = page_info.margins
    return DocumentSettings(
        page_size=page_size,
        page_orientation="landscape" if page_info.width > page_info.height else "portrait",
        margins=Margins(
            top=to_mm(margins.top),
            right=to_mm(margins.right),
            bottom=to_mm(margins.bottom),
            left=to_mm(margins.left),
        ),
        units="mm",
    )


def create_pages(count: int) -> tuple[PageData, ...]:
    return tuple(PageData(id=f"imported-page-{index + 1}") for index in range(count))


class DocumentBuilder:
    """Build host document data from analyzed content."""

    def build(
        self,
        content: AnalyzedContent,
        page_count: int,
        ids: ObjectIdGenerator | None = None,
    ) -> DocumentData:
        """Assemble the body stream, pages and settings.

        Args:
            content: Analyzer output for the whole document.
            page_count: Number of pages in the source document.
            ids: Identifier sequence for embedded objects. A fresh one
                starting at 1 is used when omitted.
        """
        tokens = tokenize(content, page_count, ids or ObjectIdGenerator())
        body = materialize(tokens)

        logger.info(
            "document assembled",
            pages=page_count,
            text_length=len(body.text),
            formatting_runs=len(body.formatting_runs),
            paragraphs=len(body.paragraph_formatting),
            embedded_objects=len(body.embedded_objects),
        )

        return DocumentData(
            version="1.0",
            pages=create_pages(page_count),
            settings=create_settings(content.page_info),
            body_content=body,
            header_content=ContentStream(),
            footer_content=ContentStream(),
        )
