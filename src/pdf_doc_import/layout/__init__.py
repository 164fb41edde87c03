from .models import (
    AnalyzedContent,
    AnalyzedImage,
    AnalyzedParagraph,
    AnalyzedTable,
    AnalyzedTableCell,
    AnalyzedTableRow,
    CharacterFormatting,
    ContentStream,
    DocumentData,
    DocumentMetadata,
    DocumentSettings,
    ExtractedContent,
    ExtractedPage,
    FormattingRun,
    PageInfo,
    PositionedTextItem,
    RawImage,
    TextColor,
    TextLine,
)
from .lines import group_into_lines
from .paragraphs import group_into_paragraphs
from .tables import TableDetection, TableRegion, detect_tables
from .alignment import detect_alignment
from .formatting import map_font_family, map_formatting, merge_formatting_runs
from .page_layout import analyze_images, analyze_page_layout
from .analyzer import ContentAnalyzer, PageAnalysis
from .builder import (
    OBJECT_REPLACEMENT_CHAR,
    PAGE_BREAK_CHAR,
    DocumentBuilder,
    ObjectIdGenerator,
)
from .errors import PDFImportError, PDFImportErrorCode
from .pdf_parser import parse_pdf
from .importer import ImportProgress, ImportResult, PDFImporter

__all__ = [
    # Models
    "AnalyzedContent",
    "AnalyzedImage",
    "AnalyzedParagraph",
    "AnalyzedTable",
    "AnalyzedTableCell",
    "AnalyzedTableRow",
    "CharacterFormatting",
    "ContentStream",
    "DocumentData",
    "DocumentMetadata",
    "DocumentSettings",
    "ExtractedContent",
    "ExtractedPage",
    "FormattingRun",
    "PageInfo",
    "PositionedTextItem",
    "RawImage",
    "TextColor",
    "TextLine",
    # Layout analysis
    "group_into_lines",
    "group_into_paragraphs",
    "detect_tables",
    "TableDetection",
    "TableRegion",
    "detect_alignment",
    "map_font_family",
    "map_formatting",
    "merge_formatting_runs",
    "analyze_images",
    "analyze_page_layout",
    "ContentAnalyzer",
    "PageAnalysis",
    # Assembly
    "DocumentBuilder",
    "ObjectIdGenerator",
    "PAGE_BREAK_CHAR",
    "OBJECT_REPLACEMENT_CHAR",
    # Import
    "parse_pdf",
    "PDFImporter",
    "ImportProgress",
    "ImportResult",
    "PDFImportError",
    "PDFImportErrorCode",
]
