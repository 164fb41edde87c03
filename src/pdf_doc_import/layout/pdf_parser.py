"""Raw content extraction from PDF files using PyMuPDF."""

import base64
import re
from datetime import datetime
from pathlib import Path

import fitz  # PyMuPDF

from ..logger import logger
from .errors import PDFImportError, PDFImportErrorCode
from .models import (
    DocumentMetadata,
    ExtractedContent,
    ExtractedPage,
    PositionedTextItem,
    RawImage,
    TextColor,
)

# PyMuPDF span flags
FLAG_ITALIC = 2**1
FLAG_BOLD = 2**4

_BOLD_NAME = re.compile(r"bold|black|heavy|semibold|demibold", re.IGNORECASE)
_ITALIC_NAME = re.compile(r"italic|oblique", re.IGNORECASE)
_PDF_DATE = re.compile(r"D:(\d{4})(\d{2})(\d{2})(\d{2})?(\d{2})?(\d{2})?")

_MIME_TYPES = {"png": "image/png", "jpg": "image/jpeg", "jpeg": "image/jpeg"}


def parse_pdf_date(value: str | None) -> datetime | None:
    """Parse a PDF date string such as ``D:20240131120000+01'00'``."""
    if not value:
        return None
    match = _PDF_DATE.match(value)
    if not match:
        return None
    year, month, day, hour, minute, second = (int(part or 0) for part in match.groups())
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        return None


def _decode_color(value: int) -> TextColor:
    return TextColor(r=(value >> 16) & 0xFF, g=(value >> 8) & 0xFF, b=value & 0xFF)


def span_to_text_item(span: dict) -> PositionedTextItem:
    """Convert a span from ``page.get_text("dict")`` to a positioned item."""
    x0, y0, x1, y1 = span["bbox"]
    font_name = span.get("font", "")
    flags = span.get("flags", 0)
    bold = bool(flags & FLAG_BOLD) or bool(_BOLD_NAME.search(font_name))
    italic = bool(flags & FLAG_ITALIC) or bool(_ITALIC_NAME.search(font_name))
    return PositionedTextItem(
        text=span.get("text", ""),
        x=x0,
        y=y0,
        width=x1 - x0,
        height=y1 - y0,
        font_name=font_name,
        font_size=round(span.get("size", 12.0), 1),
        font_weight="bold" if bold else "normal",
        font_style="italic" if italic else "normal",
        color=_decode_color(span.get("color", 0)),
    )


def image_block_to_raw_image(block: dict) -> RawImage:
    """Convert an image block (``type == 1``) to a data-URL image."""
    x0, y0, x1, y1 = block["bbox"]
    payload = block["image"]
    mime_type = _MIME_TYPES.get(block.get("ext", "").lower())
    if mime_type is None:
        # Re-encode formats the host cannot display directly
        payload = fitz.Pixmap(payload).tobytes("png")
        mime_type = "image/png"
    encoded = base64.b64encode(payload).decode("ascii")
    return RawImage(
        x=x0,
        y=y0,
        width=x1 - x0,
        height=y1 - y0,
        data_url=f"data:{mime_type};base64,{encoded}",
        mime_type=mime_type,
    )


def extract_page(page: fitz.Page, page_number: int, extract_images: bool = True) -> ExtractedPage:
    page_dict = page.get_text("dict")
    text_items = []
    images = []

    for block_index, block in enumerate(page_dict.get("blocks", [])):
        if block.get("type") == 0:
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    if span.get("text", "").strip():
                        text_items.append(span_to_text_item(span))
        elif block.get("type") == 1 and extract_images:
            try:
                images.append(image_block_to_raw_image(block))
            except Exception as e:
                logger.warn(
                    "image extraction failed",
                    page_number=page_number,
                    block_index=block_index,
                    error=str(e),
                )

    return ExtractedPage(
        page_number=page_number,
        width=page.rect.width,
        height=page.rect.height,
        text_items=tuple(text_items),
        images=tuple(images),
    )


def extract_metadata(doc: fitz.Document) -> DocumentMetadata:
    info = doc.metadata or {}
    return DocumentMetadata(
        title=info.get("title") or None,
        author=info.get("author") or None,
        subject=info.get("subject") or None,
        keywords=info.get("keywords") or None,
        creation_date=parse_pdf_date(info.get("creationDate")),
        modification_date=parse_pdf_date(info.get("modDate")),
    )


def _open_document(source: str | Path | bytes) -> fitz.Document:
    if isinstance(source, (bytes, bytearray)):
        try:
            return fitz.open(stream=bytes(source), filetype="pdf")
        except Exception as e:
            raise PDFImportError(
                "Failed to load PDF document", PDFImportErrorCode.INVALID_PDF, e
            ) from e

    file_path = Path(source)
    if not file_path.exists():
        raise FileNotFoundError(f"PDF file not found: {file_path}")
    try:
        return fitz.open(file_path)
    except Exception as e:
        raise PDFImportError(
            "Failed to load PDF document", PDFImportErrorCode.INVALID_PDF, e
        ) from e


def parse_pdf(
    source: str | Path | bytes, password: str = "", extract_images: bool = True
) -> ExtractedContent:
    """Extract positioned text, images and metadata from a PDF.

    Args:
        source: Path to a PDF file or the raw PDF bytes.
        password: Password for encrypted documents.
        extract_images: Whether to read embedded images.

    Returns:
        ExtractedContent with one ExtractedPage per page, 1-based.

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist.
        PDFImportError: If the document cannot be opened, unlocked or read.
    """
    doc = _open_document(source)
    try:
        if doc.needs_pass:
            if not password:
                raise PDFImportError(
                    "This PDF is encrypted and requires a password",
                    PDFImportErrorCode.PASSWORD_REQUIRED,
                )
            if not doc.authenticate(password):
                raise PDFImportError(
                    "Incorrect password for encrypted PDF",
                    PDFImportErrorCode.INCORRECT_PASSWORD,
                )

        logger.info("parsing pdf", total_pages=doc.page_count)

        try:
            pages = tuple(
                extract_page(page, page_index + 1, extract_images)
                for page_index, page in enumerate(doc)
            )
            metadata = extract_metadata(doc)
        except Exception as e:
            raise PDFImportError(
                "Failed to extract content from PDF",
                PDFImportErrorCode.EXTRACTION_FAILED,
                e,
            ) from e

        logger.info(
            "pdf parsed successfully",
            total_pages=len(pages),
            text_items=sum(len(page.text_items) for page in pages),
            images=sum(len(page.images) for page in pages),
        )
        return ExtractedContent(page_count=doc.page_count, pages=pages, metadata=metadata)
    finally:
        doc.close()
