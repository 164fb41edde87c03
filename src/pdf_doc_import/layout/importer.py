"""End-to-end PDF import: extraction, analysis and assembly."""

import uuid
from collections.abc import Callable
from pathlib import Path
from typing import Literal

from pydantic import BaseModel

from ..config import DEFAULT_THRESHOLDS, LOW_CONFIDENCE_WARNING, ImportOptions, LayoutThresholds
from ..logger import import_context, logger
from .analyzer import ContentAnalyzer
from .builder import DocumentBuilder, ObjectIdGenerator
from .errors import PDFImportError, PDFImportErrorCode
from .models import AnalyzedContent, DocumentData
from .pdf_parser import parse_pdf


class ImportProgress(BaseModel):
    stage: Literal["parsing", "analyzing", "building"]
    progress: int  # 0-100
    message: str


class ImportMetadata(BaseModel):
    title: str | None = None
    author: str | None = None
    page_count: int


class ImportResult(BaseModel):
    document: DocumentData
    warnings: list[str]
    metadata: ImportMetadata


ProgressCallback = Callable[[ImportProgress], None]


def collect_warnings(content: AnalyzedContent) -> list[str]:
    """Soft warnings the caller may want to show after an import."""
    warnings = []
    low_confidence = [t for t in content.tables if t.confidence < LOW_CONFIDENCE_WARNING]
    if low_confidence:
        warnings.append(
            f"{len(low_confidence)} table(s) detected with low confidence - please verify structure"
        )
    return warnings


class PDFImporter:
    """Convert PDF documents into host document data."""

    def __init__(
        self,
        thresholds: LayoutThresholds = DEFAULT_THRESHOLDS,
        max_workers: int | None = None,
    ):
        self.thresholds = thresholds
        self.max_workers = max_workers

    def import_bytes(
        self,
        source: bytes,
        options: ImportOptions | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ImportResult:
        """Import a PDF given as raw bytes.

        Raises:
            PDFImportError: On any failure. Errors from the import stages are
                re-raised as-is, anything else is wrapped as PARSING_ERROR.
        """
        return self._run(source, options or ImportOptions(), on_progress)

    def import_file(
        self,
        file_path: str | Path,
        options: ImportOptions | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ImportResult:
        file_path = Path(file_path)
        if file_path.suffix.lower() != ".pdf":
            raise PDFImportError(
                "Invalid file type. Please select a PDF file.",
                PDFImportErrorCode.INVALID_PDF,
            )
        if not file_path.exists():
            raise FileNotFoundError(f"PDF file not found: {file_path}")
        with import_context(file_name=file_path.name):
            return self._run(file_path.read_bytes(), options or ImportOptions(), on_progress)

    def _run(
        self,
        source: bytes,
        options: ImportOptions,
        on_progress: ProgressCallback | None,
    ) -> ImportResult:
        def report(stage, progress, message):
            if on_progress:
                on_progress(ImportProgress(stage=stage, progress=progress, message=message))

        with import_context(import_id=str(uuid.uuid4())):
            try:
                report("parsing", 0, "Loading PDF document...")
                extracted = parse_pdf(source, options.password, options.extract_images)
                report("parsing", 100, "PDF parsed successfully")

                report("analyzing", 0, "Analyzing document structure...")
                analyzer = ContentAnalyzer(options, self.thresholds, self.max_workers)
                analyzed = analyzer.analyze(extracted)
                warnings = collect_warnings(analyzed)
                report("analyzing", 100, "Content analysis complete")

                report("building", 0, "Building document...")
                document = DocumentBuilder().build(
                    analyzed, extracted.page_count, ObjectIdGenerator()
                )
                report("building", 100, "Document built successfully")
            except PDFImportError as e:
                logger.error("pdf import failed", code=e.code.value, error=e.message)
                raise
            except Exception as e:
                logger.error("pdf import failed", exc_info=True, error=str(e))
                raise PDFImportError(
                    "Failed to import PDF document", PDFImportErrorCode.PARSING_ERROR, e
                ) from e

            metadata = extracted.metadata
            logger.info(
                "pdf imported",
                page_count=extracted.page_count,
                warnings=len(warnings),
            )
            return ImportResult(
                document=document,
                warnings=warnings,
                metadata=ImportMetadata(
                    title=metadata.title if metadata else None,
                    author=metadata.author if metadata else None,
                    page_count=extracted.page_count,
                ),
            )
