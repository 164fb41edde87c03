"""Structure detection over extracted PDF content."""

from concurrent.futures import ThreadPoolExecutor

from pydantic import BaseModel, ConfigDict

from ..config import DEFAULT_THRESHOLDS, ImportOptions, LayoutThresholds
from ..logger import logger
from .lines import group_into_lines
from .models import (
    AnalyzedContent,
    AnalyzedImage,
    AnalyzedParagraph,
    AnalyzedTable,
    ExtractedContent,
    ExtractedPage,
    Margins,
    PageInfo,
)
from .page_layout import analyze_images, analyze_page_layout
from .paragraphs import group_into_paragraphs
from .tables import detect_tables

# Page geometry used when the document has no pages at all (US Letter)
FALLBACK_PAGE_SIZE = (612.0, 792.0)


class PageAnalysis(BaseModel):
    """Structures found on a single page."""

    model_config = ConfigDict(frozen=True)

    page_number: int
    paragraphs: tuple[AnalyzedParagraph, ...] = ()
    tables: tuple[AnalyzedTable, ...] = ()
    images: tuple[AnalyzedImage, ...] = ()
    rejected_tables: int = 0


class ContentAnalyzer:
    """Detect paragraphs, tables and images in extracted PDF content.

    Pages are independent of each other. With ``max_workers`` above 1 they
    are analyzed on a thread pool; results are always returned in page order.
    """

    def __init__(
        self,
        options: ImportOptions | None = None,
        thresholds: LayoutThresholds = DEFAULT_THRESHOLDS,
        max_workers: int | None = None,
    ):
        self.options = options or ImportOptions()
        self.thresholds = thresholds
        self.max_workers = max_workers

    def analyze(
        self, content: ExtractedContent, options: ImportOptions | None = None
    ) -> AnalyzedContent:
        """Analyze every page of ``content``.

        Args:
            content: Output of the extraction stage.
            options: Overrides the analyzer's options for this call only.

        Returns:
            All paragraphs, tables and images plus the page layout estimated
            from the first page.
        """
        options = options or self.options

        if content.pages:
            page_info = analyze_page_layout(content.pages[0], self.thresholds)
        else:
            margin = self.thresholds.default_margin
            page_info = PageInfo(
                width=FALLBACK_PAGE_SIZE[0],
                height=FALLBACK_PAGE_SIZE[1],
                margins=Margins(top=margin, right=margin, bottom=margin, left=margin),
            )

        if self.max_workers and self.max_workers > 1 and len(content.pages) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(
                    executor.map(
                        lambda page: self.analyze_page(page, page_info, options),
                        content.pages,
                    )
                )
        else:
            results = [self.analyze_page(page, page_info, options) for page in content.pages]

        results.sort(key=lambda result: result.page_number)

        analyzed = AnalyzedContent(
            paragraphs=tuple(p for result in results for p in result.paragraphs),
            tables=tuple(t for result in results for t in result.tables),
            images=tuple(i for result in results for i in result.images),
            page_info=page_info,
        )

        rejected = sum(result.rejected_tables for result in results)
        logger.info(
            "content analyzed",
            pages=len(results),
            paragraphs=len(analyzed.paragraphs),
            tables=len(analyzed.tables),
            images=len(analyzed.images),
            rejected_tables=rejected,
        )
        return analyzed

    def analyze_page(
        self, page: ExtractedPage, page_info: PageInfo, options: ImportOptions
    ) -> PageAnalysis:
        lines = group_into_lines(page.text_items, self.thresholds)

        tables: tuple[AnalyzedTable, ...] = ()
        claimed: tuple[tuple[int, int], ...] = ()
        rejected = 0
        if options.detect_tables:
            detection = detect_tables(
                lines,
                page.page_number,
                options.table_confidence_threshold,
                self.thresholds,
            )
            tables = tuple(region.table for region in detection.accepted)
            claimed = tuple((region.start_line, region.end_line) for region in detection.accepted)
            rejected = len(detection.rejected)
            for region in detection.rejected:
                logger.warn(
                    "table candidate below confidence threshold",
                    page_number=page.page_number,
                    start_line=region.start_line,
                    end_line=region.end_line,
                    confidence=round(region.table.confidence, 3),
                    threshold=options.table_confidence_threshold,
                )

        paragraphs = group_into_paragraphs(
            lines, page.page_number, page_info, claimed, self.thresholds
        )
        images = (
            analyze_images(page.images, page.page_number, self.thresholds)
            if options.extract_images
            else ()
        )

        logger.debug(
            "page analyzed",
            page_number=page.page_number,
            lines=len(lines),
            paragraphs=len(paragraphs),
            tables=len(tables),
            images=len(images),
        )
        return PageAnalysis(
            page_number=page.page_number,
            paragraphs=paragraphs,
            tables=tables,
            images=images,
            rejected_tables=rejected,
        )
