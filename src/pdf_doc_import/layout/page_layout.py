"""Page geometry estimation and image placement."""

from collections.abc import Iterable

from ..config import DEFAULT_THRESHOLDS, LayoutThresholds
from .models import AnalyzedImage, ExtractedPage, Margins, PageInfo, RawImage


def analyze_page_layout(
    page: ExtractedPage, thresholds: LayoutThresholds = DEFAULT_THRESHOLDS
) -> PageInfo:
    """Estimate margins from the bounding box of a page's text.

    Margins never go negative. A page without text gets
    ``thresholds.default_margin`` on every side.
    """
    items = page.text_items
    if not items:
        margin = thresholds.default_margin
        return PageInfo(
            width=page.width,
            height=page.height,
            margins=Margins(top=margin, right=margin, bottom=margin, left=margin),
        )

    min_x = min(item.x for item in items)
    max_x = max(item.x + item.width for item in items)
    min_y = min(item.y for item in items)
    max_y = max(item.y + item.height for item in items)

    return PageInfo(
        width=page.width,
        height=page.height,
        margins=Margins(
            top=max(0.0, min_y),
            right=max(0.0, page.width - max_x),
            bottom=max(0.0, page.height - max_y),
            left=max(0.0, min_x),
        ),
    )


def analyze_images(
    images: Iterable[RawImage],
    page_number: int,
    thresholds: LayoutThresholds = DEFAULT_THRESHOLDS,
) -> tuple[AnalyzedImage, ...]:
    return tuple(
        AnalyzedImage(
            data_url=image.data_url,
            width=image.width,
            height=image.height,
            page_number=page_number,
            y=image.y,
            position="block" if image.width > thresholds.block_image_min_width else "inline",
        )
        for image in images
    )
