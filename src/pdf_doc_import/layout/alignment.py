"""Paragraph alignment inferred from line geometry."""

from collections import Counter
from collections.abc import Sequence

from ..config import DEFAULT_THRESHOLDS, LayoutThresholds
from .models import Alignment, PageInfo, TextLine

# Tie-break order when several classes get the same number of votes
ALIGNMENT_PRIORITY: tuple[Alignment, ...] = ("justify", "center", "right", "left")


def classify_line(
    line: TextLine,
    page_info: PageInfo,
    thresholds: LayoutThresholds = DEFAULT_THRESHOLDS,
) -> Alignment:
    tolerance = thresholds.alignment_tolerance
    margins = page_info.margins

    left_distance = abs(line.min_x - margins.left)
    right_distance = abs((page_info.width - margins.right) - line.max_x)
    center_offset = abs((line.min_x + line.width / 2) - page_info.width / 2)

    if (
        line.width > page_info.content_width * thresholds.justify_width_ratio
        and left_distance < tolerance
        and right_distance < tolerance
    ):
        return "justify"
    if center_offset < tolerance * 2:
        return "center"
    if right_distance < tolerance and left_distance > tolerance * 3:
        return "right"
    return "left"


def detect_alignment(
    lines: Sequence[TextLine],
    page_info: PageInfo,
    thresholds: LayoutThresholds = DEFAULT_THRESHOLDS,
) -> Alignment:
    """Return the alignment most of the lines agree on."""
    if not lines:
        return "left"
    votes = Counter(classify_line(line, page_info, thresholds) for line in lines)
    top = max(votes.values())
    return next(alignment for alignment in ALIGNMENT_PRIORITY if votes[alignment] == top)
