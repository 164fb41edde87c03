"""Grouping of text lines into paragraphs."""

from collections.abc import Iterator, Sequence

from ..config import DEFAULT_THRESHOLDS, LayoutThresholds
from .alignment import detect_alignment
from .formatting import compose_text
from .models import AnalyzedParagraph, PageInfo, TextLine

LineRange = tuple[int, int]


def average_line_spacing(
    lines: Sequence[TextLine], thresholds: LayoutThresholds = DEFAULT_THRESHOLDS
) -> float:
    if len(lines) < 2:
        return thresholds.default_line_spacing
    gaps = [current.y - previous.y for previous, current in zip(lines, lines[1:])]
    return sum(gaps) / len(gaps)


def _starts_new_paragraph(
    previous: TextLine,
    line: TextLine,
    spacing: float,
    thresholds: LayoutThresholds,
) -> bool:
    large_gap = line.y - previous.y > spacing * thresholds.paragraph_gap_factor
    indent_change = abs(line.min_x - previous.min_x) > thresholds.indent_change_threshold
    return large_gap or indent_change


def _paragraph_groups(
    lines: Sequence[TextLine],
    claimed: Sequence[LineRange],
    thresholds: LayoutThresholds,
) -> Iterator[tuple[TextLine, ...]]:
    spacing = average_line_spacing(lines, thresholds)
    group: tuple[TextLine, ...] = ()
    for index, line in enumerate(lines):
        if any(start <= index <= end for start, end in claimed):
            if group:
                yield group
            group = ()
            continue
        if group and _starts_new_paragraph(group[-1], line, spacing, thresholds):
            yield group
            group = ()
        group = (*group, line)
    if group:
        yield group


def create_paragraph(
    lines: Sequence[TextLine],
    page_number: int,
    page_info: PageInfo,
    thresholds: LayoutThresholds = DEFAULT_THRESHOLDS,
) -> AnalyzedParagraph:
    text, runs = compose_text([line.items for line in lines])
    return AnalyzedParagraph(
        text=text,
        formatting_runs=runs,
        alignment=detect_alignment(lines, page_info, thresholds),
        page_number=page_number,
        y=lines[0].y,
        ends_with_newline=True,
    )


def group_into_paragraphs(
    lines: Sequence[TextLine],
    page_number: int,
    page_info: PageInfo,
    claimed: Sequence[LineRange] = (),
    thresholds: LayoutThresholds = DEFAULT_THRESHOLDS,
) -> tuple[AnalyzedParagraph, ...]:
    """Split a page's lines into paragraphs.

    A paragraph ends at a vertical gap larger than ``paragraph_gap_factor``
    times the page's average line spacing, at a left-edge shift larger than
    ``indent_change_threshold``, or at a line inside one of the ``claimed``
    inclusive line ranges (which is itself left out).
    """
    return tuple(
        create_paragraph(group, page_number, page_info, thresholds)
        for group in _paragraph_groups(lines, claimed, thresholds)
    )
