"""Table detection from column alignment of text fragments.

Column boundaries are X positions where many fragments start. Consecutive
lines with fragments in at least two boundary slots form a table candidate,
which is kept only if enough of its cells are filled.
"""

import math
from collections import Counter
from collections.abc import Iterator, Sequence

from pydantic import BaseModel, ConfigDict

from ..config import DEFAULT_THRESHOLDS, LayoutThresholds
from .formatting import compose_text, strip_runs
from .models import (
    AnalyzedTable,
    AnalyzedTableCell,
    AnalyzedTableRow,
    PositionedTextItem,
    TextLine,
)


class TableRegion(BaseModel):
    """A table candidate and the inclusive range of line indices it spans."""

    model_config = ConfigDict(frozen=True)

    start_line: int
    end_line: int
    table: AnalyzedTable


class TableDetection(BaseModel):
    model_config = ConfigDict(frozen=True)

    accepted: tuple[TableRegion, ...] = ()
    rejected: tuple[TableRegion, ...] = ()


def detect_column_boundaries(
    lines: Sequence[TextLine], thresholds: LayoutThresholds = DEFAULT_THRESHOLDS
) -> tuple[float, ...]:
    """Find X positions where fragments start often enough to be columns."""
    bucket_size = thresholds.column_bucket_size
    histogram = Counter(
        math.floor(item.x / bucket_size + 0.5) * bucket_size
        for line in lines
        for item in line.items
    )

    min_count = max(thresholds.min_column_frequency, len(lines) * thresholds.column_frequency_ratio)
    candidates = sorted(x for x, count in histogram.items() if count >= min_count)

    boundaries: list[float] = []
    for x in candidates:
        if not boundaries or x - boundaries[-1] >= thresholds.min_column_gap:
            boundaries.append(x)
    return tuple(boundaries)


def column_slot(
    item: PositionedTextItem,
    boundaries: Sequence[float],
    thresholds: LayoutThresholds = DEFAULT_THRESHOLDS,
) -> int | None:
    """Index of the slot ``[boundary[i] - tolerance, boundary[i + 1])`` holding item."""
    tolerance = thresholds.column_slot_tolerance
    for index, boundary in enumerate(boundaries):
        next_boundary = boundaries[index + 1] if index + 1 < len(boundaries) else math.inf
        if boundary - tolerance <= item.x < next_boundary:
            return index
    return None


def count_columns_used(
    line: TextLine,
    boundaries: Sequence[float],
    thresholds: LayoutThresholds = DEFAULT_THRESHOLDS,
) -> int:
    slots = {column_slot(item, boundaries, thresholds) for item in line.items}
    slots.discard(None)
    return len(slots)


def _candidate_ranges(
    lines: Sequence[TextLine],
    boundaries: Sequence[float],
    thresholds: LayoutThresholds,
) -> Iterator[tuple[int, int]]:
    """Yield inclusive (start, end) line ranges of multi-column runs."""
    start: int | None = None
    for index, line in enumerate(lines):
        multi_column = count_columns_used(line, boundaries, thresholds) >= thresholds.min_table_columns
        if multi_column:
            if start is None:
                start = index
            continue
        if start is not None and index - start >= thresholds.min_table_rows:
            yield start, index - 1
        start = None
    if start is not None and len(lines) - start >= thresholds.min_table_rows:
        yield start, len(lines) - 1


def build_table(
    lines: Sequence[TextLine],
    boundaries: Sequence[float],
    page_number: int,
    thresholds: LayoutThresholds = DEFAULT_THRESHOLDS,
) -> AnalyzedTable:
    """Lay the lines out as rows with one cell per column boundary."""
    rows = []
    for line in lines:
        slots: list[list[PositionedTextItem]] = [[] for _ in boundaries]
        for item in line.items:
            slot = column_slot(item, boundaries, thresholds)
            if slot is not None:
                slots[slot].append(item)
        cells = []
        for items in slots:
            text, runs = strip_runs(*compose_text([items], always_separate=True))
            cells.append(AnalyzedTableCell(text=text, formatting_runs=runs))
        rows.append(AnalyzedTableRow(cells=tuple(cells)))

    column_widths = tuple(
        boundaries[index + 1] - boundary
        if index + 1 < len(boundaries)
        else thresholds.default_last_column_width
        for index, boundary in enumerate(boundaries)
    )

    total_cells = sum(len(row.cells) for row in rows)
    filled_cells = sum(1 for row in rows for cell in row.cells if cell.text)
    confidence = filled_cells / total_cells if total_cells else 0.0

    return AnalyzedTable(
        rows=tuple(rows),
        column_widths=column_widths,
        page_number=page_number,
        y=lines[0].y,
        confidence=confidence,
    )


def detect_tables(
    lines: Sequence[TextLine],
    page_number: int,
    confidence_threshold: float,
    thresholds: LayoutThresholds = DEFAULT_THRESHOLDS,
) -> TableDetection:
    """Detect tables on one page.

    Args:
        lines: The page's lines, top to bottom.
        page_number: 1-based page number stamped on each table.
        confidence_threshold: Minimum filled-cell ratio for a candidate to
            be accepted.
        thresholds: Heuristic constants.

    Returns:
        Accepted regions, whose lines belong to the table, and rejected
        regions, whose lines stay ordinary text.
    """
    boundaries = detect_column_boundaries(lines, thresholds)
    if len(boundaries) < thresholds.min_table_columns:
        return TableDetection()

    accepted: list[TableRegion] = []
    rejected: list[TableRegion] = []
    for start, end in _candidate_ranges(lines, boundaries, thresholds):
        table = build_table(lines[start : end + 1], boundaries, page_number, thresholds)
        region = TableRegion(start_line=start, end_line=end, table=table)
        if table.confidence >= confidence_threshold:
            accepted.append(region)
        else:
            rejected.append(region)
    return TableDetection(accepted=tuple(accepted), rejected=tuple(rejected))
