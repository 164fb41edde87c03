"""Tests for table detection."""

import pytest

from pdf_doc_import.config import LayoutThresholds
from pdf_doc_import.layout.lines import group_into_lines
from pdf_doc_import.layout.tables import (
    column_slot,
    count_columns_used,
    detect_column_boundaries,
    detect_tables,
)


@pytest.fixture
def grid_lines(make_item):
    """Three rows of two columns at x=72 and x=200."""
    return group_into_lines(
        [
            make_item("Col1", 72, 100),
            make_item("Col2", 200, 100),
            make_item("A", 72, 115),
            make_item("B", 200, 115),
            make_item("C", 72, 130),
            make_item("D", 200, 130),
        ]
    )


class TestColumnBoundaries:
    """Tests for detect_column_boundaries function."""

    def test_frequent_x_positions(self, grid_lines):
        """Test bucketed x positions seen often enough become boundaries."""
        assert detect_column_boundaries(grid_lines) == (70, 200)

    def test_close_boundaries_collapse(self, make_item):
        """Test a boundary within 30 units of the previous one is dropped."""
        items = []
        for y in (100, 115, 130):
            items += [make_item("a", 72, y), make_item("b", 90, y), make_item("c", 200, y)]
        assert detect_column_boundaries(group_into_lines(items)) == (70, 200)

    def test_rare_positions_ignored(self, make_item):
        """Test an x position used once is not a boundary."""
        lines = group_into_lines(
            [make_item("a", 72, 100), make_item("b", 72, 115), make_item("odd", 300, 130)]
        )
        assert detect_column_boundaries(lines) == (70,)

    def test_custom_merge_distance(self, make_item):
        """Test that the merge distance is configurable."""
        items = []
        for y in (100, 115):
            items += [make_item("a", 72, y), make_item("b", 90, y)]
        thresholds = LayoutThresholds(min_column_gap=10)
        assert detect_column_boundaries(group_into_lines(items), thresholds) == (70, 90)

    def test_gap_exactly_at_merge_distance_kept(self, make_item):
        """Test boundaries exactly 30 units apart are both kept."""
        items = []
        for y in (100, 115):
            items += [make_item("a", 72, y), make_item("b", 102, y)]
        assert detect_column_boundaries(group_into_lines(items)) == (70, 100)

    def test_gap_under_merge_distance_collapses(self, make_item):
        """Test boundaries 25 units apart collapse into the first."""
        items = []
        for y in (100, 115):
            items += [make_item("a", 72, y), make_item("b", 97, y)]
        assert detect_column_boundaries(group_into_lines(items)) == (70,)


class TestColumnSlots:
    """Tests for slot assignment."""

    def test_slot_tolerance_before_first_boundary(self, make_item):
        """Test a fragment up to 15 units left of the first boundary belongs to it."""
        assert column_slot(make_item("x", 60, 0), (70, 200)) == 0
        assert column_slot(make_item("x", 55, 0), (70, 200)) == 0

    def test_slot_tolerance_boundary(self, make_item):
        """Test the slot starts exactly at boundary minus tolerance."""
        thresholds = LayoutThresholds(column_slot_tolerance=5)
        assert column_slot(make_item("x", 65, 0), (70, 200), thresholds) == 0
        assert column_slot(make_item("x", 64.9, 0), (70, 200), thresholds) is None

    def test_slot_runs_up_to_next_boundary(self, make_item):
        """Test a slot ends where the next boundary starts."""
        assert column_slot(make_item("x", 199, 0), (70, 200)) == 0
        assert column_slot(make_item("x", 200, 0), (70, 200)) == 1

    def test_fragment_left_of_all_columns(self, make_item):
        """Test a fragment left of every slot has none."""
        assert column_slot(make_item("x", 54, 0), (70, 200)) is None

    def test_count_columns_used(self, grid_lines):
        """Test each grid line uses two slots."""
        boundaries = detect_column_boundaries(grid_lines)
        assert [count_columns_used(line, boundaries) for line in grid_lines] == [2, 2, 2]


class TestDetectTables:
    """Tests for detect_tables function."""

    def test_simple_grid(self, grid_lines):
        """Test a clean grid becomes one accepted table."""
        detection = detect_tables(grid_lines, 1, 0.7)
        assert len(detection.accepted) == 1
        assert detection.rejected == ()

        region = detection.accepted[0]
        assert (region.start_line, region.end_line) == (0, 2)

        table = region.table
        assert table.page_number == 1
        assert table.y == 100
        assert table.confidence == 1.0
        assert table.column_widths == (130, 100)
        assert [[cell.text for cell in row.cells] for row in table.rows] == [
            ["Col1", "Col2"],
            ["A", "B"],
            ["C", "D"],
        ]

    def test_single_column_has_no_table(self, make_item):
        """Test two lines in one column never form a table."""
        lines = group_into_lines([make_item("one", 72, 100), make_item("two", 72, 115)])
        detection = detect_tables(lines, 1, 0.7)
        assert detection.accepted == ()
        assert detection.rejected == ()

    def test_low_confidence_rejected(self, make_item):
        """Test a sparse grid is rejected below the threshold and kept above it."""
        lines = group_into_lines(
            [
                make_item("a", 72, 100), make_item("b", 200, 100), make_item("c", 330, 100),
                make_item("d", 72, 115), make_item("e", 200, 115),
                make_item("f", 72, 130), make_item("g", 200, 130),
                make_item("h", 72, 145), make_item("i", 330, 145),
            ]
        )
        strict = detect_tables(lines, 1, 0.8)
        assert strict.accepted == ()
        assert len(strict.rejected) == 1
        assert strict.rejected[0].table.confidence == pytest.approx(0.75)

        lenient = detect_tables(lines, 1, 0.7)
        assert len(lenient.accepted) == 1

    def test_every_row_has_one_cell_per_boundary(self, make_item):
        """Test empty cells are kept so rows stay aligned."""
        lines = group_into_lines(
            [
                make_item("a", 72, 100), make_item("b", 200, 100), make_item("c", 330, 100),
                make_item("d", 72, 115), make_item("e", 200, 115),
                make_item("f", 72, 130), make_item("g", 330, 130),
            ]
        )
        table = detect_tables(lines, 1, 0.0).accepted[0].table
        assert all(len(row.cells) == 3 for row in table.rows)
        assert table.rows[1].cells[2].text == ""
        assert table.rows[1].cells[2].formatting_runs == ()

    def test_single_column_line_splits_regions(self, make_item):
        """Test a one-column line seals the table run before it."""
        lines = group_into_lines(
            [
                make_item("a", 72, 100), make_item("b", 200, 100),
                make_item("c", 72, 115), make_item("d", 200, 115),
                make_item("note", 72, 130),
                make_item("e", 72, 145), make_item("f", 200, 145),
                make_item("g", 72, 160), make_item("h", 200, 160),
            ]
        )
        detection = detect_tables(lines, 1, 0.7)
        assert [(r.start_line, r.end_line) for r in detection.accepted] == [(0, 1), (3, 4)]

    def test_single_row_is_not_a_table(self, make_item):
        """Test a lone multi-column line is not enough for a table."""
        lines = group_into_lines(
            [
                make_item("a", 72, 100), make_item("b", 200, 100),
                make_item("note", 72, 115),
                make_item("c", 72, 130),
                make_item("d", 200, 145),
            ]
        )
        assert detect_tables(lines, 1, 0.0).accepted == ()

    def test_fragments_in_one_slot_are_joined(self, make_item):
        """Test fragments sharing a slot are space-joined into one cell."""
        lines = group_into_lines(
            [
                make_item("Big", 72, 100), make_item("Deal", 110, 100), make_item("X", 200, 100),
                make_item("A", 72, 115), make_item("B", 200, 115),
            ]
        )
        table = detect_tables(lines, 1, 0.7).accepted[0].table
        cell = table.rows[0].cells[0]
        assert cell.text == "Big Deal"
        assert [(r.start_index, r.end_index) for r in cell.formatting_runs] == [(0, 8)]

    def test_cell_fragments_always_space_separated(self, make_item):
        """Test fragments in one cell get a space even after a trailing one."""
        lines = group_into_lines(
            [
                make_item("A ", 72, 100), make_item("B", 110, 100), make_item("C", 200, 100),
                make_item("D", 72, 115), make_item("E", 200, 115),
            ]
        )
        table = detect_tables(lines, 1, 0.7).accepted[0].table
        assert [cell.text for row in table.rows for cell in row.cells] == ["A  B", "C", "D", "E"]
        assert [(r.start_index, r.end_index) for r in table.rows[0].cells[0].formatting_runs] == [
            (0, 4)
        ]
