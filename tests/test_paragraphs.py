"""Tests for paragraph segmentation."""

from pdf_doc_import.config import LayoutThresholds
from pdf_doc_import.layout.lines import group_into_lines
from pdf_doc_import.layout.paragraphs import average_line_spacing, group_into_paragraphs


def _paragraphs(items, page_info, claimed=(), thresholds=LayoutThresholds()):
    lines = group_into_lines(items, thresholds)
    return group_into_paragraphs(lines, 1, page_info, claimed, thresholds)


class TestAverageLineSpacing:
    """Tests for average_line_spacing function."""

    def test_default_for_single_line(self, make_item):
        """Test fewer than two lines falls back to the default spacing."""
        lines = group_into_lines([make_item("only", 72, 100)])
        assert average_line_spacing(lines) == 20

    def test_mean_of_gaps(self, make_item):
        """Test the average over consecutive line gaps."""
        lines = group_into_lines(
            [make_item("a", 72, 100), make_item("b", 72, 110), make_item("c", 72, 140)]
        )
        assert average_line_spacing(lines) == 20


class TestGroupIntoParagraphs:
    """Tests for group_into_paragraphs function."""

    def test_no_lines(self, letter_page_info):
        """Test that no lines give no paragraphs."""
        assert group_into_paragraphs((), 1, letter_page_info) == ()

    def test_single_line_paragraph(self, make_item, letter_page_info):
        """Test two fragments on one line form one paragraph."""
        paragraphs = _paragraphs(
            [make_item("Hello ", 72, 100), make_item("World", 108, 100)], letter_page_info
        )
        assert len(paragraphs) == 1
        assert paragraphs[0].text == "Hello World"
        assert paragraphs[0].page_number == 1
        assert paragraphs[0].y == 100
        assert paragraphs[0].ends_with_newline is True

    def test_split_on_large_gap(self, make_item, letter_page_info):
        """Test a gap above 1.5x the average spacing starts a paragraph."""
        paragraphs = _paragraphs(
            [
                make_item("First paragraph line 1", 72, 100),
                make_item("First paragraph line 2", 72, 114),
                make_item("First paragraph line 3", 72, 128),
                make_item("Second paragraph line 1", 72, 178),
                make_item("Second paragraph line 2", 72, 192),
            ],
            letter_page_info,
        )
        assert len(paragraphs) == 2
        assert paragraphs[0].text.startswith("First")
        assert paragraphs[1].text.startswith("Second")
        assert paragraphs[1].y == 178

    def test_uniform_gap_stays_together(self, make_item, letter_page_info):
        """Test two lines 100 apart stay together when that is the average."""
        paragraphs = _paragraphs(
            [make_item("top", 72, 100), make_item("bottom", 72, 200)], letter_page_info
        )
        assert len(paragraphs) == 1
        assert paragraphs[0].text == "top bottom"

    def test_gap_exactly_at_threshold_stays_together(self, make_item, letter_page_info):
        """Test a gap of exactly 1.5x the average spacing does not split."""
        paragraphs = _paragraphs(
            [make_item("one", 72, 100), make_item("two", 72, 110), make_item("three", 72, 140)],
            letter_page_info,
        )
        assert len(paragraphs) == 1

    def test_gap_just_over_threshold_splits(self, make_item, letter_page_info):
        """Test a gap just above 1.5x the average spacing splits."""
        paragraphs = _paragraphs(
            [make_item("one", 72, 100), make_item("two", 72, 110), make_item("three", 72, 141)],
            letter_page_info,
        )
        assert [p.text for p in paragraphs] == ["one two", "three"]

    def test_split_on_indent_change(self, make_item, letter_page_info):
        """Test a left edge shift over 20 units starts a paragraph."""
        paragraphs = _paragraphs(
            [make_item("body", 72, 100), make_item("quote", 100, 114)], letter_page_info
        )
        assert len(paragraphs) == 2

    def test_small_indent_change_kept(self, make_item, letter_page_info):
        """Test a left edge shift within 20 units keeps the paragraph."""
        paragraphs = _paragraphs(
            [make_item("body", 72, 100), make_item("more", 90, 114)], letter_page_info
        )
        assert len(paragraphs) == 1

    def test_indent_exactly_at_threshold_kept(self, make_item, letter_page_info):
        """Test a left edge shift of exactly 20 units keeps the paragraph."""
        paragraphs = _paragraphs(
            [make_item("body", 72, 100), make_item("more", 92, 114)], letter_page_info
        )
        assert len(paragraphs) == 1

    def test_indent_just_over_threshold_splits(self, make_item, letter_page_info):
        """Test a left edge shift just over 20 units splits."""
        paragraphs = _paragraphs(
            [make_item("body", 72, 100), make_item("more", 92.5, 114)], letter_page_info
        )
        assert len(paragraphs) == 2

    def test_custom_indent_threshold(self, make_item, letter_page_info):
        """Test that the indent threshold is configurable."""
        paragraphs = _paragraphs(
            [make_item("body", 72, 100), make_item("more", 90, 114)],
            letter_page_info,
            thresholds=LayoutThresholds(indent_change_threshold=10),
        )
        assert len(paragraphs) == 2

    def test_claimed_lines_are_excluded(self, make_item, letter_page_info):
        """Test lines claimed by a table split paragraphs and are left out."""
        paragraphs = _paragraphs(
            [
                make_item("before", 72, 100),
                make_item("row one", 72, 114),
                make_item("row two", 72, 128),
                make_item("after", 72, 142),
            ],
            letter_page_info,
            claimed=[(1, 2)],
        )
        assert [p.text for p in paragraphs] == ["before", "after"]

    def test_runs_cover_text_across_lines(self, make_item, letter_page_info):
        """Test formatting runs stay contiguous over line separators."""
        paragraphs = _paragraphs(
            [make_item("abc", 72, 100), make_item("def", 72, 114, font_weight="bold")],
            letter_page_info,
        )
        paragraph = paragraphs[0]
        assert paragraph.text == "abc def"
        spans = [(r.start_index, r.end_index) for r in paragraph.formatting_runs]
        assert spans == [(0, 4), (4, 7)]
        assert paragraph.formatting_runs[1].formatting.font_weight == "bold"

    def test_identical_runs_merge(self, make_item, letter_page_info):
        """Test runs with the same formatting collapse into one."""
        paragraphs = _paragraphs(
            [make_item("Hello", 72, 100), make_item("World", 120, 100)], letter_page_info
        )
        runs = paragraphs[0].formatting_runs
        assert len(runs) == 1
        assert (runs[0].start_index, runs[0].end_index) == (0, len("Hello World"))
