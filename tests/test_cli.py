"""Tests for the command line entry point."""

import json

import fitz  # PyMuPDF
import pytest

from pdf_doc_import.cli import build_parser, main


@pytest.fixture
def pdf_path(tmp_path):
    path = tmp_path / "letter.pdf"
    doc = fitz.open()
    doc.new_page(width=612, height=792).insert_text(
        (72, 72), "Dear reader", fontsize=12, fontname="helv"
    )
    doc.save(path)
    doc.close()
    return path


class TestConvert:
    """Tests for the convert command."""

    def test_prints_json(self, pdf_path, capsys):
        """Test the import result is printed as JSON."""
        assert main(["convert", str(pdf_path)]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["document"]["body_content"]["text"] == "Dear reader\n"

    def test_writes_output_file(self, pdf_path, tmp_path):
        """Test -o writes the JSON to a file."""
        output = tmp_path / "out.json"
        assert main(["convert", str(pdf_path), "-o", str(output)]) == 0
        assert json.loads(output.read_text())["metadata"]["page_count"] == 1

    def test_missing_file(self, tmp_path, capsys):
        """Test a missing input exits with status 1."""
        assert main(["convert", str(tmp_path / "missing.pdf")]) == 1
        assert "error:" in capsys.readouterr().err

    def test_options_parsed(self):
        """Test convert flags map onto arguments."""
        args = build_parser().parse_args(
            ["convert", "a.pdf", "--no-tables", "--table-confidence", "0.5", "--workers", "4"]
        )
        assert args.no_tables is True
        assert args.table_confidence == 0.5
        assert args.workers == 4
