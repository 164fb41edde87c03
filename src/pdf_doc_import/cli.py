"""Command line entry point: convert a PDF or run the import server."""

import argparse
import sys
from pathlib import Path

from .config import ImportOptions
from .layout import PDFImporter, PDFImportError


def _convert(args: argparse.Namespace) -> int:
    options = ImportOptions.from_env(
        detect_tables=False if args.no_tables else None,
        extract_images=False if args.no_images else None,
        table_confidence_threshold=args.table_confidence,
        password=args.password,
    )
    importer = PDFImporter(max_workers=args.workers)
    try:
        result = importer.import_file(args.pdf, options)
    except (PDFImportError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    output = result.model_dump_json(indent=2)
    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
    else:
        print(output)
    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    return 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("pdf_doc_import.server:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdf-doc-import", description="PDF document structure import"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Convert a PDF to document JSON")
    convert.add_argument("pdf", help="Path to the PDF file")
    convert.add_argument("-o", "--output", help="Write JSON here instead of stdout")
    convert.add_argument("--password", default=None, help="Password for encrypted PDFs")
    convert.add_argument("--no-tables", action="store_true", help="Disable table detection")
    convert.add_argument("--no-images", action="store_true", help="Skip embedded images")
    convert.add_argument(
        "--table-confidence",
        type=float,
        default=None,
        help="Minimum filled-cell ratio for detected tables (0-1)",
    )
    convert.add_argument(
        "--workers", type=int, default=None, help="Analyze pages on this many threads"
    )
    convert.set_defaults(handler=_convert)

    serve = subparsers.add_parser("serve", help="Run the HTTP import API")
    serve.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    serve.set_defaults(handler=_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
