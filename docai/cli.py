"""Command-line interface for document extraction and batch export.

Provides subcommands for extracting a single document to JSON, rendering
a document summary to PDF, processing folders of documents into a CSV
report, and listing configured capabilities.
"""

import argparse
import asyncio
import csv
import json
import sys
import time
from pathlib import Path

from docai.canonical.projections import Projection, summary_text, to_dict
from docai.errors import DocumentAIError
from docai.providers.google_documentai import GoogleDocumentAIProvider
from docai.rendering.pdf_renderer import render_text_to_pdf
from docai.routing.router import Capability, ProcessorRouter
from docai.utils.config import AppConfig, load_config
from docai.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS = (
    "*.pdf",
    "*.png",
    "*.jpg",
    "*.jpeg",
    "*.tiff",
    "*.tif",
    "*.gif",
)
_CSV_COLUMNS = [
    "filename",
    "status",
    "entity_count",
    "field_count",
    "table_count",
    "text_length",
    "processing_time_s",
    "error",
]


def build_router(config: AppConfig) -> ProcessorRouter:
    """Create a processor router backed by Google Document AI.

    Args:
        config: Application configuration.

    Returns:
        Router wired to the configured processors.
    """
    provider = GoogleDocumentAIProvider(config.documentai)
    return ProcessorRouter(config.documentai, provider)


def _find_documents(input_dir: Path) -> list[Path]:
    """Find all supported document files in a directory.

    Args:
        input_dir: Directory to scan for documents.

    Returns:
        Sorted list of document file paths.
    """
    files: list[Path] = []
    for ext in _SUPPORTED_EXTENSIONS:
        files.extend(input_dir.glob(ext))
        files.extend(input_dir.glob(ext.upper()))
    return sorted(set(files))


def extract_single(
    router: ProcessorRouter,
    file_path: Path,
    capability: Capability = Capability.FORM_PARSER,
    projection: Projection = Projection.FULL,
) -> dict[str, object]:
    """Extract one document and return its canonical result as a dict.

    Args:
        router: Processor router to dispatch with.
        file_path: Path to the document file.
        capability: Extraction capability to run.
        projection: Subset of the canonical result to return.

    Returns:
        JSON-ready canonical result.
    """
    result = asyncio.run(router.route(capability, file_path.read_bytes()))
    return to_dict(result, projection)


def summarize_to_pdf(
    router: ProcessorRouter, config: AppConfig, file_path: Path, output: Path
) -> int:
    """Summarize a document and write the summary as a PDF.

    Args:
        router: Processor router to dispatch with.
        config: Application configuration holding renderer settings.
        file_path: Path to the document file.
        output: Destination PDF path.

    Returns:
        Number of bytes written.
    """
    result = asyncio.run(router.route(Capability.SUMMARIZE, file_path.read_bytes()))
    pdf_bytes = render_text_to_pdf(
        summary_text(result),
        title=config.renderer.title,
        page_size=config.renderer.page_size,
        font_size=config.renderer.font_size,
    )
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(pdf_bytes)
    return len(pdf_bytes)


def process_folder(
    router: ProcessorRouter,
    input_dir: Path,
    output_csv: Path,
    capability: Capability = Capability.FORM_PARSER,
    verbose: bool = False,
) -> dict[str, int]:
    """Process all documents in a folder and export a CSV report.

    A failing document is recorded with its error and does not stop
    the batch.

    Args:
        router: Processor router to dispatch with.
        input_dir: Directory containing document files.
        output_csv: Path for the output CSV file.
        capability: Extraction capability to run on every file.
        verbose: Whether to print per-file progress.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    files = _find_documents(input_dir)
    if not files:
        logger.warning("No documents found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    logger.info("Found %d documents to process", len(files))

    # One event loop for the whole batch; async clients are bound to it.
    rows = asyncio.run(_process_files(router, files, capability, verbose))
    successful = sum(1 for row in rows if row["status"] == "success")

    _write_csv(rows, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {
        "total": len(files),
        "successful": successful,
        "failed": len(rows) - successful,
    }
    _print_summary(summary, output_csv)
    return summary


async def _process_files(
    router: ProcessorRouter,
    files: list[Path],
    capability: Capability,
    verbose: bool,
) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Processing [{i}/{len(files)}]: {file_path.name}")

        start_time = time.time()
        try:
            result = await router.route(capability, file_path.read_bytes())
        except (DocumentAIError, OSError) as exc:
            logger.error("Failed to process %s: %s", file_path.name, exc)
            rows.append(
                {"filename": file_path.name, "status": "failed", "error": str(exc)}
            )
            continue
        rows.append(
            {
                "filename": file_path.name,
                "status": "success",
                "entity_count": len(result.entities),
                "field_count": len(result.fields),
                "table_count": len(result.tables),
                "text_length": len(result.text),
                "processing_time_s": round(time.time() - start_time, 2),
                "error": None,
            }
        )
    return rows


def _write_csv(rows: list[dict[str, object]], output_path: Path) -> None:
    if not rows:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=_CSV_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    print(f"\n{'=' * 50}")
    print("Batch Processing Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def _add_capability_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--capability",
        choices=[c.value for c in Capability],
        default=Capability.FORM_PARSER.value,
        help="Extraction capability (default: form-parser)",
    )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Document AI extraction tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=Path, help="YAML configuration file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    extract_parser = subparsers.add_parser("extract", help="Extract a single document")
    extract_parser.add_argument("file", type=Path, help="Document file to process")
    _add_capability_argument(extract_parser)
    extract_parser.add_argument(
        "-p",
        "--projection",
        choices=[p.value for p in Projection],
        default=Projection.FULL.value,
        help="Parts of the result to output (default: full)",
    )
    extract_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    summarize_parser = subparsers.add_parser(
        "summarize", help="Summarize a document into a PDF"
    )
    summarize_parser.add_argument("file", type=Path, help="Document file to summarize")
    summarize_parser.add_argument(
        "-o", "--output", type=Path, required=True, help="Output PDF file"
    )

    batch_parser = subparsers.add_parser("batch", help="Process a folder of documents")
    batch_parser.add_argument(
        "input_dir", type=Path, help="Input directory with documents"
    )
    _add_capability_argument(batch_parser)
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    subparsers.add_parser("capabilities", help="List configured capabilities")

    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.log_level)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    router = build_router(config)

    if args.command == "capabilities":
        for capability in router.configured_capabilities():
            print(capability.value)
        return

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(
            router,
            args.input_dir,
            args.output,
            Capability(args.capability),
            args.verbose,
        )
        return

    if not args.file.exists():
        print(f"Error: {args.file} does not exist", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "summarize":
            size = summarize_to_pdf(router, config, args.file, args.output)
            print(f"Summary PDF ({size} bytes) written to {args.output}")
            return

        result = extract_single(
            router,
            args.file,
            Capability(args.capability),
            Projection(args.projection),
        )
    except DocumentAIError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    output_str = json.dumps(result, indent=2, ensure_ascii=False)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output_str)
        print(f"Output written to {args.output}")
    else:
        print(output_str)


if __name__ == "__main__":
    main()
