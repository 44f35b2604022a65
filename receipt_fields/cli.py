"""Command-line interface for receipt field extraction and CSV export.

Provides subcommands to process one photo, re-run extraction on saved
OCR text, and process a folder of photos into a CSV file.
"""

import argparse
import csv
import json
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from receipt_fields.extraction.fields import extract_fields
from receipt_fields.ocr.receipt_processor import ReceiptProcessor, ReceiptResult
from receipt_fields.utils.config import load_config
from receipt_fields.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS = ("*.png", "*.jpg", "*.jpeg", "*.tiff", "*.tif", "*.webp")
_CSV_COLUMNS = [
    "filename",
    "status",
    "amount",
    "amount_strategy",
    "date",
    "inverted",
    "processing_time_s",
    "error",
]


def _find_images(input_dir: Path) -> list[Path]:
    """Find all supported image files in a directory.

    Args:
        input_dir: Directory to scan for receipt photos.

    Returns:
        Sorted list of image file paths.
    """
    files: list[Path] = []
    for ext in _SUPPORTED_EXTENSIONS:
        files.extend(input_dir.glob(ext))
        files.extend(input_dir.glob(ext.upper()))
    return sorted(set(files))


def _result_row(result: ReceiptResult) -> dict[str, object]:
    fields = result.extraction.to_dict()
    return {
        "filename": result.source_file,
        "status": "review" if result.extraction.needs_review else "success",
        "amount": fields["amount"],
        "amount_strategy": fields["amount_strategy"],
        "date": fields["date"],
        "inverted": result.inverted,
        "error": None,
    }


def _process_one(processor: ReceiptProcessor, file_path: Path) -> dict[str, object]:
    """Process one photo, turning any failure into a ``failed`` row."""
    start_time = time.time()
    try:
        row = _result_row(processor.process(file_path, file_path.name))
    except Exception as exc:
        logger.error("Failed to process %s: %s", file_path.name, exc)
        row = {"filename": file_path.name, "status": "failed", "error": str(exc)}
    row["processing_time_s"] = round(time.time() - start_time, 2)
    return row


def process_folder(
    input_dir: Path,
    output_csv: Path,
    config_path: Path | None = None,
    workers: int = 1,
    verbose: bool = False,
) -> dict[str, int]:
    """Process every receipt photo in a folder and export results to CSV.

    Photos are independent, so they are spread over a thread pool; the
    CSV keeps the sorted file order regardless of completion order.

    Args:
        input_dir: Directory containing receipt photos.
        output_csv: Path for the output CSV file.
        config_path: Optional YAML configuration file.
        workers: Number of photos processed concurrently.
        verbose: Whether to print per-file progress.

    Returns:
        Summary dict with total, successful, review and failed counts.
    """
    config = load_config(config_path)
    processor = ReceiptProcessor(config)

    files = _find_images(input_dir)
    if not files:
        logger.warning("No images found in %s", input_dir)
        return {"total": 0, "successful": 0, "review": 0, "failed": 0}

    logger.info("Found %d images to process with %d workers", len(files), workers)

    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        rows = list(pool.map(lambda path: _process_one(processor, path), files))

    if verbose:
        for i, row in enumerate(rows, 1):
            print(f"[{i}/{len(rows)}] {row['filename']}: {row['status']}")

    _write_csv(rows, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {
        "total": len(files),
        "successful": sum(1 for r in rows if r["status"] == "success"),
        "review": sum(1 for r in rows if r["status"] == "review"),
        "failed": sum(1 for r in rows if r["status"] == "failed"),
    }
    _print_summary(summary, output_csv)
    return summary


def _write_csv(rows: list[dict[str, object]], output_path: Path) -> None:
    """Write result rows to a CSV file with a fixed column order.

    Args:
        rows: List of result dictionaries.
        output_path: Path for the output CSV file.
    """
    if not rows:
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=_CSV_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    """Print batch processing summary to stdout.

    Args:
        summary: Counts of total, successful, review and failed receipts.
        output_csv: Path to the output CSV.
    """
    print(f"\n{'=' * 50}")
    print("Batch Processing Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Review:     {summary['review']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def extract_single(
    file_path: Path, config_path: Path | None = None
) -> dict[str, object]:
    """Process a single receipt photo and return structured results.

    Args:
        file_path: Path to the image file.
        config_path: Optional YAML configuration file.

    Returns:
        Dictionary with filename, fields, diagnostics and raw_text.
    """
    config = load_config(config_path)
    result = ReceiptProcessor(config).process(file_path, file_path.name)
    return {
        "filename": result.source_file,
        "fields": result.extraction.to_dict(),
        "inverted": result.inverted,
        "mean_brightness": round(result.mean_brightness, 1),
        "raw_text": result.ocr_text,
    }


def extract_text(text: str) -> dict[str, object]:
    """Run field extraction on OCR text that was captured earlier."""
    return extract_fields(text).to_dict()


def _emit(payload: dict[str, object], output: Path | None) -> None:
    output_str = json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(output_str, encoding="utf-8")
        print(f"Output written to {output}")
    else:
        print(output_str)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Receipt amount and date extractor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--config", type=Path, help="YAML configuration file")
    parser.add_argument("--log-level", help="Override the configured log level")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    batch_parser = subparsers.add_parser("batch", help="Process a folder of photos")
    batch_parser.add_argument(
        "input_dir", type=Path, help="Directory with receipt photos"
    )
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument(
        "-w",
        "--workers",
        type=int,
        default=1,
        help="Photos processed concurrently (default: 1)",
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    single_parser = subparsers.add_parser("extract", help="Process a single photo")
    single_parser.add_argument("file", type=Path, help="Receipt photo to process")
    single_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    text_parser = subparsers.add_parser("text", help="Extract fields from OCR text")
    text_parser.add_argument("file", help="Text file, or - for stdin")
    text_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(args.log_level or config.log_level)

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(
            args.input_dir,
            args.output,
            args.config,
            args.workers,
            args.verbose,
        )
    elif args.command == "extract":
        if not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        _emit(extract_single(args.file, args.config), args.output)
    elif args.command == "text":
        if args.file == "-":
            text = sys.stdin.read()
        else:
            path = Path(args.file)
            if not path.exists():
                print(f"Error: {path} does not exist", file=sys.stderr)
                sys.exit(1)
            text = path.read_text(encoding="utf-8")
        _emit(extract_text(text), args.output)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
