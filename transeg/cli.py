"""Command-line interface for the segmentation pipeline."""

import argparse
import logging
import sys
from pathlib import Path

from .config import Config
from .errors import SegmentationError
from .pipeline import SegmentationPipeline

COMMANDS = ("segment", "preview", "show", "status", "export", "set-translation")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="transeg",
        description="Split plain-text documents into resumable translation segments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Segment a book with at most 150 words per segment
  transeg segment --input book.txt --word-limit 150

  # Using a config file, stop after 20 new segments
  transeg segment --config config.yaml --max-segments 20

  # Print the source text of segment 3
  transeg show --input book.txt --id 3

  # Export all segments to CSV
  transeg export --input book.txt --output book-segments.csv
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    segment_parser = subparsers.add_parser("segment", help="Cut the source into segments")
    setup_common_arguments(segment_parser)
    segment_parser.add_argument(
        "--max-segments",
        type=int,
        help="Stop after this many new segments",
    )

    preview_parser = subparsers.add_parser(
        "preview", help="Show the next block of text without segmenting it"
    )
    setup_common_arguments(preview_parser)
    preview_parser.add_argument(
        "--mode",
        choices=["raw", "normalized"],
        help="Reader output mode (default: normalized)",
    )

    show_parser = subparsers.add_parser("show", help="Print the source text of a segment")
    setup_common_arguments(show_parser)
    show_parser.add_argument("--id", type=int, required=True, help="Segment id")

    status_parser = subparsers.add_parser("status", help="Summarize progress")
    setup_common_arguments(status_parser)

    export_parser = subparsers.add_parser("export", help="Export segments to CSV")
    setup_common_arguments(export_parser)
    export_parser.add_argument("--output", type=Path, help="Output CSV path")

    translation_parser = subparsers.add_parser(
        "set-translation", help="Attach a translation to a segment"
    )
    setup_common_arguments(translation_parser)
    translation_parser.add_argument("--id", type=int, required=True, help="Segment id")
    translation_parser.add_argument("--text", required=True, help="Translated text")

    argv = list(sys.argv[1:] if argv is None else argv)
    # If no command specified, treat as segment command
    if not argv or argv[0] not in COMMANDS and argv[0] not in ("-h", "--help"):
        argv.insert(0, "segment")
    return parser.parse_args(argv)


def setup_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Setup arguments shared by all commands."""
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--input",
        type=Path,
        help="Path to the source text file",
    )
    parser.add_argument(
        "--progress",
        type=Path,
        help="Progress file (default: <input>-progress.json)",
    )
    parser.add_argument(
        "--word-limit",
        type=int,
        help="Maximum words per segment (default: 100)",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        help="Bytes read per chunk (default: 65536)",
    )
    parser.add_argument(
        "--encoding",
        help="Source encoding (default: utf-8)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )


def build_config(args: argparse.Namespace) -> Config:
    """Build configuration from arguments."""
    # Start with config file if provided
    if getattr(args, "config", None):
        config = Config.from_yaml(args.config)
    else:
        config = Config()

    # Override with command-line arguments
    if getattr(args, "input", None):
        config.input_file = args.input
    if getattr(args, "progress", None):
        config.output.progress_file = args.progress

    seg = config.segmentation.model_dump()
    if getattr(args, "word_limit", None) is not None:
        seg["word_limit"] = args.word_limit
    if getattr(args, "chunk_size", None) is not None:
        seg["chunk_size"] = args.chunk_size
    if getattr(args, "encoding", None):
        seg["encoding"] = args.encoding
    if getattr(args, "max_segments", None) is not None:
        seg["max_segments"] = args.max_segments
    if getattr(args, "mode", None):
        seg["reader_mode"] = args.mode
    # Re-validate so that bad overrides fail like bad YAML values
    config.segmentation = type(config.segmentation).model_validate(seg)

    return config


def handle_segment(pipeline: SegmentationPipeline, args: argparse.Namespace) -> int:
    """Handle segment command."""
    pipeline.run()
    return 0


def handle_preview(pipeline: SegmentationPipeline, args: argparse.Namespace) -> int:
    """Handle preview command."""
    document = pipeline.open_document()
    block = pipeline.preview(document)
    if block.is_empty:
        print("Nothing left to segment.")
        return 0
    print(block.text)
    print(
        f"\n[{block.word_count} words, next byte offset {block.byte_offset}, "
        f"row {block.current_row}]",
        file=sys.stderr,
    )
    return 0


def handle_show(pipeline: SegmentationPipeline, args: argparse.Namespace) -> int:
    """Handle show command."""
    document = pipeline.open_document()
    segment = document.get_segment(args.id)
    print(pipeline.segment_text(segment))
    if segment.translation:
        print("\n--- translation ---")
        print(segment.translation)
    return 0


def handle_status(pipeline: SegmentationPipeline, args: argparse.Namespace) -> int:
    """Handle status command."""
    document = pipeline.open_document()
    for key, value in pipeline.status(document).items():
        print(f"{key:>14}: {value}")
    return 0


def handle_export(pipeline: SegmentationPipeline, args: argparse.Namespace) -> int:
    """Handle export command."""
    document = pipeline.open_document()
    output_path = pipeline.export_csv(document, args.output)
    print(f"Exported {len(document.segments)} segments to: {output_path}")
    return 0


def handle_set_translation(pipeline: SegmentationPipeline, args: argparse.Namespace) -> int:
    """Handle set-translation command."""
    document = pipeline.open_document()
    document.update_translation(args.id, args.text)
    pipeline.save_document(document)
    print(f"Segment {args.id} marked as processed.")
    return 0


HANDLERS = {
    "segment": handle_segment,
    "preview": handle_preview,
    "show": handle_show,
    "status": handle_status,
    "export": handle_export,
    "set-translation": handle_set_translation,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(getattr(args, "verbose", False))

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.input_file:
        print("Error: Input file is required (use --input or --config)", file=sys.stderr)
        return 1

    try:
        pipeline = SegmentationPipeline(config)
        return HANDLERS[args.command](pipeline, args)
    except FileNotFoundError as e:
        print(f"Error: File not found - {e}", file=sys.stderr)
        return 1
    except SegmentationError as e:
        logging.debug("Command failed: %s", e.to_dict())
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logging.exception("Command failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
