"""Segmentation driver: turns a source file into a translation document."""

import hashlib
import logging
import re
from pathlib import Path
from typing import BinaryIO, Optional

import pandas as pd
from tqdm import tqdm

from .config import Config
from .document import Segment, TranslationDocument
from .engines import ParagraphSentenceSegmenter
from .errors import ReadError, SourceMismatchError
from .models import ReadResult, SegmentRange, TextPosition
from .reader import RangeExtractor, Source, StreamingParagraphReader
from .utils.text_utils import count_words

logger = logging.getLogger(__name__)

# Regex pattern for illegal control characters (except tab, newline, carriage return)
ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def sanitize_text(text: str) -> str:
    """Remove control characters that may interfere with CSV/Excel.

    Args:
        text: Input text

    Returns:
        Sanitized text
    """
    if not text:
        return text
    return ILLEGAL_CHARS.sub("", text)


def file_sha256(path: Path, chunk_size: int = 1024 * 1024) -> str:
    """Hash a file without loading it into memory."""
    digest = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for block in iter(lambda: f.read(chunk_size), b""):
                digest.update(block)
    except OSError as e:
        raise ReadError(f"Cannot hash source {path}: {e}", path=str(path)) from e
    return digest.hexdigest()


def advance_position(start: TextPosition, text: str, byte_offset: int) -> TextPosition:
    """Return the position reached after `text`, which begins at `start`.

    Args:
        start: Position of text[0]
        text: Decoded text of the segment
        byte_offset: Absolute byte offset just past the text

    Returns:
        TextPosition at the end of the text
    """
    newlines = text.count("\n")
    if newlines:
        column = len(text) - text.rfind("\n") - 1
    else:
        column = start.column + len(text)
    return TextPosition(row=start.row + newlines, column=column, byte_offset=byte_offset)


class SegmentationPipeline:
    """Pipeline for cutting a source text into translation segments."""

    def __init__(self, config: Config):
        """Initialize segmentation pipeline.

        Args:
            config: Pipeline configuration
        """
        self.config = config
        seg = config.segmentation

        # Boundaries are computed on raw text so offsets map to bytes exactly
        self.reader = StreamingParagraphReader(
            mode="raw", chunk_size=seg.chunk_size, encoding=seg.encoding
        )
        self.preview_reader = StreamingParagraphReader(
            mode=seg.reader_mode, chunk_size=seg.chunk_size, encoding=seg.encoding
        )
        self.segmenter = ParagraphSentenceSegmenter(
            word_limit=seg.word_limit, encoding=seg.encoding
        )
        self.extractor = RangeExtractor(encoding=seg.encoding)

    @property
    def input_file(self) -> Path:
        if not self.config.input_file:
            raise ValueError("Input file not specified in configuration")
        return self.config.input_file

    def open_document(self) -> TranslationDocument:
        """Load the progress document for the input, or start a new one.

        Raises:
            SourceMismatchError: If the input changed since the document was saved
        """
        progress_file = self.config.resolve_progress_file()
        source_hash = file_sha256(self.input_file)

        if progress_file.exists():
            document = TranslationDocument.load(progress_file)
            if document.source_hash and document.source_hash != source_hash:
                raise SourceMismatchError(
                    f"{self.input_file} does not match the source recorded in {progress_file}",
                    expected=document.source_hash,
                    actual=source_hash,
                )
            logger.info(
                "Resuming %s at byte %d (%d segments)",
                self.input_file,
                document.last_processed_byte_offset,
                len(document.segments),
            )
            return document

        logger.info("Starting new document for %s", self.input_file)
        return TranslationDocument(
            source_name=self.input_file.name,
            source_path=str(self.input_file),
            source_hash=source_hash,
        )

    def save_document(self, document: TranslationDocument) -> Path:
        progress_file = self.config.resolve_progress_file()
        document.save(progress_file)
        return progress_file

    def next_segment(
        self, document: TranslationDocument, source: Source
    ) -> Optional[Segment]:
        """Cut the next segment after the document's last processed position.

        The document is only modified once the whole step succeeded, so a
        failed read leaves the resume position unchanged.

        Args:
            document: Document to append to
            source: Path or open binary stream of the input

        Returns:
            The new segment, or None at the end of the input
        """
        start = document.last_processed_position
        block = self.reader.read_next_block(
            source, start.byte_offset, self.segmenter.word_limit, start_row=start.row
        )
        if block.is_empty:
            return None

        boundary = self.segmenter.next_boundary(block.text, base_byte_offset=start.byte_offset)
        if boundary is None:
            return None

        end = advance_position(start, block.text[: boundary.end_offset], boundary.byte_offset)
        segment = document.add_segment(SegmentRange(start=start, end=end))
        logger.debug(
            "Segment %d: bytes [%d, %d), %d words",
            segment.id,
            start.byte_offset,
            end.byte_offset,
            boundary.word_count,
        )
        return segment

    def segment_text(self, segment: Segment, source: Optional[Source] = None) -> str:
        """Re-read the source text of a segment."""
        return self.extractor.extract_segment(source or self.input_file, segment.range)

    def preview(self, document: TranslationDocument) -> ReadResult:
        """Read the next block after the last processed position without segmenting it."""
        position = document.last_processed_position
        return self.preview_reader.read_next_block(
            self.input_file,
            position.byte_offset,
            self.segmenter.word_limit,
            start_row=position.row,
        )

    def status(self, document: TranslationDocument) -> dict:
        """Summarize progress through the source."""
        size = self.input_file.stat().st_size
        processed = len(document.segments) - len(document.pending_segments())
        offset = document.last_processed_byte_offset
        return {
            "source": str(self.input_file),
            "segments": len(document.segments),
            "processed": processed,
            "pending": len(document.segments) - processed,
            "byte_offset": offset,
            "source_bytes": size,
            "percent": round(100.0 * offset / size, 1) if size else 100.0,
        }

    def _segment_all(self, document: TranslationDocument, source: BinaryIO) -> int:
        max_segments = self.config.segmentation.max_segments
        size = self.input_file.stat().st_size
        created = 0

        with tqdm(
            total=size,
            initial=document.last_processed_byte_offset,
            unit="B",
            unit_scale=True,
            desc="Segmenting",
        ) as progress:
            while max_segments is None or created < max_segments:
                before = document.last_processed_byte_offset
                segment = self.next_segment(document, source)
                if segment is None:
                    break
                created += 1
                progress.update(document.last_processed_byte_offset - before)

        return created

    def export_csv(
        self, document: TranslationDocument, output_path: Optional[Path] = None
    ) -> Path:
        """Write one row per segment with its source text and translation.

        Args:
            document: Document to export
            output_path: Target CSV path, defaults to the export directory

        Returns:
            Path of the written file
        """
        if output_path is None:
            stem = Path(document.source_name).stem
            output_path = self.config.output.export_dir / f"{stem}-segments.csv"
        output_path.parent.mkdir(parents=True, exist_ok=True)

        rows = []
        with open(self.input_file, "rb") as source:
            for segment in tqdm(document.segments, desc="Exporting"):
                text = self.segment_text(segment, source)
                rows.append({
                    "Segment_ID": segment.id,
                    "Status": segment.status,
                    "Start_Row": segment.range.start.row,
                    "Start_Column": segment.range.start.column,
                    "Start_Byte": segment.range.start.byte_offset,
                    "End_Row": segment.range.end.row,
                    "End_Column": segment.range.end.column,
                    "End_Byte": segment.range.end.byte_offset,
                    "Word_Count": count_words(text),
                    "Source_Text": text,
                    "Translation": segment.translation or "",
                    "Comments": "; ".join(segment.comments),
                })

        df = pd.DataFrame(rows)
        for col in df.select_dtypes(include=["object"]).columns:
            df[col] = df[col].apply(lambda x: sanitize_text(x) if isinstance(x, str) else x)
        df.to_csv(output_path, index=False)
        logger.info("Exported %d segments to %s", len(rows), output_path)
        return output_path

    def run(self) -> int:
        """Run the segmentation pipeline.

        Progress is saved even when the run is interrupted, so the next run
        resumes after the last completed segment.

        Returns:
            Number of new segments
        """
        if not self.input_file.exists():
            raise FileNotFoundError(f"Input file not found: {self.input_file}")

        document = self.open_document()
        created = 0
        try:
            with open(self.input_file, "rb") as source:
                created = self._segment_all(document, source)
        finally:
            progress_file = self.save_document(document)

        print(f"\nCreated {created} segments ({len(document.segments)} total).")
        print(f"Progress saved in: {progress_file}")
        return created
