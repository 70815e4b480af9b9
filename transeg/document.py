"""Translation document: the ordered segments of one source file."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .errors import ReadError, SegmentNotFoundError
from .models import SegmentRange, TextPosition

logger = logging.getLogger(__name__)

PROGRESS_SUFFIX = "-progress.json"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def progress_file_for(source: Path) -> Path:
    """Return the progress file path used for a source file."""
    return source.with_name(source.stem + PROGRESS_SUFFIX)


class TranslationDecision(BaseModel):
    """Terminology decision recorded while translating a segment."""

    comment: Optional[str] = None
    terms: dict[str, str] = Field(default_factory=dict)


class Segment(BaseModel):
    """One unit of work: a byte range of the source plus translator data."""

    id: int = Field(ge=1)
    range: SegmentRange
    status: Literal["unprocessed", "processed"] = "unprocessed"
    translation: Optional[str] = None
    comments: list[str] = Field(default_factory=list)
    annotations: list[str] = Field(default_factory=list)
    decisions: list[TranslationDecision] = Field(default_factory=list)
    updated_at: Optional[datetime] = None


class TranslationDocument(BaseModel):
    """All segments of a source file and the position to resume from.

    Segments are only ever appended; ids are dense and 1-based.
    """

    source_name: str = "unnamed.txt"
    source_path: Optional[str] = None
    source_hash: Optional[str] = None
    segments: list[Segment] = Field(default_factory=list)
    last_processed_position: TextPosition = Field(default_factory=TextPosition)
    last_updated_at: datetime = Field(default_factory=_now)

    @property
    def has_segments(self) -> bool:
        return len(self.segments) > 0

    @property
    def last_processed_byte_offset(self) -> int:
        return self.last_processed_position.byte_offset

    def add_segment(self, segment_range: SegmentRange) -> Segment:
        """Append a new unprocessed segment and advance the resume position."""
        segment = Segment(id=len(self.segments) + 1, range=segment_range)
        self.segments.append(segment)
        self.last_processed_position = segment_range.end
        self._touch()
        return segment

    def get_segment(self, segment_id: int) -> Segment:
        """Return the segment with `segment_id`.

        Raises:
            SegmentNotFoundError: If no such segment exists
        """
        if 1 <= segment_id <= len(self.segments):
            segment = self.segments[segment_id - 1]
            if segment.id == segment_id:
                return segment
        for segment in self.segments:
            if segment.id == segment_id:
                return segment
        raise SegmentNotFoundError(f"Segment not found: {segment_id}", segment_id=segment_id)

    def update_translation(self, segment_id: int, translation: str) -> Segment:
        segment = self.get_segment(segment_id)
        segment.translation = translation
        segment.status = "processed"
        segment.updated_at = self._touch()
        return segment

    def add_comment(self, segment_id: int, comment: str) -> Segment:
        segment = self.get_segment(segment_id)
        segment.comments.append(comment)
        self._touch()
        return segment

    def add_annotation(self, segment_id: int, annotation: str) -> Segment:
        segment = self.get_segment(segment_id)
        segment.annotations.append(annotation)
        self._touch()
        return segment

    def add_decision(self, segment_id: int, decision: TranslationDecision) -> Segment:
        segment = self.get_segment(segment_id)
        segment.decisions.append(decision)
        self._touch()
        return segment

    def pending_segments(self) -> list[Segment]:
        """Return segments that have no translation yet."""
        return [s for s in self.segments if s.status == "unprocessed"]

    def _touch(self) -> datetime:
        self.last_updated_at = _now()
        return self.last_updated_at

    def save(self, path: str | Path) -> None:
        """Write the document as pretty-printed JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        logger.debug("Saved %d segments to %s", len(self.segments), path)

    @classmethod
    def load(cls, path: str | Path) -> "TranslationDocument":
        """Read a document previously written with `save`.

        Raises:
            ReadError: If the file cannot be read
        """
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ReadError(f"Cannot read progress file {path}: {e}", path=str(path)) from e
        return cls.model_validate_json(raw)
