"""Data models for positions, ranges and engine results."""

from dataclasses import dataclass
from typing import Optional

from .errors import RangeError


@dataclass(frozen=True)
class TextPosition:
    """A position in the source, addressed by row/column and by byte offset.

    The byte offset is authoritative for re-reading the source; row and
    column are advisory metadata for display.
    """

    row: int = 1
    column: int = 0
    byte_offset: int = 0

    def __post_init__(self):
        if self.row < 1 or self.column < 0 or self.byte_offset < 0:
            raise RangeError(
                f"Invalid position: row={self.row}, column={self.column}, "
                f"byte_offset={self.byte_offset}",
                row=self.row,
                column=self.column,
                byte_offset=self.byte_offset,
            )


@dataclass(frozen=True)
class SegmentRange:
    """Half-open byte interval [start.byte_offset, end.byte_offset)."""

    start: TextPosition
    end: TextPosition

    def __post_init__(self):
        if self.end.byte_offset < self.start.byte_offset:
            raise RangeError(
                f"Inverted range: {self.start.byte_offset} > {self.end.byte_offset}",
                start=self.start.byte_offset,
                end=self.end.byte_offset,
            )

    @property
    def byte_length(self) -> int:
        return self.end.byte_offset - self.start.byte_offset

    @property
    def is_empty(self) -> bool:
        return self.byte_length == 0


@dataclass(frozen=True)
class ReadResult:
    """Block of decoded text returned by the streaming reader."""

    text: str
    byte_offset: int  # absolute offset just past the consumed bytes
    current_row: Optional[int] = None
    word_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.text


@dataclass(frozen=True)
class Boundary:
    """End of the next segment within a block of text."""

    end_offset: int  # character offset into the block
    byte_offset: Optional[int]  # None when byte conversion was not requested
    word_count: int
