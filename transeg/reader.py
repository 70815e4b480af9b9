"""Streaming paragraph reader and random-access range extraction."""

import codecs
import io
import logging
from contextlib import contextmanager
from os import PathLike
from typing import BinaryIO, Iterator, Literal, Optional, Union

from .errors import EncodingError, RangeError, ReadError
from .models import ReadResult, SegmentRange
from .utils.byte_cursor import DEFAULT_ENCODING, byte_length
from .utils.text_utils import count_words, is_blank, split_paragraphs

logger = logging.getLogger(__name__)

ReaderMode = Literal["raw", "normalized"]
Source = Union[str, PathLike, BinaryIO]

DEFAULT_CHUNK_SIZE = 64 * 1024
PARAGRAPH_SEPARATOR = "\n\n"


@contextmanager
def open_source(source: Source) -> Iterator[BinaryIO]:
    """Yield a binary stream for `source`.

    Paths are opened (and closed) here; file objects are used as given and
    left open for the caller.
    """
    if isinstance(source, (str, PathLike)):
        try:
            stream = open(source, "rb")
        except OSError as e:
            raise ReadError(f"Cannot open source {source}: {e}", path=str(source)) from e
        with stream:
            yield stream
    else:
        yield source


def source_size(stream: BinaryIO) -> int:
    """Return the total byte length of a seekable stream."""
    try:
        return stream.seek(0, io.SEEK_END)
    except (OSError, ValueError) as e:
        raise ReadError(f"Source is not seekable: {e}") from e


def _complete_parts(parts: list[str], exhausted: bool) -> list[str]:
    """Drop the parts that further reads could still extend.

    Until the stream is exhausted the last paragraph part may be cut
    mid-paragraph. When that tail is blank, the delimiter before it may
    still grow as well.
    """
    if exhausted:
        return parts
    tail = parts[-1]
    parts = parts[:-1]
    if parts and is_blank(tail):
        parts = parts[:-1]
    return parts


class StreamingParagraphReader:
    """Read the next word-bounded block of whole paragraphs from a byte source.

    Memory use is proportional to the block size, not the file size: reading
    stops once the buffer holds a complete paragraph and the word budget.
    """

    def __init__(
        self,
        mode: ReaderMode = "raw",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        encoding: str = DEFAULT_ENCODING,
    ):
        """Initialize the reader.

        Args:
            mode: "raw" returns the consumed text verbatim (delimiters kept),
                "normalized" trims paragraphs and joins them with a blank line
            chunk_size: Number of bytes read per chunk
            encoding: Encoding of the source
        """
        if mode not in ("raw", "normalized"):
            raise ValueError(f"Unknown reader mode: {mode}")
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self.mode = mode
        self.chunk_size = chunk_size
        self.encoding = encoding

    def read_next_block(
        self,
        source: Source,
        byte_offset_start: int,
        word_limit: int,
        start_row: Optional[int] = None,
    ) -> ReadResult:
        """Read the next block of paragraphs starting at `byte_offset_start`.

        Args:
            source: Path or seekable binary file object
            byte_offset_start: Absolute byte offset to start reading at
            word_limit: Word budget for the block (>= 1)
            start_row: Row number at `byte_offset_start`; enables row tracking

        Returns:
            ReadResult with the block text and the offset just past the
            consumed bytes. An empty text means there is nothing left to read.

        Raises:
            ReadError: If the source cannot be read
            EncodingError: If the bytes cannot be decoded
            RangeError: If the start offset is outside the source
        """
        if word_limit < 1:
            raise ValueError("word_limit must be at least 1")
        if byte_offset_start < 0:
            raise RangeError(
                f"Negative start offset: {byte_offset_start}",
                byte_offset=byte_offset_start,
            )

        with open_source(source) as stream:
            size = source_size(stream)
            if byte_offset_start > size:
                raise RangeError(
                    f"Start offset {byte_offset_start} beyond source length {size}",
                    byte_offset=byte_offset_start,
                    length=size,
                )
            buffer, exhausted = self._fill_buffer(stream, byte_offset_start, word_limit)

        if is_blank(buffer):
            logger.debug("No text left at byte %d", byte_offset_start)
            return ReadResult(text="", byte_offset=byte_offset_start, current_row=start_row)

        parts = _complete_parts(split_paragraphs(buffer), exhausted)
        consumed, paragraphs, word_count = self._take_paragraphs(parts, word_limit)

        if self.mode == "raw":
            text = "".join(consumed)
        else:
            text = PARAGRAPH_SEPARATOR.join(p.strip() for p in paragraphs)

        consumed_bytes = sum(byte_length(part, self.encoding) for part in consumed)
        current_row = start_row + text.count("\n") if start_row is not None else None

        logger.debug(
            "Read %d paragraphs (%d words, %d bytes) from byte %d",
            len(paragraphs),
            word_count,
            consumed_bytes,
            byte_offset_start,
        )
        return ReadResult(
            text=text,
            byte_offset=byte_offset_start + consumed_bytes,
            current_row=current_row,
            word_count=word_count,
        )

    def _fill_buffer(
        self, stream: BinaryIO, byte_offset_start: int, word_limit: int
    ) -> tuple[str, bool]:
        """Decode chunks into a buffer until the stop condition holds.

        Returns:
            (buffer, exhausted) where exhausted tells whether the stream ended
        """
        decoder = codecs.getincrementaldecoder(self.encoding)(errors="strict")
        buffer = ""
        try:
            stream.seek(byte_offset_start)
            while True:
                data = stream.read(self.chunk_size)
                if not data:
                    buffer += decoder.decode(b"", final=True)
                    return buffer, True
                buffer += decoder.decode(data)
                if self._should_stop(buffer, word_limit):
                    return buffer, False
        except UnicodeDecodeError as e:
            raise EncodingError(
                f"Cannot decode source as {self.encoding} near byte "
                f"{byte_offset_start}: {e.reason}",
                encoding=self.encoding,
                byte_offset=byte_offset_start,
            ) from e
        except OSError as e:
            raise ReadError(
                f"Failed reading source at byte {byte_offset_start}: {e}",
                byte_offset=byte_offset_start,
            ) from e

    @staticmethod
    def _should_stop(buffer: str, word_limit: int) -> bool:
        """Decide whether more chunks could still change the block.

        Reading stops once a finished non-empty paragraph is buffered and
        either the finished paragraphs reach the budget or the unfinished
        tail already cannot fit. The block then no longer depends on the
        chunk size.
        """
        if count_words(buffer) < word_limit:
            return False
        parts = split_paragraphs(buffer)
        paragraphs = _complete_parts(parts, exhausted=False)[::2]
        if all(is_blank(part) for part in paragraphs):
            return False
        complete_words = sum(count_words(part) for part in paragraphs)
        return (
            complete_words >= word_limit
            or complete_words + count_words(parts[-1]) > word_limit
        )

    @staticmethod
    def _take_paragraphs(
        parts: list[str], word_limit: int
    ) -> tuple[list[str], list[str], int]:
        """Walk paragraph/delimiter parts and admit paragraphs under the budget.

        The first paragraph with words is always admitted; later ones only
        if they fit. Delimiters and empty paragraphs are consumed as they
        are passed.

        Returns:
            (consumed_parts, admitted_paragraphs, word_count)
        """
        consumed = []
        paragraphs = []
        word_count = 0

        for index, part in enumerate(parts):
            if index % 2 == 1:
                consumed.append(part)
                continue

            words = count_words(part)
            if words == 0:
                consumed.append(part)
                continue
            if word_count > 0 and word_count + words > word_limit:
                break

            consumed.append(part)
            paragraphs.append(part)
            word_count += words
            if word_count >= word_limit:
                break

        return consumed, paragraphs, word_count


class RangeExtractor:
    """Random-access reads of exact byte ranges.

    Given a path, every call opens its own handle, so one extractor can be
    shared between threads.
    """

    def __init__(self, encoding: str = DEFAULT_ENCODING):
        self.encoding = encoding

    def extract(self, source: Source, start: int, end: int) -> str:
        """Decode the bytes [start, end) of `source`.

        Raises:
            RangeError: If the range is negative, inverted or past the end
            ReadError: If the source cannot be read
            EncodingError: If the slice is not valid in the encoding
        """
        if start < 0 or end < start:
            raise RangeError(f"Invalid byte range [{start}, {end})", start=start, end=end)

        with open_source(source) as stream:
            size = source_size(stream)
            if end > size:
                raise RangeError(
                    f"Byte range [{start}, {end}) beyond source length {size}",
                    start=start,
                    end=end,
                    length=size,
                )
            try:
                stream.seek(start)
                data = stream.read(end - start)
            except OSError as e:
                raise ReadError(f"Failed reading bytes [{start}, {end}): {e}") from e

        if len(data) != end - start:
            raise ReadError(
                f"Short read: expected {end - start} bytes, got {len(data)}",
                start=start,
                end=end,
            )
        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise EncodingError(
                f"Bytes [{start}, {end}) are not valid {self.encoding}: {e.reason}",
                encoding=self.encoding,
                start=start,
                end=end,
            ) from e

    def extract_segment(self, source: Source, segment_range: SegmentRange) -> str:
        return self.extract(
            source, segment_range.start.byte_offset, segment_range.end.byte_offset
        )


def read_next_block(
    source: Source,
    byte_offset_start: int,
    word_limit: int,
    start_row: Optional[int] = None,
    *,
    mode: ReaderMode = "raw",
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = DEFAULT_ENCODING,
) -> ReadResult:
    """Convenience wrapper around StreamingParagraphReader.read_next_block."""
    reader = StreamingParagraphReader(mode=mode, chunk_size=chunk_size, encoding=encoding)
    return reader.read_next_block(source, byte_offset_start, word_limit, start_row)


def extract_range(
    source: Source, start: int, end: int, *, encoding: str = DEFAULT_ENCODING
) -> str:
    """Convenience wrapper around RangeExtractor.extract."""
    return RangeExtractor(encoding=encoding).extract(source, start, end)
