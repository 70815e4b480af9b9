"""Tests for the streaming paragraph reader and range extraction."""

import io
from concurrent.futures import ThreadPoolExecutor

import pytest

from transeg.errors import EncodingError, RangeError, ReadError
from transeg.models import SegmentRange, TextPosition
from transeg.reader import (
    RangeExtractor,
    StreamingParagraphReader,
    extract_range,
    read_next_block,
)


class FailingStream(io.BytesIO):
    """Byte stream whose reads fail."""

    def read(self, size=-1):
        raise OSError("disk gone")


THREE_PARAGRAPHS = "First para one.\n\nSecond para two.\n\nThird para three."


class TestReadNextBlock:
    """Tests for read_next_block."""

    def test_end_of_input(self):
        data = b"Hello world.\n\n"
        result = read_next_block(io.BytesIO(data), len(data), 10)

        assert result.text == ""
        assert result.byte_offset == len(data)
        assert result.is_empty

    def test_whitespace_only_region(self):
        data = b"Hello.\n\n   \n\n  "
        result = read_next_block(io.BytesIO(data), 8, 10)

        assert result.text == ""
        assert result.byte_offset == 8

    @pytest.mark.parametrize("chunk_size", [1, 4, 7, 64 * 1024])
    def test_paragraphs_up_to_limit(self, chunk_size):
        """The block does not depend on how the source is chunked."""
        source = io.BytesIO(THREE_PARAGRAPHS.encode("utf-8"))
        result = read_next_block(source, 0, 6, chunk_size=chunk_size)

        assert result.text == "First para one.\n\nSecond para two."
        assert result.byte_offset == len("First para one.\n\nSecond para two.")
        assert result.word_count == 6

    def test_delimiter_is_consumed_before_rejected_paragraph(self):
        source = io.BytesIO(THREE_PARAGRAPHS.encode("utf-8"))
        result = read_next_block(source, 0, 4)

        assert result.text == "First para one.\n\n"
        assert result.byte_offset == 17
        assert result.word_count == 3

    def test_first_paragraph_always_admitted(self):
        source = io.BytesIO(b"one two three four five\n\nsix")
        result = read_next_block(source, 0, 2)

        assert result.text == "one two three four five"
        assert result.byte_offset == 23
        assert result.word_count == 5

    def test_multi_byte_split_across_chunks(self):
        text = "Ünïcödé wörds hère.\n\nSecond párágraph."
        source = io.BytesIO(text.encode("utf-8"))
        result = read_next_block(source, 0, 3, chunk_size=3)

        assert result.text == "Ünïcödé wörds hère."
        assert result.byte_offset == len("Ünïcödé wörds hère.".encode("utf-8"))

    def test_normalized_mode_trims_delimiters(self):
        data = b"\n\n  First para.  \n \n\nSecond para."
        raw = read_next_block(io.BytesIO(data), 0, 100, mode="raw")
        normalized = read_next_block(io.BytesIO(data), 0, 100, mode="normalized")

        assert raw.text == data.decode("utf-8")
        assert normalized.text == "First para.\n\nSecond para."
        # Both modes consume the same bytes
        assert raw.byte_offset == normalized.byte_offset == len(data)

    def test_row_tracking(self):
        source = io.BytesIO(b"Line one\nline two.\n\nNext para here.")
        result = read_next_block(source, 0, 4, start_row=1)

        assert result.text == "Line one\nline two."
        assert result.current_row == 2

    def test_row_tracking_disabled(self):
        result = read_next_block(io.BytesIO(b"Some words."), 0, 4)
        assert result.current_row is None

    def test_reads_from_path(self, sample_file, sample_text):
        result = read_next_block(sample_file, 0, 6)
        assert result.text == "The first paragraph is short.\n\n"
        assert result.byte_offset == len(result.text.encode("utf-8"))

    def test_successive_reads_cover_source(self, sample_file, sample_text):
        """Raw blocks are contiguous and reconstruct the source."""
        reader = StreamingParagraphReader(mode="raw", chunk_size=16)
        offset = 0
        texts = []
        while True:
            result = reader.read_next_block(sample_file, offset, 7)
            if result.is_empty:
                break
            assert result.byte_offset > offset
            assert extract_range(sample_file, offset, result.byte_offset) == result.text
            texts.append(result.text)
            offset = result.byte_offset

        assert "".join(texts) == sample_text
        assert offset == len(sample_text.encode("utf-8"))


class TestReadErrors:
    """Error handling in the reader."""

    def test_negative_offset(self):
        with pytest.raises(RangeError):
            read_next_block(io.BytesIO(b"text"), -1, 5)

    def test_offset_past_end(self):
        with pytest.raises(RangeError):
            read_next_block(io.BytesIO(b"text"), 5, 5)

    def test_invalid_word_limit(self):
        with pytest.raises(ValueError):
            read_next_block(io.BytesIO(b"text"), 0, 0)

    def test_invalid_bytes(self):
        with pytest.raises(EncodingError):
            read_next_block(io.BytesIO(b"bad \xff bytes"), 0, 5)

    def test_offset_inside_character(self):
        data = "é and more".encode("utf-8")
        with pytest.raises(EncodingError):
            read_next_block(io.BytesIO(data), 1, 5)

    def test_io_failure(self):
        with pytest.raises(ReadError):
            read_next_block(FailingStream(b"some text"), 0, 5)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReadError):
            read_next_block(tmp_path / "missing.txt", 0, 5)

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            StreamingParagraphReader(mode="pretty")


class TestRangeExtractor:
    """Tests for random-access range extraction."""

    def test_exact_slice(self, sample_file, sample_text):
        data = sample_text.encode("utf-8")
        start = data.index("Ünïcödé".encode("utf-8"))
        end = data.index("It spans".encode("utf-8"))

        text = extract_range(sample_file, start, end)
        assert text == "Ünïcödé text also appears here, with multi-byte characters like 日本語.\n"

    def test_empty_range(self, sample_file):
        assert extract_range(sample_file, 3, 3) == ""

    def test_segment_range(self, sample_file):
        segment_range = SegmentRange(
            start=TextPosition(row=1, column=0, byte_offset=4),
            end=TextPosition(row=1, column=9, byte_offset=9),
        )
        assert RangeExtractor().extract_segment(sample_file, segment_range) == "first"

    @pytest.mark.parametrize("start,end", [(-1, 3), (5, 2), (0, 10_000)])
    def test_invalid_ranges(self, sample_file, start, end):
        with pytest.raises(RangeError):
            extract_range(sample_file, start, end)

    def test_range_splitting_character(self):
        data = "日本".encode("utf-8")
        with pytest.raises(EncodingError):
            extract_range(io.BytesIO(data), 0, 2)

    def test_concurrent_extraction(self, sample_file, sample_text):
        data = sample_text.encode("utf-8")
        ranges = [(0, 10), (4, 30), (31, 60), (0, len(data))]
        extractor = RangeExtractor()

        with ThreadPoolExecutor(max_workers=4) as executor:
            results = list(executor.map(lambda r: extractor.extract(sample_file, *r), ranges * 5))

        expected = [data[s:e].decode("utf-8") for s, e in ranges] * 5
        assert results == expected
