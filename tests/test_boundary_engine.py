"""Tests for the paragraph/sentence boundary engine."""

import pytest

from transeg.engines import ParagraphSentenceSegmenter, compute_next_boundary


class TestEmptyInput:
    """Empty or whitespace-only text has no next segment."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\n \n", "\t\n"])
    def test_returns_none(self, text):
        assert compute_next_boundary(text, 10) is None

    def test_invalid_word_limit(self):
        with pytest.raises(ValueError):
            compute_next_boundary("Some text.", 0)


class TestParagraphBoundary:
    """Paragraphs that fit the word limit are taken whole."""

    def test_short_paragraph_includes_delimiter(self):
        text = "Short para.\n\nAnother short para."
        boundary = compute_next_boundary(text, 100)

        assert boundary.end_offset == len("Short para.\n\n")
        assert boundary.byte_offset == boundary.end_offset
        assert boundary.word_count == 2

    def test_single_paragraph_takes_whole_text(self):
        text = "Just one paragraph without a blank line."
        boundary = compute_next_boundary(text, 100)
        assert boundary.end_offset == len(text)

    def test_leading_blank_lines_are_skipped(self):
        """Delimiters before any content do not end a segment."""
        text = "\n\n\nHello there.\n\nNext."
        boundary = compute_next_boundary(text, 10)

        assert text[: boundary.end_offset] == "\n\n\nHello there.\n\n"
        assert boundary.word_count == 2

    def test_exact_fit_is_taken(self):
        text = "one two three four\n\nfive"
        boundary = compute_next_boundary(text, 4)
        assert text[: boundary.end_offset] == "one two three four\n\n"


class TestSentenceBoundary:
    """Paragraphs over the limit are cut at sentence boundaries."""

    def test_first_sentence_only(self):
        text = "Sentence one. Sentence two. Sentence three.\n\nNext paragraph here."
        boundary = compute_next_boundary(text, 4)

        assert text[: boundary.end_offset] == "Sentence one. "
        assert text[: boundary.end_offset].strip() == "Sentence one."
        assert boundary.word_count == 2

    def test_several_sentences_below_limit(self):
        text = "One two. Three four. Five six seven."
        boundary = compute_next_boundary(text, 5)

        assert text[: boundary.end_offset] == "One two. Three four. "
        assert boundary.word_count == 4

    def test_long_first_sentence_is_admitted(self):
        """A segment is never empty, even when one sentence exceeds the limit."""
        text = "One two three four five. Six."
        boundary = compute_next_boundary(text, 3)

        assert text[: boundary.end_offset] == "One two three four five. "
        assert boundary.word_count == 5

    def test_paragraph_without_terminators(self):
        text = "a b c d e f\n\nnext"
        boundary = compute_next_boundary(text, 2)
        assert text[: boundary.end_offset] == "a b c d e f\n\n"

    def test_sentence_reaching_paragraph_end_takes_delimiter(self):
        text = "Alpha beta gamma delta.\n\nNext."
        boundary = compute_next_boundary(text, 2)
        assert boundary.end_offset == len("Alpha beta gamma delta.\n\n")

    def test_mixed_terminators(self):
        text = "Is it here? Yes it is! Good to know. Done."
        boundary = compute_next_boundary(text, 7)
        assert text[: boundary.end_offset] == "Is it here? Yes it is! "


class TestByteOffsets:
    """Byte offsets follow the encoded length of the segment."""

    def test_multi_byte_characters(self):
        text = "日本 text here.\n\nMore."
        boundary = compute_next_boundary(text, 100)
        segment = text[: boundary.end_offset]

        assert segment == "日本 text here.\n\n"
        assert boundary.byte_offset == len(segment.encode("utf-8"))
        assert boundary.byte_offset != boundary.end_offset

    def test_base_byte_offset_is_added(self):
        text = "Café au lait.\n\nNext."
        boundary = compute_next_boundary(text, 100, base_byte_offset=1000)
        assert boundary.byte_offset == 1000 + len("Café au lait.\n\n".encode("utf-8"))

    def test_without_byte_offset(self):
        boundary = compute_next_boundary("Some text.", 10, with_byte_offset=False)
        assert boundary.byte_offset is None
        assert boundary.end_offset == len("Some text.")


class TestPartition:
    """Repeated boundaries partition the text."""

    def test_segments_reconstruct_text(self, sample_text):
        segmenter = ParagraphSentenceSegmenter(word_limit=8)
        segments = segmenter.segment_with_indices(sample_text)

        assert "".join(s for s, _, _ in segments) == sample_text
        for text, start, end in segments:
            assert end > start
            assert sample_text[start:end] == text

    def test_progress_for_every_limit(self, sample_text):
        for limit in (1, 2, 5, 50, 1000):
            remainder = sample_text
            while True:
                boundary = compute_next_boundary(remainder, limit)
                if boundary is None:
                    break
                assert 0 < boundary.end_offset <= len(remainder)
                remainder = remainder[boundary.end_offset :]
            assert remainder.strip() == ""
