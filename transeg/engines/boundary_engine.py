"""Paragraph-first, sentence-fallback boundary engine."""

from typing import Optional

from ..models import Boundary
from ..utils.byte_cursor import DEFAULT_ENCODING, byte_offset_at
from ..utils.text_utils import count_words, first_paragraph_end, is_blank, sentence_spans
from .base import SegmentationEngine


class ParagraphSentenceSegmenter(SegmentationEngine):
    """Cut segments at paragraph boundaries, falling back to sentences.

    A paragraph that fits the word limit becomes one segment together with
    its trailing blank-line delimiter. A longer paragraph is cut after the
    last sentence that keeps the segment under the limit; the first
    sentence is always taken so that every segment makes progress.
    """

    def next_boundary(
        self,
        text: str,
        *,
        base_byte_offset: int = 0,
        with_byte_offset: bool = True,
    ) -> Optional[Boundary]:
        if is_blank(text):
            return None

        paragraph_end, delimiter_end = first_paragraph_end(text)
        paragraph = text[:paragraph_end]
        paragraph_words = count_words(paragraph)

        if paragraph_words <= self.word_limit:
            end_offset, word_count = delimiter_end, paragraph_words
        else:
            end_offset, word_count = self._sentence_boundary(paragraph)
            if end_offset == paragraph_end:
                end_offset = delimiter_end

        byte_offset = None
        if with_byte_offset:
            byte_offset = base_byte_offset + byte_offset_at(text, end_offset, self.encoding)
        return Boundary(end_offset=end_offset, byte_offset=byte_offset, word_count=word_count)

    def _sentence_boundary(self, paragraph: str) -> tuple[int, int]:
        """Accumulate sentences of an over-long paragraph.

        After the first sentence, a sentence is admitted only while the
        running total stays below the word limit.

        Returns:
            (end_offset, word_count) of the admitted sentences
        """
        end_offset = 0
        word_count = 0
        for start, end in sentence_spans(paragraph):
            words = count_words(paragraph[start:end])
            if end_offset > 0 and word_count + words >= self.word_limit:
                break
            word_count += words
            end_offset = end
            if word_count >= self.word_limit:
                break
        return end_offset, word_count


def compute_next_boundary(
    text: str,
    word_limit: int,
    *,
    base_byte_offset: int = 0,
    with_byte_offset: bool = True,
    encoding: str = DEFAULT_ENCODING,
) -> Optional[Boundary]:
    """Compute the end of the next segment of `text`.

    Args:
        text: Decoded text starting at the current position
        word_limit: Maximum number of words per segment (>= 1)
        base_byte_offset: Absolute byte offset of text[0] in the source
        with_byte_offset: Also return the byte offset of the boundary
        encoding: Encoding of the source

    Returns:
        Boundary, or None when the text is empty or whitespace only
    """
    segmenter = ParagraphSentenceSegmenter(word_limit=word_limit, encoding=encoding)
    return segmenter.next_boundary(
        text, base_byte_offset=base_byte_offset, with_byte_offset=with_byte_offset
    )
