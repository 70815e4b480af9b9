"""Paragraph, sentence and word helpers shared by the reader and segmenter."""

import re

# A blank line: newline, optional whitespace, newline
PARAGRAPH_DELIMITER = re.compile(r"\n\s*\n")
_PARAGRAPH_SPLIT = re.compile(r"(\n\s*\n)")

# Run of non-terminators ending in . ! or ?, plus one trailing whitespace char
SENTENCE_PATTERN = re.compile(r"[^.!?]*[.!?]+(?:\s|\Z)")


def count_words(text: str) -> int:
    """Count whitespace-delimited words; whitespace runs are one separator."""
    return len(text.split())


def is_blank(text: str) -> bool:
    return not text.strip()


def split_paragraphs(text: str) -> list[str]:
    """Split text into alternating paragraph and delimiter parts.

    The result always has odd length: even indices are paragraph text
    (possibly empty), odd indices are the delimiters exactly as they appear.
    Joining the parts gives back the input.
    """
    return _PARAGRAPH_SPLIT.split(text)


def first_paragraph_end(text: str) -> tuple[int, int]:
    """Locate the end of the first paragraph that holds real content.

    Delimiters preceded only by whitespace belong to zero-word paragraphs
    and are skipped.

    Args:
        text: Decoded text

    Returns:
        (paragraph_end, delimiter_end). Both equal len(text) when the text
        has no delimiter after content.
    """
    for match in PARAGRAPH_DELIMITER.finditer(text):
        if not is_blank(text[: match.start()]):
            return match.start(), match.end()
    return len(text), len(text)


def sentence_spans(paragraph: str) -> list[tuple[int, int]]:
    """Split a paragraph into contiguous sentence spans.

    Each span starts where the previous one ended, so the spans cover the
    paragraph without gaps. Text after the last terminator becomes a final
    span when it holds words; trailing whitespace is folded into the last
    span.

    Args:
        paragraph: Paragraph text

    Returns:
        List of (start, end) character offsets
    """
    spans = []
    start = 0
    for match in SENTENCE_PATTERN.finditer(paragraph):
        spans.append((start, match.end()))
        start = match.end()

    if start < len(paragraph):
        if spans and is_blank(paragraph[start:]):
            spans[-1] = (spans[-1][0], len(paragraph))
        else:
            spans.append((start, len(paragraph)))
    return spans
