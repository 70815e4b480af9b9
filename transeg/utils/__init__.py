"""Utility functions."""

from .byte_cursor import byte_length, byte_offset_at, char_offset_at
from .text_utils import count_words, split_paragraphs, sentence_spans

__all__ = [
    "byte_length",
    "byte_offset_at",
    "char_offset_at",
    "count_words",
    "split_paragraphs",
    "sentence_spans",
]
