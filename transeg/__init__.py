"""Resumable, boundary-respecting segmentation of large plain-text documents."""

from .engines import ParagraphSentenceSegmenter, compute_next_boundary
from .errors import (
    EncodingError,
    RangeError,
    ReadError,
    SegmentationError,
    SegmentNotFoundError,
    SourceMismatchError,
)
from .models import Boundary, ReadResult, SegmentRange, TextPosition
from .reader import RangeExtractor, StreamingParagraphReader, extract_range, read_next_block

__version__ = "0.1.0"

__all__ = [
    "Boundary",
    "EncodingError",
    "ParagraphSentenceSegmenter",
    "RangeError",
    "RangeExtractor",
    "ReadError",
    "ReadResult",
    "SegmentNotFoundError",
    "SegmentRange",
    "SegmentationError",
    "SourceMismatchError",
    "StreamingParagraphReader",
    "TextPosition",
    "compute_next_boundary",
    "extract_range",
    "read_next_block",
]
