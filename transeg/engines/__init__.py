"""Segmentation engines."""

from .base import SegmentationEngine
from .boundary_engine import ParagraphSentenceSegmenter, compute_next_boundary

__all__ = ["SegmentationEngine", "ParagraphSentenceSegmenter", "compute_next_boundary"]
