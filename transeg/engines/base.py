"""Base class for boundary engines."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import Boundary
from ..utils.byte_cursor import DEFAULT_ENCODING


class SegmentationEngine(ABC):
    """Base class for segmentation engines."""

    def __init__(self, word_limit: int = 100, encoding: str = DEFAULT_ENCODING):
        """Initialize segmentation engine.

        Args:
            word_limit: Maximum number of words per segment
            encoding: Encoding used to convert character offsets to bytes
        """
        if word_limit < 1:
            raise ValueError("word_limit must be at least 1")
        self.word_limit = word_limit
        self.encoding = encoding

    @abstractmethod
    def next_boundary(
        self,
        text: str,
        *,
        base_byte_offset: int = 0,
        with_byte_offset: bool = True,
    ) -> Optional[Boundary]:
        """Compute where the next segment of `text` ends.

        Args:
            text: Decoded text starting at the current position
            base_byte_offset: Absolute byte offset of text[0] in the source
            with_byte_offset: Convert the end offset to a byte offset

        Returns:
            Boundary, or None if the text is empty or whitespace only
        """
        pass

    def segment_with_indices(self, text: str) -> list[tuple[str, int, int]]:
        """Partition text into consecutive segments.

        Args:
            text: Input text to segment

        Returns:
            List of (segment_text, start_index, end_index) tuples. Trailing
            whitespace that cannot form a segment is left out.
        """
        segments = []
        start = 0
        while start < len(text):
            boundary = self.next_boundary(text[start:], with_byte_offset=False)
            if boundary is None:
                break
            end = start + boundary.end_offset
            segments.append((text[start:end], start, end))
            start = end
        return segments
