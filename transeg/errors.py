"""Exception hierarchy for the segmentation engine."""


class SegmentationError(Exception):
    """Base class for all errors raised by transeg.

    Carries the message plus keyword context (offsets, paths, ids) so that
    callers can log a structured record without parsing the message.
    """

    def __init__(self, message: str, **kwargs):
        """Initialize the error.

        Args:
            message: Human readable error message
            **kwargs: Additional context about the failure
        """
        super().__init__(message)
        self.message = message
        self.context = kwargs

    def __str__(self):
        return self.message

    def to_dict(self) -> dict:
        """Convert the error to a dictionary for logging.

        Returns:
            Dictionary with error type, message and context
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ReadError(SegmentationError, OSError):
    """The source could not be read."""


class EncodingError(SegmentationError, ValueError):
    """Bytes cannot be decoded (or text encoded) in the configured encoding."""


class RangeError(SegmentationError, ValueError):
    """A byte range is negative, inverted or beyond the end of the source."""


class SegmentNotFoundError(SegmentationError, KeyError):
    """No segment with the requested id exists in the document."""


class SourceMismatchError(SegmentationError):
    """The source file changed since the progress document was written."""
