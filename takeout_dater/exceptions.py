"""
Custom exception hierarchy for the takeout date backfiller.

Every error raised while processing a single sidecar derives from
TakeoutDaterError, so the pipeline can contain it to that one item.
"""


class TakeoutDaterError(Exception):
    """Base exception for all takeout date backfiller errors."""
    pass


class InvalidSidecarName(TakeoutDaterError):
    """Raised when a path does not carry the supplemental-metadata suffix."""
    pass


class MediaNotFound(TakeoutDaterError):
    """Raised when the media file a sidecar points at is missing."""
    pass


class SidecarParseError(TakeoutDaterError):
    """Raised when a sidecar cannot be read or lacks photoTakenTime.timestamp."""
    pass


class InvalidTimestamp(TakeoutDaterError):
    """Raised when a timestamp is not an integer or is out of datetime range."""
    pass


class ToolUnavailable(TakeoutDaterError):
    """Raised when the exiftool executable cannot be found or run."""
    pass


class ToolInvocationFailed(TakeoutDaterError):
    """Raised when exiftool exits non-zero, times out or emits garbage."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class MetadataReadError(TakeoutDaterError):
    """Raised when an image file cannot be opened for EXIF inspection."""
    pass
