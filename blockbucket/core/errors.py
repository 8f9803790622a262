"""Exceptions raised by the bucket store."""


class BucketError(Exception):
    """Base class for bucket store failures."""
    pass


class CorruptBlockError(BucketError):
    """Raised when a block's declared lengths run past the end of the file."""

    def __init__(self, message: str, path: str = None, offset: int = None):
        super().__init__(message)
        self.path = path
        self.offset = offset
