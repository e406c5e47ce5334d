"""Exceptions raised by the magic image engine."""


class MagicImageError(RuntimeError):
    """Base class for every failure the engine reports to callers."""


class NoSignatureFoundError(MagicImageError):
    """The buffer holds no recognisable image header anywhere."""

    def __init__(self, message: str = "No valid image format found", size: int = 0):
        super().__init__(message)
        self.size = size


class FileTooLargeError(MagicImageError):
    """A source file exceeds the ingestion ceiling."""

    def __init__(self, path: str, size: int, limit: int):
        super().__init__(
            f"{path} is {size} bytes, larger than the {limit} byte limit"
        )
        self.path = path
        self.size = size
        self.limit = limit


class UnsupportedFormatError(MagicImageError):
    """A source file does not start with a supported image signature."""
