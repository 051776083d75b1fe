"""Exception hierarchy for the infer package."""

from typing import Optional


class InferError(Exception):
    """Base exception for all infer errors."""


class ConfigurationError(InferError, ValueError):
    """Raised when a tokenizer or label artifact is malformed or incomplete."""

    def __init__(self, message: str, *, source: Optional[str] = None, line: Optional[int] = None) -> None:
        """Initialize with an optional artifact name and line number appended to the message."""
        if source is not None and line is not None:
            message = f"{message} ({source}, line {line})"
        elif source is not None:
            message = f"{message} ({source})"
        super().__init__(message)
        self.source = source
        self.line = line


class UnknownIdError(InferError, LookupError):
    """Raised when an id or class index is not present in a lookup table."""

    def __init__(self, message: str, *, index: int) -> None:
        super().__init__(f"{message}: {index}")
        self.index = index


class ShapeError(InferError, ValueError):
    """Raised when a flat array does not match its declared dimensions."""
