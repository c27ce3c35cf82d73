"""
Custom Exceptions for the Chunking Pipeline.

Exception Hierarchy:
    ChunkingError (base)
    ├── ConfigurationError
    └── ChunkValidationError

Degenerate input (empty text, no paragraphs, blank image descriptions) is
never an error: the chunker returns an empty or reduced result instead.

Usage:
    from smart_chunking.exceptions import ChunkingError, ConfigurationError

    try:
        chunks = chunk_text(text, ChunkingOptions(min_tokens=500, max_tokens=100))
    except ConfigurationError as e:
        print(f"Bad options: {e}")
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class ChunkingError(Exception):
    """
    Base exception for all chunking-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A chunking error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


# =============================================================================
# CALLER ERRORS
# =============================================================================


class ConfigurationError(ChunkingError):
    """
    Raised when chunking options or service settings are invalid.

    Values are never clamped: a negative budget or a minimum that is not
    below the maximum is a caller bug and fails fast.

    Attributes:
        option: Name of the offending option, if a single one is at fault
    """

    def __init__(
        self,
        message: str = "Invalid chunking configuration",
        option: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.option = option
        if option:
            message = f"{message} [{option}]"
        super().__init__(message, details)


# =============================================================================
# OUTPUT ERRORS
# =============================================================================


class ChunkValidationError(ChunkingError):
    """
    Raised when chunk records fail validation before being handed to storage.

    Attributes:
        errors: One message per failed check
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        summary = f"Invalid chunks generated ({len(self.errors)} problem(s))"
        super().__init__(summary, details="; ".join(self.errors[:10]) or None)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def format_error_chain(error: Exception) -> str:
    """
    Format an exception and its chain for logging.

    Returns a multi-line string showing the error hierarchy.
    """
    lines = []
    current: Optional[BaseException] = error
    depth = 0

    while current is not None:
        prefix = "  " * depth + ("└─ " if depth > 0 else "")
        lines.append(f"{prefix}{type(current).__name__}: {current}")
        current = current.__cause__
        depth += 1

    return "\n".join(lines)
