"""Error types raised by gorder.

I/O failures are not wrapped: they surface as the builtin ``OSError``.
"""

from __future__ import annotations


class GorderError(Exception):
    """Base class for every error gorder raises on purpose."""


class UsageError(GorderError):
    """Bad command line: missing filename, too many or too few matches."""


class ParseError(GorderError):
    """The input is not syntactically valid Go."""

    def __init__(self, message: str, line: int = 0, column: int = 0, filename: str = ""):
        self.line = line
        self.column = column
        self.filename = filename
        if line:
            message = f"{line}:{column}: {message}"
        if filename:
            message = f"{filename}:{message}" if line else f"{filename}: {message}"
        super().__init__(message)


class InvariantViolation(GorderError):
    """A declaration shape the ordering rules cannot key.

    This is an internal error rather than bad input, so the CLI reports it
    separately from the other kinds.
    """
