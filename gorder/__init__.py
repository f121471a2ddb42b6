"""gorder - canonical declaration order for Go source files."""

from .errors import GorderError, InvariantViolation, ParseError, UsageError
from .reorder import reorder, reorder_source
from .syntax import parse, render

__version__ = "0.1.0"

__all__ = [
    "GorderError",
    "InvariantViolation",
    "ParseError",
    "UsageError",
    "parse",
    "render",
    "reorder",
    "reorder_source",
]
