"""
Engine Exceptions

DESIGN DECISION: Every failure inside the engine is an input error,
never an environmental one. There is nothing transient to retry.

- InvalidArgumentError is raised synchronously at the offending call.
- Missing accounts/categories are NOT errors: that side of the
  computation is skipped and the result degrades to zero/empty.
"""

from typing import Optional


class EngineError(Exception):
    """Base class for all engine errors."""
    pass


class InvalidArgumentError(EngineError, ValueError):
    """
    Raised when a caller hands the engine malformed input.

    The UI layer is expected to catch this and show a message.
    The engine never turns it into a zero/empty result.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message
