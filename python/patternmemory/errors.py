"""Exceptions raised by the pattern memory core."""

from __future__ import annotations


class PatternMemoryError(Exception):
    """Base class for every error raised by this package."""


class EmptySelectionError(PatternMemoryError, ValueError):
    """A selection was submitted without any cells."""


class InvalidConfigurationError(PatternMemoryError, ValueError):
    """An engine or generator was constructed with an unusable argument."""


class InvalidGameLevelError(InvalidConfigurationError):
    """The level policy is missing or not a ``GameLevel``."""


class MalformedRecordError(PatternMemoryError, ValueError):
    """A score log line could not be parsed."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class BoardExhaustedError(PatternMemoryError, RuntimeError):
    """No free cell is left on the board to start a pattern from."""


class InvalidStateError(PatternMemoryError, RuntimeError):
    """The operation is not allowed in the engine's current state."""
