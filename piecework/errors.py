"""Exceptions raised by the piece table buffer."""


class PieceTableError(Exception):
    """Base class for recoverable buffer errors."""


class OutOfBoundsError(PieceTableError, IndexError):
    """A position lies outside [0, document length]."""

    def __init__(self, position: int, length: int):
        super().__init__(f"position {position} out of bounds for length {length}")
        self.position = position
        self.length = length


class InvalidRangeError(PieceTableError, ValueError):
    """A range is malformed or extends past the end of the document."""


class EncodingError(PieceTableError, ValueError):
    """Text cannot be represented as a sequence of code points."""


class InvariantViolation(AssertionError):
    """Internal piece table state is inconsistent.

    Only raised when debug checking is enabled.
    """
