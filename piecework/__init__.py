"""Piecework - A piece table text buffer for editors."""

from .buffer import TextBuffer
from .cursor import Cursor, CursorPosition
from .errors import (
    EncodingError,
    InvalidRangeError,
    InvariantViolation,
    OutOfBoundsError,
    PieceTableError,
)
from .piece import Origin, Piece
from .snapshot import BufferSnapshot, TextRange

__all__ = [
    'TextBuffer',
    'Cursor',
    'CursorPosition',
    'Piece',
    'Origin',
    'TextRange',
    'BufferSnapshot',
    'PieceTableError',
    'OutOfBoundsError',
    'InvalidRangeError',
    'EncodingError',
    'InvariantViolation',
]
