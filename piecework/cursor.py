"""Cursor and paragraph helpers for input collaborators.

Paragraphs are the runs of text between newline characters. These helpers
scan the buffer chunk by chunk, so they cost O(document length) per call.
"""

from dataclasses import dataclass
from typing import Optional, Union

from .buffer import TextBuffer, as_text
from .errors import OutOfBoundsError


@dataclass
class CursorPosition:
    paragraph_index: int = 0
    character_index: int = 0

    def __lt__(self, other):
        if self.paragraph_index != other.paragraph_index:
            return self.paragraph_index < other.paragraph_index
        return self.character_index < other.character_index

    def __ge__(self, other):
        return not self < other


def paragraph_count(buffer: TextBuffer) -> int:
    return 1 + sum(chunk.count("\n") for chunk in buffer.read().chunks())


def paragraph_bounds(buffer: TextBuffer, paragraph_index: int) -> tuple[int, int]:
    """Return the [start, end) offsets of a paragraph, excluding its newline."""
    if paragraph_index < 0:
        raise OutOfBoundsError(paragraph_index, paragraph_count(buffer))
    line = 0
    start = 0 if paragraph_index == 0 else None
    offset = 0
    for chunk in buffer.read().chunks():
        pos = chunk.find("\n")
        while pos != -1:
            if start is not None:
                return start, offset + pos
            line += 1
            if line == paragraph_index:
                start = offset + pos + 1
            pos = chunk.find("\n", pos + 1)
        offset += len(chunk)
    if start is None:
        raise OutOfBoundsError(paragraph_index, line + 1)
    return start, offset


def paragraph_text(buffer: TextBuffer, paragraph_index: int) -> str:
    start, end = paragraph_bounds(buffer, paragraph_index)
    return str(buffer.read(start, end))


def offset_to_position(buffer: TextBuffer, offset: int) -> CursorPosition:
    """Convert a logical offset to a paragraph/character position."""
    if offset < 0 or offset > len(buffer):
        raise OutOfBoundsError(offset, len(buffer))
    paragraph = 0
    line_start = 0
    consumed = 0
    for chunk in buffer.read(0, offset).chunks():
        newlines = chunk.count("\n")
        if newlines:
            paragraph += newlines
            line_start = consumed + chunk.rindex("\n") + 1
        consumed += len(chunk)
    return CursorPosition(paragraph, offset - line_start)


def position_to_offset(buffer: TextBuffer, position: CursorPosition) -> int:
    start, end = paragraph_bounds(buffer, position.paragraph_index)
    if not 0 <= position.character_index <= end - start:
        raise OutOfBoundsError(position.character_index, end - start)
    return start + position.character_index


class Cursor:
    """An insertion point in a buffer that the input layer moves and types at.

    Vertical movement remembers the column it started from, so passing
    through a short paragraph does not lose the original column.
    """

    def __init__(self, buffer: TextBuffer, offset: int = 0):
        if offset < 0 or offset > len(buffer):
            raise OutOfBoundsError(offset, len(buffer))
        self.buffer = buffer
        self.offset = offset
        self.desired_column: Optional[int] = None

    @property
    def position(self) -> CursorPosition:
        return offset_to_position(self.buffer, self.offset)

    def move_to(self, offset: int):
        if offset < 0 or offset > len(self.buffer):
            raise OutOfBoundsError(offset, len(self.buffer))
        self.offset = offset
        self.desired_column = None

    def right_char(self):
        if self.offset < len(self.buffer):
            self.offset += 1
        self.desired_column = None

    def left_char(self):
        if self.offset > 0:
            self.offset -= 1
        self.desired_column = None

    def move_beginning_of_line(self):
        start, _ = paragraph_bounds(self.buffer, self.position.paragraph_index)
        self.offset = start
        self.desired_column = None

    def move_end_of_line(self):
        _, end = paragraph_bounds(self.buffer, self.position.paragraph_index)
        self.offset = end
        self.desired_column = None

    def _move_vertically(self, delta: int):
        position = self.position
        target = position.paragraph_index + delta
        if target < 0 or target >= paragraph_count(self.buffer):
            return
        if self.desired_column is None:
            self.desired_column = position.character_index
        start, end = paragraph_bounds(self.buffer, target)
        self.offset = start + min(self.desired_column, end - start)

    def move_up(self):
        self._move_vertically(-1)

    def move_down(self):
        self._move_vertically(1)

    def insert_text(self, text: Union[str, bytes]):
        """Insert at the cursor and leave the cursor after the new text."""
        text = as_text(text)
        self.buffer.insert(self.offset, text)
        self.offset += len(text)
        self.desired_column = None

    def backspace(self):
        if self.offset > 0:
            self.buffer.delete(self.offset - 1, 1)
            self.offset -= 1
        self.desired_column = None

    def delete_char(self):
        if self.offset < len(self.buffer):
            self.buffer.delete(self.offset, 1)
        self.desired_column = None
