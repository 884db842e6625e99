from collections import deque
from dataclasses import dataclass
from typing import Optional

from .constants import BufferConstants
from .piece import Piece


@dataclass(frozen=True)
class UndoEntry:
    """One splice of the piece list.

    Pieces and stores are immutable, so replaying `removed` in place of
    `inserted` restores the earlier document exactly.
    """
    index: int
    removed: tuple[Piece, ...]
    inserted: tuple[Piece, ...]

    def absorb(self, later: "UndoEntry") -> Optional["UndoEntry"]:
        """Fold a later typing extension of one of our pieces into this entry.

        Returns the combined entry, or None when `later` only grows a piece
        this entry put in place. Undoing the result removes the whole run
        of typing in one step.
        """
        if len(later.removed) != 1 or len(later.inserted) != 1:
            return None
        # Only insertions start a typing run
        if sum(p.length for p in self.inserted) <= sum(p.length for p in self.removed):
            return None
        grown, longer = later.removed[0], later.inserted[0]
        if (longer.origin, longer.start) != (grown.origin, grown.start) or longer.length <= grown.length:
            return None
        offset = later.index - self.index
        if not 0 <= offset < len(self.inserted) or self.inserted[offset] != grown:
            return None
        inserted = self.inserted[:offset] + (longer,) + self.inserted[offset + 1:]
        return UndoEntry(self.index, self.removed, inserted)


class UndoManager:
    """Undo and redo stacks of piece list splices.

    `undo` and `redo` call back into the buffer with the entry to revert or
    replay; the manager never touches pieces itself.
    """

    def __init__(self, max_entries: int = BufferConstants.UNDO_MAX_ENTRIES):
        # Oldest entries fall off the left once the cap is reached
        self._undo_stack: deque[UndoEntry] = deque(maxlen=max_entries)
        self._redo_stack: list[UndoEntry] = []

    def clear(self):
        self._undo_stack.clear()
        self._redo_stack.clear()

    def push(self, entry: UndoEntry, merge: bool = False):
        """Record a splice just applied to the buffer.

        With `merge`, an entry that only extends a piece placed by the
        previous entry is folded into it. Redo history is dropped either way.
        """
        if merge and self._undo_stack and not self._redo_stack:
            combined = self._undo_stack[-1].absorb(entry)
            if combined is not None:
                self._undo_stack[-1] = combined
                return
        self._undo_stack.append(entry)
        self._redo_stack.clear()

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def undo(self, buffer) -> bool:
        if not self._undo_stack:
            return False
        entry = self._undo_stack.pop()
        buffer._revert(entry)
        self._redo_stack.append(entry)
        return True

    def redo(self, buffer) -> bool:
        if not self._redo_stack:
            return False
        entry = self._redo_stack.pop()
        buffer._reapply(entry)
        self._undo_stack.append(entry)
        return True
