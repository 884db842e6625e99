"""Autosave module for swap file management.

Provides vim-style swap files holding the materialized text of a buffer, so
unsaved edits survive a crash of the editing session.
"""

import logging
import os
from typing import Optional

from .buffer import TextBuffer
from .constants import BufferConstants
from .fileio import write_atomically

logger = logging.getLogger(__name__)


def get_swap_path(filename: str) -> str:
    """Compute swap file path for a given document.

    For /path/to/document.txt returns /path/to/.document.txt.swp

    Args:
        filename: Path to the original document file.

    Returns:
        Path to the swap file.
    """
    dir_name = os.path.dirname(filename) or '.'
    base_name = os.path.basename(filename)
    swap_name = (
        BufferConstants.AUTOSAVE_SWAP_PREFIX
        + base_name
        + BufferConstants.AUTOSAVE_SWAP_SUFFIX
    )
    return os.path.join(dir_name, swap_name)


def write_swap_file(filename: str, buffer: TextBuffer) -> bool:
    """Write the buffer's text to the document's swap file atomically.

    Returns:
        True if write succeeded, False otherwise.
    """
    swap_path = get_swap_path(filename)
    try:
        write_atomically(swap_path, buffer.text(), suffix='.swp.tmp')
    except (OSError, UnicodeEncodeError) as e:
        logger.warning(f"Could not write swap file {swap_path}: {e}")
        return False
    return True


def delete_swap_file(filename: str) -> None:
    """Delete swap file if it exists."""
    swap_path = get_swap_path(filename)
    try:
        os.remove(swap_path)
    except FileNotFoundError:
        pass
    except OSError as e:
        # Best effort deletion
        logger.warning(f"Could not delete swap file {swap_path}: {e}")


def swap_file_exists(filename: str) -> bool:
    return os.path.exists(get_swap_path(filename))


def read_swap_file(filename: str) -> Optional[str]:
    """Read swap file content.

    Returns:
        Content of the swap file, or None if it doesn't exist or is unreadable.
    """
    swap_path = get_swap_path(filename)
    try:
        with open(swap_path, 'r', encoding=BufferConstants.DEFAULT_ENCODING, newline='') as f:
            return f.read()
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read swap file {swap_path}: {e}")
        return None
