"""Plain-text load and save for text buffers.

The buffer itself never touches the filesystem; these helpers read a file
into a new buffer's original store and write the materialized document back.
"""

import codecs
import errno
import logging
import os
import tempfile
from typing import Optional

from .buffer import TextBuffer
from .constants import BufferConstants
from .errors import EncodingError

logger = logging.getLogger(__name__)


def _codec_name(encoding: Optional[str]) -> str:
    """Resolve an encoding name, raising EncodingError if Python has no such codec."""
    encoding = encoding or BufferConstants.DEFAULT_ENCODING
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise EncodingError(f"unknown encoding {encoding!r}") from e
    return encoding


def load_file(filename: str, encoding: Optional[str] = None, **buffer_options) -> TextBuffer:
    """Load a file into a new buffer.

    A file that does not exist yet yields an empty buffer. Newlines are kept
    exactly as stored so that saving reproduces the file byte for byte.

    Raises:
        EncodingError: The encoding is unknown or the file is not valid in it.
        OSError: The file exists but cannot be read.
    """
    encoding = _codec_name(encoding)
    try:
        with open(filename, 'r', encoding=encoding, newline='') as f:
            content = f.read()
    except FileNotFoundError:
        # New file - start with empty document
        logger.debug(f"{filename} does not exist, starting empty")
        content = ""
    except UnicodeDecodeError as e:
        raise EncodingError(f"{filename} is not valid {encoding}: {e}") from e
    logger.debug(f"Loaded {len(content)} characters from {filename}")
    return TextBuffer(content, **buffer_options)


def write_atomically(filename: str, content: str, encoding: Optional[str] = None,
                     prefix: str = BufferConstants.ATOMIC_SAVE_PREFIX,
                     suffix: str = BufferConstants.ATOMIC_SAVE_SUFFIX) -> None:
    """Write content via a temporary file in the same directory and rename it.

    The temporary file is removed if anything goes wrong; the exception is
    re-raised.
    """
    encoding = _codec_name(encoding)
    # Same directory keeps the rename on one filesystem
    dir_name = os.path.dirname(filename) or '.'
    base_name = os.path.basename(filename)
    temp_filename = None
    try:
        with tempfile.NamedTemporaryFile(mode='w', encoding=encoding, newline='',
                                         dir=dir_name, prefix=prefix + base_name + '.',
                                         suffix=suffix, delete=False) as temp_file:
            temp_filename = temp_file.name
            temp_file.write(content)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_filename, filename)
    except BaseException:
        if temp_filename is not None and os.path.exists(temp_filename):
            try:
                os.remove(temp_filename)
            except OSError:
                pass
        raise


def save_file(buffer: TextBuffer, filename: str, encoding: Optional[str] = None) -> bool:
    """Save the buffer's current document to a file atomically.

    Returns:
        True if save succeeded, False otherwise
    """
    try:
        write_atomically(filename, buffer.text(), encoding)
    except PermissionError:
        logger.warning(f"Permission denied saving {filename}")
        return False
    except (UnicodeEncodeError, EncodingError) as e:
        logger.warning(f"Cannot encode document for {filename}: {e}")
        return False
    except OSError as e:
        if e.errno == errno.ENOSPC:
            logger.warning(f"No space left on device saving {filename}")
        else:
            logger.warning(f"Cannot save to {filename}: {e}")
        return False
    logger.debug(f"Saved {len(buffer)} characters to {filename}")
    return True
