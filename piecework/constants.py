"""Constants and configuration for the piecework buffer."""

class BufferConstants:
    """Central configuration constants for the buffer and its collaborators."""

    # Text
    DEFAULT_ENCODING = "utf-8"  # Encoding used for load/save when none is given

    # Piece list
    TREAP_SEED = 0x5EED  # Seed for node priorities, keeps piece lists reproducible

    # Undo
    UNDO_MAX_ENTRIES = 500  # Undo history cap

    # Debugging
    DEBUG_ENV_VAR = "PIECEWORK_DEBUG"  # Non-empty value enables invariant checks

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Autosave
    AUTOSAVE_SWAP_PREFIX = "."  # Swap file is hidden next to the document
    AUTOSAVE_SWAP_SUFFIX = ".swp"
