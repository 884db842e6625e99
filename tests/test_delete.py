"""Tests for deleting ranges from a piece table buffer."""

from piecework import Origin, Piece, TextBuffer


def make_four_piece_buffer():
    """Buffer reading "abcdefXYZ123uvw" from four pieces."""
    buffer = TextBuffer("abcdef", coalesce=False, debug=True)
    buffer.insert(6, "XYZ")
    buffer.insert(9, "123")
    buffer.insert(12, "uvw")
    assert buffer.text() == "abcdefXYZ123uvw"
    assert buffer.piece_count == 4
    return buffer


def test_delete_inside_one_piece_splits_it():
    buffer = TextBuffer("hello world", debug=True)
    buffer.delete(2, 3)
    assert buffer.text() == "he world"
    assert buffer.pieces() == (
        Piece(Origin.ORIGINAL, 0, 2),
        Piece(Origin.ORIGINAL, 5, 6),
    )


def test_delete_from_start_narrows_piece():
    buffer = TextBuffer("hello", debug=True)
    buffer.delete(0, 2)
    assert buffer.pieces() == (Piece(Origin.ORIGINAL, 2, 3),)
    assert buffer.text() == "llo"


def test_delete_to_end_narrows_piece():
    buffer = TextBuffer("hello", debug=True)
    buffer.delete(3, 2)
    assert buffer.pieces() == (Piece(Origin.ORIGINAL, 0, 3),)
    assert buffer.text() == "hel"


def test_delete_spanning_several_pieces():
    buffer = make_four_piece_buffer()
    buffer.delete(4, 9)
    assert buffer.text() == "abcdvw"
    # Whole middle pieces dropped, exactly the two boundary pieces narrowed
    assert buffer.pieces() == (
        Piece(Origin.ORIGINAL, 0, 4),
        Piece(Origin.ADDED, 7, 2),
    )
    assert len(buffer) == 6


def test_delete_exactly_one_whole_piece():
    buffer = make_four_piece_buffer()
    buffer.delete(6, 3)
    assert buffer.text() == "abcdef123uvw"
    assert buffer.pieces() == (
        Piece(Origin.ORIGINAL, 0, 6),
        Piece(Origin.ADDED, 3, 3),
        Piece(Origin.ADDED, 6, 3),
    )


def test_delete_ending_on_boundary():
    buffer = make_four_piece_buffer()
    buffer.delete(4, 5)
    assert buffer.text() == "abcd123uvw"
    assert buffer.pieces() == (
        Piece(Origin.ORIGINAL, 0, 4),
        Piece(Origin.ADDED, 3, 3),
        Piece(Origin.ADDED, 6, 3),
    )


def test_delete_everything():
    buffer = make_four_piece_buffer()
    buffer.delete(0, len(buffer))
    assert buffer.text() == ""
    assert buffer.piece_count == 0
    assert len(buffer) == 0
    buffer.insert(0, "fresh")
    assert buffer.text() == "fresh"


def test_delete_zero_length_is_noop():
    buffer = make_four_piece_buffer()
    before = buffer.pieces()
    for position in range(len(buffer) + 1):
        buffer.delete(position, 0)
    assert buffer.pieces() == before
    assert buffer.text() == "abcdefXYZ123uvw"


def test_delete_never_leaves_empty_pieces():
    buffer = make_four_piece_buffer()
    buffer.delete(5, 1)
    buffer.delete(5, 3)
    assert all(piece.length > 0 for piece in buffer.pieces())
    assert buffer.text() == "abcde123uvw"


def test_delete_does_not_touch_stores():
    buffer = make_four_piece_buffer()
    buffer.delete(0, len(buffer))
    assert len(buffer.stores.original) == 6
    assert len(buffer.stores.added) == 9
