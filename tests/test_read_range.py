"""Tests for reading ranges out of a buffer."""

import pytest

from piecework import TextBuffer, TextRange


def make_buffer():
    buffer = TextBuffer("the lazy dog", coalesce=False)
    buffer.insert(4, "very ")
    buffer.insert(0, "See ")
    return buffer


@pytest.mark.parametrize("text", ["", "x", "hello\nworld\n", "tabs\tand ☃ snow"])
def test_round_trip(text):
    buffer = TextBuffer(text)
    assert buffer.text() == text
    assert str(buffer.read()) == text
    assert len(buffer) == len(text)


def test_read_whole_document_by_default():
    buffer = make_buffer()
    assert str(buffer.read()) == "See the very lazy dog"


def test_read_every_subrange():
    buffer = make_buffer()
    text = buffer.text()
    for start in range(len(text) + 1):
        for end in range(start, len(text) + 1):
            assert str(buffer.read(start, end)) == text[start:end]


def test_read_is_restartable():
    buffer = make_buffer()
    window = buffer.read(4, 12)
    assert isinstance(window, TextRange)
    assert "".join(window) == "the very"
    assert "".join(window) == "the very"
    assert len(window) == 8


def test_chunks_follow_pieces():
    buffer = make_buffer()
    assert list(buffer.read().chunks()) == ["See ", "the ", "very ", "lazy dog"]
    assert list(buffer.read(2, 10).chunks()) == ["e ", "the ", "ve"]


def test_empty_range():
    buffer = make_buffer()
    window = buffer.read(5, 5)
    assert str(window) == ""
    assert list(window) == []
    assert len(window) == 0


def test_read_of_empty_document():
    buffer = TextBuffer()
    assert str(buffer.read()) == ""
    assert list(buffer.read(0, 0).chunks()) == []


def test_range_read_before_edit_keeps_old_content():
    buffer = make_buffer()
    window = buffer.read()
    buffer.delete(0, 4)
    buffer.insert(0, "Pet ")
    assert str(window) == "See the very lazy dog"
    assert buffer.text() == "Pet the very lazy dog"


def test_read_does_not_mutate():
    buffer = make_buffer()
    before = buffer.pieces()
    added = len(buffer.stores.added)
    str(buffer.read(3, 9))
    assert buffer.pieces() == before
    assert len(buffer.stores.added) == added
