"""Randomized edits checked against a plain string."""

import random

import pytest

from piecework import TextBuffer

ALPHABET = "abcxyz \n☃é"


def random_text(rng, max_length=6):
    return "".join(rng.choice(ALPHABET) for _ in range(rng.randint(0, max_length)))


def apply_random_edit(rng, buffer, reference):
    if reference and rng.random() < 0.45:
        position = rng.randint(0, len(reference))
        length = rng.randint(0, min(8, len(reference) - position))
        buffer.delete(position, length)
        return reference[:position] + reference[position + length:]
    position = rng.randint(0, len(reference))
    text = random_text(rng)
    buffer.insert(position, text)
    return reference[:position] + text + reference[position:]


@pytest.mark.parametrize("seed", [1, 2, 3])
@pytest.mark.parametrize("coalesce", [True, False])
def test_agrees_with_string_model(seed, coalesce):
    rng = random.Random(seed)
    reference = random_text(rng, 40)
    buffer = TextBuffer(reference, coalesce=coalesce, debug=True)
    for _ in range(600):
        reference = apply_random_edit(rng, buffer, reference)
        assert buffer.text() == reference
        assert len(buffer) == len(reference)
        assert sum(piece.length for piece in buffer.pieces()) == len(reference)


def test_random_windows_agree_with_string_model():
    rng = random.Random(42)
    reference = "0123456789" * 5
    buffer = TextBuffer(reference, debug=True)
    for _ in range(300):
        reference = apply_random_edit(rng, buffer, reference)
        start = rng.randint(0, len(reference))
        end = rng.randint(start, len(reference))
        assert str(buffer.read(start, end)) == reference[start:end]
        assert "".join(buffer.read(start, end)) == reference[start:end]


def test_many_small_edits():
    rng = random.Random(7)
    buffer = TextBuffer("x" * 1000, coalesce=False)
    reference = "x" * 1000
    for i in range(3000):
        position = rng.randint(0, len(reference))
        buffer.insert(position, str(i % 10))
        reference = reference[:position] + str(i % 10) + reference[position:]
    assert buffer.text() == reference
    assert buffer.piece_count > 1000
    buffer.check_invariants()
