"""Tests for the deterministic chunker and offset helpers."""

import pytest

from readall.models.chunk import Chunk
from readall.models.enums import ChunkKind
from readall.services.tokenizer import (
    find_chunk_at_or_after,
    get_tokenizer_version,
    tokenize,
    validate_chunks,
)


def texts(chunks):
    return [chunk.text for chunk in chunks]


# =============================================================================
# Chunking
# =============================================================================


class TestTokenize:
    """Tests for tokenize()."""

    def test_simple_sentence(self):
        chunks = tokenize("Hello, world!")
        assert [(c.text, c.start, c.end) for c in chunks] == [
            ("Hello,", 0, 6),
            ("world!", 7, 13),
        ]

    @pytest.mark.parametrize("text", ["", "   ", "\n\n\t"])
    def test_empty_input(self, text):
        assert tokenize(text) == []

    def test_all_chunks_are_words(self):
        chunks = tokenize("One two three.")
        assert all(chunk.kind is ChunkKind.WORD for chunk in chunks)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("don't stop", ["don't", "stop"]),
            ("it’s fine", ["it’s", "fine"]),
            ("a well-known fact.", ["a", "well-known", "fact."]),
            ("Wait... what?!", ["Wait...", "what?!"]),
            ("one; two: three", ["one;", "two:", "three"]),
        ],
    )
    def test_attached_characters(self, text, expected):
        assert texts(tokenize(text)) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("(hello)", ["(hello)"]),
            ("Wait—what?", ["Wait", "—what?"]),
            ("cost $5", ["cost", "$5"]),
            ("\U0001F600 ok", ["\U0001F600", "ok"]),
        ],
    )
    def test_symbol_runs(self, text, expected):
        assert texts(tokenize(text)) == expected

    def test_digit_groups_split_at_comma(self):
        assert texts(tokenize("1,000 people")) == ["1,", "000", "people"]

    def test_acronym_splits_into_letter_pairs(self):
        assert texts(tokenize("the U.S.A. today")) == ["the", "U.", "S.", "A.", "today"]

    def test_offsets_address_source_text(self):
        text = "  First line,\n\nsecond   line.\tThird ’quoted’ word!  "
        chunks = tokenize(text)

        assert chunks
        for chunk in chunks:
            assert text[chunk.start:chunk.end] == chunk.text

    def test_chunks_are_ordered_and_disjoint(self):
        chunks = tokenize("alpha beta, gamma. delta! epsilon")
        for previous, current in zip(chunks, chunks[1:]):
            assert previous.end <= current.start

    def test_every_non_whitespace_character_is_covered(self):
        text = "Mixed (content) with--dashes & symbols... ok?"
        covered = "".join(chunk.text for chunk in tokenize(text))
        assert covered == "".join(text.split())

    def test_focal_index_is_precomputed(self):
        chunks = tokenize("I reading")
        assert [chunk.focal_index for chunk in chunks] == [0, 2]

    def test_output_validates(self):
        text = "Chapter 1\n\nIt was a dark, stormy night; the rain fell."
        validate_chunks(text, tokenize(text))


# =============================================================================
# Offset lookup
# =============================================================================


class TestFindChunkAtOrAfter:
    """Tests for the offset-to-index binary search."""

    @pytest.fixture
    def chunks(self):
        # alpha(0) beta(6) gamma(11)
        return tokenize("alpha beta gamma")

    @pytest.mark.parametrize(
        "offset,expected",
        [
            (0, 0),
            (1, 1),
            (6, 1),
            (7, 2),
            (11, 2),
            (12, None),
            (100, None),
        ],
    )
    def test_lookup(self, chunks, offset, expected):
        assert find_chunk_at_or_after(chunks, offset) == expected

    def test_empty_sequence(self):
        assert find_chunk_at_or_after([], 0) is None


# =============================================================================
# Validation
# =============================================================================


class TestValidateChunks:
    """Tests for validate_chunks()."""

    def test_offset_mismatch(self):
        with pytest.raises(ValueError, match="char_offset mismatch"):
            validate_chunks("hello world", [Chunk("world", 0, 5)])

    def test_overlap(self):
        text = "hello world"
        with pytest.raises(ValueError, match="overlaps"):
            validate_chunks(text, [Chunk("hello", 0, 5), Chunk("lo", 3, 5)])

    def test_focal_index_out_of_bounds(self):
        with pytest.raises(ValueError, match="focal_index"):
            validate_chunks("hi", [Chunk("hi", 0, 2, focal_index=2)])

    def test_empty_span(self):
        with pytest.raises(ValueError, match="invalid offsets"):
            validate_chunks("hi", [Chunk("", 1, 1)])

    def test_gaps_are_allowed(self):
        text = "one two three"
        validate_chunks(text, [Chunk("one", 0, 3), Chunk("three", 8, 13)])


def test_tokenizer_version():
    assert get_tokenizer_version() == "1.0.0"
