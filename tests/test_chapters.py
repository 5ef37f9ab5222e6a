"""Tests for chapter extraction, TOC mapping and start detection."""

import pytest

from readall.models.chunk import Chapter, TocEntry
from readall.models.enums import ChunkKind
from readall.services.chapters import (
    DEFAULT_CHAPTER_TITLE,
    build_chapters,
    detect_start_index,
    extract_chapters,
    find_active_chapter,
    map_toc_to_chapters,
    remap_chapters,
    truncate_title,
)
from readall.services.reconciler import EnrichedItem, merge_enrichment
from readall.services.tokenizer import tokenize


def chapters_for(text):
    return extract_chapters(text, tokenize(text))


# =============================================================================
# Heading extraction
# =============================================================================


class TestExtractChapters:
    def test_headings_map_to_chunks(self):
        text = (
            "Preface\n"
            "Some intro text.\n"
            "Chapter 1\n"
            "It begins.\n"
            "Chapter 2: The Road\n"
            "More text."
        )
        assert chapters_for(text) == [
            Chapter("Preface", 0),
            Chapter("Chapter 1", 4),
            Chapter("Chapter 2: The Road", 8),
        ]

    def test_heading_chunk_starts_with_heading_word(self):
        text = "Intro words here.\n\nCHAPTER ONE\nThe story."
        chunks = tokenize(text)
        chapters = extract_chapters(text, chunks)

        assert chapters == [Chapter("CHAPTER ONE", 3)]
        assert chunks[chapters[0].chunk_index].text == "CHAPTER"

    @pytest.mark.parametrize(
        "heading",
        ["Part IV", "Book 3", "Epilogue", "Introduction", "Foreword", "Prologue"],
    )
    def test_heading_keywords(self, heading):
        chapters = chapters_for(f"Front.\n{heading}\nBody text.")
        assert chapters == [Chapter(heading, 1)]

    def test_no_headings(self):
        assert chapters_for("Just a paragraph of text.") == [Chapter(DEFAULT_CHAPTER_TITLE, 0)]

    def test_empty_text(self):
        assert chapters_for("") == [Chapter(DEFAULT_CHAPTER_TITLE, 0)]

    def test_heading_must_start_a_line(self):
        assert chapters_for("As noted in chapter 3 above.") == [Chapter(DEFAULT_CHAPTER_TITLE, 0)]

    def test_long_title_truncated(self):
        heading = "Chapter One " + "x" * 60
        chapters = chapters_for(f"{heading}\nBody.")

        assert chapters[0].title == heading[:50] + "..."

    def test_strictly_increasing(self):
        text = "\n".join(f"Chapter {n}\nSome words for chapter {n}." for n in range(1, 8))
        chapters = chapters_for(text)

        assert len(chapters) == 7
        indices = [chapter.chunk_index for chapter in chapters]
        assert indices == sorted(set(indices))


class TestTruncateTitle:
    def test_short(self):
        assert truncate_title("  Chapter 1  ") == "Chapter 1"

    def test_exactly_fifty(self):
        assert truncate_title("a" * 50) == "a" * 50

    def test_long(self):
        assert truncate_title("a" * 51) == "a" * 50 + "..."


# =============================================================================
# TOC mapping
# =============================================================================


class TestMapToc:
    @pytest.fixture
    def chunks(self):
        # alpha(0) beta(6) gamma(11) delta(17)
        return tokenize("alpha beta gamma delta")

    def test_sorted_and_deduplicated(self, chunks):
        toc = [TocEntry("Two", 11), TocEntry("One", 0), TocEntry("Dup", 7)]
        assert map_toc_to_chapters(toc, chunks) == [Chapter("One", 0), Chapter("Two", 2)]

    def test_offset_past_end_maps_to_start(self, chunks):
        assert map_toc_to_chapters([TocEntry("End", 100)], chunks) == [Chapter("End", 0)]

    def test_blank_title(self, chunks):
        assert map_toc_to_chapters([TocEntry("  ", 6)], chunks) == [Chapter("Untitled", 1)]

    def test_build_prefers_toc(self, chunks):
        text = "alpha beta gamma delta"
        chapters = build_chapters(text, chunks, [TocEntry("Gamma", 11)])
        assert chapters == [Chapter("Gamma", 2)]

    def test_build_falls_back_to_headings(self):
        text = "Chapter 1\nBody."
        assert build_chapters(text, tokenize(text), []) == [Chapter("Chapter 1", 0)]


# =============================================================================
# Start detection
# =============================================================================


class TestDetectStartIndex:
    def test_first_chapter_wins_over_introduction(self):
        text = "Title Page\nIntroduction\nSome words.\nChapter 1\nStory."
        assert detect_start_index(text, tokenize(text)) == 5

    def test_prologue(self):
        text = "Copyright 2020\nPrologue\nThe night."
        assert detect_start_index(text, tokenize(text)) == 2

    def test_introduction(self):
        text = "Dedication.\nIntroduction: why\nText."
        assert detect_start_index(text, tokenize(text)) == 1

    @pytest.mark.parametrize("heading", ["Chapter One", "PART I", "chapter 1.", "Part 1: Dawn"])
    def test_first_chapter_forms(self, heading):
        text = f"Front matter.\n{heading}\nBody."
        assert detect_start_index(text, tokenize(text)) == 2

    @pytest.mark.parametrize(
        "text",
        [
            "No structure at all.",
            "Front.\nChapter 12\nBody.",
            "Front.\nChapter Two\nBody.",
            "",
        ],
    )
    def test_no_start_marker(self, text):
        assert detect_start_index(text, tokenize(text)) == 0


# =============================================================================
# Active chapter
# =============================================================================


class TestFindActiveChapter:
    @pytest.fixture
    def chapters(self):
        return [Chapter("A", 0), Chapter("B", 10), Chapter("C", 20)]

    @pytest.mark.parametrize(
        "index,expected",
        [(0, 0), (9, 0), (10, 1), (19, 1), (20, 2), (500, 2)],
    )
    def test_active(self, chapters, index, expected):
        assert find_active_chapter(chapters, index) == expected

    def test_before_first_chapter(self):
        assert find_active_chapter([Chapter("A", 5)], 2) is None

    def test_no_chapters(self):
        assert find_active_chapter([], 3) is None


class TestRemapChapters:
    TEXT = "Prologue\nThe quick brown fox jumps over the lazy dog.\nChapter 1\nIt begins here."

    def test_markers_follow_merged_chunks(self):
        chunks = tokenize(self.TEXT)
        chapters = extract_chapters(self.TEXT, chunks)
        assert chapters == [Chapter("Prologue", 0), Chapter("Chapter 1", 10)]

        merged = merge_enrichment(
            self.TEXT,
            chunks,
            [
                EnrichedItem("The quick brown fox jumps", ChunkKind.PHRASE),
                EnrichedItem("over the lazy dog.", ChunkKind.PHRASE),
            ],
        )
        remapped = remap_chapters(chapters, chunks, merged)

        assert remapped == [Chapter("Prologue", 0), Chapter("Chapter 1", 2)]
        assert merged[remapped[1].chunk_index].text == "Chapter"
        assert all(c.chunk_index < len(merged) for c in remapped)

    def test_marker_inside_phrase_moves_to_next_chunk(self):
        text = "Alpha beta gamma delta"
        chunks = tokenize(text)
        merged = merge_enrichment(text, chunks, [EnrichedItem("Alpha beta", ChunkKind.PHRASE)])

        assert remap_chapters([Chapter("Beta", 1)], chunks, merged) == [Chapter("Beta", 1)]
        assert merged[1].text == "gamma"

    def test_marker_inside_last_chunk(self):
        text = "Alpha beta"
        chunks = tokenize(text)
        merged = merge_enrichment(text, chunks, [EnrichedItem("Alpha beta", ChunkKind.PHRASE)])

        assert remap_chapters([Chapter("Beta", 1)], chunks, merged) == [Chapter("Beta", 0)]

    def test_collapses_markers_on_same_chunk(self):
        text = "One two three"
        chunks = tokenize(text)
        merged = merge_enrichment(text, chunks, [EnrichedItem("One two three", ChunkKind.PHRASE)])

        remapped = remap_chapters([Chapter("A", 0), Chapter("B", 1)], chunks, merged)
        assert remapped == [Chapter("A", 0)]
