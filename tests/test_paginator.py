"""Unit tests for the IR word/page types and the paginator.

WHY: Pagination decides which words share the screen. A merge measured
against the wrong word, or a dropped/duplicated token, puts captions out of
step with speech for the rest of the video.

HOW: Tests check the partition and threshold properties on hand-built
word sequences, including the chain-merge case where a page spans more
than the threshold, plus the WordCaption validation rules.
"""

import math

import pytest

from caption_timeline.core.ir import Page, WordCaption
from caption_timeline.core.paginator import paginate


def _words(*starts):
    return tuple(WordCaption(start_ms=s, text="w{}".format(i)) for i, s in enumerate(starts))


def _flatten(pages):
    return tuple(token for page in pages for token in page.tokens)


class TestWordCaption:

    def test_from_dict_reads_camel_case(self):
        word = WordCaption.from_dict(
            {"text": " hi", "startMs": 120, "endMs": 300, "timestampMs": 200, "confidence": 0.9}
        )
        assert word == WordCaption(start_ms=120.0, text=" hi", end_ms=300.0,
                                   timestamp_ms=200.0, confidence=0.9)

    def test_optional_fields_default_to_none(self):
        word = WordCaption.from_dict({"text": "a", "startMs": 0})
        assert word.end_ms is None
        assert word.confidence is None
        assert word.to_dict() == {"text": "a", "startMs": 0.0}

    @pytest.mark.parametrize("start", [-1, -0.001, math.nan, math.inf])
    def test_rejects_out_of_range_start(self, start):
        with pytest.raises(ValueError):
            WordCaption(start_ms=start, text="x")


class TestPaginate:

    def test_empty_input_gives_no_pages(self):
        assert paginate([], 300) == ()

    def test_single_word_single_page(self):
        """Scenario D: one word, any threshold -> one one-token page."""
        word = WordCaption(start_ms=0, text="x")
        assert paginate([word], 1) == (Page(start_ms=0, tokens=(word,)),)

    def test_scenario_a_split_on_long_gap(self):
        a, b, c = (WordCaption(0, "a"), WordCaption(250, "b"), WordCaption(900, "c"))
        pages = paginate([a, b, c], 300)
        assert pages == (
            Page(start_ms=0, tokens=(a, b)),
            Page(start_ms=900, tokens=(c,)),
        )

    def test_gap_equal_to_threshold_merges(self):
        pages = paginate(_words(0, 300), 300)
        assert len(pages) == 1

    def test_gap_just_over_threshold_splits(self):
        pages = paginate(_words(0, 300.5), 300)
        assert [p.start_ms for p in pages] == [0, 300.5]

    def test_chain_merge_spans_beyond_threshold(self):
        """Gaps are measured from the last added word, not the page start."""
        pages = paginate(_words(0, 250, 500, 750, 1000), 300)
        assert len(pages) == 1
        assert pages[0].tokens[-1].start_ms - pages[0].start_ms == 1000

    def test_threshold_property(self):
        starts = (0, 100, 700, 800, 1500, 1550, 1600, 3000)
        words = _words(*starts)
        pages = paginate(words, 300)
        # consecutive words share a page iff their gap is within the threshold
        page_of = {}
        for n, page in enumerate(pages):
            for token in page.tokens:
                page_of[token] = n
        for prev, nxt in zip(words, words[1:]):
            same = page_of[prev] == page_of[nxt]
            assert same == (nxt.start_ms - prev.start_ms <= 300)

    def test_partition_preserves_every_word_in_order(self, sample_words):
        for threshold in (1, 100, 600, 5000):
            pages = paginate(sample_words, threshold)
            assert _flatten(pages) == sample_words
            assert all(p.tokens for p in pages)
            assert all(p.start_ms == p.tokens[0].start_ms for p in pages)

    def test_page_starts_non_decreasing(self, sample_words):
        starts = [p.start_ms for p in paginate(sample_words, 300)]
        assert starts == sorted(starts)

    def test_duplicate_words_are_kept(self):
        word = WordCaption(start_ms=10, text="again")
        pages = paginate([word, word], 300)
        assert _flatten(pages) == (word, word)

    def test_sample_with_default_threshold(self, sample_words):
        pages = paginate(sample_words, 600)
        assert [p.text for p in pages] == ["Hey there", " welcome back everyone"]
        assert pages[1].end_ms == 2800

    def test_accepts_generator_input(self, sample_words):
        pages = paginate((w for w in sample_words), 600)
        assert len(pages) == 2

    @pytest.mark.parametrize("threshold", [0, -5, math.nan, math.inf])
    def test_rejects_bad_threshold(self, threshold):
        with pytest.raises(ValueError):
            paginate(_words(0), threshold)
