"""Tests for podcast_digest.catalog.paging."""

from podcast_digest.catalog import dedupe_by_id, page_slice
from podcast_digest.catalog.paging import overfetch_size
from podcast_digest.models import Podcast


def _pods(*ids):
    return [Podcast(id=i, title=f"t{i}") for i in ids]


class TestDedupe:
    def test_keeps_first_occurrence(self) -> None:
        items = [Podcast(id="a", title="first"), Podcast(id="b"), Podcast(id="a", title="second")]
        out = dedupe_by_id(items)
        assert [p.id for p in out] == ["a", "b"]
        assert out[0].title == "first"


class TestPageSlice:
    def test_second_page(self) -> None:
        items = _pods(*"abcdefgh")
        assert [p.id for p in page_slice(items, 2, 3)] == ["d", "e", "f"]

    def test_past_the_end_is_empty(self) -> None:
        assert page_slice(_pods("a", "b"), 3, 2) == []

    def test_page_below_one_is_first_page(self) -> None:
        assert [p.id for p in page_slice(_pods("a", "b", "c"), 0, 2)] == ["a", "b"]

    def test_overfetch_size(self) -> None:
        assert overfetch_size(3, 8) == 24
        assert overfetch_size(0, 0) == 1
