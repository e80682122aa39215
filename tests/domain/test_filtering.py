"""Tests for client-side title filtering."""

from __future__ import annotations

from hnstories.domain.filtering import ListMode, filter_by_title


class TestFilterByTitle:
    def test_substring_match(self, make_item) -> None:
        react, vue = make_item("1", "React"), make_item("2", "Vue")
        assert filter_by_title([react, vue], "re") == [react]

    def test_empty_term_returns_all(self, make_item) -> None:
        items = [make_item("1", "React"), make_item("2", "Vue")]
        assert filter_by_title(items, "") == items

    def test_case_insensitive(self, make_item) -> None:
        react = make_item("1", "react")
        assert filter_by_title([react], "REACT") == [react]

    def test_unicode_casefold(self, make_item) -> None:
        street = make_item("1", "Die Straße")
        assert filter_by_title([street], "STRASSE") == [street]

    def test_no_match(self, make_item) -> None:
        assert filter_by_title([make_item("1", "React")], "angular") == []

    def test_preserves_order(self, make_item) -> None:
        items = [make_item("2", "Redux"), make_item("1", "React"), make_item("3", "Vue")]
        assert [i.id for i in filter_by_title(items, "re")] == ["2", "1"]

    def test_does_not_mutate_input(self, make_item) -> None:
        items = (make_item("1", "React"), make_item("2", "Vue"))
        filter_by_title(items, "vue")
        assert len(items) == 2


class TestListMode:
    def test_members(self) -> None:
        assert {m.value for m in ListMode} == {"server", "client"}
