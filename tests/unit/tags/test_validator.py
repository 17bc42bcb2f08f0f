"""Tests for tag validation and TagSet operations."""

import pytest

from autotag.core.exceptions import ValidationError
from autotag.tags import (
    TagSet,
    canonicalize,
    is_valid,
    merge,
    partition,
    strip_marker,
    to_tag_set,
)


class TestIsValid:
    """Tests for the canonical tag shape check."""

    @pytest.mark.parametrize(
        "value",
        ["python", "#python", "machine-learning", "#2024", "日本語", "#café", "  #padded  ", "-"],
    )
    def test_accepts_letters_digits_and_hyphens(self, value):
        """Letters, digits and hyphens with an optional marker are valid."""
        assert is_valid(value)

    @pytest.mark.parametrize(
        "value",
        ["", "#", "two words", "snake_case", "##double", "a/b", "tag!", "#tag#", None],
    )
    def test_rejects_everything_else(self, value):
        """Spaces, underscores, punctuation and empty values are invalid."""
        assert not is_valid(value)

    def test_converts_non_strings(self):
        """Numbers are validated through their string form."""
        assert is_valid(42)


class TestPartition:
    """Tests for splitting candidates into valid and invalid."""

    def test_preserves_order(self):
        """Both lists keep the input order."""
        valid, invalid = partition(["b", "bad tag", "#a", "x_y"])

        assert valid == ["b", "#a"]
        assert invalid == ["bad tag", "x_y"]

    def test_skips_none(self):
        """None entries appear in neither list."""
        assert partition([None, "ok"]) == (["ok"], [])


class TestCanonicalize:
    """Tests for canonicalize."""

    def test_adds_marker(self):
        assert canonicalize("python") == "#python"

    def test_keeps_existing_marker_and_trims(self):
        assert canonicalize("  #python ") == "#python"

    def test_result_is_always_valid(self):
        """Every canonicalized value passes validation."""
        for value in ["a", "#b", "c-d", "ünïcode", "123"]:
            assert is_valid(canonicalize(value))

    def test_raises_for_invalid(self):
        """Invalid input raises ValidationError naming the value."""
        with pytest.raises(ValidationError, match="Invalid tag format"):
            canonicalize("not valid")

    def test_raises_for_none(self):
        with pytest.raises(ValidationError):
            canonicalize(None)


class TestStripMarker:
    """Tests for strip_marker."""

    def test_strips_single_marker(self):
        assert strip_marker("#python") == "python"

    def test_leaves_bare_tag(self):
        assert strip_marker("python") == "python"


class TestTagSet:
    """Tests for TagSet."""

    def test_sorted_and_deduplicated(self):
        """Construction sorts and removes duplicates."""
        tags = TagSet(["#b", "#a", "#b"])

        assert tags.to_list() == ["#a", "#b"]
        assert len(tags) == 2

    def test_union_returns_new_set(self):
        """Union leaves both operands unchanged."""
        a = TagSet(["#a"])
        b = TagSet(["#b"])

        combined = a.union(b)

        assert combined.to_list() == ["#a", "#b"]
        assert a.to_list() == ["#a"]
        assert b.to_list() == ["#b"]

    def test_difference(self):
        assert TagSet(["#a", "#b"]).difference(["#b"]).to_list() == ["#a"]

    def test_limit(self):
        """Limit keeps the first tags in sorted order."""
        assert TagSet(["#c", "#a", "#b"]).limit(2).to_list() == ["#a", "#b"]

    def test_limit_negative_is_empty(self):
        assert len(TagSet(["#a"]).limit(-1)) == 0

    def test_bare_strips_markers(self):
        assert TagSet(["#x", "#y"]).bare() == ["x", "y"]

    def test_equality_and_hash(self):
        """Equal sets compare and hash the same."""
        assert TagSet(["#a", "#b"]) == TagSet(["#b", "#a"])
        assert hash(TagSet(["#a", "#b"])) == hash(TagSet(["#b", "#a"]))
        assert TagSet(["#a"]) != ["#a"]

    def test_contains(self):
        assert "#a" in TagSet(["#a"])
        assert "a" not in TagSet(["#a"])


class TestToTagSet:
    """Tests for to_tag_set."""

    def test_canonicalizes_and_drops_invalid(self):
        tags = to_tag_set(["python", "#code", "bad tag", None, "python"])

        assert tags.to_list() == ["#code", "#python"]


class TestMerge:
    """Tests for merge."""

    def test_union_of_both_sides(self):
        assert merge(["a"], ["#b", "a"]).to_list() == ["#a", "#b"]

    def test_discards_invalid_on_either_side(self):
        assert merge(["ok", "not ok"], ["x_y", "#fine"]).to_list() == ["#fine", "#ok"]

    def test_idempotent(self):
        """Merging the same incoming tags twice changes nothing."""
        a, b = ["x", "y"], ["y", "z"]

        assert merge(merge(a, b), b) == merge(a, b)

    def test_commutative(self):
        a, b = ["x", "#y"], ["z", "y"]

        assert merge(a, b) == merge(b, a)

    def test_unicode_tags(self):
        assert merge(["日本語"], ["中文"]).to_list() == sorted(["#日本語", "#中文"])
