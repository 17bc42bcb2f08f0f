"""Canonical tag format rules and set operations.

A tag is an optional leading ``#`` marker followed by one or more Unicode
letters, Unicode digits or hyphens. Callers always see the marker; the
frontmatter ``tags`` sequence stores tags without it.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Iterator

from ..core.exceptions import ValidationError

MARKER = "#"

# [^\W_] is any Unicode letter or digit (\w minus underscore)
_TAG_PATTERN = re.compile(r"#?(?:[^\W_]|-)+")


class TagSet:
    """Immutable, sorted, de-duplicated collection of canonical tags.

    Merges never mutate a TagSet; they return a new one.

    Example:
        >>> TagSet(["#b", "#a", "#b"])
        TagSet(['#a', '#b'])
    """

    __slots__ = ("_tags",)

    def __init__(self, tags: Iterable[str] = ()):
        self._tags: tuple[str, ...] = tuple(sorted(set(tags)))

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, tag: object) -> bool:
        return tag in self._tags

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TagSet):
            return self._tags == other._tags
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._tags)

    def __repr__(self) -> str:
        return f"TagSet({list(self._tags)!r})"

    def union(self, other: Iterable[str]) -> TagSet:
        """Return a new TagSet containing tags from both sets."""
        return TagSet([*self._tags, *other])

    def difference(self, other: Iterable[str]) -> TagSet:
        """Return a new TagSet without the tags in ``other``."""
        excluded = set(other)
        return TagSet(t for t in self._tags if t not in excluded)

    def limit(self, count: int) -> TagSet:
        """Return the first ``count`` tags in sorted order."""
        return TagSet(self._tags[: max(count, 0)])

    def to_list(self) -> list[str]:
        """Tags in sorted order, with the marker."""
        return list(self._tags)

    def bare(self) -> list[str]:
        """Tags in sorted order, without the marker (persisted form)."""
        return [strip_marker(t) for t in self._tags]


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def is_valid(value: Any) -> bool:
    """Check whether a value has the canonical tag shape.

    Args:
        value: Candidate tag; non-strings are converted with ``str()``.

    Returns:
        True if the trimmed value is ``#?`` followed by letters, digits or hyphens.
    """
    text = _as_text(value)
    if text is None:
        return False
    return _TAG_PATTERN.fullmatch(text.strip()) is not None


def partition(tags: Iterable[Any]) -> tuple[list[str], list[str]]:
    """Split candidates into valid and invalid lists, preserving order.

    Args:
        tags: Candidate tags.

    Returns:
        Tuple of (valid, invalid) string lists.
    """
    valid: list[str] = []
    invalid: list[str] = []
    for tag in tags:
        text = _as_text(tag)
        if text is None:
            continue
        if is_valid(text):
            valid.append(text)
        else:
            invalid.append(text)
    return valid, invalid


def canonicalize(value: Any) -> str:
    """Trim, add the marker if absent, and validate.

    Args:
        value: Candidate tag.

    Returns:
        Canonical tag with a leading ``#``.

    Raises:
        ValidationError: If the result is not a valid tag.
    """
    text = _as_text(value)
    if text is None:
        raise ValidationError(repr(value))
    trimmed = text.strip()
    tag = trimmed if trimmed.startswith(MARKER) else f"{MARKER}{trimmed}"
    if not is_valid(tag):
        raise ValidationError(text)
    return tag


def strip_marker(tag: str) -> str:
    """Remove a single leading marker, if present."""
    tag = tag.strip()
    return tag[len(MARKER):] if tag.startswith(MARKER) else tag


def to_tag_set(tags: Iterable[Any]) -> TagSet:
    """Build a TagSet from raw candidates, silently dropping invalid ones."""
    valid, _ = partition(tags)
    return TagSet(canonicalize(t) for t in valid)


def merge(existing: Iterable[Any], incoming: Iterable[Any]) -> TagSet:
    """Union two tag collections into a new canonical TagSet.

    Invalid entries on either side are discarded. The union is commutative
    and idempotent: ``merge(merge(a, b), b) == merge(a, b)``.

    Args:
        existing: Tags already present.
        incoming: Tags to add.

    Returns:
        New sorted, de-duplicated TagSet.
    """
    return to_tag_set(existing).union(to_tag_set(incoming))
