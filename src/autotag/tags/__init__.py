"""Tag validation, canonical sets and caching."""

from .cache import TagCache
from .validator import (
    MARKER,
    TagSet,
    canonicalize,
    is_valid,
    merge,
    partition,
    strip_marker,
    to_tag_set,
)

__all__ = [
    "MARKER",
    "TagCache",
    "TagSet",
    "canonicalize",
    "is_valid",
    "merge",
    "partition",
    "strip_marker",
    "to_tag_set",
]
