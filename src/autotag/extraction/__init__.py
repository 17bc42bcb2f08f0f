"""Extraction of tags from model replies."""

from .extractor import ResponseExtractor, find_marker_tokens, sanitize_tag

__all__ = [
    "ResponseExtractor",
    "find_marker_tokens",
    "sanitize_tag",
]
