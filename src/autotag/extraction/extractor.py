"""Multi-stage salvage of tag data from raw model replies.

Models rarely answer in exactly the requested shape. The extractor tries,
in order: a fenced JSON block, the outermost brace-delimited object, the
same two again with newlines collapsed, marker-prefixed tokens, and finally
quoted words or list bullets. The first stage that yields data wins.
"""

from __future__ import annotations

import json
import re
from typing import Any

from loguru import logger

from ..core.exceptions import ExtractionError
from ..core.types import ParsedResponse
from ..tags.validator import MARKER, TagSet, canonicalize, partition

_FENCED_OBJECT_PATTERN = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)
_BRACED_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)

# Marker followed by letters, digits or hyphens; not preceded by a word char or marker
_MARKER_TOKEN_PATTERN = re.compile(r"(?<![\w#])#((?:[^\W_]|-)+)")

_QUOTED_TOKEN_PATTERN = re.compile(r"[\"']#?((?:[^\W_]|-){1,40})[\"']")
_BULLET_ITEM_PATTERN = re.compile(r"^\s*(?:[-*+•]|\d+[.)])\s+#?((?:[^\W_]|-)+)\s*$", re.MULTILINE)

# Precedence of field names, highest first
MATCHED_FIELDS = ("matchedTags", "matchedExistingTags", "existingTags")
SUGGESTED_FIELDS = ("newTags", "suggestedTags", "generatedTags", "tags")

_MALFORMED_PREFIXES = re.compile(
    r"^(?:tag:|matchedExistingTags-|suggestedTags-|matchedTags-|newTags-|tags-)",
    re.IGNORECASE,
)


def sanitize_tag(candidate: Any) -> str:
    """Strip malformed prefixes models sometimes glue onto tags.

    Args:
        candidate: Raw candidate value.

    Returns:
        Trimmed candidate without known junk prefixes. The marker is kept.
    """
    text = str(candidate).strip()
    cleaned = _MALFORMED_PREFIXES.sub("", text).strip()
    if cleaned != text:
        logger.debug(f"Sanitized tag: {text!r} -> {cleaned!r}")
    return cleaned


def find_marker_tokens(text: str) -> list[str]:
    """Return marker-prefixed tokens in order of appearance.

    Example:
        >>> find_marker_tokens("check out #foo and #bar-baz today")
        ['#foo', '#bar-baz']
    """
    return [f"{MARKER}{token}" for token in _MARKER_TOKEN_PATTERN.findall(text)]


def _to_tag_set(candidates: list[Any]) -> TagSet:
    """Sanitize and validate candidates; invalid entries are dropped."""
    valid, invalid = partition(sanitize_tag(c) for c in candidates if c is not None)
    if invalid:
        logger.debug(f"Dropped {len(invalid)} invalid tag candidates: {invalid!r}")
    return TagSet(canonicalize(t) for t in valid)


def _field_values(value: Any) -> list[Any] | None:
    """Coerce a field value into a candidate list, or None if unusable."""
    if isinstance(value, list):
        return [v for v in value if isinstance(v, (str, int, float))]
    if isinstance(value, str):
        return [part for part in value.split(",") if part.strip()]
    return None


def _first_field(data: dict[str, Any], names: tuple[str, ...]) -> list[Any] | None:
    for name in names:
        if name in data:
            values = _field_values(data[name])
            if values is not None:
                return values
    return None


class ResponseExtractor:
    """Turns free-form model output into a ParsedResponse.

    Example:
        extractor = ResponseExtractor()
        parsed = extractor.extract('{"matchedTags": ["#a"], "newTags": ["b"]}')
        parsed.matched_tags  # TagSet(['#a'])
        parsed.suggested_tags  # TagSet(['#b'])
    """

    def extract(self, raw_text: str) -> ParsedResponse:
        """Extract matched and suggested tags from a reply.

        Args:
            raw_text: Assistant text exactly as returned by the provider.

        Returns:
            ParsedResponse with both tag sets populated (possibly empty).

        Raises:
            ExtractionError: If no stage finds any tag data.
        """
        text = raw_text or ""

        parsed = self._extract_structured(text)
        if parsed is None:
            collapsed = re.sub(r"[\r\n]+", " ", text)
            if collapsed != text:
                parsed = self._extract_structured(collapsed)
                if parsed is not None:
                    logger.debug("Structured tags found after collapsing newlines")
        if parsed is not None:
            matched, suggested = parsed
            return ParsedResponse(
                matched_tags=_to_tag_set(matched),
                suggested_tags=_to_tag_set(suggested),
                raw_text=text,
            )

        tokens = find_marker_tokens(text)
        if tokens:
            logger.debug(f"No structured data; using {len(tokens)} marker tokens")
            return self._heuristic_result(tokens, text)

        candidates = _QUOTED_TOKEN_PATTERN.findall(text) or _BULLET_ITEM_PATTERN.findall(text)
        if candidates:
            logger.debug(f"No structured data; using {len(candidates)} quoted or bulleted items")
            return self._heuristic_result(candidates, text)

        preview = text[:80] + "..." if len(text) > 80 else text
        raise ExtractionError(f"No tag data found in model response: {preview!r}")

    def _heuristic_result(self, candidates: list[str], text: str) -> ParsedResponse:
        suggested = _to_tag_set(candidates)
        if not suggested:
            raise ExtractionError("Model response contained no valid tags")
        return ParsedResponse(suggested_tags=suggested, raw_text=text)

    def _extract_structured(self, text: str) -> tuple[list[Any], list[Any]] | None:
        """Try the fenced block, then the outermost braces.

        Returns:
            (matched, suggested) candidate lists, or None if no usable object.
        """
        for pattern in (_FENCED_OBJECT_PATTERN, _BRACED_OBJECT_PATTERN):
            match = pattern.search(text)
            if not match:
                continue
            body = match.group(1) if pattern.groups else match.group(0)
            fields = self._normalize(self._load_object(body))
            if fields is not None:
                return fields
        return None

    @staticmethod
    def _load_object(body: str) -> dict[str, Any] | None:
        try:
            data = json.loads(body)
        except json.JSONDecodeError:
            return None
        return data if isinstance(data, dict) else None

    @staticmethod
    def _normalize(data: dict[str, Any] | None) -> tuple[list[Any], list[Any]] | None:
        """Map alternate field names onto (matched, suggested)."""
        if data is None:
            return None
        matched = _first_field(data, MATCHED_FIELDS)
        suggested = _first_field(data, SUGGESTED_FIELDS)
        if matched is None and suggested is None:
            return None
        return matched or [], suggested or []
