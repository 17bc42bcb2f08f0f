"""Parsing utilities for indexing document metadata.

Provides functions to parse YAML frontmatter and read the tags it
declares.
"""

import re
from dataclasses import dataclass
from typing import Any

import yaml

from ..tags.validator import TagSet, to_tag_set


@dataclass
class FrontmatterResult:
    """Result from parsing YAML frontmatter.

    Attributes:
        data: Parsed YAML data as dictionary (empty if no frontmatter).
        content: Document content after frontmatter is removed.
        has_frontmatter: Whether frontmatter was found.
    """

    data: dict[str, Any]
    content: str
    has_frontmatter: bool


# Matches: ---\n<yaml content>\n---\n (CRLF tolerated)
_FRONTMATTER_PATTERN = re.compile(
    r"^---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|$)",
    re.DOTALL,
)


def parse_frontmatter(content: str) -> FrontmatterResult:
    """Parse YAML frontmatter from markdown content.

    Args:
        content: Full markdown document content.

    Returns:
        FrontmatterResult with parsed data and remaining content.

    Example:
        >>> result = parse_frontmatter('''---
        ... title: My Doc
        ... tags: [python, code]
        ... ---
        ... # Hello World
        ... ''')
        >>> result.data
        {'title': 'My Doc', 'tags': ['python', 'code']}
    """
    match = _FRONTMATTER_PATTERN.match(content)
    if not match:
        return FrontmatterResult(data={}, content=content, has_frontmatter=False)

    yaml_text = match.group(1) or ""
    remaining_content = content[match.end() :]

    try:
        data = yaml.safe_load(yaml_text)
        if data is None:
            data = {}
        elif not isinstance(data, dict):
            data = {"_raw": data}
    except yaml.YAMLError:
        # Invalid YAML - treat as no frontmatter
        return FrontmatterResult(data={}, content=content, has_frontmatter=False)

    return FrontmatterResult(data=data, content=remaining_content, has_frontmatter=True)


def extract_tags_from_field(value: Any) -> list[str]:
    """Extract tags from a frontmatter field value.

    Handles various YAML formats for tags:
    - List: ["tag1", "tag2"]
    - String: "tag1, tag2" or "#tag1 #tag2"
    - Single value: "tag1"

    Args:
        value: Field value from YAML frontmatter.

    Returns:
        List of extracted tag strings, as written.
    """
    if value is None:
        return []

    if isinstance(value, list):
        tags = []
        for item in value:
            if item is not None and not isinstance(item, (list, dict)):
                tags.append(str(item).strip())
        return [t for t in tags if t]

    if isinstance(value, str):
        if "," in value:
            return [t.strip() for t in value.split(",") if t.strip()]
        return value.split()

    return [str(value).strip()] if value else []


def tags_from_text(content: str) -> TagSet:
    """Read the canonical tag set declared in a document's frontmatter.

    Invalid entries are ignored.
    """
    result = parse_frontmatter(content)
    return to_tag_set(extract_tags_from_field(result.data.get("tags")))
