"""Line-preserving partition of a markdown document's frontmatter.

Only the ``tags`` entry is ever rewritten. Every other line of the block,
the delimiters and the body are kept exactly as read, including their
line endings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

DELIMITER = "---"
TAGS_KEY = "tags"

_TAGS_KEY_PATTERN = re.compile(rf"^{TAGS_KEY}\s*:")


class FrontmatterState(Enum):
    """Shape of a document's leading metadata block."""

    NO_BLOCK = "no_block"
    BLOCK_NO_TAGS_KEY = "block_no_tags_key"
    BLOCK_WITH_TAGS_KEY = "block_with_tags_key"


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def _is_delimiter(line: str) -> bool:
    return _strip_eol(line).rstrip() == DELIMITER


def _is_blank(line: str) -> bool:
    return not _strip_eol(line).strip()


def _continues_tags_entry(line: str) -> bool:
    """Indented lines and bare sequence items belong to the preceding tags key."""
    content = _strip_eol(line)
    if not content.strip():
        return False
    return content[0] in " \t" or content.startswith("-")


def _tags_entry_end(metadata: list[str], start: int) -> int:
    """Index just past the tags entry that begins at ``start``.

    Blank lines belong to the entry only when a continuation line follows them.
    """
    end = start + 1
    i = end
    while i < len(metadata):
        if _continues_tags_entry(metadata[i]):
            i += 1
            end = i
        elif _is_blank(metadata[i]):
            i += 1
        else:
            break
    return end


@dataclass(frozen=True)
class FrontmatterDocument:
    """A document split into frontmatter parts and body.

    Attributes:
        state: Which of the three block shapes was found.
        newline: Line ending used when new lines are written ("\\n" or "\\r\\n").
        opening: Opening delimiter line with its line ending ("" if no block).
        before_tags: Metadata lines preceding the tags entry.
        tags_lines: The tags key line and its continuation lines.
        after_tags: Metadata lines following the tags entry.
        closing: Closing delimiter line with its line ending ("" if no block).
        body: Everything after the block.
    """

    state: FrontmatterState
    newline: str
    opening: str
    before_tags: tuple[str, ...]
    tags_lines: tuple[str, ...]
    after_tags: tuple[str, ...]
    closing: str
    body: str

    @classmethod
    def parse(cls, text: str) -> FrontmatterDocument:
        """Partition document text.

        A block exists only when the very first line is ``---`` and a later
        line is ``---`` as well. Anything else is body.

        Args:
            text: Full document text.

        Returns:
            FrontmatterDocument whose ``render()`` reproduces ``text`` exactly.
        """
        lines = text.splitlines(keepends=True)
        first = lines[0] if lines else ""
        newline = "\r\n" if first.endswith("\r\n") else "\n"

        if not lines or not _is_delimiter(first) or not first.endswith(("\n", "\r")):
            return cls(FrontmatterState.NO_BLOCK, newline, "", (), (), (), "", text)

        closing_index = next(
            (i for i in range(1, len(lines)) if _is_delimiter(lines[i])),
            None,
        )
        if closing_index is None:
            return cls(FrontmatterState.NO_BLOCK, newline, "", (), (), (), "", text)

        metadata = lines[1:closing_index]
        body = "".join(lines[closing_index + 1 :])

        tags_start = next(
            (i for i, line in enumerate(metadata) if _TAGS_KEY_PATTERN.match(line)),
            None,
        )
        if tags_start is None:
            return cls(
                FrontmatterState.BLOCK_NO_TAGS_KEY,
                newline,
                first,
                tuple(metadata),
                (),
                (),
                lines[closing_index],
                body,
            )

        tags_end = _tags_entry_end(metadata, tags_start)

        return cls(
            FrontmatterState.BLOCK_WITH_TAGS_KEY,
            newline,
            first,
            tuple(metadata[:tags_start]),
            tuple(metadata[tags_start:tags_end]),
            tuple(metadata[tags_end:]),
            lines[closing_index],
            body,
        )

    @property
    def has_block(self) -> bool:
        return self.state is not FrontmatterState.NO_BLOCK

    def format_tags_entry(self, bare_tags: list[str]) -> tuple[str, ...]:
        """Render a tags entry as a block sequence, or an empty key."""
        nl = self.newline
        return (f"{TAGS_KEY}:{nl}", *(f"  - {tag}{nl}" for tag in bare_tags))

    def with_tags(self, bare_tags: list[str]) -> FrontmatterDocument:
        """Return a copy whose tags entry holds ``bare_tags``.

        An empty list yields a present-but-empty ``tags:`` key. A missing
        block is synthesized; a missing key is appended to the block.

        Args:
            bare_tags: Tags without the marker, in output order.
        """
        entry = self.format_tags_entry(bare_tags)
        nl = self.newline

        if self.state is FrontmatterState.NO_BLOCK:
            return replace(
                self,
                state=FrontmatterState.BLOCK_WITH_TAGS_KEY,
                opening=f"{DELIMITER}{nl}",
                tags_lines=entry,
                closing=f"{DELIMITER}{nl}",
            )

        before = self.before_tags
        if self.state is FrontmatterState.BLOCK_NO_TAGS_KEY:
            # Empty-mapping placeholder cannot coexist with a real key
            before = tuple(line for line in before if _strip_eol(line).strip() != "{}")
            if before and not before[-1].endswith(("\n", "\r")):
                before = (*before[:-1], before[-1] + nl)

        return replace(
            self,
            state=FrontmatterState.BLOCK_WITH_TAGS_KEY,
            before_tags=before,
            tags_lines=entry,
        )

    def render(self) -> str:
        """Reassemble the document text."""
        return "".join(
            (
                self.opening,
                *self.before_tags,
                *self.tags_lines,
                *self.after_tags,
                self.closing,
                self.body,
            )
        )
