"""Tag usage statistics."""

from __future__ import annotations

import csv
import io
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from ..tags.validator import strip_marker, to_tag_set

HEALTHY = "healthy"
LOW_USE = "low-use"
ORPHANED = "orphaned"

CSV_HEADERS = ["Tag Name", "Frequency", "Status", "Notes"]


def tag_status(frequency: int) -> str:
    """Classify a tag by how many documents use it."""
    if frequency >= 3:
        return HEALTHY
    if frequency == 2:
        return LOW_USE
    return ORPHANED


@dataclass
class TagStats:
    """Usage of a single tag."""

    name: str
    """Tag without the marker."""

    frequency: int
    status: str
    documents: list[str] = field(default_factory=list)


@dataclass
class AnalyticsReport:
    """Vault-wide tag usage summary."""

    total_unique_tags: int = 0
    tagged_documents: int = 0
    untagged_documents: int = 0
    average_tags_per_document: float = 0.0
    """Mean over tagged documents, rounded half-up to one decimal."""

    tags: list[TagStats] = field(default_factory=list)
    untagged: list[str] = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def orphaned_count(self) -> int:
        return sum(1 for t in self.tags if t.status == ORPHANED)

    def documents_with_tag(self, name: str) -> list[str]:
        """Documents carrying a tag, given with or without the marker."""
        bare = strip_marker(name)
        for stats in self.tags:
            if stats.name == bare:
                return list(stats.documents)
        return []

    def to_csv(self) -> str:
        """Export per-tag statistics, every cell quoted."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for stats in self.tags:
            writer.writerow([stats.name, stats.frequency, stats.status, "; ".join(stats.documents)])
        return buffer.getvalue()


class TagAnalytics:
    """Computes an AnalyticsReport from per-document tag sets."""

    def compute(self, documents: Iterable[tuple[str, Iterable[str]]]) -> AnalyticsReport:
        """Summarize tag usage.

        Args:
            documents: (document id, tags) pairs. Invalid tags are ignored.

        Returns:
            AnalyticsReport with tags sorted by descending frequency, then name.
        """
        tag_documents: dict[str, list[str]] = {}
        untagged: list[str] = []
        total_assignments = 0
        tagged = 0

        for doc_id, tags in documents:
            canonical = to_tag_set(tags)
            if not canonical:
                untagged.append(doc_id)
                continue
            tagged += 1
            total_assignments += len(canonical)
            for tag in canonical.bare():
                tag_documents.setdefault(tag, []).append(doc_id)

        stats = [
            TagStats(name=name, frequency=len(docs), status=tag_status(len(docs)), documents=docs)
            for name, docs in tag_documents.items()
        ]
        stats.sort(key=lambda s: (-s.frequency, s.name))

        average = math.floor(total_assignments / tagged * 10 + 0.5) / 10 if tagged else 0.0
        return AnalyticsReport(
            total_unique_tags=len(stats),
            tagged_documents=tagged,
            untagged_documents=len(untagged),
            average_tags_per_document=average,
            tags=stats,
            untagged=untagged,
        )
