"""Tag co-occurrence graph and usage analytics."""

from .analytics import AnalyticsReport, TagAnalytics, TagStats, tag_status
from .cooccurrence import CooccurrenceGraph, CooccurrenceGraphBuilder, GraphRefresher

__all__ = [
    "AnalyticsReport",
    "TagAnalytics",
    "TagStats",
    "tag_status",
    "CooccurrenceGraph",
    "CooccurrenceGraphBuilder",
    "GraphRefresher",
]
