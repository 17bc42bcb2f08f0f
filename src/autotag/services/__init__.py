"""Workflow services for autotag."""

from .batch import BatchProcessor, BatchProgress
from .tagging import TaggingService

__all__ = [
    "BatchProcessor",
    "BatchProgress",
    "TaggingService",
]
