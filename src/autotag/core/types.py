"""Type definitions for autotag."""

from dataclasses import dataclass, field
from enum import Enum

from ..tags.validator import TagSet


@dataclass(frozen=True)
class RequestContext:
    """Validated connection parameters for one provider.

    Rebuilt whenever configuration changes.
    """

    endpoint: str
    api_key: str
    model: str
    temperature: float | None = None
    language: str | None = None


@dataclass(frozen=True)
class ParsedResponse:
    """Tags salvaged from a model reply."""

    matched_tags: TagSet = field(default_factory=TagSet)
    suggested_tags: TagSet = field(default_factory=TagSet)
    raw_text: str = ""

    @property
    def all_tags(self) -> TagSet:
        """Union of matched and suggested tags."""
        return self.matched_tags.union(self.suggested_tags)


@dataclass(frozen=True)
class TagOperationResult:
    """Uniform outcome of a frontmatter operation."""

    success: bool
    message: str
    final_tags: TagSet = field(default_factory=TagSet)


class ConnectionErrorType(Enum):
    """Category reported by a connection test."""

    CONFIG = "config"
    TIMEOUT = "timeout"
    AUTH = "auth"
    NETWORK = "network"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ConnectionTestOutcome:
    """Result of a provider connection test."""

    success: bool
    message: str = ""
    error_type: ConnectionErrorType | None = None


@dataclass
class BatchResult:
    """Tally of a sequential batch run."""

    processed: int = 0
    """Number of documents attempted."""

    success_count: int = 0
    """Number of documents that completed successfully."""

    errors: list[tuple[str, str]] = field(default_factory=list)
    """List of (document, error_message) for failed documents."""

    cancelled: bool = False

    @property
    def success(self) -> bool:
        """Whether every attempted document succeeded."""
        return not self.errors and not self.cancelled
