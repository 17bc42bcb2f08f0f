"""Custom exceptions for autotag."""

from enum import Enum


class AutotagError(Exception):
    """Base exception for all autotag errors."""

    pass


class ConfigError(AutotagError):
    """Credential, endpoint or model is missing or invalid."""

    pass


class RequestErrorKind(Enum):
    """Category of an outbound request failure."""

    HTTP_STATUS = "http_status"
    NETWORK = "network"
    TIMEOUT = "timeout"
    MALFORMED_RESPONSE = "malformed_response"
    PROVIDER_ERROR = "provider_error"
    CANCELLED = "cancelled"


class RequestError(AutotagError):
    """Outbound LLM request failed."""

    def __init__(
        self,
        message: str,
        kind: RequestErrorKind = RequestErrorKind.NETWORK,
        status_code: int | None = None,
    ):
        """Initialize exception with failure category.

        Args:
            message: Human-readable message, extracted from the provider when possible.
            kind: Failure category.
            status_code: HTTP status for HTTP_STATUS failures.
        """
        self.kind = kind
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_timeout(self) -> bool:
        """Whether the request hit its wall-clock timeout."""
        return self.kind is RequestErrorKind.TIMEOUT


class ExtractionError(AutotagError):
    """No structured or heuristic tag data found in a model reply."""

    pass


class ValidationError(AutotagError):
    """A candidate string does not have the canonical tag shape."""

    def __init__(self, value: str):
        """Initialize exception with the offending value.

        Args:
            value: The string that failed validation.
        """
        self.value = value
        super().__init__(
            f"Invalid tag format: {value!r} (tags may contain only letters, "
            "numbers and hyphens, with an optional leading #)"
        )


class ReconciliationError(AutotagError):
    """Reading or writing a document's frontmatter failed."""

    pass
