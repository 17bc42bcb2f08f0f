"""Abstract base class for tagging providers."""

from abc import ABC, abstractmethod
from typing import Any

from ..core.types import ConnectionTestOutcome, ParsedResponse
from .prompts import TaggingMode


class TaggingProvider(ABC):
    """Abstract base class for LLM tagging providers."""

    @abstractmethod
    def format_request(self, prompt: str, language: str | None = None) -> dict[str, Any]:
        """Build the JSON request body for a prompt.

        Args:
            prompt: User prompt text.
            language: Optional language code.

        Returns:
            Request body ready to be JSON-encoded.
        """
        pass

    @abstractmethod
    def get_headers(self) -> dict[str, str]:
        """Get HTTP headers, including credentials.

        Returns:
            Header mapping.
        """
        pass

    @abstractmethod
    def validate_config(self) -> str | None:
        """Check credentials, endpoint and model.

        Returns:
            Error message for the first problem found, or None if valid.
        """
        pass

    @abstractmethod
    def parse_response(self, raw: Any) -> ParsedResponse:
        """Extract tags from a decoded provider response.

        Args:
            raw: Decoded JSON response body.

        Returns:
            ParsedResponse with matched and suggested tags.
        """
        pass

    @abstractmethod
    async def analyze(
        self,
        content: str,
        candidate_tags: list[str],
        mode: TaggingMode | str,
        max_tags: int,
        language: str | None = None,
    ) -> ParsedResponse:
        """Ask the model for tags describing a document.

        Args:
            content: Document text.
            candidate_tags: Existing or predefined tags the model may choose from.
            mode: Tagging mode.
            max_tags: Maximum tags per returned set.
            language: Optional language code for generated tags.

        Returns:
            ParsedResponse with matched and suggested tags.
        """
        pass

    @abstractmethod
    async def test_connection(self) -> ConnectionTestOutcome:
        """Perform a minimal request to check connectivity.

        Returns:
            Outcome describing success or the failure category. Never raises.
        """
        pass

    @abstractmethod
    async def dispose(self) -> None:
        """Abort in-flight requests and release resources.

        Should be called when the provider is no longer needed.
        """
        pass
