"""Descriptor-driven adapter for every supported LLM provider."""

from __future__ import annotations

import asyncio
import copy
import re
import time
from collections.abc import Mapping
from typing import Any

import httpx
from loguru import logger

from ..core.config import ProviderConfig
from ..core.exceptions import (
    ConfigError,
    ExtractionError,
    RequestError,
    RequestErrorKind,
)
from ..core.types import (
    ConnectionErrorType,
    ConnectionTestOutcome,
    ParsedResponse,
    RequestContext,
)
from ..extraction.extractor import ResponseExtractor, find_marker_tokens
from ..tags.validator import TagSet, to_tag_set
from .base import TaggingProvider
from .lifecycle import DISPOSED_REASON, RequestLifecycleManager
from .prompts import SYSTEM_PROMPT, TaggingMode, build_tag_prompt
from .providers import (
    SHAPE_DEFAULTS,
    AuthScheme,
    BodyShape,
    PathKey,
    ProviderDescriptor,
    get_descriptor,
)

# Nested objects that carry their own temperature
_TEMPERATURE_CONTAINERS = ("parameters", "textGenerationConfig", "generationConfig")

_PROJECT_PATTERN = re.compile(r"projects/([^/]+)")
_JSON_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)

_AUTH_STATUS_CODES = (401, 403)


class _PathError(Exception):
    pass


def _walk(data: Any, path: tuple[PathKey, ...]) -> Any:
    """Follow string keys into mappings and integer keys into lists."""
    current = data
    for key in path:
        if isinstance(current, Mapping) and isinstance(key, str) and key in current:
            current = current[key]
        elif isinstance(current, list) and (isinstance(key, int) or str(key).isdigit()):
            index = int(key)
            if index >= len(current):
                raise _PathError(f"index {index} out of range")
            current = current[index]
        else:
            raise _PathError(f"missing {key!r}")
    return current


class ProviderAdapter(TaggingProvider):
    """Shapes requests and reads replies for one provider.

    The provider's descriptor, and the model variant within it, are resolved
    once in the constructor. Every request runs under a RequestLifecycleManager
    so ``dispose`` can abort it.

    Example:
        adapter = ProviderAdapter(ProviderConfig(name="openai", api_key="sk-..."))
        parsed = await adapter.analyze(text, ["#python"], TaggingMode.EXISTING, 5)
        await adapter.dispose()
    """

    def __init__(
        self,
        config: ProviderConfig,
        extractor: ResponseExtractor | None = None,
        lifecycle: RequestLifecycleManager | None = None,
        client: httpx.AsyncClient | None = None,
        max_content_length: int = 4000,
    ):
        """Initialize the adapter.

        Args:
            config: Provider settings. Empty endpoint/model fall back to the provider defaults.
            extractor: Response extractor. A default instance is created if None.
            lifecycle: Request tracker. A private instance is created if None.
            client: HTTP client. A client with ``config.timeout`` is created if None.
            max_content_length: Characters of document text sent to the model.

        Raises:
            ConfigError: If the provider name is unknown.
        """
        try:
            self.descriptor: ProviderDescriptor = get_descriptor(config.name)
        except KeyError as e:
            raise ConfigError(e.args[0]) from None

        self.config = config
        self.context = RequestContext(
            endpoint=config.endpoint or self.descriptor.default_endpoint,
            api_key=config.api_key,
            model=config.model or self.descriptor.default_model,
            temperature=config.temperature,
            language=config.language,
        )
        self.body_shape, self.response_path = self.descriptor.resolve(self.context.model)
        self.supplement_inline_tags = (
            config.supplement_inline_tags
            if config.supplement_inline_tags is not None
            else self.descriptor.supplement_inline_tags
        )
        self.max_content_length = max_content_length
        self._extractor = extractor or ResponseExtractor()
        self._lifecycle = lifecycle or RequestLifecycleManager()
        self._client = client or httpx.AsyncClient(timeout=config.timeout)
        self._disposed = False
        logger.debug(
            f"Provider adapter initialized: provider={self.descriptor.name}, "
            f"model={self.context.model!r}, shape={self.body_shape.value}"
        )

    @property
    def lifecycle(self) -> RequestLifecycleManager:
        return self._lifecycle

    # Request shaping

    def format_request(self, prompt: str, language: str | None = None) -> dict[str, Any]:
        """Build the request body for the resolved body shape.

        Language instructions are part of the prompt text, so ``language``
        does not change the body.

        Args:
            prompt: User prompt text.
            language: Optional language code.

        Returns:
            Request body with the temperature override applied.
        """
        body: dict[str, Any] = copy.deepcopy(SHAPE_DEFAULTS[self.body_shape])
        body.update(copy.deepcopy(dict(self.descriptor.body_defaults)))
        model = self.context.model
        shape = self.body_shape

        if shape is BodyShape.CHAT:
            body["model"] = model
            body["messages"] = [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ]
        elif shape is BodyShape.ANTHROPIC:
            body["model"] = model
            body["system"] = SYSTEM_PROMPT
            body["messages"] = [{"role": "user", "content": prompt}]
        elif shape is BodyShape.COHERE:
            body["model"] = model
            body["preamble"] = SYSTEM_PROMPT
            body["message"] = prompt
        elif shape is BodyShape.VERTEX:
            body["instances"] = [
                {
                    "messages": [
                        {"author": "system", "content": SYSTEM_PROMPT},
                        {"author": "user", "content": prompt},
                    ]
                }
            ]
        elif shape is BodyShape.BEDROCK_CLAUDE:
            body["prompt"] = f"\n\nHuman: {SYSTEM_PROMPT}\n\n{prompt}\n\nAssistant: "
        elif shape is BodyShape.BEDROCK_TITAN:
            body["inputText"] = f"{SYSTEM_PROMPT}\n\n{prompt}"
        else:
            body["prompt"] = f"{SYSTEM_PROMPT}\n\n{prompt}"

        self._apply_temperature(body)
        return body

    def _apply_temperature(self, body: dict[str, Any]) -> None:
        """Write the override into every temperature location present in the body."""
        temperature = self.context.temperature
        if temperature is None:
            return
        if "temperature" in body:
            body["temperature"] = temperature
        for key in _TEMPERATURE_CONTAINERS:
            nested = body.get(key)
            if isinstance(nested, dict):
                nested["temperature"] = temperature

    def get_headers(self) -> dict[str, str]:
        """Get request headers for the provider.

        Returns:
            Content type, descriptor headers, credential and project headers.
        """
        headers = {"Content-Type": "application/json", **self.descriptor.headers}
        api_key = self.context.api_key
        if api_key and self.descriptor.auth is AuthScheme.BEARER:
            headers["Authorization"] = f"Bearer {api_key}"
        elif api_key and self.descriptor.auth is AuthScheme.API_KEY_HEADER:
            headers["x-api-key"] = api_key

        if self.descriptor.project_header:
            match = _PROJECT_PATTERN.search(self.context.endpoint)
            headers[self.descriptor.project_header] = match.group(1) if match else ""
        return headers

    def validate_config(self) -> str | None:
        """Check credential, endpoint and model, in that order.

        Returns:
            Provider-specific message for the first problem, or None.
        """
        name = self.descriptor.display_name
        if self.descriptor.requires_api_key and not self.context.api_key:
            return f"API key is required for {name}"
        if not self.context.endpoint:
            return f"Endpoint is required for {name}"
        if not self.context.model:
            return f"Model name is required for {name}"

        try:
            url = httpx.URL(self.context.endpoint)
        except httpx.InvalidURL:
            url = None
        if url is None or url.scheme not in ("http", "https") or not url.host:
            return f"Invalid endpoint URL for {name}: {self.context.endpoint}"
        return None

    # Response handling

    def parse_response(self, raw: Any) -> ParsedResponse:
        """Walk the response path and extract tags from the reply text.

        Args:
            raw: Decoded JSON response body.

        Returns:
            ParsedResponse with matched and suggested tags.

        Raises:
            RequestError: PROVIDER_ERROR if the body carries an error message,
                MALFORMED_RESPONSE if the response path cannot be followed.
            ExtractionError: If the reply text contains no tag data.
        """
        provider_error = self._find_error_message(raw)
        if provider_error:
            raise RequestError(provider_error, kind=RequestErrorKind.PROVIDER_ERROR)

        try:
            text = _walk(raw, self.response_path)
        except _PathError as e:
            raise RequestError(
                f"Malformed {self.descriptor.display_name} response: {e} "
                f"(path {list(self.response_path)})",
                kind=RequestErrorKind.MALFORMED_RESPONSE,
            ) from None
        if not isinstance(text, str):
            raise RequestError(
                f"Malformed {self.descriptor.display_name} response: reply is not text",
                kind=RequestErrorKind.MALFORMED_RESPONSE,
            )

        parsed = self._extractor.extract(text)
        if self.supplement_inline_tags:
            outside_json = _JSON_OBJECT_PATTERN.sub(" ", text)
            inline = to_tag_set(find_marker_tokens(outside_json))
            if inline:
                logger.debug(f"Adding {len(inline)} inline tags from reply text")
                parsed = ParsedResponse(
                    matched_tags=parsed.matched_tags,
                    suggested_tags=parsed.suggested_tags.union(inline),
                    raw_text=parsed.raw_text,
                )
        return parsed

    def _find_error_message(self, raw: Any) -> str | None:
        try:
            message = _walk(raw, self.descriptor.error_path)
        except _PathError:
            return None
        return message if isinstance(message, str) and message else None

    # Transport

    async def send(self, prompt: str, max_retries: int | None = None) -> Any:
        """POST a prompt with retries and return the decoded JSON body.

        Each attempt is tracked by the lifecycle manager and bounded by
        ``config.timeout``. Authentication failures and cancellation are
        never retried.

        Args:
            prompt: User prompt text.
            max_retries: Attempt limit. Defaults to ``config.max_retries``.

        Returns:
            Decoded JSON response.

        Raises:
            RequestError: When every attempt fails.
        """
        body = self.format_request(prompt, self.context.language)
        headers = self.get_headers()
        attempts = max(1, max_retries if max_retries is not None else self.config.max_retries)
        attempt = 0
        while True:
            self._raise_if_disposed()
            attempt += 1
            start_time = time.perf_counter()
            try:
                response = await self._post_once(body, headers)
            except RequestError as e:
                error = e
            else:
                elapsed = (time.perf_counter() - start_time) * 1000
                if response.is_success:
                    logger.debug(f"{self.descriptor.name} responded in {elapsed:.1f}ms")
                    try:
                        return response.json()
                    except ValueError:
                        raise RequestError(
                            "Response body is not valid JSON",
                            kind=RequestErrorKind.MALFORMED_RESPONSE,
                        ) from None
                error = RequestError(
                    self._http_error_message(response),
                    kind=RequestErrorKind.HTTP_STATUS,
                    status_code=response.status_code,
                )

            if error.kind is RequestErrorKind.CANCELLED or error.status_code in _AUTH_STATUS_CODES:
                raise error

            if attempt >= attempts:
                logger.error(f"{self.descriptor.name} request failed after {attempts} attempts: {error}")
                raise error

            delay = self.config.retry_delay * attempt
            logger.warning(
                f"{self.descriptor.name} request failed (attempt {attempt}/{attempts}): "
                f"{error}; retrying in {delay:.1f}s"
            )
            await asyncio.sleep(delay)

    def _raise_if_disposed(self) -> None:
        if self._disposed:
            raise RequestError(
                f"Request cancelled ({DISPOSED_REASON})", kind=RequestErrorKind.CANCELLED
            )

    async def _post_once(self, body: dict[str, Any], headers: dict[str, str]) -> httpx.Response:
        handle = self._lifecycle.begin(self.config.timeout)
        try:
            return await handle.token.run(
                self._client.post(self.context.endpoint, json=body, headers=headers)
            )
        except httpx.TimeoutException as e:
            raise RequestError(f"Request timed out: {e}", kind=RequestErrorKind.TIMEOUT) from e
        except httpx.HTTPError as e:
            raise RequestError(
                f"Network error: {str(e) or type(e).__name__}", kind=RequestErrorKind.NETWORK
            ) from e
        finally:
            handle.cleanup()

    def _http_error_message(self, response: httpx.Response) -> str:
        """Prefer the provider's own error message over the bare status."""
        try:
            data = response.json()
        except ValueError:
            data = None
        if data is not None:
            message = self._find_error_message(data)
            if message is None and isinstance(data, Mapping) and isinstance(data.get("message"), str):
                message = data["message"]
            if message:
                return message
        return f"API error: {response.status_code} {response.reason_phrase}".rstrip()

    # Workflow

    async def analyze(
        self,
        content: str,
        candidate_tags: list[str],
        mode: TaggingMode | str,
        max_tags: int,
        language: str | None = None,
    ) -> ParsedResponse:
        """Ask the model for tags describing a document.

        Hybrid modes make two sequential calls, each asking for half of
        ``max_tags``: one generating new tags and one matching candidates.
        Suggested tags that were also matched are dropped.

        Args:
            content: Document text. Truncated to ``max_content_length`` characters.
            candidate_tags: Existing or predefined tags the model may choose from.
            mode: Tagging mode.
            max_tags: Maximum tags per returned set.
            language: Optional language code. Defaults to the configured language.

        Returns:
            ParsedResponse with matched and suggested tags.

        Raises:
            ConfigError: If the provider is misconfigured, or predefined mode has no candidates.
            RequestError: If the request fails.
            ExtractionError: If the content is empty or the reply holds no tags.
        """
        mode = TaggingMode(mode)
        if not content or not content.strip():
            raise ExtractionError("Empty content provided for analysis")
        if mode.uses_predefined and not candidate_tags:
            raise ConfigError(f"Predefined tags are required for {mode.value} mode")
        if error := self.validate_config():
            raise ConfigError(error)

        language = language or self.context.language
        if len(content) > self.max_content_length:
            content = content[: self.max_content_length] + "..."

        if not mode.is_hybrid:
            return await self._analyze_once(content, candidate_tags, mode, max_tags, language)

        half = max(1, max_tags // 2)
        generated = await self._analyze_once(
            content, candidate_tags, TaggingMode.GENERATE, half, language
        )
        match_mode = (
            TaggingMode.PREDEFINED if mode.uses_predefined else TaggingMode.EXISTING
        )
        matched = await self._analyze_once(content, candidate_tags, match_mode, half, language)
        return ParsedResponse(
            matched_tags=matched.matched_tags,
            suggested_tags=generated.suggested_tags.difference(matched.matched_tags),
            raw_text="\n\n".join(t for t in (generated.raw_text, matched.raw_text) if t),
        )

    async def _analyze_once(
        self,
        content: str,
        candidate_tags: list[str],
        mode: TaggingMode,
        max_tags: int,
        language: str | None,
    ) -> ParsedResponse:
        if mode is TaggingMode.EXISTING and not candidate_tags:
            logger.debug("No existing tags to match; skipping request")
            return ParsedResponse()

        prompt = build_tag_prompt(content, candidate_tags, mode, max_tags, language)
        raw = await self.send(prompt)
        parsed = self.parse_response(raw)

        matched, suggested = parsed.matched_tags, parsed.suggested_tags
        if mode is not TaggingMode.GENERATE and not matched:
            # Heuristic fallbacks only ever fill the suggested set
            matched, suggested = suggested, TagSet()
        return ParsedResponse(
            matched_tags=matched.limit(max_tags),
            suggested_tags=suggested.limit(max_tags),
            raw_text=parsed.raw_text,
        )

    async def test_connection(self) -> ConnectionTestOutcome:
        """Send a single minimal request and classify the outcome.

        Returns:
            ConnectionTestOutcome. Never raises.
        """
        if error := self.validate_config():
            return ConnectionTestOutcome(False, error, ConnectionErrorType.CONFIG)

        start_time = time.perf_counter()
        try:
            await self.send("test", max_retries=1)
        except RequestError as e:
            if e.is_timeout:
                error_type = ConnectionErrorType.TIMEOUT
            elif e.status_code in _AUTH_STATUS_CODES:
                error_type = ConnectionErrorType.AUTH
            elif e.kind is RequestErrorKind.NETWORK:
                error_type = ConnectionErrorType.NETWORK
            else:
                error_type = ConnectionErrorType.UNKNOWN
            return ConnectionTestOutcome(False, str(e), error_type)
        except Exception as e:
            return ConnectionTestOutcome(False, str(e), ConnectionErrorType.UNKNOWN)

        elapsed = (time.perf_counter() - start_time) * 1000
        logger.info(f"Connection test succeeded for {self.descriptor.name} in {elapsed:.1f}ms")
        return ConnectionTestOutcome(True, f"Connected to {self.descriptor.display_name}")

    async def dispose(self) -> None:
        """Abort every in-flight request and close the HTTP client."""
        self._disposed = True
        self._lifecycle.dispose_all()
        await self._client.aclose()
