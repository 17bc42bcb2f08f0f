"""Closed table of supported LLM providers.

Each provider is described once by an immutable ``ProviderDescriptor``.
Request shape, response path, error path, headers and credential scheme
all come from the descriptor; nothing downstream branches on the provider
name or guesses at the shape of a reply.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

PathKey = str | int

CHAT_RESPONSE_PATH: tuple[PathKey, ...] = ("choices", 0, "message", "content")
DEFAULT_ERROR_PATH: tuple[PathKey, ...] = ("error", "message")


class BodyShape(str, Enum):
    """Request body layouts understood by the adapter."""

    CHAT = "chat"
    ANTHROPIC = "anthropic"
    COHERE = "cohere"
    VERTEX = "vertex"
    BEDROCK_CLAUDE = "bedrock-claude"
    BEDROCK_TITAN = "bedrock-titan"
    BEDROCK_GENERIC = "bedrock-generic"


class AuthScheme(str, Enum):
    """How the credential is attached to a request."""

    BEARER = "bearer"
    API_KEY_HEADER = "x-api-key"
    NONE = "none"


# Parameters every body of a given shape starts from
SHAPE_DEFAULTS: dict[BodyShape, dict[str, Any]] = {
    BodyShape.CHAT: {"temperature": 0.3},
    BodyShape.ANTHROPIC: {"max_tokens": 1024, "temperature": 0.3},
    BodyShape.COHERE: {"temperature": 0.7, "chat_history": [], "stream": False},
    BodyShape.VERTEX: {
        "parameters": {"temperature": 0.7, "maxOutputTokens": 1024, "topP": 0.8, "topK": 40},
    },
    BodyShape.BEDROCK_CLAUDE: {
        "max_tokens": 1024,
        "temperature": 0.7,
        "anthropic_version": "2023-01-01",
    },
    BodyShape.BEDROCK_TITAN: {
        "textGenerationConfig": {"maxTokenCount": 1024, "temperature": 0.7, "stopSequences": []},
    },
    BodyShape.BEDROCK_GENERIC: {"max_tokens": 1024, "temperature": 0.7},
}


@dataclass(frozen=True)
class ModelVariant:
    """Model-specific override, selected when ``match`` occurs in the model name."""

    match: str
    body_shape: BodyShape
    response_path: tuple[PathKey, ...]


@dataclass(frozen=True)
class ProviderDescriptor:
    """Immutable description of one provider's wire dialect."""

    name: str
    display_name: str
    default_endpoint: str
    default_model: str
    body_shape: BodyShape = BodyShape.CHAT
    response_path: tuple[PathKey, ...] = CHAT_RESPONSE_PATH
    error_path: tuple[PathKey, ...] = DEFAULT_ERROR_PATH
    headers: Mapping[str, str] = field(default_factory=dict)
    body_defaults: Mapping[str, Any] = field(default_factory=dict)
    auth: AuthScheme = AuthScheme.BEARER
    requires_api_key: bool = True
    supplement_inline_tags: bool = False
    variants: tuple[ModelVariant, ...] = ()
    # Header filled with the "projects/<id>" segment of the endpoint
    project_header: str | None = None

    def resolve(self, model: str) -> tuple[BodyShape, tuple[PathKey, ...]]:
        """Pick the body shape and response path for a model.

        Variants are checked in order; the first whose ``match`` is a
        case-insensitive substring of the model name wins.

        Args:
            model: Model identifier.

        Returns:
            Tuple of (body_shape, response_path).
        """
        lowered = model.lower()
        for variant in self.variants:
            if variant.match in lowered:
                return variant.body_shape, variant.response_path
        return self.body_shape, self.response_path


def _chat(name: str, display_name: str, endpoint: str, model: str = "", **kwargs: Any) -> ProviderDescriptor:
    return ProviderDescriptor(
        name=name,
        display_name=display_name,
        default_endpoint=endpoint,
        default_model=model,
        **kwargs,
    )


PROVIDERS: dict[str, ProviderDescriptor] = {
    d.name: d
    for d in (
        _chat("openai", "OpenAI", "https://api.openai.com/v1/chat/completions", "gpt-4-turbo-preview"),
        _chat(
            "gemini",
            "Gemini",
            "https://generativelanguage.googleapis.com/v1beta/openai/chat/completions",
            "gemini-2.0-flash",
        ),
        _chat("deepseek", "Deepseek", "https://api.deepseek.com/v1/chat/completions", "deepseek-chat"),
        _chat(
            "aliyun",
            "Aliyun",
            "https://dashscope.aliyuncs.com/compatible-mode/v1/chat/completions",
            "qwen-max",
            supplement_inline_tags=True,
        ),
        ProviderDescriptor(
            name="claude",
            display_name="Claude",
            default_endpoint="https://api.anthropic.com/v1/messages",
            default_model="claude-sonnet-4-5-20250929",
            body_shape=BodyShape.ANTHROPIC,
            response_path=("content", 0, "text"),
            headers={"anthropic-version": "2023-06-01"},
            auth=AuthScheme.API_KEY_HEADER,
        ),
        _chat("groq", "Groq", "https://api.groq.com/openai/v1/chat/completions", "mixtral-8x7b-32768"),
        ProviderDescriptor(
            name="vertex",
            display_name="Vertex AI",
            # Project-specific; must be configured
            default_endpoint="",
            default_model="gemini-pro",
            body_shape=BodyShape.VERTEX,
            response_path=("predictions", 0, "candidates", 0, "content"),
            project_header="x-goog-user-project",
        ),
        _chat(
            "openrouter",
            "OpenRouter",
            "https://openrouter.ai/api/v1/chat/completions",
            headers={"HTTP-Referer": "https://github.com/autotag", "X-Title": "autotag"},
        ),
        ProviderDescriptor(
            name="bedrock",
            display_name="AWS Bedrock",
            default_endpoint="https://bedrock-runtime.us-east-1.amazonaws.com/model/invoke",
            default_model="anthropic.claude-3-haiku-20240307-v1:0",
            body_shape=BodyShape.BEDROCK_GENERIC,
            response_path=("generation",),
            error_path=("errorMessage",),
            variants=(
                ModelVariant("claude", BodyShape.BEDROCK_CLAUDE, ("completion",)),
                ModelVariant("titan", BodyShape.BEDROCK_TITAN, ("results", 0, "outputText")),
            ),
        ),
        _chat("requesty", "Requesty AI", "https://router.requesty.ai/v1/chat/completions"),
        ProviderDescriptor(
            name="cohere",
            display_name="Cohere",
            default_endpoint="https://api.cohere.ai/v1/chat",
            default_model="command-r",
            body_shape=BodyShape.COHERE,
            response_path=("text",),
            error_path=("message",),
        ),
        _chat("grok", "Grok", "https://api.x.ai/v1/chat/completions", "grok-beta"),
        _chat("mistral", "Mistral AI", "https://api.mistral.ai/v1/chat/completions", "mistral-large-latest"),
        _chat("siliconflow", "Siliconflow", "https://api.siliconflow.cn/v1/chat/completions"),
        _chat("glm", "GLM (Zhipu AI)", "https://open.bigmodel.cn/api/paas/v4/chat/completions", "glm-4-flash"),
        _chat("mimo", "MiMo", "https://api.xiaomimimo.com/v1/chat/completions", "MiMo-V2-Flash"),
        _chat("openai-compatible", "OpenAI-compatible service", ""),
        _chat(
            "lm-studio",
            "LM Studio",
            "http://localhost:1234/v1/chat/completions",
            requires_api_key=False,
        ),
        _chat(
            "ollama",
            "Ollama",
            "http://localhost:11434/v1/chat/completions",
            "llama3",
            requires_api_key=False,
        ),
    )
}


def get_descriptor(name: str) -> ProviderDescriptor:
    """Look up a provider by name.

    Raises:
        KeyError: If the provider is not in the table.
    """
    try:
        return PROVIDERS[name.lower()]
    except KeyError:
        available = ", ".join(sorted(PROVIDERS))
        raise KeyError(f"Unknown provider: {name!r}. Available: {available}") from None
