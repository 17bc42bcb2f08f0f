"""LLM abstraction layer for autotag."""

from .adapter import ProviderAdapter
from .base import TaggingProvider
from .factory import create_tagging_provider, get_provider_name
from .lifecycle import CancelToken, RequestHandle, RequestLifecycleManager
from .prompts import TaggingMode, build_tag_prompt
from .providers import PROVIDERS, BodyShape, ModelVariant, ProviderDescriptor, get_descriptor

__all__ = [
    "TaggingProvider",
    "ProviderAdapter",
    "create_tagging_provider",
    "get_provider_name",
    "CancelToken",
    "RequestHandle",
    "RequestLifecycleManager",
    "TaggingMode",
    "build_tag_prompt",
    "PROVIDERS",
    "BodyShape",
    "ModelVariant",
    "ProviderDescriptor",
    "get_descriptor",
]
