"""Provider factory for instantiating the configured adapter."""

from ..core.config import Config
from ..core.exceptions import ConfigError
from .adapter import ProviderAdapter
from .base import TaggingProvider
from .lifecycle import RequestLifecycleManager
from .providers import PROVIDERS


def create_tagging_provider(
    config: Config,
    lifecycle: RequestLifecycleManager | None = None,
) -> TaggingProvider:
    """Create and return the configured tagging provider.

    Args:
        config: Application configuration.
        lifecycle: Optional shared request tracker, so the owner can abort all calls.

    Returns:
        Configured TaggingProvider instance.

    Raises:
        ConfigError: If the provider is not recognized.
    """
    provider_name = config.provider.name.lower().strip()
    if provider_name not in PROVIDERS:
        raise ConfigError(
            f"Unknown LLM provider: {provider_name}. "
            f"Supported providers: {', '.join(sorted(PROVIDERS))}"
        )
    config.provider.name = provider_name
    return ProviderAdapter(
        config.provider,
        lifecycle=lifecycle,
        max_content_length=config.tagging.max_content_length,
    )


def get_provider_name(config: Config) -> str:
    """Get human-readable provider name.

    Args:
        config: Application configuration.

    Returns:
        Provider display name.
    """
    provider = config.provider.name.lower().strip()
    descriptor = PROVIDERS.get(provider)
    return descriptor.display_name if descriptor else provider
