"""Provider commands for autotag CLI."""

import asyncio

from ...core.config import Config
from ...core.types import ConnectionTestOutcome
from ...llm import PROVIDERS, create_tagging_provider, get_provider_name


def handle_test_connection(args, config: Config) -> bool:
    """Check that the configured provider answers.

    Args:
        args: Parsed command arguments.
        config: Application configuration.

    Returns:
        True if the connection test succeeded.
    """

    async def run() -> ConnectionTestOutcome:
        provider = create_tagging_provider(config)
        try:
            return await provider.test_connection()
        finally:
            await provider.dispose()

    outcome = asyncio.run(run())
    name = get_provider_name(config)
    if outcome.success:
        print(f"✓ {name}: {outcome.message}")
    else:
        kind = outcome.error_type.value if outcome.error_type else "unknown"
        print(f"✗ {name} ({kind}): {outcome.message}")
    return outcome.success


def handle_providers(args, config: Config) -> bool:
    """List supported providers and their defaults.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    current = config.provider.name.lower()
    for name, descriptor in sorted(PROVIDERS.items()):
        marker = "*" if name == current else " "
        model = descriptor.default_model or "(must be configured)"
        print(f"{marker} {name:<18} {descriptor.display_name:<28} {model}")
    return True
