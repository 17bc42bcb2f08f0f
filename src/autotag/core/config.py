"""Configuration management for autotag."""

import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any


@dataclass
class ProviderConfig:
    """LLM provider connection settings."""

    name: str = "openai"
    api_key: str = ""
    # Empty means "use the provider's default endpoint / model"
    endpoint: str = ""
    model: str = ""
    temperature: float | None = None
    language: str | None = None
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0
    # None keeps the provider's own policy
    supplement_inline_tags: bool | None = None


@dataclass
class TaggingConfig:
    """Tag generation settings."""

    mode: str = "hybrid-generate-existing"
    max_tags: int = 10
    max_content_length: int = 4000
    predefined_tags_path: Path | None = None
    tag_cache_ttl: float = 60.0


@dataclass
class VaultConfig:
    """Vault location and write-ordering settings."""

    root: Path = field(default_factory=Path.cwd)
    glob_pattern: str = "**/*.md"
    reindex_timeout: float = 5.0
    progress_interval: float = 5.0
    graph_debounce: float = 0.5


@dataclass
class Config:
    """Main application configuration."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    tagging: TaggingConfig = field(default_factory=TaggingConfig)
    vault: VaultConfig = field(default_factory=VaultConfig)

    @classmethod
    def from_env(cls, config: "Config | None" = None) -> "Config":
        """Load configuration from environment variables.

        Args:
            config: Existing configuration to override. Defaults are used if None.
        """
        config = config or cls()

        if name := os.environ.get("AUTOTAG_PROVIDER"):
            config.provider.name = name
        if api_key := os.environ.get("AUTOTAG_API_KEY"):
            config.provider.api_key = api_key
        if endpoint := os.environ.get("AUTOTAG_ENDPOINT"):
            config.provider.endpoint = endpoint
        if model := os.environ.get("AUTOTAG_MODEL"):
            config.provider.model = model
        if temperature := os.environ.get("AUTOTAG_TEMPERATURE"):
            config.provider.temperature = float(temperature)
        if language := os.environ.get("AUTOTAG_LANGUAGE"):
            config.provider.language = language

        if root := os.environ.get("AUTOTAG_VAULT"):
            config.vault.root = Path(root)

        return config

    @classmethod
    def from_file(cls, path: Path) -> "Config":
        """Load configuration from a TOML file, then apply environment overrides.

        Args:
            path: Path to the TOML file.

        Returns:
            Config with file values and environment overrides applied.
        """
        with open(path, "rb") as f:
            data = tomllib.load(f)

        config = cls()
        _apply_section(config.provider, data.get("provider", {}))
        _apply_section(config.tagging, data.get("tagging", {}))
        _apply_section(config.vault, data.get("vault", {}))

        return cls.from_env(config)

    @classmethod
    def from_env_or_file(cls, path: Path | None = None) -> "Config":
        """Load from an explicit path, $AUTOTAG_CONFIG, or the environment alone."""
        if path is None and (env_path := os.environ.get("AUTOTAG_CONFIG")):
            path = Path(env_path)
        if path is not None:
            return cls.from_file(path)
        return cls.from_env()


def _apply_section(target: Any, values: dict[str, Any]) -> None:
    """Copy known keys from a TOML table onto a config dataclass."""
    known = {f.name: f for f in fields(target)}
    for key, value in values.items():
        if key not in known:
            continue
        current = getattr(target, key)
        if isinstance(current, Path) or key.endswith("_path") or key == "root":
            value = Path(value) if value is not None else None
        setattr(target, key, value)
