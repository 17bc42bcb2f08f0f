"""Core configuration and exceptions for autotag."""

from .config import (
    Config,
    ProviderConfig,
    TaggingConfig,
    VaultConfig,
)
from .exceptions import (
    AutotagError,
    ConfigError,
    ExtractionError,
    ReconciliationError,
    RequestError,
    RequestErrorKind,
    ValidationError,
)

__all__ = [
    "Config",
    "ProviderConfig",
    "TaggingConfig",
    "VaultConfig",
    "AutotagError",
    "ConfigError",
    "ExtractionError",
    "ReconciliationError",
    "RequestError",
    "RequestErrorKind",
    "ValidationError",
]
