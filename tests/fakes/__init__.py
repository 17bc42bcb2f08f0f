"""Test fakes for testing without real infrastructure.

This module provides in-memory implementations of:
- The vault host protocol (for testing reconciliation and services)
- The tagging provider interface (for testing services without HTTP)

Example:
    from tests.fakes import InMemoryVault, StubTaggingProvider

    vault = InMemoryVault({"a.md": "---\\ntags:\\n  - x\\n---\\nbody"})
    service = TaggingService(
        StubTaggingProvider(suggested=["#y"]),
        FrontmatterReconciler(vault),
        vault,
    )
"""

from .providers import StubTaggingProvider
from .responses import OPENAI_URL, make_chat_response
from .vault import InMemoryVault

__all__ = [
    "InMemoryVault",
    "OPENAI_URL",
    "make_chat_response",
    "StubTaggingProvider",
]
