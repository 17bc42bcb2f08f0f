"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from autotag.core.config import ProviderConfig
from autotag.frontmatter.reconciler import FrontmatterReconciler
from autotag.vault.filesystem import FileSystemVault
from tests.fakes import InMemoryVault


@pytest.fixture
def openai_config() -> ProviderConfig:
    """Provide an OpenAI provider config with instant retries."""
    return ProviderConfig(
        name="openai",
        api_key="test-api-key-12345",
        timeout=5.0,
        max_retries=3,
        retry_delay=0.0,
    )


@pytest.fixture
def vault() -> InMemoryVault:
    """Provide an in-memory vault with a few tagged documents."""
    return InMemoryVault(
        {
            "python.md": "---\ntitle: Python\ntags:\n  - python\n  - code\n---\nAll about Python.\n",
            "plain.md": "Just a note without frontmatter.\n",
            "empty-tags.md": "---\ntitle: Empty\ntags:\n---\nNothing tagged yet.\n",
        }
    )


@pytest.fixture
def reconciler(vault: InMemoryVault) -> FrontmatterReconciler:
    """Provide a reconciler bound to the in-memory vault."""
    return FrontmatterReconciler(vault, reindex_timeout=1.0)


@pytest.fixture
def vault_dir(tmp_path: Path) -> Path:
    """Create a small vault on disk."""
    (tmp_path / "notes").mkdir()
    (tmp_path / "a.md").write_text("---\ntags:\n  - alpha\n  - beta\n---\nA\n")
    (tmp_path / "notes" / "b.md").write_text("---\ntags: [alpha, gamma]\n---\nB\n")
    (tmp_path / "notes" / "c.md").write_text("No frontmatter here.\n")
    (tmp_path / "readme.txt").write_text("not markdown")
    return tmp_path


@pytest.fixture
def fs_vault(vault_dir: Path) -> FileSystemVault:
    """Provide a FileSystemVault over the on-disk fixture vault."""
    return FileSystemVault(vault_dir)
