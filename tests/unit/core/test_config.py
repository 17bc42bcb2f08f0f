"""Tests for configuration loading."""

from pathlib import Path

import pytest

from autotag.core.config import Config

ENV_VARS = [
    "AUTOTAG_PROVIDER",
    "AUTOTAG_API_KEY",
    "AUTOTAG_ENDPOINT",
    "AUTOTAG_MODEL",
    "AUTOTAG_TEMPERATURE",
    "AUTOTAG_LANGUAGE",
    "AUTOTAG_VAULT",
    "AUTOTAG_CONFIG",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove autotag variables so tests see only what they set."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestConfigDefaults:
    """Tests for default values."""

    def test_defaults(self):
        config = Config()

        assert config.provider.name == "openai"
        assert config.provider.endpoint == ""
        assert config.provider.max_retries == 3
        assert config.tagging.mode == "hybrid-generate-existing"
        assert config.tagging.max_tags == 10
        assert config.vault.glob_pattern == "**/*.md"
        assert config.vault.reindex_timeout == 5.0


class TestConfigFromEnv:
    """Tests for Config.from_env."""

    def test_reads_provider_settings(self, monkeypatch):
        monkeypatch.setenv("AUTOTAG_PROVIDER", "claude")
        monkeypatch.setenv("AUTOTAG_API_KEY", "sk-test")
        monkeypatch.setenv("AUTOTAG_MODEL", "claude-x")
        monkeypatch.setenv("AUTOTAG_TEMPERATURE", "0.2")
        monkeypatch.setenv("AUTOTAG_LANGUAGE", "fr")

        config = Config.from_env()

        assert config.provider.name == "claude"
        assert config.provider.api_key == "sk-test"
        assert config.provider.model == "claude-x"
        assert config.provider.temperature == 0.2
        assert config.provider.language == "fr"

    def test_reads_vault_root(self, monkeypatch, tmp_path):
        monkeypatch.setenv("AUTOTAG_VAULT", str(tmp_path))

        assert Config.from_env().vault.root == tmp_path

    def test_unset_keeps_defaults(self):
        assert Config.from_env().provider.temperature is None


class TestConfigFromFile:
    """Tests for Config.from_file."""

    def test_loads_sections(self, tmp_path):
        path = tmp_path / "autotag.toml"
        path.write_text(
            "[provider]\n"
            'name = "ollama"\n'
            "timeout = 60.0\n"
            "unknown_key = 1\n"
            "\n[tagging]\n"
            'mode = "generate"\n'
            'predefined_tags_path = "tags.txt"\n'
            "\n[vault]\n"
            'root = "/tmp/notes"\n'
        )

        config = Config.from_file(path)

        assert config.provider.name == "ollama"
        assert config.provider.timeout == 60.0
        assert config.tagging.mode == "generate"
        assert config.tagging.predefined_tags_path == Path("tags.txt")
        assert config.vault.root == Path("/tmp/notes")

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "autotag.toml"
        path.write_text('[provider]\nname = "ollama"\n')
        monkeypatch.setenv("AUTOTAG_PROVIDER", "groq")

        assert Config.from_file(path).provider.name == "groq"

    def test_from_env_or_file_uses_env_path(self, tmp_path, monkeypatch):
        path = tmp_path / "autotag.toml"
        path.write_text("[tagging]\nmax_tags = 3\n")
        monkeypatch.setenv("AUTOTAG_CONFIG", str(path))

        assert Config.from_env_or_file().tagging.max_tags == 3

    def test_from_env_or_file_without_file(self):
        assert Config.from_env_or_file().tagging.max_tags == 10
