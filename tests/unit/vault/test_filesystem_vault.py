"""Tests for FileSystemVault."""

import asyncio

import pytest

from autotag.core.exceptions import ReconciliationError
from autotag.frontmatter import FrontmatterReconciler
from autotag.vault import FileSystemVault, VaultHost


class TestFileSystemVault:
    """Tests for reading, writing and indexing documents on disk."""

    def test_implements_vault_host(self, fs_vault):
        assert isinstance(fs_vault, VaultHost)

    def test_lists_markdown_documents(self, fs_vault):
        assert fs_vault.list_documents() == ["a.md", "notes/b.md", "notes/c.md"]

    def test_build_index(self, fs_vault):
        assert fs_vault.build_index() == 3
        assert fs_vault.indexed_tags("notes/b.md").to_list() == ["#alpha", "#gamma"]
        assert len(fs_vault.indexed_tags("notes/c.md")) == 0

    def test_all_tags(self, fs_vault):
        assert fs_vault.all_tags().to_list() == ["#alpha", "#beta", "#gamma"]

    def test_all_tag_sets_sorted_by_document(self, fs_vault):
        assert [doc for doc, _ in fs_vault.all_tag_sets()] == ["a.md", "notes/b.md", "notes/c.md"]

    @pytest.mark.asyncio
    async def test_read_preserves_line_endings(self, vault_dir):
        (vault_dir / "crlf.md").write_bytes(b"---\r\ntags: [x]\r\n---\r\nbody\r\n")
        vault = FileSystemVault(vault_dir)

        assert await vault.read_text("crlf.md") == "---\r\ntags: [x]\r\n---\r\nbody\r\n"

    @pytest.mark.asyncio
    async def test_write_reindexes_and_signals(self, fs_vault, vault_dir):
        changed = []
        fs_vault.on_change(changed.append)
        waiter = fs_vault.signals.expect("notes/c.md")

        await fs_vault.write_text("notes/c.md", "---\ntags:\n  - delta\n---\nC\n")

        assert await waiter.wait(1.0)
        assert fs_vault.indexed_tags("notes/c.md").to_list() == ["#delta"]
        assert changed == ["notes/c.md"]
        assert (vault_dir / "notes" / "c.md").read_text() == "---\ntags:\n  - delta\n---\nC\n"

    @pytest.mark.asyncio
    async def test_rejects_paths_outside_root(self, fs_vault):
        with pytest.raises(ReconciliationError, match="outside the vault"):
            await fs_vault.read_text("../escape.md")

    @pytest.mark.asyncio
    async def test_missing_document(self, fs_vault):
        with pytest.raises(ReconciliationError, match="Cannot read"):
            await fs_vault.read_text("nope.md")

    @pytest.mark.asyncio
    async def test_reconciler_round_trip(self, fs_vault, vault_dir):
        """A reconciler update lands on disk and in the index."""
        reconciler = FrontmatterReconciler(fs_vault, reindex_timeout=2.0)

        result = await reconciler.update_tags("a.md", ["#gamma"], ["#alpha"])

        assert result.success
        assert result.final_tags.to_list() == ["#alpha", "#beta", "#gamma"]
        assert (vault_dir / "a.md").read_text() == "---\ntags:\n  - alpha\n  - beta\n  - gamma\n---\nA\n"
        assert fs_vault.indexed_tags("a.md") == result.final_tags

    @pytest.mark.asyncio
    async def test_concurrent_updates_to_different_documents(self, fs_vault):
        """Each update waits only for its own document's signal."""
        reconciler = FrontmatterReconciler(fs_vault, reindex_timeout=2.0)

        results = await asyncio.gather(
            reconciler.update_tags("a.md", ["#one"]),
            reconciler.update_tags("notes/b.md", ["#two"]),
        )

        assert all(r.success for r in results)
        assert "#one" in fs_vault.indexed_tags("a.md")
        assert "#two" in fs_vault.indexed_tags("notes/b.md")
