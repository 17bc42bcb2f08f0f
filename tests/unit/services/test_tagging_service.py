"""Tests for TaggingService with in-memory fakes."""

import asyncio

import httpx
import pytest

from autotag.core.config import ProviderConfig, TaggingConfig
from autotag.core.exceptions import ExtractionError, RequestError
from autotag.llm import ProviderAdapter
from autotag.llm.prompts import TaggingMode
from autotag.services import TaggingService
from autotag.tags import TagCache
from tests.fakes import InMemoryVault, StubTaggingProvider


@pytest.fixture
def provider() -> StubTaggingProvider:
    return StubTaggingProvider(matched=["#python"], suggested=["#tutorial"])


@pytest.fixture
def service(provider, reconciler, vault) -> TaggingService:
    return TaggingService(provider, reconciler, vault, TaggingConfig(mode="existing", max_tags=5))


class TestTagDocument:
    """Tests for tag_document."""

    @pytest.mark.asyncio
    async def test_merges_provider_tags(self, service, vault):
        result = await service.tag_document("python.md")

        assert result.success
        assert result.final_tags.to_list() == ["#code", "#python", "#tutorial"]
        assert vault.indexed_tags("python.md") == result.final_tags

    @pytest.mark.asyncio
    async def test_sends_body_without_frontmatter(self, service, provider):
        await service.tag_document("python.md")

        assert provider.calls[0]["content"] == "All about Python.\n"

    @pytest.mark.asyncio
    async def test_existing_mode_uses_vault_tags(self, service, provider):
        await service.tag_document("plain.md")

        call = provider.calls[0]
        assert call["mode"] is TaggingMode.EXISTING
        assert call["candidate_tags"] == ["#code", "#python"]
        assert call["max_tags"] == 5

    @pytest.mark.asyncio
    async def test_generate_mode_sends_no_candidates(self, service, provider):
        await service.tag_document("plain.md", mode="generate", max_tags=2, language="de")

        call = provider.calls[0]
        assert call["candidate_tags"] == []
        assert call["max_tags"] == 2
        assert call["language"] == "de"

    @pytest.mark.asyncio
    async def test_predefined_mode_uses_predefined_list(self, provider, reconciler, vault):
        service = TaggingService(provider, reconciler, vault, predefined_tags=["#a", "b"])

        await service.tag_document("plain.md", mode=TaggingMode.PREDEFINED)

        assert provider.calls[0]["candidate_tags"] == ["#a", "b"]

    @pytest.mark.asyncio
    async def test_candidate_cache_invalidated_after_write(self, service, provider):
        """Tags added to one document are offered as candidates for the next."""
        await service.tag_document("plain.md")
        await service.tag_document("empty-tags.md")

        assert "#tutorial" in provider.calls[1]["candidate_tags"]

    @pytest.mark.asyncio
    async def test_uses_injected_cache(self, provider, reconciler, vault):
        cache = TagCache(ttl=60.0)
        service = TaggingService(provider, reconciler, vault, tag_cache=cache)

        await service.tag_document("plain.md", mode="existing")

        assert not cache.is_fresh

    @pytest.mark.asyncio
    async def test_unknown_mode(self, service):
        result = await service.tag_document("plain.md", mode="sideways")

        assert not result.success
        assert "Unknown tagging mode" in result.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [RequestError("API error: 500 Internal Server Error"), ExtractionError("No tag data found")],
    )
    async def test_provider_failures_become_results(self, reconciler, vault, error):
        service = TaggingService(StubTaggingProvider(error=error), reconciler, vault)

        result = await service.tag_document("plain.md")

        assert not result.success
        assert result.message == f"Tagging failed: {error}"
        assert vault.writes == []

    @pytest.mark.asyncio
    async def test_no_tags_returned(self, reconciler, vault):
        service = TaggingService(StubTaggingProvider(), reconciler, vault)

        result = await service.tag_document("python.md")

        assert result.success
        assert result.message == "No valid tags to add"


class TestBatchOperations:
    """Tests for batch tagging and clearing."""

    @pytest.mark.asyncio
    async def test_tag_documents(self, service, vault):
        result = await service.tag_documents(vault.list_documents())

        assert result.processed == 3
        assert result.success_count == 3
        assert all("#tutorial" in vault.indexed_tags(d) for d in vault.list_documents())

    @pytest.mark.asyncio
    async def test_missing_document_recorded(self, service):
        result = await service.tag_documents(["python.md", "missing.md"])

        assert result.success_count == 1
        assert [doc for doc, _ in result.errors] == ["missing.md"]

    @pytest.mark.asyncio
    async def test_clear_documents(self, service, vault):
        result = await service.clear_documents(["python.md", "plain.md"])

        assert result.success_count == 2
        assert len(vault.indexed_tags("python.md")) == 0
        assert vault.documents["plain.md"].startswith("---\ntags:\n---\n")

    @pytest.mark.asyncio
    async def test_dispose(self, service, provider):
        await service.dispose()

        assert provider.disposed

    @pytest.mark.asyncio
    async def test_dispose_while_retrying_returns_result(self, reconciler, vault):
        async def handler(request):
            return httpx.Response(500)

        config = ProviderConfig(api_key="test-api-key-12345", max_retries=3, retry_delay=0.3)
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        adapter = ProviderAdapter(config, client=client)
        service = TaggingService(adapter, reconciler, vault, TaggingConfig(mode="generate"))

        task = asyncio.create_task(service.tag_document("python.md"))
        await asyncio.sleep(0.1)
        await service.dispose()
        result = await task

        assert not result.success
        assert "cancelled" in result.message
        assert vault.writes == []


class TestInMemoryVaultContract:
    """The in-memory fake satisfies the host protocol."""

    def test_is_vault_host(self):
        from autotag.vault import VaultHost

        assert isinstance(InMemoryVault(), VaultHost)
