"""Tests for record stores and article history."""

from pathlib import Path

import pytest

from article_studio.errors import InvalidConfiguration
from article_studio.storage import (
    ArticleHistoryService,
    InMemoryStore,
    JsonFileStore,
    create_store,
)
from article_studio.storage.history import extract_tags


@pytest.fixture(params=["memory", "json"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryStore()
    return JsonFileStore(tmp_path / "store")


class TestRecordStores:

    @pytest.mark.asyncio
    async def test_put_get_round_trip(self, any_store):
        await any_store.put("workflows", "wf-1", {"id": "wf-1", "steps": [{"status": "pending"}]})
        assert await any_store.get("workflows", "wf-1") == {"id": "wf-1", "steps": [{"status": "pending"}]}

    @pytest.mark.asyncio
    async def test_missing_record(self, any_store):
        assert await any_store.get("workflows", "nope") is None
        assert await any_store.delete("workflows", "nope") is False
        assert await any_store.list("workflows") == []

    @pytest.mark.asyncio
    async def test_put_replaces_and_list(self, any_store):
        await any_store.put("variant_sets", "a", {"id": "a", "v": 1})
        await any_store.put("variant_sets", "a", {"id": "a", "v": 2})
        await any_store.put("variant_sets", "b", {"id": "b", "v": 1})

        records = sorted(await any_store.list("variant_sets"), key=lambda r: r["id"])
        assert records == [{"id": "a", "v": 2}, {"id": "b", "v": 1}]

    @pytest.mark.asyncio
    async def test_delete(self, any_store):
        await any_store.put("workflows", "wf-1", {"id": "wf-1"})
        assert await any_store.delete("workflows", "wf-1") is True
        assert await any_store.get("workflows", "wf-1") is None

    @pytest.mark.asyncio
    async def test_collections_are_separate(self, any_store):
        await any_store.put("workflows", "x", {"kind": "workflow"})
        await any_store.put("variant_sets", "x", {"kind": "set"})
        assert (await any_store.get("workflows", "x"))["kind"] == "workflow"

    @pytest.mark.asyncio
    async def test_memory_store_copies_records(self):
        store = InMemoryStore()
        record = {"id": "wf-1", "tags": ["a"]}
        await store.put("workflows", "wf-1", record)
        record["tags"].append("b")

        loaded = await store.get("workflows", "wf-1")
        loaded["tags"].append("c")
        assert (await store.get("workflows", "wf-1"))["tags"] == ["a"]

    @pytest.mark.asyncio
    async def test_json_store_layout(self, tmp_path):
        store = JsonFileStore(tmp_path)
        await store.put("workflows", "wf-1", {"id": "wf-1"})
        assert (tmp_path / "workflows" / "wf-1.json").exists()

    @pytest.mark.asyncio
    async def test_json_store_rejects_path_keys(self, tmp_path):
        store = JsonFileStore(tmp_path)
        with pytest.raises(ValueError):
            await store.put("workflows", "../escape", {})


class TestCreateStore:

    def test_backends(self):
        assert isinstance(create_store("memory"), InMemoryStore)
        assert isinstance(create_store("JSON"), JsonFileStore)

    def test_unknown_backend(self):
        with pytest.raises(InvalidConfiguration):
            create_store("redis")

    def test_json_store_defaults_to_working_directory(self):
        store = create_store("json")
        assert store.root == Path("data") / "store"
        assert not store.root.is_absolute()


class TestArticleHistory:

    @pytest.mark.asyncio
    async def test_save_get_delete(self, orchestrator, base_request):
        history = ArticleHistoryService(InMemoryStore())
        artifact = await orchestrator.run(base_request)

        article_id = await history.save_article(base_request, artifact)
        record = await history.get_article(article_id)

        assert record.title == artifact.title
        assert record.word_count == len(artifact.content)
        assert record.tone == base_request.tone
        assert "Home" in record.tags

        assert await history.delete_article(article_id) is True
        assert await history.get_article(article_id) is None

    @pytest.mark.asyncio
    async def test_list_newest_first_and_paging(self, orchestrator, base_request):
        history = ArticleHistoryService(InMemoryStore())
        artifact = await orchestrator.run(base_request)
        ids = [await history.save_article(base_request, artifact) for _ in range(3)]

        listed = await history.list_articles()
        assert sorted(r.id for r in listed) == sorted(ids)
        stamps = [r.created_at for r in listed]
        assert stamps == sorted(stamps, reverse=True)

        page = await history.list_articles(limit=1, offset=1)
        assert [r.id for r in page] == [listed[1].id]

    @pytest.mark.asyncio
    async def test_search(self, orchestrator, base_request):
        history = ArticleHistoryService(InMemoryStore())
        artifact = await orchestrator.run(base_request)
        await history.save_article(base_request, artifact)

        assert len(await history.search_articles("COFFEE")) == 1
        assert await history.search_articles("sourdough") == []
        assert await history.search_articles("  ") == []

    def test_extract_tags(self):
        tags = extract_tags("cold brew", "brew brew brew beans beans grinder")
        assert tags[:2] == ["cold", "brew"]
        assert "beans" in tags
        assert len(tags) <= 10
