"""
Tests for ModelsRepository against a migrated in-memory SQLite database.
"""

import uuid

import pytest

from model_registry.converters import installed_model_to_row, model_to_row
from model_registry.domain import ModelStatus, ModelType
from model_registry.errors import ConflictError, StorageError
from model_registry.repositories import ModelQuery, Pagination, SortBy

from factories import at, make_installed, make_model


async def _create(repository, name="llama-3-8b", **overrides):
    model = make_model(name, **overrides)
    await repository.create_model(model_to_row(model))
    return model


class TestModelCrud:
    @pytest.mark.asyncio
    async def test_create_and_get(self, models_repository):
        model = await _create(models_repository)

        by_id = await models_repository.get_model_by_id(model.id)
        by_name = await models_repository.get_model_by_name(model.name)

        assert by_id.id == model.id
        assert by_name.id == model.id
        assert by_id.tags == '["chat","general"]'
        assert by_id.created_at == model.created_at

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, models_repository):
        assert await models_repository.get_model_by_id(uuid.uuid4()) is None
        assert await models_repository.get_model_by_name("nope") is None

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, models_repository):
        await _create(models_repository)
        with pytest.raises(ConflictError) as excinfo:
            await _create(models_repository)
        assert isinstance(excinfo.value, StorageError)
        assert excinfo.value.__cause__ is not None

    @pytest.mark.asyncio
    async def test_update_replaces_and_stamps(self, models_repository):
        model = await _create(models_repository)
        row = model_to_row(model.model_copy(update={"display_name": "Renamed"}))

        await models_repository.update_model(row)
        stored = await models_repository.get_model_by_id(model.id)

        assert stored.display_name == "Renamed"
        assert stored.updated_at > model.updated_at
        assert stored.created_at == model.created_at

    @pytest.mark.asyncio
    async def test_update_missing_is_noop(self, models_repository):
        row = model_to_row(make_model())
        await models_repository.update_model(row)
        assert await models_repository.get_model_by_id(row.id) is None

    @pytest.mark.asyncio
    async def test_delete(self, models_repository):
        model = await _create(models_repository)
        assert await models_repository.delete_model(model.id) is True
        assert await models_repository.delete_model(model.id) is False
        assert await models_repository.get_model_by_id(model.id) is None

    @pytest.mark.asyncio
    async def test_increment_download_count(self, models_repository):
        model = await _create(models_repository)
        assert await models_repository.increment_download_count(model.id)
        assert await models_repository.increment_download_count(model.id)

        stored = await models_repository.get_model_by_id(model.id)
        assert stored.download_count == 2
        assert not await models_repository.increment_download_count(uuid.uuid4())


class TestModelQueries:
    @pytest.mark.asyncio
    async def test_list_newest_first(self, models_repository):
        await _create(models_repository, "old", created_at=at(0))
        await _create(models_repository, "new", created_at=at(10))
        await _create(models_repository, "mid", created_at=at(5))

        names = [row.name for row in await models_repository.list_models()]
        assert names == ["new", "mid", "old"]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, models_repository):
        await _create(models_repository, "Mistral-7B", description="Fast model")
        await _create(models_repository, "phi-2", description="Small MISTRAL-like")
        await _create(models_repository, "gemma", description="Google")

        found = {row.name for row in await models_repository.search_models("mistral")}
        assert found == {"Mistral-7B", "phi-2"}

    @pytest.mark.asyncio
    async def test_search_escapes_wildcards(self, models_repository):
        await _create(models_repository, "model_a", description="plain")
        await _create(models_repository, "modelxa", description="plain")

        found = [row.name for row in await models_repository.search_models("l_a")]
        assert found == ["model_a"]
        assert await models_repository.search_models("%") == []

    @pytest.mark.asyncio
    async def test_search_limit(self, models_repository):
        for index in range(5):
            await _create(models_repository, f"coder-{index}", created_at=at(index))

        rows = await models_repository.search_models("coder", limit=2)
        assert [row.name for row in rows] == ["coder-4", "coder-3"]

    @pytest.mark.asyncio
    async def test_search_rejects_non_positive_limit(self, models_repository):
        await _create(models_repository, "coder-0")

        with pytest.raises(ValueError):
            await models_repository.search_models("coder", limit=0)
        with pytest.raises(ValueError):
            await models_repository.search_models("coder", limit=-1)

    @pytest.mark.asyncio
    async def test_filters(self, models_repository):
        await _create(models_repository, "a", model_type=ModelType.CODE, provider="x")
        await _create(models_repository, "b", model_type=ModelType.CHAT, provider="x")
        await _create(
            models_repository, "c", model_type=ModelType.CODE, provider="y", is_official=True
        )

        by_type = await models_repository.list_models_by_type("Code")
        by_provider = await models_repository.list_models_by_provider("x")
        official = await models_repository.list_official_models()

        assert {row.name for row in by_type} == {"a", "c"}
        assert {row.name for row in by_provider} == {"a", "b"}
        assert [row.name for row in official] == ["c"]


class TestModelPages:
    @pytest.mark.asyncio
    async def test_default_page(self, models_repository):
        for index in range(25):
            await _create(models_repository, f"m-{index:02d}", created_at=at(index))

        page = await models_repository.list_models_page()

        assert page.total_count == 25
        assert page.limit == 20
        assert len(page.items) == 20
        assert page.items[0].name == "m-24"
        assert page.has_more

    @pytest.mark.asyncio
    async def test_offset_and_sort(self, models_repository):
        for name in ["delta", "alpha", "charlie", "bravo"]:
            await _create(models_repository, name)

        page = await models_repository.list_models_page(
            pagination=Pagination(offset=1, limit=2),
            sort=SortBy(field="name", descending=False),
        )

        assert [row.name for row in page.items] == ["bravo", "charlie"]
        assert page.total_count == 4
        assert page.has_more

    @pytest.mark.asyncio
    async def test_query_filters(self, models_repository):
        await _create(models_repository, "a", tags=["chat", "fast"], created_at=at(1))
        await _create(models_repository, "b", tags=["chat"], created_at=at(2))
        await _create(models_repository, "c", tags=["fast"], provider="other", created_at=at(3))

        tagged = await models_repository.list_models_page(ModelQuery(tags=["fast"]))
        ranged = await models_repository.list_models_page(
            ModelQuery(created_after=at(2), created_before=at(3))
        )
        combined = await models_repository.list_models_page(
            ModelQuery(tags=["fast"], provider="meta")
        )

        assert {row.name for row in tagged.items} == {"a", "c"}
        assert [row.name for row in ranged.items] == ["b"]
        assert [row.name for row in combined.items] == ["a"]
        assert not combined.has_more

    @pytest.mark.asyncio
    async def test_tag_filter_matches_whole_tags(self, models_repository):
        await _create(models_repository, "quoted", tags=['a"b'])
        await _create(models_repository, "plain", tags=["b"])
        await _create(models_repository, "prefixed", tags=["bb", "xb"])

        plain = await models_repository.list_models_page(ModelQuery(tags=["b"]))
        quoted = await models_repository.list_models_page(ModelQuery(tags=['a"b']))

        assert [row.name for row in plain.items] == ["plain"]
        assert plain.total_count == 1
        assert [row.name for row in quoted.items] == ["quoted"]

    def test_invalid_sort_field(self):
        with pytest.raises(ValueError):
            SortBy(field="password")

    def test_invalid_pagination(self):
        with pytest.raises(ValueError):
            Pagination(offset=-1)
        with pytest.raises(ValueError):
            Pagination(limit=0)


class TestInstallations:
    @pytest.mark.asyncio
    async def test_install_and_get(self, models_repository):
        model = await _create(models_repository)
        await models_repository.install_model(installed_model_to_row(make_installed(model)))

        row = await models_repository.get_installed_by_model_id(model.id)
        assert row.install_path == "/opt/models/llama-3-8b"
        assert row.status == "Stopped"
        assert row.created_at is not None

    @pytest.mark.asyncio
    async def test_second_install_conflicts(self, models_repository):
        model = await _create(models_repository)
        await models_repository.install_model(installed_model_to_row(make_installed(model)))
        with pytest.raises(ConflictError):
            await models_repository.install_model(
                installed_model_to_row(make_installed(model))
            )

    @pytest.mark.asyncio
    async def test_install_unknown_model_violates_foreign_key(self, models_repository):
        with pytest.raises(StorageError):
            await models_repository.install_model(
                installed_model_to_row(make_installed(make_model()))
            )

    @pytest.mark.asyncio
    async def test_status_filter_and_usage(self, models_repository):
        running = await _create(models_repository, "running")
        stopped = await _create(models_repository, "stopped")
        await models_repository.install_model(
            installed_model_to_row(make_installed(running, status=ModelStatus.RUNNING))
        )
        await models_repository.install_model(installed_model_to_row(make_installed(stopped)))

        rows = await models_repository.list_installed_by_status("Running")
        assert [row.model_id for row in rows] == [running.id]

        assert await models_repository.mark_model_used(running.id)
        row = await models_repository.get_installed_by_model_id(running.id)
        assert row.usage_count == 1
        assert row.last_used is not None
        assert await models_repository.count_installed() == 2

    @pytest.mark.asyncio
    async def test_uninstall(self, models_repository):
        model = await _create(models_repository)
        await models_repository.install_model(installed_model_to_row(make_installed(model)))

        assert await models_repository.uninstall_model(model.id) is True
        assert await models_repository.uninstall_model(model.id) is False
        assert not await models_repository.mark_model_used(model.id)

    @pytest.mark.asyncio
    async def test_deleting_model_cascades(self, models_repository):
        model = await _create(models_repository)
        await models_repository.install_model(installed_model_to_row(make_installed(model)))

        await models_repository.delete_model(model.id)
        assert await models_repository.get_installed_by_model_id(model.id) is None


class TestJoins:
    @pytest.mark.asyncio
    async def test_models_with_install_info(self, models_repository):
        installed = await _create(models_repository, "installed", created_at=at(1))
        await _create(models_repository, "plain", created_at=at(0))
        await models_repository.install_model(
            installed_model_to_row(make_installed(installed))
        )

        pairs = await models_repository.list_models_with_install_info()

        assert [(m.name, i is not None) for m, i in pairs] == [
            ("installed", True),
            ("plain", False),
        ]

    @pytest.mark.asyncio
    async def test_installed_with_models(self, models_repository):
        model = await _create(models_repository)
        await models_repository.install_model(
            installed_model_to_row(make_installed(model, status=ModelStatus.ERROR))
        )

        pairs = await models_repository.list_installed_with_models()
        assert [(i.model_id, m.name) for i, m in pairs] == [(model.id, model.name)]
        assert await models_repository.list_installed_with_models("Running") == []
