"""Tests for CategoryService: uniqueness among active records and soft delete."""
import pytest

from catalog.errors import (
    CategoryNotFoundError,
    DuplicateNameError,
    EntityNotFoundError,
    ValidationError,
)
from catalog.database.filters import Filter
from catalog.models.base import LifecycleState

class TestCreateCategory:
    @pytest.mark.asyncio
    async def test_create_returns_active_record(self, services):
        category = await services.categories.create(
            {"name": "Web Development", "description": "Learn web development"}
        )

        assert category.id
        assert category.name == "Web Development"
        assert category.is_deleted is False
        assert category.deleted_at is None
        assert category.state is LifecycleState.ACTIVE
        assert category.created_at is not None

    @pytest.mark.asyncio
    async def test_name_is_trimmed(self, services):
        category = await services.categories.create({"name": "  Design  "})
        assert category.name == "Design"

    @pytest.mark.asyncio
    async def test_duplicate_active_name_rejected(self, services):
        await services.categories.create({"name": "Web Development"})

        with pytest.raises(DuplicateNameError) as exc_info:
            await services.categories.create({"name": "Web Development"})

        assert exc_info.value.error_code == "DUPLICATE_NAME"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_name_reusable_after_soft_delete(self, services):
        first = await services.categories.create({"name": "Web Development"})
        await services.categories.remove(first.id)

        second = await services.categories.create({"name": "Web Development"})

        assert second.id != first.id
        assert second.is_active

    @pytest.mark.asyncio
    async def test_invalid_payload_raises_validation_error(self, services):
        with pytest.raises(ValidationError):
            await services.categories.create({"name": "W"})

        with pytest.raises(ValidationError):
            await services.categories.create({"name": "Web", "unexpected": True})

class TestFindCategory:
    @pytest.mark.asyncio
    async def test_find_by_id(self, services):
        created = await services.categories.create({"name": "Data Science"})
        found = await services.categories.find_by_id(created.id)
        assert found.id == created.id
        assert found.name == "Data Science"

    @pytest.mark.asyncio
    async def test_find_unknown_id(self, services):
        with pytest.raises(CategoryNotFoundError) as exc_info:
            await services.categories.find_by_id("missing")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_find_all_defaults(self, services):
        for name in ["Alpha", "Beta", "Gamma"]:
            await services.categories.create({"name": name})

        page = await services.categories.find_all()

        assert page.total == 3
        assert page.skip == 0
        assert page.limit == 10
        assert page.has_more is False
        # newest first by default
        assert [c.name for c in page.data] == ["Gamma", "Beta", "Alpha"]

    @pytest.mark.asyncio
    async def test_find_all_applies_skip(self, services):
        for name in ["Alpha", "Beta", "Gamma"]:
            await services.categories.create({"name": name})

        page = await services.categories.find_all({"skip": 1, "limit": 1, "sort_by": "name", "sort_order": "asc"})

        assert [c.name for c in page.data] == ["Beta"]
        assert page.has_more is True

class TestUpdateCategory:
    @pytest.mark.asyncio
    async def test_update_merges_fields(self, services):
        created = await services.categories.create({"name": "Web", "description": "old"})

        updated = await services.categories.update(created.id, {"description": "new"})

        assert updated.name == "Web"
        assert updated.description == "new"
        assert updated.updated_at > created.updated_at

    @pytest.mark.asyncio
    async def test_explicit_null_clears_description(self, services):
        created = await services.categories.create({"name": "Web", "description": "old"})
        updated = await services.categories.update(created.id, {"description": None})
        assert updated.description is None

    @pytest.mark.asyncio
    async def test_rename_to_active_name_rejected(self, services):
        await services.categories.create({"name": "Web"})
        other = await services.categories.create({"name": "Mobile"})

        with pytest.raises(DuplicateNameError):
            await services.categories.update(other.id, {"name": "Web"})

    @pytest.mark.asyncio
    async def test_keeping_own_name_is_allowed(self, services):
        created = await services.categories.create({"name": "Web"})
        updated = await services.categories.update(created.id, {"name": "Web", "description": "d"})
        assert updated.name == "Web"
        assert updated.description == "d"

    @pytest.mark.asyncio
    async def test_null_name_rejected(self, services):
        created = await services.categories.create({"name": "Web"})
        with pytest.raises(ValidationError):
            await services.categories.update(created.id, {"name": None})

    @pytest.mark.asyncio
    async def test_empty_update_is_noop(self, services):
        created = await services.categories.create({"name": "Web"})
        same = await services.categories.update(created.id, {})
        assert same.updated_at == created.updated_at

    @pytest.mark.asyncio
    async def test_update_deleted_category(self, services):
        created = await services.categories.create({"name": "Web"})
        await services.categories.remove(created.id)

        with pytest.raises(EntityNotFoundError):
            await services.categories.update(created.id, {"description": "x"})

class TestRemoveCategory:
    @pytest.mark.asyncio
    async def test_remove_returns_deleted_record(self, services):
        created = await services.categories.create({"name": "Web"})

        removed = await services.categories.remove(created.id)

        assert removed.id == created.id
        assert removed.is_deleted is True
        assert removed.deleted_at is not None
        assert removed.state is LifecycleState.DELETED

    @pytest.mark.asyncio
    async def test_second_remove_not_found(self, services):
        created = await services.categories.create({"name": "Web"})
        await services.categories.remove(created.id)

        with pytest.raises(EntityNotFoundError):
            await services.categories.remove(created.id)

    @pytest.mark.asyncio
    async def test_removed_category_hidden(self, services):
        created = await services.categories.create({"name": "Web"})
        await services.categories.remove(created.id)

        with pytest.raises(CategoryNotFoundError):
            await services.categories.find_by_id(created.id)
        page = await services.categories.find_all()
        assert page.total == 0
        assert page.data == []

    @pytest.mark.asyncio
    async def test_record_is_kept_in_storage(self, services, db):
        created = await services.categories.create({"name": "Web"})
        await services.categories.remove(created.id)

        assert await db.collection("categories").count(Filter()) == 1
