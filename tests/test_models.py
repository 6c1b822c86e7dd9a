"""Payload and record model behaviour."""
import pytest
from pydantic import ValidationError

from catalog.errors import (
    CategoryNotFoundError,
    SubCategoryCategoryMismatchError,
    SubCategoryNotFoundError,
)
from catalog.models.base import LifecycleState
from catalog.models.category import Category, CategoryCreate, CategoryUpdate
from catalog.models.course import CourseCreate, CourseLevel, CourseUpdate
from catalog.utils.formatters import format_datetime, format_duration, now_utc

class TestPayloads:
    def test_name_length_bounds(self):
        with pytest.raises(ValidationError):
            CategoryCreate(name="a")
        with pytest.raises(ValidationError):
            CategoryCreate(name="a" * 101)
        assert CategoryCreate(name="ab").name == "ab"

    def test_description_length_bound(self):
        with pytest.raises(ValidationError):
            CategoryCreate(name="Web", description="x" * 501)

    def test_whitespace_only_name_rejected(self):
        with pytest.raises(ValidationError):
            CategoryCreate(name="   ")

    def test_changes_only_includes_provided_fields(self):
        assert CategoryUpdate(description=None).changes() == {"description": None}
        assert CategoryUpdate().changes() == {}

    def test_null_name_rejected_on_update(self):
        with pytest.raises(ValidationError):
            CategoryUpdate(name=None)

    def test_course_level_serialised_as_value(self):
        payload = CourseUpdate(level="beginner")
        assert payload.level is CourseLevel.BEGINNER
        assert payload.changes() == {"level": "beginner"}

    def test_course_ids_deduplicated_in_order(self):
        payload = CourseCreate(
            name="Full Stack",
            duration=10,
            level="advanced",
            categories=["b", "a", "b"],
            sub_categories=["x", "x"],
        )
        assert payload.categories == ["b", "a"]
        assert payload.sub_categories == ["x"]

    def test_course_update_rejects_empty_lists(self):
        with pytest.raises(ValidationError):
            CourseUpdate(categories=[])

class TestRecords:
    def test_lifecycle_state(self):
        category = Category(id="1", name="Web", created_at=now_utc())
        assert category.state is LifecycleState.ACTIVE
        assert category.is_active

        deleted = category.model_copy(update={"is_deleted": True, "deleted_at": now_utc()})
        assert deleted.state is LifecycleState.DELETED
        assert not deleted.is_active

class TestErrors:
    def test_not_found_message(self):
        error = CategoryNotFoundError("abc")
        assert error.message == "Category with ID abc not found"
        assert error.to_dict() == {
            "error_code": "CATEGORY_NOT_FOUND",
            "message": "Category with ID abc not found",
            "details": {"entity": "Category", "id": "abc"},
        }

    def test_subcategories_not_found(self):
        error = SubCategoryNotFoundError.for_ids(["b", "a"])
        assert error.message == "One or more SubCategories not found"
        assert error.details["ids"] == ["a", "b"]

    def test_mismatch_message(self):
        error = SubCategoryCategoryMismatchError(["s1"])
        assert error.message == "All selected SubCategories must belong to the selected Categories"
        assert error.status_code == 400

class TestFormatters:
    def test_format_datetime(self):
        assert format_datetime(None) == "-"
        assert len(format_datetime(now_utc())) == len("2024-01-01 00:00:00")

    def test_format_duration(self):
        assert format_duration(None) == "-"
        assert format_duration(1500) == "1,500.0h"
