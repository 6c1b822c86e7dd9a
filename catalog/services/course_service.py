# catalog/services/course_service.py
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
from ..database.filters import Filter
from ..errors import CourseNotFoundError
from ..models.course import Course, CourseCreate, CourseUpdate
from ..models.pagination import PaginatedResponse
from .base_service import BaseService
from .category_service import CategoryService
from .consistency import ConsistencyValidator
from .query_engine import PaginationInput
from .subcategory_service import SubCategoryService

class CourseService(BaseService):
    """Course management.

    A course links to one or more categories and sub-categories. Every
    sub-category it lists must belong to one of its categories, and all of
    them must be active when the course is written.
    """

    collection_name = "courses"
    entity = "Course"
    not_found = CourseNotFoundError

    def __init__(
        self,
        db,
        category_service: CategoryService,
        subcategory_service: SubCategoryService,
        validator: Optional[ConsistencyValidator] = None,
    ):
        super().__init__(db)
        self.category_service = category_service
        self.subcategory_service = subcategory_service
        self.validator = validator or ConsistencyValidator(subcategory_service)

    async def create(self, payload: Union[CourseCreate, Mapping[str, Any]]) -> Course:
        """Create a course after its references and name are checked"""
        data = self._parse(CourseCreate, payload)

        await self._ensure_categories_exist(data.categories)
        await self.validator.validate_subcategories_belong_to_categories(
            data.categories, data.sub_categories
        )
        await self._ensure_unique_name(data.name)

        document = await self._insert(data.model_dump(mode="json"))
        return Course.model_validate(document)

    async def find_all(self, pagination: PaginationInput = None) -> PaginatedResponse:
        """Page through active courses with category and sub-category names"""
        return await self.query_engine.paginate(pagination, transform=self._hydrate)

    async def find_by_id(self, course_id: str) -> Course:
        """Get an active course with category and sub-category names"""
        document = await self._get_active_document(course_id)
        return (await self._hydrate([document]))[0]

    async def update(self, course_id: str, payload: Union[CourseUpdate, Mapping[str, Any]]) -> Course:
        """Merge the provided fields over an active course.

        Reference checks depend on which lists are being replaced:
        both are checked against each other, a new category list is checked
        against the stored sub-categories, and a new sub-category list against
        the stored categories.
        """
        changes = self._parse(CourseUpdate, payload).changes()
        current = await self._get_active_document(course_id)

        new_categories = changes.get("categories")
        new_sub_categories = changes.get("sub_categories")

        if new_categories is not None:
            await self._ensure_categories_exist(new_categories)
        if new_categories is not None or new_sub_categories is not None:
            await self.validator.validate_subcategories_belong_to_categories(
                new_categories if new_categories is not None else current["categories"],
                new_sub_categories if new_sub_categories is not None else current["sub_categories"],
            )

        if "name" in changes and changes["name"] != current["name"]:
            await self._ensure_unique_name(changes["name"], exclude_id=course_id)

        if not changes:
            return (await self._hydrate([current]))[0]

        document = await self._update(course_id, changes)
        self.logger.info(f"Course {course_id} updated: {sorted(changes)}")
        return (await self._hydrate([document]))[0]

    async def remove(self, course_id: str) -> Course:
        """Soft-delete a course; the deleted record comes back hydrated"""
        return (await self._hydrate([await self._soft_delete(course_id)]))[0]

    async def find_by_category(self, category_id: str) -> List[Course]:
        """Active courses listing the category"""
        documents = await self._find_active(Filter.active().has("categories", category_id))
        return await self._hydrate(documents)

    async def find_by_subcategory(self, sub_category_id: str) -> List[Course]:
        """Active courses listing the sub-category"""
        documents = await self._find_active(Filter.active().has("sub_categories", sub_category_id))
        return await self._hydrate(documents)

    async def _ensure_categories_exist(self, category_ids: Iterable[str]) -> None:
        for category_id in category_ids:
            await self.category_service.find_by_id(category_id)

    async def _hydrate(self, documents: List[Dict[str, Any]]) -> List[Course]:
        category_ids = [cid for d in documents for cid in d["categories"]]
        sub_category_ids = [sid for d in documents for sid in d["sub_categories"]]

        categories = await self.category_service.references(category_ids)
        sub_categories = await self.subcategory_service.references(sub_category_ids)

        return [
            Course.model_validate({
                **d,
                "category_details": [categories[c] for c in d["categories"] if c in categories],
                "sub_category_details": [
                    sub_categories[s] for s in d["sub_categories"] if s in sub_categories
                ],
            })
            for d in documents
        ]
