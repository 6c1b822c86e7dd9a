# catalog/services/category_service.py
from typing import Any, Dict, List, Mapping, Optional, Union
from ..errors import CategoryNotFoundError
from ..models.category import Category, CategoryCreate, CategoryUpdate
from ..models.pagination import PaginatedResponse
from .aggregation_service import AggregationService
from .base_service import BaseService
from .query_engine import PaginationInput

class CategoryService(BaseService):
    """Category management"""

    collection_name = "categories"
    entity = "Category"
    not_found = CategoryNotFoundError

    def __init__(self, db, reports: Optional[AggregationService] = None):
        super().__init__(db)
        self.reports = reports or AggregationService(db)

    async def create(self, payload: Union[CategoryCreate, Mapping[str, Any]]) -> Category:
        """Create a category with a name unused among active categories"""
        data = self._parse(CategoryCreate, payload)
        await self._ensure_unique_name(data.name)
        document = await self._insert(data.model_dump(mode="json"))
        return Category.model_validate(document)

    async def find_all(self, pagination: PaginationInput = None) -> PaginatedResponse:
        """Page through active categories"""
        return await self.query_engine.paginate(pagination, transform=self._to_models)

    async def find_by_id(self, category_id: str) -> Category:
        """Get an active category"""
        return Category.model_validate(await self._get_active_document(category_id))

    async def update(self, category_id: str, payload: Union[CategoryUpdate, Mapping[str, Any]]) -> Category:
        """Merge the provided fields over an active category"""
        changes = self._parse(CategoryUpdate, payload).changes()
        current = await self.find_by_id(category_id)

        if "name" in changes and changes["name"] != current.name:
            await self._ensure_unique_name(changes["name"], exclude_id=category_id)

        if not changes:
            return current

        document = await self._update(category_id, changes)
        self.logger.info(f"Category {category_id} updated: {sorted(changes)}")
        return Category.model_validate(document)

    async def remove(self, category_id: str) -> Category:
        """Soft-delete a category; its sub-categories are left untouched"""
        return Category.model_validate(await self._soft_delete(category_id))

    async def with_subcategory_count(self) -> List[Dict[str, Any]]:
        """Active categories with the number of active sub-categories under each"""
        return await self.reports.categories_with_subcategory_count()

    async def _to_models(self, documents: List[Dict[str, Any]]) -> List[Category]:
        return [Category.model_validate(d) for d in documents]
