# catalog/services/subcategory_service.py
from typing import Any, Dict, Iterable, List, Mapping, Union
from ..database.filters import Filter
from ..errors import SubCategoryNotFoundError
from ..models.pagination import PaginatedResponse
from ..models.subcategory import (
    SubCategory, SubCategoryCreate, SubCategoryReference, SubCategoryUpdate
)
from .base_service import BaseService
from .category_service import CategoryService
from .query_engine import PaginationInput

class SubCategoryService(BaseService):
    """Sub-category management; every sub-category hangs off one active category"""

    collection_name = "subcategories"
    entity = "SubCategory"
    not_found = SubCategoryNotFoundError

    def __init__(self, db, category_service: CategoryService):
        super().__init__(db)
        self.category_service = category_service

    async def create(self, payload: Union[SubCategoryCreate, Mapping[str, Any]]) -> SubCategory:
        """Create a sub-category under an active category"""
        data = self._parse(SubCategoryCreate, payload)
        await self.category_service.find_by_id(data.category)

        document = await self._insert(data.model_dump(mode="json"))
        return SubCategory.model_validate(document)

    async def find_all(self, pagination: PaginationInput = None) -> PaginatedResponse:
        """Page through active sub-categories with their parent attached"""
        return await self.query_engine.paginate(pagination, transform=self._hydrate)

    async def find_by_id(self, sub_category_id: str) -> SubCategory:
        """Get an active sub-category with its parent attached"""
        document = await self._get_active_document(sub_category_id)
        return (await self._hydrate([document]))[0]

    async def update(
        self, sub_category_id: str, payload: Union[SubCategoryUpdate, Mapping[str, Any]]
    ) -> SubCategory:
        """Merge the provided fields; a new parent must be an active category"""
        changes = self._parse(SubCategoryUpdate, payload).changes()
        current = await self._get_active_document(sub_category_id)

        if "category" in changes:
            await self.category_service.find_by_id(changes["category"])

        if not changes:
            return (await self._hydrate([current]))[0]

        document = await self._update(sub_category_id, changes)
        self.logger.info(f"SubCategory {sub_category_id} updated: {sorted(changes)}")
        return (await self._hydrate([document]))[0]

    async def remove(self, sub_category_id: str) -> SubCategory:
        """Soft-delete a sub-category; the deleted record comes back with its parent attached"""
        return (await self._hydrate([await self._soft_delete(sub_category_id)]))[0]

    async def find_by_ids(self, ids: Iterable[str]) -> List[SubCategory]:
        """Active sub-categories among ids; missing or deleted ids are skipped"""
        ids = list(dict.fromkeys(ids))
        if not ids:
            return []
        documents = await self._find_active(Filter.active().where_in("id", ids))
        return [SubCategory.model_validate(d) for d in documents]

    async def find_by_category(self, category_id: str) -> List[SubCategory]:
        """Active sub-categories of a category"""
        documents = await self._find_active(Filter.active().where("category", category_id))
        return [SubCategory.model_validate(d) for d in documents]

    def _reference(self, document: Dict[str, Any]) -> SubCategoryReference:
        return SubCategoryReference(
            id=document["id"], name=document["name"], category=document["category"]
        )

    async def _hydrate(self, documents: List[Dict[str, Any]]) -> List[SubCategory]:
        parents = await self.category_service.references(d["category"] for d in documents)
        return [
            SubCategory.model_validate({**d, "parent": parents.get(d["category"])})
            for d in documents
        ]
