# catalog/services/query_engine.py
"""
Shared list query logic for the catalog services.

Every ``find_all`` goes through ``QueryEngine.paginate``: the base filter
always hides soft-deleted records, an optional search term is matched as a
case-insensitive substring of ``name`` or ``description``, and the page is
cut from a single-key sort. ``total`` is counted before paging and
``has_more`` is ``skip + limit < total``.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..database.collection import Collection
from ..database.filters import Filter, Sort, describe
from ..errors import ValidationError
from ..models.pagination import PaginatedResponse, PaginationParams

Transform = Callable[[List[Dict[str, Any]]], Awaitable[List[Any]]]
PaginationInput = Union[PaginationParams, Mapping[str, Any], None]

SEARCH_FIELDS = ("name", "description")

def resolve_pagination(pagination: PaginationInput) -> PaginationParams:
    """Apply defaults to raw pagination input"""
    if isinstance(pagination, PaginationParams):
        return pagination
    try:
        return PaginationParams.model_validate(dict(pagination or {}))
    except PydanticValidationError as e:
        raise ValidationError("Invalid pagination parameters", {"errors": e.errors(include_url=False)}) from e

class QueryEngine:
    def __init__(self, collection: Collection):
        self.collection = collection
        self.logger = logging.getLogger(__name__)

    def build_filter(self, params: PaginationParams) -> Filter:
        flt = Filter.active()
        if params.search:
            flt.search(SEARCH_FIELDS, params.search)
        return flt

    def build_sort(self, params: PaginationParams) -> Sort:
        if params.sort_by not in self.collection.fields:
            raise ValidationError(
                f"Cannot sort {self.collection.name} by '{params.sort_by}'",
                {"sort_by": params.sort_by, "allowed": sorted(self.collection.fields)},
            )
        return Sort.parse(params.sort_by, params.sort_order.value)

    async def paginate(
        self,
        pagination: PaginationInput = None,
        transform: Optional[Transform] = None,
    ) -> PaginatedResponse:
        """Run one count query and one data query for a page"""
        params = resolve_pagination(pagination)
        flt = self.build_filter(params)
        sort = self.build_sort(params)

        self.logger.debug(
            f"Listing {self.collection.name}: filter={describe(flt)} sort={sort} "
            f"skip={params.skip} limit={params.limit}"
        )

        documents, total = await asyncio.gather(
            self.collection.find(flt, sort=sort, skip=params.skip, limit=params.limit),
            self.collection.count(flt),
        )
        data = await transform(documents) if transform else documents

        return PaginatedResponse(
            data=data,
            total=total,
            skip=params.skip,
            limit=params.limit,
            has_more=params.skip + params.limit < total,
        )
