# catalog/models/pagination.py
from enum import Enum
from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field
from ..config import Config

T = TypeVar("T")

class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

class PaginationParams(BaseModel):
    """List query options shared by every find_all"""
    model_config = ConfigDict(extra="forbid")

    # skip is deliberately not bounded below
    skip: int = 0
    limit: int = Field(default_factory=lambda: Config.DEFAULT_PAGE_SIZE, gt=0)
    search: Optional[str] = None
    sort_by: str = "created_at"
    sort_order: SortOrder = SortOrder.DESC

class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T]
    total: int
    skip: int
    limit: int
    has_more: bool
