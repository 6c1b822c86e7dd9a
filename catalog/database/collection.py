# catalog/database/collection.py
from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from .filters import Filter, Sort

class UniqueViolation(Exception):
    """Raised by a backend when a write breaks an active-name unique index"""

    def __init__(self, collection: str, field: str, value: Any):
        self.collection = collection
        self.field = field
        self.value = value
        super().__init__(f"{collection}.{field} already holds {value!r} on an active record")

class Collection(ABC):
    """Document collection contract consumed by the catalog services.

    Documents are plain dicts. ``id``, ``created_at`` and ``updated_at`` are
    owned by the backend: ``insert_one`` generates them and ``update_one``
    refreshes ``updated_at``.
    """

    def __init__(self, name: str, fields: FrozenSet[str]):
        self.name = name
        self.fields = fields

    @abstractmethod
    async def insert_one(self, document: Mapping[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, flt: Filter) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    async def find(
        self,
        flt: Filter,
        sort: Optional[Sort] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    async def count(self, flt: Filter) -> int:
        raise NotImplementedError

    @abstractmethod
    async def update_one(self, document_id: str, fields: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def check_fields(self, names) -> None:
        unknown = [name for name in names if name not in self.fields]
        if unknown:
            raise ValueError(f"Unknown field(s) for {self.name}: {', '.join(unknown)}")

# Columns per collection, shared by both backends
COLLECTION_FIELDS: Dict[str, FrozenSet[str]] = {
    "categories": frozenset({
        "id", "name", "description", "is_deleted", "deleted_at", "created_at", "updated_at",
    }),
    "subcategories": frozenset({
        "id", "name", "description", "category", "is_deleted", "deleted_at", "created_at", "updated_at",
    }),
    "courses": frozenset({
        "id", "name", "description", "duration", "level", "categories", "sub_categories",
        "is_deleted", "deleted_at", "created_at", "updated_at",
    }),
}

# Fields that must be unique among records with is_deleted = false
ACTIVE_UNIQUE_FIELDS: Dict[str, tuple] = {
    "categories": ("name",),
    "subcategories": (),
    "courses": ("name",),
}
