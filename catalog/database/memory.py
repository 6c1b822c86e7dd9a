# catalog/database/memory.py
import copy
import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional

from ..utils.formatters import now_utc
from .collection import ACTIVE_UNIQUE_FIELDS, COLLECTION_FIELDS, Collection, UniqueViolation
from .filters import Filter, Sort

class MemoryCollection(Collection):
    """In-process collection with the same contract as the PostgreSQL one"""

    def __init__(self, name: str, database: "MemoryDatabase"):
        super().__init__(name, COLLECTION_FIELDS[name])
        self.database = database
        self.unique_fields = ACTIVE_UNIQUE_FIELDS[name]
        self._documents: Dict[str, Dict[str, Any]] = {}

    def _check_unique(self, document: Mapping[str, Any]) -> None:
        if document.get("is_deleted"):
            return
        for field in self.unique_fields:
            for other in self._documents.values():
                if (
                    other["id"] != document["id"]
                    and not other.get("is_deleted")
                    and other.get(field) == document.get(field)
                ):
                    raise UniqueViolation(self.name, field, document.get(field))

    async def insert_one(self, document: Mapping[str, Any]) -> Dict[str, Any]:
        self.check_fields(document.keys())
        timestamp = self.database.tick()
        stored = {field: None for field in self.fields}
        stored.update(copy.deepcopy(dict(document)))
        stored["id"] = str(uuid.uuid4())
        stored["is_deleted"] = bool(stored.get("is_deleted") or False)
        stored["created_at"] = timestamp
        stored["updated_at"] = timestamp
        self._check_unique(stored)
        self._documents[stored["id"]] = stored
        return copy.deepcopy(stored)

    async def find_one(self, flt: Filter) -> Optional[Dict[str, Any]]:
        self.check_fields(flt.fields())
        for document in self._documents.values():
            if flt.matches(document):
                return copy.deepcopy(document)
        return None

    async def find(
        self,
        flt: Filter,
        sort: Optional[Sort] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        self.check_fields(flt.fields())
        matched = [d for d in self._documents.values() if flt.matches(d)]
        if sort is not None:
            self.check_fields([sort.field])
            # None sorts before any value, as in the PostgreSQL backend with NULLS FIRST on ASC
            matched.sort(
                key=lambda d: (d.get(sort.field) is not None, d.get(sort.field)),
                reverse=sort.descending,
            )
        start = max(skip or 0, 0)
        end = None if limit is None else start + limit
        return [copy.deepcopy(d) for d in matched[start:end]]

    async def count(self, flt: Filter) -> int:
        self.check_fields(flt.fields())
        return sum(1 for d in self._documents.values() if flt.matches(d))

    async def update_one(self, document_id: str, fields: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        self.check_fields(fields.keys())
        current = self._documents.get(document_id)
        if current is None:
            return None
        updated = dict(current)
        updated.update(copy.deepcopy(dict(fields)))
        updated["id"] = document_id
        updated["created_at"] = current["created_at"]
        updated["updated_at"] = self.database.tick()
        self._check_unique(updated)
        self._documents[document_id] = updated
        return copy.deepcopy(updated)

class MemoryDatabase:
    """In-memory storage backend, used by the test-suite and local runs"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._collections: Dict[str, MemoryCollection] = {}
        self._last_timestamp: Optional[datetime] = None

    async def connect(self):
        self.logger.info("In-memory catalog storage ready")

    async def close(self):
        self._collections.clear()

    def tick(self) -> datetime:
        """Strictly increasing timestamp so created_at ordering is deterministic"""
        timestamp = now_utc()
        if self._last_timestamp is not None and timestamp <= self._last_timestamp:
            timestamp = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = timestamp
        return timestamp

    def collection(self, name: str) -> MemoryCollection:
        if name not in COLLECTION_FIELDS:
            raise KeyError(f"Unknown collection: {name}")
        if name not in self._collections:
            self._collections[name] = MemoryCollection(name, self)
        return self._collections[name]
