# catalog/services/base_service.py
import logging
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..database.collection import UniqueViolation
from ..database.filters import Filter, Sort
from ..errors import DuplicateNameError, EntityNotFoundError, ValidationError
from ..models.base import Reference
from ..utils.formatters import now_utc
from .query_engine import QueryEngine

P = TypeVar("P", bound=BaseModel)

class BaseService:
    """Base class for the catalog services.

    Subclasses own exactly one collection and are the only code that writes
    to it. Lookups always hide soft-deleted records.
    """
    collection_name: str = ""
    entity: str = "Entity"
    not_found: Type[EntityNotFoundError] = EntityNotFoundError

    def __init__(self, db):
        self.db = db
        self.collection = db.collection(self.collection_name)
        self.query_engine = QueryEngine(self.collection)
        self.logger = logging.getLogger(self.__class__.__module__)

    @staticmethod
    def _parse(model: Type[P], payload: Union[P, Mapping[str, Any]]) -> P:
        """Validate a raw payload into its model"""
        if isinstance(payload, model):
            return payload
        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid {model.__name__} payload", {"errors": e.errors(include_url=False)}
            ) from e

    async def _get_active_document(self, entity_id: str) -> Dict[str, Any]:
        document = await self.collection.find_one(Filter.active().where("id", entity_id))
        if not document:
            self.logger.warning(f"{self.entity} {entity_id} not found")
            raise self.not_found(entity_id)
        return document

    async def _ensure_unique_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        """Application-level pre-check; the storage unique index is authoritative"""
        flt = Filter.active().where("name", name)
        if exclude_id is not None:
            flt.exclude("id", exclude_id)
        if await self.collection.find_one(flt):
            self.logger.warning(f"{self.entity} name '{name}' already exists")
            raise DuplicateNameError(self.entity, name)

    async def _insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        document.setdefault("is_deleted", False)
        document.setdefault("deleted_at", None)
        try:
            created = await self.collection.insert_one(document)
        except UniqueViolation as e:
            self.logger.warning(f"Unique index rejected {self.entity} '{e.value}'")
            raise DuplicateNameError(self.entity, e.value) from e
        self.logger.info(f"{self.entity} {created['id']} created")
        return created

    async def _update(self, entity_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        try:
            updated = await self.collection.update_one(entity_id, fields)
        except UniqueViolation as e:
            self.logger.warning(f"Unique index rejected {self.entity} '{e.value}'")
            raise DuplicateNameError(self.entity, e.value) from e
        if updated is None:
            raise self.not_found(entity_id)
        return updated

    async def _soft_delete(self, entity_id: str) -> Dict[str, Any]:
        await self._get_active_document(entity_id)
        deleted = await self._update(entity_id, {"is_deleted": True, "deleted_at": now_utc()})
        self.logger.info(f"{self.entity} {entity_id} soft-deleted")
        return deleted

    async def _find_active(self, flt: Filter) -> List[Dict[str, Any]]:
        return await self.collection.find(flt, sort=Sort("created_at", descending=True))

    async def references(self, ids) -> Dict[str, Reference]:
        """Name summaries for ids, including soft-deleted records"""
        ids = list(dict.fromkeys(ids))
        if not ids:
            return {}
        documents = await self.collection.find(Filter().where_in("id", ids))
        return {d["id"]: self._reference(d) for d in documents}

    def _reference(self, document: Dict[str, Any]) -> Reference:
        return Reference(id=document["id"], name=document["name"])
