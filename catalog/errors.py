# catalog/errors.py
"""
Error kinds raised by the catalog services.

Each error carries a stable ``error_code`` and a ``status_code`` hint so a
boundary layer can map it to a response without parsing the message.
"""
from typing import Any, Dict, Iterable, Optional

class CatalogError(Exception):
    """Base exception for all catalog errors."""

    error_code = "CATALOG_ERROR"
    status_code = 400

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or "An error occurred"
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        payload = {"error_code": self.error_code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload

class ValidationError(CatalogError):
    """Malformed or missing payload fields."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message=None, details=None):
        super().__init__(message or "Validation failed", details)

class DuplicateNameError(CatalogError):
    """An active record of the same type already uses this name."""

    error_code = "DUPLICATE_NAME"

    def __init__(self, entity: str, name: str):
        super().__init__(f"{entity} name already exists", {"entity": entity, "name": name})

class EntityNotFoundError(CatalogError):
    """The targeted id does not resolve to an active record."""

    error_code = "ENTITY_NOT_FOUND"
    status_code = 404
    entity = "Entity"

    def __init__(self, entity_id: str, message: Optional[str] = None):
        super().__init__(
            message or f"{self.entity} with ID {entity_id} not found",
            {"entity": self.entity, "id": entity_id},
        )

class CategoryNotFoundError(EntityNotFoundError):
    error_code = "CATEGORY_NOT_FOUND"
    entity = "Category"

class SubCategoryNotFoundError(EntityNotFoundError):
    error_code = "SUBCATEGORY_NOT_FOUND"
    entity = "SubCategory"

    @classmethod
    def for_ids(cls, missing_ids: Iterable[str]) -> "SubCategoryNotFoundError":
        missing = sorted(missing_ids)
        error = cls(", ".join(missing), "One or more SubCategories not found")
        error.details["ids"] = missing
        return error

class CourseNotFoundError(EntityNotFoundError):
    error_code = "COURSE_NOT_FOUND"
    entity = "Course"

class SubCategoryCategoryMismatchError(CatalogError):
    """One or more SubCategories do not belong to any of the selected Categories."""

    error_code = "SUBCATEGORY_CATEGORY_MISMATCH"

    def __init__(self, sub_category_ids: Iterable[str]):
        offenders = list(sub_category_ids)
        super().__init__(
            "All selected SubCategories must belong to the selected Categories",
            {"sub_category_ids": offenders},
        )
        self.sub_category_ids = offenders
