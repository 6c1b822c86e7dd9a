# catalog/models/base.py
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, model_validator

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

class LifecycleState(str, Enum):
    """Soft-delete state; the only transition is ACTIVE -> DELETED"""
    ACTIVE = "active"
    DELETED = "deleted"

class TimeStampedModel(BaseModel):
    """Base model with timestamp fields"""
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class SoftDeleteModel(TimeStampedModel):
    """Stored record that is never removed, only flagged as deleted"""
    id: str
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None

    @property
    def state(self) -> LifecycleState:
        return LifecycleState.DELETED if self.is_deleted else LifecycleState.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state is LifecycleState.ACTIVE

class Reference(BaseModel):
    """Summary of a referenced record attached during hydration"""
    id: str
    name: str

class Payload(BaseModel):
    """Base for create/update payloads"""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    # Fields that may be omitted from an update but never set to null
    non_nullable: ClassVar[tuple] = ()

    @model_validator(mode="after")
    def _reject_null(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly provided by the caller"""
        return self.model_dump(mode="json", exclude_unset=True)

def unique_ids(values: Optional[List[str]]) -> Optional[List[str]]:
    """Drop repeated ids, keeping first occurrence order"""
    if values is None:
        return None
    return list(dict.fromkeys(values))
