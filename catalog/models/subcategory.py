# catalog/models/subcategory.py
from typing import ClassVar, Optional
from pydantic import Field
from .base import (
    DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH, NAME_MIN_LENGTH, Payload, Reference, SoftDeleteModel
)

class SubCategory(SoftDeleteModel):
    """Second tier; belongs to exactly one Category"""
    name: str
    description: Optional[str] = None
    category: str

    # Not stored in DB, populated when needed
    parent: Optional[Reference] = None

class SubCategoryReference(Reference):
    category: str

class SubCategoryCreate(Payload):
    name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    category: str = Field(min_length=1)

class SubCategoryUpdate(Payload):
    non_nullable: ClassVar[tuple] = ("name", "category")

    name: Optional[str] = Field(None, min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    category: Optional[str] = Field(None, min_length=1)
