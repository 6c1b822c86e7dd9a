# catalog/models/category.py
from typing import ClassVar, Optional
from pydantic import Field
from .base import (
    DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH, NAME_MIN_LENGTH, Payload, SoftDeleteModel
)

class Category(SoftDeleteModel):
    """Root tier of the catalog"""
    name: str
    description: Optional[str] = None

class CategoryCreate(Payload):
    name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)

class CategoryUpdate(Payload):
    non_nullable: ClassVar[tuple] = ("name",)

    name: Optional[str] = Field(None, min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
