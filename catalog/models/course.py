# catalog/models/course.py
from enum import Enum
from typing import ClassVar, List, Optional
from pydantic import Field, field_validator
from .base import (
    DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH, NAME_MIN_LENGTH,
    Payload, Reference, SoftDeleteModel, unique_ids
)
from .subcategory import SubCategoryReference

class CourseLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

class Course(SoftDeleteModel):
    """Leaf tier; linked to one or more Categories and SubCategories"""
    name: str
    description: Optional[str] = None
    duration: float  # hours
    level: CourseLevel
    categories: List[str]
    sub_categories: List[str]

    # Not stored in DB, populated when needed
    category_details: List[Reference] = []
    sub_category_details: List[SubCategoryReference] = []

class CourseCreate(Payload):
    name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    duration: float = Field(gt=0)
    level: CourseLevel
    categories: List[str] = Field(min_length=1)
    sub_categories: List[str] = Field(min_length=1)

    _dedupe = field_validator("categories", "sub_categories")(unique_ids)

class CourseUpdate(Payload):
    non_nullable: ClassVar[tuple] = ("name", "duration", "level", "categories", "sub_categories")

    name: Optional[str] = Field(None, min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    duration: Optional[float] = Field(None, gt=0)
    level: Optional[CourseLevel] = None
    categories: Optional[List[str]] = Field(None, min_length=1)
    sub_categories: Optional[List[str]] = Field(None, min_length=1)

    _dedupe = field_validator("categories", "sub_categories")(unique_ids)
