"""Catalog services"""
from dataclasses import dataclass

from .aggregation_service import AggregationService
from .category_service import CategoryService
from .consistency import ConsistencyValidator
from .course_service import CourseService
from .query_engine import QueryEngine
from .subcategory_service import SubCategoryService

@dataclass
class CatalogServices:
    """The services wired over one storage backend"""
    categories: CategoryService
    subcategories: SubCategoryService
    courses: CourseService
    reports: AggregationService

    @classmethod
    def from_database(cls, db) -> "CatalogServices":
        reports = AggregationService(db)
        categories = CategoryService(db, reports)
        subcategories = SubCategoryService(db, categories)
        courses = CourseService(
            db, categories, subcategories, ConsistencyValidator(subcategories)
        )
        return cls(
            categories=categories,
            subcategories=subcategories,
            courses=courses,
            reports=reports,
        )

__all__ = [
    'AggregationService',
    'CatalogServices',
    'CategoryService',
    'ConsistencyValidator',
    'CourseService',
    'QueryEngine',
    'SubCategoryService',
]
