# catalog/services/consistency.py
import logging
from typing import Iterable

from ..errors import SubCategoryCategoryMismatchError, SubCategoryNotFoundError
from .subcategory_service import SubCategoryService

class ConsistencyValidator:
    """Cross-tier rules checked before a course is written.

    Read-only: it looks sub-categories up and decides, it never writes.
    """

    def __init__(self, subcategory_service: SubCategoryService):
        self.subcategory_service = subcategory_service
        self.logger = logging.getLogger(__name__)

    async def validate_subcategories_belong_to_categories(
        self, category_ids: Iterable[str], sub_category_ids: Iterable[str]
    ) -> None:
        """Every sub-category must be active and owned by one of category_ids.

        Raises SubCategoryNotFoundError when an id is unknown or soft-deleted,
        and SubCategoryCategoryMismatchError listing every sub-category whose
        parent is outside category_ids.
        """
        requested = list(dict.fromkeys(sub_category_ids))
        allowed = set(category_ids)

        found = {s.id: s for s in await self.subcategory_service.find_by_ids(requested)}
        if len(found) != len(requested):
            missing = [i for i in requested if i not in found]
            self.logger.warning(f"SubCategories not found: {missing}")
            raise SubCategoryNotFoundError.for_ids(missing)

        offenders = [i for i in requested if found[i].category not in allowed]
        if offenders:
            self.logger.warning(f"SubCategories outside {sorted(allowed)}: {offenders}")
            raise SubCategoryCategoryMismatchError(offenders)
