# catalog/services/aggregation_service.py
import asyncio
from collections import defaultdict
from typing import Any, Dict, List
from ..database.filters import Filter

class AggregationService:
    """Read-only reporting views over the catalog.

    Each view is a fixed pipeline: filter active records, join the parent
    tier by id, group, project and sort. Nothing here writes.
    """

    def __init__(self, db):
        self.db = db
        self.categories = db.collection("categories")
        self.subcategories = db.collection("subcategories")
        self.courses = db.collection("courses")

    async def categories_with_subcategory_count(self) -> List[Dict[str, Any]]:
        """Active categories with the count of their active sub-categories"""
        categories, subcategories = await asyncio.gather(
            self.categories.find(Filter.active()),
            self.subcategories.find(Filter.active()),
        )

        counts: Dict[str, int] = defaultdict(int)
        for sub in subcategories:
            counts[sub["category"]] += 1

        rows = [
            {
                "id": c["id"],
                "name": c["name"],
                "description": c.get("description"),
                "subcategory_count": counts.get(c["id"], 0),
                "created_at": c["created_at"],
                "updated_at": c["updated_at"],
            }
            for c in categories
        ]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return rows

    async def subcategories_by_category(self) -> List[Dict[str, Any]]:
        """Active sub-categories grouped under their parent category"""
        subcategories = await self.subcategories.find(Filter.active())
        parent_ids = list(dict.fromkeys(s["category"] for s in subcategories))
        parents = {
            c["id"]: c
            for c in (await self.categories.find(Filter().where_in("id", parent_ids)) if parent_ids else [])
        }

        groups: Dict[str, Dict[str, Any]] = {}
        for sub in subcategories:
            parent = parents.get(sub["category"])
            if parent is None:
                continue
            group = groups.setdefault(parent["id"], {
                "category_id": parent["id"],
                "category_name": parent["name"],
                "sub_categories": [],
                "total_sub_categories": 0,
            })
            group["sub_categories"].append({
                "id": sub["id"],
                "name": sub["name"],
                "description": sub.get("description"),
            })
            group["total_sub_categories"] += 1

        return sorted(groups.values(), key=lambda g: g["category_name"])

    async def courses_by_level(self) -> List[Dict[str, Any]]:
        """Active courses grouped by level with count and average duration"""
        courses = await self.courses.find(Filter.active())

        groups: Dict[str, Dict[str, Any]] = {}
        for course in courses:
            group = groups.setdefault(course["level"], {
                "level": course["level"],
                "courses": [],
                "total_courses": 0,
                "average_duration": None,
            })
            group["courses"].append({
                "id": course["id"],
                "name": course["name"],
                "description": course.get("description"),
                "duration": course["duration"],
            })
            group["total_courses"] += 1

        for group in groups.values():
            durations = [c["duration"] for c in group["courses"]]
            group["average_duration"] = sum(durations) / len(durations)

        return sorted(groups.values(), key=lambda g: g["total_courses"], reverse=True)

    async def statistics(self) -> Dict[str, Any]:
        """Active category count plus course duration statistics"""
        total_categories, courses = await asyncio.gather(
            self.categories.count(Filter.active()),
            self.courses.find(Filter.active()),
        )

        durations = [c["duration"] for c in courses]

        return {
            "total_categories": total_categories,
            "total_courses": len(durations),
            "average_duration": sum(durations) / len(durations) if durations else None,
            "max_duration": max(durations) if durations else None,
            "min_duration": min(durations) if durations else None,
        }

    async def courses_with_details(self) -> List[Dict[str, Any]]:
        """Active courses with how many of their references resolve"""
        courses = await self.courses.find(Filter.active())
        category_ids = list({cid for c in courses for cid in c["categories"]})
        sub_category_ids = list({sid for c in courses for sid in c["sub_categories"]})

        known_categories, known_sub_categories = await asyncio.gather(
            self._existing_ids(self.categories, category_ids),
            self._existing_ids(self.subcategories, sub_category_ids),
        )

        return [
            {
                "id": c["id"],
                "name": c["name"],
                "description": c.get("description"),
                "duration": c["duration"],
                "level": c["level"],
                "categories": c["categories"],
                "sub_categories": c["sub_categories"],
                "category_count": sum(1 for i in c["categories"] if i in known_categories),
                "sub_category_count": sum(1 for i in c["sub_categories"] if i in known_sub_categories),
                "created_at": c["created_at"],
                "updated_at": c["updated_at"],
            }
            for c in courses
        ]

    async def get_summary_report(self) -> Dict[str, Any]:
        """Combined catalog report"""
        stats, categories, levels = await asyncio.gather(
            self.statistics(),
            self.categories_with_subcategory_count(),
            self.courses_by_level(),
        )
        return {
            "statistics": stats,
            "categories": categories,
            "levels": levels,
        }

    @staticmethod
    async def _existing_ids(collection, ids: List[str]) -> set:
        if not ids:
            return set()
        documents = await collection.find(Filter().where_in("id", ids))
        return {d["id"] for d in documents}
