# main.py
import argparse
import asyncio
import logging
from catalog.config import Config, setup_logging
from catalog.database.database import Database
from catalog.database.memory import MemoryDatabase
from catalog.services import CatalogServices
from catalog.utils.formatters import format_datetime, format_duration

async def seed_demo_data(services: CatalogServices):
    """Create a small sample hierarchy"""
    web = await services.categories.create({"name": "Web Development", "description": "Learn web development"})
    mobile = await services.categories.create({"name": "Mobile Development"})
    javascript = await services.subcategories.create({"name": "JavaScript", "category": web.id})
    await services.subcategories.create({"name": "Flutter", "category": mobile.id})
    await services.courses.create({
        "name": "Full Stack",
        "duration": 120,
        "level": "intermediate",
        "categories": [web.id],
        "sub_categories": [javascript.id],
    })

def print_report(report):
    stats = report["statistics"]
    print(f"Categories: {stats['total_categories']}  Courses: {stats['total_courses']}")
    print(
        f"Duration avg/min/max: {format_duration(stats['average_duration'])} / "
        f"{format_duration(stats['min_duration'])} / {format_duration(stats['max_duration'])}"
    )
    for row in report["categories"]:
        print(f"  {row['name']} ({row['subcategory_count']} sub-categories, created {format_datetime(row['created_at'])})")
    for group in report["levels"]:
        print(f"  {group['level']}: {group['total_courses']} courses, avg {format_duration(group['average_duration'])}")

async def main():
    parser = argparse.ArgumentParser(description="Course catalog report")
    parser.add_argument("--memory", action="store_true", help="Use in-memory storage instead of PostgreSQL")
    parser.add_argument("--demo", action="store_true", help="Seed sample data before reporting")
    args = parser.parse_args()

    # Setup logging
    setup_logging()
    logger = logging.getLogger(__name__)

    db = MemoryDatabase() if args.memory or not Config.DATABASE_URL else Database()
    try:
        await db.connect()
        services = CatalogServices.from_database(db)
        if args.demo:
            await seed_demo_data(services)
        print_report(await services.reports.get_summary_report())
    except Exception as e:
        logger.error(f"Error building catalog report: {e}", exc_info=True)
        raise
    finally:
        await db.close()

if __name__ == "__main__":
    asyncio.run(main())
