"""Shared fixtures for the catalog test-suite.

Services run over the in-memory backend, so no database is needed. Builders
are plain async helpers that tests await directly.
"""
import pytest

from catalog.database.memory import MemoryDatabase
from catalog.services import CatalogServices

@pytest.fixture
def db():
    """Fresh in-memory storage per test."""
    return MemoryDatabase()

@pytest.fixture
def services(db):
    """Services wired over the in-memory storage."""
    return CatalogServices.from_database(db)

@pytest.fixture
def web_hierarchy(services):
    """Async builder for the Web Development / JavaScript hierarchy."""

    async def build():
        web = await services.categories.create(
            {"name": "Web Development", "description": "Learn web development"}
        )
        javascript = await services.subcategories.create(
            {"name": "JavaScript", "description": "The language of the web", "category": web.id}
        )
        return web, javascript

    return build

@pytest.fixture
def course_payload():
    """Factory for a valid course payload."""

    def make(name, categories, sub_categories, **overrides):
        payload = {
            "name": name,
            "duration": 120,
            "level": "intermediate",
            "categories": list(categories),
            "sub_categories": list(sub_categories),
        }
        payload.update(overrides)
        return payload

    return make
