"""
Reference data seeding.

Creates the default categories and their subcategories if they do not
exist yet. Safe to run on every start-up.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Category, Subcategory

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = ("National", "International")
DEFAULT_SUBCATEGORIES = ("Football", "Basketball", "Tennis")


async def seed_reference_data(db: AsyncSession) -> int:
    """Insert missing default categories/subcategories; returns rows created."""
    created = 0
    for category_name in DEFAULT_CATEGORIES:
        result = await db.execute(select(Category).where(Category.name == category_name))
        category = result.scalar_one_or_none()
        if category is None:
            category = Category(name=category_name)
            db.add(category)
            await db.flush()
            created += 1

        existing = await db.execute(
            select(Subcategory.name).where(Subcategory.category_id == category.id)
        )
        existing_names = set(existing.scalars().all())
        for sub_name in DEFAULT_SUBCATEGORIES:
            if sub_name not in existing_names:
                db.add(Subcategory(name=sub_name, category_id=category.id))
                created += 1

    await db.commit()
    if created:
        logger.info("Seeded %d reference rows", created)
    return created
