#!/usr/bin/env python3
"""
Create the database tables and seed the default menu.

Seeds menu categories, the six default menu items and two customization
categories (spice level, extra toppings). Skips seeding when the menu
already has categories.

Usage:
    python -m tools.seed_menu
"""

import asyncio
import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import get_db_session, create_db_and_tables, session_execute, session_flush, session_commit
from models.customization import CustomizationCategory, CategoryCustomization, CustomizationOption
from models.menu_category import MenuCategory, MenuCategoryDTO
from models.menu_item import MenuItem
from repositories.menu_category import MenuCategoryRepository
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Italian", "🍕"),
    ("Burgers", "🍔"),
    ("Salads", "🥗"),
    ("Desserts", "🍰"),
    ("Seafood", "🐟"),
]

DEFAULT_ITEMS = [
    (1, "Margherita Pizza", "Fresh mozzarella, tomato sauce, and basil", "299", "🍕", "Italian", 4.8, True),
    (2, "Chicken Burger", "Grilled chicken with lettuce, tomato, and special sauce", "199", "🍔", "Burgers", 4.6, True),
    (3, "Caesar Salad", "Fresh romaine lettuce, parmesan cheese, and croutons", "149", "🥗", "Salads", 4.5, False),
    (4, "Pasta Carbonara", "Spaghetti with eggs, cheese, and pancetta", "249", "🍝", "Italian", 4.7, True),
    (5, "Chocolate Cake", "Rich chocolate cake with vanilla ice cream", "129", "🍰", "Desserts", 4.9, False),
    (6, "Grilled Salmon", "Fresh salmon with herbs and lemon butter sauce", "399", "🐟", "Seafood", 4.8, True),
]

# name, display name, options (name, display name, price adjustment, is_default)
SPICE_LEVEL = ("spice_level", "Spice Level", [
    ("mild", "Mild", "0", False),
    ("medium", "Medium", "0", True),
    ("hot", "Hot", "0", False),
])
EXTRA_TOPPINGS = ("extra_toppings", "Extra Toppings", [
    ("cheese", "Extra Cheese", "20", False),
    ("olives", "Olives", "20", False),
    ("mushrooms", "Mushrooms", "20", False),
    ("jalapenos", "Jalapeños", "20", False),
])

# menu category -> [(customization category name, is_required, max_selections)]
CATEGORY_CUSTOMIZATIONS = {
    "Italian": [("spice_level", False, 1), ("extra_toppings", False, 3)],
    "Burgers": [("spice_level", False, 1), ("extra_toppings", False, 3)],
    "Seafood": [("spice_level", False, 1)],
}


async def seed_menu(session: AsyncSession | Session) -> bool:
    """
    Insert the default menu.

    Returns:
        False if the menu already had categories and nothing was inserted
    """
    existing = await session_execute(select(MenuCategory.id).limit(1), session)
    if existing.scalar() is not None:
        logger.info("Menu already seeded, skipping")
        return False

    for display_order, (name, icon) in enumerate(DEFAULT_CATEGORIES):
        await MenuCategoryRepository.create(
            MenuCategoryDTO(name=name, icon=icon, display_order=display_order, is_active=True), session
        )

    for item_id, name, description, price, image, category, rating, popular in DEFAULT_ITEMS:
        session.add(MenuItem(id=item_id, name=name, description=description, price=Decimal(price),
                             image=image, category=category, rating=rating, popular=popular, is_active=True))

    customization_ids = {}
    for name, display_name, options in (SPICE_LEVEL, EXTRA_TOPPINGS):
        customization_category = CustomizationCategory(name=name, display_name=display_name, is_active=True)
        session.add(customization_category)
        await session_flush(session)
        customization_ids[name] = customization_category.id
        for sort_order, (option_name, option_display_name, adjustment, is_default) in enumerate(options):
            session.add(CustomizationOption(
                category_id=customization_category.id,
                name=option_name,
                display_name=option_display_name,
                price_adjustment=Decimal(adjustment),
                is_default=is_default,
                is_active=True,
                sort_order=sort_order
            ))

    for menu_category, links in CATEGORY_CUSTOMIZATIONS.items():
        for sort_order, (name, is_required, max_selections) in enumerate(links):
            session.add(CategoryCustomization(
                menu_category=menu_category,
                customization_category_id=customization_ids[name],
                is_required=is_required,
                max_selections=max_selections,
                sort_order=sort_order
            ))

    await session_commit(session)
    logger.info(f"Seeded {len(DEFAULT_CATEGORIES)} categories and {len(DEFAULT_ITEMS)} menu items")
    return True


async def main():
    setup_logging()
    await create_db_and_tables()
    async with get_db_session() as session:
        await seed_menu(session)


if __name__ == "__main__":
    asyncio.run(main())
