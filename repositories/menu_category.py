from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.menu_category import MenuCategory, MenuCategoryDTO
from models.menu_item import MenuItem


class MenuCategoryRepository:

    @staticmethod
    async def get_active(session: AsyncSession | Session) -> list[MenuCategoryDTO]:
        stmt = (select(MenuCategory)
                .where(MenuCategory.is_active == True)
                .order_by(MenuCategory.display_order.asc(), MenuCategory.name.asc()))
        categories = await session_execute(stmt, session)
        return [MenuCategoryDTO.model_validate(category, from_attributes=True)
                for category in categories.scalars().all()]

    @staticmethod
    async def get_active_item_counts(session: AsyncSession | Session) -> dict[str, int]:
        """
        Count active menu items per category name in a single query.

        Returns:
            Dict mapping category name -> number of active items
            (categories without active items are absent)
        """
        stmt = (select(MenuItem.category, func.count(MenuItem.id))
                .where(MenuItem.is_active == True)
                .group_by(MenuItem.category))
        result = await session_execute(stmt, session)
        return {category: count for category, count in result.all()}

    @staticmethod
    async def create(category_dto: MenuCategoryDTO, session: AsyncSession | Session) -> MenuCategoryDTO:
        category = MenuCategory(**category_dto.model_dump(exclude_none=True))
        session.add(category)
        await session_flush(session)
        return MenuCategoryDTO.model_validate(category, from_attributes=True)
