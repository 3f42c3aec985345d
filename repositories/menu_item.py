from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

import config
from db import session_execute, session_flush
from models.menu_item import MenuItem, CatalogItemDTO, MenuItemCreateDTO


class MenuItemRepository:

    @staticmethod
    def to_catalog_item(menu_item: MenuItem) -> CatalogItemDTO:
        """Apply storefront display defaults to a menu_items row."""
        return CatalogItemDTO(
            id=menu_item.id,
            name=menu_item.name,
            description=menu_item.description or "",
            price=menu_item.price,
            image=menu_item.image or config.DEFAULT_ITEM_IMAGE,
            category=menu_item.category,
            rating=menu_item.rating if menu_item.rating is not None else config.DEFAULT_ITEM_RATING,
            popular=bool(menu_item.popular)
        )

    @staticmethod
    async def get_active(session: AsyncSession | Session) -> list[CatalogItemDTO]:
        stmt = (select(MenuItem)
                .where(MenuItem.is_active == True)
                .order_by(MenuItem.popular.desc(), MenuItem.name.asc()))
        items = await session_execute(stmt, session)
        return [MenuItemRepository.to_catalog_item(item) for item in items.scalars().all()]

    @staticmethod
    async def get_by_id(item_id: int, session: AsyncSession | Session) -> CatalogItemDTO | None:
        stmt = select(MenuItem).where(MenuItem.id == item_id, MenuItem.is_active == True)
        item = await session_execute(stmt, session)
        item = item.scalar()
        if item is not None:
            return MenuItemRepository.to_catalog_item(item)
        else:
            return None

    @staticmethod
    async def get_by_category(category: str, session: AsyncSession | Session) -> list[CatalogItemDTO]:
        stmt = (select(MenuItem)
                .where(MenuItem.category == category, MenuItem.is_active == True)
                .order_by(MenuItem.popular.desc(), MenuItem.name.asc()))
        items = await session_execute(stmt, session)
        return [MenuItemRepository.to_catalog_item(item) for item in items.scalars().all()]

    @staticmethod
    async def get_popular(limit: int, session: AsyncSession | Session) -> list[CatalogItemDTO]:
        stmt = (select(MenuItem)
                .where(MenuItem.popular == True, MenuItem.is_active == True)
                .order_by(MenuItem.rating.desc())
                .limit(limit))
        items = await session_execute(stmt, session)
        return [MenuItemRepository.to_catalog_item(item) for item in items.scalars().all()]

    @staticmethod
    async def create(item_dto: MenuItemCreateDTO, session: AsyncSession | Session) -> CatalogItemDTO:
        menu_item = MenuItem(**item_dto.model_dump(), is_active=True)
        session.add(menu_item)
        await session_flush(session)
        return MenuItemRepository.to_catalog_item(menu_item)
