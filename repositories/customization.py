from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.customization import (
    CategoryCustomization,
    CategoryCustomizationDTO,
    CustomizationCategoryDTO,
    CustomizationOption,
    CustomizationOptionDTO,
    CustomizationOptionUpdateDTO,
)


class CustomizationRepository:
    """Repository for customization categories and their options."""

    @staticmethod
    async def get_for_menu_category(
        menu_category: str,
        session: AsyncSession | Session
    ) -> list[CategoryCustomizationDTO]:
        """
        Get the customizations offered for a menu category.

        Args:
            menu_category: Menu category name (e.g., "Italian")
            session: Database session

        Returns:
            CategoryCustomizationDTOs sorted by sort_order, each carrying only
            its active options, sorted by sort_order
        """
        stmt = (select(CategoryCustomization)
                .where(CategoryCustomization.menu_category == menu_category)
                .order_by(CategoryCustomization.sort_order.asc(), CategoryCustomization.id.asc()))
        result = await session_execute(stmt, session)
        links = result.unique().scalars().all()
        if not links:
            return []

        # Batch load options (prevent N+1 queries)
        category_ids = [link.customization_category_id for link in links]
        options_stmt = (select(CustomizationOption)
                        .where(CustomizationOption.category_id.in_(category_ids),
                               CustomizationOption.is_active == True)
                        .order_by(CustomizationOption.sort_order.asc(), CustomizationOption.id.asc()))
        options_result = await session_execute(options_stmt, session)
        options_by_category: dict[int, list[CustomizationOptionDTO]] = {}
        for option in options_result.scalars().all():
            options_by_category.setdefault(option.category_id, []).append(
                CustomizationOptionDTO.model_validate(option, from_attributes=True)
            )

        return [
            CategoryCustomizationDTO(
                id=link.id,
                menu_category=link.menu_category,
                is_required=link.is_required,
                max_selections=link.max_selections,
                sort_order=link.sort_order,
                customization_category=CustomizationCategoryDTO.model_validate(
                    link.customization_category, from_attributes=True
                ),
                options=tuple(options_by_category.get(link.customization_category_id, []))
            )
            for link in links
        ]

    @staticmethod
    async def get_option_by_id(option_id: int, session: AsyncSession | Session) -> CustomizationOptionDTO | None:
        stmt = select(CustomizationOption).where(CustomizationOption.id == option_id)
        option = await session_execute(stmt, session)
        option = option.scalar()
        if option is not None:
            return CustomizationOptionDTO.model_validate(option, from_attributes=True)
        else:
            return None

    @staticmethod
    async def add_option(option_dto: CustomizationOptionDTO, session: AsyncSession | Session) -> CustomizationOptionDTO:
        option = CustomizationOption(**option_dto.model_dump(exclude={"id"}))
        session.add(option)
        await session_flush(session)
        return CustomizationOptionDTO.model_validate(option, from_attributes=True)

    @staticmethod
    async def update_option(
        option_id: int,
        option_update: CustomizationOptionUpdateDTO,
        session: AsyncSession | Session
    ) -> None:
        stmt = (update(CustomizationOption)
                .where(CustomizationOption.id == option_id)
                .values(**option_update.model_dump()))
        await session_execute(stmt, session)

    @staticmethod
    async def rename_option(option_id: int, name: str, session: AsyncSession | Session) -> None:
        stmt = (update(CustomizationOption)
                .where(CustomizationOption.id == option_id)
                .values(name=name))
        await session_execute(stmt, session)

    @staticmethod
    async def set_option_active(option_id: int, is_active: bool, session: AsyncSession | Session) -> None:
        stmt = (update(CustomizationOption)
                .where(CustomizationOption.id == option_id)
                .values(is_active=is_active))
        await session_execute(stmt, session)
