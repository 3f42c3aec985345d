import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

import config
from db import session_commit
from enums.order_status import OrderStatus
from exceptions.catalog import InvalidMenuItemDataException, CustomizationOptionNotFoundException
from models.customization import CustomizationOptionDTO, CustomizationOptionUpdateDTO
from models.menu_item import CatalogItemDTO, MenuItemCreateDTO
from models.order import OrderDTO
from repositories.customization import CustomizationRepository
from repositories.menu_category import MenuCategoryRepository
from repositories.menu_item import MenuItemRepository
from services.order import OrderService

logger = logging.getLogger(__name__)


class AdminService:
    """Menu, customization and order management for the admin dashboard."""

    @staticmethod
    async def add_menu_item(item: MenuItemCreateDTO, session: AsyncSession | Session) -> CatalogItemDTO:
        """
        Add a menu item.

        Raises:
            InvalidMenuItemDataException: If a required field is missing, the
                price is not positive or the category doesn't exist
        """
        missing_fields = [field for field in ("name", "description", "category", "image")
                          if not (getattr(item, field) or "").strip()]
        if missing_fields:
            raise InvalidMenuItemDataException(f"missing {', '.join(missing_fields)}")
        if item.price is None or item.price <= 0:
            raise InvalidMenuItemDataException("price must be greater than 0")
        if not 0 <= item.rating <= 5:
            raise InvalidMenuItemDataException("rating must be between 0 and 5")

        categories = await MenuCategoryRepository.get_active(session)
        if item.category not in {category.name for category in categories}:
            raise InvalidMenuItemDataException(f"unknown category '{item.category}'")

        created = await MenuItemRepository.create(item, session)
        await session_commit(session)
        logger.info(f"Menu item {created.id} '{created.name}' added to {created.category}")
        return created

    @staticmethod
    async def add_option(category_id: int, session: AsyncSession | Session) -> CustomizationOptionDTO:
        """
        Add a placeholder option to a customization category, to be edited with update_option().

        Carts select options by name, so the placeholder is named after its id
        (new_option_<id>) to stay unique within the category.
        """
        option = await CustomizationRepository.add_option(CustomizationOptionDTO(
            category_id=category_id,
            name="new_option",
            display_name="New Option",
            sort_order=999
        ), session)
        await CustomizationRepository.rename_option(option.id, f"new_option_{option.id}", session)
        option = option.model_copy(update={"name": f"new_option_{option.id}"})
        await session_commit(session)
        logger.info(f"Customization option {option.id} added to customization category {category_id}")
        return option

    @staticmethod
    async def update_option(
        option_id: int,
        option_update: CustomizationOptionUpdateDTO,
        session: AsyncSession | Session
    ) -> None:
        """
        Raises:
            CustomizationOptionNotFoundException: If the option doesn't exist
        """
        await AdminService._get_option(option_id, session)
        await CustomizationRepository.update_option(option_id, option_update, session)
        await session_commit(session)
        logger.info(f"Customization option {option_id} updated")

    @staticmethod
    async def deactivate_option(option_id: int, session: AsyncSession | Session) -> None:
        """
        Hide an option from the storefront. Carts holding it drop it on the next load.

        Raises:
            CustomizationOptionNotFoundException: If the option doesn't exist
        """
        await AdminService._get_option(option_id, session)
        await CustomizationRepository.set_option_active(option_id, False, session)
        await session_commit(session)
        logger.info(f"Customization option {option_id} deactivated")

    @staticmethod
    async def _get_option(option_id: int, session: AsyncSession | Session) -> CustomizationOptionDTO:
        option = await CustomizationRepository.get_option_by_id(option_id, session)
        if option is None:
            raise CustomizationOptionNotFoundException(option_id)
        return option

    @staticmethod
    async def recent_orders(session: AsyncSession | Session) -> list[OrderDTO]:
        return await OrderService.get_all_orders(session, limit=config.RECENT_ORDERS_LIMIT)

    @staticmethod
    async def update_order_status(order_id: int, status: OrderStatus, session: AsyncSession | Session) -> OrderDTO:
        return await OrderService.update_status(order_id, status, session)
