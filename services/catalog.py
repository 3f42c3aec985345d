import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

import config
from db import session_rollback
from exceptions.catalog import CatalogLookupException, InvalidCustomizationException, MenuItemNotFoundException
from models.cart import ChosenOption, Customization, MultiSelect, SingleSelect
from models.catalog_snapshot import CatalogSnapshotDTO
from models.customization import CategoryCustomizationDTO
from models.menu_category import CategorySummaryDTO
from models.menu_item import CatalogItemDTO
from repositories.customization import CustomizationRepository
from repositories.menu_category import MenuCategoryRepository
from repositories.menu_item import MenuItemRepository

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"
ALL_CATEGORIES_ICON = "🍽️"


class CatalogService:
    """
    Read access to the menu for the storefront and the cart engine.

    Lookups used by the cart (get_item, list_customizations) wrap database
    errors in CatalogLookupException so the cart can drop just the affected
    line instead of failing as a whole.
    """

    @staticmethod
    async def list_active_items(session: AsyncSession | Session) -> list[CatalogItemDTO]:
        return await MenuItemRepository.get_active(session)

    @staticmethod
    async def get_item(item_id: int, session: AsyncSession | Session) -> CatalogItemDTO | None:
        """
        Returns:
            The active item, or None if it was deleted or deactivated

        Raises:
            CatalogLookupException: If the catalog could not be queried
        """
        try:
            return await MenuItemRepository.get_by_id(item_id, session)
        except SQLAlchemyError as e:
            await session_rollback(session)
            raise CatalogLookupException(str(e), item_id=item_id)

    @staticmethod
    async def list_customizations(
        menu_category: str,
        session: AsyncSession | Session
    ) -> list[CategoryCustomizationDTO]:
        """
        Raises:
            CatalogLookupException: If the catalog could not be queried
        """
        try:
            return await CustomizationRepository.get_for_menu_category(menu_category, session)
        except SQLAlchemyError as e:
            await session_rollback(session)
            raise CatalogLookupException(str(e), menu_category=menu_category)

    @staticmethod
    async def get_item_details(
        item_id: int,
        session: AsyncSession | Session
    ) -> tuple[CatalogItemDTO, list[CategoryCustomizationDTO]]:
        """
        Item detail page data: the item and the customizations offered for its category.

        Raises:
            MenuItemNotFoundException: If the item is missing or inactive
            CatalogLookupException: If the catalog could not be queried
        """
        item = await CatalogService.get_item(item_id, session)
        if item is None:
            raise MenuItemNotFoundException(item_id)
        customizations = await CatalogService.list_customizations(item.category, session)
        return item, customizations

    @staticmethod
    async def list_categories(session: AsyncSession | Session) -> list[CategorySummaryDTO]:
        """
        Categories for the category bar, "All" first.

        Categories without active items are left out.
        """
        categories = await MenuCategoryRepository.get_active(session)
        counts = await MenuCategoryRepository.get_active_item_counts(session)
        summaries = [CategorySummaryDTO(name=ALL_CATEGORIES, icon=ALL_CATEGORIES_ICON, count=sum(counts.values()))]
        for category in categories:
            count = counts.get(category.name, 0)
            if count > 0:
                summaries.append(CategorySummaryDTO(
                    name=category.name,
                    icon=category.icon or ALL_CATEGORIES_ICON,
                    count=count
                ))
        return summaries

    @staticmethod
    async def items_by_category(category: str, session: AsyncSession | Session) -> list[CatalogItemDTO]:
        if category == ALL_CATEGORIES:
            return await MenuItemRepository.get_active(session)
        return await MenuItemRepository.get_by_category(category, session)

    @staticmethod
    async def popular_items(session: AsyncSession | Session, limit: int | None = None) -> list[CatalogItemDTO]:
        return await MenuItemRepository.get_popular(limit or config.POPULAR_ITEMS_LIMIT, session)

    @staticmethod
    async def get_snapshot(item_ids: list[int], session: AsyncSession | Session) -> CatalogSnapshotDTO:
        """
        Fetch current data for the given items and the customizations of their categories.

        Lookup failures are logged and leave the affected entry out of the
        snapshot; the cart treats a missing entry as "drop the line".
        """
        items = {}
        for item_id in dict.fromkeys(item_ids):
            try:
                item = await CatalogService.get_item(item_id, session)
            except CatalogLookupException as e:
                logger.error(str(e))
                continue
            if item is not None:
                items[item_id] = item

        customizations = {}
        for menu_category in dict.fromkeys(item.category for item in items.values()):
            try:
                offered = await CatalogService.list_customizations(menu_category, session)
            except CatalogLookupException as e:
                logger.error(str(e))
                continue
            customizations[menu_category] = tuple(offered)

        return CatalogSnapshotDTO(items=items, customizations=customizations)

    @staticmethod
    def default_selections(customizations: list[CategoryCustomizationDTO]) -> dict[str, str | list[str]]:
        """
        Preselected options for the item detail page.

        Single-select categories get their default option (or nothing),
        multi-select categories start empty.
        """
        selections = {}
        for offer in customizations:
            if offer.is_multi_select:
                selections[offer.customization_category.name] = []
            else:
                default = next((option.name for option in offer.options if option.is_default), "")
                selections[offer.customization_category.name] = default
        return selections

    @staticmethod
    def build_customization(
        customizations: list[CategoryCustomizationDTO],
        raw_selections: dict[str, str | list[str]],
        special_instructions: str | None = None
    ) -> Customization:
        """
        Turn the item page form into a priced Customization.

        Args:
            customizations: Offered customizations of the item's category
            raw_selections: Chosen option names by customization category name;
                a string for single-select, a list for multi-select
            special_instructions: Free text for the kitchen

        Raises:
            InvalidCustomizationException: On unknown categories or options,
                too many options, or a missing required choice
        """
        offered_by_name = {offer.customization_category.name: offer for offer in customizations}
        selections = {}
        for category_name, raw_selection in raw_selections.items():
            offer = offered_by_name.get(category_name)
            if offer is None:
                raise InvalidCustomizationException(category_name, "not offered for this item")

            names = [raw_selection] if isinstance(raw_selection, str) else list(raw_selection)
            names = [name for name in names if name]
            if len(set(names)) != len(names):
                raise InvalidCustomizationException(category_name, "options may only be chosen once")
            if len(names) > offer.max_selections:
                raise InvalidCustomizationException(
                    category_name, f"at most {offer.max_selections} option(s) may be chosen"
                )

            options_by_name = {option.name: option for option in offer.options}
            chosen = []
            for name in names:
                option = options_by_name.get(name)
                if option is None:
                    raise InvalidCustomizationException(category_name, f"option '{name}' is not available")
                chosen.append(ChosenOption(name=option.name, price_adjustment=option.price_adjustment))

            if offer.is_multi_select:
                selections[category_name] = MultiSelect(options=tuple(chosen))
            elif chosen:
                selections[category_name] = SingleSelect(option=chosen[0])

        for offer in customizations:
            category_name = offer.customization_category.name
            if offer.is_required and not (category_name in selections and selections[category_name].chosen):
                raise InvalidCustomizationException(category_name, "a choice is required")

        special_instructions = (special_instructions or "").strip() or None
        return Customization(selections=selections, special_instructions=special_instructions)
