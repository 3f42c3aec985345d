"""
Catalog-related exceptions (menu items and customizations).
"""

from .base import FoodHubException


class CatalogException(FoodHubException):
    """Base exception for catalog-related errors."""
    pass


class CatalogLookupException(CatalogException):
    """Raised when the catalog cannot be queried for an item or menu category."""

    def __init__(self, reason: str, item_id: int | None = None, menu_category: str | None = None):
        if item_id is not None:
            message = f"Catalog lookup failed for item {item_id}: {reason}"
        elif menu_category is not None:
            message = f"Catalog lookup failed for menu category '{menu_category}': {reason}"
        else:
            message = f"Catalog lookup failed: {reason}"
        super().__init__(
            message,
            details={'item_id': item_id, 'menu_category': menu_category, 'reason': reason}
        )
        self.item_id = item_id
        self.menu_category = menu_category
        self.reason = reason


class MenuItemNotFoundException(CatalogException):
    """Raised when a menu item does not exist or is inactive."""

    def __init__(self, item_id: int):
        super().__init__(
            f"Menu item {item_id} not found",
            details={'item_id': item_id}
        )
        self.item_id = item_id


class InvalidMenuItemDataException(CatalogException):
    """Raised when admin input for a new menu item is incomplete or invalid."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid menu item: {reason}",
            details={'reason': reason}
        )
        self.reason = reason


class InvalidCustomizationException(CatalogException):
    """Raised when selected customization options don't fit the item's customization rules."""

    def __init__(self, category_name: str, reason: str):
        super().__init__(
            f"Invalid customization for '{category_name}': {reason}",
            details={'category_name': category_name, 'reason': reason}
        )
        self.category_name = category_name
        self.reason = reason


class CustomizationOptionNotFoundException(CatalogException):
    """Raised when a customization option id does not exist."""

    def __init__(self, option_id: int):
        super().__init__(
            f"Customization option {option_id} not found",
            details={'option_id': option_id}
        )
        self.option_id = option_id
