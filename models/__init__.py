"""
Models Package

This file ensures all SQLAlchemy models are imported and registered,
which is required for relationships to work correctly.
"""

from models.base import Base
from models.menu_category import MenuCategory
from models.menu_item import MenuItem
from models.customization import CustomizationCategory, CategoryCustomization, CustomizationOption
from models.user import User
from models.user_cart import UserCart
from models.order import Order

__all__ = [
    'Base',
    'MenuCategory',
    'MenuItem',
    'CustomizationCategory',
    'CategoryCustomization',
    'CustomizationOption',
    'User',
    'UserCart',
    'Order',
]
