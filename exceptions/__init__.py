"""
Custom exceptions for the FoodHub storefront.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the application.

Exception Hierarchy:
--------------------
FoodHubException (base)
├── CatalogException
│   ├── CatalogLookupException
│   ├── MenuItemNotFoundException
│   ├── InvalidMenuItemDataException
│   ├── InvalidCustomizationException
│   └── CustomizationOptionNotFoundException
├── StorageException
│   ├── StorageUnavailableException
│   └── RemoteFetchException
├── OrderException
│   ├── OrderNotFoundException
│   └── OrderPlacementException
└── UserException
    └── UserNotFoundException

Usage:
------
Services raise specific exceptions:
    raise OrderNotFoundException(order_id=123)

The cart engine recovers from catalog and storage errors itself; only
OrderPlacementException is meant to reach the customer:
    try:
        order = await store.checkout(delivery, PaymentMethod.CARD)
    except OrderPlacementException as e:
        show_error(str(e))
"""

from .base import FoodHubException
from .catalog import (
    CatalogException,
    CatalogLookupException,
    MenuItemNotFoundException,
    InvalidMenuItemDataException,
    InvalidCustomizationException,
    CustomizationOptionNotFoundException
)
from .storage import StorageException, StorageUnavailableException, RemoteFetchException
from .order import OrderException, OrderNotFoundException, OrderPlacementException
from .user import UserException, UserNotFoundException

__all__ = [
    # Base
    'FoodHubException',

    # Catalog
    'CatalogException',
    'CatalogLookupException',
    'MenuItemNotFoundException',
    'InvalidMenuItemDataException',
    'InvalidCustomizationException',
    'CustomizationOptionNotFoundException',

    # Storage
    'StorageException',
    'StorageUnavailableException',
    'RemoteFetchException',

    # Order
    'OrderException',
    'OrderNotFoundException',
    'OrderPlacementException',

    # User
    'UserException',
    'UserNotFoundException',
]
