from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Column, Integer, String, Numeric, Float, Boolean, DateTime, ForeignKey, CheckConstraint, func

from models.base import Base


class MenuItem(Base):
    __tablename__ = 'menu_items'

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    # Either an image URL or a single glyph (emoji)
    image = Column(String, nullable=True)
    category = Column(String, ForeignKey('menu_categories.name'), nullable=False)
    rating = Column(Float, nullable=True)
    popular = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint('price >= 0', name='check_menu_item_price_non_negative'),
        CheckConstraint('rating IS NULL OR (rating >= 0 AND rating <= 5)', name='check_menu_item_rating_range'),
    )


class CatalogItemDTO(BaseModel):
    """
    Menu item as the storefront sees it.

    Built from an active MenuItem row with display defaults applied, see
    MenuItemRepository. Immutable for the cart: a fresh copy is fetched every
    time a cart is loaded or reconciled.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str = ""
    price: Decimal = Field(ge=0)
    image: str
    category: str
    rating: float = Field(ge=0, le=5)
    popular: bool = False


class MenuItemCreateDTO(BaseModel):
    """Admin input for a new menu item; validated by AdminService."""
    name: str | None = None
    description: str | None = None
    price: Decimal | None = None
    image: str | None = None
    category: str | None = None
    rating: float = 4.5
    popular: bool = False
