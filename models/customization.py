from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship

from models.base import Base


class CustomizationCategory(Base):
    """
    A named axis of choice for menu items, e.g. "spice_level" or "extra_toppings".

    Linked to menu categories through CategoryCustomization, which decides
    whether it is required and how many options may be picked.
    """
    __tablename__ = 'customization_categories'

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    display_name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    options = relationship("CustomizationOption", back_populates="category")


class CategoryCustomization(Base):
    __tablename__ = 'category_customizations'

    id = Column(Integer, primary_key=True)
    menu_category = Column(String, ForeignKey('menu_categories.name'), nullable=False)
    customization_category_id = Column(Integer, ForeignKey('customization_categories.id'), nullable=False)
    is_required = Column(Boolean, nullable=False, default=False)
    # 1 = single-select, >1 = multi-select
    max_selections = Column(Integer, nullable=False, default=1)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    customization_category = relationship("CustomizationCategory", lazy="joined")

    __table_args__ = (
        CheckConstraint('max_selections >= 1', name='check_max_selections_positive'),
    )


class CustomizationOption(Base):
    __tablename__ = 'customization_options'

    id = Column(Integer, primary_key=True)
    category_id = Column(Integer, ForeignKey('customization_categories.id'), nullable=False)
    name = Column(String, nullable=False)
    display_name = Column(String, nullable=False)
    # Signed, applied once per unit
    price_adjustment = Column(Numeric(10, 2), nullable=False, default=0)
    is_default = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    category = relationship("CustomizationCategory", back_populates="options")


class CustomizationOptionDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | None = None
    category_id: int
    name: str
    display_name: str
    price_adjustment: Decimal = Decimal("0")
    is_default: bool = False
    is_active: bool = True
    sort_order: int = 0


class CustomizationCategoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    display_name: str
    description: str | None = None


class CategoryCustomizationDTO(BaseModel):
    """Customization category as offered for one menu category, with its active options."""
    model_config = ConfigDict(frozen=True)

    id: int
    menu_category: str
    is_required: bool = False
    max_selections: int = 1
    sort_order: int = 0
    customization_category: CustomizationCategoryDTO
    options: tuple[CustomizationOptionDTO, ...] = ()

    @property
    def is_multi_select(self) -> bool:
        return self.max_selections > 1


class CustomizationOptionUpdateDTO(BaseModel):
    display_name: str
    price_adjustment: Decimal
    is_default: bool
    sort_order: int
