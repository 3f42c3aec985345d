from pydantic import BaseModel
from sqlalchemy import Column, Integer, String, Boolean, DateTime, func

from models.base import Base


class MenuCategory(Base):
    __tablename__ = 'menu_categories'

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    icon = Column(String, nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=func.now())


class MenuCategoryDTO(BaseModel):
    id: int | None = None
    name: str | None = None
    icon: str | None = None
    display_order: int | None = None
    is_active: bool | None = None


class CategorySummaryDTO(BaseModel):
    """Menu category as shown in the category bar ("All" included)."""
    name: str
    icon: str
    count: int
