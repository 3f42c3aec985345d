from pydantic import BaseModel
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, func

from models.base import Base


class UserCart(Base):
    """
    Remote cart of a signed-in user.

    cart_data holds the persisted cart record: a JSON array of
    {"lineId", "itemId", "quantity", "customization"} objects (see models/cart.py).
    """
    __tablename__ = 'user_carts'

    user_id = Column(String, ForeignKey('users.id'), primary_key=True)
    cart_data = Column(Text, nullable=False, default="[]")
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())


class UserCartDTO(BaseModel):
    user_id: str
    cart_data: str = "[]"
