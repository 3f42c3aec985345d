from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy import Enum as SQLEnum

from enums.order_status import OrderStatus
from enums.payment_method import PaymentMethod
from models.base import Base


class Order(Base):
    __tablename__ = 'orders'

    id = Column(Integer, primary_key=True)
    user_id = Column(String, ForeignKey('users.id'), nullable=True)
    # Items Snapshot (JSON)
    # Stores the priced cart lines at checkout time for order history
    # Format: [{"lineId": "...", "itemId": 1, "name": "Margherita Pizza", "unitPrice": "339.00",
    #           "quantity": 2, "lineTotal": "678.00", "customization": {...}}]
    items = Column(Text, nullable=False)
    bill_amount = Column(Numeric(10, 2), nullable=False)
    address = Column(String, nullable=False)
    zipcode = Column(String, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    payment_method = Column(SQLEnum(PaymentMethod, values_callable=lambda e: [m.value for m in e]), nullable=False)
    status = Column(SQLEnum(OrderStatus, values_callable=lambda e: [m.value for m in e]),
                    nullable=False, default=OrderStatus.PLACED)
    placed_at = Column(DateTime, default=func.now())

    __table_args__ = (
        CheckConstraint('bill_amount >= 0', name='check_order_bill_amount_non_negative'),
    )


class OrderDTO(BaseModel):
    id: int | None = None
    user_id: str | None = None
    items: str | None = None
    bill_amount: Decimal | None = None
    address: str | None = None
    zipcode: str | None = None
    name: str | None = None
    email: str | None = None
    payment_method: PaymentMethod | None = None
    status: OrderStatus | None = None
    placed_at: datetime | None = None


class DeliveryDetailsDTO(BaseModel):
    """Checkout form contents; prefilled from the user's profile."""
    name: str = ""
    email: str = ""
    address: str = ""
    zipcode: str = ""
