import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from enums.order_status import OrderStatus
from models.order import Order, OrderDTO

logger = logging.getLogger(__name__)


class OrderRepository:
    @staticmethod
    async def create(order_dto: OrderDTO, session: AsyncSession | Session) -> OrderDTO:
        order = Order(**order_dto.model_dump(exclude_none=True))
        session.add(order)
        await session_flush(session)
        return OrderDTO.model_validate(order, from_attributes=True)

    @staticmethod
    async def get_by_id(order_id: int, session: AsyncSession | Session) -> OrderDTO | None:
        stmt = select(Order).where(Order.id == order_id)
        order = await session_execute(stmt, session)
        order = order.scalar()
        if order is not None:
            return OrderDTO.model_validate(order, from_attributes=True)
        else:
            return None

    @staticmethod
    async def get_by_user_id(user_id: str, session: AsyncSession | Session) -> list[OrderDTO]:
        stmt = (select(Order)
                .where(Order.user_id == user_id)
                .order_by(Order.placed_at.desc(), Order.id.desc()))
        orders = await session_execute(stmt, session)
        return [OrderDTO.model_validate(order, from_attributes=True) for order in orders.scalars().all()]

    @staticmethod
    async def get_all(session: AsyncSession | Session, limit: int | None = None) -> list[OrderDTO]:
        stmt = select(Order).order_by(Order.placed_at.desc(), Order.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        orders = await session_execute(stmt, session)
        return [OrderDTO.model_validate(order, from_attributes=True) for order in orders.scalars().all()]

    @staticmethod
    async def update_status(order_id: int, status: OrderStatus, session: AsyncSession | Session) -> None:
        stmt = update(Order).where(Order.id == order_id).values(status=status)
        await session_execute(stmt, session)
        logger.info(f"Order {order_id} status set to '{status.value}'")
