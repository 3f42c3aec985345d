from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.user_cart import UserCart, UserCartDTO


class UserCartRepository:
    """
    Remote cart store, one row per signed-in user.

    Stores the serialized cart record as-is; encoding and validation of the
    record belong to the cart service.
    """

    @staticmethod
    async def get(user_id: str, session: AsyncSession | Session) -> UserCartDTO | None:
        stmt = select(UserCart).where(UserCart.user_id == user_id)
        user_cart = await session_execute(stmt, session)
        user_cart = user_cart.scalar()
        if user_cart is not None:
            return UserCartDTO.model_validate(user_cart, from_attributes=True)
        else:
            return None

    @staticmethod
    async def upsert(user_id: str, cart_data: str, session: AsyncSession | Session) -> None:
        existing = await UserCartRepository.get(user_id, session)
        if existing is not None:
            stmt = update(UserCart).where(UserCart.user_id == user_id).values(cart_data=cart_data)
            await session_execute(stmt, session)
        else:
            session.add(UserCart(user_id=user_id, cart_data=cart_data))
            await session_flush(session)
