from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from exceptions.user import UserNotFoundException
from models.order import DeliveryDetailsDTO
from models.user import UserIdentityDTO
from repositories.user import UserRepository


class UserService:

    @staticmethod
    async def get_identity(user_id: str | None, session: AsyncSession | Session) -> UserIdentityDTO | None:
        """Session identity for a signed-in user; None when anonymous, unknown or deactivated."""
        if not user_id:
            return None
        user = await UserRepository.get_by_id(user_id, session)
        match user:
            case None:
                return None
            case _ if user.is_active is False:
                return None
            case _:
                return UserIdentityDTO(id=user.id, email=user.email)

    @staticmethod
    async def get_delivery_details(user_id: str, session: AsyncSession | Session) -> DeliveryDetailsDTO:
        """
        Checkout form prefilled from the user's profile.

        Raises:
            UserNotFoundException: If the user doesn't exist
        """
        user = await UserRepository.get_by_id(user_id, session)
        if user is None:
            raise UserNotFoundException(user_id)
        name = " ".join(part for part in (user.first_name, user.last_name) if part)
        return DeliveryDetailsDTO(
            name=name,
            email=user.email or "",
            address=user.address or "",
            zipcode=user.postal_code or ""
        )
