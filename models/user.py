from pydantic import BaseModel
from sqlalchemy import Column, String, Boolean, DateTime, func

from models.base import Base


class User(Base):
    __tablename__ = 'users'

    # Issued by the identity provider
    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, unique=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=func.now())
    last_login = Column(DateTime, nullable=True)


class UserDTO(BaseModel):
    id: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None
    is_active: bool | None = None


class UserIdentityDTO(BaseModel):
    """Signed-in session identity; `id` partitions the remote cart."""
    id: str
    email: str | None = None
