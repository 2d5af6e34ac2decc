"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.orm import relationship

from store_ratings.core.permissions import Role
from store_ratings.models.base import Base, new_id, utcnow


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: one of Role (SYSTEM_ADMIN, NORMAL_USER, STORE_OWNER). A STORE_OWNER owns at most one store.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(60), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    address = Column(String(400), nullable=False, default="")
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=Role.NORMAL_USER.value, index=True)
    refresh_token = Column(String(255), nullable=True, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    # The owned store is removed explicitly (see services.admin.delete_user), never nulled out.
    store = relationship("Store", back_populates="owner", uselist=False, passive_deletes="all")
    ratings = relationship("Rating", back_populates="user", cascade="all, delete")
