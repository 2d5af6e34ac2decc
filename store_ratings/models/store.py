"""ORM model for rated stores."""

from sqlalchemy import Column, DateTime, ForeignKey, String, func
from sqlalchemy.orm import relationship

from store_ratings.models.base import Base, new_id, utcnow


class Store(Base):
    """
    A store owned by exactly one user.

    owner_id is unique: one store per owner. Deleting a store deletes its ratings.
    """

    __tablename__ = "stores"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    address = Column(String(400), nullable=False)
    owner_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    owner = relationship("User", back_populates="store")
    ratings = relationship(
        "Rating",
        back_populates="store",
        cascade="all, delete",
        order_by="Rating.created_at.desc()",
    )
