"""User model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from places_api.database import Base
from places_api.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and place ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    image = Column(String(1024), nullable=False)

    # Relationships
    places = relationship(
        "Place",
        back_populates="creator",
        collection_class=set,
        cascade="all, delete-orphan",
    )
