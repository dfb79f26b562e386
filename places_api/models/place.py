"""Place model."""

from sqlalchemy import Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from places_api.database import Base
from places_api.models.mixins import TimestampMixin


class Place(Base, TimestampMixin):
    """A geocoded place created by a user."""

    __tablename__ = "places"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String(1024), nullable=False)
    address = Column(String(1024), nullable=False)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    creator = relationship("User", back_populates="places")

    @property
    def location(self) -> dict[str, float]:
        """Coordinates as a {lat, lng} mapping."""
        return {"lat": self.lat, "lng": self.lng}
