"""
Place and Category database models.

Places are points of interest managed by administrators; trips only read
them and copy a snapshot into each itinerary stop.
"""

from sqlalchemy import Column, Integer, String, Text, Float, ForeignKey, DateTime
from sqlalchemy.sql import func
from trip_planner_backend.app.db.session import Base


class Place(Base):
    """
    Place model.

    Carries the coordinates used for distance annotation and the price used
    to compute trip fees. ``images`` holds a JSON array of URLs.
    """
    __tablename__ = "places"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    name = Column(String(255), nullable=False, index=True)
    address = Column(String(500), nullable=False)
    description = Column(Text, nullable=False, default="")

    # Geolocation (degrees)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    # Entry price per participant
    price = Column(Float, nullable=False, default=0.0)

    images = Column(Text, nullable=False, default="[]")

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Place(id={self.id}, name='{self.name}', price={self.price})>"


class Category(Base):
    """Category model used to group places."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    icon = Column(String(500), nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"


class PlaceCategory(Base):
    """Place to Category membership."""
    __tablename__ = "place_categories"

    place_id = Column(Integer, ForeignKey('places.id', ondelete="CASCADE"), primary_key=True)
    category_id = Column(Integer, ForeignKey('categories.id', ondelete="CASCADE"), primary_key=True, index=True)

    def __repr__(self):
        return f"<PlaceCategory(place_id={self.place_id}, category_id={self.category_id})>"
