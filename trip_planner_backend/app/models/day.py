"""
Day database model.

Each day stores its ordered stops as one encoded text column
(see services/day_codec.py) instead of child rows.
"""

from sqlalchemy import Column, Integer, Text, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from trip_planner_backend.app.db.session import Base


class Day(Base):
    """
    Day model.

    Days are never updated in place: a trip update deletes them all and
    inserts the new set.
    """
    __tablename__ = "days"
    __table_args__ = (
        UniqueConstraint("trip_id", "position", name="uq_days_trip_position"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Trip reference (days do not outlive their trip)
    trip_id = Column(Integer, ForeignKey('trips.id', ondelete="CASCADE"), nullable=False, index=True)

    # Order in trip (0, 1, 2, ...)
    position = Column(Integer, nullable=False)

    # Encoded ordered stop list
    places = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Day(id={self.id}, trip_id={self.trip_id}, position={self.position})>"
