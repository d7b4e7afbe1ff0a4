"""
Trip database model.

A trip is an owned, dated itinerary made of ordered days.
"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from trip_planner_backend.app.db.session import Base


class Trip(Base):
    """
    Trip model.

    ``users`` is the participant headcount, used as the fee multiplier.
    ``version`` is bumped on every update and guards against lost updates.
    The fee and per-stop distances are computed on read and never stored.
    """
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Ownership - Trip belongs to the user who planned it
    owner = Column(Integer, nullable=False, index=True)

    name = Column(String(255), nullable=False)

    # Date range
    from_date = Column(DateTime(timezone=True), nullable=False)
    to_date = Column(DateTime(timezone=True), nullable=False)

    # Participant headcount
    users = Column(Integer, nullable=False, default=1)

    version = Column(Integer, nullable=False, default=1)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Trip(id={self.id}, owner={self.owner}, name='{self.name}', version={self.version})>"
