"""
SQLAlchemy ORM models.

Tables
------
* ``route_history`` -- one row per successful route calculation.

Headline figures are plain columns so history can be searched and
aggregated in SQL; the nested parts of the result (destination snapshot,
fuel analysis, distance breakdown) are stored as JSON documents.

Indexes
-------
* **B-Tree** on ``date`` and ``driver`` for listing and search.
"""

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    String,
)

from .database import Base


class RouteHistoryModel(Base):
    __tablename__ = "route_history"

    # Creation timestamp in milliseconds, bumped on collision
    id = Column(BigInteger, primary_key=True, autoincrement=False)
    date = Column(DateTime(timezone=True), nullable=False)

    driver = Column(String(120), nullable=False, default="")
    origin = Column(String(255), nullable=False)
    destination = Column(String(1000), nullable=False)  # "d1 → d2 → d3"

    total_distance = Column(Integer, nullable=False)
    total_travel_time = Column(Float, nullable=False)
    total_packages = Column(Integer, nullable=False)
    total_revenue = Column(Float, nullable=False)
    route_cost = Column(Float, nullable=False)
    fuel_cost = Column(Float, nullable=False)
    total_cost = Column(Float, nullable=False)
    profit = Column(Float, nullable=False)
    profit_margin = Column(Float, nullable=False)

    destinations = Column(JSON, nullable=False, default=list)
    fuel_analysis = Column(JSON, nullable=False, default=dict)
    distance_breakdown = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index("idx_route_history_date", "date"),
        Index("idx_route_history_driver", "driver"),
    )
