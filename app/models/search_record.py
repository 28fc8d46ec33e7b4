"""Search history: one SearchRecord per completed search, with its BusinessResults"""

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.db.database import Base


class SearchRecord(Base):
    """A completed search. Immutable after creation; results_count == len(results)."""

    __tablename__ = "search_records"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    city = Column(String(200), nullable=False)
    business_type = Column(String(100), nullable=False, index=True)
    radius_km = Column(Float, nullable=False)
    results_count = Column(Integer, default=0, nullable=False)
    ip_address = Column(String(64), nullable=True)
    center_lat = Column(Float, nullable=False)
    center_lng = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Relationships
    user = relationship("User", back_populates="searches")
    results = relationship(
        "BusinessResult",
        back_populates="search",
        cascade="all, delete-orphan",
        order_by="BusinessResult.position",
    )

    def __repr__(self):
        return (
            f"<SearchRecord(id={self.id}, user_id={self.user_id}, "
            f"query='{self.business_type} in {self.city}', results={self.results_count})>"
        )


class BusinessResult(Base):
    """One ranked business returned by a search"""

    __tablename__ = "business_results"

    id = Column(Integer, primary_key=True, index=True)
    search_id = Column(
        Integer, ForeignKey("search_records.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False)  # 0-based rank by distance
    place_id = Column(String(255), nullable=True)
    name = Column(String(500), nullable=False)
    address = Column(String(500), nullable=True)
    rating = Column(Float, nullable=True)
    total_reviews = Column(Integer, default=0, nullable=False)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    phone = Column(String(50), nullable=True)
    website = Column(String(500), nullable=True)
    operational_status = Column(String(50), nullable=True)  # e.g. "OPERATIONAL", "CLOSED_TEMPORARILY"
    distance_km = Column(Float, nullable=False)

    # Relationships
    search = relationship("SearchRecord", back_populates="results")

    def __repr__(self):
        return f"<BusinessResult(search_id={self.search_id}, name='{self.name}', distance={self.distance_km})>"
