"""RateLimitRequest model: request log for the per-address sliding window"""

from datetime import datetime

from sqlalchemy import Column, DateTime, Index, Integer, String

from app.db.database import Base


class RateLimitRequest(Base):
    __tablename__ = "rate_limit_requests"
    __table_args__ = (
        Index("ix_rate_limit_requests_ip_created", "ip_address", "created_at"),
    )

    id = Column(Integer, primary_key=True)
    ip_address = Column(String(64), nullable=False)
    user_id = Column(Integer, nullable=True)  # Not a foreign key, log rows outlive users
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<RateLimitRequest(ip='{self.ip_address}', at={self.created_at})>"
