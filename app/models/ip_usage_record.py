"""IPUsageRecord model for abuse prevention"""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from app.db.database import Base
from app.utils.constants import SUSPICIOUS_IP_ACCOUNT_THRESHOLD


class IPUsageRecord(Base):
    """Tracks how many accounts were created from an originating address"""

    __tablename__ = "ip_usage_records"

    id = Column(Integer, primary_key=True, index=True)
    ip_address = Column(String(64), unique=True, nullable=False, index=True)
    account_count = Column(Integer, default=0, nullable=False)
    is_blocked = Column(Boolean, default=False, nullable=False)
    first_seen = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_seen = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def is_suspicious(self) -> bool:
        return self.account_count > SUSPICIOUS_IP_ACCOUNT_THRESHOLD

    def __repr__(self):
        return f"<IPUsageRecord(ip='{self.ip_address}', accounts={self.account_count}, blocked={self.is_blocked})>"
