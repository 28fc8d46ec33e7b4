"""User model for Firebase authenticated users"""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.db.database import Base
from app.utils.constants import DEFAULT_TRIAL_SEARCHES


class User(Base):
    """User account with its remaining trial searches and moderation flags"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=True)

    # Trial quota, never negative (enforced by QuotaService, not the database)
    remaining_searches = Column(Integer, default=DEFAULT_TRIAL_SEARCHES, nullable=False)
    is_premium = Column(Boolean, default=False, nullable=False)  # Unlimited searches

    is_admin = Column(Boolean, default=False, nullable=False)
    is_banned = Column(Boolean, default=False, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    registration_ip = Column(String(64), nullable=True)
    last_login_at = Column(DateTime, nullable=True)
    last_login_ip = Column(String(64), nullable=True)
    last_search_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    # Relationships
    searches = relationship(
        "SearchRecord",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', remaining={self.remaining_searches})>"
