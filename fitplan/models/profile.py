from sqlalchemy import Column, String, JSON, DateTime
from fitplan.core.base import Base
from datetime import datetime


class ProfileRecord(Base):
    __tablename__ = "profiles"

    user_id = Column(String, primary_key=True, index=True)
    profile = Column(JSON, nullable=False)  # UserProfile
    override = Column(JSON, nullable=True)  # PersonalizationOverride
    last_known = Column(JSON, nullable=True)  # LastKnownMetrics
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
