from sqlalchemy import Column, Integer, String, Date, JSON, DateTime, Boolean, UniqueConstraint
from fitplan.core.base import Base
from datetime import datetime


class ProgressStateRecord(Base):
    """Общие поля истории: дата старта программы и номер текущего дня."""
    __tablename__ = "progress_states"

    user_id = Column(String, primary_key=True, index=True)
    start_date = Column(Date, nullable=True)
    current_day_number = Column(Integer, nullable=False, default=1)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class DailyProgressRecord(Base):
    __tablename__ = "daily_progress"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_progress_user_date"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    snapshot = Column(JSON, nullable=False)  # DailyProgress целиком
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class MilestoneRecord(Base):
    __tablename__ = "milestones"
    __table_args__ = (UniqueConstraint("user_id", "milestone_id", name="uq_milestone_user_id"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    milestone_id = Column(String, nullable=False)
    snapshot = Column(JSON, nullable=False)  # Milestone целиком
    is_pending = Column(Boolean, default=False)
    achieved_at = Column(DateTime, nullable=False)
