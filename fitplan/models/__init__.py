from fitplan.models.profile import ProfileRecord
from fitplan.models.progress import ProgressStateRecord, DailyProgressRecord, MilestoneRecord

__all__ = [
    "ProfileRecord",
    "ProgressStateRecord", "DailyProgressRecord", "MilestoneRecord"
]
