"""
История прогресса одного пользователя.

Явный контейнер вместо глобального хранилища: трекер, статистика и
репозиторий получают его как параметр, поэтому пользователи не делят состояние.
"""
from datetime import date
from typing import Dict, List, Optional

from fitplan.schemas.progress import DailyProgress, Milestone, ProgressHistorySnapshot


class ProgressHistory:
    def __init__(
            self,
            days: Optional[Dict[date, DailyProgress]] = None,
            milestones: Optional[List[Milestone]] = None,
            pending_milestone: Optional[Milestone] = None,
            start_date: Optional[date] = None,
            current_day_number: int = 1
    ):
        self.days: Dict[date, DailyProgress] = dict(days or {})
        self.milestones: List[Milestone] = list(milestones or [])
        self.pending_milestone = pending_milestone
        self.start_date = start_date
        self.current_day_number = current_day_number

    def get(self, day: date) -> Optional[DailyProgress]:
        return self.days.get(day)

    def put(self, progress: DailyProgress) -> None:
        self.days[progress.date] = progress

    def sorted_days(self) -> List[DailyProgress]:
        return [self.days[day] for day in sorted(self.days)]

    def total_completed_exercises(self) -> int:
        return sum(progress.completed_exercises for progress in self.days.values())

    def completed_days(self) -> int:
        return sum(1 for progress in self.days.values() if progress.is_workout_complete)

    def awarded_ids(self) -> List[str]:
        return [milestone.id for milestone in self.milestones]

    def clear(self) -> None:
        self.days.clear()
        self.milestones.clear()
        self.pending_milestone = None
        self.start_date = None
        self.current_day_number = 1

    def to_snapshot(self) -> ProgressHistorySnapshot:
        return ProgressHistorySnapshot(
            start_date=self.start_date,
            current_day_number=self.current_day_number,
            days=self.sorted_days(),
            milestones=list(self.milestones),
            pending_milestone=self.pending_milestone
        )

    @classmethod
    def from_snapshot(cls, snapshot: ProgressHistorySnapshot) -> "ProgressHistory":
        return cls(
            days={progress.date: progress for progress in snapshot.days},
            milestones=snapshot.milestones,
            pending_milestone=snapshot.pending_milestone,
            start_date=snapshot.start_date,
            current_day_number=snapshot.current_day_number
        )
