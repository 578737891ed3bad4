import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from fitplan.models.progress import DailyProgressRecord, MilestoneRecord, ProgressStateRecord
from fitplan.schemas.progress import DailyProgress, Milestone, ProgressHistorySnapshot
from fitplan.services.progress_history import ProgressHistory

logger = logging.getLogger(__name__)


class ProgressRepository:
    """Хранение истории прогресса. Каждое поле снимков сохраняется без потерь."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_history(self, user_id: str) -> ProgressHistory:
        state = await self.db.execute(
            select(ProgressStateRecord).where(ProgressStateRecord.user_id == user_id)
        )
        state = state.scalar_one_or_none()

        days = await self.db.execute(
            select(DailyProgressRecord)
            .where(DailyProgressRecord.user_id == user_id)
            .order_by(DailyProgressRecord.date)
        )
        milestones = await self.db.execute(
            select(MilestoneRecord)
            .where(MilestoneRecord.user_id == user_id)
            .order_by(MilestoneRecord.achieved_at, MilestoneRecord.id)
        )
        milestone_records = milestones.scalars().all()

        pending = None
        for record in milestone_records:
            if record.is_pending:
                pending = Milestone.model_validate(record.snapshot)

        snapshot = ProgressHistorySnapshot(
            start_date=state.start_date if state else None,
            current_day_number=state.current_day_number if state else 1,
            days=[DailyProgress.model_validate(record.snapshot) for record in days.scalars().all()],
            milestones=[Milestone.model_validate(record.snapshot) for record in milestone_records],
            pending_milestone=pending
        )
        return ProgressHistory.from_snapshot(snapshot)

    async def save_history(self, user_id: str, history: ProgressHistory) -> None:
        """Записать историю целиком: обновить существующие строки и добавить новые."""
        snapshot = history.to_snapshot()

        state = await self.db.execute(
            select(ProgressStateRecord).where(ProgressStateRecord.user_id == user_id)
        )
        state = state.scalar_one_or_none()
        if state is None:
            state = ProgressStateRecord(user_id=user_id)
            self.db.add(state)
        state.start_date = snapshot.start_date
        state.current_day_number = snapshot.current_day_number

        existing_days = await self.db.execute(
            select(DailyProgressRecord).where(DailyProgressRecord.user_id == user_id)
        )
        days_by_date = {record.date: record for record in existing_days.scalars().all()}
        for progress in snapshot.days:
            record = days_by_date.get(progress.date)
            if record is None:
                record = DailyProgressRecord(user_id=user_id, date=progress.date)
                self.db.add(record)
            record.snapshot = progress.model_dump(mode="json")

        existing_milestones = await self.db.execute(
            select(MilestoneRecord).where(MilestoneRecord.user_id == user_id)
        )
        milestones_by_id = {record.milestone_id: record for record in existing_milestones.scalars().all()}
        pending_id = snapshot.pending_milestone.id if snapshot.pending_milestone else None
        for milestone in snapshot.milestones:
            record = milestones_by_id.get(milestone.id)
            if record is None:
                record = MilestoneRecord(
                    user_id=user_id,
                    milestone_id=milestone.id,
                    achieved_at=milestone.achieved_at
                )
                self.db.add(record)
            record.snapshot = milestone.model_dump(mode="json")
            record.is_pending = milestone.id == pending_id

        try:
            await self.db.commit()
        except Exception as e:
            logger.error(f"Ошибка сохранения прогресса пользователя {user_id}: {e}")
            await self.db.rollback()
            raise

    async def delete_history(self, user_id: str) -> None:
        await self.db.execute(delete(DailyProgressRecord).where(DailyProgressRecord.user_id == user_id))
        await self.db.execute(delete(MilestoneRecord).where(MilestoneRecord.user_id == user_id))
        await self.db.execute(delete(ProgressStateRecord).where(ProgressStateRecord.user_id == user_id))
        await self.db.commit()
