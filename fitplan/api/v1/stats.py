from fastapi import APIRouter, Depends, Query
from datetime import date
from typing import Optional

from fitplan.core.dependencies import get_progress_repository
from fitplan.repositories.progress_repository import ProgressRepository
from fitplan.schemas.stats import MonthlyStats, WeeklyStats
from fitplan.services.stats import monthly_stats, weekly_stats

router = APIRouter(prefix="/users", tags=["stats"])


@router.get("/{user_id}/stats/weekly", response_model=WeeklyStats)
async def get_weekly_stats(
        user_id: str,
        today: Optional[date] = Query(default=None),
        repo: ProgressRepository = Depends(get_progress_repository)
):
    """Статистика за неделю (понедельник-воскресенье), в которую попадает today"""
    history = await repo.load_history(user_id)
    return weekly_stats(history, today or date.today())


@router.get("/{user_id}/stats/monthly", response_model=MonthlyStats)
async def get_monthly_stats(
        user_id: str,
        today: Optional[date] = Query(default=None),
        repo: ProgressRepository = Depends(get_progress_repository)
):
    """Статистика за месяц и серии дней с завершенной тренировкой"""
    history = await repo.load_history(user_id)
    return monthly_stats(history, today or date.today())
