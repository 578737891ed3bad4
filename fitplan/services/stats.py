"""
Сводная статистика по истории прогресса. Ничего не хранит, всегда пересчитывается.
"""
from datetime import date, timedelta
from typing import List, Tuple

from fitplan.schemas.progress import DailyProgress
from fitplan.schemas.stats import MonthlyStats, WeeklyStats
from fitplan.services.progress_history import ProgressHistory
from fitplan.services.rounding import round_half_up


def _mean_percent(values: List[int]) -> int:
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def week_bounds(today: date) -> Tuple[date, date]:
    """Понедельник и воскресенье недели, в которую попадает today."""
    start = today - timedelta(days=today.weekday())
    return start, start + timedelta(days=6)


def weekly_stats(history: ProgressHistory, today: date) -> WeeklyStats:
    start, end = week_bounds(today)

    # Отсутствующие дни не считаются нулями, они просто не входят в выборку
    days: List[DailyProgress] = []
    for offset in range(7):
        progress = history.get(start + timedelta(days=offset))
        if progress is not None:
            days.append(progress)

    fasting_days = [d for d in days if d.fasting is not None]

    return WeeklyStats(
        week_number=today.isocalendar()[1],
        start_date=start,
        end_date=end,
        total_workout_days=len(days),
        completed_workout_days=sum(1 for d in days if d.is_workout_complete),
        total_exercises=sum(d.total_exercises for d in days),
        completed_exercises=sum(d.completed_exercises for d in days),
        total_meals=sum(d.total_meals for d in days),
        completed_meals=sum(d.completed_meals for d in days),
        fasting_compliance_percent=_mean_percent([d.fasting.compliance_percent for d in fasting_days]),
        overall_completion_percent=_mean_percent([d.daily_completion_percent for d in days])
    )


def streaks(history: ProgressHistory, first: date, last: date) -> Tuple[int, int]:
    """
    Проход по всем датам от first до last включительно.
    Возвращает (текущая серия, самая длинная серия).
    Пропущенная дата или незавершенная тренировка обнуляют серию.
    """
    current = 0
    longest = 0
    day = first
    while day <= last:
        progress = history.get(day)
        if progress is not None and progress.is_workout_complete:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
        day += timedelta(days=1)
    return current, longest


def monthly_stats(history: ProgressHistory, today: date) -> MonthlyStats:
    days = [
        progress for progress in history.sorted_days()
        if progress.date.year == today.year and progress.date.month == today.month
    ]

    streak_days, longest_streak = streaks(history, today.replace(day=1), today)

    return MonthlyStats(
        month=today.month,
        year=today.year,
        total_workout_days=len(days),
        completed_workout_days=sum(1 for d in days if d.is_workout_complete),
        total_exercises=sum(d.total_exercises for d in days),
        completed_exercises=sum(d.completed_exercises for d in days),
        streak_days=streak_days,
        longest_streak=longest_streak,
        overall_completion_percent=_mean_percent([d.daily_completion_percent for d in days])
    )
