"""
Модульные тесты статистики.

Покрываемые сценарии:
- Пустая история -> нулевые значения
- Неделя понедельник-воскресенье, отсутствующие дни не входят в знаменатели
- Соблюдение голодания: среднее только по дням с голоданием
- Серии: 7 завершенных дней и 1 незавершенный -> longest 7, current 0
- Пропущенная дата обнуляет серию
"""

import pytest
from datetime import date, timedelta
from typing import Optional

from fitplan.schemas.profile import FastingPlan
from fitplan.schemas.progress import DailyProgress, FastingProgress
from fitplan.services.progress_history import ProgressHistory
from fitplan.services.stats import monthly_stats, week_bounds, weekly_stats

pytestmark = pytest.mark.unit


def make_day(
        day: date,
        complete: bool = True,
        percent: int = 100,
        compliance: Optional[int] = None
) -> DailyProgress:
    fasting = None
    if compliance is not None:
        fasting = FastingProgress(plan=FastingPlan.plan_16_8, compliance_percent=compliance)
    return DailyProgress(
        date=day,
        day_number=1,
        fasting=fasting,
        total_exercises=4,
        completed_exercises=4 if complete else 1,
        total_meals=4,
        completed_meals=4 if complete else 2,
        is_workout_complete=complete,
        daily_completion_percent=percent
    )


def make_history(*days: DailyProgress) -> ProgressHistory:
    return ProgressHistory(days={d.date: d for d in days})


# ---------------------------------------------------------------------------
# Пустая история
# ---------------------------------------------------------------------------

def test_weekly_stats_empty_history():
    stats = weekly_stats(ProgressHistory(), date(2024, 1, 3))

    assert stats.week_number == 1
    assert stats.start_date == date(2024, 1, 1)
    assert stats.end_date == date(2024, 1, 7)
    assert stats.total_workout_days == 0
    assert stats.fasting_compliance_percent == 0
    assert stats.overall_completion_percent == 0


def test_monthly_stats_empty_history():
    stats = monthly_stats(ProgressHistory(), date(2024, 1, 20))

    assert stats.month == 1
    assert stats.year == 2024
    assert stats.streak_days == 0
    assert stats.longest_streak == 0
    assert stats.overall_completion_percent == 0


# ---------------------------------------------------------------------------
# Неделя
# ---------------------------------------------------------------------------

def test_week_bounds_monday_to_sunday():
    assert week_bounds(date(2024, 1, 7)) == (date(2024, 1, 1), date(2024, 1, 7))
    assert week_bounds(date(2024, 1, 8)) == (date(2024, 1, 8), date(2024, 1, 14))


def test_weekly_stats_counts_only_present_days():
    history = make_history(
        make_day(date(2023, 12, 31), percent=0, compliance=0),  # прошлая неделя
        make_day(date(2024, 1, 1), percent=100, compliance=80),
        make_day(date(2024, 1, 3), complete=False, percent=50, compliance=60),
    )

    stats = weekly_stats(history, date(2024, 1, 4))

    assert stats.total_workout_days == 2
    assert stats.completed_workout_days == 1
    assert stats.total_exercises == 8
    assert stats.completed_exercises == 5
    assert stats.total_meals == 8
    assert stats.completed_meals == 6
    assert stats.overall_completion_percent == 75
    assert stats.fasting_compliance_percent == 70


def test_fasting_compliance_ignores_days_without_fasting():
    history = make_history(
        make_day(date(2024, 1, 1), compliance=90),
        make_day(date(2024, 1, 2)),
    )
    assert weekly_stats(history, date(2024, 1, 2)).fasting_compliance_percent == 90


# ---------------------------------------------------------------------------
# Месяц и серии
# ---------------------------------------------------------------------------

def test_seven_complete_days_then_incomplete_day():
    days = [make_day(date(2024, 1, 1) + timedelta(days=i)) for i in range(7)]
    days.append(make_day(date(2024, 1, 8), complete=False, percent=44))

    stats = monthly_stats(make_history(*days), date(2024, 1, 8))

    assert stats.longest_streak == 7
    assert stats.streak_days == 0
    assert stats.total_workout_days == 8
    assert stats.completed_workout_days == 7
    # (7 * 100 + 44) / 8 = 93
    assert stats.overall_completion_percent == 93


def test_missing_date_resets_streak():
    history = make_history(
        make_day(date(2024, 1, 1)),
        make_day(date(2024, 1, 2)),
        make_day(date(2024, 1, 4)),
        make_day(date(2024, 1, 5)),
    )

    stats = monthly_stats(history, date(2024, 1, 5))

    assert stats.streak_days == 2
    assert stats.longest_streak == 2


def test_current_streak_is_zero_when_today_has_no_record():
    history = make_history(make_day(date(2024, 1, 1)), make_day(date(2024, 1, 2)))

    stats = monthly_stats(history, date(2024, 1, 3))

    assert stats.streak_days == 0
    assert stats.longest_streak == 2


def test_monthly_stats_only_current_month():
    history = make_history(
        make_day(date(2023, 12, 31)),
        make_day(date(2024, 1, 1), complete=False, percent=20),
    )

    stats = monthly_stats(history, date(2024, 1, 1))

    assert stats.total_workout_days == 1
    assert stats.completed_exercises == 1
    assert stats.longest_streak == 0
    assert stats.overall_completion_percent == 20


# ---------------------------------------------------------------------------
# Округление
# ---------------------------------------------------------------------------

def test_weekly_completion_and_compliance_round_half_up():
    history = make_history(
        make_day(date(2024, 1, 1), complete=False, percent=25, compliance=80),
        make_day(date(2024, 1, 2), complete=False, percent=0, compliance=85),
    )

    stats = weekly_stats(history, date(2024, 1, 2))

    assert stats.overall_completion_percent == 13
    assert stats.fasting_compliance_percent == 83


def test_monthly_completion_rounds_half_up():
    history = make_history(
        make_day(date(2024, 1, 10), complete=False, percent=25),
        make_day(date(2024, 1, 20), complete=False, percent=0),
    )
    assert monthly_stats(history, date(2024, 1, 31)).overall_completion_percent == 13
