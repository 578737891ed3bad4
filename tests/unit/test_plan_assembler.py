"""
Модульные тесты сборки плана на день.

Покрываемые сценарии:
- День отдыха: без тренировки, даже если в каталоге есть тренировка на этот день
- Выбор тренировки по дню и допустимым уровням, запасной вариант и его отсутствие
- Ротация блюд по интенсивности питания, сумма калорий
- Проверка окна голодания и времени приемов пищи
- Оценка длительности тренировки
"""

import pytest
from datetime import timedelta

from fitplan.core.config import settings
from fitplan.schemas.catalog import Exercise, FastingWindow, Meal, MealType, NutritionInfo, WorkoutPlan
from fitplan.schemas.plan import IssueSeverity
from fitplan.schemas.profile import Difficulty, FastingPlan, MealIntensity
from fitplan.services.catalog import StaticCatalog, build_initial_fasting_windows, build_initial_meals
from fitplan.services.plan_assembler import (
    E_FASTING_HOURS, E_MISSING_MEAL, E_MISSING_WORKOUT, W_EXERCISE_NO_VIDEO, W_MEAL_NO_VIDEO,
    W_MEAL_OUTSIDE_WINDOW, W_WORKOUT_FALLBACK,
    assemble_daily_plan, assemble_week, needs_regeneration, summarize
)
from tests.conftest import FRIDAY, MONDAY, SUNDAY, TUESDAY, make_personalization

pytestmark = pytest.mark.unit


def issue_codes(plan):
    return [issue.code for issue in plan.issues]


def meal_ids(plan):
    return [slot.meal.id if slot.meal else None for slot in plan.meals.slots]


# ---------------------------------------------------------------------------
# День отдыха
# ---------------------------------------------------------------------------

def test_rest_day_has_no_workout_even_if_catalog_has_one():
    sunday_workout = WorkoutPlan(
        id="wp-sun", name="Sunday Session", day_of_week=0, difficulty="beginner",
        exercises=[Exercise(id="ex-x", name="Walk", sets=1, duration=600)]
    )
    catalog = StaticCatalog(workouts=[sunday_workout])

    plan = assemble_daily_plan(SUNDAY, make_personalization(), catalog)

    assert plan.is_rest_day is True
    assert plan.workout is None
    assert plan.is_valid is True
    assert plan.day_of_week == 0


def test_rest_day_follows_settings(monkeypatch, catalog):
    monkeypatch.setattr(settings, "REST_DAY_OF_WEEK", 1)

    assert assemble_daily_plan(MONDAY, make_personalization(), catalog).is_rest_day is True
    assert assemble_daily_plan(SUNDAY, make_personalization(), catalog).is_rest_day is False


# ---------------------------------------------------------------------------
# Выбор тренировки
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("day, difficulty, expected_id", [
    (MONDAY, Difficulty.beginner, "wp-1"),
    (TUESDAY, Difficulty.intermediate, "wp-2"),
    (TUESDAY, Difficulty.advanced, "wp-2"),
    (FRIDAY, Difficulty.advanced, "wp-5"),
])
def test_exact_day_and_difficulty_match(catalog, day, difficulty, expected_id):
    plan = assemble_daily_plan(day, make_personalization(difficulty=difficulty), catalog)

    assert plan.workout.plan.id == expected_id
    assert W_WORKOUT_FALLBACK not in issue_codes(plan)


def test_beginner_falls_back_to_first_allowed_workout(catalog):
    """Во вторник тренировка intermediate, новичку достается первая beginner-тренировка каталога."""
    plan = assemble_daily_plan(TUESDAY, make_personalization(), catalog)

    assert plan.workout.plan.id == "wp-1"
    fallback = plan.issues[0]
    assert fallback.code == W_WORKOUT_FALLBACK
    assert fallback.severity == IssueSeverity.warning
    assert fallback.fallback_applied is True
    assert plan.is_valid is True


def test_intermediate_fallback_skips_advanced_workout(catalog):
    plan = assemble_daily_plan(FRIDAY, make_personalization(difficulty=Difficulty.intermediate), catalog)
    assert plan.workout.plan.id == "wp-1"


def test_fallback_is_deterministic(catalog):
    first = assemble_daily_plan(TUESDAY, make_personalization(), catalog)
    second = assemble_daily_plan(TUESDAY, make_personalization(), catalog)
    assert first == second


def test_no_allowed_workout_makes_plan_invalid():
    advanced_only = WorkoutPlan(
        id="wp-adv", name="Advanced Only", day_of_week=1, difficulty="advanced",
        exercises=[Exercise(id="ex-6", name="Burpees", sets=3, reps=10)]
    )
    plan = assemble_daily_plan(MONDAY, make_personalization(), StaticCatalog(workouts=[advanced_only]))

    assert plan.workout is None
    assert plan.is_rest_day is False
    assert plan.is_valid is False
    assert E_MISSING_WORKOUT in issue_codes(plan)


# ---------------------------------------------------------------------------
# Питание
# ---------------------------------------------------------------------------

def test_standard_intensity_rotates_in_catalog_order(catalog):
    """Понедельник (1): второй вариант каждого слота в порядке каталога."""
    plan = assemble_daily_plan(MONDAY, make_personalization(), catalog)

    assert [slot.slot for slot in plan.meals.slots] == [
        MealType.breakfast, MealType.lunch, MealType.dinner, MealType.snack
    ]
    assert meal_ids(plan) == ["meal-2", "meal-4", "meal-6", "meal-8"]
    assert plan.meals.total_nutrition.calories == 480 + 575 + 410 + 308


def test_light_intensity_sorts_by_calories(catalog):
    plan = assemble_daily_plan(MONDAY, make_personalization(intensity=MealIntensity.light), catalog)
    assert meal_ids(plan) == ["meal-2", "meal-4", "meal-5", "meal-7"]


def test_high_energy_intensity_sorts_by_protein_descending(catalog):
    plan = assemble_daily_plan(SUNDAY, make_personalization(intensity=MealIntensity.high_energy), catalog)
    assert meal_ids(plan) == ["meal-1", "meal-3", "meal-5", "meal-7"]


@pytest.mark.parametrize("intensity", list(MealIntensity))
def test_total_nutrition_is_exact_sum(catalog, intensity):
    for plan in assemble_week(MONDAY, make_personalization(intensity=intensity), catalog):
        meals = [slot.meal for slot in plan.meals.slots]
        assert plan.meals.total_nutrition.calories == sum(meal.nutrition.calories for meal in meals)
        assert plan.meals.total_nutrition.protein == sum(meal.nutrition.protein for meal in meals)


def test_missing_meal_type_makes_plan_invalid():
    meals = [meal for meal in build_initial_meals() if meal.type != MealType.snack]
    plan = assemble_daily_plan(MONDAY, make_personalization(), StaticCatalog(meals=meals))

    assert plan.is_valid is False
    assert E_MISSING_MEAL in issue_codes(plan)
    assert plan.meals.slots[3].meal is None
    assert plan.meals.total_nutrition.calories == 480 + 575 + 410


# ---------------------------------------------------------------------------
# Голодание
# ---------------------------------------------------------------------------

def test_fasting_window_lookup(catalog):
    plan = assemble_daily_plan(MONDAY, make_personalization(plan=FastingPlan.plan_16_8), catalog)

    assert plan.fasting.eating_start == "12:00"
    assert plan.fasting.eating_end == "20:00"
    assert plan.fasting.fasting_start == "20:00"
    assert plan.fasting.fasting_hours + plan.fasting.eating_hours == 24
    assert all(slot.is_within_window for slot in plan.meals.slots)
    assert [slot.scheduled_time for slot in plan.meals.slots] == ["12:00", "15:00", "19:00", "17:00"]


def test_fasting_hours_must_sum_to_24():
    windows = build_initial_fasting_windows()
    windows[FastingPlan.plan_16_8] = windows[FastingPlan.plan_16_8].model_copy(update={"eating_hours": 6})

    plan = assemble_daily_plan(MONDAY, make_personalization(), StaticCatalog(fasting_windows=windows))

    assert plan.is_valid is False
    assert E_FASTING_HOURS in issue_codes(plan)


def test_meal_outside_window_is_a_warning():
    windows = build_initial_fasting_windows()
    windows[FastingPlan.plan_16_8] = FastingWindow(
        plan=FastingPlan.plan_16_8, fasting_hours=17, eating_hours=7,
        eating_start="13:00", eating_end="20:00", fasting_start="20:00", fasting_end="13:00"
    )

    plan = assemble_daily_plan(MONDAY, make_personalization(), StaticCatalog(fasting_windows=windows))

    assert plan.is_valid is True
    assert plan.meals.slots[0].is_within_window is False
    assert W_MEAL_OUTSIDE_WINDOW in issue_codes(plan)


# ---------------------------------------------------------------------------
# Видео
# ---------------------------------------------------------------------------

def test_missing_videos_are_warnings(catalog):
    """Morning Energizer: видео только у Push-Ups и Squats; в понедельник блюда без видео."""
    plan = assemble_daily_plan(MONDAY, make_personalization(), catalog)
    issues = {issue.code: issue for issue in plan.issues}

    assert issues[W_EXERCISE_NO_VIDEO].severity == IssueSeverity.warning
    assert issues[W_EXERCISE_NO_VIDEO].message.endswith(": 2")
    assert issues[W_MEAL_NO_VIDEO].severity == IssueSeverity.warning
    assert issues[W_MEAL_NO_VIDEO].message.endswith(": 4")
    assert plan.is_valid is True


def test_no_video_warnings_when_everything_has_video():
    exercise = Exercise(id="ex-v", name="Walk", sets=1, duration=600, video_url="https://example.com/walk.mp4")
    workout = WorkoutPlan(id="wp-v", name="Walk Day", day_of_week=1, difficulty="beginner", exercises=[exercise])
    meals = [
        Meal(
            id=f"meal-{slot.value}", name=slot.value.title(), type=slot,
            nutrition=NutritionInfo(calories=400, protein=20, carbs=40, fat=15),
            video_url=f"https://example.com/{slot.value}.mp4"
        )
        for slot in MealType
    ]

    plan = assemble_daily_plan(MONDAY, make_personalization(), StaticCatalog(workouts=[workout], meals=meals))

    assert W_EXERCISE_NO_VIDEO not in issue_codes(plan)
    assert W_MEAL_NO_VIDEO not in issue_codes(plan)


# ---------------------------------------------------------------------------
# Оценка тренировки
# ---------------------------------------------------------------------------

def test_workout_completion_estimate(catalog):
    plan = assemble_daily_plan(MONDAY, make_personalization(), catalog)
    workout = plan.workout

    assert [d.order_in_workout for d in workout.exercise_details] == [1, 2, 3, 4]
    # Push-Ups: 3 подхода по 12 повторов (диапазон "10-15") по 3 сек + 2 отдыха по 60 сек
    assert workout.exercise_details[0].estimated_minutes == 4
    # Plank: 3 × 30 сек + 2 × 45 сек отдыха
    assert workout.exercise_details[2].estimated_minutes == 3
    assert workout.exercise_details[0].has_video is True
    assert workout.exercise_details[2].has_video is False
    assert workout.completion_estimate.total_minutes == 14
    assert workout.completion_estimate.total_calories == 215


# ---------------------------------------------------------------------------
# Неделя, пересборка, сводка
# ---------------------------------------------------------------------------

def test_assemble_week_has_one_rest_day(catalog):
    week = assemble_week(MONDAY, make_personalization(), catalog)

    assert [plan.date for plan in week] == [MONDAY + timedelta(days=i) for i in range(7)]
    assert sum(1 for plan in week if plan.is_rest_day) == 1


def test_needs_regeneration_when_personalization_changes(catalog):
    plan = assemble_daily_plan(MONDAY, make_personalization(), catalog)

    assert needs_regeneration(plan, make_personalization()) is False
    assert needs_regeneration(plan, make_personalization(difficulty=Difficulty.advanced)) is True
    assert needs_regeneration(plan, make_personalization(plan=FastingPlan.plan_18_6)) is True


def test_summarize_plan(catalog):
    summary = summarize(assemble_daily_plan(MONDAY, make_personalization(), catalog))

    assert summary.workout_name == "Morning Energizer"
    assert summary.workout_duration == 14
    assert summary.meal_count == 4
    assert summary.total_calories == 1773
    assert summary.has_errors is False
    assert summary.has_warnings is True
