"""
Сборка плана на день: тренировка (или день отдыха), четыре приема пищи и окно голодания.

План никогда не собирается "наполовину молча": каждое отступление от правил
попадает в список issues, а критичные пробелы делают план невалидным.
"""
import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Set, Tuple

from fitplan.core.config import settings
from fitplan.schemas.catalog import MEAL_SLOTS, Exercise, FastingWindow, Meal, MealType, NutritionInfo, WorkoutPlan
from fitplan.schemas.plan import (
    CompletionEstimate, DailyPlan, EnrichedExercise, IssueSeverity, MealPlan, PersonalizationKey,
    PlanComponent, PlanIssue, PlannedWorkout, PlanSummary, ScheduledMeal
)
from fitplan.schemas.profile import Difficulty, MealIntensity, PersonalizationResult
from fitplan.services.catalog import StaticCatalog, day_of_week, is_within_window, meal_time_for
from fitplan.services.rounding import round_half_up

logger = logging.getLogger(__name__)

# Коды замечаний к плану
E_MISSING_WORKOUT = "E_MISSING_WORKOUT"
E_MISSING_MEAL = "E_MISSING_MEAL"
E_MISSING_FASTING = "E_MISSING_FASTING"
E_FASTING_HOURS = "E_FASTING_HOURS"
W_WORKOUT_FALLBACK = "W_WORKOUT_FALLBACK"
W_MEAL_OUTSIDE_WINDOW = "W_MEAL_OUTSIDE_WINDOW"
W_EXERCISE_NO_VIDEO = "W_EXERCISE_NO_VIDEO"
W_MEAL_NO_VIDEO = "W_MEAL_NO_VIDEO"

# Какие уровни тренировок доступны пользователю
ALLOWED_DIFFICULTIES: Dict[Difficulty, Set[Difficulty]] = {
    Difficulty.beginner: {Difficulty.beginner},
    Difficulty.intermediate: {Difficulty.beginner, Difficulty.intermediate},
    Difficulty.advanced: {Difficulty.beginner, Difficulty.intermediate, Difficulty.advanced},
}

SECONDS_PER_REP = 3
DEFAULT_REPS = 12
DEFAULT_REST_SECONDS = 60


def personalization_key(personalization: PersonalizationResult) -> PersonalizationKey:
    return PersonalizationKey(
        fasting_plan=personalization.fasting_plan,
        workout_difficulty=personalization.workout_difficulty,
        meal_intensity=personalization.meal_intensity
    )


def is_rest_day(day: date) -> bool:
    return day_of_week(day) == settings.REST_DAY_OF_WEEK


# ==========================
# ТРЕНИРОВКА
# ==========================

def select_workout(
        workouts: List[WorkoutPlan],
        weekday: int,
        difficulty: Difficulty
) -> Tuple[Optional[WorkoutPlan], bool]:
    """
    Возвращает (тренировка, применен_ли_запасной_вариант).
    Сначала точное совпадение дня и уровня, затем первая доступная по уровню тренировка.
    """
    allowed = ALLOWED_DIFFICULTIES[difficulty]

    for workout in workouts:
        if workout.day_of_week == weekday and workout.difficulty in allowed:
            return workout, False

    for workout in workouts:
        if workout.difficulty in allowed:
            return workout, True

    return None, False


def estimate_exercise_minutes(exercise: Exercise) -> Tuple[float, float]:
    """Время выполнения и отдыха упражнения в минутах (без округления)."""
    sets = exercise.sets if exercise.sets is not None else 1

    work_minutes = 0.0
    if exercise.duration:
        work_minutes = exercise.duration * sets / 60
    elif exercise.sets and exercise.reps:
        reps = exercise.reps if isinstance(exercise.reps, int) else DEFAULT_REPS
        work_minutes = exercise.sets * reps * SECONDS_PER_REP / 60

    rest_seconds = exercise.rest_time if exercise.rest_time is not None else DEFAULT_REST_SECONDS
    rest_minutes = rest_seconds * (sets - 1) / 60
    return work_minutes, rest_minutes


def enrich_workout(workout: WorkoutPlan) -> PlannedWorkout:
    total_minutes = 0.0
    rest_total = 0.0
    details = []

    for index, exercise in enumerate(workout.exercises):
        work_minutes, rest_minutes = estimate_exercise_minutes(exercise)
        total_minutes += work_minutes + rest_minutes
        rest_total += rest_minutes
        details.append(EnrichedExercise(
            exercise=exercise,
            order_in_workout=index + 1,
            estimated_minutes=round_half_up(work_minutes + rest_minutes),
            has_video=bool(exercise.video_url)
        ))

    return PlannedWorkout(
        plan=workout,
        exercise_details=details,
        completion_estimate=CompletionEstimate(
            total_minutes=round_half_up(total_minutes),
            total_calories=workout.estimated_calories,
            rest_minutes=round_half_up(rest_total)
        )
    )


# ==========================
# ПИТАНИЕ
# ==========================

def order_meal_candidates(candidates: List[Meal], intensity: MealIntensity) -> List[Meal]:
    if intensity == MealIntensity.light:
        return sorted(candidates, key=lambda meal: meal.nutrition.calories)
    if intensity == MealIntensity.high_energy:
        return sorted(candidates, key=lambda meal: meal.nutrition.protein, reverse=True)
    return list(candidates)


def select_meal(meals: List[Meal], slot: MealType, weekday: int, intensity: MealIntensity) -> Optional[Meal]:
    candidates = order_meal_candidates([meal for meal in meals if meal.type == slot], intensity)
    if not candidates:
        return None
    return candidates[weekday % len(candidates)]


def sum_nutrition(meals: List[Meal]) -> NutritionInfo:
    return NutritionInfo(
        calories=sum(meal.nutrition.calories for meal in meals),
        protein=sum(meal.nutrition.protein for meal in meals),
        carbs=sum(meal.nutrition.carbs for meal in meals),
        fat=sum(meal.nutrition.fat for meal in meals)
    )


# ==========================
# СБОРКА ДНЯ
# ==========================

def assemble_daily_plan(
        day: date,
        personalization: PersonalizationResult,
        catalog: StaticCatalog
) -> DailyPlan:
    weekday = day_of_week(day)
    key = personalization_key(personalization)
    issues: List[PlanIssue] = []

    # Окно голодания
    window: Optional[FastingWindow] = catalog.fasting_window(key.fasting_plan)
    if window is None:
        issues.append(PlanIssue(
            code=E_MISSING_FASTING,
            message=f"Нет окна голодания для плана {key.fasting_plan.value}",
            component=PlanComponent.fasting,
            severity=IssueSeverity.error
        ))
    elif window.fasting_hours + window.eating_hours != 24:
        issues.append(PlanIssue(
            code=E_FASTING_HOURS,
            message=(
                f"Часы голодания и питания в сумме дают "
                f"{window.fasting_hours + window.eating_hours}, а не 24"
            ),
            component=PlanComponent.fasting,
            severity=IssueSeverity.error
        ))

    # Тренировка
    rest_day = is_rest_day(day)
    workout: Optional[PlannedWorkout] = None
    if not rest_day:
        selected, fallback = select_workout(catalog.list_workouts(), weekday, key.workout_difficulty)
        if selected is None:
            issues.append(PlanIssue(
                code=E_MISSING_WORKOUT,
                message=f"Нет тренировки уровня {key.workout_difficulty.value} в каталоге",
                component=PlanComponent.workout,
                severity=IssueSeverity.error
            ))
        else:
            if fallback:
                issues.append(PlanIssue(
                    code=W_WORKOUT_FALLBACK,
                    message=f"Нет тренировки на день {weekday}, выбрана '{selected.name}'",
                    component=PlanComponent.workout,
                    severity=IssueSeverity.warning,
                    fallback_applied=True
                ))
            workout = enrich_workout(selected)
            without_video = [d for d in workout.exercise_details if not d.has_video]
            if without_video:
                issues.append(PlanIssue(
                    code=W_EXERCISE_NO_VIDEO,
                    message=f"Упражнений без видео: {len(without_video)}",
                    component=PlanComponent.workout,
                    severity=IssueSeverity.warning
                ))

    # Питание
    catalog_meals = catalog.list_meals()
    scheduled: List[ScheduledMeal] = []
    chosen: List[Meal] = []
    for slot in MEAL_SLOTS:
        meal = select_meal(catalog_meals, slot, weekday, key.meal_intensity)
        scheduled_time = meal_time_for(key.fasting_plan, slot)
        within = window is not None and is_within_window(scheduled_time, window)

        if meal is None:
            issues.append(PlanIssue(
                code=E_MISSING_MEAL,
                message=f"Нет блюд для приема пищи '{slot.value}'",
                component=PlanComponent.meal,
                severity=IssueSeverity.error
            ))
        else:
            chosen.append(meal)
            if window is not None and not within:
                issues.append(PlanIssue(
                    code=W_MEAL_OUTSIDE_WINDOW,
                    message=f"Прием пищи '{slot.value}' в {scheduled_time} вне окна питания",
                    component=PlanComponent.meal,
                    severity=IssueSeverity.warning
                ))

        scheduled.append(ScheduledMeal(
            slot=slot,
            meal=meal,
            scheduled_time=scheduled_time,
            is_within_window=within
        ))

    meals_without_video = [meal for meal in chosen if not meal.video_url]
    if meals_without_video:
        issues.append(PlanIssue(
            code=W_MEAL_NO_VIDEO,
            message=f"Блюд без видео: {len(meals_without_video)}",
            component=PlanComponent.meal,
            severity=IssueSeverity.warning
        ))

    is_valid = not any(issue.severity == IssueSeverity.error for issue in issues)
    if issues:
        log = logger.info if is_valid else logger.warning
        log(f"План на {day.isoformat()}: {', '.join(issue.code for issue in issues)}")

    return DailyPlan(
        date=day,
        day_of_week=weekday,
        workout=workout,
        meals=MealPlan(slots=scheduled, total_nutrition=sum_nutrition(chosen)),
        fasting=window,
        is_rest_day=rest_day,
        is_valid=is_valid,
        issues=issues,
        personalization=key
    )


def assemble_week(
        start: date,
        personalization: PersonalizationResult,
        catalog: StaticCatalog
) -> List[DailyPlan]:
    """Планы на 7 дней подряд, начиная с start."""
    return [
        assemble_daily_plan(start + timedelta(days=offset), personalization, catalog)
        for offset in range(7)
    ]


def needs_regeneration(plan: DailyPlan, personalization: PersonalizationResult) -> bool:
    return plan.personalization != personalization_key(personalization)


def summarize(plan: DailyPlan) -> PlanSummary:
    return PlanSummary(
        date=plan.date,
        is_rest_day=plan.is_rest_day,
        workout_name=plan.workout.plan.name if plan.workout else None,
        workout_duration=plan.workout.completion_estimate.total_minutes if plan.workout else None,
        meal_count=sum(1 for slot in plan.meals.slots if slot.meal is not None),
        total_calories=plan.meals.total_nutrition.calories,
        fasting_plan=plan.personalization.fasting_plan,
        has_errors=any(issue.severity == IssueSeverity.error for issue in plan.issues),
        has_warnings=any(issue.severity == IssueSeverity.warning for issue in plan.issues)
    )
