from pydantic import BaseModel
from typing import Optional, List
from datetime import date
from enum import Enum

from fitplan.schemas.catalog import Exercise, FastingWindow, Meal, MealType, NutritionInfo, WorkoutPlan
from fitplan.schemas.profile import Difficulty, FastingPlan, MealIntensity


class PlanComponent(str, Enum):
    workout = "workout"
    meal = "meal"
    fasting = "fasting"
    general = "general"


class IssueSeverity(str, Enum):
    error = "error"
    warning = "warning"


class PlanIssue(BaseModel):
    code: str
    message: str
    component: PlanComponent
    severity: IssueSeverity
    fallback_applied: bool = False

    class Config:
        frozen = True


class EnrichedExercise(BaseModel):
    exercise: Exercise
    order_in_workout: int
    estimated_minutes: int
    has_video: bool

    class Config:
        frozen = True


class CompletionEstimate(BaseModel):
    total_minutes: int
    total_calories: int
    rest_minutes: int

    class Config:
        frozen = True


class PlannedWorkout(BaseModel):
    plan: WorkoutPlan
    exercise_details: List[EnrichedExercise]
    completion_estimate: CompletionEstimate

    class Config:
        frozen = True


class ScheduledMeal(BaseModel):
    slot: MealType
    meal: Optional[Meal] = None
    scheduled_time: str
    is_within_window: bool

    class Config:
        frozen = True


class MealPlan(BaseModel):
    slots: List[ScheduledMeal]
    total_nutrition: NutritionInfo

    class Config:
        frozen = True


class PersonalizationKey(BaseModel):
    """Параметры персонализации, от которых зависит план."""
    fasting_plan: FastingPlan
    workout_difficulty: Difficulty
    meal_intensity: MealIntensity

    class Config:
        frozen = True


class DailyPlan(BaseModel):
    date: date
    day_of_week: int
    workout: Optional[PlannedWorkout] = None
    meals: MealPlan
    fasting: Optional[FastingWindow] = None
    is_rest_day: bool
    is_valid: bool
    issues: List[PlanIssue] = []
    personalization: PersonalizationKey

    class Config:
        frozen = True


class PlanSummary(BaseModel):
    date: date
    is_rest_day: bool
    workout_name: Optional[str] = None
    workout_duration: Optional[int] = None
    meal_count: int
    total_calories: float
    fasting_plan: FastingPlan
    has_errors: bool
    has_warnings: bool
