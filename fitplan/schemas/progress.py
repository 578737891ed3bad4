from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from enum import Enum

from fitplan.schemas.catalog import MealType
from fitplan.schemas.profile import FastingPlan


class ExerciseStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    skipped = "skipped"


class MealStatus(str, Enum):
    pending = "pending"
    options_available = "options_available"
    selected = "selected"
    eaten = "eaten"
    skipped = "skipped"


class MilestoneType(str, Enum):
    first_workout = "first_workout"
    day_complete = "day_complete"
    week_complete = "week_complete"
    exercise_count = "exercise_count"


class TransitionCode(str, Enum):
    day_not_initialized = "day_not_initialized"
    exercise_not_found = "exercise_not_found"
    exercise_in_progress = "exercise_in_progress"
    out_of_sequence = "out_of_sequence"
    not_in_progress = "not_in_progress"
    exercise_finished = "exercise_finished"
    meal_not_found = "meal_not_found"
    meal_finished = "meal_finished"
    meal_not_bound = "meal_not_bound"
    meal_selection_pending = "meal_selection_pending"
    option_not_offered = "option_not_offered"
    fasting_not_tracked = "fasting_not_tracked"
    fasting_not_started = "fasting_not_started"
    fasting_already_started = "fasting_already_started"
    fasting_already_completed = "fasting_already_completed"
    compliance_out_of_range = "compliance_out_of_range"


class ExerciseProgress(BaseModel):
    exercise_id: str
    exercise_name: str
    status: ExerciseStatus = ExerciseStatus.pending
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    sets_completed: Optional[int] = None
    reps_completed: Optional[int] = None

    class Config:
        frozen = True


class MealProgress(BaseModel):
    slot: MealType
    meal_id: Optional[str] = None
    meal_name: Optional[str] = None
    status: MealStatus = MealStatus.pending
    scheduled_time: str = ""
    available_options: Optional[List[str]] = None
    selected_at: Optional[datetime] = None
    eaten_at: Optional[datetime] = None

    class Config:
        frozen = True


class FastingProgress(BaseModel):
    plan: FastingPlan
    fasting_started: bool = False
    fasting_completed: bool = False
    eating_window_used: bool = False
    compliance_percent: int = Field(default=0, ge=0, le=100)

    class Config:
        frozen = True


class DailyProgress(BaseModel):
    date: date
    day_number: int
    exercises: List[ExerciseProgress] = []
    meals: List[MealProgress] = []
    fasting: Optional[FastingProgress] = None
    total_exercises: int = 0
    completed_exercises: int = 0
    total_meals: int = 0
    completed_meals: int = 0
    current_exercise_index: int = 0
    workout_started_at: Optional[datetime] = None
    workout_completed_at: Optional[datetime] = None
    is_workout_complete: bool = False
    daily_completion_percent: int = 0

    class Config:
        frozen = True


class Milestone(BaseModel):
    id: str
    type: MilestoneType
    title: str
    description: str
    achieved_at: datetime
    day_number: int
    value: Optional[int] = None

    class Config:
        frozen = True


class InvalidTransition(BaseModel):
    """Нарушение охранного условия перехода. Состояние при этом не меняется."""
    code: TransitionCode
    message: str

    class Config:
        frozen = True


class TransitionResult(BaseModel):
    applied: bool
    progress: Optional[DailyProgress] = None
    error: Optional[InvalidTransition] = None
    milestone: Optional[Milestone] = None


class ProgressHistorySnapshot(BaseModel):
    """Полная история прогресса пользователя в сериализуемом виде."""
    start_date: Optional[date] = None
    current_day_number: int = 1
    days: List[DailyProgress] = []
    milestones: List[Milestone] = []
    pending_milestone: Optional[Milestone] = None


# ==========================
# ЗАПРОСЫ API
# ==========================

class ExerciseCompletion(BaseModel):
    sets_completed: Optional[int] = Field(default=None, ge=0)
    reps_completed: Optional[int] = Field(default=None, ge=0)


class MealOptionsRequest(BaseModel):
    option_ids: List[str] = Field(min_length=1)


class MealSelectRequest(BaseModel):
    meal_id: str


class FastingComplianceRequest(BaseModel):
    compliance_percent: int


class InitializeDayRequest(BaseModel):
    day_number: Optional[int] = Field(default=None, ge=1)


# ==========================
# ОТВЕТЫ API
# ==========================

class MilestonesResponse(BaseModel):
    milestones: List[Milestone] = []
    pending_milestone: Optional[Milestone] = None


class NextStepsResponse(BaseModel):
    current_exercise: Optional[ExerciseProgress] = None
    next_exercise: Optional[ExerciseProgress] = None
    next_meal: Optional[MealProgress] = None
