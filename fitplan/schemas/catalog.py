from pydantic import BaseModel, Field
from typing import Optional, List, Union
from enum import Enum

from fitplan.schemas.profile import Difficulty, FastingPlan


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


# Порядок слотов в дне
MEAL_SLOTS = [MealType.breakfast, MealType.lunch, MealType.dinner, MealType.snack]


class NutritionInfo(BaseModel):
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0

    class Config:
        frozen = True


class Exercise(BaseModel):
    id: str
    name: str
    difficulty: Difficulty = Difficulty.beginner
    sets: Optional[int] = None
    reps: Optional[Union[int, str]] = None  # "10-15" или 12
    duration: Optional[int] = None  # секунды
    rest_time: Optional[int] = None  # секунды между подходами
    calories: Optional[int] = None
    video_url: Optional[str] = None

    class Config:
        frozen = True


class WorkoutPlan(BaseModel):
    id: str
    name: str
    description: str = ""
    day_of_week: int = Field(ge=0, le=6)  # 0 = воскресенье
    difficulty: Difficulty
    exercises: List[Exercise]
    estimated_calories: int = 0

    class Config:
        frozen = True


class Meal(BaseModel):
    id: str
    name: str
    type: MealType
    nutrition: NutritionInfo
    prep_time: Optional[int] = None
    video_url: Optional[str] = None

    class Config:
        frozen = True


class FastingWindow(BaseModel):
    plan: FastingPlan
    fasting_hours: int
    eating_hours: int
    eating_start: str  # "12:00"
    eating_end: str
    fasting_start: str
    fasting_end: str

    class Config:
        frozen = True
