"""
Каталог контента: тренировки, блюда и окна голодания.
Ядро только читает каталог, поэтому все сущности неизменяемые.
"""
import logging
from datetime import date
from typing import Dict, List, Optional

from fitplan.core.initial_catalog import (
    INITIAL_EXERCISES, INITIAL_FASTING_WINDOWS, INITIAL_MEALS, INITIAL_WORKOUTS
)
from fitplan.schemas.catalog import Exercise, FastingWindow, Meal, MealType, WorkoutPlan
from fitplan.schemas.profile import FastingPlan

logger = logging.getLogger(__name__)

# Голодание всегда начинается в конце окна питания
FASTING_START = "20:00"

# Время приема пищи внутри окна питания для каждого плана
MEAL_TIMES: Dict[FastingPlan, Dict[MealType, str]] = {
    FastingPlan.plan_12_12: {
        MealType.breakfast: "08:00",
        MealType.lunch: "12:00",
        MealType.snack: "15:00",
        MealType.dinner: "18:00",
    },
    FastingPlan.plan_14_10: {
        MealType.breakfast: "10:00",
        MealType.lunch: "13:00",
        MealType.snack: "15:30",
        MealType.dinner: "18:00",
    },
    FastingPlan.plan_16_8: {
        MealType.breakfast: "12:00",
        MealType.lunch: "15:00",
        MealType.snack: "17:00",
        MealType.dinner: "19:00",
    },
    FastingPlan.plan_18_6: {
        MealType.breakfast: "14:00",
        MealType.lunch: "16:00",
        MealType.snack: "17:30",
        MealType.dinner: "19:30",
    },
}


def day_of_week(day: date) -> int:
    """День недели в формате каталога: 0 = воскресенье ... 6 = суббота."""
    return day.isoweekday() % 7


def meal_time_for(plan: FastingPlan, slot: MealType) -> str:
    return MEAL_TIMES[plan][slot]


def is_within_window(clock_time: str, window: FastingWindow) -> bool:
    # Строки "ЧЧ:ММ" сравниваются лексикографически так же, как время
    return window.eating_start <= clock_time < window.eating_end


class StaticCatalog:
    """Каталог в памяти. По умолчанию заполняется начальными данными."""

    def __init__(
            self,
            workouts: Optional[List[WorkoutPlan]] = None,
            meals: Optional[List[Meal]] = None,
            fasting_windows: Optional[Dict[FastingPlan, FastingWindow]] = None
    ):
        self._workouts = list(workouts) if workouts is not None else build_initial_workouts()
        self._meals = list(meals) if meals is not None else build_initial_meals()
        self._fasting_windows = (
            dict(fasting_windows) if fasting_windows is not None else build_initial_fasting_windows()
        )

    def list_workouts(self) -> List[WorkoutPlan]:
        return list(self._workouts)

    def list_meals(self) -> List[Meal]:
        return list(self._meals)

    def fasting_window(self, plan: FastingPlan) -> Optional[FastingWindow]:
        window = self._fasting_windows.get(plan)
        if window is None:
            logger.warning(f"В каталоге нет окна голодания для плана {plan.value}")
        return window

    def get_meal(self, meal_id: str) -> Optional[Meal]:
        for meal in self._meals:
            if meal.id == meal_id:
                return meal
        return None


def build_initial_workouts() -> List[WorkoutPlan]:
    exercises = {
        exercise_id: Exercise(id=exercise_id, **data)
        for exercise_id, data in INITIAL_EXERCISES.items()
    }
    workouts = []
    for data in INITIAL_WORKOUTS:
        workouts.append(WorkoutPlan(
            id=data["id"],
            name=data["name"],
            description=data["description"],
            day_of_week=data["day_of_week"],
            difficulty=data["difficulty"],
            exercises=[exercises[exercise_id] for exercise_id in data["exercises"]],
            estimated_calories=data["estimated_calories"]
        ))
    return workouts


def build_initial_meals() -> List[Meal]:
    return [Meal(**data) for data in INITIAL_MEALS]


def build_initial_fasting_windows() -> Dict[FastingPlan, FastingWindow]:
    windows = {}
    for plan_value, data in INITIAL_FASTING_WINDOWS.items():
        plan = FastingPlan(plan_value)
        windows[plan] = FastingWindow(
            plan=plan,
            fasting_start=FASTING_START,
            fasting_end=data["eating_start"],
            **data
        )
    return windows
