from pydantic import BaseModel
from datetime import date


class WeeklyStats(BaseModel):
    week_number: int
    start_date: date
    end_date: date
    total_workout_days: int = 0
    completed_workout_days: int = 0
    total_exercises: int = 0
    completed_exercises: int = 0
    total_meals: int = 0
    completed_meals: int = 0
    fasting_compliance_percent: int = 0
    overall_completion_percent: int = 0


class MonthlyStats(BaseModel):
    month: int
    year: int
    total_workout_days: int = 0
    completed_workout_days: int = 0
    total_exercises: int = 0
    completed_exercises: int = 0
    streak_days: int = 0
    longest_streak: int = 0
    overall_completion_percent: int = 0
