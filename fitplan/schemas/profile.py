from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum


class Gender(str, Enum):
    male = "male"
    female = "female"


class AgeBracket(str, Enum):
    age_18_29 = "18-29"
    age_30_39 = "30-39"
    age_40_49 = "40-49"
    age_50_plus = "50+"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    moderate = "moderate"
    active = "active"


class PrimaryGoal(str, Enum):
    lose_weight = "lose_weight"
    build_muscle = "build_muscle"
    gain_muscle_lose_weight = "gain_muscle_lose_weight"
    get_fit_toned = "get_fit_toned"


class ExperienceLevel(str, Enum):
    never = "never"
    beginner = "beginner"
    some = "some"
    regular = "regular"
    advanced = "advanced"


class FastingPlan(str, Enum):
    plan_12_12 = "12:12"
    plan_14_10 = "14:10"
    plan_16_8 = "16:8"
    plan_18_6 = "18:6"


class Difficulty(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class MealIntensity(str, Enum):
    light = "light"
    standard = "standard"
    high_energy = "high_energy"


class FitnessAssessment(BaseModel):
    push_ups: int = Field(ge=0)
    pull_ups: int = Field(ge=0)
    strength_score: int = Field(ge=0, le=100)
    stamina_score: int = Field(ge=0, le=100)
    overall_level: Difficulty

    class Config:
        frozen = True


class UserProfile(BaseModel):
    """Анкета онбординга. Любое поле может отсутствовать."""
    gender: Optional[Gender] = None
    age_bracket: Optional[AgeBracket] = None
    height_cm: Optional[float] = Field(default=None, gt=0)
    weight_kg: Optional[float] = Field(default=None, gt=0)
    target_weight_kg: Optional[float] = Field(default=None, gt=0)
    activity_level: Optional[ActivityLevel] = None
    primary_goal: Optional[PrimaryGoal] = None
    experience: Optional[ExperienceLevel] = None
    push_up_count: Optional[int] = Field(default=None, ge=0)
    pull_up_count: Optional[int] = Field(default=None, ge=0)
    fitness_assessment: Optional[FitnessAssessment] = None
    daily_water_intake_liters: Optional[float] = Field(default=None, gt=0)

    class Config:
        frozen = True


class LastKnownMetrics(BaseModel):
    """Последние известные замеры пользователя (для подстановки)."""
    height_cm: Optional[float] = Field(default=None, gt=0)
    weight_kg: Optional[float] = Field(default=None, gt=0)


class ResolvedProfile(BaseModel):
    """Полностью заполненный профиль после шага подстановки значений."""
    gender: Gender
    age_bracket: AgeBracket
    height_cm: float
    weight_kg: float
    target_weight_kg: float
    activity_level: ActivityLevel
    primary_goal: PrimaryGoal
    experience: Optional[ExperienceLevel] = None
    fitness_assessment: Optional[FitnessAssessment] = None
    daily_water_intake_liters: Optional[float] = None
    defaulted_fields: List[str] = []

    class Config:
        frozen = True


class PersonalizationResult(BaseModel):
    fasting_plan: FastingPlan
    workout_difficulty: Difficulty
    meal_intensity: MealIntensity
    daily_calorie_target: int
    daily_protein_target: int
    water_target_liters: float
    estimated_weeks_to_goal: int
    bmi: float
    fitness_assessment: Optional[FitnessAssessment] = None
    defaulted_fields: List[str] = []
    overridden_fields: List[str] = []

    class Config:
        frozen = True


class PersonalizationOverride(BaseModel):
    """Явная замена производных полей (единственный способ изменить результат)."""
    fasting_plan: Optional[FastingPlan] = None
    workout_difficulty: Optional[Difficulty] = None
    meal_intensity: Optional[MealIntensity] = None
    daily_calorie_target: Optional[int] = Field(default=None, gt=0)
    daily_protein_target: Optional[int] = Field(default=None, gt=0)
    water_target_liters: Optional[float] = Field(default=None, gt=0)
    estimated_weeks_to_goal: Optional[int] = Field(default=None, ge=0)


class ProfileResponse(BaseModel):
    user_id: str
    profile: UserProfile
    override: Optional[PersonalizationOverride] = None
    personalization: PersonalizationResult
