"""
Движок персонализации: анкета онбординга -> параметры плана.

Все правила детерминированы: одинаковый профиль всегда дает одинаковый результат.
Недостающие поля заполняются в одном месте (resolve_profile) до применения правил.
"""
import logging
from typing import List, NamedTuple, Optional

from fitplan.core.config import settings
from fitplan.schemas.profile import (
    ActivityLevel, AgeBracket, Difficulty, FastingPlan, FitnessAssessment, Gender,
    LastKnownMetrics, PersonalizationOverride, PersonalizationResult, PrimaryGoal,
    ResolvedProfile, UserProfile
)
from fitplan.services.nutrition_calculator import NutritionCalculator
from fitplan.services.rounding import round_half_up_to

logger = logging.getLogger(__name__)


class FastingRule(NamedTuple):
    activity_level: ActivityLevel
    min_weight_kg: Optional[float]  # None - правило не зависит от веса
    plan: FastingPlan


# Порядок значим: применяется первое подходящее правило
FASTING_RULES: List[FastingRule] = [
    FastingRule(ActivityLevel.active, None, FastingPlan.plan_12_12),
    FastingRule(ActivityLevel.sedentary, 80.0, FastingPlan.plan_14_10),
    FastingRule(ActivityLevel.sedentary, None, FastingPlan.plan_16_8),
    FastingRule(ActivityLevel.moderate, 85.0, FastingPlan.plan_14_10),
    FastingRule(ActivityLevel.moderate, None, FastingPlan.plan_16_8),
]

DEFAULT_FASTING_PLAN = FastingPlan.plan_16_8

# (порог, балл) по убыванию порога
PUSH_UP_SCORES = [(50, 100), (40, 90), (30, 75), (20, 60), (10, 45), (5, 30), (0, 15)]
PULL_UP_SCORES = [(20, 100), (15, 90), (10, 75), (5, 60), (2, 40), (1, 25), (0, 10)]


def _score(count: int, table) -> int:
    for threshold, score in table:
        if count >= threshold:
            return score
    return table[-1][1]


def assess_fitness(push_ups: int, pull_ups: int) -> FitnessAssessment:
    """Оценка уровня подготовки по количеству отжиманий и подтягиваний."""
    strength_score = _score(push_ups, PUSH_UP_SCORES)
    stamina_score = _score(pull_ups, PULL_UP_SCORES)

    avg_score = (strength_score + stamina_score) / 2
    if avg_score >= 70:
        overall_level = Difficulty.advanced
    elif avg_score >= 45:
        overall_level = Difficulty.intermediate
    else:
        overall_level = Difficulty.beginner

    return FitnessAssessment(
        push_ups=push_ups,
        pull_ups=pull_ups,
        strength_score=strength_score,
        stamina_score=stamina_score,
        overall_level=overall_level
    )


def resolve_profile(
        profile: UserProfile,
        last_known: Optional[LastKnownMetrics] = None
) -> ResolvedProfile:
    """Подставляет значения по умолчанию и фиксирует, какие поля были подставлены."""
    defaulted: List[str] = []

    def pick_metric(value: Optional[float], field: str, fallback: float) -> float:
        if value is not None:
            return value
        known = getattr(last_known, field, None) if last_known else None
        if known is not None:
            defaulted.append(f"{field}:last_known")
            return known
        defaulted.append(field)
        return fallback

    height = pick_metric(profile.height_cm, "height_cm", settings.DEFAULT_HEIGHT_CM)
    weight = pick_metric(profile.weight_kg, "weight_kg", settings.DEFAULT_WEIGHT_KG)

    target_weight = profile.target_weight_kg
    if target_weight is None:
        target_weight = weight
        defaulted.append("target_weight_kg")

    gender = profile.gender
    if gender is None:
        gender = Gender.male
        defaulted.append("gender")

    age_bracket = profile.age_bracket
    if age_bracket is None:
        age_bracket = AgeBracket(settings.DEFAULT_AGE_BRACKET)
        defaulted.append("age_bracket")

    activity_level = profile.activity_level
    if activity_level is None:
        activity_level = ActivityLevel.moderate
        defaulted.append("activity_level")

    primary_goal = profile.primary_goal
    if primary_goal is None:
        primary_goal = PrimaryGoal.get_fit_toned
        defaulted.append("primary_goal")

    assessment = profile.fitness_assessment
    if assessment is None and (profile.push_up_count is not None or profile.pull_up_count is not None):
        assessment = assess_fitness(profile.push_up_count or 0, profile.pull_up_count or 0)
    if assessment is None:
        defaulted.append("fitness_assessment")

    if defaulted:
        logger.info(f"Профиль дополнен значениями по умолчанию: {', '.join(defaulted)}")

    return ResolvedProfile(
        gender=gender,
        age_bracket=age_bracket,
        height_cm=height,
        weight_kg=weight,
        target_weight_kg=target_weight,
        activity_level=activity_level,
        primary_goal=primary_goal,
        experience=profile.experience,
        fitness_assessment=assessment,
        daily_water_intake_liters=profile.daily_water_intake_liters,
        defaulted_fields=defaulted
    )


class PersonalizationEngine:
    @classmethod
    def select_fasting_plan(cls, activity_level: ActivityLevel, weight_kg: float) -> FastingPlan:
        for rule in FASTING_RULES:
            if rule.activity_level != activity_level:
                continue
            if rule.min_weight_kg is None or weight_kg >= rule.min_weight_kg:
                return rule.plan
        return DEFAULT_FASTING_PLAN

    @classmethod
    def select_workout_difficulty(cls, assessment: Optional[FitnessAssessment]) -> Difficulty:
        if assessment is None:
            return Difficulty.beginner
        return assessment.overall_level

    @classmethod
    def derive(cls, resolved: ResolvedProfile) -> PersonalizationResult:
        calories = NutritionCalculator.calculate_calorie_target(
            weight=resolved.weight_kg,
            height=resolved.height_cm,
            age_bracket=resolved.age_bracket,
            gender=resolved.gender,
            activity_level=resolved.activity_level,
            goal=resolved.primary_goal
        )

        if resolved.daily_water_intake_liters is not None:
            water = round_half_up_to(resolved.daily_water_intake_liters, 1)
        else:
            water = NutritionCalculator.calculate_water_target(resolved.weight_kg)

        return PersonalizationResult(
            fasting_plan=cls.select_fasting_plan(resolved.activity_level, resolved.weight_kg),
            workout_difficulty=cls.select_workout_difficulty(resolved.fitness_assessment),
            meal_intensity=NutritionCalculator.meal_intensity_for(calories),
            daily_calorie_target=calories,
            daily_protein_target=NutritionCalculator.calculate_protein_target(
                resolved.weight_kg, resolved.primary_goal
            ),
            water_target_liters=water,
            estimated_weeks_to_goal=NutritionCalculator.calculate_weeks_to_goal(
                resolved.weight_kg, resolved.target_weight_kg
            ),
            bmi=NutritionCalculator.calculate_bmi(resolved.weight_kg, resolved.height_cm),
            fitness_assessment=resolved.fitness_assessment,
            defaulted_fields=list(resolved.defaulted_fields)
        )


def derive_personalization(
        profile: UserProfile,
        last_known: Optional[LastKnownMetrics] = None
) -> PersonalizationResult:
    return PersonalizationEngine.derive(resolve_profile(profile, last_known))


def apply_override(
        result: PersonalizationResult,
        override: Optional[PersonalizationOverride]
) -> PersonalizationResult:
    """Заменяет производные поля явно заданными значениями."""
    if override is None:
        return result

    updates = override.model_dump(exclude_none=True)
    if not updates:
        return result

    overridden = sorted(set(result.overridden_fields) | set(updates))
    logger.info(f"Применено переопределение полей: {', '.join(sorted(updates))}")
    return result.model_copy(update={**updates, "overridden_fields": overridden})
