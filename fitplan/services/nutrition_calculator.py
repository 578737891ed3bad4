from fitplan.schemas.profile import ActivityLevel, AgeBracket, Gender, MealIntensity, PrimaryGoal
from fitplan.services.rounding import round_half_up, round_half_up_to


class NutritionCalculator:
    ACTIVITY_MULTIPLIERS = {
        ActivityLevel.sedentary: 1.2,
        ActivityLevel.moderate: 1.55,
        ActivityLevel.active: 1.725
    }

    # Фиксированная поправка к TDEE по цели, ккал
    GOAL_OFFSETS = {
        PrimaryGoal.lose_weight: -500,
        PrimaryGoal.build_muscle: 300,
        PrimaryGoal.gain_muscle_lose_weight: 0,
        PrimaryGoal.get_fit_toned: 0
    }

    # Белок в граммах на кг веса
    PROTEIN_PER_KG = {
        PrimaryGoal.build_muscle: 2.0,
        PrimaryGoal.gain_muscle_lose_weight: 1.8,
        PrimaryGoal.lose_weight: 1.5,
        PrimaryGoal.get_fit_toned: 1.4
    }

    # Представительный возраст для каждой возрастной группы
    BRACKET_AGES = {
        AgeBracket.age_18_29: 24,
        AgeBracket.age_30_39: 35,
        AgeBracket.age_40_49: 45,
        AgeBracket.age_50_plus: 55
    }

    # Верхние границы диапазонов калорий (включительно)
    LIGHT_MAX_CALORIES = 1700
    STANDARD_MAX_CALORIES = 2000

    WATER_LITERS_PER_KG = 0.033

    @classmethod
    def calculate_bmr(cls, weight: float, height: float, age: int, gender: Gender) -> float:
        if gender == Gender.female:
            return 10 * weight + 6.25 * height - 5 * age - 161
        else:
            return 10 * weight + 6.25 * height - 5 * age + 5

    @classmethod
    def calculate_tdee(cls, bmr: float, activity_level: ActivityLevel) -> float:
        multiplier = cls.ACTIVITY_MULTIPLIERS.get(activity_level, 1.55)
        return bmr * multiplier

    @classmethod
    def calculate_calorie_target(
            cls,
            weight: float,
            height: float,
            age_bracket: AgeBracket,
            gender: Gender,
            activity_level: ActivityLevel,
            goal: PrimaryGoal
    ) -> int:
        bmr = cls.calculate_bmr(weight, height, cls.BRACKET_AGES[age_bracket], gender)
        tdee = cls.calculate_tdee(bmr, activity_level)
        return round_half_up(tdee + cls.GOAL_OFFSETS.get(goal, 0))

    @classmethod
    def meal_intensity_for(cls, calories: int) -> MealIntensity:
        if calories < cls.LIGHT_MAX_CALORIES:
            return MealIntensity.light
        if calories <= cls.STANDARD_MAX_CALORIES:
            return MealIntensity.standard
        return MealIntensity.high_energy

    @classmethod
    def calculate_protein_target(cls, weight: float, goal: PrimaryGoal) -> int:
        return round_half_up(weight * cls.PROTEIN_PER_KG.get(goal, 1.4))

    @classmethod
    def calculate_water_target(cls, weight: float) -> float:
        return round_half_up_to(weight * cls.WATER_LITERS_PER_KG, 1)

    @classmethod
    def calculate_bmi(cls, weight: float, height: float) -> float:
        height_m = height / 100
        return round_half_up_to(weight / (height_m * height_m), 1)

    @classmethod
    def calculate_weeks_to_goal(cls, current_weight: float, target_weight: float) -> int:
        # Устойчивый темп 0.5-1 кг в неделю, берем середину диапазона
        diff = abs(current_weight - target_weight)
        weeks_fast = diff / 1
        weeks_slow = diff / 0.5
        return round_half_up((weeks_fast + weeks_slow) / 2)
