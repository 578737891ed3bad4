"""
Начальный каталог контента: упражнения, тренировки по дням недели, блюда.
День недели: 0 = воскресенье ... 6 = суббота.
"""

INITIAL_EXERCISES = {
    "ex-1": {"name": "Push-Ups", "difficulty": "beginner", "sets": 3, "reps": "10-15",
             "rest_time": 60, "calories": 50, "video_url": "https://example.com/videos/pushups.mp4"},
    "ex-2": {"name": "Squats", "difficulty": "beginner", "sets": 3, "reps": 15,
             "rest_time": 60, "calories": 60, "video_url": "https://example.com/videos/squats.mp4"},
    "ex-3": {"name": "Plank", "difficulty": "beginner", "sets": 3, "duration": 30,
             "rest_time": 45, "calories": 25},
    "ex-4": {"name": "Lunges", "difficulty": "beginner", "sets": 3, "reps": "12 each leg",
             "rest_time": 60, "calories": 55},
    "ex-5": {"name": "Mountain Climbers", "difficulty": "intermediate", "sets": 3, "duration": 30,
             "rest_time": 30, "calories": 80},
    "ex-6": {"name": "Burpees", "difficulty": "advanced", "sets": 3, "reps": 10,
             "rest_time": 60, "calories": 100},
    "ex-7": {"name": "Dumbbell Rows", "difficulty": "intermediate", "sets": 3, "reps": 12,
             "rest_time": 60, "calories": 45},
    "ex-8": {"name": "Bicycle Crunches", "difficulty": "beginner", "sets": 3, "reps": 20,
             "rest_time": 45, "calories": 35},
}

INITIAL_WORKOUTS = [
    {
        "id": "wp-1",
        "name": "Morning Energizer",
        "description": "Full-body workout to boost energy and metabolism.",
        "day_of_week": 1,
        "difficulty": "beginner",
        "exercises": ["ex-1", "ex-2", "ex-3", "ex-5"],
        "estimated_calories": 215
    },
    {
        "id": "wp-2",
        "name": "Upper Body Strength",
        "description": "Targeted chest and back workout.",
        "day_of_week": 2,
        "difficulty": "intermediate",
        "exercises": ["ex-1", "ex-7", "ex-3"],
        "estimated_calories": 180
    },
    {
        "id": "wp-3",
        "name": "Lower Body Power",
        "description": "Legs and glutes.",
        "day_of_week": 3,
        "difficulty": "intermediate",
        "exercises": ["ex-2", "ex-4", "ex-5"],
        "estimated_calories": 195
    },
    {
        "id": "wp-4",
        "name": "Core Crusher",
        "description": "Core-focused session for a stable midsection.",
        "day_of_week": 4,
        "difficulty": "intermediate",
        "exercises": ["ex-3", "ex-8", "ex-5"],
        "estimated_calories": 140
    },
    {
        "id": "wp-5",
        "name": "HIIT Blast",
        "description": "High-intensity interval training.",
        "day_of_week": 5,
        "difficulty": "advanced",
        "exercises": ["ex-6", "ex-5", "ex-2", "ex-1"],
        "estimated_calories": 290
    },
    {
        "id": "wp-6",
        "name": "Active Recovery",
        "description": "Light stretching and mobility work.",
        "day_of_week": 6,
        "difficulty": "beginner",
        "exercises": ["ex-3"],
        "estimated_calories": 50
    },
]

INITIAL_MEALS = [
    # Завтраки
    {"id": "meal-1", "name": "Protein Power Bowl", "type": "breakfast",
     "nutrition": {"calories": 460, "protein": 25, "carbs": 40, "fat": 22}, "prep_time": 5,
     "video_url": "https://example.com/videos/protein-bowl.mp4"},
    {"id": "meal-2", "name": "Avocado Toast with Eggs", "type": "breakfast",
     "nutrition": {"calories": 480, "protein": 20, "carbs": 35, "fat": 30}, "prep_time": 10},
    # Обеды
    {"id": "meal-3", "name": "Grilled Chicken Salad", "type": "lunch",
     "nutrition": {"calories": 383, "protein": 40, "carbs": 15, "fat": 18}, "prep_time": 15,
     "video_url": "https://example.com/videos/chicken-salad.mp4"},
    {"id": "meal-4", "name": "Quinoa Buddha Bowl", "type": "lunch",
     "nutrition": {"calories": 575, "protein": 18, "carbs": 65, "fat": 26}, "prep_time": 20},
    # Ужины
    {"id": "meal-5", "name": "Salmon with Asparagus", "type": "dinner",
     "nutrition": {"calories": 498, "protein": 42, "carbs": 8, "fat": 32}, "prep_time": 10},
    {"id": "meal-6", "name": "Turkey Stir-Fry", "type": "dinner",
     "nutrition": {"calories": 410, "protein": 38, "carbs": 35, "fat": 12}, "prep_time": 15},
    # Перекусы
    {"id": "meal-7", "name": "Protein Smoothie", "type": "snack",
     "nutrition": {"calories": 445, "protein": 32, "carbs": 40, "fat": 18}, "prep_time": 5},
    {"id": "meal-8", "name": "Mixed Nuts & Fruit", "type": "snack",
     "nutrition": {"calories": 308, "protein": 8, "carbs": 20, "fat": 23}, "prep_time": 2},
]

INITIAL_FASTING_WINDOWS = {
    "12:12": {"fasting_hours": 12, "eating_hours": 12, "eating_start": "08:00", "eating_end": "20:00"},
    "14:10": {"fasting_hours": 14, "eating_hours": 10, "eating_start": "10:00", "eating_end": "20:00"},
    "16:8": {"fasting_hours": 16, "eating_hours": 8, "eating_start": "12:00", "eating_end": "20:00"},
    "18:6": {"fasting_hours": 18, "eating_hours": 6, "eating_start": "14:00", "eating_end": "20:00"},
}
