"""
Одноразовые достижения.

Таблица проверяется по порядку после каждого завершенного упражнения.
За один проход выдается не больше одного достижения, даже если выполнено
сразу несколько условий: остальные будут выданы на следующих проходах.
"""
import logging
from datetime import datetime
from typing import Callable, List, NamedTuple, Optional

from fitplan.schemas.progress import Milestone, MilestoneType
from fitplan.services.progress_history import ProgressHistory

logger = logging.getLogger(__name__)


class MilestoneDefinition(NamedTuple):
    id: str
    type: MilestoneType
    title: str
    description: str
    value: int
    check: Callable[[ProgressHistory], bool]


def _days_complete(threshold: int) -> Callable[[ProgressHistory], bool]:
    def check(history: ProgressHistory) -> bool:
        return history.current_day_number >= threshold and history.completed_days() >= threshold
    return check


def _exercises_complete(threshold: int) -> Callable[[ProgressHistory], bool]:
    def check(history: ProgressHistory) -> bool:
        return history.total_completed_exercises() >= threshold
    return check


MILESTONE_DEFINITIONS: List[MilestoneDefinition] = [
    MilestoneDefinition(
        "first_exercise", MilestoneType.first_workout,
        "First Blood!", "You completed your first exercise. The journey has begun!",
        1, _exercises_complete(1)
    ),
    MilestoneDefinition(
        "day_3_complete", MilestoneType.day_complete,
        "3 Days Strong!", "You've completed 3 full days. You're building momentum!",
        3, _days_complete(3)
    ),
    MilestoneDefinition(
        "day_7_complete", MilestoneType.week_complete,
        "Week Warrior!", "A full week completed! You're unstoppable!",
        7, _days_complete(7)
    ),
    MilestoneDefinition(
        "day_14_complete", MilestoneType.day_complete,
        "Two Week Champion!", "14 days of dedication. Habits are forming!",
        14, _days_complete(14)
    ),
    MilestoneDefinition(
        "day_30_complete", MilestoneType.day_complete,
        "Monthly Master!", "30 days complete! You've built a true habit!",
        30, _days_complete(30)
    ),
    MilestoneDefinition(
        "exercise_50", MilestoneType.exercise_count,
        "50 Exercises!", "You've crushed 50 exercises. Keep going!",
        50, _exercises_complete(50)
    ),
    MilestoneDefinition(
        "exercise_100", MilestoneType.exercise_count,
        "Century Club!", "100 exercises completed. You're a machine!",
        100, _exercises_complete(100)
    ),
]


def evaluate_milestones(
        history: ProgressHistory,
        now: datetime,
        definitions: Optional[List[MilestoneDefinition]] = None
) -> Optional[Milestone]:
    """
    Находит первое новое выполненное условие и записывает достижение в историю.
    Возвращает выданное достижение или None.
    """
    awarded = set(history.awarded_ids())

    for definition in definitions if definitions is not None else MILESTONE_DEFINITIONS:
        if definition.id in awarded:
            continue
        if not definition.check(history):
            continue

        milestone = Milestone(
            id=definition.id,
            type=definition.type,
            title=definition.title,
            description=definition.description,
            achieved_at=now,
            day_number=history.current_day_number,
            value=definition.value
        )
        history.milestones.append(milestone)
        history.pending_milestone = milestone
        logger.info(f"Выдано достижение {milestone.id} (день {milestone.day_number})")
        return milestone

    return None
