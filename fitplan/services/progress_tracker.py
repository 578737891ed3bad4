"""
Машина состояний выполнения дня: упражнения, приемы пищи, голодание.

Каждый переход либо применяется целиком и заменяет запись дня новым
неизменяемым снимком, либо отклоняется без каких-либо изменений.
Отклонение возвращается как InvalidTransition, исключения не бросаются.

Упражнения:  pending -> in_progress -> completed, skipped из pending/in_progress.
Приемы пищи: pending -> options_available -> selected -> eaten, skipped из любого
             незавершенного состояния.
"""
import logging
from datetime import date, datetime
from typing import Callable, List, Optional

from fitplan.schemas.catalog import MealType
from fitplan.schemas.plan import DailyPlan
from fitplan.schemas.progress import (
    DailyProgress, ExerciseProgress, ExerciseStatus, FastingProgress, InvalidTransition,
    MealProgress, MealStatus, Milestone, TransitionCode, TransitionResult
)
from fitplan.services.milestones import evaluate_milestones
from fitplan.services.progress_history import ProgressHistory
from fitplan.services.rounding import round_half_up

logger = logging.getLogger(__name__)

EXERCISE_WEIGHT = 60
MEAL_WEIGHT = 40

EXERCISE_TERMINAL = {ExerciseStatus.completed, ExerciseStatus.skipped}
MEAL_TERMINAL = {MealStatus.eaten, MealStatus.skipped}

MilestoneListener = Callable[[Milestone], None]


def recompute(progress: DailyProgress) -> DailyProgress:
    """Пересчет счетчиков и процента выполнения дня."""
    total_exercises = len(progress.exercises)
    completed_exercises = sum(1 for e in progress.exercises if e.status == ExerciseStatus.completed)
    total_meals = len(progress.meals)
    completed_meals = sum(1 for m in progress.meals if m.status == MealStatus.eaten)

    exercise_ratio = completed_exercises / total_exercises if total_exercises else 0
    meal_ratio = completed_meals / total_meals if total_meals else 0

    return progress.model_copy(update={
        "total_exercises": total_exercises,
        "completed_exercises": completed_exercises,
        "total_meals": total_meals,
        "completed_meals": completed_meals,
        "daily_completion_percent": round_half_up(EXERCISE_WEIGHT * exercise_ratio + MEAL_WEIGHT * meal_ratio)
    })


def _replace(items: List, index: int, item) -> List:
    updated = list(items)
    updated[index] = item
    return updated


class ProgressTracker:
    def __init__(self, history: ProgressHistory, clock: Callable[[], datetime] = datetime.utcnow):
        self.history = history
        self.clock = clock
        self._listeners: List[MilestoneListener] = []

    # ==========================
    # СЛУЖЕБНОЕ
    # ==========================

    def subscribe(self, listener: MilestoneListener) -> Callable[[], None]:
        """Подписка на выданные достижения. Возвращает функцию отписки."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _reject(self, day: date, code: TransitionCode, message: str) -> TransitionResult:
        logger.info(f"Переход отклонен ({day.isoformat()}): {code.value} - {message}")
        return TransitionResult(
            applied=False,
            progress=self.history.get(day),
            error=InvalidTransition(code=code, message=message)
        )

    def _commit(self, progress: DailyProgress, milestone: Optional[Milestone] = None) -> TransitionResult:
        progress = recompute(progress)
        self.history.put(progress)
        return TransitionResult(applied=True, progress=progress, milestone=milestone)

    def _notify(self, milestone: Milestone) -> None:
        for listener in list(self._listeners):
            try:
                listener(milestone)
            except Exception as e:
                logger.exception(f"Ошибка обработчика достижения {milestone.id}: {e}")

    def _find_exercise(self, progress: DailyProgress, exercise_id: str) -> int:
        for index, exercise in enumerate(progress.exercises):
            if exercise.exercise_id == exercise_id:
                return index
        return -1

    def _find_meal(self, progress: DailyProgress, slot: MealType) -> int:
        for index, meal in enumerate(progress.meals):
            if meal.slot == slot:
                return index
        return -1

    # ==========================
    # ДЕНЬ
    # ==========================

    def get_day(self, day: date) -> Optional[DailyProgress]:
        return self.history.get(day)

    def initialize_day(self, day: date, plan: DailyPlan, day_number: Optional[int] = None) -> TransitionResult:
        """
        Создает запись дня по плану. Повторный вызов для того же дня ничего не меняет
        и возвращает существующую запись.
        """
        existing = self.history.get(day)
        if existing is not None:
            return TransitionResult(applied=False, progress=existing)

        if self.history.start_date is None:
            self.history.start_date = day
        if day_number is None:
            day_number = max(1, (day - self.history.start_date).days + 1)
        self.history.current_day_number = max(self.history.current_day_number, day_number)

        exercises = []
        if plan.workout is not None:
            exercises = [
                ExerciseProgress(exercise_id=exercise.id, exercise_name=exercise.name)
                for exercise in plan.workout.plan.exercises
            ]

        meals = [
            MealProgress(
                slot=scheduled.slot,
                meal_id=scheduled.meal.id if scheduled.meal else None,
                meal_name=scheduled.meal.name if scheduled.meal else None,
                scheduled_time=scheduled.scheduled_time
            )
            for scheduled in plan.meals.slots
        ]

        fasting = None
        if plan.fasting is not None:
            fasting = FastingProgress(plan=plan.fasting.plan)

        progress = DailyProgress(
            date=day,
            day_number=day_number,
            exercises=exercises,
            meals=meals,
            fasting=fasting
        )
        logger.info(f"Инициализирован день {day.isoformat()} (#{day_number}): {len(exercises)} упражнений")
        return self._commit(progress)

    def reset(self) -> None:
        """Полный сброс истории: дни, достижения, дата старта."""
        self.history.clear()
        logger.info("История прогресса сброшена")

    def dismiss_milestone(self) -> Optional[Milestone]:
        dismissed = self.history.pending_milestone
        self.history.pending_milestone = None
        return dismissed

    # ==========================
    # УПРАЖНЕНИЯ
    # ==========================

    def current_exercise(self, day: date) -> Optional[ExerciseProgress]:
        progress = self.history.get(day)
        if progress is None or progress.current_exercise_index >= len(progress.exercises):
            return None
        return progress.exercises[progress.current_exercise_index]

    def next_exercise(self, day: date) -> Optional[ExerciseProgress]:
        progress = self.history.get(day)
        if progress is None:
            return None
        index = progress.current_exercise_index + 1
        if index >= len(progress.exercises):
            return None
        return progress.exercises[index]

    def can_start_exercise(self, day: date, exercise_id: str) -> bool:
        progress = self.history.get(day)
        if progress is None:
            return False
        index = self._find_exercise(progress, exercise_id)
        if index < 0 or index != progress.current_exercise_index:
            return False
        if progress.exercises[index].status != ExerciseStatus.pending:
            return False
        return not any(e.status == ExerciseStatus.in_progress for e in progress.exercises)

    def start_exercise(self, day: date, exercise_id: str) -> TransitionResult:
        progress = self.history.get(day)
        if progress is None:
            return self._reject(day, TransitionCode.day_not_initialized, "День не инициализирован")

        index = self._find_exercise(progress, exercise_id)
        if index < 0:
            return self._reject(day, TransitionCode.exercise_not_found, f"Упражнение {exercise_id} не найдено")

        if any(e.status == ExerciseStatus.in_progress for e in progress.exercises):
            return self._reject(day, TransitionCode.exercise_in_progress, "Другое упражнение уже выполняется")

        exercise = progress.exercises[index]
        if exercise.status in EXERCISE_TERMINAL:
            return self._reject(day, TransitionCode.exercise_finished, f"Упражнение {exercise_id} уже завершено")

        if index != progress.current_exercise_index:
            return self._reject(
                day, TransitionCode.out_of_sequence,
                f"Сейчас доступно упражнение #{progress.current_exercise_index + 1}, а не #{index + 1}"
            )

        now = self.clock()
        started = exercise.model_copy(update={"status": ExerciseStatus.in_progress, "started_at": now})
        update = {"exercises": _replace(progress.exercises, index, started)}
        if progress.workout_started_at is None:
            update["workout_started_at"] = now
        return self._commit(progress.model_copy(update=update))

    def complete_exercise(
            self,
            day: date,
            exercise_id: str,
            sets_completed: Optional[int] = None,
            reps_completed: Optional[int] = None
    ) -> TransitionResult:
        progress = self.history.get(day)
        if progress is None:
            return self._reject(day, TransitionCode.day_not_initialized, "День не инициализирован")

        index = self._find_exercise(progress, exercise_id)
        if index < 0:
            return self._reject(day, TransitionCode.exercise_not_found, f"Упражнение {exercise_id} не найдено")

        exercise = progress.exercises[index]
        if exercise.status != ExerciseStatus.in_progress:
            return self._reject(day, TransitionCode.not_in_progress, f"Упражнение {exercise_id} не начато")

        now = self.clock()
        duration = None
        if exercise.started_at is not None:
            duration = max(0, int((now - exercise.started_at).total_seconds()))

        completed = exercise.model_copy(update={
            "status": ExerciseStatus.completed,
            "completed_at": now,
            "duration_seconds": duration,
            "sets_completed": sets_completed,
            "reps_completed": reps_completed
        })
        exercises = _replace(progress.exercises, index, completed)
        update = {
            "exercises": exercises,
            "current_exercise_index": index + 1
        }
        if all(e.status == ExerciseStatus.completed for e in exercises):
            update["is_workout_complete"] = True
            update["workout_completed_at"] = now

        result = self._commit(progress.model_copy(update=update))

        milestone = evaluate_milestones(self.history, now)
        if milestone is not None:
            result = result.model_copy(update={"milestone": milestone})
            self._notify(milestone)
        return result

    def skip_exercise(self, day: date, exercise_id: str) -> TransitionResult:
        """Пропуск возможен только для текущего упражнения; курсор сдвигается дальше."""
        progress = self.history.get(day)
        if progress is None:
            return self._reject(day, TransitionCode.day_not_initialized, "День не инициализирован")

        index = self._find_exercise(progress, exercise_id)
        if index < 0:
            return self._reject(day, TransitionCode.exercise_not_found, f"Упражнение {exercise_id} не найдено")

        exercise = progress.exercises[index]
        if exercise.status in EXERCISE_TERMINAL:
            return self._reject(day, TransitionCode.exercise_finished, f"Упражнение {exercise_id} уже завершено")

        if index != progress.current_exercise_index:
            return self._reject(
                day, TransitionCode.out_of_sequence,
                f"Пропустить можно только текущее упражнение #{progress.current_exercise_index + 1}"
            )

        skipped = exercise.model_copy(update={"status": ExerciseStatus.skipped})
        return self._commit(progress.model_copy(update={
            "exercises": _replace(progress.exercises, index, skipped),
            "current_exercise_index": index + 1
        }))

    # ==========================
    # ПИТАНИЕ
    # ==========================

    def next_meal(self, day: date) -> Optional[MealProgress]:
        progress = self.history.get(day)
        if progress is None:
            return None
        for meal in progress.meals:
            if meal.status not in MEAL_TERMINAL:
                return meal
        return None

    def _open_meal(self, day: date, slot: MealType):
        """Возвращает (запись дня, индекс слота, None) или (None, None, отказ)."""
        progress = self.history.get(day)
        if progress is None:
            return None, None, self._reject(day, TransitionCode.day_not_initialized, "День не инициализирован")

        index = self._find_meal(progress, slot)
        if index < 0:
            return None, None, self._reject(day, TransitionCode.meal_not_found, f"Нет приема пищи '{slot.value}'")

        if progress.meals[index].status in MEAL_TERMINAL:
            return None, None, self._reject(
                day, TransitionCode.meal_finished, f"Прием пищи '{slot.value}' уже завершен"
            )
        return progress, index, None

    def show_meal_options(self, day: date, slot: MealType, option_ids: List[str]) -> TransitionResult:
        progress, index, rejection = self._open_meal(day, slot)
        if rejection is not None:
            return rejection

        meal = progress.meals[index].model_copy(update={
            "status": MealStatus.options_available,
            "available_options": list(option_ids)
        })
        return self._commit(progress.model_copy(update={"meals": _replace(progress.meals, index, meal)}))

    def select_meal(
            self,
            day: date,
            slot: MealType,
            meal_id: str,
            meal_name: Optional[str] = None
    ) -> TransitionResult:
        progress, index, rejection = self._open_meal(day, slot)
        if rejection is not None:
            return rejection

        current = progress.meals[index]
        if current.available_options is not None and meal_id not in current.available_options:
            return self._reject(
                day, TransitionCode.option_not_offered, f"Блюдо {meal_id} не входит в предложенные варианты"
            )

        meal = current.model_copy(update={
            "meal_id": meal_id,
            "meal_name": meal_name,
            "status": MealStatus.selected,
            "available_options": None,
            "selected_at": self.clock()
        })
        return self._commit(progress.model_copy(update={"meals": _replace(progress.meals, index, meal)}))

    def mark_meal_eaten(self, day: date, slot: MealType) -> TransitionResult:
        progress, index, rejection = self._open_meal(day, slot)
        if rejection is not None:
            return rejection

        current = progress.meals[index]
        if current.status == MealStatus.options_available:
            return self._reject(
                day, TransitionCode.meal_selection_pending, f"Для '{slot.value}' сначала нужно выбрать блюдо"
            )
        if current.meal_id is None:
            return self._reject(day, TransitionCode.meal_not_bound, f"Для '{slot.value}' не назначено блюдо")

        meal = current.model_copy(update={"status": MealStatus.eaten, "eaten_at": self.clock()})
        update = {"meals": _replace(progress.meals, index, meal)}
        if progress.fasting is not None and not progress.fasting.eating_window_used:
            update["fasting"] = progress.fasting.model_copy(update={"eating_window_used": True})
        return self._commit(progress.model_copy(update=update))

    def skip_meal(self, day: date, slot: MealType) -> TransitionResult:
        progress, index, rejection = self._open_meal(day, slot)
        if rejection is not None:
            return rejection

        meal = progress.meals[index].model_copy(update={"status": MealStatus.skipped, "available_options": None})
        return self._commit(progress.model_copy(update={"meals": _replace(progress.meals, index, meal)}))

    # ==========================
    # ГОЛОДАНИЕ
    # ==========================

    def _fasting_day(self, day: date):
        progress = self.history.get(day)
        if progress is None:
            return None, self._reject(day, TransitionCode.day_not_initialized, "День не инициализирован")
        if progress.fasting is None:
            return None, self._reject(day, TransitionCode.fasting_not_tracked, "Голодание для дня не задано")
        return progress, None

    def start_fasting(self, day: date) -> TransitionResult:
        progress, rejection = self._fasting_day(day)
        if rejection is not None:
            return rejection
        if progress.fasting.fasting_started:
            return self._reject(day, TransitionCode.fasting_already_started, "Голодание уже начато")

        fasting = progress.fasting.model_copy(update={"fasting_started": True})
        return self._commit(progress.model_copy(update={"fasting": fasting}))

    def complete_fasting(self, day: date) -> TransitionResult:
        progress, rejection = self._fasting_day(day)
        if rejection is not None:
            return rejection
        if not progress.fasting.fasting_started:
            return self._reject(day, TransitionCode.fasting_not_started, "Голодание не начато")
        if progress.fasting.fasting_completed:
            return self._reject(day, TransitionCode.fasting_already_completed, "Голодание уже завершено")

        fasting = progress.fasting.model_copy(update={"fasting_completed": True})
        return self._commit(progress.model_copy(update={"fasting": fasting}))

    def update_fasting_compliance(self, day: date, compliance_percent: int) -> TransitionResult:
        """Процент соблюдения считает вызывающая сторона; здесь он только сохраняется."""
        progress, rejection = self._fasting_day(day)
        if rejection is not None:
            return rejection
        if not 0 <= compliance_percent <= 100:
            return self._reject(
                day, TransitionCode.compliance_out_of_range,
                f"Процент соблюдения должен быть от 0 до 100, получено {compliance_percent}"
            )

        fasting = progress.fasting.model_copy(update={"compliance_percent": compliance_percent})
        return self._commit(progress.model_copy(update={"fasting": fasting}))
