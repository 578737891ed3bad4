from fastapi import APIRouter, Depends, HTTPException, Response
from datetime import date, datetime
import logging
from typing import Callable, Optional

from fitplan.api.v1.profile import load_personalization
from fitplan.core.dependencies import (
    UserLockRegistry, get_catalog, get_clock, get_profile_repository,
    get_progress_repository, get_user_locks
)
from fitplan.repositories.profile_repository import ProfileRepository
from fitplan.repositories.progress_repository import ProgressRepository
from fitplan.schemas.catalog import MealType
from fitplan.schemas.progress import (
    DailyProgress, ExerciseCompletion, FastingComplianceRequest, InitializeDayRequest,
    MealOptionsRequest, MealSelectRequest, MilestonesResponse, NextStepsResponse,
    TransitionCode, TransitionResult
)
from fitplan.services.catalog import StaticCatalog
from fitplan.services.plan_assembler import assemble_daily_plan
from fitplan.services.progress_tracker import ProgressTracker

router = APIRouter(prefix="/users", tags=["progress"])
logger = logging.getLogger(__name__)

# Отказы, которые означают "такого объекта нет", а не конфликт состояния
NOT_FOUND_CODES = {
    TransitionCode.day_not_initialized,
    TransitionCode.exercise_not_found,
    TransitionCode.meal_not_found,
}


async def run_transition(
        user_id: str,
        repo: ProgressRepository,
        locks: UserLockRegistry,
        clock: Callable[[], datetime],
        action: Callable[[ProgressTracker], TransitionResult]
) -> TransitionResult:
    """
    Загрузить историю, выполнить переход и сохранить результат.
    Все шаги выполняются под замком пользователя.
    """
    async with locks.lock_for(user_id):
        history = await repo.load_history(user_id)
        result = action(ProgressTracker(history, clock=clock))

        if result.error is not None:
            status_code = 404 if result.error.code in NOT_FOUND_CODES else 409
            raise HTTPException(status_code=status_code, detail=result.error.message)

        if result.applied:
            await repo.save_history(user_id, history)
        return result


# ==========================
# ДОСТИЖЕНИЯ И СБРОС
# ==========================

@router.get("/{user_id}/progress/milestones", response_model=MilestonesResponse)
async def get_milestones(
        user_id: str,
        repo: ProgressRepository = Depends(get_progress_repository)
):
    history = await repo.load_history(user_id)
    return MilestonesResponse(
        milestones=history.milestones,
        pending_milestone=history.pending_milestone
    )


@router.post("/{user_id}/progress/milestones/dismiss", response_model=MilestonesResponse)
async def dismiss_milestone(
        user_id: str,
        repo: ProgressRepository = Depends(get_progress_repository),
        locks: UserLockRegistry = Depends(get_user_locks)
):
    """Скрыть показанное достижение"""
    async with locks.lock_for(user_id):
        history = await repo.load_history(user_id)
        ProgressTracker(history).dismiss_milestone()
        await repo.save_history(user_id, history)
    return MilestonesResponse(milestones=history.milestones, pending_milestone=None)


@router.delete("/{user_id}/progress", status_code=204)
async def reset_progress(
        user_id: str,
        repo: ProgressRepository = Depends(get_progress_repository),
        locks: UserLockRegistry = Depends(get_user_locks)
):
    """Полный сброс истории прогресса"""
    async with locks.lock_for(user_id):
        await repo.delete_history(user_id)
    logger.info(f"Прогресс пользователя {user_id} сброшен")
    return Response(status_code=204)


# ==========================
# ДЕНЬ
# ==========================

@router.post("/{user_id}/progress/{day}/init", response_model=TransitionResult)
async def initialize_day(
        user_id: str,
        day: date,
        request: Optional[InitializeDayRequest] = None,
        profile_repo: ProfileRepository = Depends(get_profile_repository),
        repo: ProgressRepository = Depends(get_progress_repository),
        locks: UserLockRegistry = Depends(get_user_locks),
        catalog: StaticCatalog = Depends(get_catalog),
        clock: Callable[[], datetime] = Depends(get_clock)
):
    """Создать запись дня по плану (повторный вызов возвращает существующую)"""
    personalization = await load_personalization(user_id, profile_repo)
    plan = assemble_daily_plan(day, personalization, catalog)
    day_number = request.day_number if request else None
    return await run_transition(
        user_id, repo, locks, clock,
        lambda tracker: tracker.initialize_day(day, plan, day_number)
    )


@router.get("/{user_id}/progress/{day}", response_model=DailyProgress)
async def get_day_progress(
        user_id: str,
        day: date,
        repo: ProgressRepository = Depends(get_progress_repository)
):
    history = await repo.load_history(user_id)
    progress = history.get(day)
    if progress is None:
        raise HTTPException(status_code=404, detail="День не инициализирован")
    return progress


@router.get("/{user_id}/progress/{day}/next", response_model=NextStepsResponse)
async def get_next_steps(
        user_id: str,
        day: date,
        repo: ProgressRepository = Depends(get_progress_repository)
):
    """Текущее и следующее упражнение, ближайший прием пищи"""
    history = await repo.load_history(user_id)
    if history.get(day) is None:
        raise HTTPException(status_code=404, detail="День не инициализирован")

    tracker = ProgressTracker(history)
    return NextStepsResponse(
        current_exercise=tracker.current_exercise(day),
        next_exercise=tracker.next_exercise(day),
        next_meal=tracker.next_meal(day)
    )


# ==========================
# УПРАЖНЕНИЯ
# ==========================

@router.post("/{user_id}/progress/{day}/exercises/{exercise_id}/start", response_model=TransitionResult)
async def start_exercise(
        user_id: str,
        day: date,
        exercise_id: str,
        repo: ProgressRepository = Depends(get_progress_repository),
        locks: UserLockRegistry = Depends(get_user_locks),
        clock: Callable[[], datetime] = Depends(get_clock)
):
    return await run_transition(
        user_id, repo, locks, clock,
        lambda tracker: tracker.start_exercise(day, exercise_id)
    )


@router.post("/{user_id}/progress/{day}/exercises/{exercise_id}/complete", response_model=TransitionResult)
async def complete_exercise(
        user_id: str,
        day: date,
        exercise_id: str,
        completion: Optional[ExerciseCompletion] = None,
        repo: ProgressRepository = Depends(get_progress_repository),
        locks: UserLockRegistry = Depends(get_user_locks),
        clock: Callable[[], datetime] = Depends(get_clock)
):
    completion = completion or ExerciseCompletion()
    return await run_transition(
        user_id, repo, locks, clock,
        lambda tracker: tracker.complete_exercise(
            day, exercise_id, completion.sets_completed, completion.reps_completed
        )
    )


@router.post("/{user_id}/progress/{day}/exercises/{exercise_id}/skip", response_model=TransitionResult)
async def skip_exercise(
        user_id: str,
        day: date,
        exercise_id: str,
        repo: ProgressRepository = Depends(get_progress_repository),
        locks: UserLockRegistry = Depends(get_user_locks),
        clock: Callable[[], datetime] = Depends(get_clock)
):
    return await run_transition(
        user_id, repo, locks, clock,
        lambda tracker: tracker.skip_exercise(day, exercise_id)
    )


# ==========================
# ПИТАНИЕ
# ==========================

@router.post("/{user_id}/progress/{day}/meals/{slot}/options", response_model=TransitionResult)
async def show_meal_options(
        user_id: str,
        day: date,
        slot: MealType,
        request: MealOptionsRequest,
        repo: ProgressRepository = Depends(get_progress_repository),
        locks: UserLockRegistry = Depends(get_user_locks),
        clock: Callable[[], datetime] = Depends(get_clock)
):
    return await run_transition(
        user_id, repo, locks, clock,
        lambda tracker: tracker.show_meal_options(day, slot, request.option_ids)
    )


@router.post("/{user_id}/progress/{day}/meals/{slot}/select", response_model=TransitionResult)
async def select_meal(
        user_id: str,
        day: date,
        slot: MealType,
        request: MealSelectRequest,
        repo: ProgressRepository = Depends(get_progress_repository),
        locks: UserLockRegistry = Depends(get_user_locks),
        catalog: StaticCatalog = Depends(get_catalog),
        clock: Callable[[], datetime] = Depends(get_clock)
):
    meal = catalog.get_meal(request.meal_id)
    if meal is None:
        raise HTTPException(status_code=404, detail=f"Блюдо '{request.meal_id}' не найдено")

    return await run_transition(
        user_id, repo, locks, clock,
        lambda tracker: tracker.select_meal(day, slot, meal.id, meal.name)
    )


@router.post("/{user_id}/progress/{day}/meals/{slot}/eaten", response_model=TransitionResult)
async def mark_meal_eaten(
        user_id: str,
        day: date,
        slot: MealType,
        repo: ProgressRepository = Depends(get_progress_repository),
        locks: UserLockRegistry = Depends(get_user_locks),
        clock: Callable[[], datetime] = Depends(get_clock)
):
    return await run_transition(
        user_id, repo, locks, clock,
        lambda tracker: tracker.mark_meal_eaten(day, slot)
    )


@router.post("/{user_id}/progress/{day}/meals/{slot}/skip", response_model=TransitionResult)
async def skip_meal(
        user_id: str,
        day: date,
        slot: MealType,
        repo: ProgressRepository = Depends(get_progress_repository),
        locks: UserLockRegistry = Depends(get_user_locks),
        clock: Callable[[], datetime] = Depends(get_clock)
):
    return await run_transition(
        user_id, repo, locks, clock,
        lambda tracker: tracker.skip_meal(day, slot)
    )


# ==========================
# ГОЛОДАНИЕ
# ==========================

@router.post("/{user_id}/progress/{day}/fasting/start", response_model=TransitionResult)
async def start_fasting(
        user_id: str,
        day: date,
        repo: ProgressRepository = Depends(get_progress_repository),
        locks: UserLockRegistry = Depends(get_user_locks),
        clock: Callable[[], datetime] = Depends(get_clock)
):
    return await run_transition(
        user_id, repo, locks, clock,
        lambda tracker: tracker.start_fasting(day)
    )


@router.post("/{user_id}/progress/{day}/fasting/complete", response_model=TransitionResult)
async def complete_fasting(
        user_id: str,
        day: date,
        repo: ProgressRepository = Depends(get_progress_repository),
        locks: UserLockRegistry = Depends(get_user_locks),
        clock: Callable[[], datetime] = Depends(get_clock)
):
    return await run_transition(
        user_id, repo, locks, clock,
        lambda tracker: tracker.complete_fasting(day)
    )


@router.put("/{user_id}/progress/{day}/fasting/compliance", response_model=TransitionResult)
async def update_fasting_compliance(
        user_id: str,
        day: date,
        request: FastingComplianceRequest,
        repo: ProgressRepository = Depends(get_progress_repository),
        locks: UserLockRegistry = Depends(get_user_locks),
        clock: Callable[[], datetime] = Depends(get_clock)
):
    """Сохранить процент соблюдения голодания (0-100)"""
    return await run_transition(
        user_id, repo, locks, clock,
        lambda tracker: tracker.update_fasting_compliance(day, request.compliance_percent)
    )
