"""
Общие фикстуры для всех тестов FitPlan.

Стратегия:
- Тестовое FastAPI-приложение создаётся без startup-событий (нет подключения к БД).
- ProfileRepository заменяется на AsyncMock (mock_profile_repo).
- ProgressRepository заменяется на AsyncMock, который хранит историю в словаре,
  поэтому последовательность запросов видит изменения предыдущих.
- Время подменяется управляемыми часами FakeClock.
"""

import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI
from datetime import date, datetime, timedelta
from typing import AsyncGenerator

from fitplan.api.router import api_router
from fitplan.core.dependencies import (
    UserLockRegistry, get_catalog, get_clock, get_profile_repository,
    get_progress_repository, get_user_locks
)
from fitplan.repositories.profile_repository import ProfileRepository
from fitplan.repositories.progress_repository import ProgressRepository
from fitplan.schemas.profile import (
    Difficulty, FastingPlan, MealIntensity, PersonalizationResult, UserProfile
)
from fitplan.services.catalog import StaticCatalog
from fitplan.services.plan_assembler import assemble_daily_plan
from fitplan.services.progress_history import ProgressHistory


# ---------------------------------------------------------------------------
# Вспомогательные функции
# ---------------------------------------------------------------------------

# 2024-01-01 - понедельник, 2024-01-07 - воскресенье (день отдыха)
MONDAY = date(2024, 1, 1)
TUESDAY = date(2024, 1, 2)
WEDNESDAY = date(2024, 1, 3)
FRIDAY = date(2024, 1, 5)
SUNDAY = date(2024, 1, 7)


class FakeClock:
    """Часы, которые двигаются только вручную."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 9, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


def make_personalization(
        difficulty: Difficulty = Difficulty.beginner,
        intensity: MealIntensity = MealIntensity.standard,
        plan: FastingPlan = FastingPlan.plan_16_8
) -> PersonalizationResult:
    return PersonalizationResult(
        fasting_plan=plan,
        workout_difficulty=difficulty,
        meal_intensity=intensity,
        daily_calorie_target=1800,
        daily_protein_target=100,
        water_target_liters=2.3,
        estimated_weeks_to_goal=0,
        bmi=22.0
    )


def create_test_app() -> FastAPI:
    """Тестовое FastAPI-приложение без startup-событий."""
    test_app = FastAPI(title="FitPlan Test App")
    test_app.include_router(api_router, prefix="/api/v1")
    return test_app


# ---------------------------------------------------------------------------
# Фикстуры домена
# ---------------------------------------------------------------------------

@pytest.fixture
def catalog() -> StaticCatalog:
    return StaticCatalog()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def history() -> ProgressHistory:
    return ProgressHistory()


@pytest.fixture
def monday_plan(catalog):
    """План на понедельник для новичка: 'Morning Energizer', 4 упражнения."""
    return assemble_daily_plan(MONDAY, make_personalization(), catalog)


# ---------------------------------------------------------------------------
# Фикстуры для зависимостей
# ---------------------------------------------------------------------------

@pytest.fixture
def user_profile() -> UserProfile:
    return UserProfile(
        gender="male",
        age_bracket="30-39",
        height_cm=175,
        weight_kg=70,
        target_weight_kg=70,
        activity_level="moderate",
        primary_goal="get_fit_toned"
    )


@pytest.fixture
def mock_profile_repo() -> AsyncMock:
    """Мокированный ProfileRepository: по умолчанию профиля нет."""
    repo = AsyncMock(spec=ProfileRepository)
    repo.get_profile.return_value = None
    repo.get_override.return_value = None
    repo.get_last_known.return_value = None
    return repo


@pytest.fixture
def mock_progress_repo() -> AsyncMock:
    """
    Мокированный ProgressRepository с хранением истории в памяти.
    Словарь историй доступен как repo.histories.
    """
    repo = AsyncMock(spec=ProgressRepository)
    histories = {}

    async def load_history(user_id):
        return histories.setdefault(user_id, ProgressHistory())

    async def save_history(user_id, saved):
        histories[user_id] = saved

    async def delete_history(user_id):
        histories.pop(user_id, None)

    repo.load_history.side_effect = load_history
    repo.save_history.side_effect = save_history
    repo.delete_history.side_effect = delete_history
    repo.histories = histories
    return repo


# ---------------------------------------------------------------------------
# HTTP-клиенты
# ---------------------------------------------------------------------------

@pytest.fixture
async def client(mock_profile_repo, mock_progress_repo, clock, catalog) -> AsyncGenerator[AsyncClient, None]:
    """
    Клиент с подменёнными репозиториями, каталогом и часами.
    """
    app = create_test_app()
    locks = UserLockRegistry()
    app.dependency_overrides[get_profile_repository] = lambda: mock_profile_repo
    app.dependency_overrides[get_progress_repository] = lambda: mock_progress_repo
    app.dependency_overrides[get_user_locks] = lambda: locks
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_clock] = lambda: clock
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
