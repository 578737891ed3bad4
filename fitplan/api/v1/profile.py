from fastapi import APIRouter, Depends, HTTPException
import logging

from fitplan.core.dependencies import get_profile_repository
from fitplan.repositories.profile_repository import ProfileRepository
from fitplan.schemas.profile import (
    PersonalizationOverride, PersonalizationResult, ProfileResponse, UserProfile
)
from fitplan.services.personalization import apply_override, derive_personalization

router = APIRouter(prefix="/users", tags=["profile"])
logger = logging.getLogger(__name__)


async def load_personalization(user_id: str, repo: ProfileRepository) -> PersonalizationResult:
    """Персонализация пользователя с учетом переопределений. 404, если анкеты нет."""
    profile = await repo.get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Профиль не найден")

    last_known = await repo.get_last_known(user_id)
    override = await repo.get_override(user_id)
    return apply_override(derive_personalization(profile, last_known), override)


async def build_profile_response(user_id: str, repo: ProfileRepository) -> ProfileResponse:
    profile = await repo.get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Профиль не найден")

    return ProfileResponse(
        user_id=user_id,
        profile=profile,
        override=await repo.get_override(user_id),
        personalization=await load_personalization(user_id, repo)
    )


@router.get("/{user_id}/profile", response_model=ProfileResponse)
async def get_profile(
        user_id: str,
        repo: ProfileRepository = Depends(get_profile_repository)
):
    """Получить анкету и рассчитанную персонализацию"""
    return await build_profile_response(user_id, repo)


@router.put("/{user_id}/profile", response_model=ProfileResponse)
async def save_profile(
        user_id: str,
        profile: UserProfile,
        repo: ProfileRepository = Depends(get_profile_repository)
):
    """Сохранить анкету онбординга"""
    await repo.save_profile(user_id, profile)
    logger.info(f"Сохранена анкета пользователя {user_id}")
    return await build_profile_response(user_id, repo)


@router.post("/{user_id}/profile/override", response_model=ProfileResponse)
async def override_personalization(
        user_id: str,
        override: PersonalizationOverride,
        repo: ProfileRepository = Depends(get_profile_repository)
):
    """Заменить производные поля персонализации"""
    saved = await repo.save_override(user_id, override)
    if saved is None:
        raise HTTPException(status_code=404, detail="Профиль не найден")

    logger.info(f"Переопределена персонализация пользователя {user_id}")
    return await build_profile_response(user_id, repo)
