from fastapi import APIRouter
import logging

from fitplan.schemas.profile import PersonalizationResult, UserProfile
from fitplan.services.personalization import derive_personalization

router = APIRouter(prefix="/personalization", tags=["personalization"])
logger = logging.getLogger(__name__)


@router.post("/", response_model=PersonalizationResult)
async def personalize(profile: UserProfile):
    """Рассчитать параметры плана по анкете без сохранения"""
    return derive_personalization(profile)
