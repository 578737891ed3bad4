from fastapi import APIRouter, Depends
from datetime import date
from typing import List

from fitplan.api.v1.profile import load_personalization
from fitplan.core.dependencies import get_catalog, get_profile_repository
from fitplan.repositories.profile_repository import ProfileRepository
from fitplan.schemas.plan import DailyPlan, PlanSummary
from fitplan.services.catalog import StaticCatalog
from fitplan.services.plan_assembler import assemble_daily_plan, assemble_week, summarize

router = APIRouter(prefix="/users", tags=["plans"])


@router.get("/{user_id}/plans/week/{start}", response_model=List[DailyPlan])
async def get_week_plan(
        user_id: str,
        start: date,
        repo: ProfileRepository = Depends(get_profile_repository),
        catalog: StaticCatalog = Depends(get_catalog)
):
    """Планы на 7 дней начиная с указанной даты"""
    personalization = await load_personalization(user_id, repo)
    return assemble_week(start, personalization, catalog)


@router.get("/{user_id}/plans/{day}", response_model=DailyPlan)
async def get_daily_plan(
        user_id: str,
        day: date,
        repo: ProfileRepository = Depends(get_profile_repository),
        catalog: StaticCatalog = Depends(get_catalog)
):
    personalization = await load_personalization(user_id, repo)
    return assemble_daily_plan(day, personalization, catalog)


@router.get("/{user_id}/plans/{day}/summary", response_model=PlanSummary)
async def get_plan_summary(
        user_id: str,
        day: date,
        repo: ProfileRepository = Depends(get_profile_repository),
        catalog: StaticCatalog = Depends(get_catalog)
):
    """Краткая сводка плана на день"""
    personalization = await load_personalization(user_id, repo)
    return summarize(assemble_daily_plan(day, personalization, catalog))
