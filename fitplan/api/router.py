from fastapi import APIRouter
from fitplan.api.v1.personalization import router as personalization_router
from fitplan.api.v1.profile import router as profile_router
from fitplan.api.v1.plans import router as plans_router
from fitplan.api.v1.progress import router as progress_router
from fitplan.api.v1.stats import router as stats_router

api_router = APIRouter()

api_router.include_router(personalization_router)
api_router.include_router(profile_router)
api_router.include_router(plans_router)
api_router.include_router(progress_router)
api_router.include_router(stats_router)
