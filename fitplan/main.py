import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fitplan.api.router import api_router
from fitplan.core import init_database, settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="FitPlan - personalized fitness and fasting plans")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8081",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    await init_database()
    logger.info("Приложение запущено!")


@app.get("/")
async def root():
    base_url = "http://localhost:8000"

    return {
        "app": "FitPlan",
        "message": "FitPlan - personalized fitness and fasting plans",
        "links": {
            "Personalization": f"{base_url}/api/v1/personalization",
            "Docs": f"{base_url}/docs",
            "ReDoc": f"{base_url}/redoc"
        }
    }
