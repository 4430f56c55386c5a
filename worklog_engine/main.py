from fastapi import FastAPI
from loguru import logger

from worklog_engine.api.distribution import router as distribution_router
from worklog_engine.config.settings import settings
from worklog_engine.core.logger import setup_logger

setup_logger()

app = FastAPI(title="Worklog Engine")

app.include_router(distribution_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


logger.info("Worklog engine API ready", llm_provider=settings.llm_provider, llm_model=settings.llm_model)
