from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from evalboard.api.v1.router import api_router
from evalboard.core.config import settings
from evalboard.services.employee_service import employee_service
from evalboard.services.evaluation_service import evaluation_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    try:
        await employee_service.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize EmployeeService, continuing without employees store")
    try:
        await evaluation_service.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize EvaluationService, continuing without evaluations store")
    yield
    await employee_service.close()
    await evaluation_service.close()


app = FastAPI(
    title="Evalboard API",
    description="Employee performance evaluations and reporting",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Evalboard API"}
