from fastapi import APIRouter

from evalboard.api.v1.endpoints import employees, evaluations, health, reports

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router)
api_router.include_router(employees.router)
api_router.include_router(evaluations.router)
api_router.include_router(reports.router)
