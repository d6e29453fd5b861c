from __future__ import annotations

from fastapi import APIRouter, Depends

from evalboard.core.config import settings
from evalboard.core.dependencies import get_current_user
from evalboard.models.auth import UserInfo
from evalboard.services.employee_service import employee_service
from evalboard.services.evaluation_service import evaluation_service
from evalboard.services.store import CosmosContainerService

router = APIRouter(prefix="/health", tags=["health"])


async def _store_status(service: CosmosContainerService) -> str:
    if not service.initialized:
        return "not_configured"
    try:
        return "ok" if await service.check_connection() else "error"
    except Exception:
        return "error"


@router.get("")
async def health_check():
    services = {
        "employees_store": await _store_status(employee_service),
        "evaluations_store": await _store_status(evaluation_service),
    }

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/protected")
async def health_protected(user: UserInfo = Depends(get_current_user)):  # noqa: B008
    return {"status": "ok", "user": user.model_dump()}


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}
