from __future__ import annotations

import logging
from datetime import date

from fastapi import Header, HTTPException, status

from evalboard.core.auth import user_from_claims, validate_token
from evalboard.core.config import settings
from evalboard.core.dates import day_end, day_start
from evalboard.models.auth import UserInfo
from evalboard.services.filters import ALL, EmployeeFilters, EvaluationFilters

logger = logging.getLogger(__name__)


def _not_authenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(authorization: str | None = Header(None)) -> UserInfo:
    if not authorization or not authorization.startswith("Bearer "):
        raise _not_authenticated("Not authenticated")

    token = authorization.split(" ", 1)[1]

    try:
        claims = validate_token(token, settings.AZURE_AD_TENANT_ID, settings.AZURE_AD_CLIENT_ID)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Token validation error: %s", e)
        raise _not_authenticated("Invalid authentication credentials") from e

    return user_from_claims(claims)


def get_evaluation_filters(
    employee_id: str = "",
    start_date: date | None = None,
    end_date: date | None = None,
    period: str = ALL,
    search: str = "",
) -> EvaluationFilters:
    return EvaluationFilters(
        employee_id=employee_id,
        start=day_start(start_date) if start_date else None,
        end=day_end(end_date) if end_date else None,
        period=period,
        search=search,
    )


def get_employee_filters(search: str = "", category: str = ALL) -> EmployeeFilters:
    return EmployeeFilters(search=search, category=category)
