from __future__ import annotations

import logging
from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Response, status

from evalboard.core.config import settings
from evalboard.core.dates import utcnow
from evalboard.core.dependencies import get_current_user, get_employee_filters, get_evaluation_filters
from evalboard.models.auth import UserInfo
from evalboard.models.report import DashboardStats, StatisticsResponse
from evalboard.services.aggregation import category_averages, dashboard_stats
from evalboard.services.export import ExportError
from evalboard.services.filters import EmployeeFilters, EvaluationFilters, filter_employees, filter_evaluations
from evalboard.services.records import fetch_records
from evalboard.services.reports import build_employee_report, build_evaluation_report
from evalboard.services.scoring import rating_distribution

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


class ExportFormat(str, Enum):
    XLSX = "xlsx"
    PDF = "pdf"


async def _fetch():
    try:
        return await fetch_records()
    except Exception as err:
        logger.exception("Failed to fetch report data")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve report data",
        ) from err


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(user: UserInfo = Depends(get_current_user)):  # noqa: B008
    employees, evaluations = await _fetch()
    return dashboard_stats(employees, evaluations, utcnow(), settings.REPORT_LOCALE)


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(user: UserInfo = Depends(get_current_user)):  # noqa: B008
    employees, evaluations = await _fetch()
    return StatisticsResponse(
        category_averages=category_averages(employees, evaluations, settings.REPORT_LOCALE),
        rating_distribution=rating_distribution(evaluations, settings.REPORT_LOCALE),
    )


@router.get("/evaluations/export")
async def export_evaluations(
    format: ExportFormat = ExportFormat.XLSX,  # noqa: A002
    filters: EvaluationFilters = Depends(get_evaluation_filters),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    employees, evaluations = await _fetch()
    selected = filter_evaluations(evaluations, employees, filters, settings.REPORT_LOCALE)

    try:
        report = build_evaluation_report(
            selected,
            employees,
            format.value,
            filters=filters,
            now=utcnow(),
            locale=settings.REPORT_LOCALE,
        )
    except ExportError as e:
        logger.error("Evaluation export failed for user=%s: %s", user.name, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Export failed: {e}",
        ) from e

    logger.info("Exported %d evaluations as %s, user=%s", len(selected), format.value, user.name)
    return _attachment(report.content, report.media_type, report.filename)


@router.get("/employees/export")
async def export_employees(
    format: ExportFormat = ExportFormat.XLSX,  # noqa: A002
    filters: EmployeeFilters = Depends(get_employee_filters),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    employees, evaluations = await _fetch()
    selected = filter_employees(employees, filters)

    try:
        report = build_employee_report(
            selected,
            evaluations,
            format.value,
            filters=filters,
            now=utcnow(),
            locale=settings.REPORT_LOCALE,
        )
    except ExportError as e:
        logger.error("Employee export failed for user=%s: %s", user.name, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Export failed: {e}",
        ) from e

    logger.info("Exported %d employees as %s, user=%s", len(selected), format.value, user.name)
    return _attachment(report.content, report.media_type, report.filename)
