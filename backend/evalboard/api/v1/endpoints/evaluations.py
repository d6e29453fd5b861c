from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from evalboard.core.config import settings
from evalboard.core.dependencies import get_current_user, get_evaluation_filters
from evalboard.core.periods import available_periods, period_label
from evalboard.models.auth import UserInfo
from evalboard.models.evaluation import (
    CRITERIA,
    CriterionInfo,
    Evaluation,
    EvaluationCreate,
    EvaluationUpdate,
    PeriodOption,
)
from evalboard.services.evaluation_service import evaluation_service
from evalboard.services.filters import EvaluationFilters, filter_evaluations
from evalboard.services.records import fetch_records
from evalboard.services.store import StoreNotConfiguredError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


def _store_unavailable(err: StoreNotConfiguredError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(err))


def _not_found(evaluation_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Evaluation '{evaluation_id}' not found",
    )


@router.get("", response_model=list[Evaluation])
async def list_evaluations(
    filters: EvaluationFilters = Depends(get_evaluation_filters),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        employees, evaluations = await fetch_records()
    except Exception as err:
        logger.exception("Failed to list evaluations")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve evaluations",
        ) from err

    return filter_evaluations(evaluations, employees, filters, settings.REPORT_LOCALE)


@router.get("/periods", response_model=list[PeriodOption])
async def list_periods(user: UserInfo = Depends(get_current_user)):  # noqa: B008
    try:
        evaluations = await evaluation_service.list_evaluations()
    except Exception as err:
        logger.exception("Failed to list evaluation periods")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve periods",
        ) from err

    keys = available_periods(e.period_key for e in evaluations)
    return [PeriodOption(key=key, label=period_label(key, settings.REPORT_LOCALE)) for key in keys]


@router.get("/criteria", response_model=list[CriterionInfo])
async def list_criteria(user: UserInfo = Depends(get_current_user)):  # noqa: B008
    locale = settings.REPORT_LOCALE
    return [CriterionInfo(id=key, name=names.get(locale, names["en"])) for key, names in CRITERIA.items()]


@router.get("/{evaluation_id}", response_model=Evaluation)
async def get_evaluation(
    evaluation_id: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        evaluation = await evaluation_service.get_evaluation(evaluation_id)
    except Exception as err:
        logger.exception("Failed to get evaluation %s", evaluation_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve evaluation",
        ) from err

    if not evaluation:
        raise _not_found(evaluation_id)
    return evaluation


@router.post("", response_model=Evaluation, status_code=status.HTTP_201_CREATED)
async def create_evaluation(
    request: EvaluationCreate,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        evaluation = await evaluation_service.create_evaluation(request, evaluator_id=user.id)
    except StoreNotConfiguredError as err:
        raise _store_unavailable(err) from err
    except Exception as err:
        logger.exception("Failed to create evaluation")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create evaluation",
        ) from err

    logger.info("Evaluation %s for employee=%s by user=%s", evaluation.id, evaluation.employee_id, user.name)
    return evaluation


@router.put("/{evaluation_id}", response_model=Evaluation)
async def update_evaluation(
    evaluation_id: str,
    request: EvaluationUpdate,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        evaluation = await evaluation_service.update_evaluation(evaluation_id, request)
    except StoreNotConfiguredError as err:
        raise _store_unavailable(err) from err
    except Exception as err:
        logger.exception("Failed to update evaluation %s", evaluation_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update evaluation",
        ) from err

    if not evaluation:
        raise _not_found(evaluation_id)
    return evaluation


@router.delete("/{evaluation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_evaluation(
    evaluation_id: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        deleted = await evaluation_service.delete_evaluation(evaluation_id)
    except StoreNotConfiguredError as err:
        raise _store_unavailable(err) from err
    except Exception as err:
        logger.exception("Failed to delete evaluation %s", evaluation_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete evaluation",
        ) from err

    if not deleted:
        raise _not_found(evaluation_id)

    logger.info("Evaluation %s deleted by user=%s", evaluation_id, user.name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
