from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from evalboard.core.dependencies import get_current_user, get_employee_filters
from evalboard.models.auth import UserInfo
from evalboard.models.employee import Employee, EmployeeCreate, EmployeeUpdate
from evalboard.services.employee_service import employee_service
from evalboard.services.filters import EmployeeFilters, filter_employees
from evalboard.services.store import StoreNotConfiguredError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


def _store_unavailable(err: StoreNotConfiguredError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(err))


def _not_found(employee_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Employee '{employee_id}' not found",
    )


@router.get("", response_model=list[Employee])
async def list_employees(
    filters: EmployeeFilters = Depends(get_employee_filters),  # noqa: B008
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        employees = await employee_service.list_employees()
    except Exception as err:
        logger.exception("Failed to list employees")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employees",
        ) from err

    return filter_employees(employees, filters)


@router.get("/{employee_id}", response_model=Employee)
async def get_employee(
    employee_id: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        employee = await employee_service.get_employee(employee_id)
    except Exception as err:
        logger.exception("Failed to get employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employee",
        ) from err

    if not employee:
        raise _not_found(employee_id)
    return employee


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
async def create_employee(
    request: EmployeeCreate,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        employee = await employee_service.create_employee(request)
    except StoreNotConfiguredError as err:
        raise _store_unavailable(err) from err
    except Exception as err:
        logger.exception("Failed to create employee")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create employee",
        ) from err

    logger.info("Employee %s added by user=%s", employee.id, user.name)
    return employee


@router.put("/{employee_id}", response_model=Employee)
async def update_employee(
    employee_id: str,
    request: EmployeeUpdate,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        employee = await employee_service.update_employee(employee_id, request)
    except StoreNotConfiguredError as err:
        raise _store_unavailable(err) from err
    except Exception as err:
        logger.exception("Failed to update employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update employee",
        ) from err

    if not employee:
        raise _not_found(employee_id)
    return employee


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        deactivated = await employee_service.deactivate_employee(employee_id)
    except StoreNotConfiguredError as err:
        raise _store_unavailable(err) from err
    except Exception as err:
        logger.exception("Failed to deactivate employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete employee",
        ) from err

    if not deactivated:
        raise _not_found(employee_id)

    logger.info("Employee %s deactivated by user=%s", employee_id, user.name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
