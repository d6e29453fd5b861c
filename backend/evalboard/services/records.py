from __future__ import annotations

import asyncio

from evalboard.models.employee import Employee
from evalboard.models.evaluation import Evaluation
from evalboard.services.employee_service import EmployeeService, employee_service
from evalboard.services.evaluation_service import EvaluationService, evaluation_service


async def fetch_records(
    employees: EmployeeService = employee_service,
    evaluations: EvaluationService = evaluation_service,
) -> tuple[list[Employee], list[Evaluation]]:
    """Active employees and all evaluations, fetched together.

    Either fetch failing fails the whole call, so callers never aggregate a partial
    snapshot.
    """
    employee_list, evaluation_list = await asyncio.gather(
        employees.list_employees(),
        evaluations.list_evaluations(),
    )
    return employee_list, evaluation_list
