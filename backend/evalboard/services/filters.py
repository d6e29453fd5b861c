"""Stateless record filters for the employee and evaluation listings.

An empty string or ``"all"`` disables a criterion. Criteria AND-combine and the
input order is preserved.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from evalboard.core.periods import canonical_period
from evalboard.models.employee import Employee
from evalboard.models.evaluation import Evaluation
from evalboard.services.aggregation import employee_index
from evalboard.services.labels import unknown_employee_label

ALL = "all"


def is_unset(value: str | None) -> bool:
    return not value or value == ALL


@dataclass(frozen=True)
class EmployeeFilters:
    search: str = ""
    category: str = ALL


@dataclass(frozen=True)
class EvaluationFilters:
    employee_id: str = ""
    start: datetime | None = None
    end: datetime | None = None
    period: str = ALL
    search: str = ""


def matches_employee(employee: Employee, filters: EmployeeFilters) -> bool:
    if filters.search and filters.search not in employee.name and filters.search not in employee.national_id:
        return False
    if not is_unset(filters.category) and employee.category != filters.category:
        return False
    return True


def filter_employees(employees: Iterable[Employee], filters: EmployeeFilters) -> list[Employee]:
    return [employee for employee in employees if matches_employee(employee, filters)]


def _matches_search(evaluation: Evaluation, employee_name: str, term: str) -> bool:
    if term in employee_name:
        return True
    if evaluation.comments and term in evaluation.comments:
        return True
    return isinstance(evaluation.period, str) and term in evaluation.period


def filter_evaluations(
    evaluations: Iterable[Evaluation],
    employees: Sequence[Employee],
    filters: EvaluationFilters,
    locale: str = "en",
) -> list[Evaluation]:
    index = employee_index(employees)
    unknown = unknown_employee_label(locale)
    period = "" if is_unset(filters.period) else canonical_period(filters.period) or filters.period

    results: list[Evaluation] = []
    for evaluation in evaluations:
        if not is_unset(filters.employee_id) and evaluation.employee_id != filters.employee_id:
            continue
        if filters.start is not None and (evaluation.date is None or evaluation.date < filters.start):
            continue
        if filters.end is not None and (evaluation.date is None or evaluation.date > filters.end):
            continue
        if period and evaluation.period_key != period:
            continue
        if filters.search:
            employee = index.get(evaluation.employee_id)
            name = employee.name if employee else unknown
            if not _matches_search(evaluation, name, filters.search):
                continue
        results.append(evaluation)
    return results
