"""Best-of grouping over evaluation records: leaderboards, category means, dashboard."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from evalboard.core.dates import month_boundary, week_boundary
from evalboard.models.employee import Employee
from evalboard.models.evaluation import Evaluation
from evalboard.models.report import CategoryAverages, DashboardStats
from evalboard.services.labels import category_label
from evalboard.services.scoring import composite_rating, mean_rating


class _RunningMean:
    __slots__ = ("total", "count")

    def __init__(self) -> None:
        self.total = 0.0
        self.count = 0

    def add(self, value: float) -> None:
        self.total += value
        self.count += 1

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0


def employee_index(employees: Iterable[Employee]) -> dict[str, Employee]:
    """Map employee id → employee; the first record wins on duplicate ids."""
    index: dict[str, Employee] = {}
    for employee in employees:
        index.setdefault(employee.id, employee)
    return index


def windowed_leaderboard(
    employees: Sequence[Employee],
    evaluations: Iterable[Evaluation],
    since: datetime,
) -> Employee | None:
    """Employee with the highest mean composite rating among evaluations dated on or after ``since``.

    Each evaluation counts once with its own composite rating, so the group score is
    a mean of per-evaluation means. Equal group means go to the smallest employee id.
    A winner must score above zero.
    """
    groups: dict[str, _RunningMean] = {}
    for evaluation in evaluations:
        if evaluation.date is None or evaluation.date < since:
            continue
        groups.setdefault(evaluation.employee_id, _RunningMean()).add(composite_rating(evaluation.criteria))

    best_id: str | None = None
    best_mean = 0.0
    for employee_id, group in groups.items():
        mean = group.mean
        if mean > best_mean or (mean == best_mean and best_id is not None and employee_id < best_id):
            best_id = employee_id
            best_mean = mean

    if best_id is None:
        return None
    return employee_index(employees).get(best_id)


def employee_of_week(employees: Sequence[Employee], evaluations: Iterable[Evaluation], now: datetime) -> Employee | None:
    return windowed_leaderboard(employees, evaluations, week_boundary(now))


def employee_of_month(employees: Sequence[Employee], evaluations: Iterable[Evaluation], now: datetime) -> Employee | None:
    return windowed_leaderboard(employees, evaluations, month_boundary(now))


def category_averages(
    employees: Iterable[Employee],
    evaluations: Iterable[Evaluation],
    locale: str = "en",
) -> CategoryAverages:
    index = employee_index(employees)
    groups: dict[str, _RunningMean] = {}

    for evaluation in evaluations:
        employee = index.get(evaluation.employee_id)
        if employee is None:
            continue
        groups.setdefault(employee.category, _RunningMean()).add(composite_rating(evaluation.criteria))

    return CategoryAverages(
        labels=[category_label(category, locale) for category in groups],
        data=[group.mean for group in groups.values()],
    )


def employee_average(employee_id: str, evaluations: Iterable[Evaluation]) -> tuple[int, float]:
    """Evaluation count and mean composite rating for one employee."""
    own = [e for e in evaluations if e.employee_id == employee_id]
    return len(own), mean_rating(own)


def evaluations_in_month(evaluations: Iterable[Evaluation], now: datetime) -> list[Evaluation]:
    return [e for e in evaluations if e.date is not None and e.date.year == now.year and e.date.month == now.month]


def dashboard_stats(
    employees: Sequence[Employee],
    evaluations: Sequence[Evaluation],
    now: datetime,
    locale: str = "en",
) -> DashboardStats:
    completed = len(evaluations_in_month(evaluations, now))

    return DashboardStats(
        total_employees=len(employees),
        total_evaluations=len(evaluations),
        average_rating=mean_rating(evaluations),
        completed_this_month=completed,
        pending_this_month=max(len(employees) - completed, 0),
        employee_of_week=employee_of_week(employees, evaluations, now),
        employee_of_month=employee_of_month(employees, evaluations, now),
        category_averages=category_averages(employees, evaluations, locale),
    )
