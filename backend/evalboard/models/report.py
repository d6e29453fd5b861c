"""Aggregated report payloads for dashboards and charts."""

from __future__ import annotations

from pydantic import BaseModel

from evalboard.models.employee import Employee


class CategoryAverages(BaseModel):
    """Parallel label/value arrays: mean composite rating per employee category."""

    labels: list[str]
    data: list[float]


class RatingDistribution(BaseModel):
    """Evaluation counts per rating band, in band order."""

    labels: list[str]
    data: list[int]


class DashboardStats(BaseModel):
    total_employees: int
    total_evaluations: int
    average_rating: float
    completed_this_month: int
    pending_this_month: int
    employee_of_week: Employee | None = None
    employee_of_month: Employee | None = None
    category_averages: CategoryAverages


class StatisticsResponse(BaseModel):
    category_averages: CategoryAverages
    rating_distribution: RatingDistribution
