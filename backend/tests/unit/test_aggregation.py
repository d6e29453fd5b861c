from __future__ import annotations

from datetime import datetime, timezone

import pytest

from evalboard.services.aggregation import (
    category_averages,
    dashboard_stats,
    employee_average,
    employee_index,
    employee_of_month,
    employee_of_week,
    evaluations_in_month,
    windowed_leaderboard,
)
from tests.conftest import NOW, days_ago, make_employee, make_evaluation


@pytest.fixture
def staff():
    return [
        make_employee("e1", name="Ahmed Hassan", category="doctor"),
        make_employee("e2", name="Mona Adel", national_id="29505051234567", category="pharmacist"),
        make_employee("e3", name="Karim Samy", national_id="28812121234567", category="doctor"),
    ]


def test_employee_index_keeps_first_duplicate():
    first = make_employee("e1", name="First")
    index = employee_index([first, make_employee("e1", name="Second")])
    assert index["e1"] is first


def test_end_to_end_dashboard(staff):
    evaluations = [
        make_evaluation("v1", "e1", criteria={"quality": 5, "efficiency": 5}, date=days_ago(2)),
        make_evaluation("v2", "e2", criteria={"quality": 4, "efficiency": 3}, date=days_ago(3)),
        make_evaluation("v3", "e3", criteria={"quality": 3, "efficiency": 3}, date=days_ago(20)),
    ]

    stats = dashboard_stats(staff, evaluations, NOW)

    assert stats.total_employees == 3
    assert stats.total_evaluations == 3
    assert stats.average_rating == pytest.approx((5.0 + 3.5 + 3.0) / 3)
    assert stats.completed_this_month == 2
    assert stats.pending_this_month == 1
    assert stats.employee_of_week.id == "e1"
    assert stats.employee_of_month.id == "e1"
    assert stats.category_averages.labels == ["doctor", "pharmacist"]
    assert stats.category_averages.data == pytest.approx([4.0, 3.5])


def test_dashboard_is_deterministic(staff):
    evaluations = [
        make_evaluation("v1", "e1", date=days_ago(1)),
        make_evaluation("v2", "e2", criteria={"quality": 5}, date=days_ago(4)),
    ]
    assert dashboard_stats(staff, evaluations, NOW) == dashboard_stats(staff, evaluations, NOW)


def test_dashboard_without_data():
    stats = dashboard_stats([], [], NOW)
    assert stats.total_employees == 0
    assert stats.average_rating == 0.0
    assert stats.pending_this_month == 0
    assert stats.employee_of_week is None
    assert stats.employee_of_month is None
    assert stats.category_averages.labels == []


def test_pending_is_never_negative(staff):
    evaluations = [make_evaluation(f"v{i}", "e1", date=days_ago(1)) for i in range(5)]
    assert dashboard_stats(staff, evaluations, NOW).pending_this_month == 0


def test_leaderboard_tie_goes_to_smallest_id(staff):
    evaluations = [
        make_evaluation("v1", "e3", criteria={"quality": 4}, date=days_ago(1)),
        make_evaluation("v2", "e2", criteria={"quality": 4}, date=days_ago(2)),
    ]
    assert employee_of_week(staff, evaluations, NOW).id == "e2"


def test_leaderboard_uses_mean_of_evaluation_ratings(staff):
    evaluations = [
        make_evaluation("v1", "e1", criteria={"quality": 5}, date=days_ago(1)),
        make_evaluation("v2", "e1", criteria={"quality": 2, "efficiency": 2, "teamwork": 2}, date=days_ago(1)),
        make_evaluation("v3", "e2", criteria={"quality": 4}, date=days_ago(1)),
    ]
    # e1: (5 + 2) / 2 = 3.5, e2: 4.0
    assert employee_of_week(staff, evaluations, NOW).id == "e2"


def test_leaderboard_ignores_old_and_undated_evaluations(staff):
    evaluations = [
        make_evaluation("v1", "e1", criteria={"quality": 5}, date=days_ago(10)),
        make_evaluation("v2", "e2", criteria={"quality": 5}),
        make_evaluation("v3", "e3", criteria={"quality": 2}, date=days_ago(6)),
    ]
    assert employee_of_week(staff, evaluations, NOW).id == "e3"
    assert employee_of_month(staff, evaluations, NOW).id == "e1"


def test_leaderboard_window_includes_boundary(staff):
    evaluations = [make_evaluation("v1", "e2", date=days_ago(7))]
    assert employee_of_week(staff, evaluations, NOW).id == "e2"


def test_month_window_clamps_to_month_end(staff):
    now = datetime(2024, 3, 31, 9, 0, tzinfo=timezone.utc)
    evaluations = [
        make_evaluation("v1", "e1", date=datetime(2024, 2, 29, 9, 0, tzinfo=timezone.utc)),
        make_evaluation("v2", "e2", criteria={"quality": 5}, date=datetime(2024, 2, 28, 9, 0, tzinfo=timezone.utc)),
    ]
    assert employee_of_month(staff, evaluations, now).id == "e1"


def test_leaderboard_requires_positive_mean(staff):
    evaluations = [make_evaluation("v1", "e1", criteria={}, date=days_ago(1))]
    assert windowed_leaderboard(staff, evaluations, days_ago(7)) is None


def test_leaderboard_winner_must_be_known_employee(staff):
    evaluations = [make_evaluation("v1", "ghost", criteria={"quality": 5}, date=days_ago(1))]
    assert employee_of_week(staff, evaluations, NOW) is None


def test_category_averages_skip_unknown_employees(staff):
    evaluations = [
        make_evaluation("v1", "e2", criteria={"quality": 3}),
        make_evaluation("v2", "ghost", criteria={"quality": 5}),
        make_evaluation("v3", "e1", criteria={"quality": 5}),
        make_evaluation("v4", "e3", criteria={"quality": 4}),
    ]

    averages = category_averages(staff, evaluations)

    assert averages.labels == ["pharmacist", "doctor"]
    assert averages.data == pytest.approx([3.0, 4.5])


def test_category_averages_translated_labels(staff):
    evaluations = [make_evaluation("v1", "e1")]
    assert category_averages(staff, evaluations, "ar").labels == ["طبيب"]


def test_employee_average():
    evaluations = [
        make_evaluation("v1", "e1", criteria={"quality": 5}),
        make_evaluation("v2", "e1", criteria={"quality": 3}),
        make_evaluation("v3", "e2", criteria={"quality": 1}),
    ]
    assert employee_average("e1", evaluations) == (2, pytest.approx(4.0))
    assert employee_average("nobody", evaluations) == (0, 0.0)


def test_evaluations_in_month_uses_calendar_month():
    evaluations = [
        make_evaluation("v1", date=datetime(2024, 3, 1, tzinfo=timezone.utc)),
        make_evaluation("v2", date=datetime(2024, 2, 29, 23, 59, tzinfo=timezone.utc)),
        make_evaluation("v3", date=datetime(2023, 3, 15, tzinfo=timezone.utc)),
        make_evaluation("v4"),
    ]
    assert [e.id for e in evaluations_in_month(evaluations, NOW)] == ["v1"]


def test_single_doctor_scenario():
    employees = [make_employee("e1", category="doctor")]
    evaluations = [make_evaluation("v1", "e1", criteria={"quality": 5, "efficiency": 5}, date=days_ago(3))]

    stats = dashboard_stats(employees, evaluations, NOW)

    assert stats.employee_of_week.id == "e1"
    assert stats.category_averages.labels == ["doctor"]
    assert stats.category_averages.data == [5.0]
