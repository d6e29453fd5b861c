from __future__ import annotations

import copy
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from evalboard.models.evaluation import EvaluationCreate, EvaluationUpdate, YearMonth
from evalboard.services.evaluation_service import EvaluationService
from evalboard.services.store import StoreNotConfiguredError

NOW = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)

SAMPLE_COSMOS_DOC = {
    "id": "ev-1",
    "employeeId": "emp-1",
    "evaluatorId": "evaluator-1",
    "date": "2024-03-05T08:30:00Z",
    "period": {"year": 2024, "month": 3},
    "criteria": {"quality": 5, "efficiency": 4},
    "comments": "Reliable",
}


def _service_with_items(*items):
    service = EvaluationService()
    service.initialized = True

    mock_container = MagicMock()

    async def mock_query_items(**kwargs):
        for item in items:
            yield copy.deepcopy(item)

    mock_container.query_items = mock_query_items
    mock_container.create_item = AsyncMock(side_effect=lambda body: body)
    mock_container.replace_item = AsyncMock(side_effect=lambda item, body: body)
    mock_container.delete_item = AsyncMock()
    service.container = mock_container
    return service, mock_container


def test_transform_evaluation_maps_fields():
    result = EvaluationService()._transform_evaluation(SAMPLE_COSMOS_DOC)

    assert result.id == "ev-1"
    assert result.employee_id == "emp-1"
    assert result.evaluator_id == "evaluator-1"
    assert result.date == datetime(2024, 3, 5, 8, 30, tzinfo=timezone.utc)
    assert result.period == YearMonth(year=2024, month=3)
    assert result.period_key == "2024-03"
    assert result.criteria == {"quality": 5, "efficiency": 4}
    assert result.comments == "Reliable"


def test_transform_evaluation_keeps_string_period():
    result = EvaluationService()._transform_evaluation({"id": "x", "period": "2024-3"})
    assert result.period == "2024-3"
    assert result.period_key == "2024-03"


def test_transform_evaluation_tolerates_bad_values():
    doc = {
        "id": "x",
        "employeeId": 7,
        "date": "not a date",
        "period": {"year": "soon"},
        "criteria": {"quality": "5", "efficiency": 3, "teamwork": True},
    }
    result = EvaluationService()._transform_evaluation(doc)

    assert result.employee_id == "7"
    assert result.date is None
    assert result.period is None
    assert result.period_key == ""
    assert result.criteria == {"efficiency": 3}


@pytest.mark.anyio
async def test_list_evaluations_newest_first_undated_last():
    service, _ = _service_with_items(
        {"id": "old", "date": "2024-01-01T00:00:00Z"},
        {"id": "undated"},
        {"id": "new", "date": "2024-03-01T00:00:00Z"},
    )

    results = await service.list_evaluations()

    assert [e.id for e in results] == ["new", "old", "undated"]


@pytest.mark.anyio
async def test_list_evaluations_not_initialized():
    assert await EvaluationService().list_evaluations() == []


@pytest.mark.anyio
async def test_create_evaluation_stamps_period_and_evaluator():
    service, container = _service_with_items()
    data = EvaluationCreate(employee_id="emp-1", criteria={"quality": 4, "teamwork": 5})

    created = await service.create_evaluation(data, "evaluator-9", now=NOW)

    body = container.create_item.call_args.kwargs["body"]
    assert body["employeeId"] == "emp-1"
    assert body["evaluatorId"] == "evaluator-9"
    assert body["period"] == "2024-03"
    assert body["date"] == NOW.isoformat()
    assert body["criteria"] == {"quality": 4, "teamwork": 5}
    assert created.period_key == "2024-03"
    assert created.date == NOW


@pytest.mark.anyio
async def test_create_evaluation_keeps_given_date():
    service, container = _service_with_items()
    data = EvaluationCreate(
        employee_id="emp-1",
        criteria={"quality": 4},
        date=datetime(2024, 2, 10, 9, 0, tzinfo=timezone.utc),
    )

    created = await service.create_evaluation(data, None, now=NOW)

    assert created.date == datetime(2024, 2, 10, 9, 0, tzinfo=timezone.utc)
    assert created.period_key == "2024-03"


@pytest.mark.anyio
async def test_create_evaluation_not_configured():
    data = EvaluationCreate(employee_id="emp-1", criteria={"quality": 4})
    with pytest.raises(StoreNotConfiguredError):
        await EvaluationService().create_evaluation(data, None)


@pytest.mark.anyio
async def test_update_evaluation_replaces_scores():
    service, container = _service_with_items(SAMPLE_COSMOS_DOC)

    updated = await service.update_evaluation("ev-1", EvaluationUpdate(criteria={"quality": 2}), now=NOW)

    body = container.replace_item.call_args.kwargs["body"]
    assert body["criteria"] == {"quality": 2}
    assert body["comments"] == "Reliable"
    assert updated.criteria == {"quality": 2}


@pytest.mark.anyio
async def test_update_evaluation_missing():
    service, _ = _service_with_items()
    assert await service.update_evaluation("missing", EvaluationUpdate(comments="x")) is None


@pytest.mark.anyio
async def test_delete_evaluation_is_hard_delete():
    service, container = _service_with_items(SAMPLE_COSMOS_DOC)

    assert await service.delete_evaluation("ev-1") is True
    container.delete_item.assert_awaited_once_with(item="ev-1", partition_key="ev-1")


@pytest.mark.anyio
async def test_delete_evaluation_missing():
    service, container = _service_with_items()

    assert await service.delete_evaluation("missing") is False
    container.delete_item.assert_not_called()
