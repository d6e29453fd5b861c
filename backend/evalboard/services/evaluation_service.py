"""Cosmos DB evaluation service.

Evaluations are removed with a hard delete. The period of a new evaluation is
derived from the creation time.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from evalboard.core.dates import parse_datetime, to_iso, utcnow
from evalboard.core.periods import canonical_period, current_period
from evalboard.models.evaluation import Evaluation, EvaluationCreate, EvaluationUpdate, YearMonth
from evalboard.services.store import CosmosContainerService

logger = logging.getLogger(__name__)

_FIELD_MAP: list[tuple[str, str]] = [
    ("employee_id", "employeeId"),
    ("evaluator_id", "evaluatorId"),
    ("date", "date"),
    ("period", "period"),
    ("criteria", "criteria"),
    ("comments", "comments"),
    ("strengths", "strengths"),
    ("improvements", "improvements"),
    ("created_at", "createdAt"),
    ("updated_at", "updatedAt"),
]
_TO_COSMOS = dict(_FIELD_MAP)
_DATE_FIELDS = {"date", "created_at", "updated_at"}

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _coerce_period(value: Any) -> str | YearMonth | None:
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        try:
            return YearMonth(year=int(value["year"]), month=int(value["month"]))
        except (KeyError, TypeError, ValueError):
            return None
    return None


def _coerce_criteria(value: Any) -> dict[str, float]:
    if not isinstance(value, dict):
        return {}
    return {
        str(key): score
        for key, score in value.items()
        if isinstance(score, int | float) and not isinstance(score, bool)
    }


class EvaluationService(CosmosContainerService):
    container_setting = "COSMOS_DB_EVALUATIONS_CONTAINER"

    async def list_evaluations(self) -> list[Evaluation]:
        """All evaluations, newest first; undated evaluations go last."""
        items = await self._query("SELECT * FROM c")
        evaluations = [self._transform_evaluation(item) for item in items]
        evaluations.sort(key=lambda e: e.date or _OLDEST, reverse=True)
        return evaluations

    async def get_evaluation(self, evaluation_id: str) -> Evaluation | None:
        raw = await self._read_raw(evaluation_id)
        return self._transform_evaluation(raw) if raw is not None else None

    async def create_evaluation(
        self,
        data: EvaluationCreate,
        evaluator_id: str | None,
        now: datetime | None = None,
    ) -> Evaluation:
        container = self._require_container()
        now = now or utcnow()
        timestamp = to_iso(now)

        doc = self._to_document(data.model_dump(mode="json"))
        doc.update(
            {
                "id": uuid.uuid4().hex,
                "evaluatorId": evaluator_id,
                "date": to_iso(data.date) if data.date else timestamp,
                "period": current_period(now),
                "createdAt": timestamp,
                "updatedAt": timestamp,
            }
        )
        created = await container.create_item(body=doc)
        logger.info("Evaluation created (id=%s employee=%s)", doc["id"], data.employee_id)
        return self._transform_evaluation(created or doc)

    async def update_evaluation(
        self,
        evaluation_id: str,
        data: EvaluationUpdate,
        now: datetime | None = None,
    ) -> Evaluation | None:
        container = self._require_container()
        raw = await self._read_raw(evaluation_id)
        if raw is None:
            return None

        raw.update(self._to_document(data.model_dump(mode="json", exclude_unset=True)))
        raw["updatedAt"] = to_iso(now or utcnow())
        replaced = await container.replace_item(item=evaluation_id, body=raw)
        return self._transform_evaluation(replaced or raw)

    async def delete_evaluation(self, evaluation_id: str) -> bool:
        container = self._require_container()
        raw = await self._read_raw(evaluation_id)
        if raw is None:
            return False

        await container.delete_item(item=evaluation_id, partition_key=evaluation_id)
        logger.info("Evaluation deleted (id=%s)", evaluation_id)
        return True

    @staticmethod
    def _to_document(values: dict[str, Any]) -> dict[str, Any]:
        return {_TO_COSMOS[key]: value for key, value in values.items() if key in _TO_COSMOS}

    def _transform_evaluation(self, raw: dict[str, Any]) -> Evaluation:
        data: dict[str, Any] = {"id": raw.get("id") or "unknown"}

        for python_key, cosmos_key in _FIELD_MAP:
            value = raw.get(cosmos_key)
            if value is None:
                continue
            data[python_key] = parse_datetime(value) if python_key in _DATE_FIELDS else value

        data["period"] = _coerce_period(raw.get("period"))
        data["period_key"] = canonical_period(raw.get("period"))
        data["criteria"] = _coerce_criteria(raw.get("criteria"))
        if "employee_id" in data:
            data["employee_id"] = str(data["employee_id"])

        return Evaluation(**data)


evaluation_service = EvaluationService()
