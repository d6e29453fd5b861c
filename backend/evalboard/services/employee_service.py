"""Cosmos DB employee service.

Deleting an employee only clears its ``isActive`` flag; the document is kept.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any

from evalboard.core.dates import parse_datetime, to_iso, utcnow
from evalboard.models.employee import Employee, EmployeeCreate, EmployeeUpdate
from evalboard.services.store import CosmosContainerService

logger = logging.getLogger(__name__)

# Python attribute names → Cosmos DB document keys
_FIELD_MAP: list[tuple[str, str]] = [
    ("name", "name"),
    ("national_id", "nationalId"),
    ("category", "category"),
    ("grade", "grade"),
    ("appointment", "appointment"),
    ("join_date", "joinDate"),
    ("assigned_files", "assignedFiles"),
    ("is_active", "isActive"),
    ("created_at", "createdAt"),
    ("updated_at", "updatedAt"),
]
_TO_COSMOS = dict(_FIELD_MAP)
_DATE_FIELDS = {"join_date", "created_at", "updated_at"}


class EmployeeService(CosmosContainerService):
    container_setting = "COSMOS_DB_EMPLOYEES_CONTAINER"

    async def list_employees(self) -> list[Employee]:
        items = await self._query("SELECT * FROM c WHERE c.isActive = true")
        return [self._transform_employee(item) for item in items]

    async def get_employee(self, employee_id: str) -> Employee | None:
        raw = await self._read_raw(employee_id)
        if raw is None:
            return None
        employee = self._transform_employee(raw)
        if not employee.is_active:
            return None
        return employee

    async def create_employee(self, data: EmployeeCreate, now: datetime | None = None) -> Employee:
        container = self._require_container()
        timestamp = to_iso(now or utcnow())

        doc = self._to_document(data.model_dump(mode="json"))
        doc.update(
            {
                "id": uuid.uuid4().hex,
                "isActive": True,
                "createdAt": timestamp,
                "updatedAt": timestamp,
            }
        )
        created = await container.create_item(body=doc)
        logger.info("Employee created (id=%s)", doc["id"])
        return self._transform_employee(created or doc)

    async def update_employee(
        self,
        employee_id: str,
        data: EmployeeUpdate,
        now: datetime | None = None,
    ) -> Employee | None:
        container = self._require_container()
        raw = await self._read_raw(employee_id)
        if raw is None or raw.get("isActive") is False:
            return None

        raw.update(self._to_document(data.model_dump(mode="json", exclude_unset=True)))
        raw["updatedAt"] = to_iso(now or utcnow())
        replaced = await container.replace_item(item=employee_id, body=raw)
        return self._transform_employee(replaced or raw)

    async def deactivate_employee(self, employee_id: str, now: datetime | None = None) -> bool:
        container = self._require_container()
        raw = await self._read_raw(employee_id)
        if raw is None or raw.get("isActive") is False:
            return False

        raw["isActive"] = False
        raw["updatedAt"] = to_iso(now or utcnow())
        await container.replace_item(item=employee_id, body=raw)
        logger.info("Employee deactivated (id=%s)", employee_id)
        return True

    @staticmethod
    def _to_document(values: dict[str, Any]) -> dict[str, Any]:
        return {_TO_COSMOS[key]: value for key, value in values.items() if key in _TO_COSMOS}

    def _transform_employee(self, raw: dict[str, Any]) -> Employee:
        data: dict[str, Any] = {"id": raw.get("id") or "unknown"}

        for python_key, cosmos_key in _FIELD_MAP:
            value = raw.get(cosmos_key)
            if value is None:
                continue
            data[python_key] = parse_datetime(value) if python_key in _DATE_FIELDS else value

        if not isinstance(data.get("assigned_files", []), list):
            data["assigned_files"] = []
        data["assigned_files"] = [str(f) for f in data.get("assigned_files", [])]
        if "national_id" in data:
            data["national_id"] = str(data["national_id"])

        return Employee(**data)


employee_service = EmployeeService()
