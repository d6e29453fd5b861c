"""Employee models for the Cosmos DB employees container."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from evalboard.core.dates import ensure_utc

NATIONAL_ID_PATTERN = r"^\d{14}$"


class EmployeeCategory(str, Enum):
    DOCTOR = "doctor"
    PHARMACIST = "pharmacist"
    DENTIST = "dentist"
    PHYSIOTHERAPIST = "physiotherapist"
    ADMINISTRATIVE = "administrative"
    OTHER = "other"


class EmployeeGrade(str, Enum):
    EXCELLENT = "excellent"
    SENIOR = "senior"
    FIRST = "first"
    SECOND = "second"
    THIRD = "third"


class AppointmentType(str, Enum):
    PERMANENT = "permanent"
    DELEGATED = "delegated"
    MISSION = "mission"
    ASSIGNMENT = "assignment"
    OTHER = "other"


class EmployeeBase(BaseModel):
    name: str = Field(..., min_length=1)
    national_id: str | None = Field(default=None, pattern=NATIONAL_ID_PATTERN)
    category: EmployeeCategory = EmployeeCategory.DOCTOR
    grade: EmployeeGrade = EmployeeGrade.EXCELLENT
    appointment: AppointmentType = AppointmentType.PERMANENT
    join_date: datetime | None = None
    assigned_files: list[str] = []

    @field_validator("join_date")
    @classmethod
    def _join_date_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value else value


class EmployeeCreate(EmployeeBase):
    """Request body for adding an employee."""


class EmployeeUpdate(BaseModel):
    """Partial update; only fields present in the request are written."""

    name: str | None = Field(default=None, min_length=1)
    national_id: str | None = Field(default=None, pattern=NATIONAL_ID_PATTERN)
    category: EmployeeCategory | None = None
    grade: EmployeeGrade | None = None
    appointment: AppointmentType | None = None
    join_date: datetime | None = None
    assigned_files: list[str] | None = None

    @field_validator("join_date")
    @classmethod
    def _join_date_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value else value


class Employee(BaseModel):
    """An employee record as read from the store.

    Stored documents are trusted, so category/grade/appointment stay plain strings
    and the national id is not re-validated here.
    """

    id: str
    name: str = ""
    national_id: str = ""
    category: str = EmployeeCategory.OTHER.value
    grade: str = ""
    appointment: str = ""
    join_date: datetime | None = None
    assigned_files: list[str] = []
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
