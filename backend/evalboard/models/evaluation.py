"""Evaluation models for the Cosmos DB evaluations container."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from evalboard.core.dates import ensure_utc

MIN_SCORE = 1
MAX_SCORE = 5

# Criterion id → display name per locale
CRITERIA: dict[str, dict[str, str]] = {
    "quality": {"en": "Quality of work", "ar": "جودة العمل"},
    "efficiency": {"en": "Efficiency", "ar": "الكفاءة"},
    "teamwork": {"en": "Teamwork", "ar": "العمل الجماعي"},
    "communication": {"en": "Communication", "ar": "التواصل"},
    "initiative": {"en": "Initiative", "ar": "المبادرة"},
    "punctuality": {"en": "Punctuality", "ar": "الالتزام بالمواعيد"},
    "infection_control": {"en": "Infection control compliance", "ar": "الالتزام بإجراءات مكافحة العدوى"},
}


class YearMonth(BaseModel):
    """Structured period form; the other form is a ``"YYYY-MM"`` string."""

    year: int
    month: int


def _check_criteria(criteria: dict[str, int]) -> dict[str, int]:
    unknown = [key for key in criteria if key not in CRITERIA]
    if unknown:
        raise ValueError(f"Unknown criteria: {', '.join(sorted(unknown))}")
    for key, value in criteria.items():
        if value < MIN_SCORE or value > MAX_SCORE:
            raise ValueError(f"Criterion '{key}' must be between {MIN_SCORE} and {MAX_SCORE}")
    return criteria


class EvaluationCreate(BaseModel):
    employee_id: str = Field(..., min_length=1)
    date: datetime | None = None
    criteria: dict[str, int]
    comments: str | None = None
    strengths: str | None = None
    improvements: str | None = None

    @field_validator("criteria")
    @classmethod
    def _criteria_in_catalog(cls, value: dict[str, int]) -> dict[str, int]:
        return _check_criteria(value)

    @field_validator("date")
    @classmethod
    def _date_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value else value


class EvaluationUpdate(BaseModel):
    employee_id: str | None = Field(default=None, min_length=1)
    date: datetime | None = None
    period: str | YearMonth | None = None
    criteria: dict[str, int] | None = None
    comments: str | None = None
    strengths: str | None = None
    improvements: str | None = None

    @field_validator("criteria")
    @classmethod
    def _criteria_in_catalog(cls, value: dict[str, int] | None) -> dict[str, int] | None:
        return _check_criteria(value) if value is not None else value

    @field_validator("date")
    @classmethod
    def _date_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value else value


class Evaluation(BaseModel):
    id: str
    employee_id: str = ""
    evaluator_id: str | None = None
    date: datetime | None = None
    period: str | YearMonth | None = None
    period_key: str = ""
    criteria: dict[str, float] = {}
    comments: str | None = None
    strengths: str | None = None
    improvements: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CriterionInfo(BaseModel):
    id: str
    name: str


class PeriodOption(BaseModel):
    key: str
    label: str
