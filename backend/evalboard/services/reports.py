"""Evaluation and employee report files, shared by the API and the export script."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from evalboard.models.employee import Employee
from evalboard.models.evaluation import Evaluation
from evalboard.services.aggregation import employee_index
from evalboard.services.export import (
    EMPLOYEE_COLUMNS,
    EMPLOYEE_PDF_COLUMNS,
    EVALUATION_COLUMNS,
    EVALUATION_PDF_COLUMNS,
    PDF_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
    ExportError,
    column_headers,
    employee_rows,
    evaluation_rows,
    render_pdf,
    render_xlsx,
)
from evalboard.services.filters import EmployeeFilters, EvaluationFilters, is_unset
from evalboard.services.labels import category_label
from evalboard.services.scoring import mean_rating

TEXTS: dict[str, dict[str, str]] = {
    "en": {
        "evaluations_title": "Evaluations Report",
        "employees_title": "Employees Report",
        "evaluations_sheet": "Evaluations",
        "employees_sheet": "Employees",
        "report_date": "Report date: {date}",
        "filters": "Filters: {filters}",
        "employee": "Employee: {name}",
        "range": "Period: {start} to {end}",
        "range_start": "start",
        "range_end": "end",
        "category": "Category: {category}",
        "average": "Average rating: {value:.2f}",
        "count": "Evaluations: {count}",
    },
    "ar": {
        "evaluations_title": "تقرير التقييمات",
        "employees_title": "تقرير الموظفين",
        "evaluations_sheet": "تقييمات",
        "employees_sheet": "موظفين",
        "report_date": "تاريخ التقرير: {date}",
        "filters": "معايير التصفية: {filters}",
        "employee": "الموظف: {name}",
        "range": "الفترة: {start} إلى {end}",
        "range_start": "البداية",
        "range_end": "النهاية",
        "category": "الفئة: {category}",
        "average": "متوسط التقييمات: {value:.2f}",
        "count": "عدد التقييمات: {count}",
    },
}

RTL_LOCALES = {"ar"}

FILE_STEMS = {"evaluations": "evaluations_report", "employees": "employees_report"}


@dataclass(frozen=True)
class RenderedReport:
    content: bytes
    media_type: str
    filename: str


def _texts(locale: str) -> dict[str, str]:
    return TEXTS.get(locale, TEXTS["en"])


def _evaluation_filter_text(filters: EvaluationFilters, employees: Sequence[Employee], locale: str) -> str:
    texts = _texts(locale)
    parts: list[str] = []
    if not is_unset(filters.employee_id):
        employee = employee_index(employees).get(filters.employee_id)
        parts.append(texts["employee"].format(name=employee.name if employee else ""))
    if filters.start or filters.end:
        parts.append(
            texts["range"].format(
                start=filters.start.strftime("%Y-%m-%d") if filters.start else texts["range_start"],
                end=filters.end.strftime("%Y-%m-%d") if filters.end else texts["range_end"],
            )
        )
    return ", ".join(parts)


def _employee_filter_text(filters: EmployeeFilters, locale: str) -> str:
    if is_unset(filters.category):
        return ""
    return _texts(locale)["category"].format(category=category_label(filters.category, locale))


def _header_lines(now: datetime, filter_text: str, locale: str) -> list[str]:
    texts = _texts(locale)
    lines = [texts["report_date"].format(date=now.strftime("%Y-%m-%d"))]
    if filter_text:
        lines.append(texts["filters"].format(filters=filter_text))
    return lines


def _check_format(fmt: str) -> None:
    if fmt not in ("xlsx", "pdf"):
        raise ExportError(f"Unsupported export format: {fmt}")


def build_evaluation_report(
    evaluations: Sequence[Evaluation],
    employees: Sequence[Employee],
    fmt: str,
    *,
    filters: EvaluationFilters,
    now: datetime,
    locale: str = "en",
) -> RenderedReport:
    _check_format(fmt)
    texts = _texts(locale)
    rows = evaluation_rows(evaluations, employees, locale)
    filename = f"{FILE_STEMS['evaluations']}.{fmt}"

    if fmt == "xlsx":
        content = render_xlsx(rows, texts["evaluations_sheet"], column_headers(EVALUATION_COLUMNS, locale))
        return RenderedReport(content, XLSX_MEDIA_TYPE, filename)

    summary: list[str] = []
    if evaluations:
        summary = [
            texts["average"].format(value=mean_rating(evaluations)),
            texts["count"].format(count=len(evaluations)),
        ]
    content = render_pdf(
        texts["evaluations_title"],
        rows,
        column_headers(EVALUATION_PDF_COLUMNS, locale),
        subtitle_lines=_header_lines(now, _evaluation_filter_text(filters, employees, locale), locale),
        summary_lines=summary,
        rtl=locale in RTL_LOCALES,
    )
    return RenderedReport(content, PDF_MEDIA_TYPE, filename)


def build_employee_report(
    employees: Sequence[Employee],
    evaluations: Sequence[Evaluation],
    fmt: str,
    *,
    filters: EmployeeFilters,
    now: datetime,
    locale: str = "en",
) -> RenderedReport:
    _check_format(fmt)
    texts = _texts(locale)
    rows = employee_rows(employees, evaluations, locale)
    filename = f"{FILE_STEMS['employees']}.{fmt}"

    if fmt == "xlsx":
        content = render_xlsx(rows, texts["employees_sheet"], column_headers(EMPLOYEE_COLUMNS, locale))
        return RenderedReport(content, XLSX_MEDIA_TYPE, filename)

    content = render_pdf(
        texts["employees_title"],
        rows,
        column_headers(EMPLOYEE_PDF_COLUMNS, locale),
        subtitle_lines=_header_lines(now, _employee_filter_text(filters, locale), locale),
        rtl=locale in RTL_LOCALES,
    )
    return RenderedReport(content, PDF_MEDIA_TYPE, filename)
