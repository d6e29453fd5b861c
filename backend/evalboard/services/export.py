"""Report rows and their spreadsheet/PDF encodings."""

from __future__ import annotations

import html
import io
import logging
from collections.abc import Sequence
from typing import Any

import fitz
import xlsxwriter

from evalboard.core.periods import period_label
from evalboard.models.employee import Employee
from evalboard.models.evaluation import Evaluation
from evalboard.services.aggregation import employee_average, employee_index
from evalboard.services.labels import appointment_label, category_label, grade_label
from evalboard.services.scoring import composite_rating

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MEDIA_TYPE = "application/pdf"

COLUMN_LABELS: dict[str, dict[str, str]] = {
    "en": {
        "employee": "Employee",
        "name": "Name",
        "national_id": "National ID",
        "category": "Category",
        "grade": "Grade",
        "appointment": "Appointment",
        "join_date": "Join date",
        "date": "Evaluation date",
        "period": "Period",
        "rating": "Overall rating",
        "strengths": "Strengths",
        "improvements": "Improvements",
        "comments": "Comments",
        "assigned_files": "Assigned files",
        "evaluation_count": "Evaluations",
        "average_rating": "Average rating",
    },
    "ar": {
        "employee": "الموظف",
        "name": "الاسم",
        "national_id": "الرقم القومي",
        "category": "الفئة",
        "grade": "الدرجة الوظيفية",
        "appointment": "نوع التعيين",
        "join_date": "تاريخ الدخول",
        "date": "تاريخ التقييم",
        "period": "الفترة",
        "rating": "إجمالي التقييم",
        "strengths": "نقاط القوة",
        "improvements": "نقاط التحسين",
        "comments": "ملاحظات",
        "assigned_files": "الملفات الموكلة",
        "evaluation_count": "عدد التقييمات",
        "average_rating": "متوسط التقييمات",
    },
}

EVALUATION_COLUMNS = [
    "employee",
    "national_id",
    "category",
    "date",
    "period",
    "rating",
    "strengths",
    "improvements",
    "comments",
    "assigned_files",
]
EVALUATION_PDF_COLUMNS = ["employee", "date", "period", "rating", "strengths", "improvements", "comments"]

EMPLOYEE_COLUMNS = [
    "name",
    "national_id",
    "category",
    "grade",
    "appointment",
    "join_date",
    "evaluation_count",
    "average_rating",
    "assigned_files",
]
EMPLOYEE_PDF_COLUMNS = ["name", "category", "grade", "join_date", "evaluation_count", "average_rating"]

# A4 landscape, in points
PAGE_WIDTH, PAGE_HEIGHT = 842, 595
MARGIN = 42
ROW_HEIGHT = 18
HEADER_FILL = (41 / 255, 128 / 255, 185 / 255)
ALT_FILL = (240 / 255, 240 / 255, 240 / 255)
GRID_COLOR = (0.75, 0.75, 0.75)
LINE_HEIGHT = 14
# Truncation widths only; drawn text picks its own fonts per script.
MEASURE_FONT = "helv"
TEXT_CSS = "* {font-family: sans-serif; margin: 0; padding: 0; white-space: nowrap;}"


class ExportError(Exception):
    pass


def column_headers(columns: Sequence[str], locale: str = "en") -> list[str]:
    labels = COLUMN_LABELS.get(locale, COLUMN_LABELS["en"])
    return [labels[c] for c in columns]


def _day(value: Any) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def _row(columns: Sequence[str], values: dict[str, Any], locale: str) -> dict[str, Any]:
    return dict(zip(column_headers(columns, locale), (values[c] for c in columns)))


def evaluation_rows(
    evaluations: Sequence[Evaluation],
    employees: Sequence[Employee],
    locale: str = "en",
) -> list[dict[str, Any]]:
    index = employee_index(employees)
    rows: list[dict[str, Any]] = []
    for evaluation in evaluations:
        employee = index.get(evaluation.employee_id)
        values = {
            "employee": employee.name if employee else "",
            "national_id": employee.national_id if employee else "",
            "category": category_label(employee.category, locale) if employee else "",
            "date": _day(evaluation.date),
            "period": period_label(evaluation.period_key, locale),
            "rating": round(composite_rating(evaluation.criteria), 1),
            "strengths": evaluation.strengths or "",
            "improvements": evaluation.improvements or "",
            "comments": evaluation.comments or "",
            "assigned_files": ", ".join(employee.assigned_files) if employee else "",
        }
        rows.append(_row(EVALUATION_COLUMNS, values, locale))
    return rows


def employee_rows(
    employees: Sequence[Employee],
    evaluations: Sequence[Evaluation],
    locale: str = "en",
) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for employee in employees:
        count, average = employee_average(employee.id, evaluations)
        values = {
            "name": employee.name,
            "national_id": employee.national_id,
            "category": category_label(employee.category, locale),
            "grade": grade_label(employee.grade, locale),
            "appointment": appointment_label(employee.appointment, locale),
            "join_date": _day(employee.join_date),
            "evaluation_count": count,
            "average_rating": round(average, 1),
            "assigned_files": ", ".join(employee.assigned_files),
        }
        rows.append(_row(EMPLOYEE_COLUMNS, values, locale))
    return rows


def render_xlsx(rows: Sequence[dict[str, Any]], sheet_name: str, headers: Sequence[str] | None = None) -> bytes:
    headers = list(headers) if headers is not None else (list(rows[0]) if rows else [])
    output = io.BytesIO()
    try:
        workbook = xlsxwriter.Workbook(output, {"in_memory": True})
        sheet = workbook.add_worksheet(sheet_name[:31])

        header_format = workbook.add_format({"bold": True, "align": "center", "bg_color": "#D3D3D3", "border": 1})
        rating_format = workbook.add_format({"num_format": "0.0"})

        for col, header in enumerate(headers):
            sheet.write(0, col, header, header_format)
            sheet.set_column(col, col, max(12, len(header) + 2))

        for row_idx, row in enumerate(rows, start=1):
            for col, header in enumerate(headers):
                value = row.get(header)
                if isinstance(value, float):
                    sheet.write_number(row_idx, col, value, rating_format)
                elif value is None or value == "":
                    continue
                else:
                    sheet.write(row_idx, col, value)

        workbook.close()
    except Exception as e:
        logger.error("XLSX rendering failed: %s", e)
        raise ExportError(f"Failed to render spreadsheet: {e}") from e
    return output.getvalue()


def _fit(text: str, width: float, fontsize: float) -> str:
    if fitz.get_text_length(text, fontname=MEASURE_FONT, fontsize=fontsize) <= width:
        return text
    while text and fitz.get_text_length(text + "...", fontname=MEASURE_FONT, fontsize=fontsize) > width:
        text = text[:-1]
    return text + "..." if text else ""


def _insert_text(
    page: Any,
    rect: fitz.Rect,
    text: str,
    *,
    fontsize: float,
    bold: bool = False,
    color: str = "#000000",
    align: str = "left",
) -> None:
    style = f"font-size: {fontsize}px; color: {color}; text-align: {align};"
    if bold:
        style += " font-weight: bold;"
    page.insert_htmlbox(rect, f'<div style="{style}">{html.escape(text)}</div>', css=TEXT_CSS)


def _draw_row(
    page: Any,
    y: float,
    cells: Sequence[str],
    col_width: float,
    *,
    header: bool,
    shaded: bool,
    align: str,
) -> None:
    row_rect = fitz.Rect(MARGIN, y, PAGE_WIDTH - MARGIN, y + ROW_HEIGHT)
    if header:
        page.draw_rect(row_rect, color=GRID_COLOR, fill=HEADER_FILL, width=0.5)
    elif shaded:
        page.draw_rect(row_rect, color=GRID_COLOR, fill=ALT_FILL, width=0.5)
    else:
        page.draw_rect(row_rect, color=GRID_COLOR, width=0.5)

    for idx, cell in enumerate(cells):
        x = MARGIN + idx * col_width
        _insert_text(
            page,
            fitz.Rect(x + 3, y + 3, x + col_width - 3, y + ROW_HEIGHT),
            _fit(cell, col_width - 6, 9),
            fontsize=9,
            bold=header,
            color="#ffffff" if header else "#000000",
            align=align,
        )


def _line_rect(y: float) -> fitz.Rect:
    return fitz.Rect(MARGIN, y, PAGE_WIDTH - MARGIN, y + LINE_HEIGHT)


def render_pdf(
    title: str,
    rows: Sequence[dict[str, Any]],
    headers: Sequence[str] | None = None,
    *,
    subtitle_lines: Sequence[str] = (),
    summary_lines: Sequence[str] = (),
    rtl: bool = False,
) -> bytes:
    """Render rows as a paged table on A4 landscape pages.

    Text goes through MuPDF's HTML layout, so Arabic is shaped and falls back to
    a font that has the glyphs. ``rtl`` right-aligns the body text.
    """
    headers = list(headers) if headers is not None else (list(rows[0]) if rows else [])
    align = "right" if rtl else "left"
    try:
        doc = fitz.open()
        page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)

        _insert_text(page, fitz.Rect(MARGIN, 28, PAGE_WIDTH - MARGIN, 58), title, fontsize=18, bold=True, align="center")

        y = 62.0
        for line in subtitle_lines:
            _insert_text(page, _line_rect(y), line, fontsize=10, align=align)
            y += LINE_HEIGHT
        y += 6

        col_width = (PAGE_WIDTH - 2 * MARGIN) / max(len(headers), 1)
        if headers:
            _draw_row(page, y, headers, col_width, header=True, shaded=False, align=align)
            y += ROW_HEIGHT

        for idx, row in enumerate(rows):
            if y + ROW_HEIGHT > PAGE_HEIGHT - MARGIN:
                page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
                y = float(MARGIN)
                _draw_row(page, y, headers, col_width, header=True, shaded=False, align=align)
                y += ROW_HEIGHT
            cells = ["-" if row.get(h) in (None, "") else str(row.get(h)) for h in headers]
            _draw_row(page, y, cells, col_width, header=False, shaded=idx % 2 == 1, align=align)
            y += ROW_HEIGHT

        if summary_lines:
            summary_y = PAGE_HEIGHT - 20 - LINE_HEIGHT * len(summary_lines)
            if y > summary_y - ROW_HEIGHT:
                page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
            y = float(summary_y)
            for line in summary_lines:
                _insert_text(page, _line_rect(y), line, fontsize=10, align=align)
                y += LINE_HEIGHT

        data = doc.tobytes()
        doc.close()
        return data
    except Exception as e:
        logger.error("PDF rendering failed: %s", e)
        raise ExportError(f"Failed to render PDF: {e}") from e
