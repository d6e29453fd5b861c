from __future__ import annotations

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from evalboard.core.config import Settings
from evalboard.services.export import XLSX_MEDIA_TYPE
from evalboard.services.reports import RenderedReport
from scripts.export_report import (
    employee_filters_from_args,
    evaluation_filters_from_args,
    export_report,
    parse_args,
    run,
)
from tests.conftest import make_employee, make_evaluation

STAFF = [
    make_employee("e1", name="Ahmed Hassan", category="doctor"),
    make_employee("e2", name="Mona Adel", national_id="29505051234567", category="pharmacist"),
]

EVALUATIONS = [
    make_evaluation("v1", "e1", date=datetime(2024, 3, 5, tzinfo=timezone.utc), period="2024-03"),
    make_evaluation("v2", "e2", date=datetime(2024, 2, 5, tzinfo=timezone.utc), period="2024-02"),
]

CONFIGURED = Settings(COSMOS_DB_ENDPOINT="https://cosmos.example", COSMOS_DB_KEY="key")


def test_parse_args_defaults():
    args = parse_args(["evaluations"])

    assert args.kind == "evaluations"
    assert args.format == "xlsx"
    assert args.output is None
    assert args.period == "all"
    assert args.category == "all"
    assert args.start is None


def test_evaluation_filters_from_args_cover_whole_days():
    args = parse_args(["evaluations", "--start", "2024-03-01", "--end", "2024-03-31", "--employee-id", "e1"])

    filters = evaluation_filters_from_args(args)

    assert filters.employee_id == "e1"
    assert filters.start == datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert filters.end.date() == date(2024, 3, 31)
    assert filters.end.hour == 23


def test_employee_filters_from_args():
    args = parse_args(["employees", "--category", "doctor", "--search", "Ahmed"])
    filters = employee_filters_from_args(args)
    assert filters.category == "doctor"
    assert filters.search == "Ahmed"


def test_parse_args_rejects_bad_date():
    with pytest.raises(SystemExit):
        parse_args(["evaluations", "--start", "March"])


def _store_class(initialized: bool = True) -> MagicMock:
    store = MagicMock()
    store.initialize = AsyncMock()
    store.close = AsyncMock()
    store.initialized = initialized
    return MagicMock(return_value=store)


@pytest.mark.anyio
async def test_export_report_without_credentials():
    args = parse_args(["evaluations"])
    report = await export_report(args, Settings(COSMOS_DB_ENDPOINT="", COSMOS_DB_KEY=""))
    assert report is None


@pytest.mark.anyio
async def test_export_report_applies_filters():
    args = parse_args(["evaluations", "--format", "pdf", "--period", "2024-03"])
    employee_cls = _store_class()
    evaluation_cls = _store_class()

    with (
        patch("scripts.export_report.EmployeeService", employee_cls),
        patch("scripts.export_report.EvaluationService", evaluation_cls),
        patch("scripts.export_report.fetch_records", new_callable=AsyncMock, return_value=(STAFF, EVALUATIONS)),
        patch("scripts.export_report.build_evaluation_report") as mock_build,
    ):
        await export_report(args, CONFIGURED)

    selected = mock_build.call_args.args[0]
    assert [e.id for e in selected] == ["v1"]
    assert mock_build.call_args.args[2] == "pdf"
    employee_cls.return_value.close.assert_awaited_once()
    evaluation_cls.return_value.close.assert_awaited_once()


@pytest.mark.anyio
async def test_export_report_employees_xlsx():
    args = parse_args(["employees", "--category", "pharmacist"])

    with (
        patch("scripts.export_report.EmployeeService", _store_class()),
        patch("scripts.export_report.EvaluationService", _store_class()),
        patch("scripts.export_report.fetch_records", new_callable=AsyncMock, return_value=(STAFF, EVALUATIONS)),
    ):
        report = await export_report(args, CONFIGURED)

    assert report.filename == "employees_report.xlsx"
    assert report.content[:2] == b"PK"


@pytest.mark.anyio
async def test_run_writes_file(tmp_path):
    output = tmp_path / "employees.xlsx"
    args = parse_args(["employees", "--output", str(output)])
    report = RenderedReport(b"PK-data", XLSX_MEDIA_TYPE, "employees_report.xlsx")

    with patch("scripts.export_report.export_report", new_callable=AsyncMock, return_value=report):
        exit_code = await run(args)

    assert exit_code == 0
    assert output.read_bytes() == b"PK-data"


@pytest.mark.anyio
async def test_run_returns_error_when_not_configured(tmp_path):
    args = parse_args(["evaluations", "--output", str(tmp_path / "out.xlsx")])

    with patch("scripts.export_report.export_report", new_callable=AsyncMock, return_value=None):
        assert await run(args) == 1

    assert not (tmp_path / "out.xlsx").exists()
