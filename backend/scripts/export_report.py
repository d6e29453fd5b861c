#!/usr/bin/env python3
"""Export an evaluations or employees report straight from Cosmos DB.

Run from the backend/ directory:

    python3 scripts/export_report.py evaluations --format pdf --output report.pdf \
        [--employee-id ID] [--start 2024-01-01] [--end 2024-03-31] [--period 2024-03] [--search TEXT]
    python3 scripts/export_report.py employees --format xlsx [--category doctor] [--search TEXT]

Reads active employees and all evaluations (read-only), applies the same filters as
the API and writes the rendered file.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from datetime import date

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from evalboard.core.config import Settings  # noqa: E402
from evalboard.core.dates import day_end, day_start, utcnow  # noqa: E402
from evalboard.services.employee_service import EmployeeService  # noqa: E402
from evalboard.services.evaluation_service import EvaluationService  # noqa: E402
from evalboard.services.filters import (  # noqa: E402
    ALL,
    EmployeeFilters,
    EvaluationFilters,
    filter_employees,
    filter_evaluations,
)
from evalboard.services.records import fetch_records  # noqa: E402
from evalboard.services.reports import (  # noqa: E402
    RenderedReport,
    build_employee_report,
    build_evaluation_report,
)

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export an evaluations or employees report")
    parser.add_argument("kind", choices=["evaluations", "employees"], help="Report to export")
    parser.add_argument("--format", choices=["xlsx", "pdf"], default="xlsx", help="Output format (default: xlsx)")
    parser.add_argument("--output", default=None, help="Output path (default: <kind>_report.<format>)")
    parser.add_argument("--locale", default=None, help="Report locale (default: REPORT_LOCALE setting)")
    parser.add_argument("--employee-id", default="", help="Only evaluations of this employee")
    parser.add_argument("--start", type=date.fromisoformat, default=None, help="First evaluation day (YYYY-MM-DD)")
    parser.add_argument("--end", type=date.fromisoformat, default=None, help="Last evaluation day (YYYY-MM-DD)")
    parser.add_argument("--period", default=ALL, help="Evaluation period key (YYYY-MM)")
    parser.add_argument("--category", default=ALL, help="Employee category")
    parser.add_argument("--search", default="", help="Free-text search term")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (DEBUG) logging")
    return parser.parse_args(argv)


def evaluation_filters_from_args(args: argparse.Namespace) -> EvaluationFilters:
    return EvaluationFilters(
        employee_id=args.employee_id,
        start=day_start(args.start) if args.start else None,
        end=day_end(args.end) if args.end else None,
        period=args.period,
        search=args.search,
    )


def employee_filters_from_args(args: argparse.Namespace) -> EmployeeFilters:
    return EmployeeFilters(search=args.search, category=args.category)


async def export_report(args: argparse.Namespace, settings: Settings | None = None) -> RenderedReport | None:
    settings = settings or Settings()
    locale = args.locale or settings.REPORT_LOCALE

    employee_store = EmployeeService()
    evaluation_store = EvaluationService()
    await employee_store.initialize(settings)
    await evaluation_store.initialize(settings)
    if not employee_store.initialized or not evaluation_store.initialized:
        logger.error("Cosmos DB is not configured. Set COSMOS_DB_ENDPOINT and COSMOS_DB_KEY.")
        return None

    try:
        logger.info("Fetching employees and evaluations...")
        employees, evaluations = await fetch_records(employee_store, evaluation_store)
        logger.info("Found %d employees, %d evaluations", len(employees), len(evaluations))
    finally:
        await employee_store.close()
        await evaluation_store.close()

    now = utcnow()
    if args.kind == "evaluations":
        filters = evaluation_filters_from_args(args)
        selected = filter_evaluations(evaluations, employees, filters, locale)
        logger.info("Exporting %d evaluations", len(selected))
        return build_evaluation_report(selected, employees, args.format, filters=filters, now=now, locale=locale)

    employee_filters = employee_filters_from_args(args)
    selected_employees = filter_employees(employees, employee_filters)
    logger.info("Exporting %d employees", len(selected_employees))
    return build_employee_report(
        selected_employees,
        evaluations,
        args.format,
        filters=employee_filters,
        now=now,
        locale=locale,
    )


async def run(args: argparse.Namespace) -> int:
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    report = await export_report(args)
    if report is None:
        return 1

    output = args.output or report.filename
    with open(output, "wb") as fh:
        fh.write(report.content)
    logger.info("Wrote %s (%d bytes)", output, len(report.content))
    return 0


def main() -> None:
    args = parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
