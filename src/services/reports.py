"""
Workload report generation in Excel format.
"""

from datetime import date, timezone
from io import BytesIO
from pathlib import Path
from zoneinfo import ZoneInfo

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from core.colors import parse_color
from core.config import DETAIL_HEADERS, WORKLOAD_HEADERS
from models.events import Event, Resource, WorkloadReport


def format_date_display(d: date) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{d.month}/{d.day}/{d.year}"


def report_filename(first_day: date | None, last_day: date | None) -> str:
    """e.g. workload_2024_01_01_to_2024_01_07.xlsx"""
    if first_day and last_day:
        return f"workload_{first_day:%Y_%m_%d}_to_{last_day:%Y_%m_%d}.xlsx"
    return "workload_all.xlsx"


def _fill_for(color: str | None) -> PatternFill | None:
    """Solid fill for a resource color, or None when it has none."""
    rgb = parse_color(color) if color else None
    if rgb is None:
        return None
    hex_value = "".join(f"{channel:02X}" for channel in rgb)
    return PatternFill(start_color=hex_value, end_color=hex_value, fill_type="solid")


def write_excel_workload_sheet(ws, report: WorkloadReport, resources: list[Resource]):
    """
    Write the summary sheet: one row per resource, busiest first, then a
    Total row with SUM formulas over the numeric columns.
    """
    colors = {resource.id: resource.color for resource in resources}

    for col_idx, header in enumerate(WORKLOAD_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    for row_idx, row in enumerate(report.rows, start=2):
        row_data = [
            row.name,
            row.role or "",
            row.event_count,
            row.total_minutes,
            round(row.total_hours, 2),
            round(row.avg_hours_per_event, 2),
            round(row.share, 4),
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)

        fill = _fill_for(colors.get(row.resource_id))
        if fill is not None:
            ws.cell(row=row_idx, column=1).fill = fill

        ws.cell(row=row_idx, column=7).number_format = "0.0%"

    # Total row
    last_data_row = len(report.rows) + 1
    total_row = last_data_row + 1
    ws.cell(row=total_row, column=1, value="Total").font = Font(bold=True)
    for col_idx in (3, 4, 5):
        letter = get_column_letter(col_idx)
        ws.cell(row=total_row, column=col_idx, value=f"=SUM({letter}2:{letter}{last_data_row})")
    ws.cell(row=total_row, column=6, value=f"=IFERROR(E{total_row}/C{total_row},0)")

    ws.column_dimensions["A"].width = 24
    ws.column_dimensions["B"].width = 18


def write_excel_detail_sheet(
    ws, events: list[Event], resources: list[Resource], tz: ZoneInfo | timezone
):
    """Write one row per event with local date and wall-clock times."""
    names = {resource.id: resource.name for resource in resources}

    for col_idx, header in enumerate(DETAIL_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    for row_idx, event in enumerate(events, start=2):
        start = event.start.astimezone(tz)
        end = event.end.astimezone(tz)
        row_data = [
            names.get(event.resource_id, event.resource_id),
            event.title,
            format_date_display(start.date()),
            start.strftime("%H:%M"),
            end.strftime("%H:%M"),
            event.duration_minutes,
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)


def create_workload_workbook(
    report: WorkloadReport,
    events: list[Event],
    resources: list[Resource],
    tz: ZoneInfo | timezone = timezone.utc,
) -> Workbook:
    """
    Build the workload workbook.

    Sheet 1: "Workload" - per-resource summary with totals
    Sheet 2: "Events" - event detail in ``tz``
    """
    wb = Workbook()

    ws_summary = wb.active
    ws_summary.title = "Workload"
    write_excel_workload_sheet(ws_summary, report, resources)

    ws_detail = wb.create_sheet(title="Events")
    write_excel_detail_sheet(ws_detail, events, resources, tz)

    return wb


def workbook_to_bytes(wb: Workbook) -> bytes:
    output = BytesIO()
    wb.save(output)
    return output.getvalue()


def save_workbook(wb: Workbook, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    return output_path
