"""Report sinks — write combined rows as an ordered table of named columns.

``RowSink`` is the contract the export path drives; ``XlsxRowSink`` encodes
an ``.xlsx`` workbook with openpyxl.
"""

from __future__ import annotations

import io
from typing import Iterable, NamedTuple, Protocol, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from attendance_ledger.common.constants import DATE_FORMAT
from attendance_ledger.reports.schemas import CombinedReportRow

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
EXPORT_FILENAME = "attendance_report.xlsx"


class ReportColumn(NamedTuple):
    key: str
    header: str
    width: int


REPORT_COLUMNS: tuple[ReportColumn, ...] = (
    ReportColumn("id", "ID", 38),
    ReportColumn("staffId", "Staff ID", 38),
    ReportColumn("name", "Name", 25),
    ReportColumn("time", "Time", 15),
    ReportColumn("status", "Status", 15),
    ReportColumn("date", "Date", 15),
    ReportColumn("clockInTime", "Clock In", 15),
    ReportColumn("clockOutTime", "Clock Out", 15),
    ReportColumn("totalHours", "Total Hours", 30),
    ReportColumn("keterangan", "Keterangan", 20),
)


def row_values(row: CombinedReportRow) -> list[str]:
    """Cell values of *row* in ``REPORT_COLUMNS`` order."""
    return [
        row.id,
        str(row.staff_id),
        row.name,
        row.time,
        row.status,
        row.date.strftime(DATE_FORMAT),
        row.clock_in_time,
        row.clock_out_time,
        row.total_hours,
        row.keterangan,
    ]


class RowSink(Protocol):
    def write_header(self, columns: Sequence[ReportColumn]) -> None:
        ...

    def write_row(self, values: Sequence[str]) -> None:
        ...

    def close(self) -> bytes:
        ...


class XlsxRowSink:
    """Single-sheet workbook with a bold header row."""

    def __init__(self, sheet_title: str = "Combined Report") -> None:
        self._workbook = Workbook()
        self._sheet = self._workbook.active
        self._sheet.title = sheet_title

    def write_header(self, columns: Sequence[ReportColumn]) -> None:
        self._sheet.append([c.header for c in columns])
        for index, column in enumerate(columns, start=1):
            self._sheet.column_dimensions[get_column_letter(index)].width = column.width
            self._sheet.cell(row=1, column=index).font = Font(bold=True)

    def write_row(self, values: Sequence[str]) -> None:
        self._sheet.append(list(values))

    def close(self) -> bytes:
        buffer = io.BytesIO()
        self._workbook.save(buffer)
        return buffer.getvalue()


def export_rows(rows: Iterable[CombinedReportRow], sink: RowSink) -> bytes:
    sink.write_header(REPORT_COLUMNS)
    for row in rows:
        sink.write_row(row_values(row))
    return sink.close()
