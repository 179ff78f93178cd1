"""
Excel export service for assessment reports
Writes a report Workbook as an .xlsx file
"""

import logging
import re
from datetime import timezone
from io import BytesIO

import openpyxl
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.chart import BarChart, Reference
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from models.performance import (
    BAND_ABSENT, BAND_ABSENTEE, BAND_AT_RISK, BAND_BORDERLINE, BAND_GOOD,
)
from models.workbook import HEADER_DANGER, HEADER_PRIMARY, STYLE_SECTION, STYLE_SUBHEADER
from utils.exceptions import SerializationError

logger = logging.getLogger(__name__)

HEADER_COLORS = {
    HEADER_PRIMARY: '4472C4',
    HEADER_DANGER: 'DC3545',
}

BAND_COLORS = {
    BAND_GOOD: '90EE90',
    BAND_BORDERLINE: 'FFFFE0',
    BAND_AT_RISK: 'FFB6C1',
    BAND_ABSENT: 'D3D3D3',
    BAND_ABSENTEE: 'FFE4E1',
    STYLE_SECTION: 'D9E1F2',
    STYLE_SUBHEADER: 'E7E6E6',
}

BOLD_STYLES = (STYLE_SECTION, STYLE_SUBHEADER)

PERCENT_PATTERN = re.compile(r'^-?\d+(?:\.(\d+))?%$')

MIN_COLUMN_WIDTH = 15
MAX_COLUMN_WIDTH = 50


def _fill(color):
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _naive_utc(value):
    """openpyxl stores document dates without a timezone"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class ExcelExportService:
    """Service for exporting report workbooks to Excel"""

    @staticmethod
    def style_header_row(ws, row_num, columns, header_style=HEADER_PRIMARY):
        """Apply styling to header row"""
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = _fill(HEADER_COLORS.get(header_style, HEADER_COLORS[HEADER_PRIMARY]))
        header_alignment = Alignment(horizontal="center", vertical="center")

        for col_num, header in enumerate(columns, 1):
            cell = ws.cell(row=row_num, column=col_num, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = header_alignment

    @staticmethod
    def auto_adjust_columns(ws, min_width=MIN_COLUMN_WIDTH, max_width=MAX_COLUMN_WIDTH):
        """Auto-adjust column widths"""
        for column in ws.columns:
            column_letter = get_column_letter(column[0].column)
            max_length = max(
                (len(str(cell.value)) for cell in column if cell.value is not None),
                default=0,
            )
            adjusted_width = min(max(max_length + 2, min_width), max_width)
            ws.column_dimensions[column_letter].width = adjusted_width

    @staticmethod
    def center_all_cells(ws):
        """Center align all populated cells in the given worksheet."""
        for row in ws.iter_rows(min_row=1, max_row=ws.max_row, min_col=1, max_col=ws.max_column):
            for cell in row:
                if cell.value is not None:
                    cell.alignment = Alignment(horizontal="center", vertical="center")

    @staticmethod
    def set_percentage(cell, percent_0_to_100):
        """Write a numeric percentage (avoid text with green triangle)."""
        if percent_0_to_100 is None:
            cell.value = None
            return cell
        # Convert 65.88 -> 0.6588 and apply percent format
        cell.value = float(percent_0_to_100) / 100.0
        if percent_0_to_100 == int(percent_0_to_100):
            cell.number_format = '0%'
        else:
            cell.number_format = '0.00%'
        return cell

    @staticmethod
    def set_value(cell, value):
        """Write one projected value; '95%' style strings become numeric percentages
        shown with the same number of decimals"""
        if isinstance(value, str):
            match = PERCENT_PATTERN.match(value)
            if match:
                cell = ExcelExportService.set_percentage(cell, float(value[:-1]))
                decimals = len(match.group(1) or '')
                cell.number_format = '0.' + '0' * decimals + '%' if decimals else '0%'
                return cell
            # control characters are not allowed in worksheet XML
            value = ILLEGAL_CHARACTERS_RE.sub('', value)
        cell.value = value
        return cell

    @staticmethod
    def shade_row(ws, row_num, width, band):
        fill = _fill(BAND_COLORS[band])
        for col_num in range(1, width + 1):
            cell = ws.cell(row=row_num, column=col_num)
            cell.fill = fill
            if band in BOLD_STYLES:
                cell.font = Font(bold=True)

    @staticmethod
    def add_bar_chart(ws, chart_spec):
        """Bar chart over sheet rows; chart rows are 0-based data rows under the header"""
        first_row = chart_spec['first_row'] + 2
        last_row = chart_spec['last_row'] + 2

        chart = BarChart()
        chart.title = chart_spec['title']
        chart.y_axis.title = 'Count'
        chart.legend = None
        data = Reference(ws, min_col=chart_spec['value_column'] + 1,
                         min_row=first_row, max_row=last_row)
        categories = Reference(ws, min_col=chart_spec['label_column'] + 1,
                               min_row=first_row, max_row=last_row)
        chart.add_data(data, titles_from_data=False)
        chart.set_categories(categories)
        ws.add_chart(chart, f"{get_column_letter(ws.max_column + 2)}2")

    @staticmethod
    def write_sheet(ws, sheet, min_width=MIN_COLUMN_WIDTH, max_width=MAX_COLUMN_WIDTH):
        """Fill a worksheet from a report Sheet"""
        ws.title = sheet.name[:31]
        ExcelExportService.style_header_row(ws, 1, sheet.header, sheet.header_style)

        for row_index, values in enumerate(sheet.rows):
            row_num = row_index + 2
            for col_num, value in enumerate(values, 1):
                ExcelExportService.set_value(ws.cell(row=row_num, column=col_num), value)

            band = sheet.row_styles.get(row_index)
            if band in BAND_COLORS:
                ExcelExportService.shade_row(ws, row_num, max(len(sheet.header), len(values)), band)

        for (row_index, col_index), band in sheet.cell_styles.items():
            if band in BAND_COLORS:
                ws.cell(row=row_index + 2, column=col_index + 1).fill = _fill(BAND_COLORS[band])

        ExcelExportService.center_all_cells(ws)
        ExcelExportService.auto_adjust_columns(ws, min_width, max_width)
        ws.freeze_panes = 'A2'

        for chart_spec in sheet.charts:
            ExcelExportService.add_bar_chart(ws, chart_spec)

    @staticmethod
    def build_workbook(workbook, min_width=MIN_COLUMN_WIDTH, max_width=MAX_COLUMN_WIDTH):
        """Create the openpyxl workbook with one worksheet per report sheet"""
        wb = openpyxl.Workbook()
        wb.remove(wb.active)

        for sheet in workbook.sheets:
            ExcelExportService.write_sheet(wb.create_sheet(), sheet, min_width, max_width)

        wb.properties.creator = workbook.creator
        wb.properties.title = workbook.filename
        if workbook.created is not None:
            wb.properties.created = _naive_utc(workbook.created)
        if workbook.modified is not None:
            wb.properties.modified = _naive_utc(workbook.modified)
        return wb

    @staticmethod
    def workbook_to_bytes(wb):
        """Convert workbook to bytes for download"""
        output = BytesIO()
        wb.save(output)
        output.seek(0)
        return output.getvalue()

    @staticmethod
    def serialize(workbook, column_widths=None):
        """Return the .xlsx bytes for a report Workbook"""
        min_width, max_width = column_widths or (MIN_COLUMN_WIDTH, MAX_COLUMN_WIDTH)
        try:
            wb = ExcelExportService.build_workbook(workbook, min_width, max_width)
            return ExcelExportService.workbook_to_bytes(wb)
        except Exception as e:
            logger.exception("Error exporting workbook %s to Excel", workbook.filename)
            raise SerializationError(f"Failed to generate Excel file: {e}") from e
