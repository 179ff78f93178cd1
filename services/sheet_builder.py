"""
Sheet builder for assessment report exports
Assembles projected rows and aggregates into named sheets
"""

from models.performance import BAND_ABSENT, BAND_ABSENTEE, PerformanceBands
from models.workbook import HEADER_DANGER, STYLE_SECTION, STYLE_SUBHEADER, Sheet
from services.row_projector import RowProjector
from utils.formatters import NOT_AVAILABLE, format_date, format_rate
from utils.sorting_helpers import SortingHelpers

PERFORMANCE_SHEET = 'Student Performance Report'
ABSENTEES_SHEET = 'Absentees Report'
ANALYTICS_SHEET = 'Analytics Summary'
CUSTOM_SHEET = 'Custom Student Data'
CUSTOM_ABSENTEES_SHEET = 'Custom Absentees Data'


class SheetBuilder:
    """Builds the performance, absentee, analytics and custom sheets"""

    @staticmethod
    def _apply_band(sheet, row_index, record, percentage_index, settings):
        if not settings.color_code:
            return
        if not record.is_present:
            sheet.row_styles[row_index] = BAND_ABSENT
        elif percentage_index is not None:
            band = PerformanceBands.color_band(record.percentage_score)
            sheet.style_cell(row_index, percentage_index, band)

    @staticmethod
    def build_performance_sheet(submissions, schema, settings):
        """Rows sorted by percentage, highest first; ties keep input order"""
        header = RowProjector.build_header(schema)
        sheet = Sheet(PERFORMANCE_SHEET, header)
        percentage_index = len(header) - 1

        for record in SortingHelpers.sort_by_percentage(submissions):
            row_index = sheet.add_row(RowProjector.project_row(record, schema))
            SheetBuilder._apply_band(sheet, row_index, record, percentage_index, settings)
        return sheet

    @staticmethod
    def build_absentees_sheet(absentees, schema):
        """Same columns as the performance sheet, every row shaded"""
        sheet = Sheet(ABSENTEES_SHEET, RowProjector.build_header(schema), HEADER_DANGER)
        for record in absentees:
            sheet.add_row(RowProjector.project_row(record, schema, is_present=False),
                          row_style=BAND_ABSENTEE)
        return sheet

    @staticmethod
    def build_analytics_sheet(summary, assessment, settings):
        """Key/value block, performance distribution, department rollup.

        The row order here is fixed.
        """
        sheet = Sheet(ANALYTICS_SHEET, ['Assessment Analytics Summary', ''])

        title = getattr(assessment, 'title', None) or NOT_AVAILABLE
        created_at = getattr(assessment, 'created_at', None)
        sheet.add_row(['Assessment Title', title])
        sheet.add_row(['Assessment Date', format_date(created_at)])
        sheet.add_row(['Total Students', summary['total_students']])
        sheet.add_row(['Present Students', summary['present_students']])
        sheet.add_row(['Absent Students', summary['absent_students']])
        sheet.add_row(['Attendance Rate', format_rate(summary['attendance_rate'])])
        sheet.add_row(['Average Score', format_rate(summary['average_score'])])
        sheet.add_row([''])

        sheet.add_row(['Performance Distribution', ''], row_style=STYLE_SECTION)
        sheet.add_row(['Range', 'Count'], row_style=STYLE_SUBHEADER)
        first_bucket_row = None
        for label, count in summary['performance_distribution']:
            row_index = sheet.add_row([label, count])
            if first_bucket_row is None:
                first_bucket_row = row_index
        if settings is not None and settings.include_charts and first_bucket_row is not None:
            sheet.add_chart('Performance Distribution', first_bucket_row, sheet.row_count - 1)

        sheet.add_row([''])
        sheet.add_row(['Department-wise Analysis', ''], row_style=STYLE_SECTION)
        sheet.add_row(['Department', 'Total', 'Present', 'Absent', 'Avg Score'],
                      row_style=STYLE_SUBHEADER)
        for department in summary['department_breakdown']:
            sheet.add_row([
                department['name'],
                department['total'],
                department['present'],
                department['absent'],
                format_rate(department['average_score']),
            ])
        return sheet

    @staticmethod
    def build_custom_sheet(submissions, columns, schema, settings, assessment=None):
        """Selected columns only, present and absent students together"""
        sheet = Sheet(CUSTOM_SHEET, RowProjector.custom_header(columns))
        keys = [column.key for column in columns]
        percentage_index = keys.index('percentageScore') if 'percentageScore' in keys else None

        for record in submissions:
            row = RowProjector.project_custom_row(record, columns, schema, assessment=assessment)
            row_index = sheet.add_row(row)
            SheetBuilder._apply_band(sheet, row_index, record, percentage_index, settings)
        return sheet

    @staticmethod
    def build_custom_absentees_sheet(absentees, columns, schema, assessment=None):
        sheet = Sheet(CUSTOM_ABSENTEES_SHEET, RowProjector.custom_header(columns), HEADER_DANGER)
        for record in absentees:
            row = RowProjector.project_custom_row(record, columns, schema, is_present=False,
                                                  assessment=assessment)
            sheet.add_row(row, row_style=BAND_ABSENTEE)
        return sheet
