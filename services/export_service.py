"""
Export service for assessment reports
Runs the report pipeline and hands the workbook to a format writer
"""

import logging

from models.export_config import ExportConfiguration
from models.submission import AssessmentMetadata, SubmissionRecord
from services.aggregator import Aggregator
from services.csv_export_service import CsvExportService
from services.excel_export_service import ExcelExportService
from services.filter_engine import FilterEngine
from services.pdf_export_service import PdfExportService
from services.schema_resolver import SchemaResolver
from services.sheet_builder import SheetBuilder
from services.workbook_assembler import DEFAULT_CREATOR, WorkbookAssembler
from utils.exceptions import ConfigurationError, DataShapeError

logger = logging.getLogger(__name__)

MIMETYPES = {
    'xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'csv': 'text/csv',
    'pdf': 'application/pdf',
}


class ExportService:
    """Entry point for assessment report exports"""

    @staticmethod
    def _records(submissions):
        if submissions is None:
            return []
        if isinstance(submissions, (str, bytes, dict)):
            raise DataShapeError("Submissions must be a list of records")

        records = []
        for entry in submissions:
            if isinstance(entry, SubmissionRecord):
                records.append(entry)
            elif isinstance(entry, dict):
                records.append(SubmissionRecord.from_dict(entry))
            else:
                raise DataShapeError(f"Unsupported submission entry: {type(entry).__name__}")
        return records

    @staticmethod
    def _assessment(assessment):
        if isinstance(assessment, AssessmentMetadata):
            return assessment
        if assessment is None or isinstance(assessment, dict):
            return AssessmentMetadata.from_dict(assessment)
        raise DataShapeError("Assessment metadata must be an object")

    @staticmethod
    def _configuration(config):
        if isinstance(config, ExportConfiguration):
            return config
        return ExportConfiguration.from_dict(config)

    @staticmethod
    def build_sheets(records, assessment, config):
        """Filter, resolve, project and aggregate; returns (sheets, summary).

        The configuration must already be validated.
        """
        filtered = FilterEngine.filter_submissions(records, config.filters)
        schema = SchemaResolver.resolve(assessment)
        present, absent = FilterEngine.split_attendance(filtered)
        summary = Aggregator.summarize(filtered)
        settings = config.settings

        sheets = []
        if config.is_advanced:
            columns = config.columns.selected_columns()
            sheets.append(SheetBuilder.build_custom_sheet(
                filtered, columns, schema, settings, assessment))
            if config.filters.is_active('absentStudents') or config.filters.is_active('allStudents'):
                sheets.append(SheetBuilder.build_custom_absentees_sheet(
                    absent, columns, schema, assessment))
            if settings.include_summary:
                sheets.append(SheetBuilder.build_analytics_sheet(summary, assessment, settings))
        else:
            sheets.append(SheetBuilder.build_performance_sheet(present, schema, settings))
            sheets.append(SheetBuilder.build_absentees_sheet(absent, schema))
            sheets.append(SheetBuilder.build_analytics_sheet(summary, assessment, settings))

        logger.debug("Built %d sheets from %d of %d submissions",
                     len(sheets), len(filtered), len(records))
        return sheets, summary

    @staticmethod
    def export_assessment_data(submissions, assessment, config, clock=None,
                               creator=DEFAULT_CREATOR, allowed_formats=None):
        """
        Produce the report Workbook for an assessment.

        Args:
            submissions: list of SubmissionRecord or snake_case dicts
            assessment: AssessmentMetadata or dict
            config: ExportConfiguration or the export dialog's dict
            clock: zero-argument callable returning the current datetime
            creator: workbook creator metadata
            allowed_formats: file formats permitted by the deployment

        Raises:
            ConfigurationError: before any sheet is built
        """
        config = ExportService._configuration(config)
        config.validate(allowed_formats)

        records = ExportService._records(submissions)
        assessment = ExportService._assessment(assessment)
        sheets, summary = ExportService.build_sheets(records, assessment, config)

        workbook = WorkbookAssembler.assemble(
            sheets, assessment, config.settings,
            export_type=config.export_type, clock=clock, creator=creator,
            record_count=summary['total_students'],
        )
        logger.info("Prepared export %s (%s, %d of %d records)",
                    workbook.filename, config.export_type, workbook.record_count, len(records))
        return workbook

    @staticmethod
    def serialize(workbook, file_format='xlsx', column_widths=None):
        """Write a Workbook in the requested format.

        column_widths is an optional (min, max) pair for spreadsheet columns.
        Returns (content bytes, mimetype, file extension).
        """
        file_format = (file_format or 'xlsx').lower()
        if file_format not in MIMETYPES:
            raise ConfigurationError(f"Unsupported file format: {file_format}")

        if file_format == 'xlsx':
            content = ExcelExportService.serialize(workbook, column_widths)
        elif file_format == 'csv':
            content = CsvExportService.serialize(workbook)
        else:
            content = PdfExportService.serialize(workbook)
        logger.info("Serialized %s as %s (%d bytes)", workbook.filename, file_format, len(content))
        return content, MIMETYPES[file_format], file_format

    @staticmethod
    def preview(submissions, assessment, config, rows=5, clock=None,
                creator=DEFAULT_CREATOR, allowed_formats=None):
        """First rows of the first sheet plus the aggregate summary"""
        config = ExportService._configuration(config)
        config.validate(allowed_formats)

        records = ExportService._records(submissions)
        assessment = ExportService._assessment(assessment)
        sheets, summary = ExportService.build_sheets(records, assessment, config)
        workbook = WorkbookAssembler.assemble(
            sheets, assessment, config.settings,
            export_type=config.export_type, clock=clock, creator=creator,
        )

        first_sheet = workbook.sheets[0]
        return {
            'filename': f"{workbook.filename}.{config.settings.file_format}",
            'sheet_names': workbook.sheet_names,
            'sheet': first_sheet.name,
            'header': list(first_sheet.header),
            'rows': [list(row) for row in first_sheet.rows[:max(rows, 0)]],
            'total_rows': first_sheet.row_count,
            'summary': {
                'total_students': summary['total_students'],
                'present_students': summary['present_students'],
                'absent_students': summary['absent_students'],
                'attendance_rate': round(summary['attendance_rate'], 1),
                'average_score': round(summary['average_score'], 1),
                'performance_distribution': [
                    {'range': label, 'count': count}
                    for label, count in summary['performance_distribution']
                ],
                'department_breakdown': summary['department_breakdown'],
                'batch_breakdown': summary['batch_breakdown'],
            },
        }
