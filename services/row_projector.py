"""
Row projector for assessment report exports
Maps one submission record onto one ordered row of cell values
"""

from models import columns as kinds
from models.performance import PerformanceBands
from utils.formatters import (
    ABSENT, NOT_AVAILABLE, format_admission_type, format_duration, format_number,
    format_percentage, format_timestamp, format_yes_no, is_missing, round_half_up,
    truncate,
)

BASE_COLUMNS = (
    ('Roll Number', 'student_id_number'),
    ('Name', 'student_name'),
    ('Email ID', 'student_email'),
    ('Department', 'department_name'),
    ('Batch', 'batch'),
)

PERFORMANCE_HEADERS = ('Total Marks', 'Percentage')

# Record fields that may be left off a submission and taken from the assessment
ASSESSMENT_FALLBACKS = {
    'assessment_id': 'id',
    'assessment_title': 'title',
    'college_name': 'college_name',
}


class RowProjector:
    """Builds headers and rows for the report sheets"""

    @staticmethod
    def build_header(schema):
        """Base columns, one column per resolved question type, then totals"""
        header = [label for label, _ in BASE_COLUMNS]
        header.extend(label for _, label in schema)
        header.extend(PERFORMANCE_HEADERS)
        return header

    @staticmethod
    def identity_value(record, field):
        value = record.get(field)
        return NOT_AVAILABLE if is_missing(value) else value

    @staticmethod
    def split_marks(record, type_count):
        """Even share of the total score per question type.

        Submissions carry only a total, so every type gets the same share.
        """
        if not type_count:
            return 0
        return round_half_up((record.score or 0) / type_count)

    @staticmethod
    def project_row(record, schema, is_present=None):
        """Row for the performance and absentee sheets"""
        if is_present is None:
            is_present = record.is_present

        row = [RowProjector.identity_value(record, field) for _, field in BASE_COLUMNS]
        if not is_present:
            row.extend([ABSENT] * (len(schema) + len(PERFORMANCE_HEADERS)))
            return row

        share = RowProjector.split_marks(record, len(schema))
        row.extend([share] * len(schema))
        row.append(format_number(record.score or 0))
        row.append(format_percentage(record.percentage_score))
        return row

    # ---------------- Custom column exports ----------------

    @staticmethod
    def custom_header(columns):
        return [column.label for column in columns]

    @staticmethod
    def _source_value(record, column, assessment):
        value = record.get(column.source)
        if is_missing(value) and assessment is not None and column.source in ASSESSMENT_FALLBACKS:
            value = getattr(assessment, ASSESSMENT_FALLBACKS[column.source], None)
        return value

    @staticmethod
    def _question_marks(record, column, schema):
        explicit = record.get(column.source)
        if not is_missing(explicit):
            return format_number(explicit)
        schema_types = [qtype for qtype, _ in schema]
        if column.question_type in schema_types:
            return RowProjector.split_marks(record, len(schema_types))
        return NOT_AVAILABLE

    @staticmethod
    def custom_value(record, column, schema, is_present=True, assessment=None):
        """Format one custom column value for a record"""
        if not is_present and column.key in kinds.PERFORMANCE_COLUMN_KEYS:
            return ABSENT

        kind = column.kind
        if kind == kinds.PERFORMANCE_LEVEL:
            return PerformanceBands.performance_level(record.percentage_score)
        if kind == kinds.ATTENDANCE_STATUS:
            return 'Present' if is_present else 'Absent'
        if kind == kinds.SUBMISSION_STATUS:
            return record.status or 'Not attempted'
        if kind == kinds.QUESTION_MARKS:
            return RowProjector._question_marks(record, column, schema)

        value = RowProjector._source_value(record, column, assessment)
        if kind == kinds.PERCENTAGE:
            return format_percentage(value)
        if kind == kinds.DURATION:
            return format_duration(value)
        if kind == kinds.BOOLEAN:
            return format_yes_no(value)
        if kind == kinds.ADMISSION_TYPE:
            return format_admission_type(value)
        if kind == kinds.TIMESTAMP:
            return format_timestamp(value)
        if kind == kinds.FEEDBACK:
            return 'No feedback provided' if is_missing(value) else value
        if kind == kinds.TRUNCATED:
            return truncate(value)
        if is_missing(value):
            return NOT_AVAILABLE
        if kind == kinds.NUMBER:
            return format_number(value)
        return value

    @staticmethod
    def project_custom_row(record, columns, schema, is_present=None, assessment=None):
        """Row for the custom sheets, one value per selected column"""
        if is_present is None:
            is_present = record.is_present
        return [
            RowProjector.custom_value(record, column, schema, is_present, assessment)
            for column in columns
        ]
