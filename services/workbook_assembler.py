"""
Workbook assembler for assessment report exports
Orders sheets, attaches document metadata and names the artifact
"""

from datetime import datetime, timezone

from models.workbook import Workbook
from services.sheet_builder import (
    ABSENTEES_SHEET, ANALYTICS_SHEET, CUSTOM_ABSENTEES_SHEET, CUSTOM_SHEET,
    PERFORMANCE_SHEET,
)
from utils.formatters import sanitize_filename_part

TIMESTAMP_FORMAT = '%Y%m%dT%H%M%S'
DEFAULT_CREATOR = 'LMS Platform'

SHEET_ORDER = {
    'regular': (PERFORMANCE_SHEET, ABSENTEES_SHEET, ANALYTICS_SHEET),
    'advanced': (CUSTOM_SHEET, CUSTOM_ABSENTEES_SHEET, ANALYTICS_SHEET),
}


def utc_now():
    return datetime.now(timezone.utc)


class WorkbookAssembler:
    """Combines sheets into a Workbook"""

    @staticmethod
    def generate_filename(assessment, settings, now):
        """
        {title}_{college}_{YYYYMMDDTHHMMSS}, or {custom}_{timestamp} when the
        settings carry a custom filename. Title and college keep only
        [A-Za-z0-9]. No extension; the serializer adds it.
        """
        if settings.custom_filename:
            base = settings.custom_filename
        else:
            title = sanitize_filename_part(getattr(assessment, 'title', None)) or 'Assessment'
            college = sanitize_filename_part(getattr(assessment, 'college_name', None)) or 'College'
            base = f"{title}_{college}"

        if not settings.include_timestamp:
            return base
        return f"{base}_{now.strftime(TIMESTAMP_FORMAT)}"

    @staticmethod
    def order_sheets(sheets, export_type):
        """Put sheets in the fixed order for the export type"""
        order = SHEET_ORDER.get(export_type, SHEET_ORDER['regular'])

        def position(indexed_sheet):
            index, sheet = indexed_sheet
            if sheet.name in order:
                return (order.index(sheet.name), index)
            return (len(order), index)

        return [sheet for _, sheet in sorted(enumerate(sheets), key=position)]

    @staticmethod
    def assemble(sheets, assessment, settings, export_type='regular', clock=None,
                 creator=DEFAULT_CREATOR, record_count=None):
        """Build the Workbook; the clock is injectable for deterministic output"""
        now = (clock or utc_now)()
        return Workbook(
            sheets=WorkbookAssembler.order_sheets(sheets, export_type),
            filename=WorkbookAssembler.generate_filename(assessment, settings, now),
            creator=creator,
            created=now,
            modified=now,
            record_count=record_count,
        )
