"""
CSV export service for assessment reports
Flattens every sheet into one file, each introduced by a marker line
"""

import csv
import logging
from io import StringIO

from utils.exceptions import SerializationError

logger = logging.getLogger(__name__)


class CsvExportService:
    """Service for exporting report workbooks to CSV"""

    @staticmethod
    def sheet_marker(sheet):
        return f"=== {sheet.name} ==="

    @staticmethod
    def workbook_to_text(workbook):
        output = StringIO()
        writer = csv.writer(output, lineterminator='\n')
        for index, sheet in enumerate(workbook.sheets):
            if index:
                output.write('\n')
            output.write(CsvExportService.sheet_marker(sheet) + '\n')
            writer.writerows(sheet.iter_rows())
        return output.getvalue()

    @staticmethod
    def serialize(workbook):
        """Return UTF-8 CSV bytes for a report Workbook"""
        try:
            return CsvExportService.workbook_to_text(workbook).encode('utf-8')
        except Exception as e:
            logger.exception("Error exporting workbook %s to CSV", workbook.filename)
            raise SerializationError(f"Failed to generate CSV file: {e}") from e
