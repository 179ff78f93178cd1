"""
Export history service
Keeps a bounded log of completed exports and named export templates
"""

import logging
import math

from database import db
from models.export_history import ExportHistory, ExportTemplate
from utils.db_helpers import safe_add_and_commit, safe_bulk_delete, safe_delete_and_commit
from utils.formatters import format_number
from utils.validators import validate_template_name

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50
FILE_SIZE_UNITS = ('Bytes', 'KB', 'MB', 'GB')


class ExportHistoryService:
    """Service for export history and templates"""

    # ---------------- History ----------------

    @staticmethod
    def get_export_history():
        """Newest first"""
        return ExportHistory.query.order_by(
            ExportHistory.created_at.desc(), ExportHistory.id.desc()
        ).all()

    @staticmethod
    def add_export(export_data, limit=DEFAULT_HISTORY_LIMIT):
        """
        Record a completed export and trim the log to the newest `limit` rows.

        Returns (success, message, entry). Failures are logged and never raised
        so that a history problem cannot fail the export itself.
        """
        entry = ExportHistory(
            filename=export_data.get('filename'),
            export_type=export_data.get('type') or 'regular',
            assessment_name=export_data.get('assessment_name'),
            college_name=export_data.get('college_name'),
            record_count=export_data.get('record_count') or 0,
            file_size=export_data.get('file_size') or 0,
            file_format=export_data.get('file_format') or 'xlsx',
        )
        entry.set_settings(export_data.get('settings'))

        success, message = safe_add_and_commit(entry)
        if not success:
            logger.error("Could not record export %s: %s", entry.filename, message)
            return False, message, None

        ExportHistoryService.trim_history(limit)
        return True, "Export recorded", entry

    @staticmethod
    def trim_history(limit=DEFAULT_HISTORY_LIMIT):
        keep_ids = [
            row.id for row in ExportHistory.query.order_by(
                ExportHistory.created_at.desc(), ExportHistory.id.desc()
            ).limit(limit).all()
        ]
        if not keep_ids:
            return True, "Nothing to trim"
        stale = ExportHistory.query.filter(~ExportHistory.id.in_(keep_ids))
        return safe_bulk_delete(stale)

    @staticmethod
    def remove_export(export_id):
        entry = db.session.get(ExportHistory, export_id)
        if entry is None:
            return False, "Export not found"
        return safe_delete_and_commit(entry)

    @staticmethod
    def clear_history():
        return safe_bulk_delete(ExportHistory.query)

    # ---------------- Templates ----------------

    @staticmethod
    def get_templates():
        return ExportTemplate.query.order_by(ExportTemplate.created_at, ExportTemplate.id).all()

    @staticmethod
    def save_template(template_data):
        """Returns (success, message, template)"""
        name = (template_data.get('name') or '').strip()
        is_valid, message = validate_template_name(name)
        if not is_valid:
            return False, message, None

        template = ExportTemplate(name=name, description=template_data.get('description'))
        template.set_configuration(
            columns=template_data.get('columns'),
            filters=template_data.get('filters'),
            settings=template_data.get('settings'),
        )
        success, message = safe_add_and_commit(template)
        if not success:
            return False, message, None
        return True, "Template saved", template

    @staticmethod
    def load_template(template_id):
        return db.session.get(ExportTemplate, template_id)

    @staticmethod
    def delete_template(template_id):
        template = db.session.get(ExportTemplate, template_id)
        if template is None:
            return False, "Template not found"
        return safe_delete_and_commit(template)

    # ---------------- Statistics ----------------

    @staticmethod
    def get_statistics():
        history = ExportHistoryService.get_export_history()
        stats = {
            'total_exports': len(history),
            'total_templates': ExportTemplate.query.count(),
            'exports_by_type': {},
            'exports_by_month': {},
            'total_records_exported': 0,
            'average_file_size': 0,
        }

        total_size = 0
        for entry in history:
            stats['exports_by_type'][entry.export_type] = stats['exports_by_type'].get(entry.export_type, 0) + 1
            if entry.created_at is not None:
                month = entry.created_at.strftime('%Y-%m')
                stats['exports_by_month'][month] = stats['exports_by_month'].get(month, 0) + 1
            stats['total_records_exported'] += entry.record_count or 0
            total_size += entry.file_size or 0

        if history:
            stats['average_file_size'] = int(math.floor(total_size / len(history) + 0.5))
        return stats

    @staticmethod
    def format_file_size(size):
        """Human readable size: 1536 -> '1.5 KB'"""
        if not size:
            return '0 Bytes'
        value = float(size)
        exponent = 0
        while value >= 1024 and exponent < len(FILE_SIZE_UNITS) - 1:
            value /= 1024
            exponent += 1
        return f"{format_number(round(value, 2))} {FILE_SIZE_UNITS[exponent]}"
