"""
Export routes for the assessment report export service
JSON endpoints for exports, previews, progress, history and templates
"""

import logging
import uuid

from flask import Blueprint, current_app, jsonify, make_response, request
from flask_wtf.csrf import generate_csrf
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.utils import secure_filename

from database import DatabaseError
from models.export_config import ExportConfiguration
from services.export_history_service import ExportHistoryService
from services.export_service import ExportService
from utils.exceptions import ConfigurationError, DataShapeError, SerializationError

logger = logging.getLogger(__name__)

exports_bp = Blueprint('exports', __name__)

EXPORT_STEPS = 3


def _progress():
    return current_app.extensions['export_progress']


def _json_payload():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _error(message, status, **extra):
    return jsonify({'success': False, 'message': message, **extra}), status


def _record_history(workbook, config, assessment, content, extension):
    """History failures are logged and never fail the export"""
    assessment = assessment or {}
    try:
        success, message, _ = ExportHistoryService.add_export({
            'filename': f"{workbook.filename}.{extension}",
            'type': config.export_type,
            'assessment_name': assessment.get('title'),
            'college_name': assessment.get('college_name'),
            'record_count': workbook.record_count,
            'file_size': len(content),
            'file_format': extension,
            'settings': config.settings.to_dict(),
        }, limit=current_app.config['EXPORT_HISTORY_LIMIT'])
        if not success:
            logger.warning("Export history not updated: %s", message)
    except (DatabaseError, SQLAlchemyError):
        logger.exception("Export history not updated for %s", workbook.filename)


@exports_bp.route('/csrf-token')
def csrf_token():
    """Token for clients that send X-CSRFToken with JSON posts"""
    return jsonify({'success': True, 'csrf_token': generate_csrf()})


@exports_bp.route('', methods=['POST'])
def create_export():
    """Generate a report file from {submissions, assessment, config}"""
    payload = _json_payload()
    export_id = request.headers.get('X-Export-Id') or uuid.uuid4().hex
    tracker = _progress()
    tracker.create(export_id, total_steps=EXPORT_STEPS)

    try:
        config = ExportConfiguration.from_dict(payload.get('config'))
        tracker.update(export_id, 1, 'Preparing export data...')
        workbook = ExportService.export_assessment_data(
            payload.get('submissions'),
            payload.get('assessment'),
            config,
            creator=current_app.config['EXPORT_CREATOR'],
            allowed_formats=current_app.config['ALLOWED_EXPORT_FORMATS'],
        )
        tracker.update(export_id, 2, 'Generating file...')
        content, mimetype, extension = ExportService.serialize(
            workbook,
            config.settings.file_format,
            column_widths=(current_app.config['EXPORT_MIN_COLUMN_WIDTH'],
                           current_app.config['EXPORT_MAX_COLUMN_WIDTH']),
        )
    except (ConfigurationError, DataShapeError) as e:
        tracker.fail(export_id, str(e))
        return _error(str(e), 400, export_id=export_id)
    except SerializationError as e:
        tracker.fail(export_id, str(e))
        return _error(str(e), 503, export_id=export_id, retryable=e.retryable)
    except Exception as e:
        logger.exception("Export %s failed", export_id)
        tracker.fail(export_id, 'Export failed')
        return _error(f'Error generating export: {str(e)}', 500, export_id=export_id)

    tracker.complete(export_id)
    _record_history(workbook, config, payload.get('assessment'), content, extension)

    response = make_response(content)
    response.headers['Content-Type'] = mimetype
    fname = secure_filename(f"{workbook.filename}.{extension}") or f"export.{extension}"
    response.headers['Content-Disposition'] = f'attachment; filename={fname}'
    response.headers['X-Export-Id'] = export_id
    return response


@exports_bp.route('/preview', methods=['POST'])
def preview_export():
    """First rows of the first sheet plus the aggregate summary"""
    payload = _json_payload()
    try:
        preview = ExportService.preview(
            payload.get('submissions'),
            payload.get('assessment'),
            payload.get('config'),
            rows=current_app.config['EXPORT_PREVIEW_ROWS'],
            creator=current_app.config['EXPORT_CREATOR'],
            allowed_formats=current_app.config['ALLOWED_EXPORT_FORMATS'],
        )
        return jsonify({'success': True, **preview})
    except (ConfigurationError, DataShapeError) as e:
        return _error(str(e), 400)
    except Exception as e:
        logger.exception("Export preview failed")
        return _error(f'Error building preview: {str(e)}', 500)


@exports_bp.route('/progress/<export_id>')
def export_progress(export_id):
    progress = _progress().get(export_id)
    status = 404 if progress['status'] == 'not_found' else 200
    return jsonify({'success': status == 200, **progress}), status


# ---------------- History ----------------

@exports_bp.route('/history')
def export_history():
    try:
        history = []
        for entry in ExportHistoryService.get_export_history():
            item = entry.to_dict()
            item['file_size_display'] = ExportHistoryService.format_file_size(entry.file_size)
            history.append(item)
        return jsonify({'success': True, 'history': history})
    except Exception as e:
        logger.exception("Could not load export history")
        return _error(f'Error loading export history: {str(e)}', 500)


@exports_bp.route('/history/stats')
def export_history_stats():
    try:
        stats = ExportHistoryService.get_statistics()
        stats['average_file_size_display'] = ExportHistoryService.format_file_size(stats['average_file_size'])
        return jsonify({'success': True, 'statistics': stats})
    except Exception as e:
        logger.exception("Could not compute export statistics")
        return _error(f'Error calculating export statistics: {str(e)}', 500)


@exports_bp.route('/history/<int:export_id>', methods=['DELETE'])
def delete_history_entry(export_id):
    success, message = ExportHistoryService.remove_export(export_id)
    if not success:
        return _error(message, 404 if message == 'Export not found' else 500)
    return jsonify({'success': True, 'message': message})


@exports_bp.route('/history', methods=['DELETE'])
def clear_history():
    success, message = ExportHistoryService.clear_history()
    if not success:
        return _error(message, 500)
    return jsonify({'success': True, 'message': 'Export history cleared'})


# ---------------- Templates ----------------

@exports_bp.route('/templates')
def list_templates():
    templates = [template.to_dict() for template in ExportHistoryService.get_templates()]
    return jsonify({'success': True, 'templates': templates})


@exports_bp.route('/templates', methods=['POST'])
def save_template():
    payload = _json_payload()
    try:
        ExportConfiguration.from_dict({
            'type': 'advanced',
            'columns': payload.get('columns'),
            'filters': payload.get('filters'),
            'settings': payload.get('settings'),
        }).validate(current_app.config['ALLOWED_EXPORT_FORMATS'])
    except ConfigurationError as e:
        return _error(str(e), 400)

    success, message, template = ExportHistoryService.save_template(payload)
    if not success:
        return _error(message, 400)
    return jsonify({'success': True, 'message': message, 'template': template.to_dict()}), 201


@exports_bp.route('/templates/<int:template_id>')
def get_template(template_id):
    template = ExportHistoryService.load_template(template_id)
    if template is None:
        return _error('Template not found', 404)
    return jsonify({'success': True, 'template': template.to_dict(),
                    'config': template.to_config_dict()})


@exports_bp.route('/templates/<int:template_id>', methods=['DELETE'])
def delete_template(template_id):
    success, message = ExportHistoryService.delete_template(template_id)
    if not success:
        return _error(message, 404 if message == 'Template not found' else 500)
    return jsonify({'success': True, 'message': message})
