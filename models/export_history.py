"""
Export history models for the assessment report export service
ExportHistory and ExportTemplate records
"""

import json
from datetime import datetime

from database import db


def _dump(value):
    return json.dumps(value) if value is not None else None


def _load(value, default=None):
    if not value:
        return default
    return json.loads(value)


class ExportHistory(db.Model):
    """One completed export"""
    __tablename__ = 'export_history'

    id = db.Column(db.Integer, primary_key=True)
    filename = db.Column(db.String(255), nullable=False)
    export_type = db.Column(db.String(20), nullable=False, default='regular')  # 'regular', 'advanced'
    assessment_name = db.Column(db.String(255), nullable=True)
    college_name = db.Column(db.String(255), nullable=True)
    record_count = db.Column(db.Integer, nullable=False, default=0)
    file_size = db.Column(db.Integer, nullable=False, default=0)
    file_format = db.Column(db.String(10), nullable=False, default='xlsx')
    settings = db.Column(db.Text, nullable=True)  # JSON
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def set_settings(self, settings):
        self.settings = _dump(settings)

    def get_settings(self):
        return _load(self.settings, {})

    def to_dict(self):
        return {
            'id': self.id,
            'filename': self.filename,
            'type': self.export_type,
            'assessment_name': self.assessment_name,
            'college_name': self.college_name,
            'record_count': self.record_count,
            'file_size': self.file_size,
            'file_format': self.file_format,
            'settings': self.get_settings(),
            'timestamp': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<ExportHistory {self.filename}>'


class ExportTemplate(db.Model):
    """A named, reusable export configuration"""
    __tablename__ = 'export_template'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500), nullable=True)
    columns = db.Column(db.Text, nullable=True)  # JSON
    filters = db.Column(db.Text, nullable=True)  # JSON
    settings = db.Column(db.Text, nullable=True)  # JSON
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def set_configuration(self, columns=None, filters=None, settings=None):
        self.columns = _dump(columns)
        self.filters = _dump(filters)
        self.settings = _dump(settings)

    def to_config_dict(self, export_type='advanced'):
        """Configuration payload accepted by ExportConfiguration.from_dict"""
        return {
            'type': export_type,
            'columns': _load(self.columns),
            'filters': _load(self.filters, {}),
            'settings': _load(self.settings, {}),
        }

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'columns': _load(self.columns),
            'filters': _load(self.filters, {}),
            'settings': _load(self.settings, {}),
            'timestamp': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<ExportTemplate {self.name}>'
