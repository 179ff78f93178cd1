"""
Export configuration models
Columns, filters and settings are separate structures, validated independently
"""

from models.columns import COLUMN_MAPPING, default_column_selection
from utils.exceptions import ConfigurationError
from utils.validators import (
    validate_column_selection, validate_custom_filename, validate_export_type,
    validate_file_format, validate_filter_parameter,
)


class ColumnSelection:
    """Column key -> include flag, in the order the dialog defined them"""

    def __init__(self, columns=None):
        if columns is None:
            columns = default_column_selection()
        self.columns = dict(columns) if isinstance(columns, dict) else columns

    def selected_keys(self):
        """Selected keys that resolve to a known column, in configuration order"""
        return [key for key, include in self.columns.items() if include and key in COLUMN_MAPPING]

    def selected_columns(self):
        return [COLUMN_MAPPING[key] for key in self.selected_keys()]

    def validate(self, require_selection=True):
        is_valid, message = validate_column_selection(self.columns, require_selection)
        if not is_valid:
            raise ConfigurationError(message)

    def to_dict(self):
        return dict(self.columns)


class FilterSelection:
    """Named predicate flags plus the allow-lists parametric predicates use"""

    PARAMETERS = {
        'selectedDepartments': 'selected_departments',
        'selectedBatches': 'selected_batches',
        'selectedRanges': 'selected_ranges',
        'selectedAdmissionTypes': 'selected_admission_types',
        'selectedStatuses': 'selected_statuses',
        'selectedAttempts': 'selected_attempts',
        'selectedLevels': 'selected_levels',
    }

    def __init__(self, flags=None, selected_departments=None, selected_batches=None,
                 selected_ranges=None, selected_admission_types=None, selected_statuses=None,
                 selected_attempts=None, selected_levels=None):
        self.flags = dict(flags or {})
        self.selected_departments = selected_departments
        self.selected_batches = selected_batches
        self.selected_ranges = selected_ranges
        self.selected_admission_types = selected_admission_types
        self.selected_statuses = selected_statuses
        self.selected_attempts = selected_attempts
        self.selected_levels = selected_levels

    @classmethod
    def from_dict(cls, data):
        """Split a dialog filter payload into flags and allow-lists"""
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigurationError("Filters must be an object")
        flags = {}
        parameters = {}
        for key, value in data.items():
            if key in cls.PARAMETERS:
                parameters[cls.PARAMETERS[key]] = value
            else:
                flags[key] = value
        return cls(flags=flags, **parameters)

    def is_active(self, key):
        return bool(self.flags.get(key))

    def active_keys(self):
        return [key for key, value in self.flags.items() if value]

    def validate(self):
        for key, attribute in self.PARAMETERS.items():
            is_valid, message = validate_filter_parameter(key, getattr(self, attribute))
            if not is_valid:
                raise ConfigurationError(message)

    def to_dict(self):
        data = dict(self.flags)
        for key, attribute in self.PARAMETERS.items():
            value = getattr(self, attribute)
            if value is not None:
                data[key] = list(value)
        return data


class ExportSettings:
    """Output settings for one export"""

    def __init__(self, file_format='xlsx', custom_filename='', include_charts=True,
                 include_summary=True, color_code=True, include_timestamp=True):
        self.file_format = str(file_format or 'xlsx').lower()
        custom_filename = custom_filename or ''
        self.custom_filename = custom_filename.strip() if isinstance(custom_filename, str) else custom_filename
        self.include_charts = bool(include_charts)
        self.include_summary = bool(include_summary)
        self.color_code = bool(color_code)
        self.include_timestamp = bool(include_timestamp)

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigurationError("Settings must be an object")

        def pick(camel, snake, default):
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        return cls(
            file_format=pick('fileFormat', 'file_format', 'xlsx'),
            custom_filename=pick('customFilename', 'custom_filename', ''),
            include_charts=pick('includeCharts', 'include_charts', True),
            include_summary=pick('includeSummary', 'include_summary', True),
            color_code=pick('colorCode', 'color_code', True),
            include_timestamp=pick('includeTimestamp', 'include_timestamp', True),
        )

    def validate(self, allowed_formats=None):
        is_valid, message = validate_file_format(self.file_format, allowed_formats)
        if not is_valid:
            raise ConfigurationError(message)
        is_valid, message = validate_custom_filename(self.custom_filename)
        if not is_valid:
            raise ConfigurationError(message)

    def to_dict(self):
        return {
            'fileFormat': self.file_format,
            'customFilename': self.custom_filename,
            'includeCharts': self.include_charts,
            'includeSummary': self.include_summary,
            'colorCode': self.color_code,
            'includeTimestamp': self.include_timestamp,
        }


class ExportConfiguration:
    """Everything the user chose for one export operation"""

    def __init__(self, export_type='regular', columns=None, filters=None, settings=None):
        self.export_type = export_type
        self.columns = columns if columns is not None else ColumnSelection()
        self.filters = filters if filters is not None else FilterSelection()
        self.settings = settings if settings is not None else ExportSettings()

    @classmethod
    def from_dict(cls, data):
        """Build a configuration from the export dialog payload"""
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigurationError("Export configuration must be an object")
        return cls(
            export_type=data.get('type') or data.get('export_type') or 'regular',
            columns=ColumnSelection(data.get('columns')),
            filters=FilterSelection.from_dict(data.get('filters')),
            settings=ExportSettings.from_dict(data.get('settings')),
        )

    @property
    def is_advanced(self):
        return self.export_type == 'advanced'

    def validate(self, allowed_formats=None):
        """Validate every part; raises ConfigurationError on the first problem"""
        is_valid, message = validate_export_type(self.export_type)
        if not is_valid:
            raise ConfigurationError(message)
        self.settings.validate(allowed_formats)
        self.filters.validate()
        if self.is_advanced:
            self.columns.validate(require_selection=True)

    def to_dict(self):
        return {
            'type': self.export_type,
            'columns': self.columns.to_dict(),
            'filters': self.filters.to_dict(),
            'settings': self.settings.to_dict(),
        }
