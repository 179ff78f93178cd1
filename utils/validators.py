"""
Validation utilities for export configurations
Each validator returns (is_valid, message) like the rest of the code base
"""

import re

from models.columns import COLUMN_MAPPING

EXPORT_TYPES = ('regular', 'advanced')
FILE_FORMATS = ('xlsx', 'csv', 'pdf')


def validate_export_type(export_type):
    """Validate export type (regular quick export or advanced custom export)"""
    if export_type not in EXPORT_TYPES:
        return False, f"Export type must be one of: {', '.join(EXPORT_TYPES)}"

    return True, "Valid export type"


def validate_file_format(file_format, allowed_formats=None):
    """Validate the requested output format"""
    allowed = tuple(allowed_formats or FILE_FORMATS)
    if not file_format or file_format not in allowed:
        return False, f"File format must be one of: {', '.join(sorted(allowed))}"

    return True, "Valid file format"


def validate_custom_filename(filename):
    """Validate a user supplied filename (blank means 'use the generated name')"""
    if filename is None or filename == '':
        return True, "No custom filename"

    if not isinstance(filename, str):
        return False, "Custom filename must be text"

    if len(filename) > 100:
        return False, "Custom filename must be 100 characters or less"

    if re.search(r'[\\/:*?"<>|\x00-\x1f]', filename):
        return False, "Custom filename contains characters that are not allowed in file names"

    return True, "Valid custom filename"


def validate_column_selection(columns, require_selection=True):
    """Validate the selected columns of an advanced export"""
    if not isinstance(columns, dict):
        return False, "Columns must be a mapping of column key to include flag"

    selected = [key for key, include in columns.items() if include and key in COLUMN_MAPPING]
    if require_selection and not selected:
        return False, "Select at least one column to export"

    return True, "Valid column selection"


def validate_filter_parameter(name, values):
    """Validate a filter allow-list (None means 'not supplied')"""
    if values is None:
        return True, f"No {name} supplied"

    if not isinstance(values, (list, tuple, set)):
        return False, f"{name} must be a list"

    return True, f"Valid {name}"


def validate_template_name(name):
    """Validate export template name"""
    if not name or len(name.strip()) == 0:
        return False, "Template name is required"

    if len(name) > 100:
        return False, "Template name must be 100 characters or less"

    return True, "Valid template name"
