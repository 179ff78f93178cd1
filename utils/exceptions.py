"""
Exception types for the assessment report export engine
"""


class ExportError(Exception):
    """Base class for export failures"""
    pass


class ConfigurationError(ExportError):
    """Raised when an export configuration cannot produce a report"""
    pass


class DataShapeError(ExportError):
    """Raised when assessment metadata cannot be turned into a column schema"""
    pass


class SerializationError(ExportError):
    """Raised when a built workbook cannot be written to bytes.

    The workbook itself is valid, so callers should offer a retry.
    """
    retryable = True
