"""
Models package for the Assessment Report Export service
"""

from .export_history import ExportHistory, ExportTemplate

__all__ = ['ExportHistory', 'ExportTemplate']
