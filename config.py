"""
Configuration settings for the Assessment Report Export service
"""

import os


class Config:
    """Base configuration class"""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'assessment-export-secret-key'

    # Database settings (export history and templates)
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///assessment_exports.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # Export settings
    EXPORT_CREATOR = os.environ.get('EXPORT_CREATOR') or 'LMS Platform'
    EXPORT_HISTORY_LIMIT = int(os.environ.get('EXPORT_HISTORY_LIMIT', 50))
    EXPORT_PREVIEW_ROWS = int(os.environ.get('EXPORT_PREVIEW_ROWS', 5))
    EXPORT_PROGRESS_TTL_SECONDS = int(os.environ.get('EXPORT_PROGRESS_TTL_SECONDS', 300))
    EXPORT_MIN_COLUMN_WIDTH = 15
    EXPORT_MAX_COLUMN_WIDTH = 50
    ALLOWED_EXPORT_FORMATS = {'xlsx', 'csv', 'pdf'}

    # Request settings
    MAX_CONTENT_LENGTH = 32 * 1024 * 1024  # submissions arrive as one JSON body

    # Security settings
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None


class TestingConfig(Config):
    """Configuration used by the test suite"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    WTF_CSRF_ENABLED = False
