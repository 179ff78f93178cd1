"""
Assessment Report Export service
Main Flask application entry point
"""

import logging

from flask import Flask
from flask_wtf.csrf import CSRFProtect

from config import Config
from database import db, init_db
from services.export_progress_service import ExportProgressService

csrf = CSRFProtect()


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app.logger.setLevel(level)


def create_app(config_class=Config):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app)

    # Initialize extensions with app
    db.init_app(app)
    csrf.init_app(app)
    app.extensions['export_progress'] = ExportProgressService(
        ttl_seconds=app.config['EXPORT_PROGRESS_TTL_SECONDS']
    )

    # Register blueprints
    from routes.exports import exports_bp

    app.register_blueprint(exports_bp, url_prefix='/exports')

    # Initialize database
    init_db(app)

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=8000, debug=True, use_reloader=False)
