"""
Database helper utilities for the export history store
"""

import logging

from sqlalchemy.exc import IntegrityError

from database import db, handle_db_error

logger = logging.getLogger(__name__)


@handle_db_error
def safe_add_and_commit(obj):
    """Safely add object to database with error handling"""
    try:
        db.session.add(obj)
        db.session.commit()
        return True, "Record added successfully"
    except IntegrityError as e:
        db.session.rollback()
        logger.warning("Constraint violation adding %r: %s", obj, e)
        if 'UNIQUE constraint failed' in str(e):
            return False, "Record with this identifier already exists"
        return False, "Database constraint violation"
    except Exception as e:
        db.session.rollback()
        logger.error("Database error adding %r: %s", obj, e)
        return False, f"Database error: {str(e)}"


@handle_db_error
def safe_delete_and_commit(obj):
    """Safely delete object from database with error handling"""
    try:
        db.session.delete(obj)
        db.session.commit()
        return True, "Record deleted successfully"
    except Exception as e:
        db.session.rollback()
        logger.error("Database error deleting %r: %s", obj, e)
        return False, f"Database error: {str(e)}"


@handle_db_error
def safe_bulk_delete(query):
    """Delete every row a query matches"""
    try:
        count = query.delete(synchronize_session=False)
        db.session.commit()
        return True, f"Deleted {count} records"
    except Exception as e:
        db.session.rollback()
        logger.error("Database error in bulk delete: %s", e)
        return False, f"Database error: {str(e)}"
