"""
Export progress tracking
In-memory progress entries for long-running exports, shared across request threads
"""

import logging
import threading
import time

logger = logging.getLogger(__name__)

STATUS_PROCESSING = 'processing'
STATUS_COMPLETED = 'completed'
STATUS_FAILED = 'failed'
STATUS_NOT_FOUND = 'not_found'

DEFAULT_TTL_SECONDS = 300
STALE_AFTER_SECONDS = 60 * 60


class ExportProgressService:
    """
    Thread-safe progress store keyed by export id.

    Finished entries are dropped `ttl_seconds` after completion or failure and
    any entry without an update for an hour is treated as abandoned. Expiry is
    swept on access rather than by a background timer.
    """

    def __init__(self, ttl_seconds=DEFAULT_TTL_SECONDS, stale_after_seconds=STALE_AFTER_SECONDS,
                 time_func=None):
        self.ttl_seconds = ttl_seconds
        self.stale_after_seconds = stale_after_seconds
        self._time = time_func or time.monotonic
        self._lock = threading.Lock()
        self._entries = {}

    def _cleanup(self, now):
        # Caller holds the lock
        expired = []
        for export_id, entry in self._entries.items():
            finished = entry['status'] in (STATUS_COMPLETED, STATUS_FAILED)
            if finished and now - entry['last_update'] >= self.ttl_seconds:
                expired.append(export_id)
            elif now - entry['last_update'] >= self.stale_after_seconds:
                expired.append(export_id)
        for export_id in expired:
            del self._entries[export_id]
        if expired:
            logger.debug("Expired %d export progress entries", len(expired))

    def cleanup(self):
        with self._lock:
            self._cleanup(self._time())

    def create(self, export_id, total_steps=100):
        now = self._time()
        with self._lock:
            self._cleanup(now)
            self._entries[export_id] = {
                'export_id': export_id,
                'total_steps': total_steps or 100,
                'current_step': 0,
                'percentage': 0,
                'status': STATUS_PROCESSING,
                'message': 'Initializing export...',
                'start_time': now,
                'last_update': now,
            }
        return export_id

    def update(self, export_id, current_step, message=None):
        now = self._time()
        with self._lock:
            entry = self._entries.get(export_id)
            if entry is None:
                return False
            entry['current_step'] = current_step
            entry['percentage'] = min(int(round(current_step / entry['total_steps'] * 100)), 100)
            if message:
                entry['message'] = message
            entry['last_update'] = now
        return True

    def get(self, export_id):
        now = self._time()
        with self._lock:
            self._cleanup(now)
            entry = self._entries.get(export_id)
            if entry is None:
                return {
                    'export_id': export_id,
                    'status': STATUS_NOT_FOUND,
                    'percentage': 0,
                    'message': 'Export not found',
                }
            return {
                'export_id': entry['export_id'],
                'status': entry['status'],
                'percentage': entry['percentage'],
                'message': entry['message'],
                'current_step': entry['current_step'],
                'total_steps': entry['total_steps'],
                'elapsed_seconds': round(now - entry['start_time'], 3),
            }

    def _finish(self, export_id, status, message, percentage=None):
        now = self._time()
        with self._lock:
            entry = self._entries.get(export_id)
            if entry is None:
                return False
            entry['status'] = status
            entry['message'] = message
            if percentage is not None:
                entry['percentage'] = percentage
            entry['last_update'] = now
        return True

    def complete(self, export_id, message='Export completed successfully'):
        return self._finish(export_id, STATUS_COMPLETED, message, percentage=100)

    def fail(self, export_id, message='Export failed'):
        return self._finish(export_id, STATUS_FAILED, message)

    def clear(self):
        with self._lock:
            self._entries.clear()
