"""
Filter engine for assessment report exports
Applies the export dialog's selection predicates to the submission set
"""

import logging

from models.performance import PerformanceBands
from utils.formatters import to_number

logger = logging.getLogger(__name__)


def _present(record, filters):
    return record.is_present


def _absent(record, filters):
    return not record.is_present


def _in_allow_list(value, allowed):
    # No allow-list means the predicate does not filter
    if allowed is None:
        return True
    return value in allowed


def _by_department(record, filters):
    return _in_allow_list(record.department_name, filters.selected_departments)


def _by_batch(record, filters):
    return _in_allow_list(record.batch, filters.selected_batches)


def _by_performance_range(record, filters):
    if filters.selected_ranges is None:
        return True
    value = record.performance_value
    return any(PerformanceBands.in_bucket(value, label) for label in filters.selected_ranges)


def _first_attempt(record, filters):
    return record.attempt == 1


def _late_submission(record, filters):
    return record.late_submission is True


def _graded_only(record, filters):
    return record.status == 'graded'


def _disqualified_only(record, filters):
    return record.disqualified is True


def _active_only(record, filters):
    return record.get('is_active') is True


def _email_verified_only(record, filters):
    return record.get('email_verified') is True


def _by_admission_type(record, filters):
    if filters.selected_admission_types is None:
        return True
    admission_type = str(record.get('admission_type') or 'regular').lower()
    return admission_type in [str(value).lower() for value in filters.selected_admission_types]


def _by_submission_status(record, filters):
    return _in_allow_list(record.status, filters.selected_statuses)


def _by_attempt_number(record, filters):
    if filters.selected_attempts is None:
        return True
    return record.attempt in [to_number(value) for value in filters.selected_attempts]


def _by_performance_level(record, filters):
    if filters.selected_levels is None:
        return True
    return PerformanceBands.performance_level(record.percentage_score) in filters.selected_levels


class FilterEngine:
    """AND-combines every active predicate over a submission list"""

    PREDICATES = {
        'presentStudents': _present,
        'absentStudents': _absent,
        'byDepartment': _by_department,
        'byBatch': _by_batch,
        'byPerformanceRange': _by_performance_range,
        'firstAttemptOnly': _first_attempt,
        'lateSubmissionsOnly': _late_submission,
        'gradedSubmissionsOnly': _graded_only,
        'disqualifiedOnly': _disqualified_only,
        'activeStudentsOnly': _active_only,
        'emailVerifiedOnly': _email_verified_only,
        'byAdmissionType': _by_admission_type,
        'bySubmissionStatus': _by_submission_status,
        'byAttemptNumber': _by_attempt_number,
        'byPerformanceLevel': _by_performance_level,
    }

    @staticmethod
    def active_predicates(filters):
        """Predicates whose flag is set; unknown keys (and allStudents) are skipped"""
        if filters is None:
            return []
        active = []
        for key in filters.active_keys():
            predicate = FilterEngine.PREDICATES.get(key)
            if predicate is None:
                logger.debug("Ignoring unsupported filter %s", key)
                continue
            active.append(predicate)
        return active

    @staticmethod
    def filter_submissions(submissions, filters):
        """Return a new list with the records that pass every active predicate"""
        predicates = FilterEngine.active_predicates(filters)
        if not predicates:
            return list(submissions)
        return [
            record for record in submissions
            if all(predicate(record, filters) for predicate in predicates)
        ]

    @staticmethod
    def split_attendance(submissions):
        """Split records into (present, absent) keeping their order"""
        present = [record for record in submissions if record.is_present]
        absent = [record for record in submissions if not record.is_present]
        return present, absent
