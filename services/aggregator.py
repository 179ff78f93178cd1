"""
Aggregate statistics for assessment report exports
Every function here is a pure function of the submission list it is given
"""

from models.performance import BUCKET_LABELS, PerformanceBands
from utils.formatters import is_missing


class Aggregator:
    """Counts, rates, score distribution and group rollups"""

    @staticmethod
    def attendance_rate(present, total):
        """Present share in percent; 0 for an empty set"""
        if not total:
            return 0.0
        return (present / total) * 100

    @staticmethod
    def average_score(submissions):
        """Average score over present students only (0 when nobody is present)"""
        scores = [record.score or 0 for record in submissions if record.is_present]
        if not scores:
            return 0.0
        return sum(scores) / len(scores)

    @staticmethod
    def performance_distribution(submissions):
        """Count of records per performance bucket, in report order"""
        counts = {label: 0 for label in BUCKET_LABELS}
        for record in submissions:
            counts[PerformanceBands.bucket_for(record.performance_value)] += 1
        return [(label, counts[label]) for label in BUCKET_LABELS]

    @staticmethod
    def group_rollup(submissions, field):
        """Total/present/absent/average score per distinct value of a field.

        Groups appear in first-seen order; records without a value are skipped.
        """
        groups = {}
        for record in submissions:
            value = record.get(field)
            if is_missing(value):
                continue
            groups.setdefault(value, []).append(record)

        rollup = []
        for name, records in groups.items():
            present = sum(1 for record in records if record.is_present)
            rollup.append({
                'name': name,
                'total': len(records),
                'present': present,
                'absent': len(records) - present,
                'average_score': Aggregator.average_score(records),
            })
        return rollup

    @staticmethod
    def summarize(submissions):
        """Full summary used by the analytics sheet and the preview API"""
        total = len(submissions)
        present = sum(1 for record in submissions if record.is_present)
        return {
            'total_students': total,
            'present_students': present,
            'absent_students': total - present,
            'attendance_rate': Aggregator.attendance_rate(present, total),
            'average_score': Aggregator.average_score(submissions),
            'performance_distribution': Aggregator.performance_distribution(submissions),
            'department_breakdown': Aggregator.group_rollup(submissions, 'department_name'),
            'batch_breakdown': Aggregator.group_rollup(submissions, 'batch'),
        }
