"""
Performance thresholds for assessment reports
Buckets, performance levels and color bands share these constants
"""

# Named score ranges, in report order. Each entry is (label, lower, upper,
# upper_inclusive); None means unbounded. The top bucket is strictly greater
# than its lower bound and '80-90%' includes 90.
PERFORMANCE_BUCKETS = (
    ('>90%', 90, None, False),
    ('80-90%', 80, 90, True),
    ('70-80%', 70, 80, False),
    ('60-70%', 60, 70, False),
    ('50-60%', 50, 60, False),
    ('<50%', None, 50, False),
)

BUCKET_LABELS = tuple(bucket[0] for bucket in PERFORMANCE_BUCKETS)

# Performance level label thresholds (percentage score)
EXCELLENT_THRESHOLD = 90
GOOD_THRESHOLD = 80
AVERAGE_THRESHOLD = 70
BELOW_AVERAGE_THRESHOLD = 60

PERFORMANCE_LEVELS = ('Excellent', 'Good', 'Average', 'Below Average', 'Needs Improvement')

# Presentation bands for color coding
BAND_GOOD = 'good'
BAND_BORDERLINE = 'borderline'
BAND_AT_RISK = 'at_risk'
BAND_ABSENT = 'absent'
BAND_ABSENTEE = 'absentee'


class PerformanceBands:
    """Threshold lookups used by filtering, aggregation and presentation"""

    @staticmethod
    def normalize_range_label(label):
        """Accept both '80-90%' and '80–90%' spellings."""
        if label is None:
            return None
        return str(label).strip().replace('–', '-').replace('—', '-').replace(' ', '')

    @staticmethod
    def in_bucket(value, label):
        """Check whether a score falls into the named bucket.

        Unknown labels match every value.
        """
        normalized = PerformanceBands.normalize_range_label(label)
        for name, lower, upper, upper_inclusive in PERFORMANCE_BUCKETS:
            if name != normalized:
                continue
            if lower is not None:
                # Only the open-ended top bucket excludes its lower bound
                if upper is None and not value > lower:
                    return False
                if upper is not None and value < lower:
                    return False
            if upper is not None:
                if upper_inclusive and value > upper:
                    return False
                if not upper_inclusive and value >= upper:
                    return False
            return True
        return True

    @staticmethod
    def bucket_for(value):
        """Return the label of the bucket a score belongs to"""
        for name in BUCKET_LABELS:
            if PerformanceBands.in_bucket(value, name):
                return name
        return BUCKET_LABELS[-1]

    @staticmethod
    def performance_level(percentage):
        """Get performance level label based on percentage score"""
        percentage = percentage or 0
        if percentage >= EXCELLENT_THRESHOLD:
            return 'Excellent'
        elif percentage >= GOOD_THRESHOLD:
            return 'Good'
        elif percentage >= AVERAGE_THRESHOLD:
            return 'Average'
        elif percentage >= BELOW_AVERAGE_THRESHOLD:
            return 'Below Average'
        else:
            return 'Needs Improvement'

    @staticmethod
    def color_band(percentage, is_present=True):
        """Get presentation band for a row's percentage cell"""
        if not is_present:
            return BAND_ABSENT
        percentage = percentage or 0
        if percentage >= GOOD_THRESHOLD:
            return BAND_GOOD
        elif percentage >= BELOW_AVERAGE_THRESHOLD:
            return BAND_BORDERLINE
        else:
            return BAND_AT_RISK
