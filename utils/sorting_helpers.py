"""
Sorting helper utilities for assessment reports
Provides consistent ordering of submission rows
"""


class SortingHelpers:
    """Helper class for sorting operations"""

    @staticmethod
    def get_percentage_sort_key(record):
        """Percentage score with missing values treated as 0"""
        return record.percentage_score or 0

    @staticmethod
    def sort_by_percentage(records):
        """
        Sort submissions by percentage score, highest first.
        Python's sort is stable even with reverse=True, so equal scores keep
        their original relative order.
        """
        return sorted(records, key=SortingHelpers.get_percentage_sort_key, reverse=True)
