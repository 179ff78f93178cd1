"""
Value formatting utilities for report cells
"""

import math
import re
from datetime import datetime, date

NOT_AVAILABLE = 'N/A'
ABSENT = 'Absent'


def is_missing(value):
    """None and blank strings count as missing; 0 and False do not."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == '':
        return True
    return False


def format_number(value):
    """Format number: whole numbers without decimals, fractional numbers with 2 decimal places."""
    try:
        if value is None:
            return None
        num = float(value)
        if num == int(num):
            return int(num)  # 32.0 -> 32
        else:
            return round(num, 2)  # 32.43 -> 32.43
    except (ValueError, TypeError, OverflowError):
        return value


def to_number(value):
    """Coerce numeric-looking input to int/float, None when it is not a number"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(str(value).strip())
    except (ValueError, TypeError):
        return None


def round_half_up(value):
    """Round to the nearest integer with halves going up (42.5 -> 43)"""
    return int(math.floor(value + 0.5))


def format_percentage(value):
    """Render a percentage with a trailing %; missing or zero renders as 0%"""
    number = to_number(value)
    if not number:
        return '0%'
    return f"{format_number(number)}%"


def format_rate(value):
    """Render a computed rate with one decimal place, e.g. 66.7%"""
    return f"{(value or 0):.1f}%"


def format_duration(minutes):
    """Render a duration in minutes, e.g. '45 min'"""
    number = to_number(minutes)
    if not number:
        return NOT_AVAILABLE
    return f"{format_number(number)} min"


def format_yes_no(value):
    return 'Yes' if value else 'No'


def format_admission_type(value):
    """Normalize admission type to Regular/Lateral"""
    if isinstance(value, str) and value.strip().lower() == 'lateral':
        return 'Lateral'
    return 'Regular'


def parse_timestamp(value):
    """Parse ISO-8601 strings (including a trailing Z) into datetimes"""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def format_timestamp(value):
    """Render a timestamp as a locale date-time string: 3/1/2024, 10:15:30 AM"""
    if is_missing(value):
        return NOT_AVAILABLE
    parsed = parse_timestamp(value)
    if parsed is None:
        return str(value)
    hour = parsed.hour % 12 or 12
    suffix = 'AM' if parsed.hour < 12 else 'PM'
    return (f"{parsed.month}/{parsed.day}/{parsed.year}, "
            f"{hour}:{parsed.minute:02d}:{parsed.second:02d} {suffix}")


def format_date(value):
    """Render the date part only: 3/1/2024"""
    if is_missing(value):
        return NOT_AVAILABLE
    parsed = parse_timestamp(value)
    if parsed is None:
        return str(value)
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def truncate(value, length=50):
    if is_missing(value):
        return NOT_AVAILABLE
    return str(value)[:length] + '...'


def sanitize_filename_part(value):
    """Strip every character outside [A-Za-z0-9]"""
    return re.sub(r'[^A-Za-z0-9]', '', str(value or ''))
