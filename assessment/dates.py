from __future__ import annotations

import numbers
from datetime import date, datetime, timedelta

from assessment.cells import is_blank

# Spreadsheet serial day 0; matches the 1900 date system including its leap-year offset.
SERIAL_EPOCH = datetime(1899, 12, 30)


def format_display_date(value: date) -> str:
    """German short date without zero padding, e.g. 1.1.2000."""
    return f"{value.day}.{value.month}.{value.year}"


def serial_to_date(serial: float) -> date:
    return (SERIAL_EPOCH + timedelta(days=float(serial))).date()


def normalize_date(value: object) -> str:
    if is_blank(value):
        return ""
    if isinstance(value, (datetime, date)):
        return format_display_date(value)
    if isinstance(value, str):
        return value
    if isinstance(value, numbers.Number) and not isinstance(value, bool):
        try:
            return format_display_date(serial_to_date(float(value)))
        except (OverflowError, ValueError):
            return ""
    return ""
