"""Localized date strings for the document date line and memo header."""
from datetime import date

from models.labels import CalendarLabels


def format_long_date(value: date, calendar: CalendarLabels) -> str:
    """Weekday, day, month name and year, e.g. ``Senin, 19 Oktober 2026``."""
    weekday = calendar.weekdays[value.weekday()]
    month = calendar.months[value.month - 1]
    return f"{weekday}, {value.day} {month} {value.year}"


def format_short_date(value: date) -> str:
    """Numeric day/month/year without padding, e.g. ``9/2/2026``."""
    return f"{value.day}/{value.month}/{value.year}"
