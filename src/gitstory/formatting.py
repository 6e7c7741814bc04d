"""Display labels for report values."""

from datetime import date

from gitstory.models.schemas import Archetype

WEEKDAY_LABELS = ["Sundays", "Mondays", "Tuesdays", "Wednesdays", "Thursdays", "Fridays", "Saturdays"]
MONTH_ABBREVIATIONS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def day_label(day: date) -> str:
    """Short date label, e.g. ``Jan 5``."""
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.day}"


def weekday_label(index: int) -> str:
    """Plural weekday name for a Sunday=0 index."""
    return WEEKDAY_LABELS[index]


def archetype_title(label: Archetype) -> str:
    return f"The {label.value}"


def hour_label(hour: int) -> str:
    """12-hour clock label, e.g. ``2 PM``."""
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12} {suffix}"
