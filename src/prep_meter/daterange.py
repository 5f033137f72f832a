"""Date-range filtering of the record collections."""
from datetime import date, timedelta

from prep_meter.models import DateRange, StudyRecords


def is_valid(date_range: DateRange) -> bool:
    return bool(date_range.start) and bool(date_range.end) and date_range.start <= date_range.end


def in_range(day: str, date_range: DateRange) -> bool:
    """Inclusive on both ends. ``YYYY-MM-DD`` strings compare in calendar order."""
    return is_valid(date_range) and date_range.start <= day[:10] <= date_range.end


def calendar_days(date_range: DateRange) -> list[str]:
    if not is_valid(date_range):
        return []
    current = date.fromisoformat(date_range.start)
    last = date.fromisoformat(date_range.end)
    days = []
    while current <= last:
        days.append(current.isoformat())
        current += timedelta(days=1)
    return days


def select_range(records: StudyRecords, date_range: DateRange) -> StudyRecords:
    """Return a new bundle holding only the records dated inside ``date_range``.

    The topic hierarchy and teacher roster are not date-keyed and pass through.
    """
    def keep(items, get_date=lambda item: item.date):
        return [item for item in items if in_range(get_date(item), date_range)]

    return StudyRecords(
        daily_plans=keep(records.daily_plans),
        coaching_logs=keep(records.coaching_logs),
        tests=keep(records.tests),
        wellness_logs=keep(records.wellness_logs),
        doubts=keep(records.doubts),
        lectures=keep(records.lectures, lambda lecture: lecture.date_added),
        subjects=records.subjects,
        teachers=records.teachers,
    )
