"""Clock-time helpers for HH:mm intervals."""

MINUTES_PER_DAY = 24 * 60


def to_minutes(value: str) -> int | None:
    """Parse an ``HH:mm`` string into minutes after midnight, or None if blank."""
    if not value:
        return None
    hours, _, minutes = value.strip().partition(":")
    return int(hours) * 60 + int(minutes or 0)


def interval_minutes(start: str, end: str) -> tuple[int, int] | None:
    """Return (start, end) in minutes, with end pushed past midnight when it wraps."""
    lo = to_minutes(start)
    hi = to_minutes(end)
    if lo is None or hi is None:
        return None
    if hi < lo:
        hi += MINUTES_PER_DAY
    return lo, hi


def duration_hours(start: str, end: str) -> float:
    bounds = interval_minutes(start, end)
    if bounds is None:
        return 0.0
    return (bounds[1] - bounds[0]) / 60


def window_hours(wake: str, sleep: str) -> float:
    """Hours awake between wake and sleep times. Equal times mean a full 24-hour day."""
    bounds = interval_minutes(wake, sleep)
    if bounds is None:
        return 0.0
    if bounds[0] == bounds[1]:
        return MINUTES_PER_DAY / 60
    return (bounds[1] - bounds[0]) / 60


def hour_overlaps(start: str, end: str) -> dict[int, float]:
    """Hours of the interval falling in each hour-of-day bucket (0-23).

    Intervals running past midnight wrap into the early buckets.
    """
    bounds = interval_minutes(start, end)
    if bounds is None:
        return {}
    overlaps: dict[int, float] = {}
    minute, stop = bounds
    while minute < stop:
        bucket_end = (minute // 60 + 1) * 60
        chunk = min(stop, bucket_end) - minute
        hour = (minute // 60) % 24
        overlaps[hour] = overlaps.get(hour, 0.0) + chunk / 60
        minute += chunk
    return overlaps
