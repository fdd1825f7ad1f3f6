"""Shift duration arithmetic. Times arrive as ``HH:MM:SS AM/PM`` strings."""

from datetime import datetime, timedelta


def format_duration(seconds: float) -> str:
    total = max(0, int(seconds))
    hrs, rem = divmod(total, 3600)
    mins, secs = divmod(rem, 60)
    return f"{hrs}h {mins}m {secs}s"


def parse_date_time(date_iso: str, time_12h: str) -> datetime | None:
    """Combine ``YYYY-MM-DD`` and ``HH:MM:SS AM/PM``; None when either part is unusable."""
    if not date_iso or not time_12h:
        return None
    parts = time_12h.strip().split(" ")
    if len(parts) != 2:
        return None
    clock, meridiem = parts
    try:
        hh, mm, ss = (int(p) for p in clock.split(":"))
        hour = hh % 12 + (12 if meridiem.upper() == "PM" else 0)
        return datetime.strptime(date_iso, "%Y-%m-%d").replace(hour=hour, minute=mm, second=ss)
    except ValueError:
        return None


def compute_totals(
    date: str,
    clock_in: str,
    clock_out: str,
    lunch_start: str = "",
    lunch_end: str = "",
) -> tuple[str, float]:
    """Return ``(hours, hours_decimal)`` worked, minus the lunch window.

    A clock-out earlier than clock-in is taken to be past midnight. The lunch
    window only counts where it overlaps the shift.
    """
    start = parse_date_time(date, clock_in)
    end = parse_date_time(date, clock_out)
    if start is None or end is None:
        return "", 0.0
    if end < start:
        end += timedelta(days=1)

    lunch = timedelta(0)
    lunch_start, lunch_end = (lunch_start or "").strip(), (lunch_end or "").strip()
    if lunch_start and lunch_end:
        l_start = parse_date_time(date, lunch_start)
        l_end = parse_date_time(date, lunch_end)
        if l_start is not None and l_end is not None:
            if l_end < l_start:
                l_end += timedelta(days=1)
            overlap_start = max(start, l_start)
            overlap_end = min(end, l_end)
            if overlap_end > overlap_start:
                lunch = overlap_end - overlap_start

    net = max(timedelta(0), (end - start) - lunch)
    seconds = net.total_seconds()
    return format_duration(seconds), round(seconds / 3600, 2)
