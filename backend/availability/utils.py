from datetime import timedelta


def get_dates_in_range(start_date, end_date):
    """Return the nights between start and end (end exclusive)."""
    delta = end_date - start_date
    return [start_date + timedelta(days=i) for i in range(delta.days)]


def detect_gap_nights(blocked_ranges, max_gap=2):
    """
    Find orphan nights between blocked ranges.

    ``blocked_ranges`` is an iterable of ``(start, end)`` date pairs where
    ``end`` is the checkout-style first free day. Every hole of 1..max_gap
    nights between one range's end and the next range's start is returned
    as ``{"date": ..., "gap_size": ...}`` entries, one per night.
    """
    ranges = sorted(blocked_ranges, key=lambda r: r[0])
    if len(ranges) < 2:
        return []

    gap_nights = []
    for (_, current_end), (next_start, _) in zip(ranges, ranges[1:]):
        gap_days = (next_start - current_end).days
        if 1 <= gap_days <= max_gap:
            for night in get_dates_in_range(current_end, next_start):
                gap_nights.append({"date": night, "gap_size": gap_days})
    return gap_nights
