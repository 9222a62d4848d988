"""
Orphan-window generation.

Turns a flat list of gap-night availability records into fixed-length
bookable ranges. Records only need ``date``, ``nightly_rate`` and
``gap_night_discount`` attributes, so both ``PropertyAvailability`` rows
and unsaved instances work.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

ONE_DAY = timedelta(days=1)
WINDOW_SIZES = (1, 2, 3)


def round_half_up(value):
    """Round to the nearest integer, halves away from zero (JS Math.round for positives)."""
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def discounted_rate(nightly_rate, discount):
    """Post-discount price of one night, rounded per night."""
    discount = discount or 0
    return round_half_up(Decimal(nightly_rate) * (100 - Decimal(discount)) / 100)


@dataclass(frozen=True)
class GapNightRange:
    start_date: object
    end_date: object
    nights: int
    avg_rate: int
    avg_discount: int
    total_rate: int
    original_total: int
    dates: tuple = field(default=(), compare=False)


def split_consecutive_runs(records):
    """
    Sort records by date and group them into maximal runs of
    calendar-consecutive days.
    """
    ordered = sorted(records, key=lambda r: r.date)
    runs = []
    current = []
    for record in ordered:
        if current and record.date - current[-1].date != ONE_DAY:
            runs.append(current)
            current = []
        current.append(record)
    if current:
        runs.append(current)
    return runs


def build_range(window):
    nights = len(window)
    original_total = sum(r.nightly_rate for r in window)
    total_rate = sum(discounted_rate(r.nightly_rate, r.gap_night_discount) for r in window)
    discount_sum = sum(r.gap_night_discount or 0 for r in window)

    return GapNightRange(
        start_date=window[0].date,
        end_date=window[-1].date + ONE_DAY,
        nights=nights,
        avg_rate=round_half_up(Decimal(total_rate) / nights),
        avg_discount=round_half_up(Decimal(discount_sum) / nights),
        total_rate=total_rate,
        original_total=original_total,
        dates=tuple(window),
    )


def generate_gap_night_ranges(gap_nights, night_count):
    """
    Slide a ``night_count`` window (stride 1) across every consecutive run
    of gap nights. A run of length L yields L - night_count + 1 ranges;
    shorter runs yield none.

    ``gap_nights`` must already be filtered to available gap nights.
    """
    if night_count not in WINDOW_SIZES:
        raise ValueError(f"night_count must be one of {WINDOW_SIZES}, got {night_count!r}")

    ranges = []
    for run in split_consecutive_runs(gap_nights):
        for start in range(len(run) - night_count + 1):
            ranges.append(build_range(run[start:start + night_count]))
    return ranges


def summarize_gap_nights(gap_nights):
    """Headline numbers for a listing card."""
    runs = split_consecutive_runs(gap_nights)
    count = sum(len(run) for run in runs)
    max_consecutive = max((len(run) for run in runs), default=0)
    rates = [discounted_rate(r.nightly_rate, r.gap_night_discount) for r in gap_nights]
    max_discount = max((r.gap_night_discount or 0 for r in gap_nights), default=0)

    if count == 0:
        label = "Available"
    elif max_consecutive > 1:
        label = f"{count} gap nights · up to {max_consecutive} consecutive"
    else:
        label = f"{count} gap night{'' if count == 1 else 's'} available"

    return {
        "count": count,
        "max_consecutive": max_consecutive,
        "lowest_rate": min(rates) if rates else None,
        "max_discount": max_discount,
        "label": label,
    }
