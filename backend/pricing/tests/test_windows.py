from datetime import date

import pytest

from availability.models import PropertyAvailability
from pricing.windows import (
    discounted_rate,
    generate_gap_night_ranges,
    round_half_up,
    split_consecutive_runs,
    summarize_gap_nights,
)


def night(day, rate=10000, discount=0, month=3):
    # Unsaved rows are enough for the pure window logic
    return PropertyAvailability(
        date=date(2026, month, day),
        nightly_rate=rate,
        is_gap_night=True,
        gap_night_discount=discount,
    )


class TestRounding:
    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(7499.5) == 7500

    def test_discounted_rate(self):
        assert discounted_rate(10000, 25) == 7500
        assert discounted_rate(10000, 0) == 10000
        assert discounted_rate(10000, None) == 10000
        assert discounted_rate(10000, 100) == 0

    def test_discounted_rate_rounds_per_night(self):
        # 999 * 0.85 = 849.15
        assert discounted_rate(999, 15) == 849
        # 1001 * 0.5 = 500.5
        assert discounted_rate(1001, 50) == 501


class TestSplitConsecutiveRuns:
    def test_sorts_and_splits(self):
        runs = split_consecutive_runs([night(5), night(1), night(2)])
        assert [[r.date.day for r in run] for run in runs] == [[1, 2], [5]]

    def test_runs_cross_month_boundary(self):
        runs = split_consecutive_runs([night(28, month=2), night(1, month=3)])
        assert len(runs) == 1

    def test_empty(self):
        assert split_consecutive_runs([]) == []


class TestGenerateGapNightRanges:
    def test_window_count_for_five_night_run(self):
        nights = [night(d) for d in range(1, 6)]
        ranges = generate_gap_night_ranges(nights, 2)

        assert [(r.start_date, r.end_date) for r in ranges] == [
            (date(2026, 3, 1), date(2026, 3, 3)),
            (date(2026, 3, 2), date(2026, 3, 4)),
            (date(2026, 3, 3), date(2026, 3, 5)),
            (date(2026, 3, 4), date(2026, 3, 6)),
        ]

    @pytest.mark.parametrize("run_length,night_count,expected", [
        (5, 1, 5),
        (5, 3, 3),
        (3, 3, 1),
        (2, 3, 0),
        (1, 2, 0),
    ])
    def test_window_count(self, run_length, night_count, expected):
        nights = [night(d) for d in range(1, run_length + 1)]
        assert len(generate_gap_night_ranges(nights, night_count)) == expected

    def test_non_consecutive_split(self):
        nights = [night(1, discount=20), night(2), night(5, discount=10)]
        ranges = generate_gap_night_ranges(nights, 1)

        assert len(ranges) == 3
        for r in ranges:
            assert (r.original_total == r.total_rate) == (r.avg_discount == 0)

    def test_isolated_night_cannot_fill_longer_stay(self):
        nights = [night(1), night(3), night(5)]
        assert generate_gap_night_ranges(nights, 2) == []

    def test_single_night_discount(self):
        [r] = generate_gap_night_ranges([night(1, rate=10000, discount=25)], 1)

        assert r.total_rate == 7500
        assert r.original_total == 10000
        assert r.avg_rate == 7500
        assert r.avg_discount == 25
        assert r.nights == 1
        assert r.end_date == date(2026, 3, 2)

    def test_aggregates_over_window(self):
        nights = [night(1, rate=10000, discount=25), night(2, rate=12000, discount=30)]
        [r] = generate_gap_night_ranges(nights, 2)

        assert r.original_total == 22000
        assert r.total_rate == 7500 + 8400
        assert r.avg_rate == 7950
        # mean(25, 30) = 27.5
        assert r.avg_discount == 28
        assert [n.date.day for n in r.dates] == [1, 2]
        assert r.total_rate <= r.original_total

    def test_dates_are_contiguous(self):
        nights = [night(d) for d in (3, 1, 2, 4)]
        for r in generate_gap_night_ranges(nights, 3):
            assert r.nights == len(r.dates)
            for a, b in zip(r.dates, r.dates[1:]):
                assert (b.date - a.date).days == 1

    def test_empty_input(self):
        assert generate_gap_night_ranges([], 2) == []

    def test_rejects_unsupported_window(self):
        with pytest.raises(ValueError):
            generate_gap_night_ranges([night(1)], 4)

    def test_deterministic(self):
        nights = [night(d, discount=d * 5) for d in (4, 1, 2, 3)]
        assert generate_gap_night_ranges(nights, 2) == generate_gap_night_ranges(list(reversed(nights)), 2)


class TestSummarizeGapNights:
    def test_summary(self):
        summary = summarize_gap_nights([night(1, discount=20), night(2, discount=40), night(9)])

        assert summary["count"] == 3
        assert summary["max_consecutive"] == 2
        assert summary["lowest_rate"] == 6000
        assert summary["max_discount"] == 40
        assert summary["label"] == "3 gap nights · up to 2 consecutive"

    def test_single_night_label(self):
        assert summarize_gap_nights([night(1)])["label"] == "1 gap night available"

    def test_empty(self):
        summary = summarize_gap_nights([])
        assert summary["count"] == 0
        assert summary["lowest_rate"] is None
        assert summary["label"] == "Available"
