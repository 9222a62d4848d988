from datetime import date

import pytest

from availability.models import PropertyAvailability, BlockedPeriod
from pricing.exceptions import NotFoundError, InvalidRangeError
from pricing.quotes import (
    build_price_quote,
    calculate_stripe_fee,
    estimate_price,
    get_price_quote,
)
from pricing.windows import generate_gap_night_ranges
from properties.models import Property

pytestmark = pytest.mark.django_db


def assert_additive(quote):
    assert quote.grand_total == (
        quote.discounted_nightly_total
        + quote.cleaning_fee
        + quote.service_fee
        - quote.credit_applied
        + quote.stripe_fee
    )


class TestStripeFee:
    def test_percentage_plus_fixed(self):
        assert calculate_stripe_fee(20000) == 350 + 30

    def test_rounds_half_up(self):
        # 15000 * 0.0175 = 262.5
        assert calculate_stripe_fee(15000) == 263 + 30

    def test_no_fee_on_nothing(self):
        assert calculate_stripe_fee(0) == 0


class TestBuildPriceQuote:
    def test_discount_only_applies_to_gap_nights(self, listing):
        nights = [
            PropertyAvailability(date=date(2026, 3, 1), nightly_rate=10000, is_gap_night=False, gap_night_discount=30),
            PropertyAvailability(date=date(2026, 3, 2), nightly_rate=10000, is_gap_night=True, gap_night_discount=30),
        ]
        quote = build_price_quote(listing, nights, date(2026, 3, 1), date(2026, 3, 3))

        assert quote.base_nightly_total == 20000
        assert quote.discounted_nightly_total == 17000
        assert quote.discount_percent == 15
        assert quote.is_gap_night is True

    def test_zero_base_total(self, host):
        free = Property.objects.create(
            host=host, title="Free", city="Hobart", base_nightly_rate=0, status=Property.Status.APPROVED
        )
        nights = [PropertyAvailability(date=date(2026, 3, 1), nightly_rate=0)]
        quote = build_price_quote(free, nights, date(2026, 3, 1), date(2026, 3, 2))

        assert quote.discount_percent == 0
        assert quote.stripe_fee == 0
        assert quote.grand_total == 0


class TestGetPriceQuote:
    def test_full_breakdown(self, listing, make_night, day):
        make_night(day(0), rate=10000, discount=25)
        make_night(day(1), rate=10000)

        quote = get_price_quote(listing.id, day(0), day(2))

        assert quote.nights == 2
        assert quote.base_nightly_total == 20000
        assert quote.discounted_nightly_total == 17500
        assert quote.avg_nightly_rate == 8750
        # 12.5% rounds up
        assert quote.discount_percent == 13
        assert quote.is_gap_night is True
        assert quote.cleaning_fee == 2000
        assert quote.service_fee == 500
        assert quote.credit_applied == 0
        assert quote.subtotal == 20000
        assert quote.stripe_fee == 380
        assert quote.grand_total == 20380
        assert quote.currency == "AUD"
        assert_additive(quote)

    def test_no_gap_nights(self, listing, make_night, day):
        make_night(day(0), rate=15000)

        quote = get_price_quote(listing.id, day(0), day(1))

        assert quote.is_gap_night is False
        assert quote.discount_percent == 0
        assert quote.discounted_nightly_total == quote.base_nightly_total == 15000

    def test_partial_credit(self, listing, make_night, day):
        make_night(day(0), rate=10000, discount=25)
        make_night(day(1), rate=10000)

        quote = get_price_quote(listing.id, day(0), day(2), credit_balance=5000)

        assert quote.credit_applied == 5000
        assert quote.subtotal == 15000
        assert quote.stripe_fee == 293
        assert quote.grand_total == 15293
        assert_additive(quote)

    def test_credit_capped_at_nightly_total(self, listing, make_night, day):
        make_night(day(0), rate=10000, discount=25)
        make_night(day(1), rate=10000)

        quote = get_price_quote(listing.id, day(0), day(2), credit_balance=100000)

        assert quote.credit_applied == quote.discounted_nightly_total == 17500
        assert quote.grand_total >= quote.cleaning_fee + quote.service_fee + quote.stripe_fee
        assert_additive(quote)

    def test_negative_credit_ignored(self, listing, make_night, day):
        make_night(day(0))
        assert get_price_quote(listing.id, day(0), day(1), credit_balance=-500).credit_applied == 0

    def test_idempotent(self, listing, make_night, day):
        make_night(day(0), rate=12345, discount=17)
        make_night(day(1), rate=9999, discount=33)

        first = get_price_quote(listing.id, day(0), day(2), credit_balance=700)
        second = get_price_quote(listing.id, day(0), day(2), credit_balance=700)

        assert first == second
        assert first.as_dict() == second.as_dict()

    @pytest.mark.parametrize("nights_back", [0, 1, 3])
    def test_checkout_not_after_checkin(self, listing, make_night, day, nights_back):
        make_night(day(3))
        with pytest.raises(InvalidRangeError):
            get_price_quote(listing.id, day(3), day(3 - nights_back))

    def test_unavailable_night(self, listing, make_night, day):
        make_night(day(0))
        make_night(day(1), available=False)

        with pytest.raises(InvalidRangeError):
            get_price_quote(listing.id, day(0), day(2))

    def test_blocked_night(self, listing, host, make_night, day):
        make_night(day(0))
        make_night(day(1))
        BlockedPeriod.objects.create(property=listing, start_date=day(1), end_date=day(2), created_by=host)

        with pytest.raises(InvalidRangeError):
            get_price_quote(listing.id, day(0), day(2))
        # Checkout on the block's first night is fine
        assert get_price_quote(listing.id, day(0), day(1)).nights == 1

    def test_missing_night(self, listing, make_night, day):
        make_night(day(0))
        make_night(day(2))

        with pytest.raises(NotFoundError):
            get_price_quote(listing.id, day(0), day(3))

    def test_unknown_property(self, db, day):
        with pytest.raises(NotFoundError):
            get_price_quote(999999, day(0), day(1))

    def test_unapproved_property(self, listing, make_night, day):
        make_night(day(0))
        listing.status = Property.Status.PENDING
        listing.save()

        with pytest.raises(NotFoundError):
            get_price_quote(listing.id, day(0), day(1))


class TestEstimate:
    def test_estimate_matches_quote_before_surcharge(self, listing, make_night, day):
        nights = [make_night(day(0), rate=10000, discount=25), make_night(day(1), rate=12000, discount=30)]
        [gap_range] = generate_gap_night_ranges(nights, 2)

        estimate = estimate_price(gap_range, listing)
        quote = get_price_quote(listing.id, gap_range.start_date, gap_range.end_date)

        assert estimate["is_estimate"] is True
        assert estimate["total"] == quote.subtotal
        assert estimate["total"] != quote.grand_total
