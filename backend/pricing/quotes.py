"""
Price quotes.

``get_price_quote`` is the authoritative price of a stay: it re-reads the
availability calendar and recomputes every figure server-side. Whatever the
client showed beforehand (see ``estimate_price``) is advisory only and is
never persisted.
"""

import logging
from dataclasses import dataclass, asdict
from decimal import Decimal

from django.conf import settings

from availability.models import PropertyAvailability
from availability.utils import get_dates_in_range
from properties.models import Property
from .exceptions import NotFoundError, InvalidRangeError
from .windows import discounted_rate, round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceQuote:
    property_id: int
    check_in_date: object
    check_out_date: object
    nights: int
    base_nightly_total: int
    avg_nightly_rate: int
    discounted_nightly_total: int
    discount_percent: int
    is_gap_night: bool
    cleaning_fee: int
    service_fee: int
    credit_applied: int
    subtotal: int
    stripe_fee: int
    grand_total: int
    currency: str

    def as_dict(self):
        return asdict(self)


def calculate_stripe_fee(subtotal):
    """Fixed-plus-percentage processing surcharge; nothing to charge means no fee."""
    if subtotal <= 0:
        return 0
    percent = Decimal(str(settings.GAPNIGHT_STRIPE_FEE_PERCENT))
    return round_half_up(Decimal(subtotal) * percent) + settings.GAPNIGHT_STRIPE_FEE_FIXED


def build_price_quote(property_obj, nights, check_in, check_out, credit_balance=0):
    """
    Price already-validated nights. ``nights`` are the availability rows for
    every date in [check_in, check_out), in date order.
    """
    base_total = 0
    discounted_total = 0
    any_gap_night = False

    for night in nights:
        base_total += night.nightly_rate
        if night.is_gap_night:
            any_gap_night = True
            discounted_total += discounted_rate(night.nightly_rate, night.gap_night_discount)
        else:
            discounted_total += night.nightly_rate

    if base_total > 0:
        discount_percent = round_half_up(
            Decimal(base_total - discounted_total) * 100 / base_total
        )
    else:
        discount_percent = 0

    cleaning_fee = property_obj.cleaning_fee or 0
    service_fee = property_obj.service_fee or 0

    credit_applied = min(max(credit_balance or 0, 0), discounted_total)
    subtotal = discounted_total + cleaning_fee + service_fee - credit_applied
    stripe_fee = calculate_stripe_fee(subtotal)

    return PriceQuote(
        property_id=property_obj.pk,
        check_in_date=check_in,
        check_out_date=check_out,
        nights=len(nights),
        base_nightly_total=base_total,
        avg_nightly_rate=round_half_up(Decimal(discounted_total) / len(nights)) if nights else 0,
        discounted_nightly_total=discounted_total,
        discount_percent=discount_percent,
        is_gap_night=any_gap_night,
        cleaning_fee=cleaning_fee,
        service_fee=service_fee,
        credit_applied=credit_applied,
        subtotal=subtotal,
        stripe_fee=stripe_fee,
        grand_total=subtotal + stripe_fee,
        currency=settings.GAPNIGHT_CURRENCY,
    )


def load_nights(property_obj, check_in, check_out, lock=False):
    """
    Fetch the availability row of every night in the range, failing if any
    is missing, unavailable or blocked. ``lock`` takes row locks and must
    be used inside a transaction.
    """
    if check_out <= check_in:
        raise InvalidRangeError("Check-out date must be after check-in date.")

    qs = PropertyAvailability.objects.filter(
        property=property_obj,
        date__gte=check_in,
        date__lt=check_out,
    ).with_blocked().order_by("date")
    if lock:
        qs = qs.select_for_update()
    records = {r.date: r for r in qs}

    nights = []
    for night_date in get_dates_in_range(check_in, check_out):
        record = records.get(night_date)
        if record is None:
            raise NotFoundError(f"No availability record for {night_date.isoformat()}.")
        if not record.is_available or record.is_blocked:
            raise InvalidRangeError(f"Date {night_date.isoformat()} is not available.")
        nights.append(record)
    return nights


def get_bookable_property(property_id):
    try:
        return Property.objects.bookable().get(pk=property_id)
    except Property.DoesNotExist:
        raise NotFoundError(f"Property {property_id} not found.")


def get_price_quote(property_id, check_in, check_out, credit_balance=0):
    """Authoritative quote for a stay. Reads only; safe to call repeatedly."""
    if check_out <= check_in:
        raise InvalidRangeError("Check-out date must be after check-in date.")

    property_obj = get_bookable_property(property_id)
    nights = load_nights(property_obj, check_in, check_out)
    quote = build_price_quote(property_obj, nights, check_in, check_out, credit_balance)

    logger.info(
        f"Quoted property {property_id} {check_in}→{check_out}: "
        f"{quote.grand_total} {quote.currency} ({quote.discount_percent}% off)"
    )
    return quote


def estimate_price(gap_range, property_obj):
    """
    Cheap provisional figure for UI feedback on a gap-night range.
    No credit, no processing surcharge; superseded by ``get_price_quote``.
    """
    cleaning_fee = property_obj.cleaning_fee or 0
    service_fee = property_obj.service_fee or 0
    return {
        "nightly_total": gap_range.total_rate,
        "cleaning_fee": cleaning_fee,
        "service_fee": service_fee,
        "total": gap_range.total_rate + cleaning_fee + service_fee,
        "is_estimate": True,
    }
