import logging

from availability.models import PropertyAvailability
from rewards.utils import refund_credit

logger = logging.getLogger(__name__)


def release_booking(booking):
    """
    Give a booking's nights back to the calendar and refund any credit it
    used. Only bookings that still hold their nights are released.
    """
    if not booking.is_holding():
        return 0

    freed = PropertyAvailability.objects.filter(
        property=booking.property,
        date__gte=booking.check_in_date,
        date__lt=booking.check_out_date,
    ).update(is_available=True)

    if booking.credit_applied:
        refund_credit(booking.user, booking.credit_applied, booking)

    logger.info(f"Released {freed} nights from booking {booking.uid}")
    return freed
