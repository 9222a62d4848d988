from django.conf import settings
from django.db import models
from properties.models import Property
import uuid


class BookingQuerySet(models.QuerySet):
    def active(self):
        """Bookings that still hold their nights."""
        return self.filter(status__in=Booking.HOLDING_STATUSES)


class Booking(models.Model):
    class Status(models.TextChoices):
        PENDING_APPROVAL = "PENDING_APPROVAL", "Pending Approval"
        CONFIRMED = "CONFIRMED", "Confirmed"
        DECLINED = "DECLINED", "Declined"
        CANCELLED = "CANCELLED", "Cancelled"

    HOLDING_STATUSES = (Status.PENDING_APPROVAL, Status.CONFIRMED)

    # Linked entities
    property = models.ForeignKey(
        Property, on_delete=models.PROTECT, related_name="bookings"
    )
    host = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="host_bookings"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bookings"
    )
    uid = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        db_index=True,
        unique=True,
        help_text="Public booking reference"
    )

    # Stay details
    check_in_date = models.DateField()
    check_out_date = models.DateField()
    nights = models.PositiveIntegerField()
    guests = models.PositiveIntegerField(default=1)
    guest_first_name = models.CharField(max_length=120)
    guest_last_name = models.CharField(max_length=120)
    guest_email = models.EmailField()
    guest_phone = models.CharField(max_length=40, blank=True, null=True)
    guest_message = models.TextField(blank=True, null=True)
    special_requests = models.TextField(blank=True, null=True)

    # Pricing (server-computed quote, cents)
    base_nightly_total = models.PositiveIntegerField(default=0)
    nightly_rate = models.PositiveIntegerField(default=0, help_text="Average post-discount nightly rate")
    discount_percent = models.PositiveIntegerField(default=0)
    is_gap_night = models.BooleanField(default=False)
    cleaning_fee = models.PositiveIntegerField(default=0)
    service_fee = models.PositiveIntegerField(default=0)
    credit_applied = models.PositiveIntegerField(default=0)
    stripe_fee = models.PositiveIntegerField(default=0)
    total_price = models.PositiveIntegerField(default=0)
    currency = models.CharField(max_length=3, default="AUD")

    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PENDING_APPROVAL
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        db_table = "bookings"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["property", "check_in_date", "check_out_date"],
                name="booking_range_idx",
            ),
        ]

    def __str__(self):
        return f"Booking #{self.id} ({self.property.title})"

    def is_holding(self):
        return self.status in self.HOLDING_STATUSES

    def save(self, *args, **kwargs):
        """Automatically calculate nights before saving."""
        if self.check_in_date and self.check_out_date:
            self.nights = (self.check_out_date - self.check_in_date).days
        super().save(*args, **kwargs)
