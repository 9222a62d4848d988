from django.conf import settings
from django.core.validators import MaxValueValidator
from django.db import models
from django.db.models import Exists, OuterRef
from properties.models import Property


class PropertyAvailabilityQuerySet(models.QuerySet):
    def with_blocked(self):
        """Annotate ``is_blocked`` for nights inside a blocked period."""
        blocked = BlockedPeriod.objects.filter(
            property=OuterRef("property"),
            start_date__lte=OuterRef("date"),
            end_date__gt=OuterRef("date"),
        )
        return self.annotate(is_blocked=Exists(blocked))

    def bookable(self):
        return self.with_blocked().filter(is_available=True, is_blocked=False)


class PropertyAvailability(models.Model):
    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name="availability",
        db_index=True,
    )
    date = models.DateField()

    is_available = models.BooleanField(default=True)
    is_gap_night = models.BooleanField(
        default=False,
        help_text="Orphan night offered at a discount",
    )
    nightly_rate = models.PositiveIntegerField(
        help_text="Undiscounted nightly rate in cents",
    )
    gap_night_discount = models.PositiveIntegerField(
        default=0,
        validators=[MaxValueValidator(100)],
        help_text="Discount percent, only applied to gap nights",
    )
    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PropertyAvailabilityQuerySet.as_manager()

    class Meta:
        db_table = "property_availability"
        unique_together = (("property", "date"),)
        ordering = ["property_id", "date"]
        indexes = [
            models.Index(
                fields=["property", "is_gap_night", "is_available", "date"],
                name="availability_gap_lookup_idx",
            ),
        ]

    def __str__(self):
        flag = " (gap)" if self.is_gap_night else ""
        return f"{self.property.title} @ {self.date}: {self.nightly_rate}{flag}"

    def save(self, *args, **kwargs):
        """A discount only means something on a gap night."""
        if not self.is_gap_night:
            self.gap_night_discount = 0
        super().save(*args, **kwargs)


class BlockedPeriod(models.Model):
    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name="blocked_periods"
    )

    # Checkout-style range: end_date is the first free day
    start_date = models.DateField()
    end_date = models.DateField()

    reason = models.CharField(max_length=255, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_blocked_periods"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "blocked_periods"
        ordering = ["-start_date"]
        indexes = [
            models.Index(
                fields=["property", "start_date", "end_date"],
                name="blocked_period_range_idx",
            ),
        ]

    def __str__(self):
        return f"Blocked {self.property.title} {self.start_date}→{self.end_date}"
