from django.conf import settings
from django.db import models


class PropertyQuerySet(models.QuerySet):
    def bookable(self):
        """Approved, active listings that guests can see and book."""
        return self.filter(status=Property.Status.APPROVED, is_active=True)


class Property(models.Model):
    class PropertyType(models.TextChoices):
        APARTMENT = "apartment", "Apartment"
        HOUSE = "house", "House"
        CABIN = "cabin", "Cabin"
        STUDIO = "studio", "Studio"
        VILLA = "villa", "Villa"
        ROOM = "room", "Private Room"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending Review"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    # Owner of the listing
    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="hosted_properties",
        db_index=True,
    )

    # Basic Information
    title = models.CharField(max_length=255, help_text="Listing title")
    description = models.TextField(blank=True, default="")
    city = models.CharField(max_length=120)
    property_type = models.CharField(
        max_length=20,
        choices=PropertyType.choices,
        default=PropertyType.APARTMENT,
    )
    max_guests = models.PositiveIntegerField(default=2)

    # Pricing (minor currency units)
    base_nightly_rate = models.PositiveIntegerField(
        help_text="Standard nightly rate in cents",
    )
    cleaning_fee = models.PositiveIntegerField(
        default=0, help_text="Flat cleaning fee per stay in cents"
    )
    service_fee = models.PositiveIntegerField(
        default=0, help_text="Flat service fee per stay in cents"
    )

    # Stay rules
    min_nights = models.PositiveIntegerField(default=1)
    max_nights = models.PositiveIntegerField(null=True, blank=True)
    instant_book = models.BooleanField(default=False)
    self_check_in = models.BooleanField(default=False)

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    is_active = models.BooleanField(default=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PropertyQuerySet.as_manager()

    class Meta:
        db_table = "properties"
        ordering = ["-created_at"]

    def __str__(self):
        return self.title
