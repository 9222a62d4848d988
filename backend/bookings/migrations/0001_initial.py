from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("properties", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("uid", models.UUIDField(
                    db_index=True,
                    default=uuid.uuid4,
                    editable=False,
                    help_text="Public booking reference",
                    unique=True,
                )),
                ("check_in_date", models.DateField()),
                ("check_out_date", models.DateField()),
                ("nights", models.PositiveIntegerField()),
                ("guests", models.PositiveIntegerField(default=1)),
                ("guest_first_name", models.CharField(max_length=120)),
                ("guest_last_name", models.CharField(max_length=120)),
                ("guest_email", models.EmailField(max_length=254)),
                ("guest_phone", models.CharField(blank=True, max_length=40, null=True)),
                ("guest_message", models.TextField(blank=True, null=True)),
                ("special_requests", models.TextField(blank=True, null=True)),
                ("base_nightly_total", models.PositiveIntegerField(default=0)),
                ("nightly_rate", models.PositiveIntegerField(default=0, help_text="Average post-discount nightly rate")),
                ("discount_percent", models.PositiveIntegerField(default=0)),
                ("is_gap_night", models.BooleanField(default=False)),
                ("cleaning_fee", models.PositiveIntegerField(default=0)),
                ("service_fee", models.PositiveIntegerField(default=0)),
                ("credit_applied", models.PositiveIntegerField(default=0)),
                ("stripe_fee", models.PositiveIntegerField(default=0)),
                ("total_price", models.PositiveIntegerField(default=0)),
                ("currency", models.CharField(default="AUD", max_length=3)),
                ("status", models.CharField(
                    choices=[
                        ("PENDING_APPROVAL", "Pending Approval"),
                        ("CONFIRMED", "Confirmed"),
                        ("DECLINED", "Declined"),
                        ("CANCELLED", "Cancelled"),
                    ],
                    default="PENDING_APPROVAL",
                    max_length=20,
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("host", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="host_bookings",
                    to=settings.AUTH_USER_MODEL,
                )),
                ("property", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="bookings",
                    to="properties.property",
                )),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="bookings",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "db_table": "bookings",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["property", "check_in_date", "check_out_date"],
                        name="booking_range_idx",
                    ),
                ],
            },
        ),
    ]
