from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(help_text="Listing title", max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("city", models.CharField(max_length=120)),
                ("property_type", models.CharField(
                    choices=[
                        ("apartment", "Apartment"),
                        ("house", "House"),
                        ("cabin", "Cabin"),
                        ("studio", "Studio"),
                        ("villa", "Villa"),
                        ("room", "Private Room"),
                    ],
                    default="apartment",
                    max_length=20,
                )),
                ("max_guests", models.PositiveIntegerField(default=2)),
                ("base_nightly_rate", models.PositiveIntegerField(help_text="Standard nightly rate in cents")),
                ("cleaning_fee", models.PositiveIntegerField(default=0, help_text="Flat cleaning fee per stay in cents")),
                ("service_fee", models.PositiveIntegerField(default=0, help_text="Flat service fee per stay in cents")),
                ("min_nights", models.PositiveIntegerField(default=1)),
                ("max_nights", models.PositiveIntegerField(blank=True, null=True)),
                ("instant_book", models.BooleanField(default=False)),
                ("self_check_in", models.BooleanField(default=False)),
                ("status", models.CharField(
                    choices=[("pending", "Pending Review"), ("approved", "Approved"), ("rejected", "Rejected")],
                    default="pending",
                    max_length=20,
                )),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("host", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="hosted_properties",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "db_table": "properties",
                "ordering": ["-created_at"],
            },
        ),
    ]
