from django.conf import settings
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("properties", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PropertyAvailability",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("is_available", models.BooleanField(default=True)),
                ("is_gap_night", models.BooleanField(default=False, help_text="Orphan night offered at a discount")),
                ("nightly_rate", models.PositiveIntegerField(help_text="Undiscounted nightly rate in cents")),
                ("gap_night_discount", models.PositiveIntegerField(
                    default=0,
                    help_text="Discount percent, only applied to gap nights",
                    validators=[django.core.validators.MaxValueValidator(100)],
                )),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("property", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="availability",
                    to="properties.property",
                )),
            ],
            options={
                "db_table": "property_availability",
                "ordering": ["property_id", "date"],
                "unique_together": {("property", "date")},
                "indexes": [
                    models.Index(
                        fields=["property", "is_gap_night", "is_available", "date"],
                        name="availability_gap_lookup_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="BlockedPeriod",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("reason", models.CharField(blank=True, max_length=255, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="created_blocked_periods",
                    to=settings.AUTH_USER_MODEL,
                )),
                ("property", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="blocked_periods",
                    to="properties.property",
                )),
            ],
            options={
                "db_table": "blocked_periods",
                "ordering": ["-start_date"],
                "indexes": [
                    models.Index(
                        fields=["property", "start_date", "end_date"],
                        name="blocked_period_range_idx",
                    ),
                ],
            },
        ),
    ]
