from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("bookings", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="UserRewards",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("total_points_earned", models.PositiveIntegerField(default=0)),
                ("current_points", models.PositiveIntegerField(default=0)),
                ("credit_balance", models.PositiveIntegerField(default=0, help_text="Account credit in cents")),
                ("tier", models.CharField(
                    choices=[
                        ("Bronze", "Bronze"),
                        ("Silver", "Silver"),
                        ("Gold", "Gold"),
                        ("Platinum", "Platinum"),
                    ],
                    default="Bronze",
                    max_length=10,
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.OneToOneField(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="rewards",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "db_table": "user_rewards",
            },
        ),
        migrations.CreateModel(
            name="RewardsTransaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(
                    choices=[
                        ("earned", "Points earned"),
                        ("redeemed", "Points redeemed"),
                        ("credit_used", "Credit applied to booking"),
                        ("credit_refunded", "Credit refunded"),
                    ],
                    max_length=20,
                )),
                ("points", models.IntegerField(default=0)),
                ("credit", models.IntegerField(default=0, help_text="Credit delta in cents")),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("booking", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="rewards_transactions",
                    to="bookings.booking",
                )),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="rewards_transactions",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "db_table": "rewards_transactions",
                "ordering": ["-created_at"],
            },
        ),
    ]
