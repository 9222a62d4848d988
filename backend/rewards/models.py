from django.conf import settings
from django.db import models


class UserRewards(models.Model):
    class Tier(models.TextChoices):
        BRONZE = "Bronze", "Bronze"
        SILVER = "Silver", "Silver"
        GOLD = "Gold", "Gold"
        PLATINUM = "Platinum", "Platinum"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="rewards"
    )
    total_points_earned = models.PositiveIntegerField(default=0)
    current_points = models.PositiveIntegerField(default=0)
    credit_balance = models.PositiveIntegerField(
        default=0, help_text="Account credit in cents"
    )
    tier = models.CharField(max_length=10, choices=Tier.choices, default=Tier.BRONZE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "user_rewards"

    def __str__(self):
        return f"{self.user.username} - {self.tier} ({self.credit_balance}c credit)"


class RewardsTransaction(models.Model):
    class Type(models.TextChoices):
        EARNED = "earned", "Points earned"
        REDEEMED = "redeemed", "Points redeemed"
        CREDIT_USED = "credit_used", "Credit applied to booking"
        CREDIT_REFUNDED = "credit_refunded", "Credit refunded"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="rewards_transactions"
    )
    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="rewards_transactions",
    )
    type = models.CharField(max_length=20, choices=Type.choices)
    points = models.IntegerField(default=0)
    credit = models.IntegerField(default=0, help_text="Credit delta in cents")
    description = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "rewards_transactions"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.user.username} {self.type} {self.points}pts {self.credit}c"
