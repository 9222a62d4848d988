import pytest
from django.urls import reverse

from rewards.models import UserRewards, RewardsTransaction
from rewards.utils import (
    calculate_tier,
    debit_credit,
    get_credit_balance,
    get_next_tier_info,
    redeem_points,
)


@pytest.mark.parametrize("points,tier", [
    (0, UserRewards.Tier.BRONZE),
    (99, UserRewards.Tier.BRONZE),
    (100, UserRewards.Tier.SILVER),
    (499, UserRewards.Tier.SILVER),
    (500, UserRewards.Tier.GOLD),
    (1000, UserRewards.Tier.PLATINUM),
    (25000, UserRewards.Tier.PLATINUM),
])
def test_calculate_tier(points, tier):
    assert calculate_tier(points) == tier


def test_next_tier():
    assert get_next_tier_info(UserRewards.Tier.BRONZE, 40) == (UserRewards.Tier.SILVER, 60)
    assert get_next_tier_info(UserRewards.Tier.GOLD, 700) == (UserRewards.Tier.PLATINUM, 300)
    assert get_next_tier_info(UserRewards.Tier.PLATINUM, 1500) == (UserRewards.Tier.PLATINUM, 0)


@pytest.mark.django_db
class TestCredit:
    def test_balance_for_anonymous_and_new_users(self, guest):
        from django.contrib.auth.models import AnonymousUser

        assert get_credit_balance(AnonymousUser()) == 0
        assert get_credit_balance(guest) == 0

    def test_debit_more_than_balance(self, guest):
        UserRewards.objects.create(user=guest, credit_balance=100)

        with pytest.raises(ValueError):
            debit_credit(guest, 500)
        assert UserRewards.objects.get(user=guest).credit_balance == 100

    def test_debit_nothing(self, guest):
        assert debit_credit(guest, 0) == 0
        assert not RewardsTransaction.objects.exists()


@pytest.mark.django_db
class TestRedeem:
    def test_points_become_credit(self, guest):
        UserRewards.objects.create(user=guest, current_points=350, total_points_earned=350)

        rewards = redeem_points(guest, 300)

        assert rewards.current_points == 50
        assert rewards.credit_balance == 300
        # Lifetime points keep the tier
        assert rewards.total_points_earned == 350

    def test_not_enough_points(self, guest):
        UserRewards.objects.create(user=guest, current_points=50)

        with pytest.raises(ValueError):
            redeem_points(guest, 100)

    def test_partial_blocks_rejected(self, guest):
        UserRewards.objects.create(user=guest, current_points=500)

        with pytest.raises(ValueError):
            redeem_points(guest, 150)


@pytest.mark.django_db
class TestRewardsViews:
    def test_my_rewards(self, guest_client):
        response = guest_client.get(reverse("my-rewards"))

        assert response.status_code == 200
        assert response.data["tier"] == UserRewards.Tier.BRONZE
        assert response.data["next_tier"] == UserRewards.Tier.SILVER
        assert response.data["points_to_next_tier"] == 100

    def test_redeem(self, guest, guest_client):
        UserRewards.objects.create(user=guest, current_points=200, total_points_earned=200)

        response = guest_client.post(reverse("redeem-points"), {"points": 200}, format="json")

        assert response.status_code == 200
        assert response.data["credit_balance"] == 200
        assert response.data["recent_transactions"][0]["type"] == RewardsTransaction.Type.REDEEMED

    def test_redeem_too_many(self, guest_client):
        response = guest_client.post(reverse("redeem-points"), {"points": 100}, format="json")

        assert response.status_code == 400
        assert response.data["success"] is False

    def test_redeem_uneven(self, guest_client):
        response = guest_client.post(reverse("redeem-points"), {"points": 120}, format="json")
        assert response.status_code == 400
        assert "points" in response.data
