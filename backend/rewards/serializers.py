from rest_framework import serializers
from .models import UserRewards, RewardsTransaction
from .utils import get_next_tier_info, POINTS_TO_CREDIT_RATIO


class RewardsTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = RewardsTransaction
        fields = ["id", "booking", "type", "points", "credit", "description", "created_at"]
        read_only_fields = fields


class UserRewardsSerializer(serializers.ModelSerializer):
    next_tier = serializers.SerializerMethodField()
    points_to_next_tier = serializers.SerializerMethodField()
    recent_transactions = serializers.SerializerMethodField()

    class Meta:
        model = UserRewards
        fields = [
            "total_points_earned",
            "current_points",
            "credit_balance",
            "tier",
            "next_tier",
            "points_to_next_tier",
            "recent_transactions",
        ]
        read_only_fields = fields

    def get_next_tier(self, obj):
        return get_next_tier_info(obj.tier, obj.total_points_earned)[0]

    def get_points_to_next_tier(self, obj):
        return get_next_tier_info(obj.tier, obj.total_points_earned)[1]

    def get_recent_transactions(self, obj):
        qs = obj.user.rewards_transactions.all()[:10]
        return RewardsTransactionSerializer(qs, many=True).data


class RedeemPointsSerializer(serializers.Serializer):
    points = serializers.IntegerField(min_value=POINTS_TO_CREDIT_RATIO)

    def validate_points(self, value):
        if value % POINTS_TO_CREDIT_RATIO:
            raise serializers.ValidationError(
                f"Points must be redeemed in multiples of {POINTS_TO_CREDIT_RATIO}."
            )
        return value
