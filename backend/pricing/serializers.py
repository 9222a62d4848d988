from django.conf import settings
from rest_framework import serializers

from availability.serializers import PropertyAvailabilitySerializer
from .windows import WINDOW_SIZES


# --------------------- Requests ---------------------
class PriceQuoteRequestSerializer(serializers.Serializer):
    property_id = serializers.IntegerField(min_value=1)
    check_in_date = serializers.DateField()
    check_out_date = serializers.DateField()
    apply_credit = serializers.BooleanField(
        default=False,
        help_text="Apply the signed-in user's credit balance",
    )


class GapNightRangeQuerySerializer(serializers.Serializer):
    nights = serializers.ChoiceField(choices=list(WINDOW_SIZES), default=1)


# --------------------- Responses ---------------------
class PriceEstimateSerializer(serializers.Serializer):
    nightly_total = serializers.IntegerField()
    cleaning_fee = serializers.IntegerField()
    service_fee = serializers.IntegerField()
    total = serializers.IntegerField()
    is_estimate = serializers.BooleanField()


class GapNightRangeSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    nights = serializers.IntegerField()
    avg_rate = serializers.IntegerField()
    avg_discount = serializers.IntegerField()
    total_rate = serializers.IntegerField()
    original_total = serializers.IntegerField()
    dates = PropertyAvailabilitySerializer(many=True)
    estimate = PriceEstimateSerializer(required=False)


class PriceQuoteSerializer(serializers.Serializer):
    property_id = serializers.IntegerField()
    check_in_date = serializers.DateField()
    check_out_date = serializers.DateField()
    nights = serializers.IntegerField()
    base_nightly_total = serializers.IntegerField()
    avg_nightly_rate = serializers.IntegerField()
    discounted_nightly_total = serializers.IntegerField()
    discount_percent = serializers.IntegerField()
    is_gap_night = serializers.BooleanField()
    cleaning_fee = serializers.IntegerField()
    service_fee = serializers.IntegerField()
    credit_applied = serializers.IntegerField()
    subtotal = serializers.IntegerField()
    stripe_fee = serializers.IntegerField()
    grand_total = serializers.IntegerField()
    currency = serializers.CharField(default=settings.GAPNIGHT_CURRENCY)
