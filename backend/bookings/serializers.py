from django.db import transaction
from rest_framework import serializers
from .models import Booking
from properties.models import Property
from availability.models import PropertyAvailability, BlockedPeriod
from pricing.quotes import build_price_quote, load_nights
from rewards.utils import get_rewards, debit_credit


class BookingSerializer(serializers.ModelSerializer):
    property_title = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "uid",
            "property",
            "property_title",
            "host",
            "user",
            "check_in_date",
            "check_out_date",
            "nights",
            "guests",
            "guest_first_name",
            "guest_last_name",
            "guest_email",
            "guest_phone",
            "guest_message",
            "special_requests",
            "base_nightly_total",
            "nightly_rate",
            "discount_percent",
            "is_gap_night",
            "cleaning_fee",
            "service_fee",
            "credit_applied",
            "stripe_fee",
            "total_price",
            "currency",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_property_title(self, obj):
        return obj.property.title if obj.property else None


class BookingCreateSerializer(serializers.Serializer):
    """
    Booking request. Prices are never taken from the client: the quote is
    recomputed from the calendar while the nights are locked.
    """
    property = serializers.PrimaryKeyRelatedField(
        queryset=Property.objects.bookable()
    )
    check_in_date = serializers.DateField()
    check_out_date = serializers.DateField()
    guests = serializers.IntegerField(min_value=1, default=1)
    guest_first_name = serializers.CharField(max_length=120)
    guest_last_name = serializers.CharField(max_length=120)
    guest_email = serializers.EmailField()
    guest_phone = serializers.CharField(max_length=40, required=False, allow_blank=True, allow_null=True)
    guest_message = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    special_requests = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    apply_credit = serializers.BooleanField(default=False)

    # -------------------------------------------------------------------------
    # VALIDATION (stay rules + blocked dates)
    # -------------------------------------------------------------------------
    def validate(self, data):
        check_in = data["check_in_date"]
        check_out = data["check_out_date"]
        property_obj = data["property"]

        if check_out <= check_in:
            raise serializers.ValidationError("Check-out date must be after check-in date.")

        if data["guests"] > property_obj.max_guests:
            raise serializers.ValidationError(
                {"guests": f"Maximum {property_obj.max_guests} guests allowed"}
            )

        nights = (check_out - check_in).days
        if nights < property_obj.min_nights:
            raise serializers.ValidationError(f"Minimum {property_obj.min_nights} night(s) required")
        if property_obj.max_nights and nights > property_obj.max_nights:
            raise serializers.ValidationError(f"Maximum {property_obj.max_nights} nights allowed")

        blocked = BlockedPeriod.objects.filter(
            property=property_obj,
            start_date__lt=check_out,
            end_date__gt=check_in,
        ).exists()

        if blocked:
            raise serializers.ValidationError(
                "This property is blocked for the selected dates."
            )

        return data

    # -------------------------------------------------------------------------
    # CREATE
    # -------------------------------------------------------------------------
    def create(self, validated_data):
        apply_credit = validated_data.pop("apply_credit", False)
        user = validated_data["user"]
        property_obj = validated_data["property"]
        check_in = validated_data["check_in_date"]
        check_out = validated_data["check_out_date"]

        with transaction.atomic():
            # Row locks make concurrent requests for the same night serialize;
            # the loser sees is_available=False and gets InvalidRangeError.
            nights = load_nights(property_obj, check_in, check_out, lock=True)
            credit_balance = get_rewards(user, lock=True).credit_balance if apply_credit else 0
            quote = build_price_quote(property_obj, nights, check_in, check_out, credit_balance)

            booking = Booking.objects.create(
                host=property_obj.host,
                base_nightly_total=quote.base_nightly_total,
                nightly_rate=quote.avg_nightly_rate,
                discount_percent=quote.discount_percent,
                is_gap_night=quote.is_gap_night,
                cleaning_fee=quote.cleaning_fee,
                service_fee=quote.service_fee,
                credit_applied=quote.credit_applied,
                stripe_fee=quote.stripe_fee,
                total_price=quote.grand_total,
                currency=quote.currency,
                **validated_data,
            )

            PropertyAvailability.objects.filter(
                pk__in=[n.pk for n in nights]
            ).update(is_available=False)

            debit_credit(user, quote.credit_applied, booking)

        self.quote = quote
        return booking
