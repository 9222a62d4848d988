from rest_framework import serializers
from .models import Property


class PropertySerializer(serializers.ModelSerializer):
    class Meta:
        model = Property
        fields = [
            "id",
            "host",
            "title",
            "description",
            "city",
            "property_type",
            "max_guests",
            "base_nightly_rate",
            "cleaning_fee",
            "service_fee",
            "min_nights",
            "max_nights",
            "instant_book",
            "self_check_in",
            "status",
            "is_active",
            "created_at",
            "updated_at",
        ]
        # Approval is an admin decision, hosts cannot self-approve
        read_only_fields = ["id", "host", "status", "created_at", "updated_at"]

    def validate_max_guests(self, value):
        if value < 1:
            raise serializers.ValidationError("max_guests must be at least 1.")
        return value

    def validate(self, attrs):
        min_nights = attrs.get("min_nights", getattr(self.instance, "min_nights", 1))
        max_nights = attrs.get("max_nights", getattr(self.instance, "max_nights", None))

        if min_nights < 1 or min_nights > 365:
            raise serializers.ValidationError({"min_nights": "Must be between 1 and 365."})
        if max_nights is not None and max_nights < min_nights:
            raise serializers.ValidationError(
                {"max_nights": "max_nights must be greater than or equal to min_nights."}
            )
        return attrs


class GapNightPreviewSerializer(serializers.Serializer):
    date = serializers.DateField()
    nightly_rate = serializers.IntegerField()
    gap_night_discount = serializers.IntegerField()
    discounted_rate = serializers.IntegerField()


class GapNightSummarySerializer(serializers.Serializer):
    count = serializers.IntegerField()
    max_consecutive = serializers.IntegerField()
    lowest_rate = serializers.IntegerField(allow_null=True)
    max_discount = serializers.IntegerField()
    label = serializers.CharField()


class PublicPropertySerializer(serializers.ModelSerializer):
    """Listing card: property plus its upcoming gap nights and deal score."""

    gap_nights = GapNightPreviewSerializer(many=True, read_only=True)
    gap_night_summary = GapNightSummarySerializer(read_only=True)
    deal_score = serializers.IntegerField(read_only=True)

    class Meta:
        model = Property
        fields = [
            "id",
            "title",
            "description",
            "city",
            "property_type",
            "max_guests",
            "base_nightly_rate",
            "cleaning_fee",
            "service_fee",
            "min_nights",
            "max_nights",
            "instant_book",
            "self_check_in",
            "gap_nights",
            "gap_night_summary",
            "deal_score",
        ]
