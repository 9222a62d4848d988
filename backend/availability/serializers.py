from datetime import timedelta

from django.conf import settings
from django.utils import timezone
from rest_framework import serializers
from .models import PropertyAvailability, BlockedPeriod
from .utils import get_dates_in_range
from bookings.models import Booking

WEEKDAY_MAP = {
    "Monday": 0,
    "Tuesday": 1,
    "Wednesday": 2,
    "Thursday": 3,
    "Friday": 4,
    "Saturday": 5,
    "Sunday": 6,
}


class PropertyAvailabilitySerializer(serializers.ModelSerializer):
    class Meta:
        model = PropertyAvailability
        fields = [
            "id",
            "property",
            "date",
            "is_available",
            "is_gap_night",
            "nightly_rate",
            "gap_night_discount",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


def check_reopened_dates(property_obj, dates):
    """Nights held by an active booking must stay unavailable."""
    if not dates:
        return
    start, end = min(dates), max(dates) + timedelta(days=1)
    held = set()
    for booking in Booking.objects.active().filter(
        property=property_obj,
        check_in_date__lt=end,
        check_out_date__gt=start,
    ):
        held.update(get_dates_in_range(booking.check_in_date, booking.check_out_date))

    clashes = sorted(held.intersection(dates))
    if clashes:
        raise serializers.ValidationError(
            "Cannot make dates available while they are booked: "
            + ", ".join(d.isoformat() for d in clashes)
        )


# --------------------- Bulk Calendar Upsert ---------------------
class AvailabilityEntrySerializer(serializers.Serializer):
    date = serializers.DateField()
    is_available = serializers.BooleanField(required=False)
    is_gap_night = serializers.BooleanField(required=False)
    nightly_rate = serializers.IntegerField(min_value=0, required=False)
    gap_night_discount = serializers.IntegerField(min_value=0, max_value=100, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_date(self, value):
        if value < timezone.localdate():
            raise serializers.ValidationError(
                f"Cannot set availability for past date: {value.isoformat()}"
            )
        return value


class BulkAvailabilitySerializer(serializers.Serializer):
    dates = AvailabilityEntrySerializer(many=True, allow_empty=False)

    def validate_dates(self, entries):
        seen = [e["date"] for e in entries]
        if len(seen) != len(set(seen)):
            raise serializers.ValidationError("Duplicate dates are not allowed.")

        reopened = [e["date"] for e in entries if e.get("is_available")]
        property_obj = self.context.get("property")
        if property_obj and reopened:
            check_reopened_dates(property_obj, reopened)
        return entries

    def save(self, property_obj):
        """
        Upsert one row per entry. Existing rows only change the fields that
        were sent; new rows fall back to the property's base rate.
        """
        results = []
        for entry in self.validated_data["dates"]:
            fields = {k: v for k, v in entry.items() if k != "date"}
            record = PropertyAvailability.objects.filter(
                property=property_obj, date=entry["date"]
            ).first()

            if record:
                for attr, value in fields.items():
                    setattr(record, attr, value)
            else:
                record = PropertyAvailability(
                    property=property_obj,
                    date=entry["date"],
                    is_available=fields.get("is_available", True),
                    is_gap_night=fields.get("is_gap_night", False),
                    nightly_rate=fields.get("nightly_rate", property_obj.base_nightly_rate),
                    gap_night_discount=fields.get("gap_night_discount", 0),
                    notes=fields.get("notes") or None,
                )
            record.save()
            results.append(record)
        return results


# --------------------- Range Update ---------------------
class AvailabilityRangeSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    weekdays = serializers.ListField(
        child=serializers.ChoiceField(choices=list(WEEKDAY_MAP.keys())),
        required=False,
    )
    is_available = serializers.BooleanField(required=False)
    is_gap_night = serializers.BooleanField(required=False)
    nightly_rate = serializers.IntegerField(min_value=0, required=False)
    gap_night_discount = serializers.IntegerField(min_value=0, max_value=100, required=False)

    def validate(self, attrs):
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "end_date must be on or after start_date."})
        if attrs["start_date"] < timezone.localdate():
            raise serializers.ValidationError({"start_date": "Cannot edit past dates."})

        property_obj = self.context.get("property")
        if property_obj and attrs.get("is_available"):
            check_reopened_dates(property_obj, self.selected_dates(attrs))
        return attrs

    def selected_dates(self, attrs):
        selected_wds = {WEEKDAY_MAP[d] for d in attrs.get("weekdays", [])}
        # end_date is inclusive for calendar range edits
        dates = get_dates_in_range(attrs["start_date"], attrs["end_date"]) + [attrs["end_date"]]
        return [d for d in dates if not selected_wds or d.weekday() in selected_wds]

    def save(self, property_obj):
        start = self.validated_data["start_date"]
        end = self.validated_data["end_date"]
        changes = {
            k: self.validated_data[k]
            for k in ("is_available", "is_gap_night", "nightly_rate", "gap_night_discount")
            if k in self.validated_data
        }

        updated = 0
        for current in self.selected_dates(self.validated_data):
            record, _ = PropertyAvailability.objects.get_or_create(
                property=property_obj,
                date=current,
                defaults={"nightly_rate": property_obj.base_nightly_rate},
            )
            for attr, value in changes.items():
                setattr(record, attr, value)
            record.save()
            updated += 1

        return {
            "message": f"Successfully updated {updated} dates",
            "updated_count": updated,
            "date_range": f"{start} to {end}",
        }


# --------------------- Blocked Periods ---------------------
class BlockedPeriodSerializer(serializers.ModelSerializer):
    class Meta:
        model = BlockedPeriod
        fields = [
            "id",
            "property",
            "start_date",
            "end_date",
            "reason",
            "notes",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_by", "created_at", "updated_at"]

    def validate_property(self, value):
        request = self.context.get("request")
        if request and value.host_id != request.user.id:
            raise serializers.ValidationError("You do not own this property.")
        return value

    def validate(self, data):
        start = data.get("start_date", getattr(self.instance, "start_date", None))
        end = data.get("end_date", getattr(self.instance, "end_date", None))
        property_obj = data.get("property", getattr(self.instance, "property", None))

        if not property_obj:
            raise serializers.ValidationError("Property is required.")

        if start >= end:
            raise serializers.ValidationError("End date must be after start date.")

        # -------- VALIDATE AGAINST EXISTING BLOCKED PERIODS ----------
        overlapping_block = BlockedPeriod.objects.filter(
            property=property_obj,
            start_date__lt=end,
            end_date__gt=start,
        )

        # Exclude current instance when updating
        if self.instance:
            overlapping_block = overlapping_block.exclude(id=self.instance.id)

        if overlapping_block.exists():
            raise serializers.ValidationError(
                "These dates are already blocked for this property."
            )

        # -------- VALIDATE AGAINST BOOKINGS ----------
        overlapping_booking = Booking.objects.active().filter(
            property=property_obj,
            check_in_date__lt=end,
            check_out_date__gt=start,
        ).exists()

        if overlapping_booking:
            raise serializers.ValidationError(
                "Cannot block these dates because the property has active bookings."
            )

        return data


# --------------------- Gap Night Detection ---------------------
class GapNightDetectionSerializer(serializers.Serializer):
    apply = serializers.BooleanField(
        default=False,
        help_text="Flag detected nights as gap nights in the calendar",
    )
    gap_night_discount = serializers.IntegerField(
        min_value=0,
        max_value=100,
        default=settings.GAPNIGHT_DEFAULT_DETECTED_DISCOUNT,
    )


class DetectedGapNightSerializer(serializers.Serializer):
    date = serializers.DateField()
    gap_size = serializers.IntegerField()
