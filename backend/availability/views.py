import logging

from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import generics, status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse, OpenApiExample

from properties.models import Property
from bookings.models import Booking
from .models import PropertyAvailability, BlockedPeriod
from .serializers import (
    PropertyAvailabilitySerializer,
    BulkAvailabilitySerializer,
    AvailabilityRangeSerializer,
    BlockedPeriodSerializer,
    GapNightDetectionSerializer,
    DetectedGapNightSerializer,
)
from .utils import detect_gap_nights

logger = logging.getLogger(__name__)


def get_owned_property(request, property_id):
    return get_object_or_404(Property, pk=property_id, host=request.user)


# -------------------------
# Calendar (list + bulk upsert)
# -------------------------
class PropertyAvailabilityView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["availability"],
        summary="List a property's availability calendar",
        parameters=[
            OpenApiParameter("start_date", type=str, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter("end_date", type=str, location=OpenApiParameter.QUERY, required=False),
        ],
        responses={200: PropertyAvailabilitySerializer(many=True), 404: OpenApiResponse(description="Property not found")},
    )
    def get(self, request, property_id):
        property_obj = get_owned_property(request, property_id)
        qs = PropertyAvailability.objects.filter(property=property_obj).order_by("date")

        start = request.query_params.get("start_date")
        end = request.query_params.get("end_date")
        if start:
            qs = qs.filter(date__gte=start)
        if end:
            qs = qs.filter(date__lte=end)

        return Response(PropertyAvailabilitySerializer(qs, many=True).data)

    @extend_schema(
        tags=["availability"],
        summary="Set availability (bulk upsert)",
        request=BulkAvailabilitySerializer,
        responses={200: PropertyAvailabilitySerializer(many=True), 400: OpenApiResponse(description="Validation errors")},
        examples=[
            OpenApiExample(
                "Mark a gap night",
                value={
                    "dates": [
                        {"date": "2026-03-01", "is_gap_night": True, "nightly_rate": 18000, "gap_night_discount": 25},
                        {"date": "2026-03-02", "is_available": False},
                    ]
                },
                request_only=True,
            )
        ],
    )
    def post(self, request, property_id):
        property_obj = get_owned_property(request, property_id)
        serializer = BulkAvailabilitySerializer(data=request.data, context={"property": property_obj})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            records = serializer.save(property_obj)

        logger.info(f"Updated {len(records)} availability dates for property {property_obj.id}")
        return Response(
            {
                "availability": PropertyAvailabilitySerializer(records, many=True).data,
                "message": f"{len(records)} dates updated",
            },
            status=status.HTTP_200_OK,
        )


class AvailabilityRangeUpdateView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["availability"],
        summary="Apply a change to a date range",
        request=AvailabilityRangeSerializer,
        responses={200: OpenApiResponse(description="Dates updated successfully"),
                   400: OpenApiResponse(description="Validation errors")},
    )
    def post(self, request, property_id):
        property_obj = get_owned_property(request, property_id)
        serializer = AvailabilityRangeSerializer(data=request.data, context={"property": property_obj})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            with transaction.atomic():
                result = serializer.save(property_obj)
            return Response(result, status=status.HTTP_200_OK)
        except Exception as e:
            logger.error(f"Range update failed for property {property_obj.id}: {e}")
            return Response(
                {"success": False, "message": "Failed to apply range change", "error": str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )


class PropertyAvailabilityDeleteView(generics.DestroyAPIView):
    """
    DELETE → Remove a single calendar entry.
    """
    serializer_class = PropertyAvailabilitySerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return PropertyAvailability.objects.filter(
            property_id=self.kwargs["property_id"],
            property__host=self.request.user,
        )


# -------------------------
# Blocked periods
# -------------------------
class BlockedPeriodCreateView(generics.CreateAPIView):
    """
    Create a blocked period.
    Includes validation:
    - Cannot overlap existing blocked periods
    - Cannot overlap bookings
    """
    serializer_class = BlockedPeriodSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return BlockedPeriod.objects.filter(property__host=self.request.user)

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)


class BlockedPeriodRetrieveView(generics.RetrieveAPIView):
    """
    GET → Retrieve single blocked period by ID
    """
    serializer_class = BlockedPeriodSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return BlockedPeriod.objects.filter(property__host=self.request.user)


class BlockedPeriodListView(generics.ListAPIView):
    """
    List the host's blocked periods for filtering on the calendar.
    """
    serializer_class = BlockedPeriodSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["property"]

    def get_queryset(self):
        return BlockedPeriod.objects.filter(property__host=self.request.user).order_by("-start_date")


class BlockedPeriodDetailView(generics.DestroyAPIView):
    """
    DELETE → Unblock dates
    """
    serializer_class = BlockedPeriodSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return BlockedPeriod.objects.filter(property__host=self.request.user)


class BlockedPeriodUpdateView(generics.UpdateAPIView):
    """
    UPDATE → Edit blocked dates or other fields.
    Supports PUT & PATCH.
    """
    serializer_class = BlockedPeriodSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return BlockedPeriod.objects.filter(property__host=self.request.user)


# -------------------------
# Orphan night detection
# -------------------------
@extend_schema(
    tags=["availability"],
    summary="Detect orphan nights between blocked periods and bookings",
    description="Finds 1-2 night holes between future blocked ranges. With apply=true the matching "
                "calendar rows are flagged as gap nights with the given discount.",
    request=GapNightDetectionSerializer,
    responses={200: DetectedGapNightSerializer(many=True)},
)
class GapNightDetectionView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, property_id):
        property_obj = get_owned_property(request, property_id)
        serializer = GapNightDetectionSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        today = timezone.localdate()
        blocked = [
            (p.start_date, p.end_date)
            for p in BlockedPeriod.objects.filter(property=property_obj, end_date__gte=today)
        ]
        blocked += [
            (b.check_in_date, b.check_out_date)
            for b in Booking.objects.active().filter(property=property_obj, check_out_date__gte=today)
        ]
        gap_nights = [gn for gn in detect_gap_nights(blocked) if gn["date"] >= today]

        flagged = 0
        if serializer.validated_data["apply"] and gap_nights:
            discount = serializer.validated_data["gap_night_discount"]
            with transaction.atomic():
                for gn in gap_nights:
                    record, _ = PropertyAvailability.objects.get_or_create(
                        property=property_obj,
                        date=gn["date"],
                        defaults={"nightly_rate": property_obj.base_nightly_rate},
                    )
                    if not record.is_available:
                        continue
                    record.is_gap_night = True
                    record.gap_night_discount = discount
                    record.save()
                    flagged += 1

        logger.info(
            f"Detected {len(gap_nights)} gap nights for property {property_obj.id} "
            f"({flagged} flagged)"
        )
        return Response({
            "detected_gap_nights": DetectedGapNightSerializer(gap_nights, many=True).data,
            "flagged_count": flagged,
            "message": f"Found {len(blocked)} blocked period(s) and {len(gap_nights)} potential gap night(s)",
        })
