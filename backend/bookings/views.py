# bookings/views.py
import logging

from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import viewsets, filters, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import (
    extend_schema,
    OpenApiResponse,
    OpenApiParameter,
    OpenApiExample,
)

from pricing.exceptions import NotFoundError, InvalidRangeError
from rewards.utils import award_booking_points
from .models import Booking
from .serializers import BookingSerializer, BookingCreateSerializer
from .utils import release_booking

logger = logging.getLogger(__name__)


class BookingViewSet(viewsets.ModelViewSet):
    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "post", "delete", "head", "options"]

    # Filtering & search
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = [
        "property",
        "status",
        "check_in_date",
        "check_out_date",
    ]
    search_fields = ["guest_first_name", "guest_last_name", "guest_email"]

    def get_queryset(self):
        user = self.request.user
        return Booking.objects.filter(
            Q(user=user) | Q(host=user)
        ).select_related("property")

    def get_serializer_class(self):
        if self.action == "create":
            return BookingCreateSerializer
        return BookingSerializer

    @extend_schema(
        tags=["bookings"],
        summary="Request a booking",
        description="Prices are recomputed server-side from the availability calendar; "
                    "any client-side estimate is ignored.",
        request=BookingCreateSerializer,
        responses={
            201: BookingSerializer,
            400: OpenApiResponse(description="Validation error or dates unavailable"),
            404: OpenApiResponse(description="Availability missing"),
        },
        examples=[
            OpenApiExample(
                "Two gap nights",
                value={
                    "property": 12,
                    "check_in_date": "2026-03-01",
                    "check_out_date": "2026-03-03",
                    "guests": 2,
                    "guest_first_name": "Sam",
                    "guest_last_name": "Lee",
                    "guest_email": "sam@example.com",
                    "apply_credit": True,
                },
                request_only=True,
            )
        ],
    )
    def create(self, request, *args, **kwargs):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            booking = serializer.save(user=request.user)
        except NotFoundError as e:
            return Response({"success": False, "message": str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidRangeError as e:
            logger.warning(f"Booking rejected for user {request.user.id}: {e}")
            return Response({"success": False, "message": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"Booking {booking.uid} created: {booking.total_price} {booking.currency}")
        return Response(
            {
                "booking": BookingSerializer(booking).data,
                "pricing": serializer.quote.as_dict(),
                "message": "Booking request submitted! The host will review your request.",
            },
            status=status.HTTP_201_CREATED,
        )

    def perform_destroy(self, instance):
        # pre_delete signal releases nights and refunds credit
        instance.delete()

    # -------------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------------
    def _transition(self, booking, new_status):
        with transaction.atomic():
            if new_status in (Booking.Status.CANCELLED, Booking.Status.DECLINED):
                release_booking(booking)
            booking.status = new_status
            booking.save(update_fields=["status", "updated_at"])
            if new_status == Booking.Status.CONFIRMED:
                award_booking_points(booking)
        logger.info(f"Booking {booking.uid} → {new_status}")
        return Response(BookingSerializer(booking).data)

    @extend_schema(tags=["bookings"], summary="Host approves a pending booking", request=None)
    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):
        booking = self.get_object()
        if booking.host_id != request.user.id:
            return Response({"detail": "Only the host can approve."}, status=status.HTTP_403_FORBIDDEN)
        if booking.status != Booking.Status.PENDING_APPROVAL:
            return Response({"detail": "Only pending bookings can be approved."}, status=status.HTTP_400_BAD_REQUEST)
        return self._transition(booking, Booking.Status.CONFIRMED)

    @extend_schema(tags=["bookings"], summary="Host declines a pending booking", request=None)
    @action(detail=True, methods=["post"], url_path="decline")
    def decline(self, request, pk=None):
        booking = self.get_object()
        if booking.host_id != request.user.id:
            return Response({"detail": "Only the host can decline."}, status=status.HTTP_403_FORBIDDEN)
        if booking.status != Booking.Status.PENDING_APPROVAL:
            return Response({"detail": "Only pending bookings can be declined."}, status=status.HTTP_400_BAD_REQUEST)
        return self._transition(booking, Booking.Status.DECLINED)

    @extend_schema(tags=["bookings"], summary="Cancel a booking", request=None)
    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        booking = self.get_object()
        if not booking.is_holding():
            return Response({"detail": "Booking is already closed."}, status=status.HTTP_400_BAD_REQUEST)
        return self._transition(booking, Booking.Status.CANCELLED)

    @extend_schema(
        tags=["bookings"],
        summary="Get booking by UUID",
        description="Fetch booking details using public booking UUID",
        parameters=[
            OpenApiParameter(
                name="uid",
                type=str,
                location=OpenApiParameter.PATH,
                description="Booking UUID"
            )
        ]
    )
    @action(
        detail=False,
        methods=["get"],
        url_path="by-uid/(?P<uid>[0-9a-fA-F-]+)",
        permission_classes=[AllowAny],  # guest-facing
    )
    def get_by_uid(self, request, uid=None):
        booking = get_object_or_404(
            Booking.objects.select_related("property"),
            uid=uid
        )

        serializer = BookingSerializer(booking)
        return Response(serializer.data)
