import logging

from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse, OpenApiExample

from availability.models import PropertyAvailability
from properties.models import Property
from rewards.utils import get_credit_balance
from .exceptions import NotFoundError, InvalidRangeError
from .quotes import get_price_quote, estimate_price
from .serializers import (
    PriceQuoteRequestSerializer,
    PriceQuoteSerializer,
    GapNightRangeQuerySerializer,
    GapNightRangeSerializer,
)
from .windows import generate_gap_night_ranges

logger = logging.getLogger(__name__)


# -------------------------
# Gap-night ranges
# -------------------------
@extend_schema(
    tags=["pricing"],
    summary="List bookable gap-night ranges for a property",
    description="Groups upcoming gap nights into consecutive runs and returns every window of the "
                "requested length, with an advisory price estimate.",
    parameters=[
        OpenApiParameter("nights", type=int, location=OpenApiParameter.QUERY, required=False,
                         default=1, enum=[1, 2, 3]),
    ],
    responses={200: GapNightRangeSerializer(many=True), 404: OpenApiResponse(description="Property not found")},
)
class GapNightRangesView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, property_id):
        query = GapNightRangeQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

        property_obj = get_object_or_404(Property.objects.bookable(), pk=property_id)
        gap_nights = PropertyAvailability.objects.bookable().filter(
            property=property_obj,
            is_gap_night=True,
            date__gte=timezone.localdate(),
        ).order_by("date")

        ranges = generate_gap_night_ranges(list(gap_nights), query.validated_data["nights"])
        data = [
            {**vars(r), "estimate": estimate_price(r, property_obj)}
            for r in ranges
        ]
        return Response(GapNightRangeSerializer(data, many=True).data)


# -------------------------
# Authoritative price quote
# -------------------------
@extend_schema(
    tags=["pricing"],
    summary="Get the authoritative price quote for a stay",
    description="Recomputes nightly totals, gap-night discount, fees, credit and processing "
                "surcharge from the availability calendar.",
    request=PriceQuoteRequestSerializer,
    responses={
        200: PriceQuoteSerializer,
        400: OpenApiResponse(description="Invalid or unavailable range"),
        404: OpenApiResponse(description="Property or availability not found"),
    },
    examples=[
        OpenApiExample(
            "Two nights",
            value={"property_id": 12, "check_in_date": "2026-03-01", "check_out_date": "2026-03-03"},
            request_only=True,
        )
    ],
)
class PriceQuoteView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = PriceQuoteRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        credit_balance = get_credit_balance(request.user) if data["apply_credit"] else 0

        try:
            quote = get_price_quote(
                data["property_id"],
                data["check_in_date"],
                data["check_out_date"],
                credit_balance,
            )
        except NotFoundError as e:
            return Response({"success": False, "message": str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidRangeError as e:
            logger.warning(f"Quote rejected for property {data['property_id']}: {e}")
            return Response({"success": False, "message": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PriceQuoteSerializer(quote.as_dict()).data)
