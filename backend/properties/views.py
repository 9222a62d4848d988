from django.conf import settings
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import generics
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import (
    extend_schema,
    OpenApiResponse,
    OpenApiParameter,
    OpenApiExample,
)

from availability.models import PropertyAvailability
from pricing.scoring import calculate_deal_score
from pricing.windows import discounted_rate, summarize_gap_nights
from .models import Property
from .serializers import PropertySerializer, PublicPropertySerializer


def attach_gap_nights(property_obj):
    """Decorate a property with its upcoming gap nights, summary and deal score."""
    gap_nights = list(
        PropertyAvailability.objects.bookable().filter(
            property=property_obj,
            is_gap_night=True,
            date__gte=timezone.localdate(),
        ).order_by("date")[: settings.GAPNIGHT_LISTING_GAP_NIGHTS_LIMIT]
    )
    property_obj.gap_nights = [
        {
            "date": gn.date,
            "nightly_rate": gn.nightly_rate,
            "gap_night_discount": gn.gap_night_discount,
            "discounted_rate": discounted_rate(gn.nightly_rate, gn.gap_night_discount),
        }
        for gn in gap_nights
    ]
    property_obj.gap_night_summary = summarize_gap_nights(gap_nights)
    property_obj.deal_score = calculate_deal_score(property_obj, gap_nights)
    return property_obj


@extend_schema(
    tags=["property"],
    summary="List and create the host's properties",
    responses={
        200: PropertySerializer(many=True),
        201: PropertySerializer,
        403: OpenApiResponse(description="Forbidden"),
    },
    examples=[
        OpenApiExample(
            name="Create Property",
            value={
                "title": "Bondi beach studio",
                "city": "Sydney",
                "property_type": "studio",
                "max_guests": 2,
                "base_nightly_rate": 18000,
                "cleaning_fee": 4500,
                "service_fee": 0,
                "min_nights": 1,
                "instant_book": True,
            },
            request_only=True,
        )
    ],
)
class PropertyListCreateView(generics.ListCreateAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PropertySerializer

    def get_queryset(self):
        # Only show properties the user hosts
        return Property.objects.filter(host=self.request.user)

    def perform_create(self, serializer):
        serializer.save(host=self.request.user)


@extend_schema(
    tags=["property"],
    summary="Retrieve, update, and delete a property",
    responses={
        200: PropertySerializer,
        204: None,
        403: OpenApiResponse(description="Forbidden"),
    },
)
class PropertyRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PropertySerializer

    def get_queryset(self):
        # Only allow operations on the user's own properties
        return Property.objects.filter(host=self.request.user)


@extend_schema(
    tags=["stays"],
    summary="Public listing of approved properties with gap nights",
    parameters=[
        OpenApiParameter("city", type=str, location=OpenApiParameter.QUERY, required=False),
        OpenApiParameter("type", type=str, location=OpenApiParameter.QUERY, required=False),
        OpenApiParameter("guests", type=int, location=OpenApiParameter.QUERY, required=False),
    ],
    responses={200: PublicPropertySerializer(many=True)},
)
class PublicPropertyListView(generics.ListAPIView):
    permission_classes = [AllowAny]
    serializer_class = PublicPropertySerializer

    def get_queryset(self):
        qs = Property.objects.bookable()
        params = self.request.query_params

        if params.get("city"):
            qs = qs.filter(city__icontains=params["city"])
        if params.get("type"):
            qs = qs.filter(property_type=params["type"])
        if params.get("guests", "").isdigit():
            qs = qs.filter(max_guests__gte=int(params["guests"]))
        return qs

    def list(self, request, *args, **kwargs):
        properties = [attach_gap_nights(p) for p in self.get_queryset()]
        return Response(self.get_serializer(properties, many=True).data)


@extend_schema(
    tags=["stays"],
    summary="Public property detail with gap nights",
    responses={200: PublicPropertySerializer, 404: OpenApiResponse(description="Property not found")},
)
class PublicPropertyDetailView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, pk):
        property_obj = get_object_or_404(Property.objects.bookable(), pk=pk)
        return Response(PublicPropertySerializer(attach_gap_nights(property_obj)).data)
