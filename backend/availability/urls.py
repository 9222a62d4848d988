from django.urls import path
from .views import (
    PropertyAvailabilityView,
    AvailabilityRangeUpdateView,
    PropertyAvailabilityDeleteView,
    GapNightDetectionView,
    BlockedPeriodCreateView,
    BlockedPeriodListView,
    BlockedPeriodDetailView,
    BlockedPeriodUpdateView,
    BlockedPeriodRetrieveView,
)

urlpatterns = [
    # Calendar
    path("properties/<int:property_id>/", PropertyAvailabilityView.as_view(), name="property-availability"),
    path("properties/<int:property_id>/range/", AvailabilityRangeUpdateView.as_view(), name="availability-range-update"),
    path("properties/<int:property_id>/<int:pk>/", PropertyAvailabilityDeleteView.as_view(), name="availability-delete"),
    path(
        "properties/<int:property_id>/detect-gap-nights/",
        GapNightDetectionView.as_view(),
        name="detect-gap-nights",
    ),

    # Blocked periods
    path("blocked/", BlockedPeriodListView.as_view(), name="blocked-period-list"),
    path("blocked/create/", BlockedPeriodCreateView.as_view(), name="blocked-period-create"),
    path("blocked/<int:pk>/detail/", BlockedPeriodRetrieveView.as_view(), name="blocked-period-retrieve"),
    path("blocked/<int:pk>/edit/", BlockedPeriodUpdateView.as_view(), name="blocked-period-update"),
    path("blocked/<int:pk>/", BlockedPeriodDetailView.as_view(), name="blocked-period-detail"),
]
