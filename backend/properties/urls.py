from django.urls import path
from .views import (
    PropertyListCreateView,
    PropertyRetrieveUpdateDestroyView,
    PublicPropertyListView,
    PublicPropertyDetailView,
)

urlpatterns = [
    # Host properties
    path("properties/", PropertyListCreateView.as_view(), name="property-list-create"),
    path(
        "properties/<int:pk>/",
        PropertyRetrieveUpdateDestroyView.as_view(),
        name="property-detail",
    ),
    # Public stays
    path("stays/", PublicPropertyListView.as_view(), name="stay-list"),
    path("stays/<int:pk>/", PublicPropertyDetailView.as_view(), name="stay-detail"),
]
