from django.urls import path
from .views import GapNightRangesView, PriceQuoteView

urlpatterns = [
    path("quote/", PriceQuoteView.as_view(), name="price-quote"),
    path(
        "properties/<int:property_id>/gap-night-ranges/",
        GapNightRangesView.as_view(),
        name="gap-night-ranges",
    ),
]
