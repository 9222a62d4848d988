from django.urls import path
from .views import MyRewardsView, RedeemPointsView

urlpatterns = [
    path("", MyRewardsView.as_view(), name="my-rewards"),
    path("redeem/", RedeemPointsView.as_view(), name="redeem-points"),
]
