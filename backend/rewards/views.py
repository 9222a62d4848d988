from django.db import transaction
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiResponse

from .models import UserRewards
from .serializers import UserRewardsSerializer, RedeemPointsSerializer
from .utils import redeem_points


@extend_schema(
    tags=["rewards"],
    summary="Get the current user's rewards and credit balance",
    responses={200: UserRewardsSerializer},
)
class MyRewardsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        rewards, _ = UserRewards.objects.get_or_create(user=request.user)
        return Response(UserRewardsSerializer(rewards).data)


@extend_schema(
    tags=["rewards"],
    summary="Redeem points for account credit",
    request=RedeemPointsSerializer,
    responses={200: UserRewardsSerializer, 400: OpenApiResponse(description="Validation errors")},
)
class RedeemPointsView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = RedeemPointsSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            with transaction.atomic():
                rewards = redeem_points(request.user, serializer.validated_data["points"])
        except ValueError as e:
            return Response(
                {"success": False, "message": str(e)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(UserRewardsSerializer(rewards).data)
