"""
Administrative points views.
"""
from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.views import APIView

from apps.common.utils import success_response, paginated_response
from ..serializers import (
    AddPointsSerializer, DeductPointsSerializer, AdjustPointsSerializer,
    PointBalanceSerializer, PointBatchSerializer, ExpiringBatchSerializer, ExpiringQuerySerializer
)
from ..services import PointsService, ConsumptionResult


class AdminAddPointsView(APIView):
    """Credit points to a member"""
    permission_classes = [IsAdminUser]

    def post(self, request):
        serializer = AddPointsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        batch = PointsService.add_points(
            data['member_id'],
            data['amount'],
            data['description'],
            expiration_days=data.get('expiration_days'),
            actor_type='ADMIN',
            actor_id=request.user.id,
        )
        return success_response(
            PointBatchSerializer(batch).data,
            message='Points added successfully',
            status_code=status.HTTP_201_CREATED,
        )


class AdminDeductPointsView(APIView):
    """Deduct points from a member, oldest batches first"""
    permission_classes = [IsAdminUser]

    def post(self, request):
        serializer = DeductPointsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = PointsService.deduct_points(
            data['member_id'],
            data['amount'],
            data['description'],
            actor_type='ADMIN',
            actor_id=request.user.id,
        )
        return success_response(result.to_dict(), message='Points deducted successfully')


class AdminAdjustPointsView(APIView):
    """Signed manual adjustment"""
    permission_classes = [IsAdminUser]

    def post(self, request):
        serializer = AdjustPointsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        outcome = PointsService.adjust_points(
            data['member_id'],
            data['delta'],
            data['reason'],
            expiration_days=data.get('expiration_days'),
            actor_id=request.user.id,
        )
        if isinstance(outcome, ConsumptionResult):
            payload = outcome.to_dict()
        else:
            payload = PointBatchSerializer(outcome).data
        return success_response(payload, message='Points adjusted successfully')


class AdminMemberBalanceView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request, member_id):
        balance = PointsService.get_point_balance(member_id)
        return success_response(PointBalanceSerializer(balance.to_dict()).data)


class AdminMemberHistoryView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request, member_id):
        history = PointsService.get_point_history(member_id, kind=request.query_params.get('kind'))
        return paginated_response(history, PointBatchSerializer, request)


class AdminExpiringPointsView(APIView):
    """Batches expiring soon across all members"""
    permission_classes = [IsAdminUser]

    def get(self, request):
        query = ExpiringQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        batches = PointsService.get_expiring_points(days=query.validated_data.get('days'))
        return paginated_response(batches, ExpiringBatchSerializer, request)
