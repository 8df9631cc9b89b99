"""
Member-facing points views.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.common.utils import success_response, paginated_response
from ..serializers import (
    PointBalanceSerializer, PointBatchSerializer, ExpiringBatchSerializer, ExpiringQuerySerializer
)
from ..services import PointsService


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_points_balance(request):
    """Get the member's available balance and breakdown"""
    balance = PointsService.get_point_balance(request.user.id)
    return success_response(PointBalanceSerializer(balance.to_dict()).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_points_history(request):
    """Get the member's point movements, newest first"""
    history = PointsService.get_point_history(request.user.id, kind=request.query_params.get('kind'))
    return paginated_response(history, PointBatchSerializer, request)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_expiring_points(request):
    """Get the member's batches expiring within ?days= (default from settings)"""
    query = ExpiringQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    batches = PointsService.get_expiring_points(request.user.id, days=query.validated_data.get('days'))
    data = ExpiringBatchSerializer(batches, many=True).data
    return success_response({
        'total_points': sum(item['remaining'] for item in data),
        'batches': data,
    })
