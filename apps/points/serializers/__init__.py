"""
Points serializers module.

All serializers are exported from this module to maintain backward compatibility.
"""
from .batch_serializers import PointBatchSerializer, ExpiringBatchSerializer, PointBalanceSerializer
from .operation_serializers import (
    AddPointsSerializer, DeductPointsSerializer, AdjustPointsSerializer,
    ExpiringQuerySerializer
)

__all__ = [
    'PointBatchSerializer',
    'ExpiringBatchSerializer',
    'PointBalanceSerializer',
    'AddPointsSerializer',
    'DeductPointsSerializer',
    'AdjustPointsSerializer',
    'ExpiringQuerySerializer',
]
