"""
Point batch serializers for history and expiry listings.
"""
from rest_framework import serializers
from ..models import PointBatch


class PointBatchSerializer(serializers.ModelSerializer):
    """
    Serializer for point history - one row per movement.
    Used for: GET /api/points/history/
    """
    kind_display = serializers.CharField(source='get_kind_display', read_only=True)
    signed_amount = serializers.IntegerField(source='amount', read_only=True)

    class Meta:
        model = PointBatch
        fields = [
            'id', 'kind', 'kind_display', 'signed_amount', 'points', 'remaining',
            'description', 'expires_at', 'is_expired', 'created_at'
        ]
        read_only_fields = fields


class ExpiringBatchSerializer(serializers.ModelSerializer):
    """Serializer for batches about to expire"""
    member_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = PointBatch
        fields = [
            'id', 'member_id', 'amount', 'remaining', 'description',
            'expires_at', 'created_at', 'is_expiring_soon'
        ]
        read_only_fields = fields


class PointBalanceSerializer(serializers.Serializer):
    """Serializer for the balance breakdown response"""
    member_id = serializers.IntegerField()
    available_balance = serializers.IntegerField()
    total_earned = serializers.IntegerField()
    total_deducted = serializers.IntegerField()
    total_expired = serializers.IntegerField()
    total_exchanged = serializers.IntegerField()
    last_updated = serializers.DateTimeField(allow_null=True)
