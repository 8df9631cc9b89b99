"""
Request serializers for administrative point operations.
"""
from rest_framework import serializers


class AddPointsSerializer(serializers.Serializer):
    """
    Used for: POST /api/admin/points/add/
    """
    member_id = serializers.IntegerField(min_value=1)
    amount = serializers.IntegerField(min_value=1)
    description = serializers.CharField(max_length=500)
    expiration_days = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class DeductPointsSerializer(serializers.Serializer):
    """
    Used for: POST /api/admin/points/deduct/
    """
    member_id = serializers.IntegerField(min_value=1)
    amount = serializers.IntegerField(min_value=1)
    description = serializers.CharField(max_length=500)


class AdjustPointsSerializer(serializers.Serializer):
    """
    Used for: POST /api/admin/points/adjust/
    """
    member_id = serializers.IntegerField(min_value=1)
    delta = serializers.IntegerField()
    reason = serializers.CharField(max_length=400)
    expiration_days = serializers.IntegerField(min_value=1, required=False, allow_null=True)

    def validate_delta(self, value):
        if value == 0:
            raise serializers.ValidationError('Adjustment cannot be zero')
        return value


class ExpiringQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(min_value=1, max_value=3650, required=False)
