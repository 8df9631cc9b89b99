"""
Privilege catalogue serializers.
"""
from rest_framework import serializers
from ..models import MAX_VALIDITY_DAYS, Privilege


class PrivilegeSerializer(serializers.ModelSerializer):
    """
    Serializer for privilege catalogue entries.
    Used for: GET /api/privileges/
    """

    class Meta:
        model = Privilege
        fields = [
            'id', 'name', 'description', 'point_cost', 'validity_days',
            'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class PrivilegeWriteSerializer(serializers.Serializer):
    """
    Request body for creating or updating a privilege.
    Used for: POST /api/admin/privileges/, PATCH /api/admin/privileges/{id}/
    """
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=1000)
    point_cost = serializers.IntegerField(min_value=0)
    validity_days = serializers.IntegerField(
        min_value=1, max_value=MAX_VALIDITY_DAYS, required=False, allow_null=True
    )
    is_active = serializers.BooleanField(required=False, default=True)
