"""
Member privilege grant serializers.
"""
from rest_framework import serializers
from ..models import PrivilegeGrant


class PrivilegeGrantSerializer(serializers.ModelSerializer):
    """
    Serializer for a member's privilege grants.
    Used for: GET /api/privileges/mine/
    """
    privilege_id = serializers.IntegerField(read_only=True)
    privilege_name = serializers.CharField(source='privilege.name', read_only=True)
    privilege_description = serializers.CharField(source='privilege.description', read_only=True)
    is_expired = serializers.BooleanField(read_only=True)
    is_active = serializers.SerializerMethodField()
    days_remaining = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = PrivilegeGrant
        fields = [
            'id', 'privilege_id', 'privilege_name', 'privilege_description', 'status',
            'granted_at', 'expires_at', 'used_at', 'points_spent',
            'is_active', 'is_expired', 'days_remaining'
        ]
        read_only_fields = fields

    def get_is_active(self, obj):
        return obj.is_currently_active()


class RevokeGrantSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
