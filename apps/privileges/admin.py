from django.contrib import admin
from .models import Privilege, PrivilegeGrant


@admin.register(Privilege)
class PrivilegeAdmin(admin.ModelAdmin):
    list_display = ['name', 'point_cost', 'validity_days', 'is_active', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['name', 'description']
    list_editable = ['is_active']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(PrivilegeGrant)
class PrivilegeGrantAdmin(admin.ModelAdmin):
    list_display = ['member', 'privilege', 'status', 'points_spent', 'granted_at', 'expires_at', 'used_at']
    list_filter = ['status', 'granted_at', 'expires_at']
    search_fields = ['member__username', 'privilege__name']
    readonly_fields = [field.name for field in PrivilegeGrant._meta.fields]

    def has_add_permission(self, request):
        return False  # Grants only come from a successful exchange
