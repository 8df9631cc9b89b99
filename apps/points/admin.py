from django.contrib import admin
from .models import PointBatch, PointAllocation


class PointAllocationInline(admin.TabularInline):
    model = PointAllocation
    fk_name = 'debit'
    extra = 0
    readonly_fields = ['batch', 'amount', 'created_at']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(PointBatch)
class PointBatchAdmin(admin.ModelAdmin):
    list_display = ['member', 'kind', 'amount', 'remaining', 'expires_at', 'is_expired', 'created_at']
    list_filter = ['kind', 'is_expired', 'created_at', 'expires_at']
    search_fields = ['member__username', 'member__phone', 'description']
    readonly_fields = [field.name for field in PointBatch._meta.fields]
    inlines = [PointAllocationInline]

    def has_add_permission(self, request):
        return False  # Batches are written by the ledger services

    def has_change_permission(self, request, obj=None):
        return False  # Ledger rows are never edited by hand

    def has_delete_permission(self, request, obj=None):
        return False
