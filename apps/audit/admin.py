from django.contrib import admin

from .models import AuditLog, TransactionHistory


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['action', 'entity_type', 'entity_id', 'actor_type', 'actor_id', 'created_at']
    list_filter = ['action', 'entity_type', 'actor_type', 'created_at']
    search_fields = ['entity_id', 'trace_id']
    readonly_fields = [field.name for field in AuditLog._meta.fields]

    def has_add_permission(self, request):
        return False  # Audit entries are written by the ledger

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(TransactionHistory)
class TransactionHistoryAdmin(admin.ModelAdmin):
    list_display = ['member', 'transaction_type', 'amount', 'balance_before', 'balance_after', 'created_at']
    list_filter = ['transaction_type', 'created_at']
    search_fields = ['member__username', 'description']
    readonly_fields = [field.name for field in TransactionHistory._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
