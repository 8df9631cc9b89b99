"""
Points views module.

All views are exported from this module to maintain backward compatibility.
"""
from .member_views import get_points_balance, get_points_history, get_expiring_points
from .admin_views import (
    AdminAddPointsView, AdminDeductPointsView, AdminAdjustPointsView,
    AdminMemberBalanceView, AdminMemberHistoryView, AdminExpiringPointsView
)

__all__ = [
    'get_points_balance',
    'get_points_history',
    'get_expiring_points',
    'AdminAddPointsView',
    'AdminDeductPointsView',
    'AdminAdjustPointsView',
    'AdminMemberBalanceView',
    'AdminMemberHistoryView',
    'AdminExpiringPointsView',
]
