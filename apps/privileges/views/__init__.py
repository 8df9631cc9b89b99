"""
Privilege views module.
"""
from .member_views import PrivilegeListView, MyPrivilegesView, ExchangePrivilegeView, UseGrantView
from .admin_views import (
    AdminPrivilegeListView, AdminPrivilegeDetailView, AdminPrivilegeActivationView,
    AdminMemberPrivilegesView, AdminRevokeGrantView
)

__all__ = [
    'PrivilegeListView',
    'MyPrivilegesView',
    'ExchangePrivilegeView',
    'UseGrantView',
    'AdminPrivilegeListView',
    'AdminPrivilegeDetailView',
    'AdminPrivilegeActivationView',
    'AdminMemberPrivilegesView',
    'AdminRevokeGrantView',
]
