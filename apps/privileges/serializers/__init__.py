"""
Privilege serializers module.
"""
from .privilege_serializers import PrivilegeSerializer, PrivilegeWriteSerializer
from .grant_serializers import PrivilegeGrantSerializer, RevokeGrantSerializer

__all__ = [
    'PrivilegeSerializer',
    'PrivilegeWriteSerializer',
    'PrivilegeGrantSerializer',
    'RevokeGrantSerializer',
]
