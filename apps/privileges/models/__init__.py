"""
Privilege models module.
"""
from .privilege import Privilege, MAX_VALIDITY_DAYS
from .grant import PrivilegeGrant

__all__ = [
    'Privilege',
    'PrivilegeGrant',
    'MAX_VALIDITY_DAYS',
]
