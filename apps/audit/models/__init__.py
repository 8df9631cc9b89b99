"""
Audit models module.
"""
from .audit_log import AuditLog
from .transaction_history import TransactionHistory

__all__ = [
    'AuditLog',
    'TransactionHistory',
]
