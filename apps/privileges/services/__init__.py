"""
Privilege services module.
"""
from .privilege_service import PrivilegeService
from .exchange_service import ExchangeService, ExchangeResult

__all__ = [
    'PrivilegeService',
    'ExchangeService',
    'ExchangeResult',
]
