"""
Points services module.

All services are exported from this module to maintain backward compatibility.
"""
from .balance_calculator import BalanceCalculator, PointBalance
from .consumption_engine import (
    BatchAllocation, ConsumptionEngine, ConsumptionResult, plan_allocations
)
from .expiration_sweeper import ExpirationSweeper, SweepResult
from .points_service import PointsService

__all__ = [
    'BalanceCalculator',
    'PointBalance',
    'BatchAllocation',
    'ConsumptionEngine',
    'ConsumptionResult',
    'plan_allocations',
    'ExpirationSweeper',
    'SweepResult',
    'PointsService',
]
