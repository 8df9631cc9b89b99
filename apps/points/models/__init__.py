"""
Points models module.

All models are exported from this module to maintain backward compatibility.
"""
from .batch import PointBatch, PointBatchQuerySet
from .allocation import PointAllocation

__all__ = [
    'PointBatch',
    'PointBatchQuerySet',
    'PointAllocation',
]
