"""
Job services module.
"""
from .job_runner import JobRunner

__all__ = [
    'JobRunner',
]
