"""
Job models module.
"""
from .job_execution import JobExecution

__all__ = [
    'JobExecution',
]
