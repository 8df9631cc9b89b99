"""
Job serializers module.
"""
from .job_serializers import JobExecutionSerializer, JobMonitoringSerializer, TriggerJobSerializer

__all__ = [
    'JobExecutionSerializer',
    'JobMonitoringSerializer',
    'TriggerJobSerializer',
]
