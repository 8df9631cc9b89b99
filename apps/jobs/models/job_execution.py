import uuid

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class JobExecution(models.Model):
    """One run of a background job, kept for monitoring"""

    STATUS_RUNNING = 'running'
    STATUS_COMPLETED = 'completed'
    STATUS_FAILED = 'failed'

    STATUS_CHOICES = [
        (STATUS_RUNNING, 'Running'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_FAILED, 'Failed'),
    ]

    TRIGGER_CHOICES = [
        ('scheduled', 'Scheduled'),
        ('manual', 'Manual'),
    ]

    job_name = models.CharField(max_length=100)
    execution_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_RUNNING)
    trigger = models.CharField(max_length=10, choices=TRIGGER_CHOICES, default='manual')
    attempts = models.PositiveIntegerField(default=0)
    started_at = models.DateTimeField()
    finished_at = models.DateTimeField(null=True, blank=True)
    duration_ms = models.PositiveIntegerField(null=True, blank=True)
    result = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    error = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'job_executions'
        ordering = ['-started_at', '-id']
        indexes = [
            models.Index(fields=['job_name', 'started_at'], name='job_name_started_idx'),
            models.Index(fields=['job_name', 'status'], name='job_name_status_idx'),
        ]

    def __str__(self):
        return f"{self.job_name} {self.execution_id} ({self.status})"
