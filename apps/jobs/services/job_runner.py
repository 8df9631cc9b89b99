"""
Job runner: single-flight execution with retry, backoff and history.
"""
import logging
import threading
import time

from django.db.models import Avg, Count, Q
from django.utils import timezone

from apps.common.conf import loyalty_setting
from apps.common.exceptions import JobAlreadyRunning
from ..models import JobExecution
from ..registry import get_job

logger = logging.getLogger(__name__)


class JobRunner:
    """Runs registered jobs and records every execution"""

    _running = set()
    _lock = threading.Lock()

    @staticmethod
    def backoff_delay(attempt, base=None, maximum=None):
        """Seconds to wait after failed ``attempt``: min(base * 2^(attempt-1), maximum)"""
        base = loyalty_setting('JOB_RETRY_BASE_DELAY') if base is None else base
        maximum = loyalty_setting('JOB_RETRY_MAX_DELAY') if maximum is None else maximum
        return min(base * 2 ** (attempt - 1), maximum)

    @classmethod
    def is_running(cls, name):
        with cls._lock:
            return name in cls._running

    @classmethod
    def _acquire(cls, name):
        with cls._lock:
            if name in cls._running:
                raise JobAlreadyRunning(name)
            cls._running.add(name)

    @classmethod
    def _release(cls, name):
        with cls._lock:
            cls._running.discard(name)

    @classmethod
    def run(cls, name, trigger='manual'):
        """Single attempt"""
        return cls.run_with_retry(name, max_retries=1, trigger=trigger)

    @classmethod
    def run_with_retry(cls, name, max_retries=None, trigger='manual', sleep=time.sleep):
        """
        Run ``name`` up to ``max_retries`` times, backing off between attempts.

        Job failures are recorded on the returned JobExecution (status
        ``failed``) rather than raised. Raises UnknownJob and JobAlreadyRunning.
        """
        job = get_job(name)
        max_retries = loyalty_setting('JOB_MAX_RETRIES') if max_retries is None else max_retries
        if max_retries < 1:
            raise ValueError('max_retries must be at least 1')

        cls._acquire(name)
        try:
            execution = JobExecution.objects.create(
                job_name=name,
                trigger=trigger,
                status=JobExecution.STATUS_RUNNING,
                started_at=timezone.now(),
            )
            started = time.monotonic()
            logger.info(f"Job '{name}' started ({trigger}, execution {execution.execution_id})")

            last_error = None
            for attempt in range(1, max_retries + 1):
                execution.attempts = attempt
                try:
                    result = job.func(trigger=trigger)
                except Exception as exc:
                    last_error = exc
                    logger.warning(
                        f"Job '{name}' attempt {attempt}/{max_retries} failed: {exc}",
                        exc_info=True,
                    )
                    if attempt < max_retries:
                        delay = cls.backoff_delay(attempt)
                        logger.info(f"Retrying job '{name}' in {delay:.1f}s")
                        sleep(delay)
                    continue
                cls._finish(execution, started, JobExecution.STATUS_COMPLETED, result=result)
                break
            else:
                cls._finish(
                    execution, started, JobExecution.STATUS_FAILED,
                    error=f"{type(last_error).__name__}: {last_error}",
                )

            cls._prune(name)
            return execution
        finally:
            cls._release(name)

    @staticmethod
    def _finish(execution, started, status, result=None, error=''):
        execution.status = status
        execution.finished_at = timezone.now()
        execution.duration_ms = int((time.monotonic() - started) * 1000)
        execution.result = result
        execution.error = error
        execution.save(update_fields=['status', 'attempts', 'finished_at', 'duration_ms', 'result', 'error'])

        metrics = (
            f"job={execution.job_name} execution={execution.execution_id} status={status} "
            f"attempts={execution.attempts} duration_ms={execution.duration_ms}"
        )
        if status == JobExecution.STATUS_FAILED:
            logger.error(f"Job '{execution.job_name}' failed after {execution.attempts} attempt(s): {error} [{metrics}]")
        else:
            logger.info(f"Job '{execution.job_name}' completed [{metrics}]")

    @staticmethod
    def _prune(name):
        keep = loyalty_setting('JOB_EXECUTION_HISTORY')
        stale_ids = list(
            JobExecution.objects.filter(job_name=name)
            .order_by('-started_at', '-id')
            .values_list('id', flat=True)[keep:]
        )
        if stale_ids:
            JobExecution.objects.filter(id__in=stale_ids).delete()

    @classmethod
    def get_monitoring_data(cls, name):
        job = get_job(name)
        executions = JobExecution.objects.filter(job_name=name)
        stats = executions.aggregate(
            total=Count('id'),
            successful=Count('id', filter=Q(status=JobExecution.STATUS_COMPLETED)),
            failed=Count('id', filter=Q(status=JobExecution.STATUS_FAILED)),
            average_duration=Avg('duration_ms', filter=~Q(status=JobExecution.STATUS_RUNNING)),
        )
        average = stats['average_duration']
        return {
            'job_name': job.name,
            'description': job.description,
            'schedule': job.schedule,
            'is_running': cls.is_running(name),
            'total_executions': stats['total'],
            'successful_executions': stats['successful'],
            'failed_executions': stats['failed'],
            'average_duration_ms': round(average) if average is not None else None,
            'last_execution': executions.order_by('-started_at', '-id').first(),
        }

    @staticmethod
    def get_recent_executions(name, limit=10):
        get_job(name)
        return JobExecution.objects.filter(job_name=name).order_by('-started_at', '-id')[:limit]
