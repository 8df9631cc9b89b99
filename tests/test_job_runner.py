"""
Tests for the background job runner and the registered ledger jobs.
"""
from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import override_settings
from django.utils import timezone

from apps.common.exceptions import JobAlreadyRunning, UnknownJob
from apps.jobs import registry
from apps.jobs.models import JobExecution
from apps.jobs.services import JobRunner
from apps.points.models import PointBatch
from tests.factories import PointBatchFactory


@pytest.fixture
def scratch_jobs():
    """Register throwaway jobs and remove them afterwards"""
    calls = {'flaky': 0, 'broken': 0}

    @registry.register_job('test-ok', description='Always succeeds')
    def ok(trigger='manual'):
        return {'trigger': trigger}

    @registry.register_job('test-flaky')
    def flaky(trigger='manual'):
        calls['flaky'] += 1
        if calls['flaky'] < 3:
            raise RuntimeError(f"attempt {calls['flaky']} failed")
        return {'attempts': calls['flaky']}

    @registry.register_job('test-broken')
    def broken(trigger='manual'):
        calls['broken'] += 1
        raise RuntimeError('always broken')

    yield calls
    for name in ('test-ok', 'test-flaky', 'test-broken'):
        registry._registry.pop(name, None)


def test_backoff_delays():
    assert [JobRunner.backoff_delay(n, base=1, maximum=30) for n in (1, 2, 3)] == [1, 2, 4]
    assert JobRunner.backoff_delay(10, base=1, maximum=30) == 30


def test_ledger_jobs_are_registered():
    names = [job.name for job in registry.registered_jobs()]
    assert {'point-expiration', 'privilege-expiration', 'expiring-points-check'} <= set(names)


def test_unknown_job():
    with pytest.raises(UnknownJob):
        JobRunner.run('no-such-job')


@pytest.mark.django_db
class TestJobRunner:

    def test_successful_run_is_recorded(self, scratch_jobs):
        execution = JobRunner.run('test-ok', trigger='scheduled')

        execution.refresh_from_db()
        assert execution.status == JobExecution.STATUS_COMPLETED
        assert execution.attempts == 1
        assert execution.result == {'trigger': 'scheduled'}
        assert execution.finished_at is not None
        assert execution.duration_ms >= 0
        assert not JobRunner.is_running('test-ok')

    def test_retry_backs_off_until_success(self, scratch_jobs):
        delays = []

        execution = JobRunner.run_with_retry('test-flaky', max_retries=3, sleep=delays.append)

        assert execution.status == JobExecution.STATUS_COMPLETED
        assert execution.attempts == 3
        assert execution.result == {'attempts': 3}
        assert len(delays) == 2

    def test_exhausted_retries_record_failure(self, scratch_jobs):
        execution = JobRunner.run_with_retry('test-broken', max_retries=2, sleep=lambda _: None)

        assert scratch_jobs['broken'] == 2
        assert execution.status == JobExecution.STATUS_FAILED
        assert 'always broken' in execution.error
        assert not JobRunner.is_running('test-broken')

    def test_single_attempt_without_retry(self, scratch_jobs):
        execution = JobRunner.run('test-flaky')

        assert execution.status == JobExecution.STATUS_FAILED
        assert scratch_jobs['flaky'] == 1

    def test_concurrent_run_is_rejected(self, scratch_jobs):
        JobRunner._acquire('test-ok')
        try:
            with pytest.raises(JobAlreadyRunning):
                JobRunner.run('test-ok')
        finally:
            JobRunner._release('test-ok')
        assert not JobExecution.objects.filter(job_name='test-ok').exists()

    def test_history_is_pruned(self, scratch_jobs):
        with override_settings(LOYALTY={'JOB_EXECUTION_HISTORY': 2}):
            for _ in range(4):
                JobRunner.run('test-ok')

        assert JobExecution.objects.filter(job_name='test-ok').count() == 2

    def test_monitoring_data(self, scratch_jobs):
        JobRunner.run('test-ok')
        JobRunner.run('test-broken')
        JobRunner.run('test-ok')

        data = JobRunner.get_monitoring_data('test-ok')

        assert data['description'] == 'Always succeeds'
        assert data['total_executions'] == 2
        assert data['successful_executions'] == 2
        assert data['failed_executions'] == 0
        assert data['is_running'] is False
        assert data['last_execution'].status == JobExecution.STATUS_COMPLETED
        assert JobRunner.get_monitoring_data('test-broken')['failed_executions'] == 1


@pytest.mark.django_db
class TestLedgerJobs:

    def test_point_expiration_job(self, member):
        batch = PointBatchFactory(member=member, amount=80, expires_at=timezone.now() - timedelta(days=1))

        execution = JobRunner.run('point-expiration')

        assert execution.status == JobExecution.STATUS_COMPLETED
        assert execution.result['total_points_expired'] == 80
        assert execution.result['batch_ids'] == [batch.id]
        batch.refresh_from_db()
        assert batch.is_expired

    def test_scheduled_run_honours_disable_switch(self, member):
        batch = PointBatchFactory(member=member, amount=80, expires_at=timezone.now() - timedelta(days=1))

        with override_settings(LOYALTY={'ENABLE_POINT_EXPIRATION': False}):
            execution = JobRunner.run('point-expiration', trigger='scheduled')

        assert execution.result == {'skipped': True}
        batch.refresh_from_db()
        assert not batch.is_expired

    def test_expiring_points_check(self, member):
        PointBatchFactory(member=member, amount=25, expires_at=timezone.now() + timedelta(days=2))

        execution = JobRunner.run('expiring-points-check')

        assert execution.result == {'days': 7, 'members': 1, 'total_points': 25}
        assert not PointBatch.objects.filter(is_expired=True).exists()


@pytest.mark.django_db
class TestCommands:

    def test_run_job_command(self, member):
        PointBatchFactory(member=member, amount=10, expires_at=timezone.now() - timedelta(days=1))
        out = StringIO()

        call_command('run_job', 'point-expiration', stdout=out)

        assert "Job 'point-expiration' completed" in out.getvalue()
        assert JobExecution.objects.get().trigger == 'scheduled'

    def test_run_job_lists_jobs(self):
        out = StringIO()
        call_command('run_job', '--list', stdout=out)
        assert 'point-expiration' in out.getvalue()

    def test_run_job_unknown(self):
        with pytest.raises(CommandError):
            call_command('run_job', 'no-such-job')

    def test_run_job_failure(self, scratch_jobs):
        with pytest.raises(CommandError):
            call_command('run_job', 'test-broken', '--trigger', 'manual')

    def test_expire_points_command(self, member):
        PointBatchFactory(member=member, amount=60, expires_at=timezone.now() + timedelta(days=3))
        out = StringIO()

        call_command(
            'expire_points',
            '--as-of', (timezone.now() + timedelta(days=4)).isoformat(),
            stdout=out,
        )

        assert 'Expired 60 points in 1 batches for 1 members' in out.getvalue()

    def test_expire_points_rejects_bad_timestamp(self):
        with pytest.raises(CommandError):
            call_command('expire_points', '--as-of', 'yesterday')
