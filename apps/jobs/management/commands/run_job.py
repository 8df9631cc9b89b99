from django.core.management.base import BaseCommand, CommandError

from apps.common.exceptions import LoyaltyError
from apps.jobs.models import JobExecution
from apps.jobs.registry import registered_jobs
from apps.jobs.services import JobRunner


class Command(BaseCommand):
    help = 'Run a registered background job (intended for cron)'

    def add_arguments(self, parser):
        parser.add_argument('job_name', nargs='?', help='Job to run; omit with --list')
        parser.add_argument('--list', action='store_true', help='List registered jobs')
        parser.add_argument('--retry', action='store_true', help='Retry with exponential backoff on failure')
        parser.add_argument('--max-retries', type=int, help='Attempts when retrying (default from settings)')
        parser.add_argument(
            '--trigger',
            choices=['scheduled', 'manual'],
            default='scheduled',
            help='Recorded trigger; scheduled runs honour the ENABLE_* switches',
        )

    def handle(self, *args, **options):
        if options['list'] or not options['job_name']:
            for job in registered_jobs():
                self.stdout.write(f"{job.name:<24} {job.schedule:<12} {job.description}")
            return

        name = options['job_name']
        try:
            if options['retry']:
                execution = JobRunner.run_with_retry(
                    name, max_retries=options.get('max_retries'), trigger=options['trigger']
                )
            else:
                execution = JobRunner.run(name, trigger=options['trigger'])
        except LoyaltyError as exc:
            raise CommandError(exc.message)

        if execution.status == JobExecution.STATUS_FAILED:
            raise CommandError(f"Job '{name}' failed after {execution.attempts} attempt(s): {execution.error}")
        self.stdout.write(
            self.style.SUCCESS(
                f"Job '{name}' completed in {execution.duration_ms}ms: {execution.result}"
            )
        )
