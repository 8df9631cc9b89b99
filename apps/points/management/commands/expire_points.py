from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from apps.points.services import ExpirationSweeper


class Command(BaseCommand):
    help = 'Expire point batches that are past their expiry date'

    def add_arguments(self, parser):
        parser.add_argument(
            '--member-id',
            type=int,
            help='Expire points for specific member ID only',
        )
        parser.add_argument(
            '--as-of',
            help='Sweep as of this ISO timestamp instead of now',
        )

    def handle(self, *args, **options):
        as_of = timezone.now()
        if options.get('as_of'):
            as_of = parse_datetime(options['as_of'])
            if as_of is None:
                raise CommandError(f"Invalid --as-of timestamp: {options['as_of']}")
            if timezone.is_naive(as_of):
                as_of = timezone.make_aware(as_of)

        member_id = options.get('member_id')
        scope = f'member {member_id}' if member_id else 'all members'
        self.stdout.write(f'Starting points expiration for {scope}...')

        result = ExpirationSweeper.sweep(as_of=as_of, member_id=member_id)

        for error in result.errors:
            self.stdout.write(
                self.style.ERROR(f"Batch {error['batch_id']} (member {error['member_id']}): {error['error']}")
            )
        self.stdout.write(
            self.style.SUCCESS(
                f'Points expiration complete. Expired {result.total_points_expired} points '
                f'in {result.batches_expired} batches for {result.members_affected} members'
            )
        )
