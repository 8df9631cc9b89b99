from django.core.management.base import BaseCommand

from apps.privileges.services import PrivilegeService


class Command(BaseCommand):
    help = 'Mark active privilege grants past their expiry date as expired'

    def handle(self, *args, **options):
        self.stdout.write('Starting privilege grant expiration...')

        result = PrivilegeService.process_expired_grants()

        for error in result['errors']:
            self.stdout.write(self.style.ERROR(f"Grant {error['grant_id']}: {error['error']}"))
        self.stdout.write(
            self.style.SUCCESS(f"Privilege expiration complete. Expired {result['processed']} grants")
        )
