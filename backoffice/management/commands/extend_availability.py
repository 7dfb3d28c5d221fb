from django.conf import settings
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = 'Open availability slots for every active room up to N days ahead'

    def add_arguments(self, parser):
        parser.add_argument(
            '--days',
            type=int,
            default=settings.AVAILABILITY_HORIZON_DAYS,
            help='Number of nights ahead to cover (default: AVAILABILITY_HORIZON_DAYS)'
        )

    def handle(self, *args, **options):
        from backoffice.models import Room
        from backoffice.services import AvailabilityLedger

        days = options['days']
        if days < 1:
            self.stdout.write(self.style.ERROR("--days must be at least 1"))
            return

        total_created = 0
        for room in Room.objects.filter(is_active=True).select_related('hotel'):
            created = AvailabilityLedger(room).seed(days)
            total_created += created
            if created:
                self.stdout.write(f"  ✓ {room}: {created} new slot(s)")

        if total_created:
            self.stdout.write(self.style.SUCCESS(f"Total: {total_created} slot(s) created"))
        else:
            self.stdout.write(f"All active rooms already have slots for the next {days} day(s).")
