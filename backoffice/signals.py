"""
Signal handlers for seeding the availability ledger of new rooms.
"""

import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Room
from .services.availability_service import AvailabilityLedger

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Room)
def create_room_availability_slots(sender, instance, created, raw=False, **kwargs):
    """
    When a room is created, open availability slots for the configured
    horizon, each seeded with the room's quantity.
    """
    if created and not raw:
        count = AvailabilityLedger(instance).seed(settings.AVAILABILITY_HORIZON_DAYS)
        logger.info("Seeded %s availability slot(s) for room %s", count, instance.pk)
