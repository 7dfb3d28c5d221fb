"""
Availability Ledger
===================

Per-night inventory of a room type, one AvailabilitySlot row per
(room, date). A night without a row has the room's full quantity.

Reservations decrement every night of a stay inside one transaction,
each night through a single conditional UPDATE, so two concurrent
requests can never both take the last unit.
"""

import logging
from datetime import timedelta

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from backoffice.exceptions import (
    Conflict, InsufficientAvailability, ValidationError,
)
from backoffice.models import AvailabilitySlot, Room
from backoffice.services.rate_service import check_date_range, stay_dates

logger = logging.getLogger(__name__)


class AvailabilityLedger:
    """Reserve, release and block units of one room."""

    def __init__(self, room):
        self.room = room

    def _slots(self):
        return AvailabilitySlot.objects.filter(room=self.room)

    def _slot_defaults(self):
        return {'available_count': self.room.quantity, 'blocked_count': 0}

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def check_availability(self, day):
        """Sellable units on one night."""
        slot = self._slots().filter(date=day).first()
        if slot is None:
            return self.room.quantity
        return slot.sellable

    def availability_for_range(self, check_in, check_out):
        """Per-night breakdown for [check_in, check_out)."""
        check_date_range(check_in, check_out)
        existing = {
            slot.date: slot
            for slot in self._slots().filter(date__gte=check_in, date__lt=check_out)
        }
        nights = []
        for day in stay_dates(check_in, check_out):
            slot = existing.get(day)
            available = slot.available_count if slot else self.room.quantity
            blocked = slot.blocked_count if slot else 0
            nights.append({
                'date': day,
                'available_count': available,
                'blocked_count': blocked,
                'sellable': available - blocked,
            })
        return nights

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def ensure_slots(self, check_in, check_out):
        """Create missing slot rows for the stay, seeded from quantity."""
        for day in stay_dates(check_in, check_out):
            AvailabilitySlot.objects.get_or_create(
                room=self.room,
                date=day,
                defaults=self._slot_defaults()
            )

    def reserve(self, check_in, check_out, count):
        """
        Take `count` units on every night of the stay, or none at all.

        Raises:
            InsufficientAvailability: some night cannot supply `count`
                units; no slot is modified.
        """
        check_date_range(check_in, check_out)
        if count < 1:
            raise ValidationError('Number of rooms must be at least 1')

        with transaction.atomic():
            self.ensure_slots(check_in, check_out)
            for day in stay_dates(check_in, check_out):
                updated = self._slots().filter(
                    date=day,
                    available_count__gte=F('blocked_count') + count,
                ).update(available_count=F('available_count') - count)
                if not updated:
                    remaining = self.check_availability(day)
                    logger.warning(
                        "Reservation rejected for room %s on %s: requested %s, available %s",
                        self.room.pk, day, count, remaining
                    )
                    raise InsufficientAvailability(
                        f'Only {max(remaining, 0)} room(s) available on {day.isoformat()}',
                        details={'date': day.isoformat(), 'available': max(remaining, 0)}
                    )

    def release(self, check_in, check_out, count):
        """Return `count` units on every night of the stay."""
        check_date_range(check_in, check_out)
        with transaction.atomic():
            self.ensure_slots(check_in, check_out)
            self._slots().filter(
                date__gte=check_in,
                date__lt=check_out,
            ).update(available_count=F('available_count') + count)

    def set_blocked(self, check_in, check_out, blocked_count):
        """
        Withhold `blocked_count` units on every night of the range.

        The block may not exceed the units still available on any night.
        """
        check_date_range(check_in, check_out)
        if blocked_count < 0:
            raise ValidationError('Blocked count cannot be negative')

        with transaction.atomic():
            self.ensure_slots(check_in, check_out)
            for day in stay_dates(check_in, check_out):
                updated = self._slots().filter(
                    date=day,
                    available_count__gte=blocked_count,
                ).update(blocked_count=blocked_count)
                if not updated:
                    raise InsufficientAvailability(
                        f'Cannot block {blocked_count} room(s) on {day.isoformat()}'
                    )
        logger.info(
            "Blocked %s unit(s) of room %s from %s to %s",
            blocked_count, self.room.pk, check_in, check_out
        )

    def adjust_capacity(self, delta, from_date=None):
        """Shift future slots after a change of the room's quantity."""
        if delta == 0:
            return
        from_date = from_date or timezone.localdate()
        future = self._slots().filter(date__gte=from_date)

        with transaction.atomic():
            if delta < 0 and future.filter(available_count__lt=F('blocked_count') - delta).exists():
                raise Conflict('Quantity cannot drop below rooms already reserved or blocked')
            future.update(available_count=F('available_count') + delta)

    def seed(self, days, start=None):
        """Create slot rows for the next `days` nights; existing rows are kept."""
        start = start or timezone.localdate()
        end = start + timedelta(days=days)
        existing = set(
            self._slots().filter(date__gte=start, date__lt=end).values_list('date', flat=True)
        )
        slots = [
            AvailabilitySlot(room=self.room, date=day, **self._slot_defaults())
            for day in stay_dates(start, end)
            if day not in existing
        ]
        AvailabilitySlot.objects.bulk_create(slots, ignore_conflicts=True)
        return len(slots)


def search_availability(check_in, check_out, number_of_rooms=1, hotel_id=None, room_id=None,
                        board_type=None, capacity=None, available_only=False):
    """
    Availability of every active room matching the filters for one stay.

    Returns:
        (results, summary) where each result holds the room, the units
        sellable on every night and whether `number_of_rooms` fit.
    """
    check_date_range(check_in, check_out)

    rooms = Room.objects.filter(is_active=True).select_related('hotel')
    if hotel_id:
        rooms = rooms.filter(hotel_id=hotel_id)
    if room_id:
        rooms = rooms.filter(pk=room_id)
    if board_type:
        rooms = rooms.filter(board_type=board_type)
    if capacity:
        rooms = rooms.filter(capacity__gte=capacity)

    results = []
    for room in rooms:
        ledger = AvailabilityLedger(room)
        nights = ledger.availability_for_range(check_in, check_out)
        available = min(night['sellable'] for night in nights)
        within_period = room.is_sellable_between(check_in, check_out)
        is_available = within_period and available >= number_of_rooms
        if available_only and not is_available:
            continue
        results.append({
            'room': room,
            'available_rooms': max(available, 0),
            'is_within_availability_period': within_period,
            'is_available': is_available,
            'nights': nights,
        })

    available_count = sum(1 for result in results if result['is_available'])
    summary = {
        'total_rooms': len(results),
        'available_rooms': available_count,
        'unavailable_rooms': len(results) - available_count,
        'total_units_available': sum(result['available_rooms'] for result in results),
    }
    return results, summary
