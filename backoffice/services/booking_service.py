"""
Booking Validation & Lifecycle
==============================

Validates a stay end to end, prices it night by night, and commits the
ledger reservation, guest, booking and payment in one transaction.

Flow for a new booking:
1. check-out after check-in, at least one room, PENDING or CONFIRMED
2. room exists, is active, belongs to the hotel, stay inside its sale window
3. nightly rates resolved (seasonal changes mid-stay supported)
4. total = sum of nightly rates x number of rooms
5. guest and payment payloads validated
6. atomic: reserve ledger -> save guest -> create booking -> create payment
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from backoffice.exceptions import (
    Conflict, InsufficientAvailability, RoomInactive, ValidationError,
)
from backoffice.models import Booking, Payment
from backoffice.parsing import parse_date, parse_decimal, parse_str
from backoffice.services.availability_service import AvailabilityLedger
from backoffice.services.guest_service import GuestService
from backoffice.services.rate_service import RateResolver, check_date_range

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')
INITIAL_STATUSES = (Booking.Status.PENDING, Booking.Status.CONFIRMED)
PRICING_FIELDS = (
    'check_in_date', 'check_out_date', 'number_of_rooms',
    'room_rate', 'alternative_rate', 'use_alternative_rate',
)
PLAIN_FIELDS = ('rate_code', 'notes', 'special_requests', 'assigned_room_no')


def build_payment_values(total_amount, payment_data, already_paid=ZERO):
    """
    Validate a payment payload against the booking total.

    CASH settles the outstanding balance. CREDIT records `paid_amount`
    and needs a due date for whatever remains. Payments on a booking
    may never add up to more than its total.
    """
    if not isinstance(payment_data, dict):
        raise ValidationError('Payment data must be an object')

    method = parse_str(payment_data.get('method')).upper()
    if method not in Payment.Method.values:
        raise ValidationError('Payment method must be CASH or CREDIT')

    outstanding = total_amount - already_paid
    if outstanding < 0:
        raise ValidationError('Recorded payments already exceed the booking total')

    if method == Payment.Method.CASH:
        paid = outstanding
    else:
        paid = parse_decimal(payment_data.get('paid_amount'), 'paid_amount', ZERO, max_digits=12)
        if paid < 0:
            raise ValidationError('Paid amount cannot be negative')
        if paid > outstanding:
            raise ValidationError('Paid amount exceeds the booking total')

    remaining = outstanding - paid
    due_date = parse_date(payment_data.get('remaining_due_date'), 'remaining_due_date')
    if method == Payment.Method.CREDIT and remaining > 0 and due_date is None:
        raise ValidationError('Remaining amount due date is required for credit payments')

    return {
        'method': method,
        'total_amount': total_amount,
        'paid_amount': paid,
        'remaining_amount': remaining,
        'remaining_due_date': due_date if remaining > 0 else None,
        'transaction_id': parse_str(payment_data.get('transaction_id')),
        'notes': parse_str(payment_data.get('notes')),
    }


class BookingService:
    """
    Create, edit, transition, cancel and delete bookings.

    Usage:
        service = BookingService(user=request.user)
        booking = service.create_booking(
            room_id=room.id,
            check_in=date(2025, 7, 1),
            check_out=date(2025, 7, 4),
            guest_data={'first_name': 'Ahmed', 'last_name': 'Hassan'},
            number_of_rooms=2,
        )
    """

    def __init__(self, user=None):
        self.user = user
        self.guests = GuestService()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _validate_stay(self, check_in, check_out, number_of_rooms):
        if check_in is None or check_out is None:
            raise ValidationError('Check-in and check-out dates are required')
        check_date_range(check_in, check_out)
        if number_of_rooms is None or number_of_rooms < 1:
            raise ValidationError('Number of rooms must be at least 1')

    def _validate_room(self, room, hotel_id, check_in, check_out):
        if not room.is_active:
            raise RoomInactive()
        if hotel_id is not None and room.hotel_id != hotel_id:
            raise ValidationError('Room does not belong to the selected hotel')
        if not room.is_sellable_between(check_in, check_out):
            raise InsufficientAvailability('Room is not available for the selected dates')

    @staticmethod
    def _effective_alternative(room, use_alternative_rate, alternative_rate):
        if use_alternative_rate and alternative_rate is None:
            return room.alternative_price
        return alternative_rate

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create_booking(self, room_id, check_in, check_out, guest_data, hotel_id=None,
                       number_of_rooms=1, room_rate=None, alternative_rate=None,
                       use_alternative_rate=False, status=Booking.Status.PENDING,
                       rate_code='STANDARD', special_requests=None, notes='',
                       assigned_room_no='', payment_data=None):
        self._validate_stay(check_in, check_out, number_of_rooms)
        if status not in INITIAL_STATUSES:
            raise ValidationError('New bookings must be PENDING or CONFIRMED')

        resolver = RateResolver.for_room_id(room_id)
        room = resolver.room
        self._validate_room(room, hotel_id, check_in, check_out)

        quote = resolver.quote(
            check_in, check_out, number_of_rooms,
            use_alternative_rate=use_alternative_rate,
            room_rate=room_rate,
            alternative_rate=alternative_rate,
        )
        guest, guest_values = self.guests.prepare(guest_data)
        payment_values = None
        if payment_data:
            payment_values = build_payment_values(quote['total_amount'], payment_data)

        with transaction.atomic():
            AvailabilityLedger(room).reserve(check_in, check_out, number_of_rooms)
            guest = self.guests.save_prepared(guest, guest_values)
            booking = Booking.objects.create(
                hotel=room.hotel,
                room=room,
                guest=guest,
                number_of_rooms=number_of_rooms,
                check_in_date=check_in,
                check_out_date=check_out,
                number_of_nights=quote['number_of_nights'],
                room_rate=quote['room_rate'],
                alternative_rate=self._effective_alternative(room, use_alternative_rate, alternative_rate),
                use_alternative_rate=use_alternative_rate,
                total_amount=quote['total_amount'],
                rate_code=rate_code or 'STANDARD',
                status=status,
                special_requests=special_requests or [],
                notes=notes or '',
                assigned_room_no=assigned_room_no or '',
                created_by=self.user if self.user and self.user.is_authenticated else None,
            )
            if payment_values:
                Payment.objects.create(booking=booking, **payment_values)

        logger.info(
            "Booking %s created: room %s, %s -> %s, %s room(s), total %s",
            booking.res_id, room.pk, check_in, check_out, number_of_rooms, booking.total_amount
        )
        return booking

    # -------------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------------

    def _lock(self, booking):
        return Booking.objects.select_for_update().select_related('room', 'hotel', 'guest').get(pk=booking.pk)

    def update_booking(self, booking, changes):
        """
        Apply a partial update.

        Changing dates, room count or rates re-prices the stay; a changed
        stay moves the ledger reservation within the same transaction.
        Rate overrides not resent are resolved afresh.
        """
        with transaction.atomic():
            booking = self._lock(booking)

            if any(field in changes for field in PRICING_FIELDS):
                self._reprice(booking, changes)
                if not changes.get('payment_data'):
                    self._sync_payments(booking)

            for field in PLAIN_FIELDS:
                if field in changes:
                    setattr(booking, field, changes[field])

            if changes.get('guest_data'):
                guest, guest_values = self.guests.prepare(changes['guest_data'], current=booking.guest)
                booking.guest = self.guests.save_prepared(guest, guest_values)

            if changes.get('payment_data'):
                self._apply_payment(booking, changes['payment_data'])

            if changes.get('status') and changes['status'] != booking.status:
                self._apply_status(booking, changes['status'])

            booking.save()

        logger.info("Booking %s updated", booking.res_id)
        return booking

    def _reprice(self, booking, changes):
        if booking.status in (Booking.Status.CANCELLED, Booking.Status.CHECKED_OUT):
            raise Conflict('Cancelled or checked-out bookings cannot be re-priced')

        check_in = changes['check_in_date'] if 'check_in_date' in changes else booking.check_in_date
        check_out = changes['check_out_date'] if 'check_out_date' in changes else booking.check_out_date
        number_of_rooms = (
            changes['number_of_rooms'] if 'number_of_rooms' in changes else booking.number_of_rooms
        )
        use_alternative_rate = changes.get('use_alternative_rate', booking.use_alternative_rate)
        alternative_rate = changes.get('alternative_rate')
        if 'alternative_rate' not in changes and use_alternative_rate:
            alternative_rate = booking.alternative_rate
        room_rate = changes.get('room_rate')

        self._validate_stay(check_in, check_out, number_of_rooms)
        room = booking.room
        old_stay = (booking.check_in_date, booking.check_out_date, booking.number_of_rooms)
        new_stay = (check_in, check_out, number_of_rooms)

        # An inactive room may only shrink what a booking already holds
        takes_more = (
            check_in < booking.check_in_date
            or check_out > booking.check_out_date
            or number_of_rooms > booking.number_of_rooms
        )
        if takes_more and not room.is_active:
            raise RoomInactive()
        if not room.is_sellable_between(check_in, check_out):
            raise InsufficientAvailability('Room is not available for the selected dates')

        quote = RateResolver(room).quote(
            check_in, check_out, number_of_rooms,
            use_alternative_rate=use_alternative_rate,
            room_rate=room_rate,
            alternative_rate=alternative_rate,
        )

        if new_stay != old_stay and booking.holds_inventory:
            ledger = AvailabilityLedger(room)
            ledger.release(*old_stay)
            ledger.reserve(*new_stay)

        booking.check_in_date = check_in
        booking.check_out_date = check_out
        booking.number_of_rooms = number_of_rooms
        booking.number_of_nights = quote['number_of_nights']
        booking.room_rate = quote['room_rate']
        booking.use_alternative_rate = use_alternative_rate
        booking.alternative_rate = self._effective_alternative(room, use_alternative_rate, alternative_rate)
        booking.total_amount = quote['total_amount']

    def _sync_payments(self, booking):
        """Carry a new total into the latest payment's balance."""
        latest = booking.payments.first()
        if latest is None:
            return
        paid = booking.payments.aggregate(total=Sum('paid_amount'))['total'] or ZERO
        if paid > booking.total_amount:
            raise ValidationError('Recorded payments exceed the new booking total')
        latest.total_amount = booking.total_amount
        latest.remaining_amount = booking.total_amount - paid
        latest.save()

    def _apply_payment(self, booking, payment_data):
        """Update the latest payment, or record the first one."""
        latest = booking.payments.first()
        others = booking.payments.all()
        if latest is not None:
            others = others.exclude(pk=latest.pk)
        already_paid = others.aggregate(total=Sum('paid_amount'))['total'] or ZERO

        values = build_payment_values(booking.total_amount, payment_data, already_paid)
        if latest is None:
            Payment.objects.create(booking=booking, **values)
            return
        for field, value in values.items():
            setattr(latest, field, value)
        latest.save()

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    def _apply_status(self, booking, status):
        if status not in Booking.Status.values:
            raise ValidationError(f'Unknown booking status: {status}')
        if status == booking.status:
            return
        if not booking.can_transition_to(status):
            raise Conflict(f'Cannot change status from {booking.status} to {status}')

        if status == Booking.Status.CANCELLED:
            AvailabilityLedger(booking.room).release(
                booking.check_in_date, booking.check_out_date, booking.number_of_rooms
            )
        elif status == Booking.Status.CHECKED_IN:
            booking.check_in_time = timezone.now()
        elif status == Booking.Status.CHECKED_OUT:
            booking.check_out_time = timezone.now()
        booking.status = status

    def change_status(self, booking, status):
        with transaction.atomic():
            booking = self._lock(booking)
            previous = booking.status
            self._apply_status(booking, status)
            booking.save()
        logger.info("Booking %s: %s -> %s", booking.res_id, previous, booking.status)
        return booking

    def cancel_booking(self, booking):
        """Mark the booking CANCELLED and give its units back."""
        with transaction.atomic():
            booking = self._lock(booking)
            if booking.status == Booking.Status.CANCELLED:
                raise Conflict('Booking is already cancelled')
            self._apply_status(booking, Booking.Status.CANCELLED)
            booking.save()
        logger.info("Booking %s cancelled", booking.res_id)
        return booking

    def delete_booking(self, booking):
        """Remove the booking and its payments, releasing any units it holds."""
        with transaction.atomic():
            booking = self._lock(booking)
            res_id = booking.res_id
            if booking.holds_inventory:
                AvailabilityLedger(booking.room).release(
                    booking.check_in_date, booking.check_out_date, booking.number_of_rooms
                )
            booking.payments.all().delete()
            booking.delete()
        logger.info("Booking %s deleted", res_id)
        return res_id
