from datetime import timedelta
from decimal import Decimal

import pytest

from backoffice.exceptions import (
    Conflict, InsufficientAvailability, InvalidDateRange, RoomInactive, RoomNotFound,
    ValidationError,
)
from backoffice.models import AvailabilitySlot, Booking, Guest, Payment, Room, SeasonalPrice
from backoffice.services import AvailabilityLedger, BookingService

pytestmark = pytest.mark.django_db


@pytest.fixture
def service(owner):
    return BookingService(user=owner)


def sellable(room, day):
    return AvailabilityLedger(room).check_availability(day)


def test_create_booking_prices_and_reserves(service, room, stay, guest_data, owner):
    booking = service.create_booking(
        room_id=room.id, hotel_id=room.hotel_id,
        check_in=stay[0], check_out=stay[1], guest_data=guest_data,
    )

    assert booking.res_id.startswith(f'RES-{booking.created_at.year}-')
    assert booking.status == Booking.Status.PENDING
    assert booking.number_of_nights == 3
    assert booking.room_rate == Decimal('250.00')
    assert booking.total_amount == Decimal('750.00')
    assert booking.created_by == owner
    assert booking.guest.profile_id.startswith('PROF-')
    assert sellable(room, stay[0]) == 4


def test_alternative_rate_for_two_rooms(service, family_room, today, guest_data):
    check_in = today + timedelta(days=12)
    booking = service.create_booking(
        room_id=family_room.id, check_in=check_in, check_out=check_in + timedelta(days=5),
        guest_data=guest_data, number_of_rooms=2, use_alternative_rate=True,
        payment_data={'method': 'CREDIT', 'paid_amount': '1100.00',
                      'remaining_due_date': (check_in + timedelta(days=5)).isoformat()},
    )

    assert booking.total_amount == Decimal('2200.00')
    assert booking.alternative_rate == Decimal('220.00')
    payment = booking.payments.get()
    assert payment.remaining_amount == Decimal('1100.00')
    assert payment.status == Payment.Status.PARTIALLY_PAID
    assert sellable(family_room, check_in) == 6


def test_seasonal_change_mid_stay(service, room, stay, guest_data):
    SeasonalPrice.objects.create(
        room=room, start_date=stay[0] + timedelta(days=1), end_date=stay[1], price=Decimal('350.00')
    )
    booking = service.create_booking(
        room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data,
    )
    assert booking.room_rate == Decimal('250.00')
    assert booking.total_amount == Decimal('950.00')


def test_inverted_dates_change_nothing(service, room, stay, guest_data):
    with pytest.raises(InvalidDateRange):
        service.create_booking(
            room_id=room.id, check_in=stay[1], check_out=stay[0], guest_data=guest_data,
        )
    assert Booking.objects.count() == 0
    assert Guest.objects.count() == 0
    assert sellable(room, stay[0]) == 5


def test_insufficient_availability_leaves_no_trace(service, room, stay, guest_data):
    AvailabilitySlot.objects.filter(room=room, date=stay[0] + timedelta(days=1)).update(available_count=1)

    with pytest.raises(InsufficientAvailability):
        service.create_booking(
            room_id=room.id, check_in=stay[0], check_out=stay[1],
            guest_data=guest_data, number_of_rooms=2,
        )

    assert Booking.objects.count() == 0
    assert Guest.objects.count() == 0
    assert sellable(room, stay[0]) == 5
    assert sellable(room, stay[0] + timedelta(days=1)) == 1


def test_room_checks(service, room, other_hotel, stay, guest_data):
    with pytest.raises(RoomNotFound):
        service.create_booking(room_id=987654, check_in=stay[0], check_out=stay[1], guest_data=guest_data)

    with pytest.raises(ValidationError):
        service.create_booking(
            room_id=room.id, hotel_id=other_hotel.id,
            check_in=stay[0], check_out=stay[1], guest_data=guest_data,
        )

    room.is_active = False
    room.save()
    with pytest.raises(RoomInactive):
        service.create_booking(room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data)


def test_stay_outside_sale_window(service, room, stay, guest_data):
    room.available_from = stay[0] + timedelta(days=1)
    room.save()
    with pytest.raises(InsufficientAvailability):
        service.create_booking(room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data)


def test_initial_status_must_be_pending_or_confirmed(service, room, stay, guest_data):
    booking = service.create_booking(
        room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data,
        status=Booking.Status.CONFIRMED,
    )
    assert booking.status == Booking.Status.CONFIRMED

    with pytest.raises(ValidationError):
        service.create_booking(
            room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data,
            status=Booking.Status.CHECKED_IN,
        )


def test_guest_data_is_required(service, room, stay):
    with pytest.raises(ValidationError):
        service.create_booking(room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data={})
    with pytest.raises(ValidationError):
        service.create_booking(
            room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data={'last_name': 'Smith'},
        )


def test_existing_guest_is_reused_and_updated(service, room, stay):
    guest = Guest.objects.create(first_name='Sarah', last_name='Johnson')
    booking = service.create_booking(
        room_id=room.id, check_in=stay[0], check_out=stay[1],
        guest_data={'id': guest.id, 'phone': '+1-555-987-6543'},
    )
    guest.refresh_from_db()
    assert booking.guest == guest
    assert guest.phone == '+1-555-987-6543'
    assert Guest.objects.count() == 1


def test_cancel_releases_units(service, room, stay, guest_data):
    booking = service.create_booking(
        room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data, number_of_rooms=2,
    )
    assert sellable(room, stay[0]) == 3

    booking = service.cancel_booking(booking)
    assert booking.status == Booking.Status.CANCELLED
    assert sellable(room, stay[0]) == 5

    with pytest.raises(Conflict):
        service.cancel_booking(booking)


def test_delete_releases_only_held_units(service, room, stay, guest_data):
    active = service.create_booking(room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data)
    cancelled = service.create_booking(room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data)
    service.cancel_booking(cancelled)
    assert sellable(room, stay[0]) == 4

    assert service.delete_booking(cancelled) == cancelled.res_id
    assert sellable(room, stay[0]) == 4

    service.delete_booking(active)
    assert sellable(room, stay[0]) == 5
    assert Booking.objects.count() == 0


def test_status_transitions(service, room, stay, guest_data):
    booking = service.create_booking(room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data)

    booking = service.change_status(booking, Booking.Status.CHECKED_IN)
    assert booking.check_in_time is not None

    with pytest.raises(Conflict):
        service.change_status(booking, Booking.Status.CANCELLED)

    booking = service.change_status(booking, Booking.Status.CHECKED_OUT)
    assert booking.check_out_time is not None
    # Nights consumed by a completed stay stay taken
    assert sellable(room, stay[0]) == 4

    with pytest.raises(Conflict):
        service.change_status(booking, Booking.Status.CONFIRMED)
    with pytest.raises(ValidationError):
        service.change_status(booking, 'ARCHIVED')


def test_update_moves_reservation(service, room, stay, guest_data):
    booking = service.create_booking(room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data)
    new_in = stay[1] + timedelta(days=2)

    booking = service.update_booking(booking, {
        'check_in_date': new_in,
        'check_out_date': new_in + timedelta(days=2),
        'number_of_rooms': 2,
    })

    assert booking.number_of_nights == 2
    assert booking.total_amount == Decimal('1000.00')
    assert sellable(room, stay[0]) == 5
    assert sellable(room, new_in) == 3


def test_failed_update_keeps_original_reservation(service, room, stay, guest_data):
    booking = service.create_booking(room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data)

    with pytest.raises(InsufficientAvailability):
        service.update_booking(booking, {'number_of_rooms': 6})

    booking.refresh_from_db()
    assert booking.number_of_rooms == 1
    assert sellable(room, stay[0]) == 4


@pytest.mark.parametrize('changes', [
    {'number_of_rooms': 0},
    {'check_out_date': None},
    {'check_in_date': None},
])
def test_update_rejects_empty_stay_values(service, room, stay, guest_data, changes):
    booking = service.create_booking(room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data)

    with pytest.raises(ValidationError):
        service.update_booking(booking, changes)

    booking.refresh_from_db()
    assert (booking.check_in_date, booking.check_out_date) == stay
    assert booking.number_of_rooms == 1
    assert sellable(room, stay[0]) == 4


def test_inactive_room_only_allows_shrinking(service, room, stay, guest_data):
    booking = service.create_booking(room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data)
    Room.objects.filter(pk=room.pk).update(is_active=False)

    with pytest.raises(RoomInactive):
        service.update_booking(booking, {'check_out_date': stay[1] + timedelta(days=1)})
    with pytest.raises(RoomInactive):
        service.update_booking(booking, {'number_of_rooms': 2})
    assert sellable(room, stay[1]) == 5
    assert sellable(room, stay[0]) == 4

    booking = service.update_booking(booking, {'check_out_date': stay[1] - timedelta(days=1)})
    assert booking.number_of_nights == 2
    assert booking.total_amount == Decimal('500.00')
    assert sellable(room, stay[1] - timedelta(days=1)) == 5


def test_update_plain_fields_and_status(service, room, stay, guest_data):
    booking = service.create_booking(room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data)
    booking = service.update_booking(booking, {
        'notes': 'Late arrival',
        'assigned_room_no': '204',
        'guest_data': {'last_name': 'Hassan'},
        'status': Booking.Status.CONFIRMED,
    })
    booking.refresh_from_db()
    assert booking.notes == 'Late arrival'
    assert booking.assigned_room_no == '204'
    assert booking.guest.last_name == 'Hassan'
    assert booking.status == Booking.Status.CONFIRMED


def test_cancelled_booking_cannot_be_repriced(service, room, stay, guest_data):
    booking = service.create_booking(room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data)
    service.cancel_booking(booking)
    with pytest.raises(Conflict):
        service.update_booking(booking, {'number_of_rooms': 2})
