import threading
from datetime import timedelta

import pytest
from django.db import IntegrityError, connection, transaction

from backoffice.exceptions import (
    Conflict, InsufficientAvailability, InvalidDateRange, ValidationError,
)
from backoffice.models import AvailabilitySlot
from backoffice.services import AvailabilityLedger, search_availability

pytestmark = pytest.mark.django_db


def slot_counts(room, check_in, check_out):
    return list(
        AvailabilitySlot.objects.filter(room=room, date__gte=check_in, date__lt=check_out)
        .order_by('date')
        .values_list('available_count', flat=True)
    )


def test_new_room_is_seeded_for_the_horizon(room, today, settings):
    slots = AvailabilitySlot.objects.filter(room=room)
    assert slots.count() == settings.AVAILABILITY_HORIZON_DAYS
    assert slots.order_by('date').first().date == today
    assert all(slot.available_count == 5 and slot.blocked_count == 0 for slot in slots)


def test_missing_slot_reports_full_quantity(room, today):
    assert AvailabilityLedger(room).check_availability(today + timedelta(days=200)) == 5


def test_check_availability_subtracts_blocked(room, stay):
    check_in, _ = stay
    AvailabilitySlot.objects.filter(room=room, date=check_in).update(available_count=4, blocked_count=1)
    assert AvailabilityLedger(room).check_availability(check_in) == 3


def test_reserve_decrements_every_night(room, stay):
    ledger = AvailabilityLedger(room)
    ledger.reserve(*stay, 2)
    assert slot_counts(room, *stay) == [3, 3, 3]


def test_reserve_creates_slots_beyond_horizon(room, today):
    check_in = today + timedelta(days=100)
    check_out = check_in + timedelta(days=2)
    AvailabilityLedger(room).reserve(check_in, check_out, 1)
    assert slot_counts(room, check_in, check_out) == [4, 4]


def test_reserve_is_all_or_nothing(room, stay):
    check_in, check_out = stay
    last_night = check_out - timedelta(days=1)
    AvailabilitySlot.objects.filter(room=room, date=last_night).update(available_count=1)

    with pytest.raises(InsufficientAvailability) as excinfo:
        AvailabilityLedger(room).reserve(check_in, check_out, 2)

    assert excinfo.value.details == {'date': last_night.isoformat(), 'available': 1}
    assert slot_counts(room, check_in, check_out) == [5, 5, 1]


def test_request_one_more_than_available_changes_nothing(room, stay):
    AvailabilitySlot.objects.filter(room=room).update(available_count=3)
    with pytest.raises(InsufficientAvailability):
        AvailabilityLedger(room).reserve(*stay, 4)
    assert slot_counts(room, *stay) == [3, 3, 3]


def test_blocked_units_cannot_be_reserved(room, stay):
    AvailabilitySlot.objects.filter(room=room).update(blocked_count=4)
    ledger = AvailabilityLedger(room)
    ledger.reserve(*stay, 1)
    with pytest.raises(InsufficientAvailability):
        ledger.reserve(*stay, 1)


def test_last_unit_goes_to_the_first_request(room, stay):
    room.quantity = 1
    AvailabilitySlot.objects.filter(room=room).update(available_count=1)
    ledger = AvailabilityLedger(room)

    ledger.reserve(*stay, 1)
    with pytest.raises(InsufficientAvailability):
        ledger.reserve(*stay, 1)
    assert slot_counts(room, *stay) == [0, 0, 0]


def test_reserve_validates_input(room, stay):
    ledger = AvailabilityLedger(room)
    with pytest.raises(InvalidDateRange):
        ledger.reserve(stay[1], stay[0], 1)
    with pytest.raises(ValidationError):
        ledger.reserve(*stay, 0)


def test_release_restores_units(room, stay):
    ledger = AvailabilityLedger(room)
    ledger.reserve(*stay, 3)
    ledger.release(*stay, 3)
    assert slot_counts(room, *stay) == [5, 5, 5]


def test_set_blocked(room, stay):
    ledger = AvailabilityLedger(room)
    ledger.set_blocked(*stay, 2)
    assert ledger.check_availability(stay[0]) == 3

    ledger.reserve(*stay, 3)
    with pytest.raises(InsufficientAvailability):
        ledger.set_blocked(*stay, 3)
    with pytest.raises(ValidationError):
        ledger.set_blocked(*stay, -1)


def test_ranges_longer_than_the_limit_are_rejected(room, today, settings):
    settings.MAX_DATE_RANGE_NIGHTS = 30
    ledger = AvailabilityLedger(room)
    too_far = today + timedelta(days=31)

    with pytest.raises(ValidationError) as excinfo:
        ledger.set_blocked(today, too_far, 1)
    assert excinfo.value.details == {'max_nights': 30}
    with pytest.raises(ValidationError):
        ledger.availability_for_range(today, too_far)
    with pytest.raises(ValidationError):
        search_availability(today, too_far)
    assert not AvailabilitySlot.objects.filter(room=room, blocked_count__gt=0).exists()
    assert AvailabilitySlot.objects.filter(room=room).count() == settings.AVAILABILITY_HORIZON_DAYS


def test_availability_for_range_breakdown(room, stay):
    ledger = AvailabilityLedger(room)
    ledger.set_blocked(*stay, 1)
    nights = ledger.availability_for_range(*stay)
    assert [night['date'] for night in nights] == [stay[0] + timedelta(days=i) for i in range(3)]
    assert all(night['sellable'] == 4 for night in nights)


def test_duplicate_slot_is_rejected(room, stay):
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            AvailabilitySlot.objects.create(room=room, date=stay[0], available_count=5)


def test_adjust_capacity(room, stay, today):
    ledger = AvailabilityLedger(room)
    ledger.reserve(*stay, 3)

    ledger.adjust_capacity(2)
    assert slot_counts(room, *stay) == [4, 4, 4]
    assert ledger.check_availability(today) == 7

    with pytest.raises(Conflict):
        ledger.adjust_capacity(-5)


def test_seed_keeps_existing_rows(room, today):
    ledger = AvailabilityLedger(room)
    ledger.reserve(today, today + timedelta(days=1), 1)
    created = ledger.seed(40)
    assert created == 10
    assert ledger.check_availability(today) == 4


def test_search_availability(room, family_room, stay):
    AvailabilityLedger(room).reserve(*stay, 5)

    results, summary = search_availability(*stay, number_of_rooms=2)
    by_type = {result['room'].room_type: result for result in results}
    assert by_type['Deluxe Suite']['is_available'] is False
    assert by_type['Family Room']['available_rooms'] == 8
    assert summary == {
        'total_rooms': 2,
        'available_rooms': 1,
        'unavailable_rooms': 1,
        'total_units_available': 8,
    }

    results, _ = search_availability(*stay, available_only=True, capacity=3)
    assert [result['room'] for result in results] == [family_room]


def test_search_respects_sale_window(room, stay):
    room.available_to = stay[0] + timedelta(days=1)
    room.save()
    results, _ = search_availability(*stay, room_id=room.id)
    assert results[0]['is_within_availability_period'] is False
    assert results[0]['is_available'] is False


@pytest.mark.django_db(transaction=True)
def test_concurrent_requests_for_last_unit(room, stay):
    AvailabilitySlot.objects.filter(room=room).update(available_count=1)
    outcomes = []

    def attempt():
        try:
            AvailabilityLedger(room).reserve(*stay, 1)
            outcomes.append('reserved')
        except InsufficientAvailability:
            outcomes.append('rejected')
        finally:
            connection.close()

    threads = [threading.Thread(target=attempt) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ['rejected', 'reserved']
    assert slot_counts(room, *stay) == [0, 0, 0]
