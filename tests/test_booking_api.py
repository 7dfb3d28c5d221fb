from datetime import timedelta

import pytest
from django.urls import reverse

from backoffice.models import Booking, Guest
from backoffice.services import AvailabilityLedger, BookingService

pytestmark = pytest.mark.django_db


def booking_payload(room, stay, guest_data, **overrides):
    payload = {
        'hotel_id': room.hotel_id,
        'room_id': room.id,
        'check_in_date': stay[0].isoformat(),
        'check_out_date': stay[1].isoformat(),
        'guest_data': guest_data,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def booking(owner, room, stay, guest_data):
    return BookingService(user=owner).create_booking(
        room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data,
    )


def test_create_booking(staff_client, room, stay, guest_data):
    response = staff_client.post(
        reverse('backoffice:booking_list'),
        booking_payload(room, stay, guest_data, payment_data={'method': 'CASH'},
                        special_requests='Late check-in'),
        content_type='application/json',
    )

    assert response.status_code == 201
    body = response.json()
    data = body['data']
    assert body['message'] == f"Booking {data['res_id']} created successfully"
    assert data['status'] == 'PENDING'
    assert data['total_amount'] == '750.00'
    assert data['room_rate'] == '250.00'
    assert data['special_requests'] == ['Late check-in']
    assert data['payments'][0]['status'] == 'COMPLETED'
    assert data['balance_due'] == '0.00'
    assert data['created_by'] == 'staff1'
    assert AvailabilityLedger(room).check_availability(stay[0]) == 4


def test_create_requires_core_fields(staff_client, room, stay, guest_data):
    payload = booking_payload(room, stay, guest_data)
    del payload['guest_data']
    response = staff_client.post(reverse('backoffice:booking_list'), payload, content_type='application/json')
    assert response.status_code == 400


def test_create_with_inverted_dates(staff_client, room, stay, guest_data):
    response = staff_client.post(
        reverse('backoffice:booking_list'),
        booking_payload(room, (stay[1], stay[0]), guest_data),
        content_type='application/json',
    )
    assert response.status_code == 400
    assert response.json()['error'] == 'invalid_date_range'
    assert Guest.objects.count() == 0


def test_create_beyond_availability(staff_client, room, stay, guest_data):
    response = staff_client.post(
        reverse('backoffice:booking_list'),
        booking_payload(room, stay, guest_data, number_of_rooms=6),
        content_type='application/json',
    )
    assert response.status_code == 409
    body = response.json()
    assert body['error'] == 'insufficient_availability'
    assert body['details']['available'] == 5
    assert Booking.objects.count() == 0


def test_invalid_json_body(staff_client):
    response = staff_client.post(
        reverse('backoffice:booking_list'), '{not json', content_type='application/json'
    )
    assert response.status_code == 400
    assert response.json()['message'] == 'Invalid JSON'


def test_list_filters(staff_client, booking, stay):
    url = reverse('backoffice:booking_list')

    response = staff_client.get(url, {'search': 'rashid'})
    assert [item['res_id'] for item in response.json()['data']] == [booking.res_id]

    response = staff_client.get(url, {'status': 'confirmed'})
    assert response.json()['data'] == []

    response = staff_client.get(url, {'start_date': (stay[0] + timedelta(days=1)).isoformat()})
    assert response.json()['pagination']['total'] == 0

    response = staff_client.get(url, {'status': 'LOST'})
    assert response.status_code == 400


def test_detail(staff_client, booking):
    response = staff_client.get(reverse('backoffice:booking_detail', args=[booking.id]))
    assert response.json()['data']['guest']['first_name'] == 'Ahmed'

    response = staff_client.get(reverse('backoffice:booking_detail', args=[booking.id + 1000]))
    assert response.status_code == 404


def test_update_reprices(staff_client, booking, room, stay):
    new_out = stay[1] + timedelta(days=1)
    response = staff_client.put(
        reverse('backoffice:booking_detail', args=[booking.id]),
        {'check_out_date': new_out.isoformat(), 'notes': 'Extended'},
        content_type='application/json',
    )
    assert response.status_code == 200
    data = response.json()['data']
    assert data['number_of_nights'] == 4
    assert data['total_amount'] == '1000.00'
    assert data['notes'] == 'Extended'
    assert AvailabilityLedger(room).check_availability(stay[1]) == 4


def test_invalid_transition_conflicts(staff_client, booking):
    url = reverse('backoffice:booking_detail', args=[booking.id])
    staff_client.put(url, {'status': 'CHECKED_IN'}, content_type='application/json')
    response = staff_client.put(url, {'status': 'PENDING'}, content_type='application/json')
    assert response.status_code == 409


def test_cancel_through_delete(staff_client, booking, room, stay):
    response = staff_client.delete(reverse('backoffice:booking_detail', args=[booking.id]))
    assert response.status_code == 200
    assert response.json()['data']['status'] == 'CANCELLED'
    assert AvailabilityLedger(room).check_availability(stay[0]) == 5

    response = staff_client.delete(reverse('backoffice:booking_detail', args=[booking.id]))
    assert response.status_code == 409


def test_hard_delete_is_owner_only(staff_client, owner_client, booking, room, stay):
    url = reverse('backoffice:booking_detail', args=[booking.id]) + '?action=delete'
    assert staff_client.delete(url).status_code == 403

    response = owner_client.delete(url)
    assert response.status_code == 200
    assert response.json()['message'] == f'Booking {booking.res_id} deleted successfully'
    assert not Booking.objects.filter(pk=booking.pk).exists()
    assert AvailabilityLedger(room).check_availability(stay[0]) == 5


def test_unknown_delete_action(owner_client, booking):
    url = reverse('backoffice:booking_detail', args=[booking.id]) + '?action=archive'
    assert owner_client.delete(url).status_code == 400


def test_availability_search(staff_client, room, family_room, stay, booking):
    response = staff_client.get(reverse('backoffice:booking_availability'), {
        'check_in_date': stay[0].isoformat(),
        'check_out_date': stay[1].isoformat(),
        'number_of_rooms': 5,
    })
    data = response.json()['data']
    by_type = {item['room']['room_type']: item for item in data['rooms']}
    assert by_type['Deluxe Suite']['available_rooms'] == 4
    assert by_type['Deluxe Suite']['is_available'] is False
    assert by_type['Family Room']['is_available'] is True
    assert data['summary']['available_rooms'] == 1


def test_availability_search_for_several_ranges(staff_client, room, stay):
    later = stay[1] + timedelta(days=5)
    response = staff_client.post(reverse('backoffice:booking_availability'), {
        'date_ranges': [
            {'check_in_date': stay[0].isoformat(), 'check_out_date': stay[1].isoformat()},
            {'check_in_date': later.isoformat(), 'check_out_date': (later + timedelta(days=2)).isoformat()},
        ],
        'room_id': room.id,
    }, content_type='application/json')

    assert response.status_code == 200
    results = response.json()['data']
    assert [result['check_in_date'] for result in results] == [stay[0].isoformat(), later.isoformat()]

    response = staff_client.post(
        reverse('backoffice:booking_availability'), {'date_ranges': []}, content_type='application/json'
    )
    assert response.status_code == 400
