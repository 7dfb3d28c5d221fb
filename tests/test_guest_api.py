import pytest
from django.urls import reverse

from backoffice.models import Guest
from backoffice.services import BookingService, GuestService

pytestmark = pytest.mark.django_db


def test_create_guest(staff_client, guest_data):
    response = staff_client.post(
        reverse('backoffice:guest_list'), dict(guest_data, is_vip='true'), content_type='application/json'
    )
    assert response.status_code == 201
    data = response.json()['data']
    assert data['full_name'] == 'Ahmed Al-Rashid'
    assert data['is_vip'] is True
    assert data['profile_id'].startswith('PROF-')


@pytest.mark.parametrize('payload', [
    {'last_name': 'Nobody'},
    {'first_name': 'Ahmed', 'email': 'not-an-email'},
    {'first_name': 'Ahmed', 'date_of_birth': '31/12/1980'},
])
def test_invalid_guest(staff_client, payload):
    response = staff_client.post(reverse('backoffice:guest_list'), payload, content_type='application/json')
    assert response.status_code == 400
    assert Guest.objects.count() == 0


def test_list_search_and_vip_filter(staff_client):
    Guest.objects.create(first_name='Sarah', last_name='Johnson', email='sarah.johnson@email.com')
    Guest.objects.create(first_name='Mohammed', last_name='Hassan', is_vip=True)

    response = staff_client.get(reverse('backoffice:guest_list'), {'search': 'johnson'})
    assert [item['first_name'] for item in response.json()['data']] == ['Sarah']

    response = staff_client.get(reverse('backoffice:guest_list'), {'is_vip': 'true'})
    assert [item['first_name'] for item in response.json()['data']] == ['Mohammed']


def test_detail_counts_bookings(staff_client, owner, room, stay, guest_data):
    booking = BookingService(user=owner).create_booking(
        room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data,
    )
    response = staff_client.get(reverse('backoffice:guest_detail', args=[booking.guest_id]))
    assert response.json()['data']['booking_count'] == 1


def test_partial_update(staff_client):
    guest = Guest.objects.create(first_name='Sarah', last_name='Johnson')
    url = reverse('backoffice:guest_detail', args=[guest.id])

    response = staff_client.put(url, {'phone': '+1-555-987-6543'}, content_type='application/json')
    assert response.status_code == 200
    guest.refresh_from_db()
    assert guest.phone == '+1-555-987-6543'
    assert guest.first_name == 'Sarah'

    response = staff_client.put(url, {'first_name': ''}, content_type='application/json')
    assert response.status_code == 400


def test_missing_guest(staff_client):
    response = staff_client.get(reverse('backoffice:guest_detail', args=[31337]))
    assert response.status_code == 404


def test_unexpected_error_becomes_internal_error_envelope(staff_client, monkeypatch):
    def broken(self, guest_id):
        raise RuntimeError('database went away')

    monkeypatch.setattr(GuestService, 'get_guest', broken)
    response = staff_client.get(reverse('backoffice:guest_detail', args=[1]))

    assert response.status_code == 500
    assert response.json() == {
        'success': False, 'error': 'internal_error', 'message': 'Internal server error',
    }
