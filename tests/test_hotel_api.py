import pytest
from django.urls import reverse

from backoffice.models import Hotel
from backoffice.services import BookingService

pytestmark = pytest.mark.django_db


def hotel_list():
    return reverse('backoffice:hotel_list')


def test_create_hotel(owner_client, owner):
    response = owner_client.post(hotel_list(), {
        'name': 'Mountain Lodge',
        'code': 'ml003',
        'address': '789 Summit Road',
    }, content_type='application/json')

    assert response.status_code == 201
    data = response.json()['data']
    assert data['code'] == 'ML003'
    assert Hotel.objects.get(code='ML003').created_by == owner


def test_hotel_name_and_code_required(owner_client):
    response = owner_client.post(hotel_list(), {'code': 'X1'}, content_type='application/json')
    assert response.status_code == 400
    response = owner_client.post(hotel_list(), {'name': 'X'}, content_type='application/json')
    assert response.status_code == 400


def test_duplicate_code_conflicts(owner_client, hotel):
    response = owner_client.post(
        hotel_list(), {'name': 'Copy', 'code': 'gph001'}, content_type='application/json'
    )
    assert response.status_code == 409


def test_list_search_and_pagination(owner_client, hotel, other_hotel):
    response = owner_client.get(hotel_list(), {'limit': 1})
    body = response.json()
    assert len(body['data']) == 1
    assert body['pagination'] == {'page': 1, 'limit': 1, 'total': 2, 'total_pages': 2}

    response = owner_client.get(hotel_list(), {'search': 'ocean'})
    assert [item['code'] for item in response.json()['data']] == ['OVR002']


def test_detail_includes_counts(staff_client, hotel, room):
    response = staff_client.get(reverse('backoffice:hotel_detail', args=[hotel.id]))
    assert response.json()['data']['counts'] == {'rooms': 1, 'bookings': 0, 'agreements': 0}


def test_update_hotel(owner_client, hotel, other_hotel):
    url = reverse('backoffice:hotel_detail', args=[hotel.id])
    response = owner_client.put(url, {'location': 'Old Town'}, content_type='application/json')
    assert response.status_code == 200
    hotel.refresh_from_db()
    assert hotel.location == 'Old Town'

    response = owner_client.put(url, {'code': 'OVR002'}, content_type='application/json')
    assert response.status_code == 409


def test_missing_hotel(owner_client):
    response = owner_client.get(reverse('backoffice:hotel_detail', args=[424242]))
    assert response.status_code == 404
    assert response.json()['message'] == 'Hotel not found'


def test_delete_hotel_with_bookings_conflicts(owner_client, owner, hotel, room, stay, guest_data):
    BookingService(user=owner).create_booking(
        room_id=room.id, check_in=stay[0], check_out=stay[1], guest_data=guest_data,
    )
    response = owner_client.delete(reverse('backoffice:hotel_detail', args=[hotel.id]))
    assert response.status_code == 409
    assert Hotel.objects.filter(pk=hotel.pk).exists()


def test_delete_hotel(owner_client, hotel, room):
    response = owner_client.delete(reverse('backoffice:hotel_detail', args=[hotel.id]))
    assert response.status_code == 200
    assert not Hotel.objects.filter(pk=hotel.pk).exists()
