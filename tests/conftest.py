from datetime import timedelta
from decimal import Decimal

import pytest
from django.test import Client
from django.utils import timezone

from backoffice.models import Hotel, Room, User

PASSWORD = 'password123'


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / 'media')
    return settings.MEDIA_ROOT


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def stay(today):
    """Three-night stay inside the seeded availability horizon."""
    check_in = today + timedelta(days=10)
    return check_in, check_in + timedelta(days=3)


@pytest.fixture
def owner(db):
    return User.objects.create_user(
        username='administrator',
        email='administrator@hotel.com',
        password=PASSWORD,
        role=User.Role.OWNER,
    )


@pytest.fixture
def staff(db):
    return User.objects.create_user(
        username='staff1',
        email='staff1@hotel.com',
        password=PASSWORD,
        role=User.Role.STAFF,
    )


@pytest.fixture
def owner_client(owner):
    client = Client()
    client.force_login(owner)
    return client


@pytest.fixture
def staff_client(staff):
    client = Client()
    client.force_login(staff)
    return client


@pytest.fixture
def hotel(owner):
    return Hotel.objects.create(
        name='Grand Palace Hotel',
        code='GPH001',
        address='123 Main Street, Downtown',
        created_by=owner,
    )


@pytest.fixture
def other_hotel(owner):
    return Hotel.objects.create(name='Ocean View Resort', code='OVR002', created_by=owner)


@pytest.fixture
def room(hotel, owner):
    return Room.objects.create(
        hotel=hotel,
        room_type='Deluxe Suite',
        description='Luxury suite with king bed',
        purchase_price=Decimal('200.00'),
        base_price=Decimal('250.00'),
        alternative_price=Decimal('300.00'),
        quantity=5,
        board_type=Room.BoardType.BED_BREAKFAST,
        created_by=owner,
    )


@pytest.fixture
def family_room(hotel, owner):
    return Room.objects.create(
        hotel=hotel,
        room_type='Family Room',
        description='Two double beds',
        purchase_price=Decimal('140.00'),
        base_price=Decimal('180.00'),
        alternative_price=Decimal('220.00'),
        quantity=8,
        board_type=Room.BoardType.HALF_BOARD,
        capacity=4,
        created_by=owner,
    )


@pytest.fixture
def guest_data():
    return {
        'first_name': 'Ahmed',
        'last_name': 'Al-Rashid',
        'email': 'ahmed.alrashid@email.com',
        'phone': '+971-50-123-4567',
        'nationality': 'UAE',
    }
