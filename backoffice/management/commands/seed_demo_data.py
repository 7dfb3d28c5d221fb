from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone


USERS = [
    {'username': 'administrator', 'email': 'administrator@hotel.com', 'role': 'OWNER',
     'first_name': 'Administrator', 'last_name': 'Administrator', 'phone': '+1-555-0001'},
    {'username': 'staff1', 'email': 'staff1@hotel.com', 'role': 'STAFF',
     'first_name': 'John', 'last_name': 'Staff', 'phone': '+1-555-0002'},
    {'username': 'staff2', 'email': 'staff2@hotel.com', 'role': 'STAFF',
     'first_name': 'Sarah', 'last_name': 'Manager', 'phone': '+1-555-0003'},
]

HOTELS = [
    {'name': 'Grand Palace Hotel', 'code': 'GPH001',
     'description': 'Luxury hotel in the heart of the city',
     'address': '123 Main Street, Downtown', 'location': 'Downtown Business District'},
    {'name': 'Ocean View Resort', 'code': 'OVR002',
     'description': 'Beautiful resort with stunning ocean views',
     'address': '456 Ocean Drive, Beachfront', 'location': 'Beachfront Resort Area'},
    {'name': 'Mountain Lodge', 'code': 'ML003',
     'description': 'Cozy lodge with mountain scenery',
     'address': '789 Summit Road', 'location': 'Mountain Valley'},
    {'name': 'City Center Hotel', 'code': 'CCH004',
     'description': 'Modern business hotel close to the financial district',
     'address': '12 Commerce Avenue', 'location': 'Financial District'},
]

# (hotel code, room type, description, purchase, base, alternative, quantity, board, size, capacity, floor)
ROOMS = [
    ('GPH001', 'Deluxe Suite', 'Luxury suite with king bed, marble bathroom and private balcony',
     '200.00', '250.00', '300.00', 5, 'BED_BREAKFAST', '45 sqm', 2, 1),
    ('GPH001', 'Family Room', 'Spacious room with two double beds and a play area',
     '140.00', '180.00', '220.00', 8, 'HALF_BOARD', '38 sqm', 4, 2),
    ('GPH001', 'Presidential Suite', 'Top-floor suite with living room, jacuzzi and butler service',
     '350.00', '450.00', '550.00', 1, 'FULL_BOARD', '120 sqm', 3, 10),
    ('OVR002', 'Ocean View Room', 'Queen room facing the ocean',
     '160.00', '200.00', '240.00', 10, 'BED_BREAKFAST', '32 sqm', 2, 3),
    ('ML003', 'Mountain View Cabin', 'Wooden cabin with fireplace and mountain view',
     '90.00', '120.00', '150.00', 6, 'ROOM_ONLY', '28 sqm', 2, 1),
    ('CCH004', 'Business Room', 'Work-friendly room with desk and fast WiFi',
     '120.00', '150.00', '180.00', 15, 'BED_BREAKFAST', '26 sqm', 2, 5),
]

GUESTS = [
    {'first_name': 'Ahmed', 'last_name': 'Al-Rashid', 'email': 'ahmed.alrashid@email.com',
     'phone': '+971-50-123-4567', 'nationality': 'UAE', 'travel_agent': 'Emirates Travel Agency',
     'classification': 'Regular', 'is_vip': True},
    {'first_name': 'Sarah', 'last_name': 'Johnson', 'email': 'sarah.johnson@email.com',
     'phone': '+1-555-987-6543', 'nationality': 'American', 'group': 'Corporate',
     'classification': 'Corporate'},
    {'first_name': 'Mohammed', 'last_name': 'Hassan', 'email': 'mohammed.hassan@email.com',
     'phone': '+966-50-111-2222', 'nationality': 'Saudi Arabian', 'classification': 'Regular',
     'is_vip': True},
]

DEMO_PASSWORD = 'password123'


class Command(BaseCommand):
    help = 'Load demo users, hotels, rooms, seasonal prices, guests, bookings and payments'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush',
            action='store_true',
            help='Delete existing back-office data before seeding'
        )

    def handle(self, *args, **options):
        from backoffice.models import (
            User, Hotel, HotelAgreement, Room, SeasonalPrice, AvailabilitySlot,
            Guest, Booking, Payment,
        )
        from backoffice.services import BookingService

        if options['flush']:
            with transaction.atomic():
                Payment.objects.all().delete()
                Booking.objects.all().delete()
                Guest.objects.all().delete()
                AvailabilitySlot.objects.all().delete()
                SeasonalPrice.objects.all().delete()
                Room.objects.all().delete()
                HotelAgreement.objects.all().delete()
                Hotel.objects.all().delete()
            self.stdout.write(self.style.WARNING("Existing back-office data deleted"))

        if Hotel.objects.filter(code='GPH001').exists():
            self.stdout.write(self.style.ERROR("Demo data already present (use --flush to reload)"))
            return

        today = timezone.localdate()

        with transaction.atomic():
            # Users
            users = {}
            for data in USERS:
                user, created = User.objects.get_or_create(username=data['username'], defaults=data)
                if created:
                    user.set_password(DEMO_PASSWORD)
                    user.save()
                users[user.username] = user
                self.stdout.write(f"  {'✓ Created' if created else '- Found'} user {user.username} ({user.role})")
            owner = users['administrator']

            # Hotels
            hotels = {}
            for data in HOTELS:
                hotels[data['code']] = Hotel.objects.create(created_by=owner, **data)
            self.stdout.write(self.style.SUCCESS(f"  ✓ Created {len(hotels)} hotels"))

            # Rooms (availability slots are opened by the post_save signal)
            rooms = {}
            for (code, room_type, description, purchase, base, alternative,
                 quantity, board_type, size, capacity, floor) in ROOMS:
                rooms[room_type] = Room.objects.create(
                    hotel=hotels[code],
                    room_type=room_type,
                    description=description,
                    purchase_price=Decimal(purchase),
                    base_price=Decimal(base),
                    alternative_price=Decimal(alternative),
                    quantity=quantity,
                    board_type=board_type,
                    size=size,
                    capacity=capacity,
                    floor=floor,
                    created_by=owner,
                )
            self.stdout.write(self.style.SUCCESS(f"  ✓ Created {len(rooms)} rooms with availability slots"))

            # Seasonal prices for the flagship suite
            deluxe = rooms['Deluxe Suite']
            holiday_start = today.replace(month=12, day=20)
            if holiday_start < today:
                holiday_start = holiday_start.replace(year=today.year + 1)
            SeasonalPrice.objects.create(
                room=deluxe, start_date=holiday_start,
                end_date=holiday_start + timedelta(days=16), price=Decimal('350.00')
            )
            summer_start = today.replace(month=6, day=1)
            if summer_start < today:
                summer_start = summer_start.replace(year=today.year + 1)
            SeasonalPrice.objects.create(
                room=deluxe, start_date=summer_start,
                end_date=summer_start + timedelta(days=91), price=Decimal('280.00')
            )
            self.stdout.write(self.style.SUCCESS("  ✓ Created seasonal prices"))

            # Guests
            guests = [Guest.objects.create(**data) for data in GUESTS]
            self.stdout.write(self.style.SUCCESS(f"  ✓ Created {len(guests)} guests"))

            # Bookings go through the booking service so the ledger stays consistent
            service = BookingService(user=owner)
            bookings = [
                service.create_booking(
                    room_id=deluxe.id, hotel_id=deluxe.hotel_id,
                    check_in=today + timedelta(days=3), check_out=today + timedelta(days=6),
                    guest_data={'id': guests[0].id}, rate_code='CORP',
                    status=Booking.Status.CONFIRMED,
                    payment_data={'method': 'CASH'},
                ),
                service.create_booking(
                    room_id=rooms['Ocean View Room'].id, hotel_id=rooms['Ocean View Room'].hotel_id,
                    check_in=today + timedelta(days=8), check_out=today + timedelta(days=11),
                    guest_data={'id': guests[1].id}, rate_code='RACK',
                    status=Booking.Status.CONFIRMED,
                    notes='50% deposit paid on credit, remaining due at checkout',
                    payment_data={
                        'method': 'CREDIT', 'paid_amount': '300.00',
                        'remaining_due_date': (today + timedelta(days=11)).isoformat(),
                    },
                ),
                service.create_booking(
                    room_id=rooms['Family Room'].id, hotel_id=rooms['Family Room'].hotel_id,
                    check_in=today + timedelta(days=12), check_out=today + timedelta(days=17),
                    guest_data={'id': guests[2].id}, number_of_rooms=2, rate_code='FAM',
                    use_alternative_rate=True,
                    payment_data={
                        'method': 'CREDIT', 'paid_amount': '1100.00',
                        'remaining_due_date': (today + timedelta(days=17)).isoformat(),
                    },
                ),
            ]
            for booking in bookings:
                self.stdout.write(
                    f"    {booking.res_id}: {booking.room.room_type} x{booking.number_of_rooms}, "
                    f"{booking.number_of_nights} night(s), total {booking.total_amount}"
                )
            self.stdout.write(self.style.SUCCESS(f"  ✓ Created {len(bookings)} bookings with payments"))

        self.stdout.write("")
        self.stdout.write(self.style.SUCCESS("Demo data loaded."))
        self.stdout.write(f"Log in as administrator / staff1 / staff2 with password '{DEMO_PASSWORD}'")
