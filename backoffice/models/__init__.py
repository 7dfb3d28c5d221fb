"""
Back-office models package.

Re-exports all models so Django migrations and imports work unchanged:
    from backoffice.models import Hotel, Room, Booking, etc.
"""

# Core: users, hotels, agreements
from .core import (
    User,
    Hotel,
    HotelAgreement,
)

# Rooms: room types, seasonal prices, availability ledger
from .rooms import (
    Room,
    SeasonalPrice,
    AvailabilitySlot,
)

# Bookings: guests, bookings, payments
from .bookings import (
    Guest,
    Booking,
    Payment,
)

__all__ = [
    # Core
    'User', 'Hotel', 'HotelAgreement',
    # Rooms
    'Room', 'SeasonalPrice', 'AvailabilitySlot',
    # Bookings
    'Guest', 'Booking', 'Payment',
]
