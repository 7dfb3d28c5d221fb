"""
Views package.

Re-exports all API views so URL modules can import from one place:
    from backoffice.views import HotelListView, BookingDetailView, etc.
"""

# Base
from .mixins import ApiView, BackofficeApiMixin

# Auth
from .auth import LoginView, LogoutView, CurrentUserView

# Hotels & agreements
from .hotels import (
    HotelListView, HotelDetailView,
    HotelAgreementListView, HotelAgreementDetailView, HotelAgreementDownloadView,
)

# Rooms, seasonal prices, availability, rates
from .rooms import (
    RoomListView, RoomDetailView,
    SeasonalPriceListView, SeasonalPriceDetailView,
    RoomAvailabilityView, RoomRateQuoteView,
)

# Bookings
from .bookings import BookingListView, BookingDetailView, BookingAvailabilityView

# Guests
from .guests import GuestListView, GuestDetailView

# Users
from .users import UserListView, UserDetailView
