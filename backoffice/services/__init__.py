"""
Back-office services package.

    from backoffice.services import RateResolver, AvailabilityLedger, BookingService
"""

from .rate_service import RateResolver, check_date_range, stay_dates
from .availability_service import AvailabilityLedger, search_availability
from .guest_service import GuestService, clean_guest_data
from .booking_service import BookingService, build_payment_values
from .agreement_service import AgreementService

__all__ = [
    'RateResolver', 'check_date_range', 'stay_dates',
    'AvailabilityLedger', 'search_availability',
    'GuestService', 'clean_guest_data',
    'BookingService', 'build_payment_values',
    'AgreementService',
]
