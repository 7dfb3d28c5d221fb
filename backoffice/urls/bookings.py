"""Booking URL patterns: bookings, availability search and guests."""

from django.urls import path
from backoffice.views import (
    BookingListView, BookingDetailView, BookingAvailabilityView,
    GuestListView, GuestDetailView,
)

urlpatterns = [
    path('bookings/', BookingListView.as_view(), name='booking_list'),
    path('bookings/availability/', BookingAvailabilityView.as_view(), name='booking_availability'),
    path('bookings/<int:booking_id>/', BookingDetailView.as_view(), name='booking_detail'),

    # Guests
    path('guests/', GuestListView.as_view(), name='guest_list'),
    path('guests/<int:guest_id>/', GuestDetailView.as_view(), name='guest_detail'),
]
