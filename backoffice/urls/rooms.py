"""Room URL patterns: room CRUD, seasonal prices, availability and rates."""

from django.urls import path
from backoffice.views import (
    RoomListView, RoomDetailView,
    SeasonalPriceListView, SeasonalPriceDetailView,
    RoomAvailabilityView, RoomRateQuoteView,
)

urlpatterns = [
    path('rooms/', RoomListView.as_view(), name='room_list'),
    path('rooms/<int:room_id>/', RoomDetailView.as_view(), name='room_detail'),

    # Seasonal prices
    path('rooms/<int:room_id>/seasonal-prices/',
         SeasonalPriceListView.as_view(), name='seasonal_price_list'),
    path('rooms/<int:room_id>/seasonal-prices/<int:price_id>/',
         SeasonalPriceDetailView.as_view(), name='seasonal_price_detail'),

    # Ledger and pricing
    path('rooms/<int:room_id>/availability/',
         RoomAvailabilityView.as_view(), name='room_availability'),
    path('rooms/<int:room_id>/rates/',
         RoomRateQuoteView.as_view(), name='room_rate_quote'),
]
