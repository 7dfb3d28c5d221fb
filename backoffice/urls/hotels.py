"""Hotel URL patterns: hotel CRUD and agreement documents."""

from django.urls import path
from backoffice.views import (
    HotelListView, HotelDetailView,
    HotelAgreementListView, HotelAgreementDetailView, HotelAgreementDownloadView,
)

urlpatterns = [
    path('hotels/', HotelListView.as_view(), name='hotel_list'),
    path('hotels/<int:hotel_id>/', HotelDetailView.as_view(), name='hotel_detail'),

    # Agreements
    path('hotels/<int:hotel_id>/agreements/',
         HotelAgreementListView.as_view(), name='hotel_agreement_list'),
    path('hotels/<int:hotel_id>/agreements/<int:agreement_id>/',
         HotelAgreementDetailView.as_view(), name='hotel_agreement_detail'),
    path('hotels/<int:hotel_id>/agreements/<int:agreement_id>/download/',
         HotelAgreementDownloadView.as_view(), name='hotel_agreement_download'),
]
