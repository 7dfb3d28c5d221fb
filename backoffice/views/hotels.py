"""
Hotel API views: CRUD plus agreement documents.
"""

import logging

from django.db import transaction
from django.db.models import Q

from backoffice import permissions as perms
from backoffice.exceptions import Conflict, NotFound, ValidationError
from backoffice.models import Hotel
from backoffice.serializers import serialize_agreement, serialize_hotel
from backoffice.services import AgreementService

from .mixins import ApiView

logger = logging.getLogger(__name__)

HOTEL_TEXT_FIELDS = ('alt_name', 'description', 'alt_description', 'address', 'location')


class HotelMixin:
    """Look up the hotel named by the `hotel_id` URL kwarg."""

    def get_hotel(self):
        try:
            return Hotel.objects.get(pk=self.kwargs['hotel_id'])
        except Hotel.DoesNotExist:
            raise NotFound('Hotel not found')

    def clean_code(self, value, exclude_id=None):
        code = str(value or '').strip().upper()
        if not code:
            raise ValidationError('Hotel code is required')
        clash = Hotel.objects.filter(code=code)
        if exclude_id:
            clash = clash.exclude(pk=exclude_id)
        if clash.exists():
            raise Conflict(f'Hotel code "{code}" already exists')
        return code


# =============================================================================
# HOTELS
# =============================================================================

class HotelListView(HotelMixin, ApiView):
    """API: List or create hotels."""

    permissions = {'GET': perms.HOTELS_VIEW, 'POST': perms.HOTELS_MANAGE}

    def get(self, request, *args, **kwargs):
        hotels = Hotel.objects.all()
        search = request.GET.get('search', '').strip()
        if search:
            hotels = hotels.filter(
                Q(name__icontains=search)
                | Q(alt_name__icontains=search)
                | Q(code__icontains=search)
                | Q(address__icontains=search)
            )
        page, pagination = self.paginate(request, hotels.order_by('name'))
        return self.success_response(
            data=[serialize_hotel(hotel) for hotel in page],
            pagination=pagination
        )

    def post(self, request, *args, **kwargs):
        data = self.parse_body(request)

        name = str(data.get('name') or '').strip()
        if not name:
            raise ValidationError('Hotel name is required')
        code = self.clean_code(data.get('code'))

        hotel = Hotel.objects.create(
            name=name,
            code=code,
            created_by=request.user,
            **{field: str(data.get(field) or '').strip() for field in HOTEL_TEXT_FIELDS}
        )
        logger.info("Hotel %s created by %s", hotel.code, request.user.username)
        return self.success_response(
            data=serialize_hotel(hotel),
            message=f'Hotel "{hotel.name}" created successfully',
            status=201
        )


class HotelDetailView(HotelMixin, ApiView):
    """API: Retrieve, update or delete a hotel."""

    permissions = {
        'GET': perms.HOTELS_VIEW,
        'PUT': perms.HOTELS_MANAGE,
        'DELETE': perms.HOTELS_DELETE,
    }

    def get(self, request, *args, **kwargs):
        return self.success_response(data=serialize_hotel(self.get_hotel(), with_counts=True))

    def put(self, request, *args, **kwargs):
        hotel = self.get_hotel()
        data = self.parse_body(request)

        if 'name' in data:
            name = str(data['name'] or '').strip()
            if not name:
                raise ValidationError('Hotel name cannot be empty')
            hotel.name = name
        if 'code' in data:
            hotel.code = self.clean_code(data['code'], exclude_id=hotel.pk)
        for field in HOTEL_TEXT_FIELDS:
            if field in data:
                setattr(hotel, field, str(data[field] or '').strip())

        hotel.save()
        return self.success_response(
            data=serialize_hotel(hotel),
            message=f'Hotel "{hotel.name}" updated successfully'
        )

    def delete(self, request, *args, **kwargs):
        hotel = self.get_hotel()
        if hotel.bookings.exists():
            raise Conflict('Cannot delete a hotel that has bookings')

        name = hotel.name
        stored_files = list(hotel.agreements.values_list('file', flat=True))
        with transaction.atomic():
            hotel.delete()
        for path in stored_files:
            AgreementService.remove_file(path)

        logger.info("Hotel %s deleted by %s", name, request.user.username)
        return self.success_response(message=f'Hotel "{name}" deleted successfully')


# =============================================================================
# AGREEMENTS
# =============================================================================

class HotelAgreementListView(HotelMixin, ApiView):
    """API: List or upload agreement documents."""

    permissions = {'GET': perms.AGREEMENTS_VIEW, 'POST': perms.AGREEMENTS_MANAGE}

    def get(self, request, *args, **kwargs):
        hotel = self.get_hotel()
        return self.success_response(
            data=[serialize_agreement(agreement) for agreement in hotel.agreements.all()]
        )

    def post(self, request, *args, **kwargs):
        hotel = self.get_hotel()
        agreements = AgreementService(hotel, request.user).upload(request.FILES.getlist('files'))
        return self.success_response(
            data=[serialize_agreement(agreement) for agreement in agreements],
            message=f'{len(agreements)} file(s) uploaded successfully',
            status=201
        )


class HotelAgreementDetailView(HotelMixin, ApiView):
    """API: Delete an agreement document."""

    permissions = {'DELETE': perms.AGREEMENTS_MANAGE}

    def delete(self, request, *args, **kwargs):
        service = AgreementService(self.get_hotel(), request.user)
        agreement = service.get(kwargs['agreement_id'])
        file_name = agreement.file_name
        service.delete(agreement)
        return self.success_response(message=f'Agreement "{file_name}" deleted successfully')


class HotelAgreementDownloadView(HotelMixin, ApiView):
    """API: Download an agreement document as an attachment."""

    permissions = {'GET': perms.AGREEMENTS_VIEW}

    def get(self, request, *args, **kwargs):
        service = AgreementService(self.get_hotel(), request.user)
        return service.download(service.get(kwargs['agreement_id']))
