"""
Room API views: CRUD, seasonal prices, availability slots and rate quotes.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from backoffice import permissions as perms
from backoffice.exceptions import Conflict, NotFound, ValidationError
from backoffice.models import Booking, Hotel, Room, SeasonalPrice
from backoffice.serializers import serialize_room, serialize_seasonal_price
from backoffice.services import AvailabilityLedger, RateResolver

from .mixins import ApiView

logger = logging.getLogger(__name__)

ROOM_TEXT_FIELDS = ('alt_description', 'size')


class RoomMixin:
    """Look up the room named by the `room_id` URL kwarg."""

    def get_room(self):
        try:
            return Room.objects.select_related('hotel').get(pk=self.kwargs['room_id'])
        except Room.DoesNotExist:
            raise NotFound('Room not found')

    def clean_room_data(self, data, room=None):
        """
        Validate a room payload. With `room`, only supplied fields are
        checked and the price invariant is tested against merged values.
        """
        partial = room is not None
        cleaned = {}

        def required(field):
            return not partial or field in data

        if not partial:
            hotel_id = self.parse_int(data.get('hotel_id'), 'hotel_id')
            if hotel_id is None:
                raise ValidationError('Hotel is required')
            try:
                cleaned['hotel'] = Hotel.objects.get(pk=hotel_id)
            except Hotel.DoesNotExist:
                raise NotFound('Hotel not found')

        if required('room_type'):
            room_type = str(data.get('room_type') or '').strip()
            if not room_type:
                raise ValidationError('Room type is required')
            cleaned['room_type'] = room_type

        if required('description'):
            description = str(data.get('description') or '').strip()
            if not description:
                raise ValidationError('Room description is required')
            cleaned['description'] = description

        if required('purchase_price'):
            purchase_price = self.parse_decimal(data.get('purchase_price'), 'purchase_price')
            if purchase_price is None or purchase_price < 0:
                raise ValidationError('Purchase price is required and cannot be negative')
            cleaned['purchase_price'] = purchase_price

        if required('base_price'):
            base_price = self.parse_decimal(data.get('base_price'), 'base_price')
            if base_price is None or base_price <= 0:
                raise ValidationError('Base price must be a positive number')
            cleaned['base_price'] = base_price

        if 'alternative_price' in data:
            alternative_price = self.parse_decimal(data.get('alternative_price'), 'alternative_price')
            if alternative_price is not None and alternative_price <= 0:
                raise ValidationError('Alternative price must be a positive number')
            cleaned['alternative_price'] = alternative_price

        if required('quantity'):
            quantity = self.parse_int(data.get('quantity'), 'quantity')
            if quantity is None or quantity <= 0:
                raise ValidationError('Quantity must be a positive number')
            cleaned['quantity'] = quantity

        if 'board_type' in data:
            board_type = str(data.get('board_type') or '').strip().upper()
            if board_type not in Room.BoardType.values:
                raise ValidationError(
                    f'Board type must be one of: {", ".join(Room.BoardType.values)}'
                )
            cleaned['board_type'] = board_type

        if 'capacity' in data:
            capacity = self.parse_int(data.get('capacity'), 'capacity', 2)
            if capacity <= 0:
                raise ValidationError('Capacity must be a positive number')
            cleaned['capacity'] = capacity

        if 'floor' in data:
            cleaned['floor'] = self.parse_int(data.get('floor'), 'floor')

        for field in ('available_from', 'available_to'):
            if field in data:
                cleaned[field] = self.parse_date(data.get(field), field)

        for field in ROOM_TEXT_FIELDS:
            if field in data:
                cleaned[field] = str(data.get(field) or '').strip()

        if 'is_active' in data:
            cleaned['is_active'] = self.parse_bool(data.get('is_active'), 'is_active', True)

        def merged(field):
            if field in cleaned:
                return cleaned[field]
            return getattr(room, field) if room else None

        if merged('base_price') <= merged('purchase_price'):
            raise ValidationError('Base price must be greater than purchase price')

        available_from, available_to = merged('available_from'), merged('available_to')
        if available_from and available_to and available_to < available_from:
            raise ValidationError('Availability end date must not be before its start date')

        return cleaned


# =============================================================================
# ROOMS
# =============================================================================

class RoomListView(RoomMixin, ApiView):
    """API: List or create rooms."""

    permissions = {'GET': perms.ROOMS_VIEW, 'POST': perms.ROOMS_MANAGE}

    def get(self, request, *args, **kwargs):
        rooms = Room.objects.select_related('hotel')

        search = request.GET.get('search', '').strip()
        if search:
            rooms = rooms.filter(
                Q(room_type__icontains=search)
                | Q(description__icontains=search)
                | Q(alt_description__icontains=search)
                | Q(hotel__name__icontains=search)
            )
        hotel_id = self.parse_int(request.GET.get('hotel_id'), 'hotel_id')
        if hotel_id:
            rooms = rooms.filter(hotel_id=hotel_id)
        board_type = request.GET.get('board_type')
        if board_type:
            rooms = rooms.filter(board_type=board_type.upper())
        if request.GET.get('is_active') not in (None, ''):
            rooms = rooms.filter(is_active=self.parse_bool(request.GET['is_active'], 'is_active'))

        page, pagination = self.paginate(request, rooms.order_by('hotel__name', 'room_type', 'id'))
        return self.success_response(
            data=[serialize_room(room) for room in page],
            pagination=pagination
        )

    def post(self, request, *args, **kwargs):
        cleaned = self.clean_room_data(self.parse_body(request))
        room = Room.objects.create(created_by=request.user, **cleaned)
        logger.info("Room %s (%s) created for hotel %s", room.pk, room.room_type, room.hotel.code)
        return self.success_response(
            data=serialize_room(room),
            message=f'Room "{room.room_type}" created successfully',
            status=201
        )


class RoomDetailView(RoomMixin, ApiView):
    """API: Retrieve, update or delete a room."""

    permissions = {
        'GET': perms.ROOMS_VIEW,
        'PUT': perms.ROOMS_MANAGE,
        'DELETE': perms.ROOMS_DELETE,
    }

    def get(self, request, *args, **kwargs):
        return self.success_response(data=serialize_room(self.get_room(), with_seasonal_prices=True))

    def put(self, request, *args, **kwargs):
        room = self.get_room()
        cleaned = self.clean_room_data(self.parse_body(request), room=room)

        previous_quantity = room.quantity
        with transaction.atomic():
            for field, value in cleaned.items():
                setattr(room, field, value)
            if room.quantity != previous_quantity:
                AvailabilityLedger(room).adjust_capacity(room.quantity - previous_quantity)
            room.save()

        return self.success_response(
            data=serialize_room(room, with_seasonal_prices=True),
            message=f'Room "{room.room_type}" updated successfully'
        )

    def delete(self, request, *args, **kwargs):
        room = self.get_room()
        if room.bookings.filter(status__in=Booking.ACTIVE_STATUSES).exists():
            raise Conflict('Cannot delete a room with active bookings')

        if room.bookings.exists():
            room.is_active = False
            room.save(update_fields=['is_active', 'updated_at'])
            logger.info("Room %s deactivated (has booking history)", room.pk)
            return self.success_response(
                data={'id': room.id, 'deactivated': True},
                message=f'Room "{room.room_type}" has booking history and was deactivated'
            )

        room_type = room.room_type
        room.delete()
        logger.info("Room %s deleted by %s", kwargs['room_id'], request.user.username)
        return self.success_response(message=f'Room "{room_type}" deleted successfully')


# =============================================================================
# SEASONAL PRICES
# =============================================================================

class SeasonalPriceListView(RoomMixin, ApiView):
    """API: List or add seasonal prices for a room."""

    permissions = {'GET': perms.ROOMS_VIEW, 'POST': perms.ROOMS_MANAGE}

    def get(self, request, *args, **kwargs):
        room = self.get_room()
        return self.success_response(
            data=[serialize_seasonal_price(sp) for sp in room.seasonal_prices.all()]
        )

    def post(self, request, *args, **kwargs):
        room = self.get_room()
        data = self.parse_body(request)

        start_date = self.parse_date(data.get('start_date'), 'start_date')
        end_date = self.parse_date(data.get('end_date'), 'end_date')
        price = self.parse_decimal(data.get('price'), 'price')

        if not start_date or not end_date:
            raise ValidationError('Valid start and end dates are required')
        if end_date <= start_date:
            raise ValidationError('End date must be after start date')
        if price is None or price <= 0:
            raise ValidationError('Price must be a positive number')

        seasonal_price = SeasonalPrice.objects.create(
            room=room,
            start_date=start_date,
            end_date=end_date,
            price=price,
        )
        return self.success_response(
            data=serialize_seasonal_price(seasonal_price),
            message='Seasonal price created successfully',
            status=201
        )


class SeasonalPriceDetailView(RoomMixin, ApiView):
    """API: Delete a seasonal price."""

    permissions = {'DELETE': perms.ROOMS_MANAGE}

    def delete(self, request, *args, **kwargs):
        room = self.get_room()
        deleted, _ = room.seasonal_prices.filter(pk=kwargs['price_id']).delete()
        if not deleted:
            raise NotFound('Seasonal price not found')
        return self.success_response(message='Seasonal price deleted successfully')


# =============================================================================
# AVAILABILITY & RATES
# =============================================================================

class RoomAvailabilityView(RoomMixin, ApiView):
    """API: Per-night availability of a room; PUT sets an administrative block."""

    permissions = {'GET': perms.AVAILABILITY_VIEW, 'PUT': perms.AVAILABILITY_MANAGE}

    def get_range(self, source):
        start_date = self.parse_date(source.get('start_date'), 'start_date', timezone.localdate())
        end_date = self.parse_date(
            source.get('end_date'), 'end_date',
            start_date + timedelta(days=settings.AVAILABILITY_HORIZON_DAYS)
        )
        return start_date, end_date

    def get(self, request, *args, **kwargs):
        room = self.get_room()
        start_date, end_date = self.get_range(request.GET)
        nights = AvailabilityLedger(room).availability_for_range(start_date, end_date)
        return self.success_response(data={
            'room_id': room.id,
            'quantity': room.quantity,
            'nights': nights,
        })

    def put(self, request, *args, **kwargs):
        room = self.get_room()
        data = self.parse_body(request)
        start_date, end_date = self.get_range(data)
        blocked_count = self.parse_int(data.get('blocked_count'), 'blocked_count')
        if blocked_count is None:
            raise ValidationError('Blocked count is required')

        ledger = AvailabilityLedger(room)
        ledger.set_blocked(start_date, end_date, blocked_count)
        return self.success_response(
            data={'room_id': room.id, 'nights': ledger.availability_for_range(start_date, end_date)},
            message='Availability updated successfully'
        )


class RoomRateQuoteView(RoomMixin, ApiView):
    """API: Price a stay night by night."""

    permissions = {'GET': perms.ROOMS_VIEW}

    def get(self, request, *args, **kwargs):
        check_in = self.parse_date(request.GET.get('check_in_date'), 'check_in_date')
        check_out = self.parse_date(request.GET.get('check_out_date'), 'check_out_date')
        if not check_in or not check_out:
            raise ValidationError('Check-in and check-out dates are required')
        number_of_rooms = self.parse_int(request.GET.get('number_of_rooms'), 'number_of_rooms', 1)
        if number_of_rooms < 1:
            raise ValidationError('Number of rooms must be at least 1')

        resolver = RateResolver.for_room_id(kwargs['room_id'])
        quote = resolver.quote(
            check_in, check_out, number_of_rooms,
            use_alternative_rate=self.parse_bool(
                request.GET.get('use_alternative_rate'), 'use_alternative_rate'
            ),
            room_rate=self.parse_decimal(request.GET.get('room_rate'), 'room_rate'),
            alternative_rate=self.parse_decimal(request.GET.get('alternative_rate'), 'alternative_rate'),
        )
        nights = AvailabilityLedger(resolver.room).availability_for_range(check_in, check_out)
        quote['available_rooms'] = max(min(night['sellable'] for night in nights), 0)
        return self.success_response(data=quote)
