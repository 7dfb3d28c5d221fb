"""
Booking API views: list/create, detail/update/cancel/delete, and
availability search across rooms.
"""

import logging

from django.db.models import Q

from backoffice import permissions as perms
from backoffice.exceptions import NotFound, ValidationError
from backoffice.models import Booking
from backoffice.serializers import serialize_booking, serialize_room
from backoffice.services import BookingService, search_availability

from .mixins import ApiView

logger = logging.getLogger(__name__)


class BookingPayloadMixin:
    """Parse booking request bodies into service arguments."""

    def parse_status(self, value):
        status = str(value or '').strip().upper()
        if status not in Booking.Status.values:
            raise ValidationError(f'Status must be one of: {", ".join(Booking.Status.values)}')
        return status

    def parse_special_requests(self, value):
        if value in (None, ''):
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            raise ValidationError('special_requests must be a list')
        return [str(item) for item in value]

    def parse_object(self, value, field):
        if value in (None, ''):
            return None
        if not isinstance(value, dict):
            raise ValidationError(f'{field} must be an object')
        return value

    def parse_changes(self, data):
        """Only the keys present in the body become changes."""
        changes = {}
        for field in ('check_in_date', 'check_out_date'):
            if field in data:
                changes[field] = self.parse_date(data[field], field)
        if 'number_of_rooms' in data:
            changes['number_of_rooms'] = self.parse_int(data['number_of_rooms'], 'number_of_rooms')
        for field in ('room_rate', 'alternative_rate'):
            if field in data:
                changes[field] = self.parse_decimal(data[field], field)
        if 'use_alternative_rate' in data:
            changes['use_alternative_rate'] = self.parse_bool(data['use_alternative_rate'], 'use_alternative_rate')
        if 'rate_code' in data:
            changes['rate_code'] = str(data['rate_code'] or 'STANDARD').strip()
        for field in ('notes', 'assigned_room_no'):
            if field in data:
                changes[field] = str(data[field] or '').strip()
        if 'special_requests' in data:
            changes['special_requests'] = self.parse_special_requests(data['special_requests'])
        if 'guest_data' in data:
            changes['guest_data'] = self.parse_object(data['guest_data'], 'guest_data')
        if 'payment_data' in data:
            changes['payment_data'] = self.parse_object(data['payment_data'], 'payment_data')
        if 'status' in data:
            changes['status'] = self.parse_status(data['status'])
        return changes


# =============================================================================
# BOOKINGS
# =============================================================================

class BookingListView(BookingPayloadMixin, ApiView):
    """API: List or create bookings."""

    permissions = {'GET': perms.BOOKINGS_VIEW, 'POST': perms.BOOKINGS_CREATE}

    def get(self, request, *args, **kwargs):
        bookings = Booking.objects.select_related(
            'hotel', 'room', 'guest', 'created_by'
        ).prefetch_related('payments')

        search = request.GET.get('search', '').strip()
        if search:
            bookings = bookings.filter(
                Q(res_id__icontains=search)
                | Q(guest__first_name__icontains=search)
                | Q(guest__last_name__icontains=search)
                | Q(guest__email__icontains=search)
                | Q(guest__phone__icontains=search)
                | Q(hotel__name__icontains=search)
                | Q(room__room_type__icontains=search)
            )

        status = request.GET.get('status')
        if status:
            bookings = bookings.filter(status=self.parse_status(status))
        hotel_id = self.parse_int(request.GET.get('hotel_id'), 'hotel_id')
        if hotel_id:
            bookings = bookings.filter(hotel_id=hotel_id)
        start_date = self.parse_date(request.GET.get('start_date'), 'start_date')
        if start_date:
            bookings = bookings.filter(check_in_date__gte=start_date)
        end_date = self.parse_date(request.GET.get('end_date'), 'end_date')
        if end_date:
            bookings = bookings.filter(check_out_date__lte=end_date)

        page, pagination = self.paginate(request, bookings.order_by('-created_at', '-id'))
        return self.success_response(
            data=[serialize_booking(booking) for booking in page],
            pagination=pagination
        )

    def post(self, request, *args, **kwargs):
        data = self.parse_body(request)

        hotel_id = self.parse_int(data.get('hotel_id'), 'hotel_id')
        room_id = self.parse_int(data.get('room_id'), 'room_id')
        check_in = self.parse_date(data.get('check_in_date'), 'check_in_date')
        check_out = self.parse_date(data.get('check_out_date'), 'check_out_date')
        guest_data = self.parse_object(data.get('guest_data'), 'guest_data')

        if not all([hotel_id, room_id, check_in, check_out, guest_data]):
            raise ValidationError(
                'Hotel, room, guest data, check-in and check-out dates are required'
            )

        booking = BookingService(user=request.user).create_booking(
            room_id=room_id,
            hotel_id=hotel_id,
            check_in=check_in,
            check_out=check_out,
            guest_data=guest_data,
            number_of_rooms=self.parse_int(data.get('number_of_rooms'), 'number_of_rooms', 1),
            room_rate=self.parse_decimal(data.get('room_rate'), 'room_rate'),
            alternative_rate=self.parse_decimal(data.get('alternative_rate'), 'alternative_rate'),
            use_alternative_rate=self.parse_bool(data.get('use_alternative_rate'), 'use_alternative_rate'),
            status=self.parse_status(data.get('status') or Booking.Status.PENDING),
            rate_code=str(data.get('rate_code') or 'STANDARD').strip(),
            special_requests=self.parse_special_requests(data.get('special_requests')),
            notes=str(data.get('notes') or '').strip(),
            assigned_room_no=str(data.get('assigned_room_no') or '').strip(),
            payment_data=self.parse_object(data.get('payment_data'), 'payment_data'),
        )
        return self.success_response(
            data=serialize_booking(booking),
            message=f'Booking {booking.res_id} created successfully',
            status=201
        )


class BookingDetailView(BookingPayloadMixin, ApiView):
    """API: Retrieve, update, cancel or delete a booking."""

    permissions = {'GET': perms.BOOKINGS_VIEW, 'PUT': perms.BOOKINGS_UPDATE}

    def get_booking(self):
        try:
            return Booking.objects.select_related(
                'hotel', 'room', 'guest', 'created_by'
            ).get(pk=self.kwargs['booking_id'])
        except Booking.DoesNotExist:
            raise NotFound('Booking not found')

    def get(self, request, *args, **kwargs):
        return self.success_response(data=serialize_booking(self.get_booking()))

    def put(self, request, *args, **kwargs):
        booking = self.get_booking()
        changes = self.parse_changes(self.parse_body(request))
        if changes.get('status') == Booking.Status.CANCELLED:
            self.require(perms.BOOKINGS_CANCEL)

        booking = BookingService(user=request.user).update_booking(booking, changes)
        return self.success_response(
            data=serialize_booking(booking),
            message=f'Booking {booking.res_id} updated successfully'
        )

    def delete(self, request, *args, **kwargs):
        action = request.GET.get('action', 'cancel')
        service = BookingService(user=request.user)

        if action == 'cancel':
            self.require(perms.BOOKINGS_CANCEL)
            booking = service.cancel_booking(self.get_booking())
            return self.success_response(
                data=serialize_booking(booking),
                message=f'Booking {booking.res_id} cancelled successfully'
            )
        if action == 'delete':
            self.require(perms.BOOKINGS_DELETE)
            res_id = service.delete_booking(self.get_booking())
            return self.success_response(message=f'Booking {res_id} deleted successfully')

        raise ValidationError('Action must be "cancel" or "delete"')


# =============================================================================
# AVAILABILITY SEARCH
# =============================================================================

class BookingAvailabilityView(ApiView):
    """API: Which rooms can take a stay (GET: one range, POST: several)."""

    permissions = {'GET': perms.AVAILABILITY_VIEW, 'POST': perms.AVAILABILITY_VIEW}

    def parse_filters(self, source):
        return {
            'number_of_rooms': max(self.parse_int(source.get('number_of_rooms'), 'number_of_rooms', 1), 1),
            'hotel_id': self.parse_int(source.get('hotel_id'), 'hotel_id'),
            'room_id': self.parse_int(source.get('room_id'), 'room_id'),
            'board_type': (source.get('board_type') or '').upper() or None,
            'capacity': self.parse_int(source.get('capacity'), 'capacity'),
            'available_only': self.parse_bool(source.get('available_only'), 'available_only'),
        }

    def parse_range(self, source):
        check_in = self.parse_date(source.get('check_in_date'), 'check_in_date')
        check_out = self.parse_date(source.get('check_out_date'), 'check_out_date')
        if not check_in or not check_out:
            raise ValidationError('Check-in and check-out dates are required')
        return check_in, check_out

    def search(self, check_in, check_out, filters):
        results, summary = search_availability(check_in, check_out, **filters)
        return {
            'check_in_date': check_in,
            'check_out_date': check_out,
            'rooms': [
                {
                    'room': serialize_room(result['room']),
                    'available_rooms': result['available_rooms'],
                    'is_within_availability_period': result['is_within_availability_period'],
                    'is_available': result['is_available'],
                    'nights': result['nights'],
                }
                for result in results
            ],
            'summary': summary,
        }

    def get(self, request, *args, **kwargs):
        check_in, check_out = self.parse_range(request.GET)
        return self.success_response(
            data=self.search(check_in, check_out, self.parse_filters(request.GET))
        )

    def post(self, request, *args, **kwargs):
        data = self.parse_body(request)
        date_ranges = data.get('date_ranges')
        if not isinstance(date_ranges, list) or not date_ranges:
            raise ValidationError('date_ranges must be a non-empty list')

        filters = self.parse_filters(data)
        results = []
        for date_range in date_ranges:
            if not isinstance(date_range, dict):
                raise ValidationError('Each date range must be an object')
            check_in, check_out = self.parse_range(date_range)
            results.append(self.search(check_in, check_out, filters))
        return self.success_response(data=results)
