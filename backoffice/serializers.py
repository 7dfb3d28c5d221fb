"""
Model -> dict conversions for the JSON API.

Decimals and dates are left as-is; JsonResponse's encoder renders them
as strings.
"""

from django.conf import settings


def serialize_user(user):
    return {
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'first_name': user.first_name,
        'last_name': user.last_name,
        'phone': user.phone,
        'role': user.role,
        'is_active': user.is_active,
        'last_login': user.last_login,
        'date_joined': user.date_joined,
    }


def serialize_hotel(hotel, with_counts=False):
    data = {
        'id': hotel.id,
        'name': hotel.name,
        'alt_name': hotel.alt_name,
        'code': hotel.code,
        'description': hotel.description,
        'alt_description': hotel.alt_description,
        'address': hotel.address,
        'location': hotel.location,
        'created_at': hotel.created_at,
        'updated_at': hotel.updated_at,
    }
    if with_counts:
        data['counts'] = {
            'rooms': hotel.rooms.count(),
            'bookings': hotel.bookings.count(),
            'agreements': hotel.agreements.count(),
        }
    return data


def serialize_agreement(agreement):
    return {
        'id': agreement.id,
        'hotel_id': agreement.hotel_id,
        'file_name': agreement.file_name,
        'file_path': settings.MEDIA_URL + agreement.file.name,
        'file_size': agreement.file_size,
        'mime_type': agreement.mime_type,
        'uploaded_at': agreement.uploaded_at,
    }


def serialize_seasonal_price(seasonal_price):
    return {
        'id': seasonal_price.id,
        'room_id': seasonal_price.room_id,
        'start_date': seasonal_price.start_date,
        'end_date': seasonal_price.end_date,
        'price': seasonal_price.price,
        'created_at': seasonal_price.created_at,
    }


def serialize_room(room, with_seasonal_prices=False):
    data = {
        'id': room.id,
        'hotel': {'id': room.hotel_id, 'name': room.hotel.name, 'code': room.hotel.code},
        'room_type': room.room_type,
        'description': room.description,
        'alt_description': room.alt_description,
        'purchase_price': room.purchase_price,
        'base_price': room.base_price,
        'alternative_price': room.alternative_price,
        'quantity': room.quantity,
        'board_type': room.board_type,
        'size': room.size,
        'capacity': room.capacity,
        'floor': room.floor,
        'available_from': room.available_from,
        'available_to': room.available_to,
        'is_active': room.is_active,
        'created_at': room.created_at,
        'updated_at': room.updated_at,
    }
    if with_seasonal_prices:
        data['seasonal_prices'] = [serialize_seasonal_price(sp) for sp in room.seasonal_prices.all()]
    return data


def serialize_guest(guest):
    return {
        'id': guest.id,
        'profile_id': guest.profile_id,
        'first_name': guest.first_name,
        'last_name': guest.last_name,
        'full_name': guest.full_name,
        'email': guest.email,
        'phone': guest.phone,
        'mobile': guest.mobile,
        'nationality': guest.nationality,
        'passport_no': guest.passport_no,
        'date_of_birth': guest.date_of_birth,
        'gender': guest.gender,
        'address': guest.address,
        'city': guest.city,
        'country': guest.country,
        'company': guest.company,
        'classification': guest.classification,
        'travel_agent': guest.travel_agent,
        'source': guest.source,
        'group': guest.group,
        'is_vip': guest.is_vip,
        'notes': guest.notes,
        'created_at': guest.created_at,
    }


def serialize_payment(payment):
    return {
        'id': payment.id,
        'method': payment.method,
        'total_amount': payment.total_amount,
        'paid_amount': payment.paid_amount,
        'remaining_amount': payment.remaining_amount,
        'payment_date': payment.payment_date,
        'remaining_due_date': payment.remaining_due_date,
        'status': payment.status,
        'transaction_id': payment.transaction_id,
        'notes': payment.notes,
    }


def serialize_booking(booking):
    return {
        'id': booking.id,
        'res_id': booking.res_id,
        'status': booking.status,
        'hotel': {'id': booking.hotel_id, 'name': booking.hotel.name, 'code': booking.hotel.code},
        'room': {
            'id': booking.room_id,
            'room_type': booking.room.room_type,
            'board_type': booking.room.board_type,
        },
        'guest': serialize_guest(booking.guest),
        'number_of_rooms': booking.number_of_rooms,
        'check_in_date': booking.check_in_date,
        'check_out_date': booking.check_out_date,
        'number_of_nights': booking.number_of_nights,
        'room_rate': booking.room_rate,
        'alternative_rate': booking.alternative_rate,
        'use_alternative_rate': booking.use_alternative_rate,
        'total_amount': booking.total_amount,
        'rate_code': booking.rate_code,
        'check_in_time': booking.check_in_time,
        'check_out_time': booking.check_out_time,
        'assigned_room_no': booking.assigned_room_no,
        'special_requests': booking.special_requests,
        'notes': booking.notes,
        'payments': [serialize_payment(payment) for payment in booking.payments.all()],
        'balance_due': booking.balance_due,
        'created_by': booking.created_by.username if booking.created_by else None,
        'created_at': booking.created_at,
        'updated_at': booking.updated_at,
    }
