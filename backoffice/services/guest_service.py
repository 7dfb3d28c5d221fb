"""
Guest profile creation and updates, shared by the guest and booking APIs.
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email

from backoffice.exceptions import NotFound, ValidationError
from backoffice.models import Guest
from backoffice.parsing import parse_bool, parse_date, parse_str

logger = logging.getLogger(__name__)

TEXT_FIELDS = (
    'first_name', 'last_name', 'email', 'phone', 'mobile',
    'nationality', 'passport_no', 'gender',
    'address', 'city', 'country',
    'company', 'classification', 'travel_agent', 'source', 'group', 'notes',
)


def clean_guest_data(data, partial=False):
    """Validate a guest payload; returns only the fields supplied."""
    if not isinstance(data, dict):
        raise ValidationError('Guest data must be an object')

    cleaned = {}
    for field in TEXT_FIELDS:
        if field in data:
            cleaned[field] = parse_str(data[field])

    if 'date_of_birth' in data:
        cleaned['date_of_birth'] = parse_date(data['date_of_birth'], 'date_of_birth')
    if 'is_vip' in data:
        cleaned['is_vip'] = parse_bool(data['is_vip'], 'is_vip')

    if not partial and not cleaned.get('first_name'):
        raise ValidationError('Guest first name is required')
    if partial and 'first_name' in cleaned and not cleaned['first_name']:
        raise ValidationError('Guest first name cannot be empty')

    if cleaned.get('email'):
        try:
            validate_email(cleaned['email'])
        except DjangoValidationError:
            raise ValidationError('Invalid guest email address')

    return cleaned


class GuestService:
    """Create, update, or resolve-and-update guest profiles."""

    def create_guest(self, data):
        return self.save_prepared(None, clean_guest_data(data))

    def update_guest(self, guest, data):
        return self.save_prepared(guest, clean_guest_data(data, partial=True))

    def get_guest(self, guest_id):
        try:
            return Guest.objects.get(pk=guest_id)
        except (Guest.DoesNotExist, ValueError, TypeError):
            raise NotFound('Guest not found')

    def prepare(self, data, current=None):
        """
        Validate a booking's guest payload without writing.

        A payload with an `id` refers to an existing guest (updated in
        place). Without one it describes a new guest, or partially
        updates `current` when a booking already has a guest.
        """
        if not isinstance(data, dict) or not data:
            raise ValidationError('Guest data is required')
        if data.get('id'):
            return self.get_guest(data['id']), clean_guest_data(data, partial=True)
        if current is not None:
            return current, clean_guest_data(data, partial=True)
        return None, clean_guest_data(data)

    def save_prepared(self, guest, cleaned):
        if guest is None:
            guest = Guest.objects.create(**cleaned)
            logger.info("Created guest %s (%s)", guest.profile_id, guest.full_name)
            return guest
        for field, value in cleaned.items():
            setattr(guest, field, value)
        guest.save()
        return guest
