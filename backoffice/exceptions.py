"""
Back-office error taxonomy.

Each error carries the HTTP status and machine-readable code that the
API layer renders into the JSON envelope.
"""


class BackofficeError(Exception):
    status_code = 500
    code = 'internal_error'
    default_message = 'Internal server error'

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(BackofficeError):
    status_code = 400
    code = 'validation_error'
    default_message = 'Invalid input'


class InvalidDateRange(ValidationError):
    code = 'invalid_date_range'
    default_message = 'Check-out date must be after check-in date'


class RoomInactive(ValidationError):
    code = 'room_inactive'
    default_message = 'Room is not available'


class AuthenticationRequired(BackofficeError):
    status_code = 401
    code = 'authentication_required'
    default_message = 'Authentication required'


class Forbidden(BackofficeError):
    status_code = 403
    code = 'forbidden'
    default_message = 'You do not have permission to perform this action'


class NotFound(BackofficeError):
    status_code = 404
    code = 'not_found'
    default_message = 'Not found'


class RoomNotFound(NotFound):
    code = 'room_not_found'
    default_message = 'Room not found'


class Conflict(BackofficeError):
    status_code = 409
    code = 'conflict'
    default_message = 'Conflict with the current state'


class InsufficientAvailability(Conflict):
    code = 'insufficient_availability'
    default_message = 'Not enough rooms available for the selected dates'


class Internal(BackofficeError):
    pass
