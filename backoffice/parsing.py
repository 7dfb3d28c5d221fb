"""
Input coercion for request payloads and query strings.

Every helper returns `default` for missing values and raises
ValidationError naming the field for malformed ones.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.utils import dateparse

from backoffice.exceptions import ValidationError

CENT = Decimal('0.01')
MONEY_MAX_DIGITS = 10
TRUE_VALUES = ('1', 'true', 'yes', 'on')
FALSE_VALUES = ('0', 'false', 'no', 'off')


def is_blank(value):
    return value is None or (isinstance(value, str) and value.strip() == '')


def quantize_money(value):
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def check_money_digits(amount, field, max_digits=MONEY_MAX_DIGITS):
    """Amounts must fit a column of `max_digits` digits, two of them cents."""
    whole_digits = max_digits - 2
    if abs(amount) >= Decimal(10) ** whole_digits:
        raise ValidationError(
            f'{field} is too large',
            details={'field': field, 'max_whole_digits': whole_digits}
        )
    return amount


def parse_decimal(value, field, default=None, max_digits=MONEY_MAX_DIGITS):
    if is_blank(value):
        return default
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a number')
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f'{field} must be a number')
    if not amount.is_finite():
        raise ValidationError(f'{field} must be a number')
    return check_money_digits(quantize_money(amount), field, max_digits)


def parse_int(value, field, default=None):
    if is_blank(value):
        return default
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a whole number')
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f'{field} must be a whole number')


def parse_date(value, field, default=None):
    """Parse YYYY-MM-DD; a full ISO 8601 timestamp is reduced to its date."""
    if is_blank(value):
        return default
    text = str(value).strip()
    try:
        parsed = dateparse.parse_date(text)
        if parsed is None:
            moment = dateparse.parse_datetime(text)
            parsed = moment.date() if moment is not None else None
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f'{field} must be a date (YYYY-MM-DD)')
    return parsed


def parse_bool(value, field, default=False):
    if is_blank(value):
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValidationError(f'{field} must be true or false')


def parse_str(value, default=''):
    if value is None:
        return default
    return str(value).strip()
