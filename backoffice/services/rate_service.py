"""
Rate Resolution
===============

Nightly rate for a room on a given date.

Resolution order:
1. Candidate rate: the alternative price when requested and one exists
   (booking override first, then the room's), otherwise the booking's
   explicit room rate, otherwise the room's base price.
2. A seasonal price whose [start_date, end_date) contains the night
   supersedes the candidate. When several overlap, the most recently
   created one wins.
"""

from dateutil.rrule import rrule, DAILY
from datetime import timedelta

from django.conf import settings

from backoffice.exceptions import InvalidDateRange, RoomNotFound, ValidationError
from backoffice.models import Room
from backoffice.parsing import check_money_digits, quantize_money

TOTAL_MAX_DIGITS = 12


def stay_dates(check_in, check_out):
    """Nights of a stay: every date in [check_in, check_out)."""
    if check_out <= check_in:
        return []
    last_night = check_out - timedelta(days=1)
    return [dt.date() for dt in rrule(DAILY, dtstart=check_in, until=last_night)]


def check_date_range(check_in, check_out):
    """Reject empty, inverted and over-long [check_in, check_out) ranges."""
    if check_out <= check_in:
        raise InvalidDateRange()
    limit = settings.MAX_DATE_RANGE_NIGHTS
    if (check_out - check_in).days > limit:
        raise ValidationError(
            f'Date range cannot exceed {limit} nights',
            details={'max_nights': limit}
        )


class RateResolver:
    """
    Resolve nightly rates for one room.

    Usage:
        resolver = RateResolver.for_room_id(room_id)
        rate = resolver.rate_for_date(date(2025, 7, 1))
        quote = resolver.quote(check_in, check_out, number_of_rooms=2)
    """

    def __init__(self, room):
        self.room = room
        self._seasonal_prices = None

    @classmethod
    def for_room_id(cls, room_id):
        try:
            room = Room.objects.select_related('hotel').get(pk=room_id)
        except (Room.DoesNotExist, ValueError, TypeError):
            raise RoomNotFound()
        return cls(room)

    @property
    def seasonal_prices(self):
        if self._seasonal_prices is None:
            self._seasonal_prices = list(self.room.seasonal_prices.all())
        return self._seasonal_prices

    def candidate_rate(self, use_alternative_rate=False, room_rate=None, alternative_rate=None):
        if use_alternative_rate:
            alternative = alternative_rate if alternative_rate is not None else self.room.alternative_price
            if alternative is not None:
                return quantize_money(alternative)
        if room_rate is not None:
            return quantize_money(room_rate)
        return quantize_money(self.room.base_price)

    def seasonal_price_for(self, day):
        """Seasonal price covering the night, latest created first."""
        matches = [sp for sp in self.seasonal_prices if sp.covers(day)]
        if not matches:
            return None
        return max(matches, key=lambda sp: (sp.created_at, sp.pk))

    def rate_for_date(self, day, use_alternative_rate=False, room_rate=None, alternative_rate=None):
        seasonal = self.seasonal_price_for(day)
        if seasonal is not None:
            return quantize_money(seasonal.price)
        return self.candidate_rate(use_alternative_rate, room_rate, alternative_rate)

    def nightly_rates(self, check_in, check_out, **rate_options):
        return [
            (day, self.rate_for_date(day, **rate_options))
            for day in stay_dates(check_in, check_out)
        ]

    def quote(self, check_in, check_out, number_of_rooms=1, **rate_options):
        """
        Price a stay.

        Returns:
            dict with number_of_nights, nightly_rates (date/rate pairs),
            room_rate (first night) and total_amount
            (sum of nightly rates x number_of_rooms).
        """
        check_date_range(check_in, check_out)

        nights = self.nightly_rates(check_in, check_out, **rate_options)
        per_room = sum((rate for _, rate in nights), quantize_money(0))
        total = check_money_digits(
            quantize_money(per_room * number_of_rooms), 'total_amount', TOTAL_MAX_DIGITS
        )

        return {
            'room_id': self.room.pk,
            'check_in_date': check_in,
            'check_out_date': check_out,
            'number_of_nights': len(nights),
            'number_of_rooms': number_of_rooms,
            'nightly_rates': [{'date': day, 'rate': rate} for day, rate in nights],
            'room_rate': nights[0][1],
            'total_amount': total,
        }
