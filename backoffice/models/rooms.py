"""
Room models: room types, seasonal prices and the per-night availability ledger.
"""

from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from .core import Hotel


class Room(models.Model):
    """
    A sellable room type within a hotel.

    `quantity` is the physical inventory; per-night availability lives
    in AvailabilitySlot rows seeded from it.
    """

    class BoardType(models.TextChoices):
        ROOM_ONLY = 'ROOM_ONLY', 'Room Only'
        BED_BREAKFAST = 'BED_BREAKFAST', 'Bed & Breakfast'
        HALF_BOARD = 'HALF_BOARD', 'Half Board'
        FULL_BOARD = 'FULL_BOARD', 'Full Board'

    hotel = models.ForeignKey(
        Hotel,
        on_delete=models.CASCADE,
        related_name='rooms'
    )
    room_type = models.CharField(
        max_length=100,
        help_text="Room type name (e.g., 'Deluxe Suite')"
    )
    description = models.TextField(blank=True)
    alt_description = models.TextField(blank=True)

    purchase_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Cost basis per night"
    )
    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text="Standard selling price per night (must exceed purchase price)"
    )
    alternative_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text="Optional second selling price (e.g., high demand rate)"
    )

    quantity = models.PositiveIntegerField(
        help_text="Number of physical rooms of this type"
    )
    board_type = models.CharField(
        max_length=20,
        choices=BoardType.choices,
        default=BoardType.ROOM_ONLY
    )
    size = models.CharField(max_length=50, blank=True, help_text="e.g., '45 sqm'")
    capacity = models.PositiveIntegerField(default=2, help_text="Maximum guests per room")
    floor = models.IntegerField(null=True, blank=True)

    available_from = models.DateField(
        null=True,
        blank=True,
        help_text="First date this room can be sold"
    )
    available_to = models.DateField(
        null=True,
        blank=True,
        help_text="Last date this room can be sold"
    )

    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='rooms_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['hotel__name', 'room_type']
        verbose_name = "Room"
        verbose_name_plural = "Rooms"

    def __str__(self):
        return f"{self.hotel.code} - {self.room_type}"

    def is_sellable_between(self, check_in, check_out):
        """Whether [check_in, check_out) lies inside the sale window."""
        if self.available_from and check_in < self.available_from:
            return False
        # available_to is the last sellable night
        if self.available_to and check_out - timedelta(days=1) > self.available_to:
            return False
        return True


class SeasonalPrice(models.Model):
    """
    Nightly price for a room over [start_date, end_date).

    Overlapping ranges are allowed; the most recently created one wins.
    """
    room = models.ForeignKey(
        Room,
        on_delete=models.CASCADE,
        related_name='seasonal_prices'
    )
    start_date = models.DateField(help_text="First night the price applies")
    end_date = models.DateField(help_text="First night the price no longer applies")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['start_date', 'id']
        verbose_name = "Seasonal Price"
        verbose_name_plural = "Seasonal Prices"

    def __str__(self):
        return f"{self.room} {self.start_date} -> {self.end_date}: {self.price}"

    def covers(self, day):
        return self.start_date <= day < self.end_date


class AvailabilitySlot(models.Model):
    """
    Inventory of one room type on one night.

    Sellable units = available_count - blocked_count.
    """
    room = models.ForeignKey(
        Room,
        on_delete=models.CASCADE,
        related_name='availability_slots'
    )
    date = models.DateField()
    available_count = models.IntegerField(
        help_text="Units not yet reserved"
    )
    blocked_count = models.IntegerField(
        default=0,
        help_text="Units withheld administratively"
    )

    class Meta:
        ordering = ['room', 'date']
        verbose_name = "Availability Slot"
        verbose_name_plural = "Availability Slots"
        constraints = [
            models.UniqueConstraint(
                fields=['room', 'date'],
                name='unique_room_availability_date'
            ),
        ]

    def __str__(self):
        return f"{self.room} {self.date}: {self.sellable}"

    @property
    def sellable(self):
        return self.available_count - self.blocked_count
