"""
Booking models: guests, bookings and payments.
"""

import random
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Sum
from django.utils import timezone

from .core import Hotel
from .rooms import Room


def generate_profile_id():
    """Guest profile id, e.g. PROF-1718000000000-4821."""
    millis = int(timezone.now().timestamp() * 1000)
    return f"PROF-{millis}-{random.randint(1000, 9999)}"


def generate_res_id():
    """Reservation id, e.g. RES-2025-123456 (last six digits of the epoch millis)."""
    now = timezone.now()
    millis = int(now.timestamp() * 1000)
    res_id = f"RES-{now.year}-{str(millis)[-6:]}"
    while Booking.objects.filter(res_id=res_id).exists():
        res_id = f"RES-{now.year}-{random.randint(0, 999999):06d}"
    return res_id


# =============================================================================
# GUESTS
# =============================================================================

class Guest(models.Model):
    """Guest profile, shared across bookings."""
    profile_id = models.CharField(
        max_length=50,
        unique=True,
        default=generate_profile_id,
        help_text="Public profile reference (PROF-...)"
    )
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=50, blank=True)
    mobile = models.CharField(max_length=50, blank=True)

    nationality = models.CharField(max_length=100, blank=True)
    passport_no = models.CharField(max_length=50, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=20, blank=True)

    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, blank=True)

    company = models.CharField(max_length=200, blank=True)
    classification = models.CharField(
        max_length=50,
        blank=True,
        help_text="e.g., 'Regular', 'Corporate'"
    )
    travel_agent = models.CharField(max_length=200, blank=True)
    source = models.CharField(max_length=100, blank=True, help_text="Booking source")
    group = models.CharField(max_length=100, blank=True)
    is_vip = models.BooleanField(default=False)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['last_name', 'first_name']
        verbose_name = "Guest"
        verbose_name_plural = "Guests"

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()


# =============================================================================
# BOOKINGS
# =============================================================================

class Booking(models.Model):
    """
    Reservation of one room type for a stay [check_in_date, check_out_date).

    Bookings hold their units in the availability ledger from creation
    until they are cancelled or deleted.
    """

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        CONFIRMED = 'CONFIRMED', 'Confirmed'
        CHECKED_IN = 'CHECKED_IN', 'Checked In'
        CHECKED_OUT = 'CHECKED_OUT', 'Checked Out'
        CANCELLED = 'CANCELLED', 'Cancelled'

    ACTIVE_STATUSES = (Status.PENDING, Status.CONFIRMED, Status.CHECKED_IN)

    # Allowed status transitions; statuses absent as keys are terminal
    TRANSITIONS = {
        Status.PENDING: (Status.CONFIRMED, Status.CHECKED_IN, Status.CANCELLED),
        Status.CONFIRMED: (Status.CHECKED_IN, Status.CANCELLED),
        Status.CHECKED_IN: (Status.CHECKED_OUT,),
    }

    res_id = models.CharField(
        max_length=30,
        unique=True,
        default=generate_res_id,
        help_text="Reservation reference (RES-<year>-<digits>)"
    )
    hotel = models.ForeignKey(
        Hotel,
        on_delete=models.PROTECT,
        related_name='bookings'
    )
    room = models.ForeignKey(
        Room,
        on_delete=models.PROTECT,
        related_name='bookings'
    )
    guest = models.ForeignKey(
        Guest,
        on_delete=models.PROTECT,
        related_name='bookings'
    )

    number_of_rooms = models.PositiveIntegerField(default=1)
    check_in_date = models.DateField()
    check_out_date = models.DateField()
    number_of_nights = models.PositiveIntegerField()

    room_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Nightly rate applied (first night when rates vary)"
    )
    alternative_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True
    )
    use_alternative_rate = models.BooleanField(default=False)
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Sum of nightly rates x number of rooms"
    )
    rate_code = models.CharField(max_length=30, default='STANDARD')

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING
    )
    check_in_time = models.DateTimeField(null=True, blank=True)
    check_out_time = models.DateTimeField(null=True, blank=True)
    assigned_room_no = models.CharField(max_length=20, blank=True)
    special_requests = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='bookings_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name = "Booking"
        verbose_name_plural = "Bookings"
        indexes = [
            models.Index(fields=['check_in_date', 'check_out_date'], name='booking_stay_dates_idx'),
            models.Index(fields=['status'], name='booking_status_idx'),
        ]

    def __str__(self):
        return f"{self.res_id} ({self.get_status_display()})"

    @property
    def holds_inventory(self):
        """Every booking except a cancelled one has units taken from the ledger."""
        return self.status != self.Status.CANCELLED

    def can_transition_to(self, status):
        return status in self.TRANSITIONS.get(self.status, ())

    @property
    def amount_paid(self):
        return self.payments.aggregate(total=Sum('paid_amount'))['total'] or Decimal('0.00')

    @property
    def balance_due(self):
        return self.total_amount - self.amount_paid


# =============================================================================
# PAYMENTS
# =============================================================================

class Payment(models.Model):
    """Payment recorded against a booking."""

    class Method(models.TextChoices):
        CASH = 'CASH', 'Cash'
        CREDIT = 'CREDIT', 'Credit'

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        PARTIALLY_PAID = 'PARTIALLY_PAID', 'Partially Paid'
        COMPLETED = 'COMPLETED', 'Completed'

    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name='payments'
    )
    method = models.CharField(max_length=10, choices=Method.choices)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    paid_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    remaining_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    payment_date = models.DateTimeField(default=timezone.now)
    remaining_due_date = models.DateField(
        null=True,
        blank=True,
        help_text="When the remaining balance is due (credit payments)"
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING
    )
    transaction_id = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-payment_date', '-id']
        verbose_name = "Payment"
        verbose_name_plural = "Payments"

    def __str__(self):
        return f"{self.booking.res_id} {self.method} {self.paid_amount}/{self.total_amount}"

    @classmethod
    def status_for(cls, paid_amount, remaining_amount):
        """Status is derived from the paid / remaining split."""
        if remaining_amount <= 0:
            return cls.Status.COMPLETED
        if paid_amount > 0:
            return cls.Status.PARTIALLY_PAID
        return cls.Status.PENDING

    def save(self, *args, **kwargs):
        self.status = self.status_for(self.paid_amount, self.remaining_amount)
        super().save(*args, **kwargs)
