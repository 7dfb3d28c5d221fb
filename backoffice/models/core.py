"""
Core models: back-office users, hotels and hotel agreement documents.
"""

import os

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models


# =============================================================================
# USERS
# =============================================================================

class User(AbstractUser):
    """
    Back-office operator.

    OWNER accounts manage the whole estate (hotels, rooms, users);
    STAFF accounts work the front desk (bookings, guests).
    """

    class Role(models.TextChoices):
        OWNER = 'OWNER', 'Owner'
        STAFF = 'STAFF', 'Staff'

    role = models.CharField(
        max_length=10,
        choices=Role.choices,
        default=Role.STAFF,
        help_text="Controls which operations and menu entries are available"
    )
    phone = models.CharField(max_length=50, blank=True)

    class Meta:
        ordering = ['username']
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return self.username


# =============================================================================
# HOTELS
# =============================================================================

class Hotel(models.Model):
    """
    A hotel managed from the back-office.

    Example: "Grand Palace Hotel" with code "GPH001"
    """
    name = models.CharField(
        max_length=200,
        help_text="Hotel name (e.g., 'Grand Palace Hotel')"
    )
    alt_name = models.CharField(
        max_length=200,
        blank=True,
        help_text="Name in the secondary language"
    )
    code = models.CharField(
        max_length=50,
        unique=True,
        help_text="Unique upper-case code (e.g., 'GPH001')"
    )
    description = models.TextField(blank=True)
    alt_description = models.TextField(blank=True)
    address = models.CharField(max_length=255, blank=True)
    location = models.CharField(
        max_length=255,
        blank=True,
        help_text="City / region, or a map link"
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='hotels_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = "Hotel"
        verbose_name_plural = "Hotels"

    def __str__(self):
        return f"{self.name} ({self.code})"

    def save(self, *args, **kwargs):
        self.code = (self.code or '').strip().upper()
        super().save(*args, **kwargs)

    @property
    def total_rooms(self):
        """Sum of room quantities across active room types."""
        return self.rooms.filter(is_active=True).aggregate(
            total=models.Sum('quantity')
        )['total'] or 0


def agreement_upload_to(instance, filename):
    return os.path.join(settings.AGREEMENT_UPLOAD_DIR, filename)


class HotelAgreement(models.Model):
    """Contract or agreement document attached to a hotel."""
    hotel = models.ForeignKey(
        Hotel,
        on_delete=models.CASCADE,
        related_name='agreements'
    )
    file_name = models.CharField(
        max_length=255,
        help_text="Original file name as uploaded"
    )
    file = models.FileField(
        upload_to=agreement_upload_to,
        max_length=500,
        help_text="Stored file path relative to MEDIA_ROOT"
    )
    file_size = models.PositiveIntegerField(help_text="Size in bytes")
    mime_type = models.CharField(max_length=150)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='agreements_uploaded'
    )
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-uploaded_at', '-id']
        verbose_name = "Hotel Agreement"
        verbose_name_plural = "Hotel Agreements"

    def __str__(self):
        return f"{self.hotel.code} - {self.file_name}"
