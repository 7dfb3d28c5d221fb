"""
Back-office admin configuration.

Supports:
- User management with roles
- Hotels with nested rooms and agreements
- Rooms with seasonal prices, plus the availability ledger
- Guests, and bookings with their payments
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.urls import reverse
from django.utils.html import format_html

from .models import (
    User, Hotel, HotelAgreement,
    Room, SeasonalPrice, AvailabilitySlot,
    Guest, Booking, Payment,
)


# =============================================================================
# USERS
# =============================================================================

@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """Django's user admin plus the back-office role."""
    list_display = ['username', 'email', 'first_name', 'last_name', 'role', 'is_active', 'last_login']
    list_filter = ['role', 'is_active', 'is_staff']
    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Back-Office', {
            'fields': ('role', 'phone'),
        }),
    )
    add_fieldsets = DjangoUserAdmin.add_fieldsets + (
        ('Back-Office', {
            'fields': ('role',),
        }),
    )


# =============================================================================
# HOTEL ADMIN
# =============================================================================

class RoomInline(admin.TabularInline):
    """Inline for rooms within a hotel."""
    model = Room
    extra = 0
    fields = ['room_type', 'board_type', 'base_price', 'quantity', 'capacity', 'is_active']
    ordering = ['room_type']
    show_change_link = True


class HotelAgreementInline(admin.TabularInline):
    """Inline for agreement documents within a hotel."""
    model = HotelAgreement
    extra = 0
    fields = ['file_name', 'file', 'file_size', 'mime_type', 'uploaded_at']
    readonly_fields = ['file_size', 'mime_type', 'uploaded_at']


@admin.register(Hotel)
class HotelAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'location', 'rooms_display', 'total_rooms', 'created_at']
    search_fields = ['name', 'alt_name', 'code', 'address']
    ordering = ['name']

    fieldsets = (
        (None, {
            'fields': ('name', 'alt_name', 'code')
        }),
        ('Details', {
            'fields': ('description', 'alt_description', 'address', 'location'),
        }),
    )

    inlines = [RoomInline, HotelAgreementInline]

    def rooms_display(self, obj):
        """Link to the hotel's room types."""
        count = obj.rooms.count()
        if count > 0:
            url = reverse('admin:backoffice_room_changelist') + f'?hotel__id__exact={obj.id}'
            return format_html('<a href="{}">{} room types</a>', url, count)
        return '0'
    rooms_display.short_description = 'Room Types'

    def save_model(self, request, obj, form, change):
        if not change and not obj.created_by_id:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)


# =============================================================================
# ROOM ADMIN
# =============================================================================

class SeasonalPriceInline(admin.TabularInline):
    model = SeasonalPrice
    extra = 0
    fields = ['start_date', 'end_date', 'price']
    ordering = ['start_date']


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = [
        'room_type', 'hotel', 'board_type', 'purchase_price', 'base_price',
        'alternative_price', 'quantity', 'is_active'
    ]
    list_filter = ['hotel', 'board_type', 'is_active']
    search_fields = ['room_type', 'description', 'hotel__name']
    ordering = ['hotel', 'room_type']

    fieldsets = (
        (None, {
            'fields': ('hotel', 'room_type', 'description', 'alt_description', 'is_active')
        }),
        ('Pricing', {
            'fields': ('purchase_price', 'base_price', 'alternative_price'),
            'description': 'Base price must be greater than purchase price.'
        }),
        ('Inventory', {
            'fields': ('quantity', 'available_from', 'available_to'),
        }),
        ('Room Details', {
            'fields': ('board_type', 'capacity', 'size', 'floor'),
        }),
    )

    inlines = [SeasonalPriceInline]


@admin.register(AvailabilitySlot)
class AvailabilitySlotAdmin(admin.ModelAdmin):
    list_display = ['room', 'date', 'available_count', 'blocked_count', 'sellable']
    list_filter = ['room__hotel', 'room']
    date_hierarchy = 'date'
    ordering = ['room', 'date']


# =============================================================================
# GUEST & BOOKING ADMIN
# =============================================================================

@admin.register(Guest)
class GuestAdmin(admin.ModelAdmin):
    list_display = ['profile_id', 'full_name', 'email', 'phone', 'nationality', 'is_vip']
    list_filter = ['is_vip', 'classification']
    search_fields = ['profile_id', 'first_name', 'last_name', 'email', 'phone']
    readonly_fields = ['profile_id']


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    fields = ['method', 'total_amount', 'paid_amount', 'remaining_amount', 'remaining_due_date', 'status']
    readonly_fields = ['status']


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """
    Read-mostly view of bookings.

    Dates and room counts are edited through the API so the
    availability ledger stays in step.
    """
    list_display = [
        'res_id', 'guest', 'hotel', 'room', 'check_in_date', 'check_out_date',
        'number_of_rooms', 'total_amount', 'status'
    ]
    list_filter = ['status', 'hotel']
    search_fields = ['res_id', 'guest__first_name', 'guest__last_name', 'guest__email']
    date_hierarchy = 'check_in_date'
    readonly_fields = [
        'res_id', 'hotel', 'room', 'check_in_date', 'check_out_date', 'number_of_rooms',
        'number_of_nights', 'room_rate', 'total_amount', 'status', 'created_by', 'created_at',
    ]
    inlines = [PaymentInline]

    def has_add_permission(self, request):
        return False
