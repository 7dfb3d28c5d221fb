"""
Role capabilities and the navigation derived from them.

OWNER holds every capability; STAFF holds the front-desk subset.
"""

from backoffice.models import User

HOTELS_VIEW = 'hotels.view'
HOTELS_MANAGE = 'hotels.manage'
HOTELS_DELETE = 'hotels.delete'
ROOMS_VIEW = 'rooms.view'
ROOMS_MANAGE = 'rooms.manage'
ROOMS_DELETE = 'rooms.delete'
AGREEMENTS_VIEW = 'agreements.view'
AGREEMENTS_MANAGE = 'agreements.manage'
AVAILABILITY_VIEW = 'availability.view'
AVAILABILITY_MANAGE = 'availability.manage'
BOOKINGS_VIEW = 'bookings.view'
BOOKINGS_CREATE = 'bookings.create'
BOOKINGS_UPDATE = 'bookings.update'
BOOKINGS_CANCEL = 'bookings.cancel'
BOOKINGS_DELETE = 'bookings.delete'
GUESTS_VIEW = 'guests.view'
GUESTS_MANAGE = 'guests.manage'
USERS_MANAGE = 'users.manage'

ALL_CAPABILITIES = frozenset([
    HOTELS_VIEW, HOTELS_MANAGE, HOTELS_DELETE,
    ROOMS_VIEW, ROOMS_MANAGE, ROOMS_DELETE,
    AGREEMENTS_VIEW, AGREEMENTS_MANAGE,
    AVAILABILITY_VIEW, AVAILABILITY_MANAGE,
    BOOKINGS_VIEW, BOOKINGS_CREATE, BOOKINGS_UPDATE, BOOKINGS_CANCEL, BOOKINGS_DELETE,
    GUESTS_VIEW, GUESTS_MANAGE,
    USERS_MANAGE,
])

ROLE_CAPABILITIES = {
    User.Role.OWNER: ALL_CAPABILITIES,
    User.Role.STAFF: frozenset([
        HOTELS_VIEW,
        ROOMS_VIEW,
        AGREEMENTS_VIEW,
        AVAILABILITY_VIEW,
        BOOKINGS_VIEW, BOOKINGS_CREATE, BOOKINGS_UPDATE, BOOKINGS_CANCEL,
        GUESTS_VIEW, GUESTS_MANAGE,
    ]),
}

# Navigation entries in display order, each revealed by one capability
MENU_ITEMS = [
    {'key': 'hotels', 'label': 'Hotels', 'path': '/hotels', 'capability': HOTELS_MANAGE},
    {'key': 'rooms', 'label': 'Rooms', 'path': '/rooms', 'capability': ROOMS_MANAGE},
    {'key': 'booking', 'label': 'Create Reservation', 'path': '/booking', 'capability': BOOKINGS_CREATE},
    {'key': 'reservations', 'label': 'Reservations', 'path': '/reservations', 'capability': BOOKINGS_VIEW},
    {'key': 'guests', 'label': 'Guests', 'path': '/guests', 'capability': GUESTS_VIEW},
    {'key': 'security', 'label': 'Security', 'path': '/security', 'capability': USERS_MANAGE},
]


def capabilities_for(user):
    if user is None or not user.is_authenticated or not user.is_active:
        return frozenset()
    return ROLE_CAPABILITIES.get(user.role, frozenset())


def has_capability(user, capability):
    return capability in capabilities_for(user)


def menu_for(user):
    """Navigation entries visible to the user's role."""
    granted = capabilities_for(user)
    return [
        {'key': item['key'], 'label': item['label'], 'path': item['path']}
        for item in MENU_ITEMS
        if item['capability'] in granted
    ]
