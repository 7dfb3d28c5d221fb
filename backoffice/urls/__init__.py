"""
URL configuration package.

Combines the URL patterns of each API area into a single
urlpatterns list under the 'backoffice' namespace.
"""

from .auth import urlpatterns as auth_urls
from .hotels import urlpatterns as hotel_urls
from .rooms import urlpatterns as room_urls
from .bookings import urlpatterns as booking_urls
from .users import urlpatterns as user_urls

app_name = 'backoffice'

urlpatterns = (
    auth_urls
    + hotel_urls
    + room_urls
    + booking_urls
    + user_urls
)
