"""
URL configuration for the Hotel Back-Office project.
"""

from django.conf import settings
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Hotel Back-Office Admin"
admin.site.site_title = "Back-Office Portal"
admin.site.index_title = "Hotels, rooms and reservations"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('backoffice.urls')),
]

if settings.DEBUG:
    from django.conf.urls.static import static
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
