"""Auth URL patterns: session login/logout and current user."""

from django.urls import path
from backoffice.views import LoginView, LogoutView, CurrentUserView

urlpatterns = [
    path('auth/login/', LoginView.as_view(), name='login'),
    path('auth/logout/', LogoutView.as_view(), name='logout'),
    path('auth/me/', CurrentUserView.as_view(), name='current_user'),
]
