"""User management URL patterns."""

from django.urls import path
from backoffice.views import UserListView, UserDetailView

urlpatterns = [
    path('users/', UserListView.as_view(), name='user_list'),
    path('users/<int:user_id>/', UserDetailView.as_view(), name='user_detail'),
]
