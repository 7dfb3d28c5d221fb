"""Session login, logout and the current user's profile and menu."""

import logging

from django.contrib.auth import authenticate, login, logout

from backoffice.exceptions import AuthenticationRequired, ValidationError
from backoffice.models import User
from backoffice.permissions import capabilities_for, menu_for
from backoffice.serializers import serialize_user

from .mixins import ApiView

logger = logging.getLogger(__name__)


class LoginView(ApiView):
    """API: Start a session."""

    login_required = False

    def post(self, request, *args, **kwargs):
        data = self.parse_body(request)
        username = str(data.get('username') or '').strip()
        password = data.get('password') or ''

        if not username or not password:
            raise ValidationError('Username and password are required')

        # ModelBackend rejects inactive users, so look them up first
        existing = User.objects.filter(username=username).first()
        if existing is not None and not existing.is_active and existing.check_password(password):
            raise AuthenticationRequired('Account is deactivated')

        user = authenticate(request, username=username, password=password)
        if user is None:
            logger.warning("Failed login for %s", username)
            raise AuthenticationRequired('Invalid username or password')

        login(request, user)
        logger.info("User %s logged in", user.username)
        return self.success_response(
            data={'user': serialize_user(user), 'navigation': menu_for(user)},
            message='Login successful'
        )


class LogoutView(ApiView):
    """API: End the session."""

    def post(self, request, *args, **kwargs):
        logout(request)
        return self.success_response(message='Logged out')


class CurrentUserView(ApiView):
    """API: Current user, capabilities and navigation."""

    def get(self, request, *args, **kwargs):
        user = request.user
        return self.success_response(data={
            'user': serialize_user(user),
            'capabilities': sorted(capabilities_for(user)),
            'navigation': menu_for(user),
        })
