"""
User management API views (OWNER only).
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db.models import Q

from backoffice import permissions as perms
from backoffice.exceptions import Conflict, NotFound, ValidationError
from backoffice.models import User
from backoffice.serializers import serialize_user

from .mixins import ApiView

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
USER_TEXT_FIELDS = ('first_name', 'last_name', 'phone')


class UserMixin:
    """Validation shared by user create and update."""

    def clean_email(self, value, exclude_id=None):
        email = str(value or '').strip()
        if not email:
            return ''
        try:
            validate_email(email)
        except DjangoValidationError:
            raise ValidationError('Invalid email address')
        clash = User.objects.filter(email__iexact=email)
        if exclude_id:
            clash = clash.exclude(pk=exclude_id)
        if clash.exists():
            raise Conflict(f'Email "{email}" is already in use')
        return email

    def clean_role(self, value):
        role = str(value or User.Role.STAFF).strip().upper()
        if role not in User.Role.values:
            raise ValidationError('Role must be OWNER or STAFF')
        return role

    def clean_password(self, value):
        password = value or ''
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
        return password

    def check_deletable(self, user):
        if user.pk == self.request.user.pk:
            raise ValidationError('You cannot delete your own account')
        if user.bookings_created.exists() or user.hotels_created.exists() or user.rooms_created.exists():
            raise Conflict(
                f'User "{user.username}" has created hotels, rooms or bookings; deactivate the account instead'
            )

    def get_user(self):
        try:
            return User.objects.get(pk=self.kwargs['user_id'])
        except User.DoesNotExist:
            raise NotFound('User not found')


class UserListView(UserMixin, ApiView):
    """API: List, create or bulk-delete users."""

    permissions = {
        'GET': perms.USERS_MANAGE,
        'POST': perms.USERS_MANAGE,
        'DELETE': perms.USERS_MANAGE,
    }

    def get(self, request, *args, **kwargs):
        users = User.objects.all()
        search = request.GET.get('search', '').strip()
        if search:
            users = users.filter(
                Q(username__icontains=search)
                | Q(email__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
            )
        role = request.GET.get('role')
        if role:
            users = users.filter(role=self.clean_role(role))
        if request.GET.get('is_active') not in (None, ''):
            users = users.filter(is_active=self.parse_bool(request.GET['is_active'], 'is_active'))

        page, pagination = self.paginate(request, users.order_by('username'))
        return self.success_response(
            data=[serialize_user(user) for user in page],
            pagination=pagination
        )

    def post(self, request, *args, **kwargs):
        data = self.parse_body(request)

        username = str(data.get('username') or '').strip()
        if not username or not data.get('password'):
            raise ValidationError('Username and password are required')
        password = self.clean_password(data.get('password'))
        if User.objects.filter(username__iexact=username).exists():
            raise Conflict(f'Username "{username}" is already taken')

        user = User.objects.create_user(
            username=username,
            password=password,
            email=self.clean_email(data.get('email')),
            role=self.clean_role(data.get('role')),
            is_active=self.parse_bool(data.get('is_active'), 'is_active', True),
            **{field: str(data.get(field) or '').strip() for field in USER_TEXT_FIELDS}
        )
        logger.info("User %s (%s) created by %s", user.username, user.role, request.user.username)
        return self.success_response(
            data=serialize_user(user),
            message=f'User "{user.username}" created successfully',
            status=201
        )

    def delete(self, request, *args, **kwargs):
        data = self.parse_body(request)
        user_ids = data.get('user_ids')
        if not isinstance(user_ids, list) or not user_ids:
            raise ValidationError('user_ids must be a non-empty list')

        ids = {self.parse_int(pk, 'user_ids') for pk in user_ids}
        users = list(User.objects.filter(pk__in=ids))
        if len(users) != len(ids):
            raise NotFound('One or more users were not found')
        for user in users:
            self.check_deletable(user)

        User.objects.filter(pk__in=[user.pk for user in users]).delete()
        logger.info("Deleted %s user(s) by %s", len(users), request.user.username)
        return self.success_response(
            data={'deleted': len(users)},
            message=f'{len(users)} user(s) deleted successfully'
        )


class UserDetailView(UserMixin, ApiView):
    """API: Retrieve, update or delete a user."""

    permissions = {
        'GET': perms.USERS_MANAGE,
        'PUT': perms.USERS_MANAGE,
        'DELETE': perms.USERS_MANAGE,
    }

    def get(self, request, *args, **kwargs):
        return self.success_response(data=serialize_user(self.get_user()))

    def put(self, request, *args, **kwargs):
        user = self.get_user()
        data = self.parse_body(request)

        if 'username' in data:
            username = str(data['username'] or '').strip()
            if not username:
                raise ValidationError('Username cannot be empty')
            if User.objects.filter(username__iexact=username).exclude(pk=user.pk).exists():
                raise Conflict(f'Username "{username}" is already taken')
            user.username = username
        if 'email' in data:
            user.email = self.clean_email(data['email'], exclude_id=user.pk)
        if 'role' in data:
            role = self.clean_role(data['role'])
            if user.pk == request.user.pk and role != user.role:
                raise ValidationError('You cannot change your own role')
            user.role = role
        if 'is_active' in data:
            is_active = self.parse_bool(data['is_active'], 'is_active', True)
            if user.pk == request.user.pk and not is_active:
                raise ValidationError('You cannot deactivate your own account')
            user.is_active = is_active
        if data.get('password'):
            user.set_password(self.clean_password(data['password']))
        for field in USER_TEXT_FIELDS:
            if field in data:
                setattr(user, field, str(data[field] or '').strip())

        user.save()
        return self.success_response(
            data=serialize_user(user),
            message=f'User "{user.username}" updated successfully'
        )

    def delete(self, request, *args, **kwargs):
        user = self.get_user()
        self.check_deletable(user)
        username = user.username
        user.delete()
        logger.info("User %s deleted by %s", username, request.user.username)
        return self.success_response(message=f'User "{username}" deleted successfully')
