"""
API base view: authentication, role capabilities, JSON envelope and
input parsing shared by every endpoint.
"""

import json
import logging

from django.conf import settings
from django.core.paginator import Paginator
from django.http import Http404, JsonResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from django.views.generic import View

from backoffice import parsing
from backoffice.exceptions import (
    AuthenticationRequired, BackofficeError, Forbidden, Internal, ValidationError,
)
from backoffice.permissions import has_capability

logger = logging.getLogger(__name__)


class BackofficeApiMixin:
    """Response and parsing helpers for JSON endpoints."""

    def json_response(self, data, status=200):
        """Return JSON response."""
        return JsonResponse(data, status=status)

    def error_response(self, message, status=400, code=None, details=None):
        """Return error JSON response."""
        response = {'success': False, 'error': code or 'error', 'message': message}
        if details:
            response['details'] = details
        return JsonResponse(response, status=status)

    def success_response(self, data=None, message=None, status=200, pagination=None):
        """Return success JSON response."""
        response = {'success': True}
        if message:
            response['message'] = message
        if data is not None:
            response['data'] = data
        if pagination is not None:
            response['pagination'] = pagination
        return JsonResponse(response, status=status)

    def parse_body(self, request):
        """Decode a JSON object body."""
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationError('Invalid JSON')
        if not isinstance(data, dict):
            raise ValidationError('Request body must be a JSON object')
        return data

    def parse_decimal(self, value, field, default=None, max_digits=parsing.MONEY_MAX_DIGITS):
        return parsing.parse_decimal(value, field, default, max_digits)

    def parse_int(self, value, field, default=None):
        return parsing.parse_int(value, field, default)

    def parse_date(self, value, field, default=None):
        return parsing.parse_date(value, field, default)

    def parse_bool(self, value, field, default=False):
        return parsing.parse_bool(value, field, default)

    def paginate(self, request, queryset):
        """
        Slice a queryset by ?page and ?limit.

        Returns (page_objects, pagination dict).
        """
        page_number = max(self.parse_int(request.GET.get('page'), 'page', 1), 1)
        limit = self.parse_int(request.GET.get('limit'), 'limit', settings.API_DEFAULT_PAGE_SIZE)
        limit = min(max(limit, 1), settings.API_MAX_PAGE_SIZE)

        paginator = Paginator(queryset, limit)
        page = paginator.get_page(page_number)
        return page.object_list, {
            'page': page.number,
            'limit': limit,
            'total': paginator.count,
            'total_pages': paginator.num_pages if paginator.count else 0,
        }


@method_decorator(csrf_exempt, name='dispatch')
class ApiView(BackofficeApiMixin, View):
    """
    Base class for API endpoints.

    `permissions` maps HTTP methods to the capability they need.
    Errors raised from handlers become JSON envelopes; anything
    unexpected is logged and answered with a 500.
    """

    login_required = True
    permissions = {}

    def dispatch(self, request, *args, **kwargs):
        try:
            if self.login_required:
                self.check_permissions(request)
            return super().dispatch(request, *args, **kwargs)
        except BackofficeError as exc:
            if exc.status_code >= 500:
                logger.error("%s %s failed: %s", request.method, request.path, exc.message)
            return self.error_response(exc.message, exc.status_code, code=exc.code, details=exc.details)
        except Http404 as exc:
            return self.error_response(str(exc) or 'Not found', 404, code='not_found')
        except Exception:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            exc = Internal()
            return self.error_response(exc.message, exc.status_code, code=exc.code)

    def check_permissions(self, request):
        user = request.user
        if not user.is_authenticated:
            raise AuthenticationRequired()
        if not user.is_active:
            raise Forbidden('Account is deactivated')
        capability = self.permissions.get(request.method)
        if capability:
            self.require(capability)

    def require(self, capability):
        if not has_capability(self.request.user, capability):
            raise Forbidden()
