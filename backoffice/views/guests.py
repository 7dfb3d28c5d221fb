"""Guest API views."""

from django.db.models import Q

from backoffice import permissions as perms
from backoffice.models import Guest
from backoffice.serializers import serialize_guest
from backoffice.services import GuestService

from .mixins import ApiView


class GuestListView(ApiView):
    """API: List or create guests."""

    permissions = {'GET': perms.GUESTS_VIEW, 'POST': perms.GUESTS_MANAGE}

    def get(self, request, *args, **kwargs):
        guests = Guest.objects.all()
        search = request.GET.get('search', '').strip()
        if search:
            guests = guests.filter(
                Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(email__icontains=search)
                | Q(phone__icontains=search)
                | Q(profile_id__icontains=search)
            )
        if request.GET.get('is_vip') not in (None, ''):
            guests = guests.filter(is_vip=self.parse_bool(request.GET['is_vip'], 'is_vip'))

        page, pagination = self.paginate(request, guests.order_by('last_name', 'first_name', 'id'))
        return self.success_response(
            data=[serialize_guest(guest) for guest in page],
            pagination=pagination
        )

    def post(self, request, *args, **kwargs):
        guest = GuestService().create_guest(self.parse_body(request))
        return self.success_response(
            data=serialize_guest(guest),
            message=f'Guest "{guest.full_name}" created successfully',
            status=201
        )


class GuestDetailView(ApiView):
    """API: Retrieve or update a guest."""

    permissions = {'GET': perms.GUESTS_VIEW, 'PUT': perms.GUESTS_MANAGE}

    def get(self, request, *args, **kwargs):
        guest = GuestService().get_guest(kwargs['guest_id'])
        data = serialize_guest(guest)
        data['booking_count'] = guest.bookings.count()
        return self.success_response(data=data)

    def put(self, request, *args, **kwargs):
        service = GuestService()
        guest = service.update_guest(service.get_guest(kwargs['guest_id']), self.parse_body(request))
        return self.success_response(
            data=serialize_guest(guest),
            message=f'Guest "{guest.full_name}" updated successfully'
        )
