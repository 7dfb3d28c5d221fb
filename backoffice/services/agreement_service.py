"""
Hotel agreement documents: upload, removal and download.
"""

import logging
import os

from django.conf import settings
from django.core.files.storage import default_storage
from django.db import transaction
from django.http import FileResponse
from django.utils import timezone
from django.utils.text import get_valid_filename

from backoffice.exceptions import NotFound, ValidationError
from backoffice.models import HotelAgreement

logger = logging.getLogger(__name__)


def storage_name(original_name):
    """`<epoch millis>_<sanitized name>` under the agreement upload directory."""
    millis = int(timezone.now().timestamp() * 1000)
    safe_name = get_valid_filename(os.path.basename(original_name)) or 'agreement'
    return os.path.join(settings.AGREEMENT_UPLOAD_DIR, f"{millis}_{safe_name}")


class AgreementService:
    """Store and serve agreement documents for one hotel."""

    def __init__(self, hotel, user=None):
        self.hotel = hotel
        self.user = user

    def validate(self, files):
        """Reject the whole upload if any file breaks the type or size limit."""
        if not files:
            raise ValidationError('No files uploaded')
        allowed = settings.AGREEMENT_ALLOWED_MIME_TYPES
        max_size = settings.AGREEMENT_MAX_UPLOAD_SIZE
        for upload in files:
            if upload.content_type not in allowed:
                raise ValidationError(
                    f'File type {upload.content_type} is not allowed for "{upload.name}". '
                    f'Allowed types: PDF, Word, plain text'
                )
            if upload.size > max_size:
                raise ValidationError(
                    f'File "{upload.name}" exceeds the {max_size // (1024 * 1024)} MB limit'
                )

    def upload(self, files):
        """
        Validate every file, then store each one and record its metadata.

        Files are written before their rows commit; if any row fails,
        everything written by this call is removed again.
        """
        self.validate(files)

        stored_paths = []
        try:
            with transaction.atomic():
                agreements = []
                for upload in files:
                    path = default_storage.save(storage_name(upload.name), upload)
                    stored_paths.append(path)
                    agreements.append(HotelAgreement.objects.create(
                        hotel=self.hotel,
                        file_name=upload.name,
                        file=path,
                        file_size=upload.size,
                        mime_type=upload.content_type,
                        uploaded_by=self.user if self.user and self.user.is_authenticated else None,
                    ))
        except Exception:
            for path in stored_paths:
                self.remove_file(path)
            raise

        logger.info("Uploaded %s agreement(s) for hotel %s", len(agreements), self.hotel.code)
        return agreements

    def get(self, agreement_id):
        try:
            return self.hotel.agreements.get(pk=agreement_id)
        except (HotelAgreement.DoesNotExist, ValueError, TypeError):
            raise NotFound('Agreement not found')

    def delete(self, agreement):
        """Remove the metadata row, then the stored file."""
        path = agreement.file.name
        agreement.delete()
        self.remove_file(path)
        logger.info("Deleted agreement %s for hotel %s", path, self.hotel.code)

    def download(self, agreement):
        path = agreement.file.name
        if not path or not default_storage.exists(path):
            raise NotFound('File not found on disk')
        response = FileResponse(
            default_storage.open(path, 'rb'),
            as_attachment=True,
            filename=agreement.file_name,
            content_type=agreement.mime_type,
        )
        response['Content-Length'] = str(default_storage.size(path))
        return response

    @staticmethod
    def remove_file(path):
        try:
            default_storage.delete(path)
        except OSError:
            logger.warning("Could not remove stored agreement file %s", path, exc_info=True)
