import os

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse

from backoffice.exceptions import ValidationError
from backoffice.models import HotelAgreement
from backoffice.services import AgreementService

pytestmark = pytest.mark.django_db

PDF_BYTES = b'%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\n%%EOF\n'


def pdf(name='contract.pdf'):
    return SimpleUploadedFile(name, PDF_BYTES, content_type='application/pdf')


def stored_files(media_root):
    found = []
    for root, _, files in os.walk(media_root):
        found.extend(os.path.join(root, name) for name in files)
    return found


def upload_url(hotel):
    return reverse('backoffice:hotel_agreement_list', args=[hotel.id])


def test_upload_stores_files_and_metadata(owner_client, hotel, media_root, settings):
    response = owner_client.post(upload_url(hotel), {
        'files': [pdf(), SimpleUploadedFile('terms.txt', b'Net 30', content_type='text/plain')],
    })

    assert response.status_code == 201
    body = response.json()
    assert body['success'] is True
    assert [item['file_name'] for item in body['data']] == ['contract.pdf', 'terms.txt']
    assert body['data'][0]['file_size'] == len(PDF_BYTES)
    assert body['data'][0]['file_path'].startswith(settings.MEDIA_URL + settings.AGREEMENT_UPLOAD_DIR)
    assert len(stored_files(media_root)) == 2
    assert hotel.agreements.count() == 2


def test_disallowed_type_rejects_the_whole_batch(owner_client, hotel, media_root):
    response = owner_client.post(upload_url(hotel), {
        'files': [pdf(), SimpleUploadedFile('photo.png', b'\x89PNG', content_type='image/png')],
    })

    assert response.status_code == 400
    assert response.json()['error'] == 'validation_error'
    assert hotel.agreements.count() == 0
    assert stored_files(media_root) == []


def test_oversized_file_is_rejected(owner_client, hotel, settings, media_root):
    settings.AGREEMENT_MAX_UPLOAD_SIZE = 16
    response = owner_client.post(upload_url(hotel), {'files': [pdf()]})
    assert response.status_code == 400
    assert stored_files(media_root) == []


def test_upload_without_files(owner_client, hotel):
    response = owner_client.post(upload_url(hotel), {})
    assert response.status_code == 400
    assert response.json()['message'] == 'No files uploaded'


def test_failed_row_removes_written_files(hotel, owner, media_root, monkeypatch):
    def fail(**kwargs):
        raise RuntimeError('database unavailable')

    monkeypatch.setattr(HotelAgreement.objects, 'create', fail)
    with pytest.raises(RuntimeError):
        AgreementService(hotel, owner).upload([pdf()])
    assert stored_files(media_root) == []


def test_validate_requires_files(hotel):
    with pytest.raises(ValidationError):
        AgreementService(hotel).validate([])


def test_list_newest_first(staff_client, hotel, owner):
    service = AgreementService(hotel, owner)
    service.upload([pdf('first.pdf')])
    service.upload([pdf('second.pdf')])

    response = staff_client.get(upload_url(hotel))
    assert response.status_code == 200
    names = [item['file_name'] for item in response.json()['data']]
    assert names == ['second.pdf', 'first.pdf']


def test_staff_cannot_upload(staff_client, hotel):
    response = staff_client.post(upload_url(hotel), {'files': [pdf()]})
    assert response.status_code == 403


def test_download_returns_attachment(owner_client, hotel, owner):
    agreement, = AgreementService(hotel, owner).upload([pdf()])
    url = reverse('backoffice:hotel_agreement_download', args=[hotel.id, agreement.id])

    response = owner_client.get(url)

    assert response.status_code == 200
    assert response['Content-Type'] == 'application/pdf'
    assert 'attachment' in response['Content-Disposition']
    assert 'contract.pdf' in response['Content-Disposition']
    assert response['Content-Length'] == str(len(PDF_BYTES))
    assert b''.join(response.streaming_content) == PDF_BYTES


def test_download_missing_file(owner_client, hotel, owner):
    agreement, = AgreementService(hotel, owner).upload([pdf()])
    AgreementService.remove_file(agreement.file.name)

    url = reverse('backoffice:hotel_agreement_download', args=[hotel.id, agreement.id])
    response = owner_client.get(url)
    assert response.status_code == 404
    assert response.json()['message'] == 'File not found on disk'


def test_delete_removes_row_and_file(owner_client, hotel, owner, media_root):
    agreement, = AgreementService(hotel, owner).upload([pdf()])
    url = reverse('backoffice:hotel_agreement_detail', args=[hotel.id, agreement.id])

    response = owner_client.delete(url)

    assert response.status_code == 200
    assert not HotelAgreement.objects.filter(pk=agreement.pk).exists()
    assert stored_files(media_root) == []


def test_agreement_of_another_hotel_is_not_found(owner_client, hotel, other_hotel, owner):
    agreement, = AgreementService(hotel, owner).upload([pdf()])
    url = reverse('backoffice:hotel_agreement_detail', args=[other_hotel.id, agreement.id])
    assert owner_client.delete(url).status_code == 404
