"""
Resolving queue entries into prescriptions.
"""
import uuid
from datetime import timedelta
from io import StringIO
from unittest import mock

import pytest
from django.core.management import call_command
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from care.exceptions import MalformedRequest, RequestNotFound
from care.models import DispatchRequest, Prescription
from care.services.resolution import flag_stale_prescriptions, resolve_request

from .helpers import BrokenChannelLayer, make_hospital, make_request


class ResolveAPITests(APITestCase):
    def setUp(self) -> None:
        self.hospital = make_hospital('city@example.org', name='City Hospital')
        self.other = make_hospital('other@example.org', 5, 5, name='Other Hospital')
        self.req = make_request(self.hospital, criticality='HIGH', patient_name='Asha')
        self.client.force_authenticate(user=self.hospital)

    def _resolve(self, request_id, body=None):
        return self.client.put(
            reverse('resolve_request', kwargs={'request_id': request_id}),
            body if body is not None else {'prescription': 'Paracetamol 500mg twice daily'},
            format='json',
        )

    def test_resolve_writes_one_prescription_and_removes_request(self):
        r = self._resolve(self.req.id)
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertTrue(r.data['ok'])
        self.assertFalse(DispatchRequest.objects.filter(pk=self.req.id).exists())

        prescription = Prescription.objects.get()
        self.assertEqual(prescription.request_ref, self.req.id)
        self.assertEqual(prescription.patient_name, 'Asha')
        self.assertEqual(prescription.hospital_name, 'City Hospital')
        self.assertEqual(prescription.doctor, Prescription.DEFAULT_DOCTOR)
        self.assertEqual(r.data['prescription']['prescription'], 'Paracetamol 500mg twice daily')

    def test_channel_layer_failure_does_not_fail_resolution(self):
        with mock.patch('care.services.notify.get_channel_layer', return_value=BrokenChannelLayer()):
            with self.assertLogs('care.services.notify', level='ERROR'):
                with self.captureOnCommitCallbacks(execute=True):
                    r = self._resolve(self.req.id)
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertFalse(DispatchRequest.objects.filter(pk=self.req.id).exists())
        self.assertEqual(Prescription.objects.count(), 1)

    def test_resolving_twice_reports_not_found(self):
        self.assertEqual(self._resolve(self.req.id).status_code, status.HTTP_200_OK)
        r = self._resolve(self.req.id)
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(r.data['error']['message'], 'Request not found or already resolved.')
        self.assertEqual(Prescription.objects.count(), 1)

    def test_other_hospital_cannot_resolve(self):
        self.client.force_authenticate(user=self.other)
        r = self._resolve(self.req.id)
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(DispatchRequest.objects.filter(pk=self.req.id).exists())
        self.assertEqual(Prescription.objects.count(), 0)

    def test_malformed_identifier(self):
        for bad in ('not-a-uuid', '123', 'zzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzz'):
            r = self._resolve(bad)
            self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST, bad)
            self.assertEqual(r.data['error']['message'], 'Invalid format for request ID.')
        self.assertEqual(Prescription.objects.count(), 0)

    def test_unknown_identifier(self):
        r = self._resolve(uuid.uuid4())
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    def test_empty_prescription_is_rejected(self):
        r = self._resolve(self.req.id, {'prescription': '   '})
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(DispatchRequest.objects.filter(pk=self.req.id).exists())

    def test_custom_doctor_label(self):
        self._resolve(self.req.id, {'prescription': 'Rest', 'doctor': 'Dr. Mehta'})
        self.assertEqual(Prescription.objects.get().doctor, 'Dr. Mehta')


@pytest.mark.django_db
def test_service_raises_domain_errors():
    hospital = make_hospital('city@example.org')
    with pytest.raises(MalformedRequest):
        resolve_request(hospital=hospital, request_id='nope', prescription_text='x')
    with pytest.raises(RequestNotFound):
        resolve_request(hospital=hospital, request_id=uuid.uuid4(), prescription_text='x')


@pytest.mark.django_db
def test_flag_stale_prescriptions():
    hospital = make_hospital('city@example.org')
    stale = make_request(hospital, minutes_ago=60)
    fresh = make_request(hospital, minutes_ago=1)
    gone = uuid.uuid4()
    for ref in (stale.id, fresh.id, gone):
        Prescription.objects.create(request_ref=ref, patient_name='Asha', hospital=hospital,
                                    hospital_name='City', text='Rest')

    assert flag_stale_prescriptions(timedelta(minutes=15)) == 1
    assert list(Prescription.objects.filter(needs_review=True).values_list('request_ref', flat=True)) == [stale.id]
    # already flagged rows are not counted again
    assert flag_stale_prescriptions(timedelta(minutes=15)) == 0


@pytest.mark.django_db
def test_reconcile_command():
    hospital = make_hospital('city@example.org')
    stale = make_request(hospital, minutes_ago=60)
    Prescription.objects.create(request_ref=stale.id, patient_name='Asha', hospital=hospital,
                                hospital_name='City', text='Rest')
    out = StringIO()
    call_command('reconcile_prescriptions', '--minutes', '30', stdout=out)
    assert 'Flagged 1 prescription(s)' in out.getvalue()
    assert Prescription.objects.get().needs_review
