"""
Open dispatch endpoints: SOS and doctor-connect routing.
"""
from unittest import mock

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from care.exceptions import MalformedRequest
from care.models import AuditEvent, DispatchRequest
from care.services.dispatch import SOS_PREFIX, normalize_criticality, parse_location

from .helpers import BrokenChannelLayer, make_hospital


class DispatchAPITests(APITestCase):
    def setUp(self) -> None:
        self.near = make_hospital('near@example.org', 0, 0, name='City Hospital')
        self.far = make_hospital('far@example.org', 10, 10, name='Hill Clinic')

    def test_sos_routes_to_nearest_hospital_with_high_criticality(self):
        r = self.client.post(reverse('sos'), {
            'patientName': 'Asha',
            'reason': 'chest pain',
            'criticality': 'LOW',
            'location': {'lat': 0.1, 'lng': 0.1},
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertTrue(r.data['ok'])
        self.assertEqual(r.data['hospitalName'], 'City Hospital')
        self.assertAlmostEqual(r.data['distanceKm'], 15.72, delta=0.05)

        req = DispatchRequest.objects.get(pk=r.data['requestId'])
        self.assertEqual(req.criticality, DispatchRequest.CRITICALITY_HIGH)
        self.assertEqual(req.request_type, DispatchRequest.TYPE_SOS)
        self.assertEqual(req.reason, f'{SOS_PREFIX}chest pain')
        self.assertEqual(req.hospital, self.near)
        self.assertEqual(req.status, DispatchRequest.STATUS_PENDING)
        self.assertTrue(AuditEvent.objects.filter(action='dispatch_sos', object_id=str(req.id)).exists())

    def test_sos_without_location_is_rejected(self):
        for location in (None, {}, {'lat': 1.0}, {'lat': None, 'lng': 2.0}, {'lat': 'north', 'lng': 2.0}):
            r = self.client.post(reverse('sos'), {'patientName': 'Asha', 'reason': 'x', 'location': location}, format='json')
            self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST, location)
            self.assertEqual(r.data['error']['code'], 'malformed_request')
        r = self.client.post(reverse('sos'), {'patientName': 'Asha', 'reason': 'x'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(DispatchRequest.objects.count(), 0)

    def test_non_finite_coordinates_are_rejected(self):
        for lat in ('inf', '-inf', 'nan', 'Infinity'):
            r = self.client.post(reverse('sos'), {'patientName': 'Asha', 'reason': 'x', 'location': {'lat': lat, 'lng': 0}}, format='json')
            self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST, lat)
            self.assertEqual(r.data['error']['code'], 'malformed_request')
        r = self.client.post(reverse('doctor_request'), {'patientName': 'Ravi', 'reason': 'rash', 'location': {'lat': 1, 'lng': 'nan'}}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(DispatchRequest.objects.count(), 0)

    def test_channel_layer_failure_does_not_fail_dispatch(self):
        with mock.patch('care.services.notify.get_channel_layer', return_value=BrokenChannelLayer()):
            with self.assertLogs('care.services.notify', level='ERROR'):
                with self.captureOnCommitCallbacks(execute=True) as callbacks:
                    r = self.client.post(reverse('sos'), {'patientName': 'Asha', 'reason': 'x', 'location': {'lat': 0, 'lng': 0}}, format='json')
        self.assertEqual(len(callbacks), 1)
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(DispatchRequest.objects.count(), 1)

    def test_zero_coordinates_are_a_valid_location(self):
        r = self.client.post(reverse('sos'), {'patientName': 'Asha', 'reason': 'x', 'location': {'lat': 0, 'lng': 0}}, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['distanceKm'], 0)

    def test_no_operational_hospital(self):
        self.near.delete()
        self.far.delete()
        make_hospital('pending@example.org', 0, 0, approved=False)
        r = self.client.post(reverse('sos'), {'patientName': 'Asha', 'reason': 'x', 'location': {'lat': 0, 'lng': 0}}, format='json')
        self.assertEqual(r.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(r.data['error']['code'], 'service_unavailable')
        self.assertEqual(r.data['error']['message'], 'No operational hospitals found.')
        self.assertEqual(DispatchRequest.objects.count(), 0)

    def test_doctor_request_normalizes_criticality(self):
        cases = [('medium', 'MEDIUM'), ('HIGH', 'HIGH'), ('bogus', 'LOW'), (None, 'LOW')]
        for given, expected in cases:
            body = {'patientName': 'Ravi', 'reason': 'rash', 'location': {'lat': '9.9', 'lng': '9.9'}}
            if given is not None:
                body['criticality'] = given
            r = self.client.post(reverse('doctor_request'), body, format='json')
            self.assertEqual(r.status_code, status.HTTP_201_CREATED, given)
            req = DispatchRequest.objects.get(pk=r.data['requestId'])
            self.assertEqual(req.criticality, expected)
            self.assertEqual(req.request_type, DispatchRequest.TYPE_DOCTOR_CONNECT)
            self.assertEqual(req.hospital, self.far)
            self.assertEqual(req.reason, 'rash')

    def test_doctor_request_without_location_is_rejected(self):
        r = self.client.post(reverse('doctor_request'), {'patientName': 'Ravi', 'reason': 'rash'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['message'], 'Location is required for doctor connection.')


def test_parse_location_accepts_numeric_strings():
    assert parse_location({'lat': '12.5', 'lng': '-3'}) == (12.5, -3.0)


def test_normalize_criticality():
    assert normalize_criticality(' low ') == 'LOW'
    assert normalize_criticality(3) == 'LOW'
    assert normalize_criticality('Medium') == 'MEDIUM'


@pytest.mark.parametrize('value', ['inf', '-inf', 'nan', float('inf')])
def test_parse_location_rejects_non_finite_values(value):
    with pytest.raises(MalformedRequest):
        parse_location({'lat': value, 'lng': 0})
    with pytest.raises(MalformedRequest):
        parse_location({'lat': 0, 'lng': value})
