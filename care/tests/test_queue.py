import pytest
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from care.services.queue import pending_queue, queue_sort_key, sort_queue

from .helpers import make_hospital, make_patient, make_request

pytestmark = pytest.mark.django_db


def _seed(hospital):
    return {
        'low_old': make_request(hospital, criticality='LOW', minutes_ago=30),
        'high_new': make_request(hospital, criticality='HIGH', minutes_ago=1),
        'medium': make_request(hospital, criticality='MEDIUM', minutes_ago=10),
        'high_old': make_request(hospital, criticality='HIGH', minutes_ago=20),
        'unknown': make_request(hospital, criticality='URGENT', minutes_ago=60),
    }


def test_queue_orders_by_criticality_then_age():
    h = make_hospital('h@example.org')
    r = _seed(h)
    expected = [r['high_old'], r['high_new'], r['medium'], r['low_old'], r['unknown']]
    assert pending_queue(h, native=True) == expected
    assert pending_queue(h, native=False) == expected


def test_same_criticality_and_timestamp_falls_back_to_id():
    h = make_hospital('h@example.org')
    a = make_request(h, criticality='HIGH')
    b = make_request(h, criticality='HIGH')
    b.created_at = a.created_at
    b.save(update_fields=['created_at'])
    assert pending_queue(h, native=False) == sort_queue([a, b])
    assert [x.id for x in pending_queue(h, native=True)] == [x.id for x in pending_queue(h, native=False)]
    assert queue_sort_key(a) != queue_sort_key(b)


def test_queue_is_scoped_to_hospital():
    h1 = make_hospital('h1@example.org')
    h2 = make_hospital('h2@example.org', 5, 5)
    mine = make_request(h1)
    make_request(h2)
    assert pending_queue(h1) == [mine]


@pytest.mark.parametrize('native', [True, False])
def test_queue_endpoint(native):
    h1 = make_hospital('h1@example.org')
    h2 = make_hospital('h2@example.org', 5, 5)
    r = _seed(h1)
    make_request(h2, criticality='HIGH')
    client = APIClient()
    client.force_authenticate(user=h1)
    with override_settings(DISPATCH_QUEUE_NATIVE_SORT=native):
        resp = client.get(reverse('doctor_requests'))
    assert resp.status_code == status.HTTP_200_OK
    assert [item['id'] for item in resp.data] == [
        str(r[k].id) for k in ('high_old', 'high_new', 'medium', 'low_old', 'unknown')
    ]
    first = resp.data[0]
    assert first['hospitalId'] == h1.id
    assert first['location'] == {'lat': 0.0, 'lng': 0.0}
    assert first['status'] == 'PENDING'


def test_queue_endpoint_requires_approved_hospital():
    client = APIClient()
    assert client.get(reverse('doctor_requests')).status_code in (401, 403)

    client.force_authenticate(user=make_patient())
    assert client.get(reverse('doctor_requests')).status_code == 403

    client.force_authenticate(user=make_hospital('pending@example.org', approved=False))
    assert client.get(reverse('doctor_requests')).status_code == 403
