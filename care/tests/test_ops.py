import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.management import call_command
from django.urls import reverse
from rest_framework.test import APIClient

from care.models import User
from care.services.dispatch import dispatch_emergency
from care.services.notify import queue_group

from .helpers import make_hospital

pytestmark = pytest.mark.django_db


def test_healthz_reports_operational_hospitals():
    make_hospital('a@example.org')
    make_hospital('b@example.org', approved=False)
    r = APIClient().get(reverse('healthz'))
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True, 'operationalHospitals': 1}


def test_dispatch_pushes_queue_event(django_capture_on_commit_callbacks):
    hospital = make_hospital('a@example.org')
    layer = get_channel_layer()
    channel = async_to_sync(layer.new_channel)()
    async_to_sync(layer.group_add)(queue_group(hospital.id), channel)

    with django_capture_on_commit_callbacks(execute=True):
        result = dispatch_emergency(patient_name='Asha', reason='fall', location={'lat': 0, 'lng': 0})

    message = async_to_sync(layer.receive)(channel)
    assert message['type'] == 'queue.request'
    assert message['request']['id'] == str(result.request.id)
    assert message['request']['criticality'] == 'HIGH'
    async_to_sync(layer.group_discard)(queue_group(hospital.id), channel)


def test_seed_demo_is_idempotent():
    call_command('seed_demo')
    call_command('seed_demo')
    assert User.objects.filter(role=User.ROLE_HOSPITAL, status=User.STATUS_APPROVED).count() == 2
    assert User.objects.get(username='patient1').check_password('123456')
