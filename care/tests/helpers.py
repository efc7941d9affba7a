from datetime import timedelta

from django.utils import timezone

from care.models import DispatchRequest, User

PASSWORD = 'P@ssw0rd1'


def make_hospital(username, lat=0.0, lng=0.0, *, name='', approved=True, code=None, email=None):
    return User.objects.create_user(
        username=username,
        password=PASSWORD,
        email=email or '',
        role=User.ROLE_HOSPITAL,
        display_name=name,
        latitude=lat,
        longitude=lng,
        status=User.STATUS_APPROVED if approved else User.STATUS_PENDING,
        hospital_code=code,
    )


def make_patient(username='patient1'):
    return User.objects.create_user(username=username, password=PASSWORD, role=User.ROLE_PATIENT)


def make_request(hospital, *, criticality='LOW', minutes_ago=0, patient_name='Asha', request_type=DispatchRequest.TYPE_DOCTOR_CONNECT):
    return DispatchRequest.objects.create(
        request_type=request_type,
        patient_name=patient_name,
        reason='fever',
        criticality=criticality,
        latitude=0.0,
        longitude=0.0,
        hospital=hospital,
        hospital_name=hospital.name_for_display,
        created_at=timezone.now() - timedelta(minutes=minutes_ago),
    )


class BrokenChannelLayer:
    """Channel layer whose backend is unreachable."""

    async def group_send(self, group, message):
        raise ConnectionError('channel layer unavailable')
