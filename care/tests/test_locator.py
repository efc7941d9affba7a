import pytest

from care.models import User
from care.services.locator import approved_hospitals, find_nearest_hospital

from .helpers import make_hospital

pytestmark = pytest.mark.django_db


def test_picks_nearest_hospital():
    near = make_hospital('near@example.org', 0, 0, name='Near')
    make_hospital('far@example.org', 10, 10, name='Far')
    found = find_nearest_hospital(0.1, 0.1)
    assert found.hospital == near
    assert found.distance == pytest.approx(15.72, abs=0.05)


def test_pending_and_unlocated_hospitals_are_ignored():
    make_hospital('pending@example.org', 0, 0, approved=False)
    User.objects.create_user(username='nowhere@example.org', password='x', role=User.ROLE_HOSPITAL,
                             status=User.STATUS_APPROVED)
    far = make_hospital('far@example.org', 10, 10)
    assert find_nearest_hospital(0, 0).hospital == far
    assert list(approved_hospitals()) == [far]


def test_none_when_nothing_qualifies():
    make_hospital('pending@example.org', 0, 0, approved=False)
    assert find_nearest_hospital(0, 0) is None


def test_first_hospital_wins_a_tie():
    first = make_hospital('a@example.org', 1, 0)
    make_hospital('b@example.org', -1, 0)
    assert find_nearest_hospital(0, 0).hospital == first


def test_explicit_candidate_list_skips_unapproved_entries():
    pending = make_hospital('pending@example.org', 0, 0, approved=False)
    approved = make_hospital('ok@example.org', 5, 5)
    assert find_nearest_hospital(0, 0, hospitals=[pending, approved]).hospital == approved
