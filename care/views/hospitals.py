from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.models import User
from care.permissions import IsAdminRole
from care.services.accounts import approve_hospital


def _hospital_row(h: User) -> dict:
    return {
        'id': h.id,
        'name': h.name_for_display,
        'email': h.email,
        'location': {'lat': h.latitude, 'lng': h.longitude},
        'proofUrl': h.proof_url,
        'status': h.status,
        'hospitalId': h.hospital_code,
        'registeredAt': h.date_joined.isoformat(),
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def pending_hospitals(request):
    qs = User.objects.filter(role=User.ROLE_HOSPITAL, status=User.STATUS_PENDING).order_by('date_joined', 'id')
    return Response([_hospital_row(h) for h in qs])


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def approve(request, hospital_id):
    """Approve a hospital and email it the hospital code it logs in with."""
    hospital = approve_hospital(request.user, hospital_id)
    return Response({
        'ok': True,
        'message': 'Hospital approved successfully.',
        'hospitalId': hospital.hospital_code,
    })
