from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from care.permissions import IsHospitalRole
from care.serializers.patient import StaffCreateSerializer, StaffOutSerializer
from care.services.patients import add_staff, remove_staff, staff_roster


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def staff(request):
    """GET lists the hospital's staff by role then name; POST adds a member."""
    if request.method == 'GET':
        return Response(StaffOutSerializer(staff_roster(request.user), many=True).data)

    s = StaffCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    member = add_staff(
        request.user,
        staff_code=vd['id'],
        name=vd['name'],
        role=vd['role'],
        department=vd['department'],
        contact=vd['contact'],
    )
    return Response({
        'ok': True,
        'message': 'Staff member added successfully.',
        'staff': StaffOutSerializer(member).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsHospitalRole])
def delete_staff(request, staff_id):
    remove_staff(request.user, staff_id)
    return Response({'ok': True, 'message': 'Staff member removed successfully.'})
