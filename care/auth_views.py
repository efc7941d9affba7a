"""
Account views: registration, login and JWT maintenance.

Login accepts an optional ``role``; for hospitals the identifier may be
the issued hospital code, the registration email or the username (see
``care.backends.AccountBackend`` for the lookup order).
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from care.serializers.auth import HospitalRegisterSerializer, LoginSerializer, PatientRegisterSerializer
from care.services.accounts import register_hospital, register_patient
from care.services.audit import log_action
from care.services.dispatch import parse_location
from care.throttles import LoginRateThrottle

from .models import User

logger = logging.getLogger(__name__)


def _issue_tokens(user: User) -> dict:
    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return {
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
    }


def _error(code: str, message: str, http_status: int) -> Response:
    return Response({'ok': False, 'error': {'code': code, 'message': message}}, status=http_status)


def _optional_location(location, purpose):
    if location in (None, '', {}):
        return None, None
    return parse_location(location, purpose)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AnonRateThrottle, UserRateThrottle, LoginRateThrottle])
def register_patient_view(request):
    s = PatientRegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    lat, lng = _optional_location(vd.get('location'), 'registration')
    user = register_patient(username=vd['username'], password=vd['password'], lat=lat, lng=lng)
    payload = {'ok': True, 'message': 'Patient registered successfully.', 'username': user.username}
    payload.update(_issue_tokens(user))
    return Response(payload, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AnonRateThrottle, UserRateThrottle, LoginRateThrottle])
def register_hospital_view(request):
    """Submit a hospital for verification.  No token is issued until approval."""
    s = HospitalRegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    lat, lng = parse_location(vd['location'], 'hospital registration')
    hospital = register_hospital(
        name=vd['name'], email=vd['email'], password=vd['password'],
        lat=lat, lng=lng, proof_url=vd.get('proofUrl') or '',
    )
    return Response({
        'ok': True,
        'message': 'Hospital registration submitted. Pending verification by admin.',
        'id': hospital.id,
        'status': hospital.status,
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AnonRateThrottle, UserRateThrottle, LoginRateThrottle])
def login_view(request):
    """
    Password login for patients, hospitals and admins.
    Accepts fields:
      - username (hospital code or email also accepted with role=hospital)
      - password
      - role (optional)
      - location (optional, patients only; stored as their latest position)
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    username = vd['username']
    role = vd.get('role')
    ip = request.META.get('REMOTE_ADDR')

    user = authenticate(request, username=username, password=vd['password'], role=role)
    if not user:
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'username': username, 'role': role, 'ip': ip})
        return _error('invalid_credentials', 'Invalid username or password.', status.HTTP_400_BAD_REQUEST)

    if user.is_hospital and not user.is_approved_hospital:
        log_action(user=user, action='login', object_type='user', object_id=user.id,
                   detail={'result': 'pending', 'ip': ip})
        return _error('pending_approval', 'Hospital registration pending admin approval.', status.HTTP_403_FORBIDDEN)

    if user.role == User.ROLE_PATIENT and vd.get('location'):
        user.latitude, user.longitude = parse_location(vd['location'], 'login')
        user.save(update_fields=['latitude', 'longitude'])

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': ip})

    payload: dict[str, object] = {
        'ok': True,
        'message': 'Login successful.',
        'id': user.id,
        'username': user.username,
        'role': user.role,
        'user': {
            'id': user.id,
            'username': user.username,
            'name': user.name_for_display,
            'role': user.role,
        },
    }
    payload.update(_issue_tokens(user))
    if user.hospital_code:
        payload['hospitalId'] = user.hospital_code
    return Response(payload, status=200)


@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token, or every outstanding one of the user."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            token = RefreshToken(refresh)
            token.blacklist()
        except TokenError as e:
            return _error('invalid_token', str(e), status.HTTP_400_BAD_REQUEST)
        count = 1
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    logger.info('User %s logged out, %s refresh token(s) blacklisted', request.user.id, count)
    return Response({'ok': True, 'blacklisted': count})
