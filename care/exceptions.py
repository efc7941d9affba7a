import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class MalformedRequest(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Malformed request.'
    default_code = 'malformed_request'


class NoOperationalHospital(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'No operational hospitals found.'
    default_code = 'service_unavailable'


class AccountExists(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Account already exists.'
    default_code = 'conflict'


class RequestNotFound(APIException):
    """Raised for missing requests and for requests owned by another hospital alike."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Request not found or already resolved.'
    default_code = 'not_found'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('Unhandled error in %s', context.get('view'))
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    code = getattr(exc, 'default_code', None) if isinstance(exc, APIException) else None
    out = Response({'ok': False, 'error': {'code': code or 'api_error', 'message': detail}}, status=resp.status_code)
    for header in ('WWW-Authenticate', 'Retry-After'):
        if header in resp:
            out[header] = resp[header]
    return out
