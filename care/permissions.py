"""
Role based permission classes.
"""
from rest_framework.permissions import BasePermission

from care.models import User


class IsAdminRole(BasePermission):
    """Administrators (role ``admin``) and Django superusers."""
    message = 'Only admin can perform this action.'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        return getattr(user, "role", None) == User.ROLE_ADMIN or bool(user.is_superuser)


class IsPatientRole(BasePermission):
    """Allow access only to users with the patient role."""
    message = 'Access denied.'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) == User.ROLE_PATIENT)


class IsHospitalRole(BasePermission):
    """Approved hospitals only."""
    message = 'Access denied.'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "is_approved_hospital", False))
