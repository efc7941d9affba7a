from django.contrib.auth.backends import ModelBackend
from django.contrib.auth import get_user_model

User = get_user_model()


class AccountBackend(ModelBackend):
    """
    Password authentication with a fixed lookup order.

    For ``role="hospital"`` the identifier is tried as hospital code, then
    email, then username; the first tier that matches a hospital account is
    the only candidate.  Every other role (or no role) matches username only.
    """

    def _find(self, identifier, role):
        if role == User.ROLE_HOSPITAL:
            hospitals = User.objects.filter(role=User.ROLE_HOSPITAL)
            for field in ('hospital_code', 'email', 'username'):
                user = hospitals.filter(**{field: identifier}).order_by('id').first()
                if user:
                    return user
            return None
        qs = User.objects.filter(username=identifier)
        if role:
            qs = qs.filter(role=role)
        return qs.first()

    def authenticate(self, request, username=None, password=None, role=None, **kwargs):
        if username is None or password is None:
            return None
        user = self._find(username, role)
        if user is None:
            # Run the default password hasher once to reduce timing attack
            User().set_password(password)
            return None
        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
