"""
Fixed-scope rate throttles for function based views.

``ScopedRateThrottle`` reads ``throttle_scope`` from the view class, which
``@api_view`` does not expose, so each scope gets its own class here.
"""
from rest_framework.throttling import SimpleRateThrottle


class _FixedScopeThrottle(SimpleRateThrottle):
    def get_cache_key(self, request, view):
        user = getattr(request, 'user', None)
        if user and user.is_authenticated:
            ident = user.pk
        else:
            ident = self.get_ident(request)
        return self.cache_format % {'scope': self.scope, 'ident': ident}


class LoginRateThrottle(_FixedScopeThrottle):
    scope = 'login'


class DispatchRateThrottle(_FixedScopeThrottle):
    scope = 'dispatch'
