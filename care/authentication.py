"""
Token authentication for the Jeevrakshak API.

Kept in its own module so that REST framework can import the
authentication classes named in settings without pulling in any views.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """Legacy ``Authorization: Token <key>`` authentication.

    Inactive accounts are rejected by the parent class; hospitals that
    are still pending approval never receive a token in the first place.
    """

    keyword = 'Token'
