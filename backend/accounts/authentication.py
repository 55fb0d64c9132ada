import logging

import jwt
from django.contrib.auth import get_user_model
from rest_framework import authentication, exceptions

from .tokens import decode_token

logger = logging.getLogger(__name__)

INVALID_TOKEN = 'Invalid token. Please login again.'
EXPIRED_TOKEN = 'Token expired. Please login again.'


class JWTAuthentication(authentication.BaseAuthentication):
    """``Authorization: Bearer <token>``.

    A vanished or deactivated account is reported exactly like a garbage
    token so callers cannot tell the two apart.
    """

    keyword = 'Bearer'

    def authenticate(self, request):
        parts = authentication.get_authorization_header(request).split()
        if not parts or parts[0].lower() != self.keyword.lower().encode():
            return None
        if len(parts) != 2:
            raise exceptions.AuthenticationFailed(INVALID_TOKEN, code='token_invalid')
        try:
            token = parts[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed(INVALID_TOKEN, code='token_invalid')
        return self.authenticate_credentials(token)

    def authenticate_credentials(self, token):
        try:
            payload = decode_token(token)
        except jwt.ExpiredSignatureError:
            logger.debug('rejected expired token')
            raise exceptions.AuthenticationFailed(EXPIRED_TOKEN, code='token_expired')
        except jwt.InvalidTokenError as e:
            logger.debug('rejected invalid token: %s', e)
            raise exceptions.AuthenticationFailed(INVALID_TOKEN, code='token_invalid')

        try:
            user = get_user_model().objects.filter(pk=payload['id'], is_active=True).first()
        except (TypeError, ValueError):
            user = None
        if user is None:
            logger.debug('token for missing user id=%r', payload.get('id'))
            raise exceptions.AuthenticationFailed(INVALID_TOKEN, code='token_invalid')
        return (user, payload)

    def authenticate_header(self, request):
        return self.keyword
