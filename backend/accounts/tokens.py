"""Bearer token issue/verify on top of PyJWT.

Tokens carry the user id and role; validity is purely the signature plus
``exp``. There is no refresh token and no revocation list.
"""

from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings


def _conf():
    return settings.PORTFOLIO_AUTH


def issue_token(user) -> str:
    conf = _conf()
    now = datetime.now(timezone.utc)
    payload = {
        'id': user.pk,
        'role': user.role,
        'iat': now,
        'exp': now + timedelta(seconds=conf['JWT_EXPIRES_IN']),
    }
    return jwt.encode(payload, conf['JWT_SECRET'], algorithm=conf['JWT_ALGORITHM'])


def decode_token(token: str) -> dict:
    """Raises jwt.ExpiredSignatureError or another jwt.InvalidTokenError."""
    conf = _conf()
    return jwt.decode(
        token,
        conf['JWT_SECRET'],
        algorithms=[conf['JWT_ALGORITHM']],
        options={'require': ['exp', 'id']},
    )
