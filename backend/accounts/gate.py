"""Declarative route protection.

Each view declares ``access``: either one tag for the whole view or a dict
keyed by viewset action (or lowercase HTTP method for plain API views),
with ``'*'`` as the fallback. Views that declare nothing are admin-only.

    access = {'list': PUBLIC, 'retrieve': PUBLIC, '*': ADMIN}
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet

from django.contrib.auth.models import AnonymousUser
from rest_framework import exceptions, permissions

logger = logging.getLogger(__name__)

ROLES = ('user', 'moderator', 'admin')


@dataclass(frozen=True)
class Access:
    mode: str  # public | optional | roles
    roles: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def requires_principal(self):
        return self.mode == 'roles'


def require(*roles):
    return Access('roles', frozenset(roles))


PUBLIC = Access('public')
OPTIONAL = Access('optional')
ADMIN = require('admin')
STAFF = require('admin', 'moderator')
AUTHENTICATED = require(*ROLES)


def access_for(view, request) -> Access:
    access = getattr(view, 'access', ADMIN)
    if isinstance(access, dict):
        key = getattr(view, 'action', None) or request.method.lower()
        return access.get(key, access.get('*', ADMIN))
    return access


class AccessGate(permissions.BasePermission):
    """Compares the attached principal's role with the route's tag.

    Returning False with no authenticated principal makes DRF answer 401
    (``not_authenticated``); with a principal of the wrong role, 403.
    """

    def has_permission(self, request, view):
        rule = access_for(view, request)
        if not rule.requires_principal:
            return True
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if user.role not in rule.roles:
            self.message = f"User role '{user.role}' is not authorized to access this route"
            return False
        return True


class GatedViewMixin:
    """Skips or softens authentication according to the route's tag."""

    access = ADMIN
    permission_classes = [AccessGate]

    def perform_authentication(self, request):
        rule = access_for(self, request)
        if rule.mode == PUBLIC.mode:
            request.user = AnonymousUser()
            request.auth = None
            return
        try:
            request.user
        except exceptions.AuthenticationFailed as e:
            if rule.mode != OPTIONAL.mode:
                raise
            # DRF has already reset the request to anonymous
            logger.debug('optional auth ignored bad credentials: %s', e.get_codes())
